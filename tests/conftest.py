"""
Top-level pytest conftest.py -- shared fixtures.

Provides:
    has_git / has_zip - session-scoped checks for required executables
    requires_git      - skip when git is not installed
    local_repo        - temporary directory with a deterministic git repo
    python_cmd        - build a command running an inline Python script
"""

import os
import shutil
import subprocess
import sys

import pytest

GIT_ENV = {
    "GIT_AUTHOR_NAME": "Test User",
    "GIT_AUTHOR_EMAIL": "test@example.com",
    "GIT_COMMITTER_NAME": "Test User",
    "GIT_COMMITTER_EMAIL": "test@example.com",
}


@pytest.fixture(scope="session")
def has_git():
    """Whether the ``git`` command is on PATH."""
    return shutil.which("git") is not None


@pytest.fixture(scope="session")
def has_zip():
    """Whether both ``zip`` and ``unzip`` are on PATH."""
    return shutil.which("zip") is not None and shutil.which("unzip") is not None


@pytest.fixture
def requires_git(has_git):
    """Skip the test when git is not installed."""
    if not has_git:
        pytest.skip("git is not available")


@pytest.fixture
def git_run(monkeypatch):
    """Return a callable running git with a deterministic identity."""
    for key, value in GIT_ENV.items():
        monkeypatch.setenv(key, value)

    def _run(cwd, *args):
        return subprocess.run(
            ["git", *args], cwd=str(cwd), check=True, capture_output=True, text=True,
        )

    return _run


@pytest.fixture
def local_repo(tmp_path, requires_git, git_run):
    """Create a temporary directory containing a deterministic git repo.

    The repo has ``main`` as its default branch, a single ``README.md``,
    and one initial commit.  Yields the ``pathlib.Path`` to the repo root.
    """
    repo = tmp_path / "repo"
    repo.mkdir()

    git_run(repo, "init", "-b", "main")
    (repo / "README.md").write_text("# Test Repository\n")
    git_run(repo, "add", "README.md")
    git_run(repo, "commit", "-m", "Initial commit")

    yield repo


def _arg(value):
    """Render one argv entry: paths via fspath, everything else via str."""
    if isinstance(value, os.PathLike):
        return os.fsdecode(os.fspath(value))
    return str(value)


@pytest.fixture
def python_cmd():
    """Return a callable building ``[python, -c, script, *args]``.

    Real processes stand in for git and zip in pipeline tests.
    """

    def _cmd(script, *args):
        return [sys.executable, "-c", script, *[_arg(a) for a in args]]

    return _cmd
