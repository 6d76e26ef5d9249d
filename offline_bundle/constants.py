"""Configuration defaults for offline-bundle.

Every value can be overridden through an ``OFFLINE_BUNDLE_*`` environment
variable. Getters are read on each call so tests can patch the environment.
"""

from __future__ import annotations

import os


def _env_int(key: str, default: int) -> int:
    """Read an integer from an environment variable, returning default on parse failure."""
    try:
        return int(os.environ.get(key, str(default)))
    except (ValueError, TypeError):
        return default


def _env_flag(key: str) -> bool:
    """Return True when the environment variable is set to ``1``."""
    return os.environ.get(key) == "1"


# ============================================================================
# Ref Namespaces
# ============================================================================

REMOTE_REFS_PREFIX = "refs/remotes/"
LOCAL_REFS_PREFIX = "refs/heads"


# ============================================================================
# Executables
# ============================================================================


def get_git_binary() -> str:
    """Git executable used for every git invocation."""
    return os.environ.get("OFFLINE_BUNDLE_GIT", "git")


def get_zip_binary() -> str:
    """Zip executable used to encrypt the bundle."""
    return os.environ.get("OFFLINE_BUNDLE_ZIP", "zip")


# ============================================================================
# Streaming & Security
# ============================================================================

DEFAULT_CHUNK_SIZE = 65536
DEFAULT_PASSWORD_BYTES = 12


def get_chunk_size() -> int:
    """Maximum number of bytes read from the bundle stream at once.

    Non-positive values fall back to the default.
    """
    size = _env_int("OFFLINE_BUNDLE_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)
    return size if size > 0 else DEFAULT_CHUNK_SIZE


def get_password_bytes() -> int:
    """Number of random bytes behind the archive password."""
    count = _env_int("OFFLINE_BUNDLE_PASSWORD_BYTES", DEFAULT_PASSWORD_BYTES)
    return count if count > 0 else DEFAULT_PASSWORD_BYTES


# ============================================================================
# Behaviour Flags
# ============================================================================


def get_kill_on_failure() -> bool:
    """Whether sibling processes are terminated after the first failure."""
    return _env_flag("OFFLINE_BUNDLE_KILL_ON_FAILURE")


def get_debug() -> bool:
    """Whether debug log lines are printed."""
    return _env_flag("OFFLINE_BUNDLE_DEBUG")
