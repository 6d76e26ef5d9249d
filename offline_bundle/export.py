"""Export a remote's tracking refs as an encrypted git bundle.

The bundle is created from ``refs/remotes/<remote>/*``, its header is
rewritten so those refs become ``refs/heads/*``, and the result is stored
in a password-protected zip. Cloning from the bundle on the other side
then yields the same branches the remote had.
"""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import List, Optional, Tuple

from offline_bundle.constants import (
    REMOTE_REFS_PREFIX,
    get_git_binary,
    get_password_bytes,
    get_zip_binary,
)
from offline_bundle.git import get_remote_info
from offline_bundle.models import ExportResult
from offline_bundle.pipeline import run_pipeline
from offline_bundle.utils import log_debug, log_section, log_warn


def generate_password(nbytes: Optional[int] = None) -> str:
    """Random URL-safe archive password (``nbytes`` random bytes, base64url)."""
    return secrets.token_urlsafe(nbytes if nbytes is not None else get_password_bytes())


def build_commands(
    remote_name: str,
    output: str | Path,
    password: str,
) -> Tuple[List[str], List[str], List[str]]:
    """Commands for the lister, bundle producer and archive encryptor."""
    git = get_git_binary()
    lister = [git, "for-each-ref", "--format=%(refname)", f"{REMOTE_REFS_PREFIX}{remote_name}"]
    producer = [git, "bundle", "create", "-", "--stdin", "--no-quiet"]
    encryptor = [
        get_zip_binary(), "-0", "--encrypt", "--password", password, str(output), "-",
    ]
    return lister, producer, encryptor


async def export_bundle(
    output: str | Path,
    *,
    remote_name: Optional[str] = None,
    password: Optional[str] = None,
    kill_on_failure: bool = False,
) -> ExportResult:
    """Write the encrypted bundle of *remote_name* (or the first remote) to *output*.

    The remote is resolved before anything is spawned; a repository without
    remotes fails with ``ConfigurationError`` and no output file.
    """
    remote = await get_remote_info(remote_name)
    log_section(f"Using remote {remote.name}")

    output_path = Path(output)
    if output_path.exists():
        log_warn(f"{output_path} already exists; zip will add the bundle to it")

    if password is None:
        password = generate_password()

    lister, producer, encryptor = build_commands(remote.name, output_path, password)
    log_debug(f"Pipeline: {' '.join(lister)} | {' '.join(producer)} | <patch> | {encryptor[0]}")

    written = await run_pipeline(
        lister, producer, encryptor, kill_on_failure=kill_on_failure,
    )
    return ExportResult(
        output=output_path, password=password, remote=remote, bytes_written=written,
    )


def format_instructions(result: ExportResult) -> List[Tuple[str, str]]:
    """(heading, detail) pairs telling the user how to clone from the archive elsewhere."""
    name = os.path.basename(result.output)
    return [
        ("Done! The file is:", str(result.output)),
        (
            "On the receiving side, run:",
            f"unzip -P {result.password} -p {{PATH-TO-{name}}}"
            f" | git clone {result.remote.url} --bundle-uri /dev/stdin",
        ),
    ]
