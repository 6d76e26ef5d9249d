"""Git queries used before the export pipeline starts.

Resolves which remote to export and where the receiving side should clone
from. Both queries run to completion before any pipeline process exists, so
a repository without remotes fails without leaving anything behind.
"""

from __future__ import annotations

import asyncio
import re
from typing import List, Optional

from offline_bundle.constants import get_git_binary
from offline_bundle.errors import ConfigurationError
from offline_bundle.models import RemoteInfo
from offline_bundle.pipeline import program_name, wait_for_process


async def git_output(*args: str) -> str:
    """Run a git command and return its decoded stdout.

    Stderr is inherited so git's own diagnostics reach the user.

    Raises:
        OSError: git could not be started.
        ProcessError: git exited non-zero or was killed.
    """
    cmd = [get_git_binary(), *args]
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
    )
    stdout, _ = await proc.communicate()
    await wait_for_process(proc, program_name(cmd))
    return stdout.decode("utf-8", errors="replace")


async def list_remotes() -> List[str]:
    """Names of the configured remotes, in ``git remote`` order."""
    output = await git_output("remote")
    return [name for name in re.split(r"[\r\n]", output) if name]


async def get_remote_url(name: str) -> str:
    """Fetch URL of remote *name*."""
    return (await git_output("remote", "get-url", name)).strip()


async def get_remote_info(name: Optional[str] = None) -> RemoteInfo:
    """Resolve the remote to export.

    Args:
        name: Remote to use. Defaults to the first configured remote.

    Raises:
        ConfigurationError: No remote is configured, or *name* is not one
            of them.
    """
    remotes = await list_remotes()
    if not remotes:
        raise ConfigurationError("This repository doesn't have any remotes configured")

    if name is None:
        name = remotes[0]
    elif name not in remotes:
        raise ConfigurationError(
            f"Remote '{name}' is not configured (available: {', '.join(remotes)})"
        )

    return RemoteInfo(name=name, url=await get_remote_url(name))
