"""Process pipeline coordination.

Runs three external programs as one pipeline::

    lister --(os pipe)--> producer --(pump + HeaderPatcher)--> encryptor

The lister feeds the producer directly through an OS pipe. The producer's
output is pumped through a ``HeaderPatcher`` into the encryptor's stdin.
Completion is reported only after the pump and every spawned process have
settled; the first failure observed is the one raised.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import signal
from asyncio.subprocess import Process
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple

from offline_bundle.errors import ProcessError, ProcessExitError, ProcessSignalError
from offline_bundle.patcher import HeaderPatcher, pump

logger = logging.getLogger(__name__)


def program_name(cmd: Sequence[str]) -> str:
    """Name used for a command in error messages (basename of argv[0])."""
    return os.path.basename(cmd[0])


def _signal_name(signum: int) -> str:
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


async def wait_for_process(proc: Process, program: str) -> None:
    """Wait for *proc* to exit and turn a failed exit into an exception.

    Raises:
        ProcessExitError: The process exited with a non-zero status.
        ProcessSignalError: The process was terminated by a signal.
    """
    returncode = await proc.wait()
    if returncode < 0:
        raise ProcessSignalError(program, _signal_name(-returncode))
    if returncode != 0:
        raise ProcessExitError(program, returncode)
    logger.debug("%s (pid %d) exited successfully", program, proc.pid)


def _first_failure(failures: List[BaseException]) -> BaseException:
    # A broken pipe on the pump leg only echoes a downstream exit.
    for exc in failures:
        if isinstance(exc, ProcessError):
            return exc
    return failures[0]


async def join_all(
    awaitables: Sequence[Awaitable[Any]],
    *,
    on_failure: Optional[Callable[[BaseException], None]] = None,
) -> List[Any]:
    """Await every awaitable, even after one of them fails.

    Args:
        awaitables: Coroutines or futures to run concurrently.
        on_failure: Called once, with the first failure as soon as it is
            observed, while the others are still running.

    Returns:
        Results in the order of *awaitables*.

    Raises:
        BaseException: The first observed failure, preferring process
            failures over pipe errors, once everything has settled.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    order = {task: index for index, task in enumerate(tasks)}
    failures: List[BaseException] = []
    pending = set(tasks)

    while pending:
        done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
        for task in sorted(done, key=order.__getitem__):
            exc = asyncio.CancelledError() if task.cancelled() else task.exception()
            if exc is None:
                continue
            if not failures and on_failure is not None:
                on_failure(exc)
            failures.append(exc)

    if failures:
        raise _first_failure(failures)
    return [task.result() for task in tasks]


async def _spawn(cmd: Sequence[str], **kwargs: Any) -> Process:
    logger.debug("spawning: %s", " ".join(cmd))
    return await asyncio.create_subprocess_exec(*cmd, **kwargs)


async def _abandon(procs: List[Tuple[Process, str]]) -> None:
    """Terminate and reap processes whose pipeline could not be completed."""
    for proc, _program in procs:
        if proc.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                proc.terminate()
    for proc, _program in procs:
        await proc.wait()


async def run_pipeline(
    lister_cmd: Sequence[str],
    producer_cmd: Sequence[str],
    encryptor_cmd: Sequence[str],
    *,
    kill_on_failure: bool = False,
    chunk_size: Optional[int] = None,
) -> int:
    """Run lister | producer | patch | encryptor and wait for all of it.

    Args:
        lister_cmd: Command printing names on stdout (reads nothing).
        producer_cmd: Command reading the lister's output and writing the
            stream to patch.
        encryptor_cmd: Command consuming the patched stream on stdin.
        kill_on_failure: Terminate every still-running process as soon as
            one leg fails. By default the others are left to finish.
        chunk_size: Read size for the pump.

    Returns:
        Number of bytes delivered to the encryptor.

    Raises:
        OSError: A command could not be started. Processes started before
            it are terminated and reaped first.
        ProcessError: A process exited non-zero or was killed.
    """
    procs: List[Tuple[Process, str]] = []
    read_fd, write_fd = os.pipe()
    try:
        lister = await _spawn(
            lister_cmd, stdin=asyncio.subprocess.DEVNULL, stdout=write_fd,
        )
        procs.append((lister, program_name(lister_cmd)))
        producer = await _spawn(
            producer_cmd, stdin=read_fd, stdout=asyncio.subprocess.PIPE,
        )
        procs.append((producer, program_name(producer_cmd)))
        os.close(read_fd)
        os.close(write_fd)
        read_fd = write_fd = -1
        encryptor = await _spawn(
            encryptor_cmd,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.DEVNULL,
        )
        procs.append((encryptor, program_name(encryptor_cmd)))
    except OSError:
        await _abandon(procs)
        raise
    finally:
        # Parent copies must go so EOF and SIGPIPE reach the children.
        for fd in (read_fd, write_fd):
            if fd >= 0:
                os.close(fd)

    if producer.stdout is None or encryptor.stdin is None:
        await _abandon(procs)
        raise RuntimeError("producer stdout and encryptor stdin must be pipes")

    def _on_failure(exc: BaseException) -> None:
        logger.debug("pipeline leg failed: %s", exc)
        if not kill_on_failure:
            return
        for proc, program in procs:
            if proc.returncode is None:
                logger.debug("terminating %s (pid %d)", program, proc.pid)
                with contextlib.suppress(ProcessLookupError):
                    proc.terminate()

    results = await join_all(
        [
            pump(producer.stdout, encryptor.stdin, HeaderPatcher(), chunk_size=chunk_size),
            *(wait_for_process(proc, program) for proc, program in procs),
        ],
        on_failure=_on_failure,
    )
    return results[0]
