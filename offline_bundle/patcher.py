"""Streaming header patcher for git bundles.

``HeaderPatcher`` buffers the leading text block of a stream until the
first blank line, rewrites it once with ``rewrite_header``, and then passes
every following byte through untouched. Only the header is ever held in
memory.

``pump`` drives a patcher between an asyncio ``StreamReader`` and
``StreamWriter``, awaiting ``drain()`` after each write so a slow consumer
throttles the producer instead of growing a buffer.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Iterator, List, Optional

from offline_bundle.constants import get_chunk_size
from offline_bundle.rewrite import rewrite_header
from offline_bundle.scanner import BoundaryScanner

logger = logging.getLogger(__name__)

BUFFERING = "buffering"
PASS_THROUGH = "pass-through"

# Downstream failures after which upstream is drained instead of abandoned.
_BROKEN_PIPE_ERRORS = (BrokenPipeError, ConnectionResetError)


class HeaderPatcher:
    """Two-state stream transform: buffer and rewrite the header, then pass through."""

    def __init__(self) -> None:
        self.state = BUFFERING
        self._scanner = BoundaryScanner()
        self._head: List[bytes] = []
        self.header_size = 0

    def feed(self, chunk: bytes) -> List[bytes]:
        """Consume one chunk and return the pieces to emit downstream, in order."""
        if self.state == PASS_THROUGH:
            return [chunk] if chunk else []

        offset = self._scanner.scan(chunk)
        if offset is None:
            self._head.append(chunk)
            return []

        self._head.append(chunk[: offset + 1])
        out = [self._release_head()]
        tail = chunk[offset + 1:]
        if tail:
            out.append(tail)
        return out

    def finish(self) -> List[bytes]:
        """Signal end of stream.

        A stream without a blank line is all header: whatever was buffered
        is rewritten and returned here.
        """
        if self.state == PASS_THROUGH:
            return []
        logger.debug("stream ended before a header boundary; treating it all as header")
        head = self._release_head()
        return [head] if head else []

    def _release_head(self) -> bytes:
        header = b"".join(self._head)
        self._head = []
        self.state = PASS_THROUGH
        self.header_size = len(header)
        patched = rewrite_header(header)
        logger.debug("rewrote %d header bytes into %d", len(header), len(patched))
        return patched


def patch_chunks(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Synchronously patch an iterable of chunks, yielding the output pieces."""
    patcher = HeaderPatcher()
    for chunk in chunks:
        yield from patcher.feed(chunk)
    yield from patcher.finish()


async def _discard(reader: asyncio.StreamReader, chunk_size: int) -> int:
    discarded = 0
    while True:
        chunk = await reader.read(chunk_size)
        if not chunk:
            return discarded
        discarded += len(chunk)


async def pump(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter,
    patcher: Optional[HeaderPatcher] = None,
    *,
    chunk_size: Optional[int] = None,
) -> int:
    """Copy *reader* to *writer* through *patcher* until EOF.

    The writer is closed once everything has been written. If the
    downstream side goes away mid-stream, the rest of the upstream is read
    and discarded so the producing process can finish, and the original
    error is re-raised.

    Args:
        reader: Upstream stream (e.g. ``git bundle`` stdout).
        writer: Downstream stream (e.g. ``zip`` stdin).
        patcher: Transform to apply; a fresh ``HeaderPatcher`` by default.
        chunk_size: Maximum bytes per read; defaults to ``get_chunk_size()``.

    Returns:
        Number of bytes written downstream.
    """
    if patcher is None:
        patcher = HeaderPatcher()
    if chunk_size is None:
        chunk_size = get_chunk_size()

    written = 0
    try:
        while True:
            chunk = await reader.read(chunk_size)
            if not chunk:
                break
            for piece in patcher.feed(chunk):
                writer.write(piece)
                await writer.drain()
                written += len(piece)

        for piece in patcher.finish():
            writer.write(piece)
            await writer.drain()
            written += len(piece)

        writer.close()
        await writer.wait_closed()
    except _BROKEN_PIPE_ERRORS:
        writer.close()
        discarded = await _discard(reader, chunk_size)
        logger.debug("downstream closed early; discarded %d upstream bytes", discarded)
        raise
    except BaseException:
        # Downstream must still see EOF or its process never exits.
        writer.close()
        raise

    logger.debug("pumped %d bytes (header %d bytes)", written, patcher.header_size)
    return written
