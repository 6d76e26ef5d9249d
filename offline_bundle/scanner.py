"""Blank-line boundary detection over a chunked byte stream.

The boundary is the first LF byte that completes a run of two LF bytes.
CR bytes are transparent inside a run, so ``\\r\\n\\r\\n`` ends a header the
same way ``\\n\\n`` does. Any other byte resets the run.
"""

from __future__ import annotations

from typing import Optional

LF = 0x0A
CR = 0x0D


class BoundaryScanner:
    """Find the header/body boundary one chunk at a time.

    The run counter lives on the instance and carries over between
    ``scan`` calls, so a terminator pair split across two chunks is still
    detected. A spurious blank line inside a damaged header is treated as
    the boundary like any other.
    """

    def __init__(self) -> None:
        self._newlines = 0
        self.found = False

    def scan(self, chunk: bytes) -> Optional[int]:
        """Scan *chunk*, resuming from the previous call's state.

        Returns:
            ``None`` if the whole chunk was consumed without finding the
            boundary, else the offset of the LF that terminates it.

        Raises:
            RuntimeError: If called again after the boundary was reported.
        """
        if self.found:
            raise RuntimeError("boundary already found; scanner is exhausted")

        newlines = self._newlines
        for offset, byte in enumerate(chunk):
            if byte == LF:
                newlines += 1
                if newlines == 2:
                    self._newlines = newlines
                    self.found = True
                    return offset
            elif byte != CR:
                newlines = 0

        self._newlines = newlines
        return None
