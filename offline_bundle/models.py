from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class RemoteInfo(BaseModel):
    """The remote whose tracking refs are exported."""

    name: str = Field(min_length=1)
    """Remote name (e.g. ``origin``)."""

    url: str
    """Fetch URL, used by the receiving side to clone."""


class ExportResult(BaseModel):
    """Outcome of a successful export, used to print the instructions."""

    output: Path
    """Path of the encrypted archive."""

    password: str
    """Archive password."""

    remote: RemoteInfo

    bytes_written: int = 0
    """Bytes delivered to the archiver after patching."""
