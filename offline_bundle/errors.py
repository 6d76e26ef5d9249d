"""Exception hierarchy for offline-bundle.

Provides a structured exception tree so callers can catch broad
categories (``BundleError``) or specific failure modes.

This module is a base-layer module: it must NOT import from any
other ``offline_bundle`` submodule.
"""

from __future__ import annotations


class BundleError(Exception):
    """Base exception for all offline-bundle errors."""


class ConfigurationError(BundleError):
    """Repository or settings are not usable (e.g. no remote configured)."""


class ProcessError(BundleError):
    """A pipeline process did not finish successfully."""

    def __init__(self, program: str, message: str) -> None:
        super().__init__(message)
        self.program = program


class ProcessExitError(ProcessError):
    """A process exited normally with a non-zero status code."""

    def __init__(self, program: str, returncode: int) -> None:
        super().__init__(program, f"{program} exited with code {returncode}")
        self.returncode = returncode


class ProcessSignalError(ProcessError):
    """A process was terminated by a signal."""

    def __init__(self, program: str, signal_name: str) -> None:
        super().__init__(program, f"{program} was killed with signal {signal_name}")
        self.signal_name = signal_name
