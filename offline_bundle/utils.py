"""Logging utilities for offline-bundle.

User-facing progress goes through the ``log_*`` helpers. Library modules
log through ``logging.getLogger(__name__)``, which lands on the
``offline_bundle`` logger configured here.
"""

from __future__ import annotations

import logging
import os
import sys

from offline_bundle.constants import get_debug


# Color codes - respect TERM environment variable
def _should_use_colors() -> bool:
    """Check if colors should be used based on TERM and whether stdout is a terminal."""
    term = os.environ.get("TERM", "")
    if not term or term == "dumb":
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()

# ANSI color codes
BOLD = "\033[1m" if _USE_COLORS else ""
RESET = "\033[0m" if _USE_COLORS else ""


class BundleFormatter(logging.Formatter):
    """Formatter that matches the prefixes used by the ``log_*`` helpers."""

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()

        if record.levelno == logging.DEBUG:
            return f"DEBUG: {msg}"
        elif record.levelno >= logging.ERROR:
            return f"Error: {msg}"
        elif record.levelno == logging.WARNING:
            return f"Warning: {msg}"

        return msg


class _BelowWarning(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


# Configure package logger
_logger = logging.getLogger("offline_bundle")
_logger.setLevel(logging.DEBUG if get_debug() else logging.INFO)
_logger.propagate = False

# Only add handlers if none exist
if not _logger.handlers:
    _formatter = BundleFormatter()

    _handler = logging.StreamHandler(sys.stdout)
    _handler.setLevel(logging.DEBUG)
    _handler.addFilter(_BelowWarning())
    _handler.setFormatter(_formatter)
    _logger.addHandler(_handler)

    # Warnings and errors go to stderr
    _stderr_handler = logging.StreamHandler(sys.stderr)
    _stderr_handler.setLevel(logging.WARNING)
    _stderr_handler.setFormatter(_formatter)
    _logger.addHandler(_stderr_handler)


def set_debug(enabled: bool) -> None:
    """Toggle debug output for the package logger."""
    _logger.setLevel(logging.DEBUG if enabled else logging.INFO)


def log_info(msg: str) -> None:
    """Log an info message to stdout.

    Args:
        msg: The message to log.
    """
    print(msg)


def log_debug(msg: str) -> None:
    """Log a debug message (only if OFFLINE_BUNDLE_DEBUG=1 or ``set_debug(True)``).

    Args:
        msg: The message to log.
    """
    if _logger.isEnabledFor(logging.DEBUG):
        print(f"DEBUG: {msg}")


def log_warn(msg: str) -> None:
    """Log a warning message to stderr."""
    print(f"Warning: {msg}", file=sys.stderr)


def log_error(msg: str) -> None:
    """Log an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)


def log_section(msg: str) -> None:
    """Log a section header in bold (when colors are enabled).

    Args:
        msg: The section title.
    """
    print(f"{BOLD}{msg}{RESET}")


def log_step(msg: str) -> None:
    """Log an indented step message (2 spaces indent).

    Args:
        msg: The step message.
    """
    print(f"  {msg}")
