"""offline-bundle - package a repository's remote history into an encrypted archive."""

from importlib.metadata import PackageNotFoundError, version as _pkg_version

try:
    __version__ = _pkg_version("offline-bundle")
except PackageNotFoundError:
    __version__ = "0.1.0"  # fallback for editable installs / dev
