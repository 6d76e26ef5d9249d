"""Rewrite remote-tracking ref names in a bundle header to local branches.

A bundle created from ``refs/remotes/<remote>/*`` advertises those names in
its header. Cloning from it only picks up ``refs/heads/*``, so the header is
rewritten before the bundle is archived.
"""

from __future__ import annotations

import re

from offline_bundle.constants import LOCAL_REFS_PREFIX

# Operates on bytes so non-UTF-8 bytes elsewhere in the header survive intact.
REMOTE_REF_RE = re.compile(rb"\brefs/remotes/[^/]+")
LOCAL_REF_PREFIX = LOCAL_REFS_PREFIX.encode("ascii")


def rewrite_header(header: bytes) -> bytes:
    """Replace every ``refs/remotes/<remote>`` with ``refs/heads``.

    Matching is global and non-overlapping, left to right. The remote name
    (everything up to the next ``/``) is dropped. Running this twice gives
    the same result as running it once.
    """
    return REMOTE_REF_RE.sub(LOCAL_REF_PREFIX, header)
