"""Unit tests for offline_bundle/rewrite.py."""

from __future__ import annotations

import pytest

from offline_bundle.rewrite import rewrite_header


class TestRewriteHeader:

    def test_single_ref(self):
        assert rewrite_header(b"refs/remotes/origin/main\n\n") == b"refs/heads/main\n\n"

    def test_global_replace(self):
        header = b"refs/remotes/a/x refs/remotes/b/y\n\n"
        assert rewrite_header(header) == b"refs/heads/x refs/heads/y\n\n"

    def test_bundle_header(self):
        header = (
            b"# v2 git bundle\n"
            b"1111111111111111111111111111111111111111 refs/remotes/origin/main\n"
            b"2222222222222222222222222222222222222222 refs/remotes/origin/feature/x\n"
            b"\n"
        )
        assert rewrite_header(header) == (
            b"# v2 git bundle\n"
            b"1111111111111111111111111111111111111111 refs/heads/main\n"
            b"2222222222222222222222222222222222222222 refs/heads/feature/x\n"
            b"\n"
        )

    def test_other_namespaces_untouched(self):
        header = b"abc refs/heads/main\nabc refs/tags/v1\n\n"
        assert rewrite_header(header) == header

    def test_requires_word_boundary(self):
        header = b"xrefs/remotes/origin/main\n"
        assert rewrite_header(header) == header

    def test_requires_scope_segment(self):
        assert rewrite_header(b"refs/remotes//main") == b"refs/remotes//main"

    def test_empty(self):
        assert rewrite_header(b"") == b""

    def test_non_utf8_bytes_preserved(self):
        header = b"\xff\xfe refs/remotes/origin/main \x80\n\n"
        assert rewrite_header(header) == b"\xff\xfe refs/heads/main \x80\n\n"

    @pytest.mark.parametrize(
        "header",
        [
            b"refs/remotes/origin/main\n\n",
            b"refs/remotes/a/x refs/remotes/b/y\n\n",
            b"refs/remotes/refs/remotes/x/y\n",
            b"no refs here",
        ],
    )
    def test_idempotent(self, header):
        once = rewrite_header(header)
        assert rewrite_header(once) == once
