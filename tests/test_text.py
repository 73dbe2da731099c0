"""Tests for the shared text helpers."""

from __future__ import annotations

from core.text import shorten


class TestShorten:
    def test_short_text_only_collapses_whitespace(self) -> None:
        assert shorten("  two\n\twords ", 20) == "two words"

    def test_long_text_ends_with_ellipsis(self) -> None:
        out = shorten("alpha beta gamma delta", 12)
        assert out == "alpha beta…"
        assert len(out) <= 12

    def test_empty(self) -> None:
        assert shorten("", 5) == ""
