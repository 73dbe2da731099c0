"""Small text helpers shared by the services and the CLI."""

from __future__ import annotations


def shorten(text: str, max_chars: int) -> str:
    """Collapse whitespace and cut to `max_chars`, ending with an ellipsis when cut."""

    s = " ".join((text or "").split())
    if len(s) <= max_chars:
        return s
    return s[: max(0, max_chars - 1)].rstrip() + "…"
