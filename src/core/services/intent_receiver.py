"""Intent reception.

Turns raw user input (CLI words or stdin) into a validated `Intent`.
"""

from __future__ import annotations

import unicodedata
from typing import Sequence, TextIO

from core.config import AppSettings
from core.domain.errors import InvalidIntentError
from core.domain.language import Language
from core.domain.models import Intent

_KEEP_CONTROL = {"\n", "\t"}


def clean_intent_text(text: str) -> str:
    """Strip surrounding whitespace and drop control characters (newline/tab kept)."""

    kept = [
        ch
        for ch in (text or "").replace("\r\n", "\n")
        if ch in _KEEP_CONTROL or unicodedata.category(ch) != "Cc"
    ]
    return "".join(kept).strip()


def read_intent_text(words: Sequence[str], stdin: TextIO | None = None) -> tuple[str, str]:
    """Join CLI words into the request text; a single `-` reads stdin.

    Returns `(text, source)`.
    """

    if len(words) == 1 and words[0] == "-":
        if stdin is None:
            raise InvalidIntentError("Reading the request from stdin is not available here.")
        return stdin.read(), "stdin"
    return " ".join(words), "cli"


def receive_intent(
    text: str,
    *,
    source: str = "cli",
    language: Language | None = None,
    settings: AppSettings | None = None,
) -> Intent:
    settings = settings or AppSettings()
    cleaned = clean_intent_text(text)
    if not cleaned:
        raise InvalidIntentError("The request is empty.")
    if len(cleaned) > settings.intent_max_chars:
        raise InvalidIntentError(
            f"The request is {len(cleaned)} characters long; the limit is {settings.intent_max_chars}."
        )
    return Intent(
        text=cleaned,
        source=source,
        language=language or settings.default_language,
    )
