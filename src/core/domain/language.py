"""Language utilities for software3.

This module centralizes the reply languages supported across the
application. Keeping it in the domain layer allows both CLI and service
layers to share a single source of truth without creating circular
imports with adapters.
"""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    """Supported natural-language choices for agent replies."""

    ENGLISH = "en"
    SPANISH = "es"

    @classmethod
    def default(cls) -> "Language":
        return cls.ENGLISH

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "Spanish" if self is Language.SPANISH else "English"

    def reply_instruction(self) -> str:
        """Line appended to the system prompt to pin the reply language."""

        if self is Language.SPANISH:
            return "Responde siempre en español neutro."
        return "Always reply in English."
