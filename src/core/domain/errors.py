"""Domain errors.

Services raise these; the CLI maps them to messages and exit codes.
Provider failures are not exceptions: the invoker reports them as `error` events.
"""

from __future__ import annotations


class Software3Error(Exception):
    """Base class for every error raised by the core."""


class InvalidIntentError(Software3Error, ValueError):
    """The request text is empty or exceeds the configured limit."""


class NotesStoreError(Software3Error):
    """The notes file could not be read or written, or a lookup was ambiguous."""


class NoteNotFoundError(NotesStoreError, KeyError):
    """No note matches the given id or prefix."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class CapabilityManifestError(Software3Error):
    """The configured capability manifest is missing or malformed."""


class PromotionError(Software3Error):
    """An outcome cannot be promoted to a skill."""
