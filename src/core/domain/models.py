"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without coupling the
  core to I/O libraries.
- The same models serialise to the notes file and to JSON exports.

Note:
- These models describe *what* an interaction is, not *how* it is carried out.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from core.domain.language import Language

NOTE_TEXT_MAX = 20_000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex[:12]


class NoteKind(str, Enum):
    PREFERENCE = "preference"
    NOTE = "note"
    OUTCOME = "outcome"
    SKILL = "skill"


class Note(BaseModel):
    """One entry of the persisted notes file.

    Preferences and free notes are written by the user; outcomes by the
    recorder after every interaction; skills by promoting a successful outcome.
    """

    id: str = Field(default_factory=new_id, min_length=4, max_length=32)
    kind: NoteKind = Field(default=NoteKind.NOTE)
    text: str = Field(..., min_length=1, max_length=NOTE_TEXT_MAX)
    title: str | None = Field(
        default=None,
        max_length=64,
        description="Display name (required for skills).",
    )
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    metadata: dict[str, Any] = Field(default_factory=dict)


class Intent(BaseModel):
    """A natural-language request as received from the user."""

    id: str = Field(default_factory=new_id)
    text: str = Field(..., min_length=1)
    source: str = Field(default="cli", description="Where the request came from (cli, stdin, api).")
    language: Language = Field(default=Language.ENGLISH)
    received_at: datetime = Field(default_factory=utcnow)


class AgentEventType(str, Enum):
    STATUS = "status"
    TEXT = "text"
    RESULT = "result"
    ERROR = "error"


class AgentEvent(BaseModel):
    """Structured event streamed back by an agent invoker."""

    type: AgentEventType
    content: str = Field(default="")
    metadata: dict[str, Any] = Field(default_factory=dict)
    at: datetime = Field(default_factory=utcnow)


class AssembledContext(BaseModel):
    """Prompt ready to be forwarded to the external agent."""

    intent: Intent
    system_prompt: str
    messages: list[dict[str, str]] = Field(default_factory=list)
    included_note_ids: list[str] = Field(default_factory=list)
    dropped_note_count: int = Field(default=0, ge=0)
    capabilities: list[str] = Field(default_factory=list)


class InteractionOutcome(BaseModel):
    """Result of one intent → agent round trip."""

    intent_id: str
    intent_text: str
    success: bool = False
    response: str = ""
    summary: str = ""
    model: str | None = None
    error: str | None = None
    usage: dict[str, Any] = Field(default_factory=dict)
    event_count: int = Field(default=0, ge=0)
    duration_seconds: float = Field(default=0.0, ge=0.0)
