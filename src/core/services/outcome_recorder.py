"""Outcome recording and capability promotion.

- `summarize_interaction` folds the event stream into an `InteractionOutcome`.
- `record_outcome` appends it to the notes file so the next request sees it.
- `promote_to_skill` turns a successful outcome into a reusable skill note.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from core.config import AppSettings
from core.domain.errors import NotesStoreError, PromotionError
from core.domain.models import (
    NOTE_TEXT_MAX,
    AgentEvent,
    AgentEventType,
    Intent,
    InteractionOutcome,
    Note,
    NoteKind,
)
from core.interfaces.notes import NotesRepository
from core.text import shorten

logger = logging.getLogger(__name__)

SKILL_NAME_MAX = 64


def summarize_interaction(
    intent: Intent,
    events: Sequence[AgentEvent],
    *,
    settings: AppSettings | None = None,
    duration_seconds: float = 0.0,
) -> InteractionOutcome:
    settings = settings or AppSettings()

    result = next((e for e in reversed(events) if e.type == AgentEventType.RESULT), None)
    error = next((e for e in reversed(events) if e.type == AgentEventType.ERROR), None)

    if result is not None:
        response = result.content
    else:
        response = "".join(e.content for e in events if e.type == AgentEventType.TEXT)

    success = result is not None and error is None
    meta = result.metadata if result is not None else {}

    if success:
        summary = shorten(response, settings.outcome_summary_chars) or "(empty response)"
    else:
        reason = error.content if error is not None else "the agent stream ended without a result"
        summary = shorten(f"Failed: {reason}", settings.outcome_summary_chars)

    return InteractionOutcome(
        intent_id=intent.id,
        intent_text=intent.text,
        success=success,
        response=response,
        summary=summary,
        model=meta.get("model"),
        error=error.content if error is not None else None,
        usage=meta.get("usage") or {},
        event_count=len(events),
        duration_seconds=max(0.0, duration_seconds),
    )


def _outcome_text(outcome: InteractionOutcome) -> str:
    """`Request: ...` / `Outcome: ...`, with the request cut to fit one note."""

    summary = outcome.summary
    if len(summary) > NOTE_TEXT_MAX // 4:
        summary = shorten(summary, NOTE_TEXT_MAX // 4)
    tail = f"\nOutcome: {summary}"
    request = outcome.intent_text
    room = NOTE_TEXT_MAX - len("Request: ") - len(tail)
    if len(request) > room:
        request = shorten(request, room)
    return f"Request: {request}{tail}"


def record_outcome(outcome: InteractionOutcome, store: NotesRepository) -> Note:
    note = Note(
        kind=NoteKind.OUTCOME,
        text=_outcome_text(outcome),
        tags=[] if outcome.success else ["failed"],
        metadata={
            "intent_id": outcome.intent_id,
            "success": outcome.success,
            "model": outcome.model,
            "usage": outcome.usage,
            "duration_seconds": round(outcome.duration_seconds, 3),
        },
    )
    store.append(note)
    logger.info("Recorded outcome %s (success=%s)", note.id, outcome.success)
    return note


def add_note(
    text: str,
    *,
    kind: NoteKind = NoteKind.NOTE,
    tags: Iterable[str] = (),
    store: NotesRepository,
) -> Note:
    """Manual entry point for preferences and free notes."""

    if kind not in (NoteKind.PREFERENCE, NoteKind.NOTE):
        raise NotesStoreError(f"Notes of kind '{kind.value}' are written by the runtime, not by hand.")
    cleaned = (text or "").strip()
    if not cleaned:
        raise NotesStoreError("A note needs some text.")
    if len(cleaned) > NOTE_TEXT_MAX:
        raise NotesStoreError(f"A note can hold at most {NOTE_TEXT_MAX} characters.")
    note = Note(kind=kind, text=cleaned, tags=sorted({t.strip() for t in tags if t.strip()}))
    return store.append(note)


def promote_to_skill(note: Note, *, name: str, store: NotesRepository) -> Note:
    """Promote a successful outcome into a permanent, named skill."""

    name = (name or "").strip()
    if not name or len(name) > SKILL_NAME_MAX:
        raise PromotionError(f"Skill names must be 1..{SKILL_NAME_MAX} characters.")
    if note.kind != NoteKind.OUTCOME:
        raise PromotionError(f"Only outcomes can be promoted (note {note.id} is a {note.kind.value}).")
    if not note.metadata.get("success"):
        raise PromotionError(f"Outcome {note.id} did not succeed and cannot become a skill.")

    existing = {(n.title or "").lower() for n in store.load() if n.kind == NoteKind.SKILL}
    if name.lower() in existing:
        raise PromotionError(f"A skill named {name!r} already exists.")

    skill = Note(
        kind=NoteKind.SKILL,
        title=name,
        text=note.text,
        tags=list(note.tags),
        metadata={"source_note_id": note.id, "intent_id": note.metadata.get("intent_id")},
    )
    store.append(skill)
    logger.info("Promoted outcome %s to skill %r", note.id, name)
    return skill
