"""Session orchestration utilities.

One call runs the whole interaction: receive the intent, assemble context
from the notes file, stream the agent's events, then record the outcome.
The CLI only supplies hooks for rendering, which keeps printing and progress
out of the core logic and lets tests drive the pipeline with fakes.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from adapters.capabilities import load_capabilities
from core.config import AppSettings
from core.domain.language import Language
from core.domain.models import AgentEvent, AssembledContext, Intent, InteractionOutcome, Note
from core.interfaces.invoker import AgentInvoker
from core.interfaces.notes import NotesRepository
from core.services.context_assembler import assemble_context
from core.services.intent_receiver import receive_intent
from core.services.outcome_recorder import record_outcome, summarize_interaction

logger = logging.getLogger(__name__)


@dataclass
class SessionRequest:
    """Parameters that control one session."""

    text: str
    source: str = "cli"
    language: Language | None = None
    record: bool = True


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers."""

    on_context: Callable[[AssembledContext], None] | None = None
    on_event: Callable[[AgentEvent], None] | None = None
    warning: Callable[[str], None] | None = None


@dataclass
class SessionResult:
    intent: Intent
    context: AssembledContext
    outcome: InteractionOutcome
    events: list[AgentEvent] = field(default_factory=list)
    recorded: Note | None = None
    warnings: list[str] = field(default_factory=list)


def _warn(hooks: PipelineHooks, warnings: list[str], message: str) -> None:
    warnings.append(message)
    logger.warning(message)
    if hooks.warning:
        hooks.warning(message)


def preview_context(
    request: SessionRequest,
    *,
    settings: AppSettings,
    store: NotesRepository,
) -> AssembledContext:
    """Dry run: everything up to (not including) the agent call."""

    intent = receive_intent(request.text, source=request.source, language=request.language, settings=settings)
    notes = store.load()
    manifest = load_capabilities(settings.capabilities_path)
    return assemble_context(intent, notes, settings=settings, capabilities=manifest.names())


async def run_session(
    request: SessionRequest,
    *,
    settings: AppSettings,
    store: NotesRepository,
    invoker: AgentInvoker,
    hooks: PipelineHooks | None = None,
) -> SessionResult:
    hooks = hooks or PipelineHooks()
    warnings: list[str] = []

    context = preview_context(request, settings=settings, store=store)
    intent = context.intent
    skipped = getattr(store, "last_skipped", 0)
    if skipped:
        _warn(hooks, warnings, f"{skipped} unreadable line(s) in the notes file were ignored.")
    if hooks.on_context:
        hooks.on_context(context)
    logger.debug(
        "Assembled context for intent %s: %d notes included, %d dropped",
        intent.id,
        len(context.included_note_ids),
        context.dropped_note_count,
    )

    events: list[AgentEvent] = []
    started = time.monotonic()
    async for event in invoker.stream(context):
        events.append(event)
        if hooks.on_event:
            hooks.on_event(event)
    duration = time.monotonic() - started

    outcome = summarize_interaction(intent, events, settings=settings, duration_seconds=duration)

    recorded: Note | None = None
    if request.record:
        recorded = record_outcome(outcome, store)

    return SessionResult(
        intent=intent,
        context=context,
        outcome=outcome,
        events=events,
        recorded=recorded,
        warnings=warnings,
    )
