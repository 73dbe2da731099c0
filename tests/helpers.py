"""Test doubles and builders shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import AsyncIterator, Iterable

from core.domain.models import AgentEvent, AgentEventType, AssembledContext, Note, NoteKind


def make_note(text: str, kind: NoteKind = NoteKind.NOTE, *, days_ago: int = 0, **kwargs) -> Note:
    created = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc) - timedelta(days=days_ago)
    return Note(text=text, kind=kind, created_at=created, **kwargs)


class FakeInvoker:
    """Replays a fixed list of events and remembers the context it got."""

    def __init__(self, events: Iterable[AgentEvent]) -> None:
        self.events = list(events)
        self.contexts: list[AssembledContext] = []

    async def stream(self, context: AssembledContext) -> AsyncIterator[AgentEvent]:
        self.contexts.append(context)
        for event in self.events:
            yield event


def success_events(*parts: str, model: str = "test-model") -> list[AgentEvent]:
    events = [AgentEvent(type=AgentEventType.TEXT, content=p) for p in parts]
    events.append(
        AgentEvent(
            type=AgentEventType.RESULT,
            content="".join(parts),
            metadata={"model": model, "usage": {"total_tokens": 42}},
        )
    )
    return events


def chunk(content: str | None = None, *, finish_reason: str | None = None, usage=None, model: str = "test-model"):
    choices = []
    if content is not None or finish_reason is not None:
        choices = [SimpleNamespace(delta=SimpleNamespace(content=content), finish_reason=finish_reason)]
    return SimpleNamespace(model=model, choices=choices, usage=usage)


class FakeCompletions:
    """Scripted stand-in for `AsyncOpenAI().chat.completions`.

    Each script step is either an exception (raised by `create`) or a list of
    chunks; an exception inside the list is raised mid-stream.
    """

    def __init__(self, script: list) -> None:
        self.script = list(script)
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step

        async def _gen():
            for item in step:
                if isinstance(item, Exception):
                    raise item
                yield item

        return _gen()


class FakeOpenAIClient:
    def __init__(self, script: list) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions(script))

    @property
    def calls(self) -> list[dict]:
        return self.chat.completions.calls
