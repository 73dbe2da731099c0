"""Contract for external agent invokers.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Lets the session pipeline run against the OpenAI-compatible adapter, the
  offline fallback, or a test fake interchangeably.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from core.domain.models import AgentEvent, AssembledContext


@runtime_checkable
class AgentInvoker(Protocol):
    """Minimal contract for an agent backend.

    Design rules:
    - `stream` is asynchronous because it performs network I/O.
    - Provider failures are yielded as `error` events, never raised.
    - The last event of a successful stream is a `result` event.
    """

    def stream(self, context: AssembledContext) -> AsyncIterator[AgentEvent]:
        ...
