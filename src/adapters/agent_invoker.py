"""Adapter for the external agent (any OpenAI-compatible provider).

Responsibility:
- Forward an `AssembledContext` to the provider with streaming enabled.
- Translate the chunk stream into `AgentEvent`s (text deltas, then one result).
- Retry transient failures that happen before the first token; report every
  other failure as an `error` event.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, AsyncIterator, Awaitable, Callable

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    OpenAIError,
)

from core.config import AppSettings
from core.domain.models import AgentEvent, AgentEventType, AssembledContext

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


def build_openai_client(settings: AppSettings, *, api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(
        api_key=api_key,
        base_url=settings.ai_base_url,
        timeout=settings.ai_timeout_seconds,
        # Retries are handled here so that each one surfaces as a status event.
        max_retries=0,
    )


def is_local_base_url(url: str) -> bool:
    url_l = (url or "").strip().lower()
    return url_l.startswith(("http://localhost", "http://127.0.0.1", "http://0.0.0.0"))


def _safe_retry_after_seconds(exc: Exception) -> float | None:
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return None


def _backoff_seconds(exc: Exception, attempt: int) -> float:
    retry_after = _safe_retry_after_seconds(exc)
    base = retry_after if retry_after is not None else (1.25 * (2**attempt))
    return base + random.uniform(0.0, 0.35)


def _is_transient(exc: Exception) -> bool:
    if isinstance(exc, APIConnectionError):
        # Includes APITimeoutError.
        return True
    if isinstance(exc, APIStatusError):
        return exc.status_code == 429 or exc.status_code >= 500
    return False


def _usage_dict(usage: Any) -> dict[str, Any]:
    if usage is None:
        return {}
    if isinstance(usage, dict):
        return dict(usage)
    dump = getattr(usage, "model_dump", None)
    if callable(dump):
        return dump()
    return {}


def _error_event(exc: Exception, *, attempts: int) -> AgentEvent:
    return AgentEvent(
        type=AgentEventType.ERROR,
        content=str(exc) or type(exc).__name__,
        metadata={
            "error_type": type(exc).__name__,
            "status_code": getattr(exc, "status_code", None),
            "attempts": attempts,
        },
    )


class OpenAIAgentInvoker:
    """Streams a chat completion and yields structured events."""

    def __init__(
        self,
        settings: AppSettings,
        *,
        client: Any | None = None,
        api_key: str | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._settings = settings
        self._client = client or build_openai_client(settings, api_key=api_key or settings.ai_api_key or "local")
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self._settings.ai_model

    async def stream(self, context: AssembledContext) -> AsyncIterator[AgentEvent]:
        settings = self._settings
        max_retries = settings.ai_max_retries

        for attempt in range(max_retries + 1):
            emitted_text = False
            parts: list[str] = []
            finish_reason: str | None = None
            usage: dict[str, Any] = {}
            used_model = settings.ai_model
            try:
                stream = await self._client.chat.completions.create(
                    model=settings.ai_model,
                    messages=context.messages,
                    temperature=settings.ai_temperature,
                    max_tokens=settings.ai_max_tokens,
                    stream=True,
                    stream_options={"include_usage": True},
                )
                async for chunk in stream:
                    used_model = getattr(chunk, "model", None) or used_model
                    if getattr(chunk, "usage", None) is not None:
                        usage = _usage_dict(chunk.usage)
                    for choice in getattr(chunk, "choices", None) or []:
                        delta = getattr(choice, "delta", None)
                        piece = getattr(delta, "content", None) if delta is not None else None
                        if piece:
                            emitted_text = True
                            parts.append(piece)
                            yield AgentEvent(type=AgentEventType.TEXT, content=piece)
                        if getattr(choice, "finish_reason", None):
                            finish_reason = choice.finish_reason

            except OpenAIError as exc:
                if emitted_text or not _is_transient(exc) or attempt >= max_retries:
                    logger.warning("Agent call failed after %d attempt(s): %s", attempt + 1, exc)
                    yield _error_event(exc, attempts=attempt + 1)
                    return
                delay = _backoff_seconds(exc, attempt)
                logger.info("Transient provider error (%s); retrying in %.2fs", type(exc).__name__, delay)
                yield AgentEvent(
                    type=AgentEventType.STATUS,
                    content=f"Provider unavailable ({type(exc).__name__}); retrying in {delay:.1f}s",
                    metadata={"attempt": attempt + 1, "delay_seconds": round(delay, 3)},
                )
                await self._sleep(delay)
                continue

            yield AgentEvent(
                type=AgentEventType.RESULT,
                content="".join(parts),
                metadata={
                    "model": used_model,
                    "finish_reason": finish_reason,
                    "usage": usage,
                    "attempts": attempt + 1,
                },
            )
            return


class OfflineAgentInvoker:
    """Fallback used when no remote agent is configured.

    It still produces a `result`, describing what would have been sent, so the
    interaction is recorded and the notes history stays continuous.
    """

    model = "offline"

    def __init__(self, reason: str) -> None:
        self.reason = reason

    async def stream(self, context: AssembledContext) -> AsyncIterator[AgentEvent]:
        yield AgentEvent(
            type=AgentEventType.STATUS,
            content=f"No remote agent configured ({self.reason}); running offline.",
            metadata={"reason": self.reason},
        )
        caps = ", ".join(context.capabilities) if context.capabilities else "none"
        text = (
            f"Offline mode: the request was received but not forwarded.\n"
            f"Request: {context.intent.text}\n"
            f"Notes that would be sent: {len(context.included_note_ids)}"
            f" (dropped: {context.dropped_note_count}).\n"
            f"Capabilities advertised: {caps}.\n"
            f"Configure SW3_AI_API_KEY (or run `sw3 doctor setup-ai`) to enable the agent."
        )
        yield AgentEvent(
            type=AgentEventType.RESULT,
            content=text,
            metadata={"model": self.model, "reason": self.reason, "usage": {}},
        )


def build_invoker(settings: AppSettings | None = None) -> OpenAIAgentInvoker | OfflineAgentInvoker:
    """Pick the invoker for the current configuration."""

    settings = settings or AppSettings()
    api_key = (settings.ai_api_key or "").strip()
    if not api_key:
        # No key: local OpenAI-compatible servers accept a dummy one; hosted ones do not.
        if is_local_base_url(settings.ai_base_url):
            api_key = "local"
        else:
            return OfflineAgentInvoker(reason="missing_ai_api_key")
    return OpenAIAgentInvoker(settings, api_key=api_key)
