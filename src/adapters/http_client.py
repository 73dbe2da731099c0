"""httpx wrapper.

Why a wrapper:
- Standardises timeouts and headers for the few plain HTTP calls we make
  (provider reachability checks in `sw3 doctor`).
- Easy to swap for a mocked transport in tests.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json, */*;q=0.8",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def check_reachable(url: str, *, settings: AppSettings | None = None, client: httpx.AsyncClient | None = None) -> tuple[bool, str]:
    """Best-effort GET; any HTTP answer (even 401/404) means the host is reachable."""

    try:
        if client is not None:
            response = await client.get(url)
        else:
            async with build_async_client(settings) as owned:
                response = await owned.get(url)
    except httpx.HTTPError as exc:
        return False, f"{type(exc).__name__}: {exc}"
    return True, f"HTTP {response.status_code}"
