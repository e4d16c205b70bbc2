"""httpx wrapper.

Why a wrapper:
- Standardizes base URL, timeouts, headers and logging for every request.
- Eases testing: a `MockTransport` can be injected instead of the network.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` aimed at the instrumentation server.

    Why a builder:
    - Centralizes timeouts/headers so every command behaves the same.
    - The timeout here is the only bound on long commands such as UI thread sync.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
        "Content-Type": "application/json; charset=utf-8",
    }
    return httpx.AsyncClient(
        base_url=settings.server_url.rstrip("/"),
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        transport=transport,
    )
