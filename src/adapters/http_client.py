"""httpx wrapper.

- Standardizes timeouts and default headers for every catalog.
- Easy to replace with an `httpx.MockTransport` in tests.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_headers(settings: AppSettings) -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }


def bearer_header(token: str | None) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Copy of `headers` safe for log output."""

    return {
        key: ("[REDACTED]" if key.lower() == "authorization" else value)
        for key, value in headers.items()
    }


def build_async_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the catalog defaults.

    Every catalog client goes through here so they all share the same
    timeout and User-Agent. Bearer tokens are added per request by
    `CatalogHttpClient`; `transport` is the seam for `httpx.MockTransport`.
    """

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=build_headers(settings),
        transport=transport,
    )
