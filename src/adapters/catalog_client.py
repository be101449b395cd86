"""Shared GET/classify/parse path for every catalog client.

A request goes through three steps:
1. wait for the client's own rate window (`SlidingWindowRateLimiter`);
2. GET `base_url + endpoint` with encoded query params;
3. map non-2xx answers to typed errors, otherwise parse JSON.

Nothing is retried here; the limiter's self-throttling is the only wait.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from adapters.http_client import bearer_header, build_async_client, redact_headers
from adapters.rate_limiter import SlidingWindowRateLimiter
from core.config import AppSettings
from core.domain.errors import (
    AuthError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
)
from core.domain.models import Provider

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BODY_PREVIEW = 500


def _param_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query_params(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    """Flatten params into query pairs.

    - `None` values are dropped.
    - Sequences repeat the key once per element (`types=A&types=B`).
    - Booleans are sent as `true` / `false`.
    """

    pairs: list[tuple[str, str]] = []
    if not params:
        return pairs
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if item is not None:
                    pairs.append((key, _param_str(item)))
        else:
            pairs.append((key, _param_str(value)))
    return pairs


def _retry_after_seconds(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


def raise_for_catalog_status(provider: Provider, response: httpx.Response) -> None:
    """Raise the typed error matching a non-2xx response."""

    if response.is_success:
        return

    status = response.status_code
    body = response.text or ""
    label = provider.label()
    message = f"{label} API error ({status}): {body[:_BODY_PREVIEW]}"

    if status in (401, 403):
        raise AuthError(message, provider=provider.value, status=status, body=body)
    if status == 404:
        raise NotFoundError(message, provider=provider.value, status=status, body=body)
    if status == 429:
        raise RateLimitError(
            message,
            provider=provider.value,
            status=status,
            body=body,
            retry_after=_retry_after_seconds(response),
        )
    raise UpstreamError(message, provider=provider.value, status=status, body=body)


class CatalogHttpClient:
    """Base class for the CivitAI, HuggingFace and Registry clients.

    One instance per request scope: it carries its own token, limiter and
    (unless injected) its own `httpx.AsyncClient`.
    """

    provider: Provider

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        provider: Provider,
        limiter: SlidingWindowRateLimiter,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.base_url = base_url.rstrip("/")
        self.provider = provider
        self.limiter = limiter
        self._token = token or None
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    def _auth_headers(self) -> dict[str, str]:
        return bearer_header(self._token)

    @property
    def has_token(self) -> bool:
        return self._token is not None

    async def __aenter__(self) -> "CatalogHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url}{endpoint}"

    async def _send(self, url: str, params: Mapping[str, Any] | None) -> httpx.Response:
        await self.limiter.admit()

        query = encode_query_params(params)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%s API request: %s params=%s headers=%s",
                self.provider.label(),
                url,
                query,
                redact_headers({**self._client.headers, **self._auth_headers()}),
            )

        try:
            response = await self._client.get(url, params=query or None, headers=self._auth_headers())
        except httpx.TransportError as exc:
            logger.warning("%s API request failed: %s", self.provider.label(), exc)
            raise NetworkError(
                f"{self.provider.label()} API request failed: {exc}",
                provider=self.provider.value,
            ) from exc

        if not response.is_success:
            logger.warning(
                "%s API error: status=%s body=%s",
                self.provider.label(),
                response.status_code,
                response.text[:_BODY_PREVIEW],
            )
        raise_for_catalog_status(self.provider, response)
        return response

    async def get_json(self, endpoint: str, params: Mapping[str, Any] | None = None) -> Any:
        """GET `endpoint` (relative to `base_url`) and return the decoded JSON body."""

        response = await self._send(self.build_url(endpoint), params)
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"{self.provider.label()} API returned a non-JSON body",
                provider=self.provider.value,
                status=response.status_code,
                body=response.text,
            ) from exc

        if isinstance(data, dict):
            logger.debug("%s API response: keys=%s", self.provider.label(), sorted(data)[:10])
        elif isinstance(data, list):
            logger.debug("%s API response: %d items", self.provider.label(), len(data))
        return data

    async def get_text(self, url: str, params: Mapping[str, Any] | None = None) -> str:
        """GET an absolute (or base-relative) URL and return the body as text."""

        response = await self._send(self.build_url(url), params)
        return response.text

    def parse(self, schema: type[T], data: Any) -> T:
        """Validate a decoded payload against a record schema.

        Schema drift surfaces as `UpstreamError` rather than a bare
        pydantic `ValidationError`.
        """

        try:
            return TypeAdapter(schema).validate_python(data)
        except ValidationError as exc:
            raise UpstreamError(
                f"{self.provider.label()} API returned an unexpected payload ({exc.error_count()} errors)",
                provider=self.provider.value,
                body=str(data)[:_BODY_PREVIEW],
            ) from exc
