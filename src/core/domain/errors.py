"""Typed failures raised by catalog clients and services.

Hierarchy:
- `CatalogError` is the base of everything raised here.
- `UpstreamError` covers every non-2xx answer; 401/403, 404 and 429 get
  their own subclasses so callers can branch on them.
- `NetworkError` means the request never produced a response.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base error for catalog access."""

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class UpstreamError(CatalogError):
    """The catalog answered with a non-2xx status (or an unreadable body)."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status: int | None = None,
        body: str = "",
    ) -> None:
        super().__init__(message, provider=provider)
        self.status = status
        self.body = body


class AuthError(UpstreamError):
    """401/403: missing, invalid or insufficient credentials."""


class NotFoundError(UpstreamError):
    """404, or a requested file/version absent from a fetched record."""


class RateLimitError(UpstreamError):
    """429 from the catalog itself."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status: int | None = 429,
        body: str = "",
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, provider=provider, status=status, body=body)
        self.retry_after = retry_after


class NetworkError(CatalogError):
    """Transport-level failure (DNS, connect, read timeout...)."""


class TokenLookupError(CatalogError):
    """The credential store could not be read."""


class ImportPlanError(CatalogError):
    """A fetched record cannot be turned into an import draft."""
