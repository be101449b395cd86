"""Catalog contracts.

- `CatalogSource` is what services and the CLI talk to; each provider
  client implements it and normalizes its own records.
- `TokenProvider` abstracts the credential store (an encrypted table in
  the back-office, env vars in development).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import CatalogPage, NormalizedEntry, Provider


@runtime_checkable
class CatalogSource(Protocol):
    """Minimal contract for a searchable catalog.

    - Methods are async because they perform HTTP I/O.
    - Results are already normalized.
    - `cursor` continues a cursor-paginated search (CivitAI text search);
      catalogs paginated by page number ignore it.
    - `aclose()` releases the underlying HTTP client.
    """

    provider: Provider

    async def search_entries(
        self,
        query: str | None = None,
        *,
        page: int = 1,
        limit: int = 20,
        cursor: str | None = None,
    ) -> CatalogPage:
        ...

    async def get_entry(self, entry_id: str) -> NormalizedEntry:
        ...

    async def aclose(self) -> None:
        ...


@runtime_checkable
class TokenProvider(Protocol):
    """Looks up the API token stored for a provider.

    Returns None when no token is stored; raises `TokenLookupError` when
    the store itself fails.
    """

    async def get_token(self, provider: Provider) -> str | None:
        ...
