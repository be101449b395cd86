"""Federated search across several catalogs.

The CLI (and any future entry-point) delegates fan-out and aggregation
here, keeping side-effects (printing, progress) in the caller via hooks.
One failing catalog never sinks the others: its typed error is recorded
per provider and the remaining pages are still returned.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from core.domain.errors import CatalogError
from core.domain.models import CatalogPage, NormalizedEntry, Provider
from core.interfaces.catalog import CatalogSource

logger = logging.getLogger(__name__)


@dataclass
class SearchHooks:
    """Optional callbacks for UI layers."""

    warning: Callable[[str], None] | None = None
    page_done: Callable[[CatalogPage], None] | None = None


@dataclass
class CatalogSearchResult:
    """Output of a federated search."""

    query: str | None
    pages: dict[Provider, CatalogPage] = field(default_factory=dict)
    errors: dict[Provider, str] = field(default_factory=dict)

    @property
    def entries(self) -> list[NormalizedEntry]:
        return dedupe_entries(
            entry for page in self.pages.values() for entry in page.entries
        )

    @property
    def ok(self) -> bool:
        return not self.errors


def dedupe_entries(entries: Iterable[NormalizedEntry]) -> list[NormalizedEntry]:
    """Drop repeated `(provider, id)` pairs, keeping the first occurrence."""

    seen: set[tuple[Provider, str]] = set()
    deduped: list[NormalizedEntry] = []
    for entry in entries:
        key = (entry.provider, entry.id)
        if key in seen:
            continue
        seen.add(key)
        deduped.append(entry)
    return deduped


def sanitize_query_for_filename(value: str | None) -> str:
    """Filesystem-friendly slug for export files."""

    out: list[str] = []
    for ch in (value or "").strip():
        if ch.isalnum() or ch in ("-", "_", "."):
            out.append(ch)
        else:
            out.append("-")
    cleaned = "".join(out).strip("-_")
    return cleaned or "catalog"


async def search_catalogs(
    sources: Sequence[CatalogSource],
    query: str | None = None,
    *,
    page: int = 1,
    limit: int = 20,
    cursor: str | None = None,
    hooks: SearchHooks | None = None,
) -> CatalogSearchResult:
    hooks = hooks or SearchHooks()
    result = CatalogSearchResult(query=query)

    async def run(source: CatalogSource) -> CatalogPage:
        return await source.search_entries(query, page=page, limit=limit, cursor=cursor)

    outcomes = await asyncio.gather(*(run(source) for source in sources), return_exceptions=True)

    for source, outcome in zip(sources, outcomes):
        if isinstance(outcome, CatalogError):
            message = f"{source.provider.label()}: {outcome}"
            logger.warning("Catalog search failed: %s", message)
            result.errors[source.provider] = str(outcome)
            if hooks.warning:
                hooks.warning(message)
            continue
        if isinstance(outcome, BaseException):
            raise outcome

        result.pages[source.provider] = outcome
        if hooks.page_done:
            hooks.page_done(outcome)

    return result
