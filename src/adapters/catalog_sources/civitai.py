"""Catalog source: CivitAI (`https://civitai.com/api/v1`).

Pagination is page-based for plain listings and cursor-based for text
search. A cursor always wins over a page number; a query without cursor
sends neither and lets CivitAI switch to cursor mode on its own.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.catalog_client import CatalogHttpClient
from adapters.rate_limiter import SlidingWindowRateLimiter
from core.config import AppSettings
from core.domain.civitai import (
    CivitAIModel,
    CivitAIModelVersion,
    CivitAISearchParams,
    CivitAISearchResponse,
    CivitAITag,
)
from core.domain.models import CatalogPage, NormalizedEntry, Provider
from core.interfaces.catalog import CatalogSource
from core.services.normalizer import normalize_civitai_model

DEFAULT_LIMIT = 100
DEFAULT_SORT = "Highest Rated"
DEFAULT_PERIOD = "AllTime"


def build_search_params(params: CivitAISearchParams) -> dict[str, Any]:
    """Translate search options into CivitAI query parameters."""

    query = params.query.strip() if params.query else None

    search: dict[str, Any] = {
        "limit": params.limit or DEFAULT_LIMIT,
        "query": query or None,
        "tag": params.tag,
        "username": params.username,
        "types": params.types,
        "sort": params.sort or DEFAULT_SORT,
        "period": params.period or DEFAULT_PERIOD,
        "rating": params.rating,
        "favorites": params.favorites,
        "hidden": params.hidden,
        "primaryFileOnly": params.primary_file_only,
        "allowNoCredit": params.allow_no_credit,
        "allowDerivatives": params.allow_derivatives,
        "allowDifferentLicenses": params.allow_different_licenses,
        "allowCommercialUse": params.allow_commercial_use,
        "nsfw": params.nsfw,
        "supportsGeneration": params.supports_generation,
        "baseModels": params.base_models,
    }

    if params.cursor:
        search["cursor"] = params.cursor
    elif not query:
        search["page"] = params.page or 1
    return search


class CivitAIClient(CatalogHttpClient, CatalogSource):
    """CivitAI REST client (100 requests/minute by default)."""

    def __init__(
        self,
        token: str | None = None,
        *,
        settings: AppSettings | None = None,
        client: httpx.AsyncClient | None = None,
        limiter: SlidingWindowRateLimiter | None = None,
    ) -> None:
        settings = settings or AppSettings()
        super().__init__(
            settings.civitai_base_url,
            token,
            provider=Provider.CIVITAI,
            limiter=limiter
            or SlidingWindowRateLimiter(settings.civitai_max_requests, settings.civitai_window_seconds),
            settings=settings,
            client=client,
        )

    async def search_models(self, params: CivitAISearchParams | None = None) -> CivitAISearchResponse:
        data = await self.get_json("/models", build_search_params(params or CivitAISearchParams()))
        return self.parse(CivitAISearchResponse, data)

    async def get_model(self, model_id: int | str) -> CivitAIModel:
        return self.parse(CivitAIModel, await self.get_json(f"/models/{model_id}"))

    async def get_model_version(self, version_id: int | str) -> CivitAIModelVersion:
        return self.parse(CivitAIModelVersion, await self.get_json(f"/model-versions/{version_id}"))

    async def get_model_versions(self, model_id: int | str) -> list[CivitAIModelVersion]:
        data = await self.get_json(f"/models/{model_id}/versions")
        items = data.get("items", []) if isinstance(data, dict) else data
        return self.parse(list[CivitAIModelVersion], items)

    async def get_tags(self) -> list[CivitAITag]:
        data = await self.get_json("/tags")
        items = data.get("items", []) if isinstance(data, dict) else data
        return self.parse(list[CivitAITag], items)

    # Shortcuts used by the admin "quick browse" actions.

    async def search_checkpoints(self, query: str | None = None, base_model: str | None = None) -> CivitAISearchResponse:
        return await self.search_models(
            CivitAISearchParams(
                query=query,
                types=["Checkpoint"],
                base_models=[base_model] if base_model else None,
                sort="Highest Rated",
            )
        )

    async def search_loras(self, query: str | None = None, base_model: str | None = None) -> CivitAISearchResponse:
        return await self.search_models(
            CivitAISearchParams(
                query=query,
                types=["LORA"],
                base_models=[base_model] if base_model else None,
                sort="Highest Rated",
            )
        )

    async def search_controlnets(self, query: str | None = None) -> CivitAISearchResponse:
        return await self.search_models(
            CivitAISearchParams(query=query, types=["ControlNet"], sort="Highest Rated")
        )

    async def get_popular_models(self, model_type: str | None = None, period: str = "Month") -> CivitAISearchResponse:
        return await self.search_models(
            CivitAISearchParams(
                types=[model_type] if model_type else None,
                sort="Most Downloaded",
                period=period,  # type: ignore[arg-type]
                limit=50,
            )
        )

    async def search_entries(
        self,
        query: str | None = None,
        *,
        page: int = 1,
        limit: int = 20,
        cursor: str | None = None,
    ) -> CatalogPage:
        response = await self.search_models(
            CivitAISearchParams(query=query, page=page, limit=limit, cursor=cursor)
        )
        meta = response.metadata
        return CatalogPage(
            provider=self.provider,
            entries=[normalize_civitai_model(model) for model in response.items],
            page=meta.current_page,
            page_size=meta.page_size or limit,
            total=meta.total_items,
            next_cursor=meta.next_cursor,
            has_more=bool(meta.next_cursor or meta.next_page),
        )

    async def get_entry(self, entry_id: str) -> NormalizedEntry:
        return normalize_civitai_model(await self.get_model(entry_id))
