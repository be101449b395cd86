"""Catalog source: ComfyUI Registry (`https://api.comfy.org`).

Custom nodes, not models. Page/limit pagination; a blank query lists the
latest nodes instead of searching.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.catalog_client import CatalogHttpClient
from adapters.rate_limiter import SlidingWindowRateLimiter
from core.config import AppSettings
from core.domain.models import CatalogPage, NormalizedEntry, Provider
from core.domain.registry import (
    RegistryInstallData,
    RegistryListParams,
    RegistryNode,
    RegistryNodeVersion,
    RegistrySearchParams,
    RegistrySearchResponse,
)
from core.interfaces.catalog import CatalogSource
from core.services.normalizer import normalize_registry_node

DEFAULT_LIMIT = 50


class ComfyUIRegistryClient(CatalogHttpClient, CatalogSource):
    """ComfyUI Registry client (60 requests/minute by default)."""

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
            settings.comfyui_registry_base_url,
            token,
            provider=Provider.COMFYUI_REGISTRY,
            limiter=limiter
            or SlidingWindowRateLimiter(
                settings.comfyui_registry_max_requests,
                settings.comfyui_registry_window_seconds,
            ),
            settings=settings,
            client=client,
        )

    async def search_nodes(self, params: RegistrySearchParams | None = None) -> RegistrySearchResponse:
        params = params or RegistrySearchParams()
        query: dict[str, Any] = {
            "page": params.page or 1,
            "limit": params.limit or DEFAULT_LIMIT,
            "search": params.search,
            "include_banned": params.include_banned,
        }
        return self.parse(RegistrySearchResponse, await self.get_json("/nodes/search", query))

    async def list_nodes(self, params: RegistryListParams | None = None) -> RegistrySearchResponse:
        params = params or RegistryListParams()
        query: dict[str, Any] = {
            "page": params.page or 1,
            "limit": params.limit or DEFAULT_LIMIT,
            "include_banned": params.include_banned,
            "timestamp": params.timestamp,
            "latest": params.latest,
        }
        return self.parse(RegistrySearchResponse, await self.get_json("/nodes", query))

    async def get_node(self, node_id: str) -> RegistryNode:
        return self.parse(RegistryNode, await self.get_json(f"/nodes/{node_id}"))

    async def get_node_versions(self, node_id: str) -> list[RegistryNodeVersion]:
        data = await self.get_json(f"/nodes/{node_id}/versions")
        # Older deployments wrap the list in {"versions": [...]}.
        items = data.get("versions", []) if isinstance(data, dict) else data
        return self.parse(list[RegistryNodeVersion], items)

    async def get_node_version(self, node_id: str, version_id: str) -> RegistryNodeVersion:
        return self.parse(RegistryNodeVersion, await self.get_json(f"/nodes/{node_id}/versions/{version_id}"))

    async def get_node_install_data(self, node_id: str, version_id: str | None = None) -> RegistryInstallData:
        params = {"version": version_id} if version_id else None
        return self.parse(RegistryInstallData, await self.get_json(f"/nodes/{node_id}/install", params))

    async def get_popular_nodes(self, limit: int = 20) -> RegistrySearchResponse:
        return await self.list_nodes(RegistryListParams(limit=limit, latest=True))

    async def get_nodes_by_category(self, category: str, limit: int = DEFAULT_LIMIT) -> RegistrySearchResponse:
        return await self.search_nodes(RegistrySearchParams(search=category, limit=limit))

    async def search_entries(
        self,
        query: str | None = None,
        *,
        page: int = 1,
        limit: int = 20,
        cursor: str | None = None,
        include_banned: bool = False,
    ) -> CatalogPage:
        if query and query.strip():
            response = await self.search_nodes(
                RegistrySearchParams(page=page, limit=limit, search=query.strip(), include_banned=include_banned)
            )
        else:
            response = await self.list_nodes(
                RegistryListParams(page=page, limit=limit, include_banned=include_banned, latest=True)
            )

        page_size = response.limit or limit
        return CatalogPage(
            provider=self.provider,
            entries=[normalize_registry_node(node) for node in response.nodes],
            page=response.page,
            page_size=page_size,
            total=response.total,
            has_more=response.has_more or response.page * page_size < response.total,
        )

    async def get_entry(self, entry_id: str) -> NormalizedEntry:
        return normalize_registry_node(await self.get_node(entry_id))
