"""Catalog source: HuggingFace Hub (`https://huggingface.co/api`).

- Offset/limit pagination: `skip = (page - 1) * limit`.
- Model cards are fetched as raw README text from the site, not the API.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from adapters.catalog_client import CatalogHttpClient
from adapters.rate_limiter import SlidingWindowRateLimiter
from core.config import AppSettings
from core.domain.errors import NotFoundError
from core.domain.huggingface import (
    HuggingFaceDownloadInfo,
    HuggingFaceFile,
    HuggingFaceModel,
    HuggingFaceModelCard,
    HuggingFaceSearchParams,
)
from core.domain.models import CatalogPage, NormalizedEntry, Provider
from core.interfaces.catalog import CatalogSource
from core.services.normalizer import huggingface_resolve_url, normalize_huggingface_model

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 20

_FRONTMATTER_RE = re.compile(r"^---\r?\n(.*?)\r?\n---", re.DOTALL)
_FRONTMATTER_LINE_RE = re.compile(r"^([^:]+):\s*(.+)$")


def build_search_params(params: HuggingFaceSearchParams) -> dict[str, Any]:
    """Translate search options into Hub query parameters.

    Downloads can only be sorted descending and trending takes no
    direction; unknown sorts fall back to downloads.
    """

    limit = params.limit or DEFAULT_LIMIT
    search: dict[str, Any] = {
        "search": params.search,
        "author": params.author,
        "filter": params.filter,
        "limit": limit,
        "skip": (params.page - 1) * limit if params.page else 0,
        "full": params.full,
        "config": params.config,
    }

    sort = params.sort or "downloads"
    descending = -1 if params.direction != "asc" else 1
    if sort in ("likes", "lastModified"):
        search["sort"] = sort
        search["direction"] = descending
    elif sort == "trending":
        search["sort"] = "trending"
    else:
        search["sort"] = "downloads"
        search["direction"] = -1
    return search


def parse_frontmatter(content: str) -> dict[str, Any]:
    """Flat `key: value` pairs from a README's YAML frontmatter.

    Values that parse as JSON (numbers, booleans, inline lists) are
    decoded; anything else is kept as a string. Nested YAML is not
    interpreted.
    """

    match = _FRONTMATTER_RE.match(content)
    if not match:
        return {}

    metadata: dict[str, Any] = {}
    for line in match.group(1).splitlines():
        line_match = _FRONTMATTER_LINE_RE.match(line)
        if not line_match:
            continue
        key, value = line_match.group(1).strip(), line_match.group(2).strip()
        try:
            metadata[key] = json.loads(value)
        except ValueError:
            metadata[key] = value
    return metadata


class HuggingFaceClient(CatalogHttpClient, CatalogSource):
    """HuggingFace Hub client (1000 requests/hour by default)."""

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
            settings.huggingface_base_url,
            token,
            provider=Provider.HUGGINGFACE,
            limiter=limiter
            or SlidingWindowRateLimiter(settings.huggingface_max_requests, settings.huggingface_window_seconds),
            settings=settings,
            client=client,
        )
        self.site_url = settings.huggingface_site_url.rstrip("/")

    async def search_models(self, params: HuggingFaceSearchParams | None = None) -> list[HuggingFaceModel]:
        data = await self.get_json("/models", build_search_params(params or HuggingFaceSearchParams()))
        return self.parse(list[HuggingFaceModel], data)

    async def get_model(self, model_id: str) -> HuggingFaceModel:
        # File sizes and LFS hashes are only included with `blobs=true`.
        data = await self.get_json(f"/models/{model_id}", {"blobs": True})
        return self.parse(HuggingFaceModel, data)

    async def get_model_card(self, model_id: str) -> HuggingFaceModelCard:
        content = await self.get_text(f"{self.site_url}/{model_id}/raw/main/README.md")
        return HuggingFaceModelCard(content=content, metadata=parse_frontmatter(content))

    async def get_model_files(self, model_id: str) -> list[HuggingFaceFile]:
        model = await self.get_model(model_id)
        return list(model.siblings)

    async def get_download_info(self, model_id: str, filename: str) -> HuggingFaceDownloadInfo:
        model = await self.get_model(model_id)
        file = next((f for f in model.siblings if f.rfilename == filename), None)
        if file is None:
            raise NotFoundError(
                f"File {filename} not found in model {model_id}",
                provider=self.provider.value,
                status=404,
            )

        return HuggingFaceDownloadInfo(
            download_url=huggingface_resolve_url(model_id, file.rfilename, self.site_url),
            filename=file.rfilename,
            size=file.effective_size,
            sha256=file.lfs.sha256 if file.lfs is not None else None,
            requires_auth=model.is_gated,
        )

    async def search_diffusion_models(self, query: str | None = None) -> list[HuggingFaceModel]:
        return await self.search_models(HuggingFaceSearchParams(search=query, filter="diffusers", sort="downloads"))

    async def search_transformers_models(self, query: str | None = None, task: str | None = None) -> list[HuggingFaceModel]:
        model_filter = f"transformers,{task}" if task else "transformers"
        return await self.search_models(HuggingFaceSearchParams(search=query, filter=model_filter, sort="downloads"))

    async def search_by_library(self, library: str, query: str | None = None) -> list[HuggingFaceModel]:
        return await self.search_models(HuggingFaceSearchParams(search=query, filter=library, sort="downloads"))

    async def get_trending_models(self, limit: int = 20) -> list[HuggingFaceModel]:
        return await self.search_models(HuggingFaceSearchParams(sort="trending", limit=limit))

    async def get_models_by_author(self, author: str, limit: int = 20) -> list[HuggingFaceModel]:
        return await self.search_models(HuggingFaceSearchParams(author=author, limit=limit, sort="downloads"))

    async def search_entries(
        self,
        query: str | None = None,
        *,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        cursor: str | None = None,
    ) -> CatalogPage:
        models = await self.search_models(HuggingFaceSearchParams(search=query or None, page=page, limit=limit))
        return CatalogPage(
            provider=self.provider,
            entries=[normalize_huggingface_model(model, site_url=self.site_url) for model in models],
            page=page,
            page_size=limit,
            # The Hub does not report totals; a full page means there may be more.
            has_more=len(models) >= limit,
        )

    async def get_entry(self, entry_id: str) -> NormalizedEntry:
        return normalize_huggingface_model(await self.get_model(entry_id), site_url=self.site_url)
