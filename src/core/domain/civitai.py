"""CivitAI records as returned by `https://civitai.com/api/v1`.

Upstream uses camelCase; fields are snake_case with aliases. Unknown
fields are ignored so catalog additions never break parsing.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import Provider

_RECORD_CONFIG = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class CivitAIStats(BaseModel):
    model_config = _RECORD_CONFIG

    download_count: int = Field(default=0, alias="downloadCount")
    favorite_count: int = Field(default=0, alias="favoriteCount")
    comment_count: int = Field(default=0, alias="commentCount")
    rating_count: int = Field(default=0, alias="ratingCount")
    rating: float = 0.0


class CivitAICreator(BaseModel):
    model_config = _RECORD_CONFIG

    username: str | None = None
    image: str | None = None


class CivitAIHashes(BaseModel):
    model_config = _RECORD_CONFIG

    auto_v1: str | None = Field(default=None, alias="AutoV1")
    auto_v2: str | None = Field(default=None, alias="AutoV2")
    sha256: str | None = Field(default=None, alias="SHA256")
    crc32: str | None = Field(default=None, alias="CRC32")
    blake3: str | None = Field(default=None, alias="BLAKE3")


class CivitAIFile(BaseModel):
    model_config = _RECORD_CONFIG

    id: int | None = None
    name: str = ""
    size_kb: float = Field(default=0.0, alias="sizeKB")
    type: str | None = None
    format: str | None = None
    pickle_scan_result: str | None = Field(default=None, alias="pickleScanResult")
    pickle_scan_message: str | None = Field(default=None, alias="pickleScanMessage")
    virus_scan_result: str | None = Field(default=None, alias="virusScanResult")
    virus_scan_message: str | None = Field(default=None, alias="virusScanMessage")
    scanned_at: str | None = Field(default=None, alias="scannedAt")
    hashes: CivitAIHashes = Field(default_factory=CivitAIHashes)
    download_url: str | None = Field(default=None, alias="downloadUrl")
    primary: bool = False


class CivitAIImageMeta(BaseModel):
    model_config = _RECORD_CONFIG

    prompt: str | None = None
    negative_prompt: str | None = Field(default=None, alias="negativePrompt")
    seed: int | None = None
    steps: int | None = None
    sampler: str | None = None
    cfg_scale: float | None = Field(default=None, alias="cfgScale")
    model: str | None = None


class CivitAIImage(BaseModel):
    model_config = _RECORD_CONFIG

    id: int | None = None
    url: str
    # Upstream sends "None" / "Soft" / "Mature" / "X" (older payloads send a bool).
    nsfw: str | bool | None = None
    width: int | None = None
    height: int | None = None
    hash: str | None = None
    type: str | None = None
    meta: CivitAIImageMeta | None = None


class CivitAIModelVersion(BaseModel):
    model_config = _RECORD_CONFIG

    provider: Literal[Provider.CIVITAI] = Provider.CIVITAI
    id: int
    model_id: int | None = Field(default=None, alias="modelId")
    name: str = ""
    description: str | None = None
    base_model: str | None = Field(default=None, alias="baseModel")
    files: tuple[CivitAIFile, ...] = ()
    images: tuple[CivitAIImage, ...] = ()
    download_url: str | None = Field(default=None, alias="downloadUrl")
    trained_words: tuple[str, ...] = Field(default=(), alias="trainedWords")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class CivitAIModel(BaseModel):
    model_config = _RECORD_CONFIG

    provider: Literal[Provider.CIVITAI] = Provider.CIVITAI
    id: int
    name: str
    description: str | None = None
    type: str = "Other"
    poi: bool = False
    nsfw: bool = False
    allow_no_credit: bool = Field(default=True, alias="allowNoCredit")
    allow_commercial_use: tuple[str, ...] | str = Field(default=(), alias="allowCommercialUse")
    allow_derivatives: bool = Field(default=True, alias="allowDerivatives")
    allow_different_license: bool = Field(default=True, alias="allowDifferentLicense")
    stats: CivitAIStats = Field(default_factory=CivitAIStats)
    creator: CivitAICreator | None = None
    tags: tuple[str, ...] = ()
    model_versions: tuple[CivitAIModelVersion, ...] = Field(default=(), alias="modelVersions")

    @property
    def commercial_use_values(self) -> tuple[str, ...]:
        """`allowCommercialUse` is a list today but a single string in older payloads."""

        value = self.allow_commercial_use
        if isinstance(value, str):
            return (value,) if value and value != "None" else ()
        return tuple(v for v in value if v and v != "None")


class CivitAISearchMetadata(BaseModel):
    model_config = _RECORD_CONFIG

    total_items: int | None = Field(default=None, alias="totalItems")
    current_page: int | None = Field(default=None, alias="currentPage")
    page_size: int | None = Field(default=None, alias="pageSize")
    total_pages: int | None = Field(default=None, alias="totalPages")
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    next_page: str | None = Field(default=None, alias="nextPage")
    prev_page: str | None = Field(default=None, alias="prevPage")


class CivitAISearchResponse(BaseModel):
    model_config = _RECORD_CONFIG

    items: tuple[CivitAIModel, ...] = ()
    metadata: CivitAISearchMetadata = Field(default_factory=CivitAISearchMetadata)


class CivitAITag(BaseModel):
    model_config = _RECORD_CONFIG

    name: str
    model_count: int | None = Field(default=None, alias="modelCount")
    link: str | None = None


class CivitAISearchParams(BaseModel):
    """Query options for `GET /models`."""

    limit: int | None = Field(default=None, ge=1, le=200)
    page: int | None = Field(default=None, ge=1)
    cursor: str | None = None
    query: str | None = None
    tag: str | None = None
    username: str | None = None
    types: list[str] | None = None
    sort: Literal["Highest Rated", "Most Downloaded", "Newest", "Most Liked", "Most Discussed"] | None = None
    period: Literal["AllTime", "Year", "Month", "Week", "Day"] | None = None
    rating: int | None = None
    favorites: bool | None = None
    hidden: bool | None = None
    primary_file_only: bool | None = None
    allow_no_credit: bool | None = None
    allow_derivatives: bool | None = None
    allow_different_licenses: bool | None = None
    allow_commercial_use: list[str] | None = None
    nsfw: bool | None = None
    supports_generation: bool | None = None
    base_models: list[str] | None = None
