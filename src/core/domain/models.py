"""Domain models (Pydantic v2).

- `NormalizedEntry` is the common shape every catalog record is mapped to.
- These models describe *what* an entry is, not *how* it was fetched.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


class Provider(str, Enum):
    """Supported external catalogs."""

    CIVITAI = "civitai"
    HUGGINGFACE = "huggingface"
    COMFYUI_REGISTRY = "comfyui_registry"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return {
            Provider.CIVITAI: "CivitAI",
            Provider.HUGGINGFACE: "HuggingFace",
            Provider.COMFYUI_REGISTRY: "ComfyUI Registry",
        }[self]


class ModelType(str, Enum):
    """Internal taxonomy shared by every catalog."""

    CHECKPOINT = "CHECKPOINT"
    LORA = "LORA"
    CONTROLNET = "CONTROLNET"
    VAE = "VAE"
    UPSCALER = "UPSCALER"
    EMBEDDING = "EMBEDDING"
    HYPERNETWORK = "HYPERNETWORK"
    UNET = "UNET"
    CLIP = "CLIP"
    T2I_ADAPTER = "T2I_ADAPTER"
    IPADAPTER = "IPADAPTER"
    PREPROCESSOR = "PREPROCESSOR"
    ESRGAN = "ESRGAN"
    ULTRALYTICS_BBOX = "ULTRALYTICS_BBOX"
    ULTRALYTICS_SEGM = "ULTRALYTICS_SEGM"
    SAM = "SAM"
    INSIGHTFACE = "INSIGHTFACE"
    CLIP_VISION = "CLIP_VISION"
    STYLE_MODELS = "STYLE_MODELS"
    OTHER = "OTHER"
    CUSTOM_NODE = "CUSTOM_NODE"


class SafetyFlags(BaseModel):
    """Safety signals extracted from a catalog record."""

    model_config = ConfigDict(frozen=True)

    nsfw: bool = False
    poi: bool = Field(
        default=False,
        description="Depicts a real person (CivitAI 'person of interest').",
    )
    scan_passed: bool | None = Field(
        default=None,
        description="Pickle + virus scan both succeeded (None when the catalog does not scan).",
    )
    gated: bool = False
    banned: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_safe(self) -> bool:
        return not (self.nsfw or self.poi or self.banned)


class LicenseSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = None
    commercial_use: bool = False
    credit_required: bool | None = None
    derivatives_allowed: bool | None = None
    different_license_allowed: bool | None = None


class NormalizedEntry(BaseModel):
    """A catalog record mapped to the internal taxonomy.

    Derived and recomputed on every fetch; never persisted by this package.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    id: str = Field(..., min_length=1)
    name: str
    type: ModelType
    download_url: str | None = None
    file_name: str | None = None
    file_size_bytes: int | None = Field(default=None, ge=0)
    formatted_size: str = "Unknown"
    base_model: str | None = None
    version_id: str | None = None
    author: str | None = None
    tags: tuple[str, ...] = ()
    source_url: str | None = None
    thumbnail_url: str | None = None
    description: str | None = None
    safety: SafetyFlags = Field(default_factory=SafetyFlags)
    license: LicenseSummary = Field(default_factory=LicenseSummary)


class CatalogPage(BaseModel):
    """One page of normalized results plus the provider's pagination state."""

    provider: Provider
    entries: list[NormalizedEntry] = Field(default_factory=list)
    page: int | None = None
    page_size: int | None = None
    total: int | None = None
    next_cursor: str | None = None
    has_more: bool = False
