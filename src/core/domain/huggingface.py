"""HuggingFace Hub records (`https://huggingface.co/api`)."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import Provider

_RECORD_CONFIG = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class HuggingFaceLfs(BaseModel):
    model_config = _RECORD_CONFIG

    size: int = 0
    sha256: str | None = None
    pointer_size: int | None = Field(
        default=None,
        validation_alias=AliasChoices("pointer_size", "pointerSize"),
    )


class HuggingFaceFile(BaseModel):
    model_config = _RECORD_CONFIG

    rfilename: str
    size: int | None = None
    blob_id: str | None = Field(default=None, validation_alias=AliasChoices("blob_id", "blobId"))
    lfs: HuggingFaceLfs | None = None

    @property
    def effective_size(self) -> int:
        if self.size:
            return self.size
        if self.lfs is not None:
            return self.lfs.size
        return 0


class HuggingFaceCardData(BaseModel):
    model_config = _RECORD_CONFIG

    language: list[str] | str | None = None
    license: str | None = None
    datasets: list[str] | str | None = None
    model_name: str | None = None
    # A model card may list several bases; the first one wins when normalizing.
    base_model: list[str] | str | None = None
    inference: bool | dict[str, Any] | None = None


class HuggingFaceSafetensors(BaseModel):
    model_config = _RECORD_CONFIG

    parameters: dict[str, int] = Field(default_factory=dict)
    total: int = 0


class HuggingFaceModel(BaseModel):
    """Search item and model-info payload (the API returns the same shape)."""

    model_config = _RECORD_CONFIG

    provider: Literal[Provider.HUGGINGFACE] = Provider.HUGGINGFACE
    id: str = Field(..., validation_alias=AliasChoices("id", "modelId"))
    author: str | None = None
    sha: str | None = None
    last_modified: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lastModified", "last_modified"),
    )
    created_at: str | None = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    private: bool = False
    disabled: bool = False
    # `false`, `true`, or a gating mode such as "auto" / "manual".
    gated: bool | str = False
    downloads: int = 0
    likes: int = 0
    library_name: str | None = None
    tags: tuple[str, ...] = ()
    pipeline_tag: str | None = None
    card_data: HuggingFaceCardData | None = Field(
        default=None,
        validation_alias=AliasChoices("cardData", "card_data"),
    )
    siblings: tuple[HuggingFaceFile, ...] = ()
    spaces: tuple[str, ...] = ()
    safetensors: HuggingFaceSafetensors | None = None

    @property
    def is_gated(self) -> bool:
        return self.gated is not False and self.gated != ""


class HuggingFaceModelCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class HuggingFaceDownloadInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    download_url: str
    filename: str
    size: int = 0
    sha256: str | None = None
    requires_auth: bool = False


class HuggingFaceSearchParams(BaseModel):
    """Query options for `GET /models`."""

    search: str | None = None
    author: str | None = None
    filter: str | None = None
    sort: str | None = None
    direction: Literal["asc", "desc"] | None = None
    limit: int | None = Field(default=None, ge=1, le=100)
    page: int | None = Field(default=None, ge=1)
    full: bool = True
    config: bool = True
