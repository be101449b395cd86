"""ComfyUI Registry records (`https://api.comfy.org`)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.models import Provider

_RECORD_CONFIG = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RegistryPublisher(BaseModel):
    model_config = _RECORD_CONFIG

    name: str | None = None
    avatar: str | None = None


class RegistryLatestVersion(BaseModel):
    model_config = _RECORD_CONFIG

    id: str | None = None
    version: str | None = None
    description: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")


class RegistryVersionFile(BaseModel):
    model_config = _RECORD_CONFIG

    name: str
    url: str
    size: int = 0
    hash: str | None = None


class RegistryDependencies(BaseModel):
    model_config = _RECORD_CONFIG

    pip_packages: tuple[str, ...] = ()
    node_dependencies: tuple[str, ...] = ()


class RegistryNode(BaseModel):
    model_config = _RECORD_CONFIG

    provider: Literal[Provider.COMFYUI_REGISTRY] = Provider.COMFYUI_REGISTRY
    id: str
    name: str
    category: str | None = None
    description: str | None = None
    author: str | None = None
    repository: str | None = None
    tags: tuple[str, ...] = ()
    publisher: RegistryPublisher | None = None
    status: str | None = None
    downloads: int | None = None
    latest_version: RegistryLatestVersion | None = None
    created_at: str | None = None
    updated_at: str | None = None


class RegistryNodeVersion(BaseModel):
    model_config = _RECORD_CONFIG

    id: str
    version: str
    description: str | None = None
    changelog: str | None = None
    files: tuple[RegistryVersionFile, ...] = ()
    dependencies: RegistryDependencies | None = None
    created_at: str | None = Field(default=None, alias="createdAt")


class RegistryInstallFile(BaseModel):
    model_config = _RECORD_CONFIG

    name: str
    content: str = ""


class RegistryInstallData(BaseModel):
    model_config = _RECORD_CONFIG

    node_id: str
    name: str
    repository: str | None = None
    branch: str | None = None
    install_type: str = "git"
    files: tuple[RegistryInstallFile, ...] = ()
    dependencies: RegistryDependencies | None = None


class RegistrySearchResponse(BaseModel):
    model_config = _RECORD_CONFIG

    nodes: tuple[RegistryNode, ...] = ()
    total: int = 0
    page: int = 1
    limit: int | None = None
    has_more: bool = False


class RegistrySearchParams(BaseModel):
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)
    search: str | None = None
    include_banned: bool = False


class RegistryListParams(BaseModel):
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)
    include_banned: bool = False
    timestamp: str | None = None
    latest: bool | None = None
