"""Import drafts for the back-office catalog.

Turns a fetched record into the row the admin import would store: target
version/file, install path, verification flag, creator and license
details. Nothing is persisted here; duplicate detection and storage
belong to the caller.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict, Field

from core.domain.civitai import CivitAIModel
from core.domain.errors import ImportPlanError
from core.domain.huggingface import HuggingFaceModel
from core.domain.models import LicenseSummary, ModelType, Provider
from core.domain.registry import RegistryInstallData, RegistryNode
from core.services.normalizer import (
    CIVITAI_SITE_URL,
    HUGGINGFACE_SITE_URL,
    REGISTRY_SITE_URL,
    civitai_primary_file,
    civitai_scan_passed,
    civitai_select_version,
    extract_github_url,
    format_file_size,
    huggingface_base_model,
    huggingface_license,
    huggingface_model_type,
    huggingface_primary_file,
    huggingface_resolve_url,
    is_node_safe,
    kb_to_bytes,
    map_civitai_type,
    node_author,
)

logger = logging.getLogger(__name__)

DEFAULT_TARGET_PATH = "models/other"

TARGET_PATHS: dict[ModelType, str] = {
    ModelType.CHECKPOINT: "models/checkpoints",
    ModelType.LORA: "models/loras",
    ModelType.CONTROLNET: "models/controlnet",
    ModelType.VAE: "models/vae",
    ModelType.UPSCALER: "models/upscale_models",
    ModelType.EMBEDDING: "embeddings",
    ModelType.HYPERNETWORK: "models/hypernetworks",
    ModelType.UNET: "models/unet",
    ModelType.CLIP: "models/clip",
    ModelType.T2I_ADAPTER: "models/t2i_adapter",
    ModelType.IPADAPTER: "models/ipadapter",
    ModelType.PREPROCESSOR: "models/preprocessors",
    ModelType.ESRGAN: "models/upscale_models",
    ModelType.ULTRALYTICS_BBOX: "models/ultralytics/bbox",
    ModelType.ULTRALYTICS_SEGM: "models/ultralytics/segm",
    ModelType.SAM: "models/sam",
    ModelType.INSIGHTFACE: "models/insightface",
    ModelType.CLIP_VISION: "models/clip_vision",
    ModelType.STYLE_MODELS: "models/style_models",
    ModelType.OTHER: DEFAULT_TARGET_PATH,
}


class ModelVersionDraft(BaseModel):
    model_config = ConfigDict(frozen=True)

    version_id: str
    name: str | None = None
    download_url: str | None = None
    file_name: str | None = None
    file_size: str | None = None
    sha256: str | None = None
    base_model: str | None = None
    is_latest: bool = False
    released_at: str | None = None


class ModelImportDraft(BaseModel):
    """Model row ready to be stored by the back-office."""

    model_config = ConfigDict(frozen=True)

    source: Provider
    source_id: str
    source_url: str
    name: str
    description: str | None = None
    file_name: str
    type: ModelType
    target_path: str
    category: str | None = None
    base_model: str | None = None
    download_url: str
    file_size: str | None = None
    auth_required: bool = False
    creator_name: str | None = None
    creator_url: str | None = None
    current_version: str | None = None
    version_name: str | None = None
    license: LicenseSummary = Field(default_factory=LicenseSummary)
    tags: tuple[str, ...] = ()
    versions: tuple[ModelVersionDraft, ...] = ()
    is_verified: bool = False


class CustomNodeImportDraft(BaseModel):
    """Custom node row ready to be stored by the back-office."""

    model_config = ConfigDict(frozen=True)

    registry_id: str
    registry_url: str
    name: str
    github_url: str
    branch: str = "main"
    description: str | None = None
    author: str | None = None
    category: str | None = None
    install_type: str = "git"
    pip_requirements: tuple[str, ...] = ()
    js_files: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    is_verified: bool = False


def target_path_for(model_type: ModelType, override: str | None = None) -> str:
    if override:
        return override
    return TARGET_PATHS.get(model_type, DEFAULT_TARGET_PATH)


def plan_civitai_import(
    model: CivitAIModel,
    version_id: int | str | None = None,
    target_path: str | None = None,
) -> ModelImportDraft:
    version = civitai_select_version(model, version_id)
    if version is None:
        raise ImportPlanError(
            f"Model version not found for CivitAI model {model.id}",
            provider=Provider.CIVITAI.value,
        )

    primary = civitai_primary_file(version)
    if primary is None or not primary.download_url:
        raise ImportPlanError(
            f"No downloadable file found for CivitAI model {model.id}",
            provider=Provider.CIVITAI.value,
        )

    model_type = map_civitai_type(model.type)
    creator = model.creator.username if model.creator is not None else None
    logger.debug("Planning CivitAI import model=%s version=%s file=%s", model.id, version.id, primary.name)

    versions = []
    for index, item in enumerate(model.model_versions):
        first = item.files[0] if item.files else None
        versions.append(
            ModelVersionDraft(
                version_id=str(item.id),
                name=item.name or None,
                download_url=first.download_url if first is not None else None,
                file_name=first.name if first is not None else None,
                file_size=format_file_size(kb_to_bytes(first.size_kb)) if first is not None else None,
                sha256=first.hashes.sha256 if first is not None else None,
                base_model=item.base_model,
                is_latest=index == 0,
                released_at=item.created_at,
            )
        )

    return ModelImportDraft(
        source=Provider.CIVITAI,
        source_id=str(model.id),
        source_url=f"{CIVITAI_SITE_URL}/models/{model.id}",
        name=model.name,
        description=model.description or version.description,
        file_name=primary.name,
        type=model_type,
        target_path=target_path_for(model_type, target_path),
        category=model.tags[0] if model.tags else None,
        base_model=version.base_model,
        download_url=primary.download_url,
        file_size=format_file_size(kb_to_bytes(primary.size_kb)),
        creator_name=creator,
        creator_url=f"{CIVITAI_SITE_URL}/user/{creator}" if creator else None,
        current_version=str(version.id),
        version_name=version.name or None,
        license=LicenseSummary(
            commercial_use="Sell" in model.commercial_use_values,
            credit_required=not model.allow_no_credit,
            derivatives_allowed=model.allow_derivatives,
            different_license_allowed=model.allow_different_license,
        ),
        tags=tuple(model.tags),
        versions=tuple(versions),
        is_verified=bool(civitai_scan_passed(primary)),
    )


def plan_huggingface_import(
    model: HuggingFaceModel,
    filename: str | None = None,
    target_path: str | None = None,
    site_url: str = HUGGINGFACE_SITE_URL,
) -> ModelImportDraft:
    if filename:
        primary = next((f for f in model.siblings if f.rfilename == filename), None)
    else:
        primary = huggingface_primary_file(model)
    if primary is None:
        raise ImportPlanError(
            f"No downloadable file found for HuggingFace model {model.id}",
            provider=Provider.HUGGINGFACE.value,
        )

    model_type = huggingface_model_type(model)
    size = primary.effective_size
    site_url = site_url.rstrip("/")

    return ModelImportDraft(
        source=Provider.HUGGINGFACE,
        source_id=model.id,
        source_url=f"{site_url}/{model.id}",
        name=model.id,
        file_name=primary.rfilename,
        type=model_type,
        target_path=target_path_for(model_type, target_path),
        category=model.pipeline_tag,
        base_model=huggingface_base_model(model),
        download_url=huggingface_resolve_url(model.id, primary.rfilename, site_url),
        file_size=format_file_size(size) if size else None,
        auth_required=model.is_gated,
        creator_name=model.author,
        creator_url=f"{site_url}/{model.author}" if model.author else None,
        current_version=model.sha,
        license=huggingface_license(model),
        tags=tuple(model.tags),
        is_verified=not model.is_gated and not model.disabled,
    )


def plan_registry_import(
    node: RegistryNode,
    install: RegistryInstallData | None = None,
) -> CustomNodeImportDraft:
    """Custom node draft; `install` is optional and falls back to git/main."""

    github_url = extract_github_url(node.repository)
    if not github_url:
        raise ImportPlanError(
            f"Node {node.id} does not have a valid GitHub repository URL",
            provider=Provider.COMFYUI_REGISTRY.value,
        )

    pip_requirements: tuple[str, ...] = ()
    js_files: tuple[str, ...] = ()
    branch = "main"
    install_type = "git"
    if install is not None:
        branch = install.branch or branch
        install_type = install.install_type or install_type
        js_files = tuple(f.name for f in install.files)
        if install.dependencies is not None:
            pip_requirements = install.dependencies.pip_packages

    return CustomNodeImportDraft(
        registry_id=node.id,
        registry_url=f"{REGISTRY_SITE_URL}/nodes/{node.id}",
        name=node.name,
        github_url=github_url,
        branch=branch,
        description=node.description,
        author=node_author(node),
        category=node.category,
        install_type=install_type,
        pip_requirements=pip_requirements,
        js_files=js_files,
        tags=tuple(node.tags),
        is_verified=is_node_safe(node),
    )
