"""Catalog record normalization.

Maps CivitAI / HuggingFace / ComfyUI Registry records into
`NormalizedEntry`. Every function here is pure: same record in, same
entry out, no I/O.
"""

from __future__ import annotations

from typing import Union

from bs4 import BeautifulSoup

from core.domain.civitai import CivitAIFile, CivitAIModel, CivitAIModelVersion
from core.domain.huggingface import HuggingFaceFile, HuggingFaceModel
from core.domain.models import LicenseSummary, ModelType, NormalizedEntry, SafetyFlags
from core.domain.registry import RegistryNode

CatalogRecord = Union[CivitAIModel, HuggingFaceModel, RegistryNode]

CIVITAI_SITE_URL = "https://civitai.com"
HUGGINGFACE_SITE_URL = "https://huggingface.co"
REGISTRY_SITE_URL = "https://registry.comfy.org"

CIVITAI_TYPE_MAP: dict[str, ModelType] = {
    "Checkpoint": ModelType.CHECKPOINT,
    "LORA": ModelType.LORA,
    "LoCon": ModelType.LORA,
    "LoHa": ModelType.LORA,
    "DoRA": ModelType.LORA,
    "ControlNet": ModelType.CONTROLNET,
    "TextualInversion": ModelType.EMBEDDING,
    "Hypernetwork": ModelType.HYPERNETWORK,
    "VAE": ModelType.VAE,
    "Upscaler": ModelType.UPSCALER,
    "AestheticGradient": ModelType.OTHER,
    "Poses": ModelType.OTHER,
    "Wildcards": ModelType.OTHER,
    "Workflows": ModelType.OTHER,
    "Other": ModelType.OTHER,
}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

_HF_MODEL_EXTENSIONS = (".safetensors", ".bin", ".ckpt", ".pt", ".pth")
_HF_NON_MODEL_MARKERS = ("config", "tokenizer", ".json", ".txt", "README")

_HF_BASE_MODEL_TAGS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("sd-1-5", "stable-diffusion-1-5"), "SD 1.5"),
    (("sdxl", "stable-diffusion-xl"), "SDXL 1.0"),
    (("sd-2-1", "stable-diffusion-2-1"), "SD 2.1"),
    (("sd3", "stable-diffusion-3"), "SD 3.0"),
)

COMMERCIAL_LICENSES = (
    "apache-2.0",
    "mit",
    "bsd",
    "cc-by-4.0",
    "openrail",
    "creativeml-openrail-m",
)

_UNSAFE_NODE_STATUSES = {"banned", "suspended"}

_PREVIEW_LIMIT = 200


# --- display helpers -------------------------------------------------------


def format_file_size(size_bytes: int | float | None) -> str:
    """Human readable size: `0 -> "Unknown"`, `1024 -> "1 KB"`, `1536 -> "1.5 KB"`."""

    if not size_bytes or size_bytes <= 0:
        return "Unknown"

    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def kb_to_bytes(size_kb: float | None) -> int | None:
    if not size_kb or size_kb <= 0:
        return None
    return int(round(size_kb * 1024))


def html_to_text(html: str | None) -> str:
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(separator=" ", strip=True)


def description_preview(text: str | None, limit: int = _PREVIEW_LIMIT) -> str | None:
    """Cap `text` at `limit` characters, ending in `...` when cut."""

    if not text:
        return None
    text = text.strip()
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


def extract_github_url(repository: str | None) -> str | None:
    """Canonical `https://github.com/<owner>/<repo>` for the registry's repository field."""

    if not repository:
        return None
    repository = repository.strip()

    if repository.startswith("https://github.com/"):
        return repository
    if repository.startswith("git@github.com:"):
        url = repository.replace("git@github.com:", "https://github.com/", 1)
        return url.removesuffix(".git")
    # Short form "owner/repo"; a dotted owner is a host name, not a GitHub user.
    owner, sep, repo = repository.partition("/")
    if sep and owner and repo and "/" not in repo and "." not in owner and ":" not in owner:
        return f"https://github.com/{owner}/{repo.removesuffix('.git')}"
    return None


# --- CivitAI ---------------------------------------------------------------


def map_civitai_type(civitai_type: str | None) -> ModelType:
    if not civitai_type:
        return ModelType.OTHER
    return CIVITAI_TYPE_MAP.get(civitai_type, ModelType.OTHER)


def civitai_primary_file(version: CivitAIModelVersion | None) -> CivitAIFile | None:
    """File flagged `primary`, else the first file, else None."""

    if version is None or not version.files:
        return None
    for file in version.files:
        if file.primary:
            return file
    return version.files[0]


def civitai_select_version(model: CivitAIModel, version_id: int | str | None = None) -> CivitAIModelVersion | None:
    """Requested version, or the latest (first listed) one."""

    if not model.model_versions:
        return None
    if version_id is None:
        return model.model_versions[0]
    for version in model.model_versions:
        if str(version.id) == str(version_id):
            return version
    return None


def civitai_thumbnail(model: CivitAIModel) -> str | None:
    """First SFW image of the latest version, falling back to its first image."""

    if not model.model_versions:
        return None
    images = model.model_versions[0].images
    if not images:
        return None
    for image in images:
        if image.nsfw == "None" or image.nsfw is False:
            return image.url
    return images[0].url


def civitai_scan_passed(file: CivitAIFile | None) -> bool | None:
    if file is None:
        return None
    return file.pickle_scan_result == "Success" and file.virus_scan_result == "Success"


def is_civitai_model_safe(model: CivitAIModel) -> bool:
    return not model.nsfw and not model.poi


def civitai_safety(model: CivitAIModel, primary_file: CivitAIFile | None = None) -> SafetyFlags:
    return SafetyFlags(
        nsfw=model.nsfw,
        poi=model.poi,
        scan_passed=civitai_scan_passed(primary_file),
    )


def civitai_license(model: CivitAIModel) -> LicenseSummary:
    return LicenseSummary(
        commercial_use=bool(model.commercial_use_values),
        credit_required=not model.allow_no_credit,
        derivatives_allowed=model.allow_derivatives,
        different_license_allowed=model.allow_different_license,
    )


def civitai_model_url(model_id: int | str, version_id: int | str | None = None) -> str:
    url = f"{CIVITAI_SITE_URL}/models/{model_id}"
    if version_id is not None:
        url += f"?modelVersionId={version_id}"
    return url


def normalize_civitai_model(model: CivitAIModel, version_id: int | str | None = None) -> NormalizedEntry:
    version = civitai_select_version(model, version_id)
    primary = civitai_primary_file(version)

    download_url = None
    if primary is not None and primary.download_url:
        download_url = primary.download_url
    elif version is not None:
        download_url = version.download_url

    size_bytes = kb_to_bytes(primary.size_kb) if primary is not None else None
    pinned_version = version.id if version is not None and version_id is not None else None

    return NormalizedEntry(
        provider=model.provider,
        id=str(model.id),
        name=model.name,
        type=map_civitai_type(model.type),
        download_url=download_url,
        file_name=primary.name if primary is not None and primary.name else None,
        file_size_bytes=size_bytes,
        formatted_size=format_file_size(size_bytes),
        base_model=version.base_model if version is not None else None,
        version_id=str(version.id) if version is not None else None,
        author=model.creator.username if model.creator is not None else None,
        tags=tuple(model.tags),
        source_url=civitai_model_url(model.id, pinned_version),
        thumbnail_url=civitai_thumbnail(model),
        description=description_preview(html_to_text(model.description)),
        safety=civitai_safety(model, primary),
        license=civitai_license(model),
    )


# --- HuggingFace -----------------------------------------------------------


def is_stable_diffusion_model(model: HuggingFaceModel) -> bool:
    tags = {tag.lower() for tag in model.tags}
    return (
        "stable-diffusion" in tags
        or "diffusion" in tags
        or "text-to-image" in tags
        or model.pipeline_tag == "text-to-image"
        or model.library_name == "diffusers"
    )


def huggingface_model_type(model: HuggingFaceModel) -> ModelType:
    if is_stable_diffusion_model(model):
        tags = [tag.lower() for tag in model.tags]
        if any("lora" in tag for tag in tags):
            return ModelType.LORA
        if any("controlnet" in tag for tag in tags):
            return ModelType.CONTROLNET
        if any("vae" in tag for tag in tags):
            return ModelType.VAE
        return ModelType.CHECKPOINT
    return ModelType.OTHER


def huggingface_base_model(model: HuggingFaceModel) -> str | None:
    tags = {tag.lower() for tag in model.tags}
    for aliases, label in _HF_BASE_MODEL_TAGS:
        if any(alias in tags for alias in aliases):
            return label

    if model.card_data is not None and model.card_data.base_model:
        base = model.card_data.base_model
        if isinstance(base, list):
            return base[0] if base else None
        return base
    return None


def huggingface_primary_file(model: HuggingFaceModel) -> HuggingFaceFile | None:
    """First root-level weights file by extension preference, else first non-config file."""

    for ext in _HF_MODEL_EXTENSIONS:
        for file in model.siblings:
            if file.rfilename.endswith(ext) and "/" not in file.rfilename:
                return file

    for file in model.siblings:
        if not any(marker in file.rfilename for marker in _HF_NON_MODEL_MARKERS):
            return file
    return None


def huggingface_license_name(model: HuggingFaceModel) -> str:
    if model.card_data is not None and model.card_data.license:
        return model.card_data.license
    return "Unknown"


def is_commercial_license(license_name: str | None) -> bool:
    if not license_name:
        return False
    lowered = license_name.lower()
    return any(candidate in lowered for candidate in COMMERCIAL_LICENSES)


def huggingface_license(model: HuggingFaceModel) -> LicenseSummary:
    name = huggingface_license_name(model)
    return LicenseSummary(name=name, commercial_use=is_commercial_license(name))


def huggingface_resolve_url(model_id: str, filename: str, site_url: str = HUGGINGFACE_SITE_URL) -> str:
    return f"{site_url.rstrip('/')}/{model_id}/resolve/main/{filename}"


def normalize_huggingface_model(
    model: HuggingFaceModel,
    filename: str | None = None,
    site_url: str = HUGGINGFACE_SITE_URL,
) -> NormalizedEntry:
    if filename is not None:
        primary = next((f for f in model.siblings if f.rfilename == filename), None)
    else:
        primary = huggingface_primary_file(model)

    size_bytes = primary.effective_size if primary is not None and primary.effective_size else None
    author = model.author
    if not author and "/" in model.id:
        author = model.id.split("/", 1)[0]

    return NormalizedEntry(
        provider=model.provider,
        id=model.id,
        name=model.id,
        type=huggingface_model_type(model),
        download_url=huggingface_resolve_url(model.id, primary.rfilename, site_url) if primary is not None else None,
        file_name=primary.rfilename if primary is not None else None,
        file_size_bytes=size_bytes,
        formatted_size=format_file_size(size_bytes),
        base_model=huggingface_base_model(model),
        version_id=model.sha,
        author=author,
        tags=tuple(model.tags),
        source_url=f"{site_url.rstrip('/')}/{model.id}",
        safety=SafetyFlags(gated=model.is_gated, banned=model.disabled),
        license=huggingface_license(model),
    )


# --- ComfyUI Registry ------------------------------------------------------


def is_node_safe(node: RegistryNode) -> bool:
    # The live API spells statuses "NodeStatusBanned"; older payloads use "banned".
    status = (node.status or "").lower().removeprefix("nodestatus")
    return status not in _UNSAFE_NODE_STATUSES


def node_author(node: RegistryNode) -> str | None:
    if node.author:
        return node.author
    if node.publisher is not None and node.publisher.name:
        return node.publisher.name
    return None


def normalize_registry_node(node: RegistryNode) -> NormalizedEntry:
    latest = node.latest_version
    return NormalizedEntry(
        provider=node.provider,
        id=node.id,
        name=node.name,
        type=ModelType.CUSTOM_NODE,
        download_url=extract_github_url(node.repository),
        version_id=latest.version if latest is not None else None,
        author=node_author(node),
        tags=tuple(node.tags),
        source_url=f"{REGISTRY_SITE_URL}/nodes/{node.id}",
        description=description_preview(node.description),
        safety=SafetyFlags(banned=not is_node_safe(node)),
    )


def normalize(record: CatalogRecord) -> NormalizedEntry:
    """Dispatch on the record's provider variant."""

    if isinstance(record, CivitAIModel):
        return normalize_civitai_model(record)
    if isinstance(record, HuggingFaceModel):
        return normalize_huggingface_model(record)
    if isinstance(record, RegistryNode):
        return normalize_registry_node(record)
    raise TypeError(f"Unsupported catalog record: {type(record).__name__}")
