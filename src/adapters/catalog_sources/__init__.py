"""Catalog sources (one client per external catalog).

Each client implements `core.interfaces.catalog.CatalogSource`.
"""

from adapters.catalog_sources.civitai import CivitAIClient
from adapters.catalog_sources.comfyui_registry import ComfyUIRegistryClient
from adapters.catalog_sources.factory import (
    create_catalog_source,
    create_civitai_client,
    create_huggingface_client,
    create_registry_client,
    resolve_token,
)
from adapters.catalog_sources.huggingface import HuggingFaceClient

__all__ = [
    "CivitAIClient",
    "ComfyUIRegistryClient",
    "HuggingFaceClient",
    "create_catalog_source",
    "create_civitai_client",
    "create_huggingface_client",
    "create_registry_client",
    "resolve_token",
]
