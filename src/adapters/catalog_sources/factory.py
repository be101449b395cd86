"""Per-request client construction.

Clients are never shared: every call builds a fresh one carrying the
token resolved at that moment (stored token first, env token second).
"""

from __future__ import annotations

import logging

import httpx

from adapters.catalog_sources.civitai import CivitAIClient
from adapters.catalog_sources.comfyui_registry import ComfyUIRegistryClient
from adapters.catalog_sources.huggingface import HuggingFaceClient
from core.config import AppSettings
from core.domain.errors import TokenLookupError
from core.domain.models import Provider
from core.interfaces.catalog import CatalogSource, TokenProvider

logger = logging.getLogger(__name__)


def _env_token(provider: Provider, settings: AppSettings) -> str | None:
    if provider is Provider.CIVITAI:
        return settings.civitai_api_key
    if provider is Provider.HUGGINGFACE:
        return settings.huggingface_api_key
    return settings.comfyui_registry_api_key


async def resolve_token(
    provider: Provider,
    settings: AppSettings,
    tokens: TokenProvider | None = None,
) -> str | None:
    """Token for `provider`: the stored one if any, else the env-configured one."""

    if tokens is not None:
        try:
            token = await tokens.get_token(provider)
        except TokenLookupError as exc:
            logger.warning("Token lookup failed for %s, using env token: %s", provider.label(), exc)
        else:
            if token:
                return token
    return _env_token(provider, settings) or None


async def create_civitai_client(
    settings: AppSettings | None = None,
    tokens: TokenProvider | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> CivitAIClient:
    settings = settings or AppSettings()
    token = await resolve_token(Provider.CIVITAI, settings, tokens)
    return CivitAIClient(token, settings=settings, client=client)


async def create_huggingface_client(
    settings: AppSettings | None = None,
    tokens: TokenProvider | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> HuggingFaceClient:
    settings = settings or AppSettings()
    token = await resolve_token(Provider.HUGGINGFACE, settings, tokens)
    return HuggingFaceClient(token, settings=settings, client=client)


async def create_registry_client(
    settings: AppSettings | None = None,
    tokens: TokenProvider | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> ComfyUIRegistryClient:
    settings = settings or AppSettings()
    token = await resolve_token(Provider.COMFYUI_REGISTRY, settings, tokens)
    return ComfyUIRegistryClient(token, settings=settings, client=client)


async def create_catalog_source(
    provider: Provider | str,
    settings: AppSettings | None = None,
    tokens: TokenProvider | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> CatalogSource:
    provider = Provider(provider)
    if provider is Provider.CIVITAI:
        return await create_civitai_client(settings, tokens, client=client)
    if provider is Provider.HUGGINGFACE:
        return await create_huggingface_client(settings, tokens, client=client)
    return await create_registry_client(settings, tokens, client=client)
