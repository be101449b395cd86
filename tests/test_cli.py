"""Tests for the Typer CLI (catalog access is faked)."""

import json

import httpx
import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from adapters.catalog_sources.civitai import CivitAIClient
from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import NotFoundError
from core.domain.models import CatalogPage, ModelType, NormalizedEntry, Provider

from conftest import RecordingHandler, json_response
from fixtures import civitai_model_payload

runner = CliRunner()


class FakeSource:
    def __init__(self, provider: Provider):
        self.provider = provider
        self.closed = False
        self.calls: list[dict] = []

    async def search_entries(self, query=None, *, page=1, limit=20, cursor=None):
        self.calls.append({"query": query, "page": page, "limit": limit, "cursor": cursor})
        entry = NormalizedEntry(provider=self.provider, id=f"{self.provider.value}-1", name="Entry", type=ModelType.VAE)
        next_cursor = "c3" if self.provider is Provider.CIVITAI else None
        return CatalogPage(
            provider=self.provider,
            entries=[entry],
            page=page,
            page_size=limit,
            next_cursor=next_cursor,
            has_more=True,
        )

    async def get_entry(self, entry_id):
        if entry_id == "missing":
            raise NotFoundError("gone", provider=self.provider.value, status=404)
        return NormalizedEntry(provider=self.provider, id=entry_id, name="Shown entry", type=ModelType.LORA)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_sources(monkeypatch):
    created: list[FakeSource] = []

    async def fake_create(provider, settings=None, tokens=None, **kwargs):
        source = FakeSource(Provider(provider))
        created.append(source)
        return source

    monkeypatch.setattr(cli_main, "create_catalog_source", fake_create)
    return created


def test_search_all_providers(fake_sources):
    result = runner.invoke(cli_main.app, ["search", "all", "vae", "--no-banner"])

    assert result.exit_code == 0, result.output
    assert len(fake_sources) == 3
    assert all(source.closed for source in fake_sources)
    assert "more results available" in result.output


def test_search_hints_show_real_options(fake_sources):
    result = runner.invoke(cli_main.app, ["search", "all", "vae", "--no-banner", "--page", "2"])

    assert result.exit_code == 0, result.output
    assert "--cursor c3" in result.output
    assert "--page 3" in result.output


def test_search_forwards_cursor(fake_sources):
    result = runner.invoke(cli_main.app, ["search", "civitai", "portrait", "--cursor", "c2", "--no-banner"])

    assert result.exit_code == 0, result.output
    assert fake_sources[0].calls == [{"query": "portrait", "page": 1, "limit": 20, "cursor": "c2"}]


def test_search_cursor_reaches_civitai_request(monkeypatch):
    handler = RecordingHandler(
        lambda request: json_response({"items": [civitai_model_payload()], "metadata": {"nextCursor": "c3"}})
    )

    async def create_civitai(provider, settings=None, tokens=None, **kwargs):
        settings = AppSettings(_env_file=None)
        http = build_async_client(settings, transport=httpx.MockTransport(handler))
        return CivitAIClient(settings=settings, client=http)

    monkeypatch.delenv("COMFY_CATALOG_CIVITAI_API_KEY", raising=False)
    monkeypatch.setattr(cli_main, "create_catalog_source", create_civitai)

    result = runner.invoke(cli_main.app, ["search", "civitai", "portrait", "--cursor", "c2", "--no-banner"])

    assert result.exit_code == 0, result.output
    params = handler.last.url.params
    assert params["query"] == "portrait"
    assert params["cursor"] == "c2"
    assert "page" not in params
    assert "--cursor c3" in result.output


def test_search_exports_json(fake_sources, tmp_path):
    result = runner.invoke(
        cli_main.app,
        ["search", "civitai", "flux dev", "--no-banner", "--json-out", str(tmp_path)],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads((tmp_path / "flux-dev.json").read_text(encoding="utf-8"))
    assert payload["count"] == 1
    assert payload["entries"][0]["id"] == "civitai-1"


def test_search_rejects_unknown_provider(fake_sources):
    result = runner.invoke(cli_main.app, ["search", "github", "x"])

    assert result.exit_code != 0
    assert fake_sources == []


def test_show_entry(fake_sources):
    result = runner.invoke(cli_main.app, ["show", "huggingface", "org/model"])

    assert result.exit_code == 0, result.output
    assert "Shown entry" in result.output


def test_show_missing_entry(fake_sources):
    result = runner.invoke(cli_main.app, ["show", "civitai", "missing"])

    assert result.exit_code == 1
    assert "Not found" in result.output
