"""Tests for the HuggingFace catalog source."""

import httpx
import pytest

from adapters.catalog_sources.huggingface import HuggingFaceClient, build_search_params, parse_frontmatter
from core.domain.errors import NotFoundError
from core.domain.huggingface import HuggingFaceSearchParams
from core.domain.models import ModelType

from conftest import json_response
from fixtures import huggingface_model_payload

MODEL_ID = "stabilityai/stable-diffusion-xl-base-1.0"


class TestBuildSearchParams:
    def test_defaults(self):
        params = build_search_params(HuggingFaceSearchParams())

        assert params["limit"] == 20
        assert params["skip"] == 0
        assert params["full"] is True
        assert params["config"] is True
        assert params["sort"] == "downloads"
        assert params["direction"] == -1

    def test_skip_is_offset_of_page(self):
        params = build_search_params(HuggingFaceSearchParams(page=3, limit=25))

        assert params["skip"] == 50

    def test_downloads_ignores_ascending(self):
        params = build_search_params(HuggingFaceSearchParams(sort="downloads", direction="asc"))

        assert params["direction"] == -1

    @pytest.mark.parametrize("sort", ["likes", "lastModified"])
    def test_likes_and_last_modified_honour_direction(self, sort):
        asc = build_search_params(HuggingFaceSearchParams(sort=sort, direction="asc"))
        desc = build_search_params(HuggingFaceSearchParams(sort=sort, direction="desc"))

        assert (asc["sort"], asc["direction"]) == (sort, 1)
        assert (desc["sort"], desc["direction"]) == (sort, -1)

    def test_trending_has_no_direction(self):
        params = build_search_params(HuggingFaceSearchParams(sort="trending", direction="asc"))

        assert params["sort"] == "trending"
        assert "direction" not in params

    def test_unknown_sort_falls_back_to_downloads(self):
        params = build_search_params(HuggingFaceSearchParams(sort="stars"))

        assert (params["sort"], params["direction"]) == ("downloads", -1)


class TestParseFrontmatter:
    def test_parses_flat_values(self):
        content = '---\nlicense: openrail++\ntags: ["a", "b"]\ninference: false\n---\n# Title\n'

        assert parse_frontmatter(content) == {"license": "openrail++", "tags": ["a", "b"], "inference": False}

    def test_without_frontmatter(self):
        assert parse_frontmatter("# Just a title") == {}


class TestHuggingFaceClient:
    @pytest.mark.asyncio
    async def test_search_models_request(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response([huggingface_model_payload()]))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        models = await client.search_models(HuggingFaceSearchParams(search="sdxl", page=2, limit=10))

        params = handler.last.url.params
        assert handler.last.url.path == "/api/models"
        assert params["search"] == "sdxl"
        assert params["skip"] == "10"
        assert params["full"] == "true"
        assert models[0].id == MODEL_ID

    @pytest.mark.asyncio
    async def test_get_model_card_fetches_raw_readme(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: httpx.Response(200, text="---\nlicense: mit\n---\nHello"))
        client = HuggingFaceClient("hf_tok", settings=settings, client=http, limiter=limiter)

        card = await client.get_model_card(MODEL_ID)

        assert str(handler.last.url) == f"https://huggingface.co/{MODEL_ID}/raw/main/README.md"
        assert handler.last.headers["Authorization"] == "Bearer hf_tok"
        assert card.metadata == {"license": "mit"}
        assert card.content.endswith("Hello")

    @pytest.mark.asyncio
    async def test_get_download_info(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response(huggingface_model_payload(gated="manual")))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        info = await client.get_download_info(MODEL_ID, "sd_xl_base_1.0.safetensors")

        assert handler.last.url.path == f"/api/models/{MODEL_ID}"
        assert handler.last.url.params["blobs"] == "true"
        assert info.download_url == f"https://huggingface.co/{MODEL_ID}/resolve/main/sd_xl_base_1.0.safetensors"
        assert info.size == 6938078334
        assert info.sha256.startswith("31e35c80")
        assert info.requires_auth is True

    @pytest.mark.asyncio
    async def test_get_download_info_missing_file(self, settings, limiter, mock_http):
        http, _ = mock_http(lambda request: json_response(huggingface_model_payload()))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        with pytest.raises(NotFoundError):
            await client.get_download_info(MODEL_ID, "missing.ckpt")

    @pytest.mark.asyncio
    async def test_get_model_files(self, settings, limiter, mock_http):
        http, _ = mock_http(lambda request: json_response(huggingface_model_payload()))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        files = await client.get_model_files(MODEL_ID)

        assert [f.rfilename for f in files][0] == "README.md"
        assert len(files) == 4

    @pytest.mark.asyncio
    async def test_helpers_set_filters(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response([]))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        await client.search_diffusion_models("flux")
        assert handler.last.url.params["filter"] == "diffusers"

        await client.search_transformers_models(task="text-generation")
        assert handler.last.url.params["filter"] == "transformers,text-generation"

        await client.get_trending_models(limit=5)
        assert handler.last.url.params["sort"] == "trending"
        assert handler.last.url.params["limit"] == "5"

        await client.get_models_by_author("stabilityai")
        assert handler.last.url.params["author"] == "stabilityai"

    @pytest.mark.asyncio
    async def test_search_entries_has_more_on_full_page(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response([huggingface_model_payload()]))
        client = HuggingFaceClient(settings=settings, client=http, limiter=limiter)

        full = await client.search_entries("sdxl", limit=1, cursor="ignored")
        assert "cursor" not in handler.last.url.params

        partial = await client.search_entries("sdxl", limit=5)

        assert full.has_more is True
        assert partial.has_more is False
        entry = full.entries[0]
        assert entry.type is ModelType.CHECKPOINT
        assert entry.file_name == "sd_xl_base_1.0.safetensors"
        assert entry.formatted_size == "6.46 GB"

    def test_default_limiter_uses_settings_budget(self, settings):
        client = HuggingFaceClient(settings=settings)

        assert client.limiter.max_requests == 1000
        assert client.limiter.window_seconds == 3600
