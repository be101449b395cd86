"""Tests for the shared catalog HTTP path (encoding, classification, parsing)."""

import httpx
import pytest
from pydantic import BaseModel

from adapters.catalog_client import CatalogHttpClient, encode_query_params, raise_for_catalog_status
from adapters.http_client import bearer_header, build_headers, redact_headers
from core.domain.errors import (
    AuthError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    UpstreamError,
)
from core.domain.models import Provider

from conftest import json_response


class _Item(BaseModel):
    id: int
    name: str


def _client(settings, limiter, http, token=None):
    return CatalogHttpClient(
        "https://catalog.test/api/",
        token,
        provider=Provider.CIVITAI,
        limiter=limiter,
        settings=settings,
        client=http,
    )


class TestEncodeQueryParams:
    def test_drops_none_and_repeats_sequences(self):
        pairs = encode_query_params({"a": None, "types": ["LORA", "VAE"], "limit": 5})

        assert pairs == [("types", "LORA"), ("types", "VAE"), ("limit", "5")]

    def test_booleans_are_lowercase(self):
        assert encode_query_params({"nsfw": False, "full": True}) == [("nsfw", "false"), ("full", "true")]

    def test_empty(self):
        assert encode_query_params(None) == []


class TestRaiseForCatalogStatus:
    @pytest.mark.parametrize(
        "status, error",
        [(401, AuthError), (403, AuthError), (404, NotFoundError), (429, RateLimitError), (500, UpstreamError)],
    )
    def test_maps_status_to_error(self, status, error):
        response = httpx.Response(status, text="boom")

        with pytest.raises(error) as excinfo:
            raise_for_catalog_status(Provider.HUGGINGFACE, response)

        assert excinfo.value.status == status
        assert excinfo.value.body == "boom"
        assert excinfo.value.provider == "huggingface"
        assert str(excinfo.value) == f"HuggingFace API error ({status}): boom"

    def test_rate_limit_parses_retry_after(self):
        response = httpx.Response(429, text="slow down", headers={"Retry-After": "12"})

        with pytest.raises(RateLimitError) as excinfo:
            raise_for_catalog_status(Provider.CIVITAI, response)

        assert excinfo.value.retry_after == 12.0

    def test_success_passes(self):
        raise_for_catalog_status(Provider.CIVITAI, httpx.Response(200, text="{}"))


class TestCatalogHttpClient:
    @pytest.mark.asyncio
    async def test_get_json_builds_url_params_and_auth(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response({"ok": True}))
        client = _client(settings, limiter, http, token="secret")

        data = await client.get_json("models", {"limit": 2, "query": None, "nsfw": False})

        assert data == {"ok": True}
        request = handler.last
        assert request.url.path == "/api/models"
        assert request.url.params.multi_items() == [("limit", "2"), ("nsfw", "false")]
        assert request.headers["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_token(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response([]))
        client = _client(settings, limiter, http)

        await client.get_json("/models")

        assert "Authorization" not in handler.last.headers
        assert client.has_token is False

    @pytest.mark.asyncio
    async def test_every_request_goes_through_limiter(self, settings, clock, mock_http):
        from adapters.rate_limiter import SlidingWindowRateLimiter

        limiter = SlidingWindowRateLimiter(1, 60, clock=clock, sleep=clock.sleep)
        http, _ = mock_http(lambda request: json_response({}))
        client = _client(settings, limiter, http)

        await client.get_json("/a")
        await client.get_json("/b")

        assert clock.sleeps == [pytest.approx(60.0)]

    @pytest.mark.asyncio
    async def test_non_success_raises_typed_error(self, settings, limiter, mock_http):
        http, _ = mock_http(lambda request: httpx.Response(404, text="missing"))
        client = _client(settings, limiter, http)

        with pytest.raises(NotFoundError):
            await client.get_json("/models/1")

    @pytest.mark.asyncio
    async def test_non_json_body_raises_upstream_error(self, settings, limiter, mock_http):
        http, _ = mock_http(lambda request: httpx.Response(200, text="<html>"))
        client = _client(settings, limiter, http)

        with pytest.raises(UpstreamError) as excinfo:
            await client.get_json("/models")

        assert excinfo.value.status == 200

    @pytest.mark.asyncio
    async def test_transport_error_becomes_network_error(self, settings, limiter, mock_http):
        def fail(request):
            raise httpx.ConnectError("no route", request=request)

        http, _ = mock_http(fail)
        client = _client(settings, limiter, http)

        with pytest.raises(NetworkError) as excinfo:
            await client.get_json("/models")

        assert excinfo.value.provider == "civitai"

    @pytest.mark.asyncio
    async def test_get_text_accepts_absolute_url(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: httpx.Response(200, text="# Card"))
        client = _client(settings, limiter, http)

        text = await client.get_text("https://other.test/raw/README.md")

        assert text == "# Card"
        assert str(handler.last.url) == "https://other.test/raw/README.md"

    def test_parse_maps_validation_error(self, settings, limiter):
        client = _client(settings, limiter, httpx.AsyncClient())

        assert client.parse(_Item, {"id": 1, "name": "x"}) == _Item(id=1, name="x")
        with pytest.raises(UpstreamError):
            client.parse(_Item, {"id": "not-a-number"})

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self, settings, limiter):
        http = httpx.AsyncClient()
        async with _client(settings, limiter, http):
            pass

        assert http.is_closed is False
        await http.aclose()


class TestHeaders:
    def test_build_headers(self, settings):
        headers = build_headers(settings)

        assert headers["User-Agent"] == "ComfyUI-Deployment-Builder/1.0"
        assert "Authorization" not in headers

    def test_bearer_header(self):
        assert bearer_header("t") == {"Authorization": "Bearer t"}
        assert bearer_header(None) == {}

    @pytest.mark.asyncio
    async def test_mock_transport_client_sends_default_headers(self, settings, limiter, mock_http):
        http, handler = mock_http(lambda request: json_response({"id": 1, "name": "a"}))
        async with _client(settings, limiter, http, token="t") as client:
            await client.get_json("/items")

        request = handler.last
        assert request.headers["User-Agent"] == "ComfyUI-Deployment-Builder/1.0"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Authorization"] == "Bearer t"

    def test_redact_headers_is_case_insensitive(self):
        redacted = redact_headers({"authorization": "Bearer t", "Accept": "application/json"})

        assert redacted == {"authorization": "[REDACTED]", "Accept": "application/json"}
