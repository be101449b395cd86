"""Shared fixtures: isolated settings, a fake clock and MockTransport clients.

Mock clients are built by `build_async_client`, so requests carry the same
default headers and timeout as production ones.
"""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from adapters.http_client import build_async_client
from adapters.rate_limiter import SlidingWindowRateLimiter
from core.config import AppSettings


class FakeClock:
    """Manual monotonic clock; `sleep` advances it instead of waiting."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingHandler:
    """MockTransport handler that records requests and replays canned answers."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def json_response(payload: object, status: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(
        status,
        content=json.dumps(payload).encode("utf-8"),
        headers={"Content-Type": "application/json", **(headers or {})},
    )


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> AppSettings:
    for var in (
        "COMFY_CATALOG_CIVITAI_API_KEY",
        "COMFY_CATALOG_HUGGINGFACE_API_KEY",
        "COMFY_CATALOG_COMFYUI_REGISTRY_API_KEY",
    ):
        monkeypatch.delenv(var, raising=False)
    return AppSettings(_env_file=None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(1000, 60, clock=clock, sleep=clock.sleep)


@pytest.fixture
def mock_http(settings: AppSettings) -> Callable[[Callable[[httpx.Request], httpx.Response]], tuple[httpx.AsyncClient, RecordingHandler]]:
    def factory(
        responder: Callable[[httpx.Request], httpx.Response],
    ) -> tuple[httpx.AsyncClient, RecordingHandler]:
        handler = RecordingHandler(responder)
        return build_async_client(settings, transport=httpx.MockTransport(handler)), handler

    return factory
