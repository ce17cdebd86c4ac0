from __future__ import annotations

import asyncio

import httpx
import pytest

from mediafixer.adapters.http_resilience import ResilientClient
from mediafixer.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_client_sends_auth_and_base_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    config = ResilienceConfig(
        name="test",
        base_url="https://blog.example/wp-json/wp/v2/",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={"User-Agent": "mediafixer-tests"},
    )

    async def call() -> httpx.Response:
        async with ResilientClient(
            config,
            auth=httpx.BasicAuth("editor", "secret"),
            transport=httpx.MockTransport(handler),
        ) as client:
            return await client.get("media", params={"per_page": 1})

    response = asyncio.run(call())

    assert response.status_code == 200
    assert str(seen[0].url) == "https://blog.example/wp-json/wp/v2/media?per_page=1"
    assert seen[0].headers["Authorization"].startswith("Basic ")
    assert seen[0].headers["User-Agent"] == "mediafixer-tests"


def test_post_is_not_retried() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.method)
        return httpx.Response(503)

    config = ResilienceConfig(
        name="test",
        base_url="https://blog.example/",
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
    )

    async def call() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.post("media/1", json={"alt_text": "x"})

    response = asyncio.run(call())

    assert response.status_code == 503
    assert calls == ["POST"]


def test_unsupported_cache_backend() -> None:
    config = ResilienceConfig(name="test", cache=CacheConfig(backend="redis"))  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        ResilientClient(config)


def test_cached_client_serves_requests() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": 501}])

    config = ResilienceConfig(
        name="test",
        base_url="https://blog.example/wp-json/wp/v2/",
        cache=CacheConfig(backend="memory", should_cache=lambda payload: True),
    )

    async def call() -> httpx.Response:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            return await client.get("media", params={"_fields": "id"})

    response = asyncio.run(call())

    assert response.status_code == 200
    assert response.json() == [{"id": 501}]
