from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, cast

import httpx
from httpx_retries import Retry

from recsync.adapters.http_resilience import (
    ResilientClient,
    _ShouldCacheResponseFilter,  # pyright: ignore[reportPrivateUsage]
    build_retry,
)
from recsync.config import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from hishel import Response as HishelCacheResponse


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=2, backoff_factor=0.1))

    assert isinstance(retry, Retry)
    assert retry.total == 2
    assert retry.backoff_factor == 0.1


def test_rate_limited_client_sends_requests() -> None:
    calls: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        return httpx.Response(200, json=[])

    async def run() -> list[int]:
        config = ResilienceConfig(
            name="test",
            base_url="https://feed.test",
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        )
        async with ResilientClient(config) as client:
            client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
                base_url="https://feed.test", transport=httpx.MockTransport(handler)
            )
            responses = [await client.get("/records") for _ in range(3)]
        return [response.status_code for response in responses]

    assert asyncio.run(run()) == [200, 200, 200]
    assert calls == ["/records"] * 3


def test_cache_filter_only_stores_matching_payloads() -> None:
    cache_filter = _ShouldCacheResponseFilter(lambda payload: isinstance(payload, list))
    item = cast("HishelCacheResponse", object())

    assert cache_filter.apply(item, b"[1, 2]") is True
    assert cache_filter.apply(item, b'{"error": "x"}') is False
    assert cache_filter.apply(item, b"not json") is False
