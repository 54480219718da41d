"""HTTP fetcher for the external record feed."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast

import httpx

from recsync.adapters.http_resilience import ResilientClient
from recsync.config.feed import DEFAULT_FEED_TIMEOUT_SECONDS, FeedConfig, get_feed_config
from recsync.config.http_resilience import ResilienceConfig
from recsync.domain.errors import (
    FeedFormatError,
    FeedHTTPError,
    FeedTimeoutError,
    FeedTransportError,
)

from .schema import RawRecord, parse_raw_records

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from recsync.config.logging import BoundLogger
    from recsync.domain.ports import FeedFetcher

log = getLogger(__name__)


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(name="feed", timeout_seconds=DEFAULT_FEED_TIMEOUT_SECONDS)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HttpFeedFetcher:
    """Fetch a JSON array of records with a bounded timeout.

    httpx failures are translated into the domain's tagged errors here, so callers
    only ever see ``FeedTimeoutError``, ``FeedHTTPError``, ``FeedTransportError``
    or ``FeedFormatError``.
    """

    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    default_headers: Mapping[str, str] = field(default_factory=dict[str, str])
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    log: BoundLogger = field(default=log)

    def __call__(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> list[RawRecord]:
        return asyncio.run(self.fetch(url, headers=headers, timeout=timeout))

    async def fetch(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> list[RawRecord]:
        effective_timeout = timeout if timeout is not None else self.resilience.timeout_seconds
        request_headers = {**self.default_headers, **(headers or {})}

        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.get(
                    url, headers=request_headers, timeout=effective_timeout
                )
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            self.log.error("Feed request timed out after %ss: %s", effective_timeout, url)
            raise FeedTimeoutError(f"API request timeout after {effective_timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self.log.error("Feed returned HTTP %s: %s", status, url)
            raise FeedHTTPError(status, exc.response.reason_phrase) from exc
        except httpx.HTTPError as exc:
            self.log.error("Feed request failed: %s", exc)
            raise FeedTransportError(f"API request failed: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise FeedFormatError("Invalid API response format: body is not JSON") from exc

        if not isinstance(payload, list):
            raise FeedFormatError("Invalid API response format")

        return parse_raw_records(cast(list[object], payload))


def build_http_feed_fetcher(config: FeedConfig | None = None) -> HttpFeedFetcher:
    """Return a fetcher configured from ``FEED_*`` environment variables."""

    feed_config = config or get_feed_config()
    return HttpFeedFetcher(
        resilience=feed_config.resilience,
        default_headers=dict(feed_config.headers),
    )


if TYPE_CHECKING:
    _fetcher_check: FeedFetcher = HttpFeedFetcher()
