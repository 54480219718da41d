"""Public interface for the feed adapter."""

from __future__ import annotations

from .client import HttpFeedFetcher, build_http_feed_fetcher
from .schema import RawRecord, parse_raw_records

__all__ = [
    "HttpFeedFetcher",
    "RawRecord",
    "build_http_feed_fetcher",
    "parse_raw_records",
]
