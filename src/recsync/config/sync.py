"""Pagination defaults for record reads."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


@dataclass(frozen=True, slots=True)
class SyncConfig:
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE


def get_sync_config() -> SyncConfig:
    return SyncConfig()
