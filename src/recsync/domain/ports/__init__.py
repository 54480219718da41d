"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import FeedFetcher
from .persistence import RecordRepository, StoreCatalog
from .unit_of_work import (
    RecordRepositories,
    RecordUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "FeedFetcher",
    "RecordRepositories",
    "RecordRepository",
    "RecordUnitOfWork",
    "RepositoryCollection",
    "StoreCatalog",
    "UnitOfWork",
]
