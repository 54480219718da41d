"""SQLAlchemy adapter package for recsync."""

from __future__ import annotations

from .mappings import (
    RECORD_BATCH_TABLE_NAME,
    RECORD_TABLE_NAME,
    create_all_tables,
    mapper_registry,
    record_batch_table,
    record_table,
    start_mappers,
)
from .repositories import SqlAlchemyRecordRepository, SqlAlchemyStoreCatalog

__all__ = [
    "RECORD_BATCH_TABLE_NAME",
    "RECORD_TABLE_NAME",
    "SqlAlchemyRecordRepository",
    "SqlAlchemyStoreCatalog",
    "create_all_tables",
    "mapper_registry",
    "record_batch_table",
    "record_table",
    "start_mappers",
]
