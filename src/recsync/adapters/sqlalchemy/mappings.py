"""SQLAlchemy table metadata and mappings for the record store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Index,
    Integer,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Table,
    TypeDecorator,
    orm,
    true,
)
from sqlalchemy.orm import configure_mappers

from recsync.domain.model import NAME_MAX_LENGTH, STATUS_MAX_LENGTH, StoredRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

RECORD_TABLE_NAME = "record"
RECORD_BATCH_TABLE_NAME = "record_batch"


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

record_table = Table(
    RECORD_TABLE_NAME,
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("value", Numeric(10, 2), nullable=False),
    Column("status", String(STATUS_MAX_LENGTH), nullable=False),
    Column("is_open", Boolean, nullable=False, default=True, server_default=true()),
    Column("created_at", UTCDateTime, nullable=False, default=utcnow),
    Column("updated_at", UTCDateTime, nullable=False, default=utcnow),
    Index("ix_record_status", "status"),
    Index("ix_record_updated_at", "updated_at"),
    Index("ix_record_is_open", "is_open"),
)

# Rows of one bulk update, keyed by the batch they belong to. Rows only live for
# the duration of the transaction that wrote them.
record_batch_table = Table(
    RECORD_BATCH_TABLE_NAME,
    mapper_registry.metadata,
    Column("batch_id", String(32), nullable=False),
    Column("id", Integer, nullable=False),
    Column("name", String(NAME_MAX_LENGTH), nullable=False),
    Column("value", Numeric(10, 2), nullable=False),
    Column("status", String(STATUS_MAX_LENGTH), nullable=False),
    Column("updated_at", UTCDateTime, nullable=False),
    PrimaryKeyConstraint("batch_id", "id"),
)


@cache
def start_mappers() -> orm.registry:
    """Map domain classes onto their tables; safe to call repeatedly."""

    mapper_registry.map_imperatively(StoredRecord, record_table)
    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
