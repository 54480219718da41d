"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, func, insert, inspect, select, true, update
from sqlalchemy.exc import SQLAlchemyError

from recsync.config.sync import MAX_PAGE_SIZE
from recsync.domain.model import (
    BulkUpdateResult,
    CatalogDescription,
    RecordPage,
    StatusSummary,
    StoredRecord,
    UpdatableCheck,
    UpdateEligibility,
)

from .errors import translate_store_error
from .mappings import record_batch_table, record_table

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement
    from sqlalchemy.engine import CursorResult, Inspector
    from sqlalchemy.orm import Session

    from recsync.domain.model import CanonicalRecord

_CENTS = Decimal("0.01")


class SqlAlchemyRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def bulk_update_open(self, rows: Sequence[CanonicalRecord]) -> BulkUpdateResult:
        """Write ``rows`` to the batch table and update open records from it.

        One UPDATE statement applies the whole batch; its row count is the number
        of records actually changed. The batch rows are removed again before
        returning, all inside the session's transaction.
        """

        batch_id = uuid.uuid4().hex
        params = [
            {
                "batch_id": batch_id,
                "id": row.id,
                "name": row.name,
                "value": row.value,
                "status": row.status,
                "updated_at": row.updated_at,
            }
            for row in rows
        ]
        if not params:
            return BulkUpdateResult(updated_count=0, skipped_count=0, total_input_records=0)

        batch = record_batch_table.c
        in_batch = batch.batch_id == batch_id

        def incoming(column: str) -> ColumnElement[Any]:
            return (
                select(batch[column])
                .where(in_batch, batch.id == record_table.c.id)
                .scalar_subquery()
            )

        stmt = (
            update(record_table)
            .where(record_table.c.id.in_(select(batch.id).where(in_batch)))
            .where(record_table.c.is_open == true())
            .values(
                name=incoming("name"),
                value=incoming("value"),
                status=incoming("status"),
                updated_at=incoming("updated_at"),
            )
        )

        try:
            self.session.execute(insert(record_batch_table), params)
            result = cast("CursorResult[Any]", self.session.execute(stmt))
            updated = result.rowcount
            self.session.execute(delete(record_batch_table).where(in_batch))
        except (SQLAlchemyError, OverflowError) as exc:
            raise translate_store_error(exc) from exc

        total = len(params)
        return BulkUpdateResult(
            updated_count=updated,
            skipped_count=total - updated,
            total_input_records=total,
        )

    def page(
        self,
        page: int,
        page_size: int,
        *,
        is_open: bool | None = None,
        status: str | None = None,
    ) -> RecordPage:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        filters: list[ColumnElement[bool]] = []
        if is_open is not None:
            filters.append(record_table.c.is_open == is_open)
        if status is not None:
            filters.append(record_table.c.status == status)

        ordering = (
            (record_table.c.updated_at.desc(), record_table.c.id)
            if status is not None
            else (record_table.c.id,)
        )
        stmt = (
            select(StoredRecord)
            .where(*filters)
            .order_by(*ordering)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        count_stmt = select(func.count()).select_from(record_table).where(*filters)

        try:
            items = tuple(self.session.scalars(stmt).all())
            total = self.session.execute(count_stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc, operation="read records") from exc

        return RecordPage(items=items, total=total, page=page, page_size=page_size)

    def check_updatable(self, ids: Sequence[int]) -> list[UpdatableCheck]:
        unique_ids = list(dict.fromkeys(ids))
        if not unique_ids:
            return []

        stmt = select(StoredRecord).where(record_table.c.id.in_(unique_ids))
        try:
            found = {record.id: record for record in self.session.scalars(stmt)}
        except (SQLAlchemyError, OverflowError) as exc:
            raise translate_store_error(exc, operation="read records") from exc

        checks: list[UpdatableCheck] = []
        for record_id in unique_ids:
            record = found.get(record_id)
            if record is None:
                eligibility = UpdateEligibility.NOT_FOUND
            elif record.is_open:
                eligibility = UpdateEligibility.CAN_UPDATE
            else:
                eligibility = UpdateEligibility.CLOSED
            checks.append(UpdatableCheck(id=record_id, eligibility=eligibility, record=record))
        return checks

    def status_summary(self) -> list[StatusSummary]:
        stmt = (
            select(
                record_table.c.status,
                func.count(),
                func.avg(record_table.c.value),
                func.min(record_table.c.updated_at),
                func.max(record_table.c.updated_at),
            )
            .group_by(record_table.c.status)
            .order_by(record_table.c.status)
        )
        try:
            rows = self.session.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc, operation="read record statistics") from exc

        return [
            StatusSummary(
                status=status,
                record_count=count,
                average_value=None if average is None else Decimal(str(average)).quantize(_CENTS),
                oldest_update=oldest,
                latest_update=latest,
            )
            for status, count, average, oldest, latest in rows
        ]


class SqlAlchemyStoreCatalog:
    """Answer metadata questions by inspecting the live connection."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def describe(self, parameter_shape: str, target: str) -> CatalogDescription:
        try:
            inspector = inspect(self.session.connection())
            return CatalogDescription(
                parameter_columns=_column_names(inspector, parameter_shape),
                target_columns=_column_names(inspector, target),
            )
        except SQLAlchemyError as exc:
            raise translate_store_error(exc, operation="inspect the store catalog") from exc


def _column_names(inspector: Inspector, table_name: str) -> frozenset[str] | None:
    if not inspector.has_table(table_name):
        return None
    return frozenset(column["name"] for column in inspector.get_columns(table_name))


if TYPE_CHECKING:
    from recsync.domain.ports import RecordRepository, StoreCatalog

    _session_stub = cast("Session", object())
    _repo_check: RecordRepository = SqlAlchemyRecordRepository(_session_stub)
    _catalog_check: StoreCatalog = SqlAlchemyStoreCatalog(_session_stub)
