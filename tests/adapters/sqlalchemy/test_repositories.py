"""Tests for SQLAlchemy repositories."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from recsync.adapters.sqlalchemy.mappings import record_batch_table
from recsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyRecordRepository,
    SqlAlchemyStoreCatalog,
)
from recsync.domain.errors import StoreError
from recsync.domain.model import UpdateEligibility
from recsync.domain.reconciliation import DEFAULT_BULK_CONTRACT
from tests.helpers.records import SEEDED_AT, fetch_rows, insert_records, make_record

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture
def seeded_session(seeded_engine: Engine) -> Iterator[Session]:
    session = Session(bind=seeded_engine)
    try:
        yield session
    finally:
        session.close()


def test_bulk_update_only_touches_open_records(
    seeded_engine: Engine, seeded_session: Session
) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)
    before = fetch_rows(seeded_engine)
    rows = [
        make_record(1, "Updated Record 1", value="150.75"),
        make_record(2, "Updated Record 2", value="250.25", status="Pending"),
        make_record(99, "Missing"),
    ]

    result = repository.bulk_update_open(rows)
    seeded_session.commit()

    assert result.updated_count == 1
    assert result.skipped_count == 2
    assert result.total_input_records == 3
    after = fetch_rows(seeded_engine)
    assert after[1]["name"] == "Updated Record 1"
    assert after[1]["value"] == Decimal("150.75")
    assert after[2] == before[2]
    assert 99 not in after


def test_bulk_update_clears_batch_rows(seeded_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    repository.bulk_update_open([make_record(1), make_record(3)])
    remaining = seeded_session.execute(
        select(func.count()).select_from(record_batch_table)
    ).scalar_one()

    assert remaining == 0


def test_bulk_update_empty_batch() -> None:
    repository = SqlAlchemyRecordRepository(Session())

    result = repository.bulk_update_open([])

    assert result.updated_count == 0
    assert result.total_input_records == 0


def test_bulk_update_missing_parameter_shape_raises_store_error(
    seeded_engine: Engine, seeded_session: Session
) -> None:
    record_batch_table.drop(seeded_engine)
    repository = SqlAlchemyRecordRepository(seeded_session)

    with pytest.raises(StoreError) as excinfo:
        repository.bulk_update_open([make_record(1)])

    assert excinfo.value.object_name == "record_batch"
    assert str(excinfo.value) == (
        "Bulk parameter shape 'record_batch' not found or has unexpected structure"
    )
    assert excinfo.value.__cause__ is not None


def test_bulk_update_out_of_range_id_raises_store_error(
    seeded_engine: Engine, seeded_session: Session
) -> None:
    before = fetch_rows(seeded_engine)
    repository = SqlAlchemyRecordRepository(seeded_session)

    with pytest.raises(StoreError) as excinfo:
        repository.bulk_update_open([make_record(1), make_record(2**70)])
    seeded_session.rollback()

    assert str(excinfo.value).startswith("Failed to update records:")
    assert excinfo.value.__cause__ is not None
    assert fetch_rows(seeded_engine) == before


def test_page_orders_by_id_and_counts(seeded_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    first = repository.page(1, 2)
    last = repository.page(3, 2)

    assert [record.id for record in first.items] == [1, 2]
    assert first.total == 5
    assert [record.id for record in last.items] == [5]


def test_page_filters_by_open_flag(seeded_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    open_page = repository.page(1, 10, is_open=True)
    closed_page = repository.page(1, 10, is_open=False)

    assert [record.id for record in open_page.items] == [1, 3, 4]
    assert [record.id for record in closed_page.items] == [2, 5]
    assert closed_page.total == 2


def test_page_by_status_orders_by_latest_update(
    seeded_engine: Engine, seeded_session: Session
) -> None:
    insert_records(
        seeded_engine,
        [
            {
                "id": 6,
                "name": "Record 6",
                "value": Decimal("1.00"),
                "status": "Active",
                "updated_at": datetime(2024, 9, 1, tzinfo=UTC),
            }
        ],
    )
    repository = SqlAlchemyRecordRepository(seeded_session)

    page = repository.page(1, 10, status="Active")

    assert [record.id for record in page.items] == [6, 1, 3]
    assert page.items[1].updated_at == SEEDED_AT


@pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (1, 1001)])
def test_page_rejects_invalid_bounds(seeded_session: Session, page: int, page_size: int) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    with pytest.raises(ValueError, match="Page"):
        repository.page(page, page_size)


def test_check_updatable_distinguishes_closed_and_missing(seeded_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    checks = repository.check_updatable([5, 1, 42, 1])

    assert [(check.id, check.eligibility) for check in checks] == [
        (5, UpdateEligibility.CLOSED),
        (1, UpdateEligibility.CAN_UPDATE),
        (42, UpdateEligibility.NOT_FOUND),
    ]
    assert checks[0].record is not None
    assert checks[0].record.name == "Record 5"
    assert checks[2].record is None


def test_status_summary_groups_by_status(seeded_session: Session) -> None:
    repository = SqlAlchemyRecordRepository(seeded_session)

    summaries = {summary.status: summary for summary in repository.status_summary()}

    assert set(summaries) == {"Active", "Closed", "Pending", "Review"}
    active = summaries["Active"]
    assert active.record_count == 2
    assert active.average_value == Decimal("200.00")
    assert active.latest_update == SEEDED_AT


def test_catalog_describes_migrated_objects(sqlite_session: Session) -> None:
    catalog = SqlAlchemyStoreCatalog(sqlite_session)

    description = catalog.describe("record_batch", "record")

    assert description.parameter_columns == DEFAULT_BULK_CONTRACT.parameter_columns
    assert description.target_columns is not None
    assert DEFAULT_BULK_CONTRACT.target_columns <= description.target_columns


def test_catalog_reports_absent_objects(sqlite_session: Session) -> None:
    description = SqlAlchemyStoreCatalog(sqlite_session).describe("nope_batch", "nope")

    assert description.parameter_columns is None
    assert description.target_columns is None
