from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from recsync.adapters.feed import RawRecord
from recsync.domain.model import DEFAULT_STATUS, CanonicalRecord
from recsync.domain.reconciliation import normalize_records
from tests.helpers.records import make_raw

NOW = datetime(2025, 2, 3, 4, 5, 6, tzinfo=UTC)


def _normalize_one(raw: object) -> CanonicalRecord:
    (record,) = normalize_records([raw], now=lambda: NOW)
    return record


def test_normalize_trims_text_and_parses_fields() -> None:
    record = _normalize_one(
        make_raw(7, "  Padded Name  ", value="  42.50 ", status=" Active ")
    )

    assert record.id == 7
    assert record.name == "Padded Name"
    assert record.value == Decimal("42.50")
    assert record.status == "Active"
    assert record.updated_at == datetime(2024, 7, 1, 12, tzinfo=UTC)


def test_normalize_defaults_missing_fields() -> None:
    record = _normalize_one({})

    assert record.id is None
    assert record.name == ""
    assert record.value == Decimal(0)
    assert record.status == DEFAULT_STATUS
    assert record.updated_at == NOW


@pytest.mark.parametrize(
    ("raw_value", "expected"),
    [
        (None, Decimal(0)),
        ("abc", Decimal(0)),
        ("", Decimal(0)),
        ("NaN", Decimal(0)),
        (float("nan"), Decimal(0)),
        (True, Decimal(1)),
        (False, Decimal(0)),
        (12, Decimal(12)),
        (0.1, Decimal("0.1")),
        ([1, 2], Decimal(0)),
    ],
)
def test_normalize_value_coercion(raw_value: object, expected: Decimal) -> None:
    assert _normalize_one(make_raw(value=raw_value)).value == expected


def test_normalize_keeps_infinity_for_validation() -> None:
    record = _normalize_one(make_raw(value="Infinity"))

    assert record.value.is_infinite()


def test_normalize_blank_status_uses_default() -> None:
    assert _normalize_one(make_raw(status="   ")).status == DEFAULT_STATUS
    assert _normalize_one(make_raw(status=None)).status == DEFAULT_STATUS


def test_normalize_stringifies_non_string_names() -> None:
    assert _normalize_one(make_raw(name=12345)).name == "12345"


@pytest.mark.parametrize(
    ("raw_timestamp", "expected"),
    [
        ("2024-03-01T10:00:00Z", datetime(2024, 3, 1, 10, tzinfo=UTC)),
        ("2024-03-01T12:00:00+02:00", datetime(2024, 3, 1, 10, tzinfo=UTC)),
        ("2024-03-01T10:00:00", datetime(2024, 3, 1, 10, tzinfo=UTC)),
        (
            datetime(2024, 3, 1, 5, tzinfo=timezone(timedelta(hours=-5))),
            datetime(2024, 3, 1, 10, tzinfo=UTC),
        ),
        ("yesterday", NOW),
        ("", NOW),
        (1709287200, NOW),
        (None, NOW),
    ],
)
def test_normalize_timestamp(raw_timestamp: object, expected: datetime) -> None:
    assert _normalize_one(make_raw(last_modified=raw_timestamp)).updated_at == expected


def test_normalize_uses_one_fallback_time_per_batch() -> None:
    calls: list[datetime] = []

    def clock() -> datetime:
        calls.append(NOW)
        return NOW

    records = normalize_records([{}, {}, {}], now=clock)

    assert len(calls) == 1
    assert {record.updated_at for record in records} == {NOW}


def test_normalize_is_total_for_non_mapping_items() -> None:
    records = normalize_records(["text", 42, None, ["a"]], now=lambda: NOW)

    assert len(records) == 4
    assert all(record.id is None and record.name == "" for record in records)


def test_normalize_accepts_feed_models() -> None:
    raw = RawRecord.model_validate(make_raw(3, "From Feed", value="9.99"))

    record = _normalize_one(raw)

    assert record.id == 3
    assert record.name == "From Feed"
    assert record.value == Decimal("9.99")
    assert record.updated_at == datetime(2024, 7, 1, 12, tzinfo=UTC)


@pytest.mark.parametrize(
    ("raw_id", "expected"),
    [(3, 3), (3.0, 3), (1.5, 1.5), ("7", "7"), (None, None)],
)
def test_normalize_id_coerces_only_integral_floats(raw_id: object, expected: object) -> None:
    record = _normalize_one(make_raw(raw_id))

    assert record.id == expected
    assert type(record.id) is type(expected)
