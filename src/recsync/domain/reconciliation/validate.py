"""Validate canonical records and partition them into accepted and rejected."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeGuard

from recsync.domain.model import (
    ID_MAX,
    NAME_MAX_LENGTH,
    STATUS_MAX_LENGTH,
    VALUE_LIMIT,
    RejectedRecord,
    ValidationResult,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from recsync.domain.model import CanonicalRecord

INVALID_ID = "Invalid or missing ID"
NAME_REQUIRED = "Name is required"
NAME_TOO_LONG = f"Name exceeds maximum length ({NAME_MAX_LENGTH} characters)"
INVALID_VALUE = "Invalid value format"
STATUS_REQUIRED = "Status is required"
STATUS_TOO_LONG = f"Status exceeds maximum length ({STATUS_MAX_LENGTH} characters)"


def validate_records(records: Iterable[CanonicalRecord]) -> ValidationResult:
    """Check every record and split the batch.

    All checks run for each record and their reasons are kept in a fixed order.
    The duplicate check compares against ids already accepted, so the first
    valid occurrence of an id wins and later ones are rejected.
    """

    accepted: list[CanonicalRecord] = []
    rejected: list[RejectedRecord] = []
    accepted_positions: dict[int, int] = {}

    for position, record in enumerate(records, start=1):
        reasons = record_violations(record)

        record_id = record.id
        if is_valid_id(record_id) and record_id in accepted_positions:
            reasons.append(f"Duplicate ID found at index {accepted_positions[record_id]}")

        if reasons:
            rejected.append(RejectedRecord(index=position, id=record_id, reasons=tuple(reasons)))
            continue

        accepted.append(record)
        if is_valid_id(record_id):
            accepted_positions[record_id] = position

    return ValidationResult(accepted=tuple(accepted), rejected=tuple(rejected))


def record_violations(record: CanonicalRecord) -> list[str]:
    """Return the field-level violations of ``record`` (duplicates excluded)."""

    reasons: list[str] = []
    if not is_valid_id(record.id):
        reasons.append(INVALID_ID)
    if not record.name:
        reasons.append(NAME_REQUIRED)
    if len(record.name) > NAME_MAX_LENGTH:
        reasons.append(NAME_TOO_LONG)
    if not record.value.is_finite() or abs(record.value) >= VALUE_LIMIT:
        reasons.append(INVALID_VALUE)
    if not record.status:
        reasons.append(STATUS_REQUIRED)
    if len(record.status) > STATUS_MAX_LENGTH:
        reasons.append(STATUS_TOO_LONG)
    return reasons


def is_valid_id(value: object) -> TypeGuard[int]:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= ID_MAX
