"""Results produced by the pipeline stages and the store."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    from .records import CanonicalRecord, StoredRecord


@dataclass(frozen=True, slots=True)
class RejectedRecord:
    """A record refused by validation, with every reason that applied."""

    index: int
    id: object
    reasons: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Record {self.index} (ID: {self.id}): {', '.join(self.reasons)}"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    accepted: tuple[CanonicalRecord, ...] = ()
    rejected: tuple[RejectedRecord, ...] = ()

    @property
    def errors(self) -> list[str]:
        return [rejection.message for rejection in self.rejected]


@dataclass(frozen=True, slots=True)
class PreflightResult:
    issues: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.issues


@dataclass(frozen=True, slots=True)
class BulkUpdateResult:
    """Statistics reported by the store for one bulk update."""

    updated_count: int
    skipped_count: int
    total_input_records: int


@dataclass(frozen=True, slots=True)
class ReconcileStats:
    updated: int
    skipped: int


@dataclass(frozen=True, slots=True)
class ReconciliationReport:
    """Aggregate outcome of one pipeline run.

    ``processed`` counts raw input records, whether fetched from the feed or
    supplied directly. ``skipped`` sums validation rejects and store-side misses.
    """

    processed: int
    updated: int
    skipped: int
    errors: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "processed": self.processed,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": list(self.errors),
        }


@dataclass(frozen=True, slots=True)
class CatalogDescription:
    """Column names of the bulk-update objects found in the store catalog.

    A ``None`` entry means the object does not exist.
    """

    parameter_columns: frozenset[str] | None
    target_columns: frozenset[str] | None


@dataclass(frozen=True, slots=True)
class RecordPage:
    items: tuple[StoredRecord, ...]
    total: int
    page: int
    page_size: int


class UpdateEligibility(StrEnum):
    CAN_UPDATE = "Can Update"
    CLOSED = "Cannot Update - Record Closed"
    NOT_FOUND = "Record Not Found"


@dataclass(frozen=True, slots=True)
class UpdatableCheck:
    id: int
    eligibility: UpdateEligibility
    record: StoredRecord | None = None


@dataclass(frozen=True, slots=True)
class StatusSummary:
    status: str
    record_count: int
    average_value: Decimal | None
    oldest_update: datetime | None
    latest_update: datetime | None
