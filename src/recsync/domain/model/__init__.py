"""Domain model for record reconciliation."""

from __future__ import annotations

from .outcomes import (
    BulkUpdateResult,
    CatalogDescription,
    PreflightResult,
    ReconcileStats,
    ReconciliationReport,
    RecordPage,
    RejectedRecord,
    StatusSummary,
    UpdatableCheck,
    UpdateEligibility,
    ValidationResult,
)
from .records import (
    DEFAULT_STATUS,
    ID_MAX,
    NAME_MAX_LENGTH,
    STATUS_MAX_LENGTH,
    VALUE_LIMIT,
    CanonicalRecord,
    StoredRecord,
)

__all__ = [
    "DEFAULT_STATUS",
    "ID_MAX",
    "NAME_MAX_LENGTH",
    "STATUS_MAX_LENGTH",
    "VALUE_LIMIT",
    "BulkUpdateResult",
    "CanonicalRecord",
    "CatalogDescription",
    "PreflightResult",
    "ReconcileStats",
    "ReconciliationReport",
    "RecordPage",
    "RejectedRecord",
    "StatusSummary",
    "StoredRecord",
    "UpdatableCheck",
    "UpdateEligibility",
    "ValidationResult",
]
