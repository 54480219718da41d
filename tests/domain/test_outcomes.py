from __future__ import annotations

from recsync.domain.model import (
    PreflightResult,
    ReconciliationReport,
    RejectedRecord,
    ValidationResult,
)


def test_rejected_record_message_joins_reasons() -> None:
    rejection = RejectedRecord(index=3, id="x", reasons=("Invalid or missing ID", "Name is required"))

    assert rejection.message == "Record 3 (ID: x): Invalid or missing ID, Name is required"
    assert ValidationResult(rejected=(rejection,)).errors == [rejection.message]


def test_preflight_result_ok() -> None:
    assert PreflightResult().ok is True
    assert PreflightResult(issues=("missing",)).ok is False


def test_report_to_dict() -> None:
    report = ReconciliationReport(processed=2, updated=1, skipped=1, errors=("e1",))

    assert report.to_dict() == {"processed": 2, "updated": 1, "skipped": 1, "errors": ["e1"]}
