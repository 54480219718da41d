"""Compose normalization, validation, preflight and the bulk update."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from recsync.config.logging import bind_logger
from recsync.domain.errors import FeedFormatError, ReconciliationError, RunCancelledError
from recsync.domain.model import ReconciliationReport

from .normalize import normalize_records
from .validate import validate_records

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from recsync.config.logging import BoundLogger
    from recsync.domain.ports import FeedFetcher

    from .apply import Reconciler
    from .preflight import SchemaPreflight


@dataclass(slots=True)
class ReconciliationPipeline:
    """Run one reconciliation: preflight, normalize, validate, apply, report.

    Steps run sequentially and nothing is kept between runs, so one pipeline
    instance may serve concurrent callers. Failures are never retried here; they
    surface as ``ReconciliationError`` subclasses and the caller decides.
    """

    preflight: SchemaPreflight
    reconciler: Reconciler
    fetcher: FeedFetcher | None = None
    now: Callable[[], datetime] | None = None
    log: BoundLogger = field(default_factory=lambda: getLogger(__name__))

    def run(
        self,
        raw: Sequence[object],
        *,
        cancel: threading.Event | None = None,
    ) -> ReconciliationReport:
        """Reconcile records supplied by the caller."""

        run_log = self._bind_run_logger(source="input")
        try:
            _ensure_not_cancelled(cancel, "before preflight")
            preflight = self.preflight.check(log=run_log)
            if not preflight.ok:
                return ReconciliationReport(
                    processed=len(raw),
                    updated=0,
                    skipped=len(raw),
                    errors=preflight.issues,
                )
            run_log.info("Processing %s records", len(raw))
            return self._reconcile(raw, cancel=cancel, log=run_log)
        except ReconciliationError as exc:
            run_log.error("Reconciliation failed (%s): %s", exc.kind, exc)
            raise

    def run_payload(
        self,
        payload: object,
        *,
        cancel: threading.Event | None = None,
    ) -> ReconciliationReport:
        """Reconcile a decoded JSON payload, which must be an array."""

        if not _is_record_sequence(payload):
            raise FeedFormatError("Invalid input format - expected array")
        return self.run(payload, cancel=cancel)

    def fetch_and_run(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> ReconciliationReport:
        """Fetch records from the feed and reconcile them.

        The preflight runs before the fetch, so a broken store never costs a feed
        request.
        """

        if self.fetcher is None:
            raise RuntimeError("No feed fetcher configured for this pipeline")

        run_log = self._bind_run_logger(source="feed")
        try:
            _ensure_not_cancelled(cancel, "before preflight")
            preflight = self.preflight.check(log=run_log)
            if not preflight.ok:
                return ReconciliationReport(
                    processed=0, updated=0, skipped=0, errors=preflight.issues
                )

            run_log.info("Fetching data from external API: %s", url)
            raw = self.fetcher(url, headers=headers, timeout=timeout)
            if not _is_record_sequence(raw):
                raise FeedFormatError("Invalid API response format")
            run_log.info("Fetched %s records from external API", len(raw))

            _ensure_not_cancelled(cancel, "after fetch")
            return self._reconcile(raw, cancel=cancel, log=run_log)
        except ReconciliationError as exc:
            run_log.error("Fetch and reconcile failed (%s): %s", exc.kind, exc)
            raise

    def _reconcile(
        self,
        raw: Sequence[object],
        *,
        cancel: threading.Event | None,
        log: BoundLogger,
    ) -> ReconciliationReport:
        records = normalize_records(raw, now=self.now)
        validation = validate_records(records)
        errors = tuple(validation.errors)
        if errors:
            log.warning("%s records rejected by validation", len(errors))

        if not validation.accepted:
            log.warning("No valid records to update")
            return ReconciliationReport(
                processed=len(raw),
                updated=0,
                skipped=len(raw),
                errors=errors,
            )

        _ensure_not_cancelled(cancel, "before applying updates")
        stats = self.reconciler.apply(validation.accepted, log=log)
        report = ReconciliationReport(
            processed=len(raw),
            updated=stats.updated,
            skipped=stats.skipped + len(validation.rejected),
            errors=errors,
        )
        log.info(
            "Reconciliation completed: processed=%s, updated=%s, skipped=%s, errors=%s",
            report.processed,
            report.updated,
            report.skipped,
            len(report.errors),
        )
        return report

    def _bind_run_logger(self, *, source: str) -> BoundLogger:
        return bind_logger(self.log, run_id=uuid.uuid4().hex[:12], source=source)


def _is_record_sequence(payload: object) -> bool:
    return isinstance(payload, Sequence) and not isinstance(payload, str | bytes | bytearray)


def _ensure_not_cancelled(cancel: threading.Event | None, stage: str) -> None:
    if cancel is not None and cancel.is_set():
        raise RunCancelledError(f"Reconciliation run cancelled {stage}")
