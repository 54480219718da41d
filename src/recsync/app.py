"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from recsync.adapters.feed import build_http_feed_fetcher
from recsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from recsync.config import get_sync_config, require_env_vars
from recsync.domain.ports.unit_of_work import RecordUnitOfWork
from recsync.domain.reconciliation import Reconciler, ReconciliationPipeline, SchemaPreflight

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping, Sequence

    from recsync.domain.model import (
        PreflightResult,
        RecordPage,
        ReconciliationReport,
        StatusSummary,
        UpdatableCheck,
    )
    from recsync.domain.ports import FeedFetcher

UnitOfWorkFactory = Callable[[], RecordUnitOfWork]


log = getLogger(__name__)


def _resolve_unit_of_work(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_pipeline(
    *,
    fetcher: FeedFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ReconciliationPipeline:
    """Wire the reconciliation pipeline to the configured adapters."""

    effective_uow = _resolve_unit_of_work(unit_of_work_factory)
    return ReconciliationPipeline(
        preflight=SchemaPreflight(unit_of_work_factory=effective_uow),
        reconciler=Reconciler(unit_of_work_factory=effective_uow),
        fetcher=fetcher,
    )


def reconcile_feed(
    url: str | None = None,
    *,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
    fetcher: FeedFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: threading.Event | None = None,
) -> ReconciliationReport:
    """Fetch the external feed and reconcile it against the store.

    Without an explicit ``url`` the ``FEED_URL`` environment variable is required.
    """

    if url is None:
        url = require_env_vars(("FEED_URL",))["FEED_URL"]
    effective_fetcher = fetcher or build_http_feed_fetcher()
    pipeline = build_pipeline(fetcher=effective_fetcher, unit_of_work_factory=unit_of_work_factory)

    log.info("Starting feed reconciliation: url=%s, timeout=%s", url, timeout)
    report = pipeline.fetch_and_run(url, headers=headers, timeout=timeout, cancel=cancel)
    log.info(
        f"Finished feed reconciliation: processed={report.processed}, "
        f"updated={report.updated}, skipped={report.skipped}, errors={len(report.errors)}"
    )
    return report


def reconcile_payload(
    payload: object,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    cancel: threading.Event | None = None,
) -> ReconciliationReport:
    """Reconcile records supplied directly as a decoded JSON payload."""

    pipeline = build_pipeline(unit_of_work_factory=unit_of_work_factory)
    report = pipeline.run_payload(payload, cancel=cancel)
    log.info(
        f"Finished payload reconciliation: processed={report.processed}, "
        f"updated={report.updated}, skipped={report.skipped}, errors={len(report.errors)}"
    )
    return report


def verify_store(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> PreflightResult:
    """Run the store preflight on its own."""

    preflight = SchemaPreflight(unit_of_work_factory=_resolve_unit_of_work(unit_of_work_factory))
    return preflight.check()


def list_records(
    *,
    page: int = 1,
    page_size: int | None = None,
    is_open: bool | None = None,
    status: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RecordPage:
    """Return one page of stored records, optionally filtered by open flag or status."""

    sync_config = get_sync_config()
    effective_size = page_size if page_size is not None else sync_config.default_page_size
    if effective_size > sync_config.max_page_size:
        raise ValueError(
            f"Page size must not exceed {sync_config.max_page_size}, got {effective_size}"
        )

    with _resolve_unit_of_work(unit_of_work_factory)() as uow:
        return uow.repositories.records.page(page, effective_size, is_open=is_open, status=status)


def check_updatable(
    ids: Sequence[int],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[UpdatableCheck]:
    """Report, per id, whether a reconciliation would be allowed to update it."""

    with _resolve_unit_of_work(unit_of_work_factory)() as uow:
        return uow.repositories.records.check_updatable(ids)


def record_stats(*, unit_of_work_factory: UnitOfWorkFactory | None = None) -> list[StatusSummary]:
    """Summarise stored records per status."""

    with _resolve_unit_of_work(unit_of_work_factory)() as uow:
        return uow.repositories.records.status_summary()
