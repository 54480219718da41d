"""Read-only check that the store exposes the bulk-update contract."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from recsync.domain.model import PreflightResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from recsync.config.logging import BoundLogger
    from recsync.domain.model import CatalogDescription
    from recsync.domain.ports import RecordUnitOfWork


@dataclass(frozen=True, slots=True)
class BulkContract:
    """Names and columns the bulk update relies on."""

    parameter_shape: str = "record_batch"
    parameter_columns: frozenset[str] = frozenset(
        {"batch_id", "id", "name", "value", "status", "updated_at"}
    )
    target: str = "record"
    target_columns: frozenset[str] = frozenset(
        {"id", "name", "value", "status", "updated_at", "is_open"}
    )


DEFAULT_BULK_CONTRACT = BulkContract()


def contract_issues(description: CatalogDescription, contract: BulkContract) -> list[str]:
    """Compare what the catalog reports against ``contract``."""

    issues: list[str] = []

    if description.parameter_columns is None:
        issues.append(f'Bulk parameter shape "{contract.parameter_shape}" does not exist')
    else:
        missing = contract.parameter_columns - description.parameter_columns
        if missing:
            issues.append(
                f'Bulk parameter shape "{contract.parameter_shape}" is missing columns: '
                f"{', '.join(sorted(missing))}"
            )

    if description.target_columns is None:
        issues.append(
            f'Bulk update operation target "{contract.target}" does not exist '
            "(operation missing)"
        )
    else:
        missing = contract.target_columns - description.target_columns
        if missing:
            issues.append(
                f'Bulk update operation target "{contract.target}" is missing columns: '
                f"{', '.join(sorted(missing))}"
            )

    return issues


@dataclass(slots=True)
class SchemaPreflight:
    """Verify the store-side bulk-update contract before any data is sent.

    Issues are returned as data. A failing catalog query propagates as the
    ``StoreError`` raised by the adapter.
    """

    unit_of_work_factory: Callable[[], RecordUnitOfWork]
    contract: BulkContract = DEFAULT_BULK_CONTRACT
    log: BoundLogger = field(default_factory=lambda: getLogger(__name__))

    def check(self, *, log: BoundLogger | None = None) -> PreflightResult:
        active_log = log or self.log
        with self.unit_of_work_factory() as uow:
            description = uow.repositories.catalog.describe(
                self.contract.parameter_shape, self.contract.target
            )

        issues = contract_issues(description, self.contract)
        if issues:
            active_log.error("Store preflight failed: %s", "; ".join(issues))
        else:
            active_log.debug("Store preflight passed")
        return PreflightResult(issues=tuple(issues))
