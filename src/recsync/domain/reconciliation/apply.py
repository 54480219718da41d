"""Apply an accepted batch to the store as one conditional bulk update."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from recsync.domain.model import ReconcileStats

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from recsync.config.logging import BoundLogger
    from recsync.domain.model import CanonicalRecord
    from recsync.domain.ports import RecordUnitOfWork


@dataclass(slots=True)
class Reconciler:
    """Update open records from an accepted batch, atomically.

    The batch is handed to the repository in a single call and committed once. If
    anything fails the unit of work rolls back and the error propagates unchanged,
    so either every eligible row is updated or none is.

    ``skipped`` is derived from the store's row count and covers both ids that do
    not exist and ids whose record is closed; the two cases are not told apart.
    """

    unit_of_work_factory: Callable[[], RecordUnitOfWork]
    log: BoundLogger = field(default_factory=lambda: getLogger(__name__))

    def apply(
        self,
        accepted: Sequence[CanonicalRecord],
        *,
        log: BoundLogger | None = None,
    ) -> ReconcileStats:
        active_log = log or self.log
        if not accepted:
            active_log.warning("No records provided for update")
            return ReconcileStats(updated=0, skipped=0)

        active_log.debug("Updating %s records, first id=%s", len(accepted), accepted[0].id)
        with self.unit_of_work_factory() as uow:
            result = uow.repositories.records.bulk_update_open(accepted)
            uow.commit()

        updated = result.updated_count
        skipped = len(accepted) - updated
        active_log.info(
            "Batch update completed: %s updated, %s skipped (not open or not found)",
            updated,
            skipped,
        )
        return ReconcileStats(updated=updated, skipped=skipped)
