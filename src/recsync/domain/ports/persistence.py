"""Ports for reading and updating the record store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from recsync.domain.model import (
        BulkUpdateResult,
        CanonicalRecord,
        CatalogDescription,
        RecordPage,
        StatusSummary,
        UpdatableCheck,
    )


@runtime_checkable
class StoreCatalog(Protocol):
    """Read-only access to the store's metadata catalog."""

    def describe(self, parameter_shape: str, target: str) -> CatalogDescription: ...


@runtime_checkable
class RecordRepository(Protocol):
    """Persistence contract for reconciled records."""

    def bulk_update_open(self, rows: Sequence[CanonicalRecord]) -> BulkUpdateResult:
        """Overwrite open records matching ``rows`` in one set-based statement.

        Runs inside the caller's transaction; nothing is committed here.
        """
        ...

    def page(
        self,
        page: int,
        page_size: int,
        *,
        is_open: bool | None = None,
        status: str | None = None,
    ) -> RecordPage: ...

    def check_updatable(self, ids: Sequence[int]) -> list[UpdatableCheck]: ...

    def status_summary(self) -> list[StatusSummary]: ...
