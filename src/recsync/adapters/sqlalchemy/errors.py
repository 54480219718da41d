"""Translate SQLAlchemy exceptions into the domain's store failures."""

from __future__ import annotations

import re
from typing import Final

from sqlalchemy import exc as sa_exc

from recsync.domain.errors import StoreError, StoreTimeoutError

from .mappings import RECORD_BATCH_TABLE_NAME, RECORD_TABLE_NAME

_TIMEOUT_MARKERS: Final[tuple[str, ...]] = (
    "database is locked",
    "timeout",
    "timed out",
    "canceling statement",
)
_MISSING_OBJECT_MARKERS: Final[tuple[str, ...]] = (
    "no such table",
    "does not exist",
    "invalid object name",
    "undefined table",
)


def translate_store_error(
    error: sa_exc.SQLAlchemyError | OverflowError,
    *,
    operation: str = "update records",
) -> StoreError:
    """Return a ``StoreError`` naming the implicated object.

    Known failure patterns get a fixed message; anything else keeps the driver's
    text after a generic prefix. ``OverflowError`` covers drivers that reject
    out-of-range parameters before the statement reaches the database. The caller
    chains the original exception.
    """

    raw_message = _driver_message(error)
    lowered = raw_message.lower()
    object_name = _implicated_object(lowered)

    if isinstance(error, sa_exc.TimeoutError) or any(
        marker in lowered for marker in _TIMEOUT_MARKERS
    ):
        return StoreTimeoutError(
            f"Store request timed out while trying to {operation}", object_name=object_name
        )

    if any(marker in lowered for marker in _MISSING_OBJECT_MARKERS) and object_name:
        kind = "Bulk parameter shape" if object_name == RECORD_BATCH_TABLE_NAME else "Table"
        return StoreError(
            f"{kind} '{object_name}' not found or has unexpected structure",
            object_name=object_name,
        )

    if isinstance(error, sa_exc.IntegrityError):
        target = object_name or RECORD_TABLE_NAME
        return StoreError(f"Constraint violation on '{target}'", object_name=target)

    return StoreError(f"Failed to {operation}: {raw_message}", object_name=object_name)


def _driver_message(error: sa_exc.SQLAlchemyError | OverflowError) -> str:
    if isinstance(error, sa_exc.DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


def _implicated_object(message: str) -> str | None:
    for name in (RECORD_BATCH_TABLE_NAME, RECORD_TABLE_NAME):
        if re.search(rf"\b{re.escape(name)}\b", message):
            return name
    return None
