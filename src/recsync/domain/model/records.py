"""Record types flowing through the reconciliation pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

NAME_MAX_LENGTH: Final[int] = 255
STATUS_MAX_LENGTH: Final[int] = 50
DEFAULT_STATUS: Final[str] = "Unknown"
# Bounds of the persisted layout: a 32-bit integer key and NUMERIC(10, 2) values.
ID_MAX: Final[int] = 2**31 - 1
VALUE_LIMIT: Final[int] = 10**8


@dataclass(frozen=True, slots=True)
class CanonicalRecord:
    """A feed record in the internal shape used for validation and updates.

    ``id`` is carried exactly as the source supplied it; only records that pass
    validation are guaranteed to hold a positive ``int``.
    """

    id: object
    name: str
    value: Decimal
    status: str
    updated_at: datetime


@dataclass  # mapped imperatively by the SQLAlchemy adapter, so no slots
class StoredRecord:
    """A persisted entity as read back from the store.

    ``is_open`` is owned by the store. The pipeline never writes it.
    """

    id: int
    name: str
    value: Decimal
    status: str
    is_open: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
