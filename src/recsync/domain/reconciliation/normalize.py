"""Turn raw feed records into canonical records.

Normalization never fails: anything malformed becomes a best-effort canonical
value and is left for validation to reject.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, cast

from recsync.domain.model import DEFAULT_STATUS, CanonicalRecord

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

_ZERO = Decimal(0)

TIMESTAMP_FIELDS = ("lastModified", "last_modified")


def normalize_records(
    raw: Iterable[object],
    *,
    now: Callable[[], datetime] | None = None,
) -> list[CanonicalRecord]:
    """Normalize ``raw`` records in input order.

    Items may be mappings (decoded JSON) or objects exposing the fields as
    attributes, such as the feed adapter's ``RawRecord``. Anything else is
    treated as an empty record.
    """

    fallback_time = (now or _utcnow)()
    return [normalize_record(item, fallback_time=fallback_time) for item in raw]


def normalize_record(raw: object, *, fallback_time: datetime) -> CanonicalRecord:
    return CanonicalRecord(
        id=_normalize_id(_read(raw, "id")),
        name=_normalize_text(_read(raw, "name"), default=""),
        value=_normalize_value(_read(raw, "value")),
        status=_normalize_text(_read(raw, "status"), default=DEFAULT_STATUS),
        updated_at=_normalize_timestamp(_read(raw, *TIMESTAMP_FIELDS), fallback_time),
    )


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _read(raw: object, *names: str) -> object:
    if isinstance(raw, Mapping):
        mapping = cast(Mapping[str, object], raw)
        for name in names:
            if name in mapping:
                return mapping[name]
        return None
    for name in names:
        value = getattr(raw, name, None)
        if value is not None:
            return value
    return None


def _normalize_id(value: object) -> object:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _normalize_text(value: object, *, default: str) -> str:
    if value is None:
        return default
    text = value if isinstance(value, str) else str(value)
    return text.strip() or default


def _normalize_value(value: object) -> Decimal:
    if value is None:
        return _ZERO
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, int):
        number = Decimal(value)
    elif isinstance(value, float):
        number = Decimal(repr(value))
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return _ZERO
        try:
            number = Decimal(stripped)
        except InvalidOperation:
            return _ZERO
    else:
        return _ZERO
    if number.is_nan():
        return _ZERO
    return number


def _normalize_timestamp(value: object, fallback: datetime) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, str):
        parsed = _parse_iso_datetime(value)
        if parsed is not None:
            return parsed
    return fallback


def _parse_iso_datetime(value: str) -> datetime | None:
    normalized = value.strip()
    if not normalized:
        return None
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    return _as_utc(parsed)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
