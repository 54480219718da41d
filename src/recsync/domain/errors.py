"""Tagged failure taxonomy raised at adapter boundaries.

Adapters translate library exceptions into these classes where they occur; the
pipeline and its callers branch on ``kind`` and ``retryable`` and never inspect
the wrapped exception.
"""

from __future__ import annotations

from enum import StrEnum


class FailureKind(StrEnum):
    FORMAT = "format-error"
    TRANSPORT_TIMEOUT = "transport-timeout"
    TRANSPORT_HTTP = "transport-http-error"
    TRANSPORT = "transport-error"
    STORE = "store-error"
    STORE_TIMEOUT = "store-timeout"
    CANCELLED = "cancelled"


class ReconciliationError(RuntimeError):
    """Base class for failures that abort a reconciliation run."""

    kind: FailureKind = FailureKind.STORE

    @property
    def retryable(self) -> bool:
        return False


class FeedFormatError(ReconciliationError):
    """Raised when a payload is not a sequence of records."""

    kind = FailureKind.FORMAT


class FeedTransportError(ReconciliationError):
    """Raised when the feed could not be reached (connection reset, DNS, ...)."""

    kind = FailureKind.TRANSPORT

    @property
    def retryable(self) -> bool:
        return True


class FeedTimeoutError(FeedTransportError):
    kind = FailureKind.TRANSPORT_TIMEOUT


class FeedHTTPError(FeedTransportError):
    """Raised when the feed answered with a non-success HTTP status."""

    kind = FailureKind.TRANSPORT_HTTP

    def __init__(self, status_code: int, reason: str = "") -> None:
        detail = f"{status_code} - {reason}" if reason else str(status_code)
        super().__init__(f"External API error: {detail}")
        self.status_code = status_code
        self.reason = reason

    @property
    def retryable(self) -> bool:
        return self.status_code == 429 or self.status_code >= 500  # noqa: PLR2004


class StoreError(ReconciliationError):
    """Raised when a store operation failed; the transaction has been rolled back."""

    kind = FailureKind.STORE

    def __init__(self, message: str, *, object_name: str | None = None) -> None:
        super().__init__(message)
        self.object_name = object_name


class StoreTimeoutError(StoreError):
    kind = FailureKind.STORE_TIMEOUT

    @property
    def retryable(self) -> bool:
        return True


class RunCancelledError(ReconciliationError):
    """Raised when the caller cancelled a run before anything was applied."""

    kind = FailureKind.CANCELLED
