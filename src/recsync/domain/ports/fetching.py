"""Ports for fetching records from the external feed."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@runtime_checkable
class FeedFetcher(Protocol):
    """Callable port returning the raw records published by the feed.

    Implementations raise ``FeedTimeoutError``, ``FeedHTTPError`` or
    ``FeedTransportError`` for transport failures and ``FeedFormatError`` when the
    body is not an array.
    """

    def __call__(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> Sequence[object]: ...


__all__ = ["FeedFetcher"]
