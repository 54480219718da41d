"""Logging setup and per-run logger binding."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any

type BoundLogger = logging.Logger | logging.LoggerAdapter[Any]


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format suitable for CLI output. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )


class ContextLoggerAdapter(logging.LoggerAdapter[Any]):
    """Logger adapter appending bound ``key=value`` context to every message.

    The context is also exposed on the record via ``extra`` so structured handlers
    can pick it up without parsing the message.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        context: Mapping[str, object] = self.extra or {}
        if not context:
            return msg, kwargs
        extra = dict(kwargs.get("extra") or {})
        extra.update(context)
        kwargs["extra"] = extra
        suffix = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{msg} [{suffix}]", kwargs


def bind_logger(logger: BoundLogger, **context: object) -> ContextLoggerAdapter:
    """Return ``logger`` wrapped with additional context, merging existing bindings."""

    if isinstance(logger, logging.LoggerAdapter):
        merged = {**(logger.extra or {}), **context}
        return ContextLoggerAdapter(logger.logger, merged)
    return ContextLoggerAdapter(logger, context)
