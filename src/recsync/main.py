#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
import threading
from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Final

from dotenv import load_dotenv

from recsync.app import (
    check_updatable,
    list_records,
    reconcile_feed,
    reconcile_payload,
    record_stats,
    verify_store,
)
from recsync.config import ConfigurationError, configure_logging
from recsync.config.sync import DEFAULT_PAGE_SIZE
from recsync.domain.errors import FeedFormatError, ReconciliationError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

EXIT_OK: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_USAGE: Final[int] = 2
EXIT_PREFLIGHT: Final[int] = 3
EXIT_RETRYABLE: Final[int] = 75

_CANCEL = threading.Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile external records into the store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    fetch = commands.add_parser("fetch", help="Fetch the feed and reconcile it")
    fetch.add_argument("url", nargs="?", help="Feed URL (default: $FEED_URL)")
    fetch.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header; may be given more than once",
    )
    fetch.add_argument("--timeout", type=float, help="Request timeout in seconds")

    apply = commands.add_parser("apply", help="Reconcile records from a JSON file")
    apply.add_argument("file", help="JSON array of records, or - for stdin")

    records = commands.add_parser("records", help="List stored records")
    records.add_argument("--page", type=int, default=1, help="1-based page number")
    records.add_argument(
        "--page-size",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        help="Records per page (default: %(default)s)",
    )
    open_filter = records.add_mutually_exclusive_group()
    open_filter.add_argument("--open-only", action="store_true", help="Only open records")
    open_filter.add_argument("--closed-only", action="store_true", help="Only closed records")
    records.add_argument("--status", help="Only records with this status")

    check = commands.add_parser("check", help="Tell whether records could be updated")
    check.add_argument("ids", nargs="+", type=int, metavar="ID")

    commands.add_parser("stats", help="Summarise stored records per status")
    commands.add_parser("preflight", help="Verify the store's bulk-update contract")

    return parser.parse_args(list(argv))


def _parse_headers(values: Sequence[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, separator, content = value.partition(":")
        if not separator or not name.strip():
            raise ValueError(f"Invalid header, expected NAME:VALUE: {value!r}")
        headers[name.strip()] = content.strip()
    return headers


def _load_payload(source: str) -> object:
    try:
        if source == "-":
            return json.load(sys.stdin)
        with Path(source).open(encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError as exc:
        raise FeedFormatError(f"Invalid input format - not JSON: {exc}") from exc


def _to_jsonable(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: _to_jsonable(getattr(value, item.name))
            for item in dataclasses.fields(value)
        }
    if isinstance(value, list | tuple):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _emit(value: object) -> None:
    print(json.dumps(_to_jsonable(value), indent=2))


def _is_open_filter(args: argparse.Namespace) -> bool | None:
    if args.open_only:
        return True
    if args.closed_only:
        return False
    return None


def _dispatch(args: argparse.Namespace) -> int:
    match args.command:
        case "fetch":
            report = reconcile_feed(
                args.url,
                headers=_parse_headers(args.header),
                timeout=args.timeout,
                cancel=_CANCEL,
            )
            _emit(report.to_dict())
        case "apply":
            report = reconcile_payload(_load_payload(args.file), cancel=_CANCEL)
            _emit(report.to_dict())
        case "records":
            _emit(
                list_records(
                    page=args.page,
                    page_size=args.page_size,
                    is_open=_is_open_filter(args),
                    status=args.status,
                )
            )
        case "check":
            _emit(check_updatable(args.ids))
        case "stats":
            _emit(record_stats())
        case "preflight":
            result = verify_store()
            _emit({"ok": result.ok, "issues": list(result.issues)})
            if not result.ok:
                return EXIT_PREFLIGHT
        case _:
            raise ValueError(f"Unknown command: {args.command}")
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        exit_code = _dispatch(parsed_args)
    except ReconciliationError as exc:
        print(f"Error ({exc.kind}): {exc}", file=sys.stderr)
        sys.exit(EXIT_RETRYABLE if exc.retryable else EXIT_FAILURE)
    except (ConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except Exception as e:  # noqa: BLE001
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Cancel the running reconciliation on the first Ctrl+C, exit on the second."""
    if _CANCEL.is_set():
        print("\nClosed by user (Ctrl+C)", file=sys.stderr)
        sys.exit(0)
    print("\nCancelling, press Ctrl+C again to quit", file=sys.stderr)
    _CANCEL.set()


def run() -> None:
    """Console script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
