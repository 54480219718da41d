from __future__ import annotations

import pytest
from sqlalchemy import exc as sa_exc

from recsync.adapters.sqlalchemy.errors import translate_store_error
from recsync.domain.errors import FailureKind, StoreError, StoreTimeoutError


def _operational(message: str) -> sa_exc.OperationalError:
    return sa_exc.OperationalError("UPDATE record SET ...", {}, Exception(message))


def test_missing_parameter_shape_gets_fixed_message() -> None:
    error = translate_store_error(_operational("no such table: record_batch"))

    assert type(error) is StoreError
    assert error.object_name == "record_batch"
    assert str(error) == "Bulk parameter shape 'record_batch' not found or has unexpected structure"


def test_missing_target_gets_fixed_message() -> None:
    error = translate_store_error(_operational('relation "record" does not exist'))

    assert error.object_name == "record"
    assert str(error) == "Table 'record' not found or has unexpected structure"


@pytest.mark.parametrize(
    "message",
    ["database is locked", "canceling statement due to statement timeout"],
)
def test_timeouts_are_retryable(message: str) -> None:
    error = translate_store_error(_operational(message))

    assert isinstance(error, StoreTimeoutError)
    assert error.kind is FailureKind.STORE_TIMEOUT
    assert error.retryable is True


def test_pool_timeout_is_classified_as_timeout() -> None:
    error = translate_store_error(sa_exc.TimeoutError("QueuePool limit reached"))

    assert isinstance(error, StoreTimeoutError)


def test_integrity_error_names_target() -> None:
    integrity = sa_exc.IntegrityError(
        "INSERT INTO record_batch ...", {}, Exception("UNIQUE constraint failed: record_batch.id")
    )

    error = translate_store_error(integrity)

    assert str(error) == "Constraint violation on 'record_batch'"
    assert error.retryable is False


def test_unrecognised_failure_keeps_driver_message() -> None:
    error = translate_store_error(_operational("disk I/O error"))

    assert str(error) == "Failed to update records: disk I/O error"
    assert error.object_name is None
    assert error.kind is FailureKind.STORE
