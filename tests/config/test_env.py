from __future__ import annotations

import pytest

from recsync.config import ConfigurationError, MissingConfigurationError, require_env_vars
from recsync.config.env import env_bool, env_float, env_int, optional_env_var


def test_require_env_vars_returns_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXAMPLE_VAR", "value")

    result = require_env_vars(["EXAMPLE_VAR"])

    assert result["EXAMPLE_VAR"] == "value"


def test_require_env_vars_reports_missing_and_blank(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MISSING_VAR", raising=False)
    monkeypatch.setenv("BLANK_VAR", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_vars(["MISSING_VAR", "BLANK_VAR"])

    assert str(exc.value) == "Missing configuration for: BLANK_VAR, MISSING_VAR"
    assert isinstance(exc.value, ConfigurationError)


def test_optional_env_var_strips_and_treats_blank_as_unset(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("PADDED_VAR", "  value ")
    monkeypatch.setenv("BLANK_VAR", "")

    assert optional_env_var("PADDED_VAR") == "value"
    assert optional_env_var("BLANK_VAR") is None


def test_numeric_loaders(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLOAT_VAR", "2.5")
    monkeypatch.setenv("INT_VAR", "3")
    monkeypatch.delenv("UNSET_VAR", raising=False)

    assert env_float("FLOAT_VAR", 1.0) == 2.5
    assert env_int("INT_VAR", 0) == 3
    assert env_float("UNSET_VAR", 1.0) == 1.0
    assert env_int("UNSET_VAR", 7) == 7


@pytest.mark.parametrize(
    ("loader", "raw"),
    [
        (env_float, "abc"),
        (env_float, "0"),
        (env_int, "1.5"),
        (env_int, "-1"),
        (env_bool, "maybe"),
    ],
)
def test_malformed_values_raise(
    monkeypatch: pytest.MonkeyPatch, loader: object, raw: str
) -> None:
    monkeypatch.setenv("BROKEN_VAR", raw)

    with pytest.raises(ConfigurationError, match="BROKEN_VAR"):
        loader("BROKEN_VAR", 1)  # type: ignore[operator]


@pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("OFF", False), ("1", True)])
def test_env_bool(monkeypatch: pytest.MonkeyPatch, raw: str, *, expected: bool) -> None:
    monkeypatch.setenv("FLAG_VAR", raw)

    assert env_bool("FLAG_VAR", not expected) is expected
