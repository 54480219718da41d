from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from recsync.config import storage


def test_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("RECSYNC_DATA_DIR", str(custom))

    config = storage.get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()
    assert config.http_cache_path() == custom.resolve() / storage.HTTP_CACHE_FILENAME


def test_database_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite:///override.db")
    monkeypatch.setenv("DATABASE_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("DATABASE_AUTO_MIGRATE", "false")

    config = storage.get_database_config()

    assert config.uri == "sqlite:///override.db"
    assert config.request_timeout_seconds == 15.0
    assert config.auto_migrate is False


def test_database_config_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("DATABASE_TIMEOUT_SECONDS", raising=False)
    monkeypatch.delenv("DATABASE_AUTO_MIGRATE", raising=False)
    monkeypatch.setenv("RECSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    config = storage.get_database_config()

    expected_path = (tmp_path / "data-dir" / storage.DEFAULT_DB_FILENAME).resolve()
    assert config.uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()
    assert config.request_timeout_seconds == storage.DEFAULT_DATABASE_TIMEOUT_SECONDS
    assert config.auto_migrate is True
