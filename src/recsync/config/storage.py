"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_bool, env_float, optional_env_var

APP_DIR_NAME: Final[str] = "recsync"
DEFAULT_DB_FILENAME: Final[str] = "recsync.db"
HTTP_CACHE_FILENAME: Final[str] = "http_cache.db"
DEFAULT_DATABASE_TIMEOUT_SECONDS: Final[float] = 60.0


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME
    http_cache_filename: str = HTTP_CACHE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.http_cache_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """Connection settings for the record store.

    ``request_timeout_seconds`` bounds how long a single store request may block
    (lock wait on SQLite, statement timeout on PostgreSQL).
    """

    uri: str
    request_timeout_seconds: float = DEFAULT_DATABASE_TIMEOUT_SECONDS
    auto_migrate: bool = True


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env_var("RECSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    timeout = env_float("DATABASE_TIMEOUT_SECONDS", DEFAULT_DATABASE_TIMEOUT_SECONDS)
    auto_migrate = env_bool("DATABASE_AUTO_MIGRATE", True)  # noqa: FBT003
    env_uri = optional_env_var("DATABASE_URI")
    if env_uri:
        uri = env_uri
    else:
        storage_config = storage or get_storage_config()
        uri = storage_config.database_uri()
    return DatabaseConfig(uri=uri, request_timeout_seconds=timeout, auto_migrate=auto_migrate)


def get_database_uri() -> str:
    return get_database_config().uri


def get_http_cache_path() -> Path:
    return get_storage_config().http_cache_path()
