"""SQLAlchemy-backed unit of work for the record store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any, Literal

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from recsync.adapters.sqlalchemy.errors import translate_store_error
from recsync.adapters.sqlalchemy.mappings import start_mappers
from recsync.adapters.sqlalchemy.migrations import upgrade_head
from recsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyRecordRepository,
    SqlAlchemyStoreCatalog,
)
from recsync.config.storage import DatabaseConfig, get_database_config
from recsync.domain.ports.unit_of_work import RecordRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call recsync.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def engine_options(config: DatabaseConfig) -> dict[str, Any]:
    """Return ``create_engine`` keyword arguments bounding each store request."""

    backend = make_url(config.uri).get_backend_name()
    timeout = config.request_timeout_seconds
    if backend == "sqlite":
        return {"connect_args": {"timeout": timeout}}
    if backend == "postgresql":
        statement_timeout_ms = int(timeout * 1000)
        return {"connect_args": {"options": f"-c statement_timeout={statement_timeout_ms}"}}
    log.debug("No request timeout mapping for backend %s", backend)
    return {}


def create_store_engine(config: DatabaseConfig) -> Engine:
    return create_engine(config.uri, future=True, **engine_options(config))


def startup(
    *,
    engine: Engine | None = None,
    database_config: DatabaseConfig | None = None,
    migrate: bool | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, mappers, schema, and session factory.

    Schema migrations run unless ``migrate`` (or ``DatabaseConfig.auto_migrate``)
    says otherwise; the pipeline's preflight then reports a store that was never
    migrated.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    config = database_config or get_database_config()
    resolved_engine = engine or create_store_engine(config)
    start_mappers()
    if config.auto_migrate if migrate is None else migrate:
        upgrade_head(engine=resolved_engine)

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            raise translate_store_error(exc, operation="commit the transaction") from exc

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyUnitOfWork(BaseSqlAlchemyUnitOfWork[RecordRepositories]):
    """Unit of work managing SQLAlchemy sessions for record reconciliation."""

    def _build_repositories(self, session: Session) -> RecordRepositories:
        return RecordRepositories(
            records=SqlAlchemyRecordRepository(session),
            catalog=SqlAlchemyStoreCatalog(session),
        )


if TYPE_CHECKING:
    from recsync.domain.ports.unit_of_work import RecordUnitOfWork

    _uow_check: RecordUnitOfWork = SqlAlchemyUnitOfWork()
