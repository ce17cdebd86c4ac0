"""SQLAlchemy engine lifecycle and unit of work for the media store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, sessionmaker

from mediafixer.domain.errors import StoreUnavailableError

from .store import SqlAlchemyMediaStore
from .tables import WordPressTables, wordpress_tables

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

    from mediafixer.config.storage import DatabaseConfig


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None
    tables: WordPressTables | None = None

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
                "SQLAlchemy adapter not initialised. Call mediafixer.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    config: DatabaseConfig | None = None,
    table_prefix: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )
    if engine is None:
        if config is None:
            raise StartupError("Either an engine or a database configuration is required")
        engine = create_engine(config.uri, future=True, pool_pre_ping=True)
    prefix = table_prefix or (config.table_prefix if config is not None else "wp_")

    _STATE.engine = engine
    _STATE.tables = wordpress_tables(prefix)


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
    _STATE.tables = None


class SqlAlchemyMediaUnitOfWork:
    """Open one session for a fix run and expose the store bound to it."""

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._tables = _STATE.tables or wordpress_tables()
        self._session: Session | None = None
        self._store: SqlAlchemyMediaStore | None = None

    def __enter__(self) -> SqlAlchemyMediaUnitOfWork:
        session = self.session_factory()
        try:
            session.connection()
        except DBAPIError as exc:
            session.close()
            raise StoreUnavailableError(f"Could not connect to the database: {exc}") from exc
        self._session = session
        self._store = SqlAlchemyMediaStore(session, self._tables)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if self._session is not None:
            if exc_type is not None:
                self._session.rollback()
            self._session.close()
        self._session = None
        self._store = None
        return False

    @property
    def store(self) -> SqlAlchemyMediaStore:
        if self._store is None:
            raise StartupError("Unit of work session not initialised")
        return self._store
