from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from mediafixer.adapters.sqlalchemy import WordPressTables, create_all_tables
from mediafixer.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMediaUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def wordpress_schema(sqlite_engine: Engine) -> WordPressTables:
    return create_all_tables(sqlite_engine)


@pytest.fixture
def sqlite_session(sqlite_engine: Engine, wordpress_schema: WordPressTables) -> Iterator[Session]:
    del wordpress_schema
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
    wordpress_schema: WordPressTables,
) -> Iterator[Callable[[], SqlAlchemyMediaUnitOfWork]]:
    del wordpress_schema
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyMediaUnitOfWork:
        return SqlAlchemyMediaUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
