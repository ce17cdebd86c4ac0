from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from mediafixer.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMediaUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from mediafixer.config import DatabaseConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine

    from mediafixer.adapters.sqlalchemy import WordPressTables


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyMediaUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert is_started()


def test_startup_requires_engine_or_config() -> None:
    with pytest.raises(StartupError):
        startup()


def test_startup_from_config_uses_table_prefix() -> None:
    startup(config=DatabaseConfig(uri="sqlite+pysqlite:///:memory:", table_prefix="blog_"))

    uow = SqlAlchemyMediaUnitOfWork()
    with uow:
        assert uow.store.tables.posts.name == "blog_posts"


def test_store_is_only_available_inside_the_unit_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyMediaUnitOfWork],
) -> None:
    uow = sqlite_unit_of_work()

    with pytest.raises(StartupError):
        _ = uow.store

    with uow:
        assert uow.store.list_candidate_ids(50, 1) == []

    with pytest.raises(StartupError):
        _ = uow.store


def test_unit_of_work_shares_the_engine(
    sqlite_engine: Engine,
    wordpress_schema: WordPressTables,
    sqlite_unit_of_work: Callable[[], SqlAlchemyMediaUnitOfWork],
) -> None:
    with sqlite_engine.begin() as connection:
        connection.execute(
            wordpress_schema.posts.insert().values(
                ID=12,
                post_title="IMG_12",
                post_type="attachment",
                post_status="inherit",
                post_mime_type="image/png",
            )
        )

    with sqlite_unit_of_work() as uow:
        assert uow.store.list_candidate_ids(50, 1) == [12]
