"""SQLAlchemy adapter for WordPress databases."""

from __future__ import annotations

from .store import SqlAlchemyMediaStore, escape_like
from .tables import WordPressTables, create_all_tables, wordpress_tables
from .unit_of_work import (
    SqlAlchemyMediaUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyMediaStore",
    "SqlAlchemyMediaUnitOfWork",
    "StartupError",
    "WordPressTables",
    "create_all_tables",
    "escape_like",
    "is_started",
    "shutdown",
    "startup",
    "wordpress_tables",
]
