"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from mediafixer.adapters.csv_mapping import MappingLoadError, load_mapping_csv
from mediafixer.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyMediaUnitOfWork,
    is_started,
    startup,
)
from mediafixer.adapters.wordpress import WordPressMediaStore
from mediafixer.config import get_database_config, get_wordpress_config
from mediafixer.domain.mapping import empty_mapping
from mediafixer.domain.reconciliation import run_fix

if TYPE_CHECKING:
    from pathlib import Path

    from mediafixer.domain.mapping import MediaMapping
    from mediafixer.domain.model import RunSummary
    from mediafixer.domain.ports import MediaStore
    from mediafixer.domain.reconciliation import FixSettings

type Backend = Literal["database", "rest"]
UnitOfWorkFactory = Callable[[], SqlAlchemyMediaUnitOfWork]

log = getLogger(__name__)


def load_mapping(path: str | Path | None) -> MediaMapping:
    """Load the override mapping, falling back to an empty one when it is unusable."""

    if path is None:
        return empty_mapping()
    try:
        return load_mapping_csv(path)
    except MappingLoadError as exc:
        log.warning("%s Continuing without mapping.", exc)
        return empty_mapping()


def fix_media(
    settings: FixSettings,
    *,
    store: MediaStore,
    mapping_path: str | Path | None = None,
) -> RunSummary:
    """Run one fix pass against ``store``."""

    mapping = load_mapping(mapping_path)
    return run_fix(store, settings, mapping=mapping)


def fix_media_in_database(
    settings: FixSettings,
    *,
    mapping_path: str | Path | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> RunSummary:
    """Fix media by talking to the WordPress database directly."""

    if unit_of_work_factory is None:
        if not is_started():
            startup(config=get_database_config())
        unit_of_work_factory = SqlAlchemyMediaUnitOfWork

    with unit_of_work_factory() as uow:
        return fix_media(settings, store=uow.store, mapping_path=mapping_path)


def fix_media_via_rest(
    settings: FixSettings,
    *,
    mapping_path: str | Path | None = None,
    store: WordPressMediaStore | None = None,
) -> RunSummary:
    """Fix media through the WordPress REST API."""

    effective_store = store or WordPressMediaStore.from_config(get_wordpress_config())
    log.info("Using WordPress REST API at %s", effective_store.client.api_url)
    return fix_media(settings, store=effective_store, mapping_path=mapping_path)


def run_fix_command(
    settings: FixSettings,
    *,
    backend: Backend = "database",
    mapping_path: str | Path | None = None,
) -> RunSummary:
    """Dispatch a fix run to the selected backend."""

    if backend == "database":
        return fix_media_in_database(settings, mapping_path=mapping_path)
    if backend == "rest":
        return fix_media_via_rest(settings, mapping_path=mapping_path)
    raise ValueError(f"Unsupported backend: {backend}")
