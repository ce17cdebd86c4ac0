from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mediafixer.app import fix_media, fix_media_in_database, load_mapping
from mediafixer.domain.reconciliation import FixSettings
from tests.helpers.media import FakeContent, FakeMediaStore, make_attachment

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import pytest
    from sqlalchemy.engine import Engine

    from mediafixer.adapters.sqlalchemy import SqlAlchemyMediaUnitOfWork, WordPressTables


def test_unusable_mapping_falls_back_to_empty(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="mediafixer"):
        mapping = load_mapping(tmp_path / "absent.csv")

    assert not mapping
    assert any("Continuing without mapping" in record.getMessage() for record in caplog.records)


def test_unreadable_mapping_falls_back_to_empty(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = tmp_path / "mapping.csv"
    path.write_bytes(b"attachment_id,proposed_title\n2,Caf\xe9 cr\xe8me\n")

    with caplog.at_level(logging.WARNING, logger="mediafixer"):
        mapping = load_mapping(path)

    assert not mapping
    assert any("Could not read mapping file" in record.getMessage() for record in caplog.records)


def test_fix_media_applies_mapping_file(tmp_path: Path) -> None:
    path = tmp_path / "mapping.csv"
    path.write_text("attachment_id,proposed_title\n2,Mountain Lake\n", encoding="utf-8")
    store = FakeMediaStore.with_records(
        [make_attachment(1, "IMG_1", parent_id=10), make_attachment(2, "IMG_2")],
        [FakeContent(id=10, title="Post")],
    )

    summary = fix_media(FixSettings.build(execute=True), store=store, mapping_path=path)

    assert store.title_writes == [(2, "Mountain Lake", "attachment-2")]
    assert summary.scanned == 2


def test_fix_media_in_database(
    sqlite_engine: Engine,
    wordpress_schema: WordPressTables,
    sqlite_unit_of_work: Callable[[], SqlAlchemyMediaUnitOfWork],
) -> None:
    posts = wordpress_schema.posts
    with sqlite_engine.begin() as connection:
        connection.execute(
            posts.insert().values(
                ID=10,
                post_title="Salmon Recipe",
                post_content='<img class="wp-image-501" />',
                post_type="post",
                post_status="publish",
            )
        )
        connection.execute(
            posts.insert().values(
                ID=501,
                post_title="IMG_9999",
                post_name="img_9999",
                post_type="attachment",
                post_status="inherit",
                post_mime_type="image/jpeg",
            )
        )

    summary = fix_media_in_database(
        FixSettings.build(execute=True, update_alt=True, search_parent=True),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert summary.updated_titles == 1
    assert summary.updated_alts == 1
    with sqlite_unit_of_work() as uow:
        record = uow.store.read_record(501)
    assert record is not None
    assert record.title == "Salmon Recipe"
    assert record.slug == "img_9999"
    assert record.alt == "Salmon Recipe"
