from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from mediafixer.adapters.sqlalchemy import SqlAlchemyMediaStore, escape_like
from mediafixer.adapters.sqlalchemy.tables import ATTACHED_FILE_KEY, IMAGE_ALT_KEY
from mediafixer.domain.errors import WriteError

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from mediafixer.adapters.sqlalchemy import WordPressTables


def _add_attachment(
    session: Session,
    tables: WordPressTables,
    post_id: int,
    title: str,
    *,
    slug: str = "",
    parent: int = 0,
    mime_type: str = "image/jpeg",
    attached_file: str | None = None,
    alt: str | None = None,
) -> None:
    session.execute(
        tables.posts.insert().values(
            ID=post_id,
            post_title=title,
            post_name=slug or f"attachment-{post_id}",
            post_parent=parent,
            post_type="attachment",
            post_status="inherit",
            post_mime_type=mime_type,
            post_date_gmt=datetime(2024, 7, 8, 10, 0),  # noqa: DTZ001
            guid=f"https://example.com/wp-content/uploads/{attached_file or 'x.jpg'}",
        )
    )
    if attached_file is not None:
        session.execute(
            tables.postmeta.insert().values(
                post_id=post_id, meta_key=ATTACHED_FILE_KEY, meta_value=attached_file
            )
        )
    if alt is not None:
        session.execute(
            tables.postmeta.insert().values(post_id=post_id, meta_key=IMAGE_ALT_KEY, meta_value=alt)
        )
    session.commit()


def _add_post(
    session: Session,
    tables: WordPressTables,
    post_id: int,
    title: str,
    *,
    content: str = "",
    post_type: str = "post",
    status: str = "publish",
    published_at: datetime | None = None,
) -> None:
    session.execute(
        tables.posts.insert().values(
            ID=post_id,
            post_title=title,
            post_content=content,
            post_type=post_type,
            post_status=status,
            post_date_gmt=published_at or datetime(2024, 1, 1),  # noqa: DTZ001
        )
    )
    session.commit()


def _add_category(
    session: Session,
    tables: WordPressTables,
    post_id: int,
    term_id: int,
    slug: str,
    *,
    taxonomy: str = "category",
) -> None:
    session.execute(tables.terms.insert().values(term_id=term_id, name=slug.title(), slug=slug))
    session.execute(
        tables.term_taxonomy.insert().values(
            term_taxonomy_id=term_id, term_id=term_id, taxonomy=taxonomy
        )
    )
    session.execute(
        tables.term_relationships.insert().values(object_id=post_id, term_taxonomy_id=term_id)
    )
    session.commit()


@pytest.fixture
def store(sqlite_session: Session, wordpress_schema: WordPressTables) -> SqlAlchemyMediaStore:
    return SqlAlchemyMediaStore(sqlite_session, wordpress_schema)


def test_escape_like() -> None:
    assert escape_like("100%_sure\\") == "100\\%\\_sure\\\\"


def test_lists_image_attachments_in_id_order(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    for post_id in (7, 3, 5):
        _add_attachment(sqlite_session, wordpress_schema, post_id, f"IMG_{post_id}")
    _add_attachment(sqlite_session, wordpress_schema, 4, "manual", mime_type="application/pdf")
    _add_post(sqlite_session, wordpress_schema, 1, "A post")

    assert store.list_candidate_ids(2, 1) == [3, 5]
    assert store.list_candidate_ids(2, 2) == [7]
    assert store.list_candidate_ids(2, 3) == []


def test_read_record_includes_meta(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_attachment(
        sqlite_session,
        wordpress_schema,
        501,
        "IMG_9999",
        slug="img_9999",
        parent=10,
        attached_file="2024/07/IMG_9999.jpg",
        alt="old alt",
    )

    record = store.read_record(501)

    assert record is not None
    assert record.title == "IMG_9999"
    assert record.slug == "img_9999"
    assert record.parent_id == 10
    assert record.alt == "old alt"
    assert record.file_name == "IMG_9999.jpg"
    assert record.uploaded_at == datetime(2024, 7, 8, 10, 0)  # noqa: DTZ001


def test_read_record_missing_returns_none(store: SqlAlchemyMediaStore) -> None:
    assert store.read_record(404) is None


def test_read_content(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_post(sqlite_session, wordpress_schema, 10, "Salmon Recipe")

    parent = store.read_content(10)

    assert parent is not None
    assert parent.title == "Salmon Recipe"
    assert store.read_content(11) is None


def test_search_returns_newest_matching_content(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    body = '<img class="wp-image-501" />'
    _add_post(
        sqlite_session,
        wordpress_schema,
        10,
        "Older",
        content=body,
        published_at=datetime(2023, 1, 1),  # noqa: DTZ001
    )
    _add_post(
        sqlite_session,
        wordpress_schema,
        11,
        "Newer page",
        content=body,
        post_type="page",
        published_at=datetime(2024, 1, 1),  # noqa: DTZ001
    )
    _add_post(
        sqlite_session,
        wordpress_schema,
        12,
        "Trashed",
        content=body,
        status="trash",
        published_at=datetime(2025, 1, 1),  # noqa: DTZ001
    )

    parent = store.search_content_containing("wp-image-501")

    assert parent is not None
    assert parent.title == "Newer page"


def test_search_treats_wildcards_literally(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_post(sqlite_session, wordpress_schema, 10, "Post", content="photoXdone.jpg")

    assert store.search_content_containing("photo_done.jpg") is None


def test_category_memberships_only_include_categories(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_post(sqlite_session, wordpress_schema, 10, "Post")
    _add_category(sqlite_session, wordpress_schema, 10, 1, "food")
    _add_category(sqlite_session, wordpress_schema, 10, 2, "salmon", taxonomy="post_tag")

    assert store.category_memberships(10) == {"food"}
    assert store.category_memberships(11) == set()


def test_write_title_keeps_slug(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_attachment(sqlite_session, wordpress_schema, 501, "IMG_9999", slug="img_9999")

    store.write_title(501, "Salmon Recipe", keep_slug="img_9999")

    posts = wordpress_schema.posts
    row = sqlite_session.execute(
        select(posts.c.post_title, posts.c.post_name).where(posts.c.ID == 501)
    ).one()
    assert row.post_title == "Salmon Recipe"
    assert row.post_name == "img_9999"


def test_write_title_for_missing_record_raises(store: SqlAlchemyMediaStore) -> None:
    with pytest.raises(WriteError) as excinfo:
        store.write_title(404, "Anything", keep_slug="anything")

    assert excinfo.value.record_id == 404


def test_write_alt_inserts_then_updates(
    store: SqlAlchemyMediaStore,
    sqlite_session: Session,
    wordpress_schema: WordPressTables,
) -> None:
    _add_attachment(sqlite_session, wordpress_schema, 501, "IMG_9999")

    store.write_alt(501, "First")
    store.write_alt(501, "Second")

    postmeta = wordpress_schema.postmeta
    values = sqlite_session.execute(
        select(postmeta.c.meta_value)
        .where(postmeta.c.post_id == 501)
        .where(postmeta.c.meta_key == IMAGE_ALT_KEY)
    ).scalars()
    assert list(values) == ["Second"]
    record = store.read_record(501)
    assert record is not None
    assert record.alt == "Second"
