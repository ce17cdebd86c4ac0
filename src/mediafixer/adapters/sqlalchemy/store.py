"""Media store backed directly by a WordPress database."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError

from mediafixer.domain.errors import StoreUnavailableError, WriteError
from mediafixer.domain.model import Attachment, ParentRef
from mediafixer.domain.ports import CONTAINER_TYPES, CONTENT_STATUSES

from .tables import (
    ATTACHED_FILE_KEY,
    ATTACHMENT_POST_TYPE,
    ATTACHMENT_STATUS,
    CATEGORY_TAXONOMY,
    IMAGE_ALT_KEY,
    WordPressTables,
    wordpress_tables,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.orm import Session

    from mediafixer.domain.model import AttachmentId

log = getLogger(__name__)


def escape_like(value: str, escape: str = "\\") -> str:
    return (
        value.replace(escape, escape * 2).replace("%", f"{escape}%").replace("_", f"{escape}_")
    )


@contextmanager
def _reading() -> Iterator[None]:
    try:
        yield
    except DBAPIError as exc:
        raise StoreUnavailableError(f"Database read failed: {exc}") from exc


class SqlAlchemyMediaStore:
    """Reads attachments and content from ``<prefix>posts`` and friends.

    Every write is committed on its own.
    """

    def __init__(self, session: Session, tables: WordPressTables | None = None) -> None:
        self.session = session
        self.tables = tables or wordpress_tables()

    def list_candidate_ids(self, page_size: int, page: int) -> Sequence[AttachmentId]:
        posts = self.tables.posts
        stmt = (
            select(posts.c.ID)
            .where(posts.c.post_type == ATTACHMENT_POST_TYPE)
            .where(posts.c.post_status == ATTACHMENT_STATUS)
            .where(posts.c.post_mime_type.like("image/%"))
            .order_by(posts.c.ID.asc())
            .limit(page_size)
            .offset((page - 1) * page_size)
        )
        with _reading():
            return [int(value) for value in self.session.execute(stmt).scalars()]

    def read_record(self, record_id: AttachmentId) -> Attachment | None:
        posts = self.tables.posts
        stmt = (
            select(
                posts.c.ID,
                posts.c.post_title,
                posts.c.post_name,
                posts.c.post_parent,
                posts.c.post_mime_type,
                posts.c.post_date_gmt,
                posts.c.guid,
            )
            .where(posts.c.ID == record_id)
            .where(posts.c.post_type == ATTACHMENT_POST_TYPE)
        )
        with _reading():
            row = self.session.execute(stmt).one_or_none()
            if row is None:
                return None
            meta = self._meta_values(record_id, (ATTACHED_FILE_KEY, IMAGE_ALT_KEY))

        return Attachment(
            id=int(row.ID),
            title=row.post_title or "",
            slug=row.post_name or "",
            alt=meta.get(IMAGE_ALT_KEY),
            parent_id=int(row.post_parent or 0),
            mime_type=row.post_mime_type or "",
            uploaded_at=row.post_date_gmt,
            storage_path=meta.get(ATTACHED_FILE_KEY) or None,
            public_url=row.guid or None,
        )

    def read_content(self, content_id: int) -> ParentRef | None:
        posts = self.tables.posts
        stmt = select(posts.c.ID, posts.c.post_title).where(posts.c.ID == content_id)
        with _reading():
            row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return ParentRef(id=int(row.ID), title=row.post_title or "")

    def search_content_containing(
        self,
        token: str,
        *,
        container_types: Sequence[str] = CONTAINER_TYPES,
        statuses: Sequence[str] = CONTENT_STATUSES,
    ) -> ParentRef | None:
        posts = self.tables.posts
        stmt = (
            select(posts.c.ID, posts.c.post_title)
            .where(posts.c.post_type.in_(tuple(container_types)))
            .where(posts.c.post_status.in_(tuple(statuses)))
            .where(posts.c.post_content.like(f"%{escape_like(token)}%", escape="\\"))
            .order_by(posts.c.post_date_gmt.desc())
            .limit(1)
        )
        with _reading():
            row = self.session.execute(stmt).first()
        if row is None:
            return None
        return ParentRef(id=int(row.ID), title=row.post_title or "")

    def category_memberships(self, content_id: int) -> set[str]:
        terms = self.tables.terms
        taxonomy = self.tables.term_taxonomy
        relationships = self.tables.term_relationships
        stmt = (
            select(terms.c.slug)
            .select_from(
                relationships.join(
                    taxonomy,
                    relationships.c.term_taxonomy_id == taxonomy.c.term_taxonomy_id,
                ).join(terms, taxonomy.c.term_id == terms.c.term_id)
            )
            .where(relationships.c.object_id == content_id)
            .where(taxonomy.c.taxonomy == CATEGORY_TAXONOMY)
        )
        with _reading():
            return {str(slug) for slug in self.session.execute(stmt).scalars()}

    def write_title(self, record_id: AttachmentId, title: str, *, keep_slug: str) -> None:
        posts = self.tables.posts
        stmt = (
            update(posts)
            .where(posts.c.ID == record_id)
            .where(posts.c.post_type == ATTACHMENT_POST_TYPE)
            .values(post_title=title, post_name=keep_slug)
        )
        with self._writing(record_id):
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                raise WriteError(f"Attachment #{record_id} not found", record_id=record_id)
            self.session.commit()
        log.debug("#%s: title committed", record_id)

    def write_alt(self, record_id: AttachmentId, alt: str) -> None:
        postmeta = self.tables.postmeta
        existing = (
            select(postmeta.c.meta_id)
            .where(postmeta.c.post_id == record_id)
            .where(postmeta.c.meta_key == IMAGE_ALT_KEY)
            .order_by(postmeta.c.meta_id.asc())
            .limit(1)
        )
        with self._writing(record_id):
            meta_id = self.session.execute(existing).scalar_one_or_none()
            if meta_id is None:
                stmt = postmeta.insert().values(
                    post_id=record_id,
                    meta_key=IMAGE_ALT_KEY,
                    meta_value=alt,
                )
            else:
                stmt = update(postmeta).where(postmeta.c.meta_id == meta_id).values(meta_value=alt)
            self.session.execute(stmt)
            self.session.commit()
        log.debug("#%s: alt committed", record_id)

    def _meta_values(self, post_id: int, keys: Sequence[str]) -> dict[str, str]:
        postmeta = self.tables.postmeta
        stmt = (
            select(postmeta.c.meta_key, postmeta.c.meta_value)
            .where(postmeta.c.post_id == post_id)
            .where(postmeta.c.meta_key.in_(tuple(keys)))
            .order_by(postmeta.c.meta_id.asc())
        )
        values: dict[str, str] = {}
        for key, value in self.session.execute(stmt).all():
            values.setdefault(key, value or "")
        return values

    @contextmanager
    def _writing(self, record_id: AttachmentId) -> Iterator[None]:
        try:
            yield
        except WriteError:
            self.session.rollback()
            raise
        except DBAPIError as exc:
            self.session.rollback()
            if exc.connection_invalidated or _is_operational(exc):
                raise StoreUnavailableError(f"Database write failed: {exc}") from exc
            raise WriteError(str(exc.orig), record_id=record_id) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise WriteError(str(exc), record_id=record_id) from exc


def _is_operational(exc: DBAPIError) -> bool:
    return isinstance(exc, (OperationalError, InterfaceError))


if TYPE_CHECKING:
    from typing import cast

    from mediafixer.domain.ports import MediaStore

    _store_check: MediaStore = SqlAlchemyMediaStore(cast("Session", object()))
