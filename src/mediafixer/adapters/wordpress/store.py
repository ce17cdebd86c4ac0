"""Media store backed by the WordPress REST API."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from mediafixer.domain.errors import StoreUnavailableError, WriteError
from mediafixer.domain.ports import CONTAINER_TYPES, CONTENT_STATUSES

from .client import WordPressAPIError, WordPressClient
from .translator import parse_attachment, parse_parent

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from mediafixer.config.wordpress import WordPressConfig
    from mediafixer.domain.model import Attachment, AttachmentId, ParentRef

log = getLogger(__name__)


@contextmanager
def _reading() -> Iterator[None]:
    try:
        yield
    except httpx.TransportError as exc:
        raise StoreUnavailableError(f"WordPress unreachable: {exc}") from exc
    except (WordPressAPIError, ValidationError) as exc:
        raise StoreUnavailableError(f"WordPress read failed: {exc}") from exc


@contextmanager
def _writing(record_id: AttachmentId) -> Iterator[None]:
    try:
        yield
    except httpx.TransportError as exc:
        raise StoreUnavailableError(f"WordPress unreachable: {exc}") from exc
    except (WordPressAPIError, ValidationError) as exc:
        raise WriteError(str(exc), record_id=record_id) from exc


class WordPressMediaStore:
    """Reads and updates attachments through ``/wp-json/wp/v2``."""

    def __init__(self, client: WordPressClient) -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: WordPressConfig) -> WordPressMediaStore:
        return cls(WordPressClient(config=config))

    def list_candidate_ids(self, page_size: int, page: int) -> Sequence[AttachmentId]:
        with _reading():
            return self.client.list_media_ids(offset=(page - 1) * page_size, count=page_size)

    def read_record(self, record_id: AttachmentId) -> Attachment | None:
        with _reading():
            payload = self.client.fetch_media(record_id)
        if payload is None:
            return None
        return parse_attachment(payload)

    def read_content(self, content_id: int) -> ParentRef | None:
        with _reading():
            payload = self.client.fetch_content(content_id)
        if payload is None:
            return None
        return parse_parent(payload)

    def search_content_containing(
        self,
        token: str,
        *,
        container_types: Sequence[str] = CONTAINER_TYPES,
        statuses: Sequence[str] = CONTENT_STATUSES,
    ) -> ParentRef | None:
        with _reading():
            payload = self.client.search_content(
                token,
                container_types=container_types,
                statuses=statuses,
            )
        if payload is None:
            return None
        return parse_parent(payload)

    def category_memberships(self, content_id: int) -> set[str]:
        with _reading():
            return self.client.fetch_category_slugs(content_id)

    def write_title(self, record_id: AttachmentId, title: str, *, keep_slug: str) -> None:
        fields = {"title": title}
        if keep_slug:
            # WordPress regenerates the slug from a new title unless it is sent back.
            fields["slug"] = keep_slug
        with _writing(record_id):
            self.client.update_media(record_id, fields)
        log.debug("#%s: title saved", record_id)

    def write_alt(self, record_id: AttachmentId, alt: str) -> None:
        with _writing(record_id):
            self.client.update_media(record_id, {"alt_text": alt})
        log.debug("#%s: alt saved", record_id)


if TYPE_CHECKING:
    from typing import cast

    from mediafixer.domain.ports import MediaStore

    _store_check: MediaStore = WordPressMediaStore(cast("WordPressClient", object()))
