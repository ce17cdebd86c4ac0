"""Ports for reading and writing media records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mediafixer.domain.model import Attachment, AttachmentId, ParentRef

CONTAINER_TYPES: Final[tuple[str, ...]] = ("post", "page")
CONTENT_STATUSES: Final[tuple[str, ...]] = ("publish", "future", "draft", "pending", "private")


@runtime_checkable
class ContentSearch(Protocol):
    """Back-reference search over content records."""

    def search_content_containing(
        self,
        token: str,
        *,
        container_types: Sequence[str] = CONTAINER_TYPES,
        statuses: Sequence[str] = CONTENT_STATUSES,
    ) -> ParentRef | None:
        """Return the newest content record whose body contains ``token``."""
        ...


@runtime_checkable
class MediaStore(ContentSearch, Protocol):
    """Everything the fixer needs from the system that holds the records.

    Writes are committed immediately. Implementations raise ``WriteError`` when a write is
    rejected and ``StoreUnavailableError`` when the store cannot be reached at all.
    """

    def list_candidate_ids(self, page_size: int, page: int) -> Sequence[AttachmentId]:
        """Return one page (1-based) of image attachment ids in ascending order."""
        ...

    def read_record(self, record_id: AttachmentId) -> Attachment | None: ...

    def read_content(self, content_id: int) -> ParentRef | None: ...

    def write_title(self, record_id: AttachmentId, title: str, *, keep_slug: str) -> None: ...

    def write_alt(self, record_id: AttachmentId, alt: str) -> None: ...

    def category_memberships(self, content_id: int) -> set[str]:
        """Return the category slugs assigned to a content record."""
        ...
