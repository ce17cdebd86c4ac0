"""Find the content record an orphaned attachment belongs to.

The editor embeds ``wp-image-<id>`` in the markup of inserted images, so that reference is
tried first. The bare file name is a weaker hint and is only used when the id is not found.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from mediafixer.domain.ports import CONTAINER_TYPES, CONTENT_STATUSES

if TYPE_CHECKING:
    from mediafixer.domain.model import Attachment, AttachmentId, ParentRef
    from mediafixer.domain.ports import ContentSearch, MediaStore

log = getLogger(__name__)

IMAGE_REFERENCE_PREFIX: Final[str] = "wp-image-"


def image_reference_token(record_id: AttachmentId) -> str:
    return f"{IMAGE_REFERENCE_PREFIX}{int(record_id)}"


def find_parent(record: Attachment, search: ContentSearch) -> ParentRef | None:
    """Return the newest post/page referencing ``record``, or ``None``."""

    parent = search.search_content_containing(
        image_reference_token(record.id),
        container_types=CONTAINER_TYPES,
        statuses=CONTENT_STATUSES,
    )
    if parent is not None:
        log.debug("#%s: parent #%s found by image reference", record.id, parent.id)
        return parent

    file_name = record.reference_name
    if not file_name:
        return None

    parent = search.search_content_containing(
        file_name,
        container_types=CONTAINER_TYPES,
        statuses=CONTENT_STATUSES,
    )
    if parent is not None:
        log.debug("#%s: parent #%s found by file name %r", record.id, parent.id, file_name)
    return parent


def resolve_parent(
    record: Attachment,
    store: MediaStore,
    *,
    search_parent: bool,
) -> ParentRef | None:
    """Use the attached parent when there is one, otherwise search if allowed."""

    parent: ParentRef | None = None
    if not record.is_orphan:
        parent = store.read_content(record.parent_id)
    if parent is None and search_parent:
        parent = find_parent(record, store)
    return parent
