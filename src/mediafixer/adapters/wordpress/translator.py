"""Translate REST payloads into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mediafixer.domain.model import Attachment, ParentRef

if TYPE_CHECKING:
    from .schema import MediaPayload, PostPayload


def parse_attachment(payload: MediaPayload) -> Attachment:
    storage_path = payload.media_details.file if payload.media_details is not None else None
    return Attachment(
        id=payload.id,
        title=payload.title.text,
        slug=payload.slug,
        alt=payload.alt_text,
        parent_id=payload.post or 0,
        mime_type=payload.mime_type,
        uploaded_at=payload.date_gmt,
        storage_path=storage_path or None,
        public_url=payload.source_url or None,
    )


def parse_parent(payload: PostPayload) -> ParentRef:
    return ParentRef(id=payload.id, title=payload.title.text)
