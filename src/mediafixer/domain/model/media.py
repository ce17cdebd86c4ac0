"""Media records as seen by the fixer.

Records are snapshots read from a store. The engine never mutates them; writes go back
through the store port.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlparse

if TYPE_CHECKING:
    from datetime import datetime

type AttachmentId = int


@dataclass(frozen=True, slots=True, kw_only=True)
class Attachment:
    """Snapshot of one image attachment."""

    id: AttachmentId
    title: str
    slug: str
    alt: str | None = None
    parent_id: int = 0
    mime_type: str = ""
    uploaded_at: datetime | None = None
    storage_path: str | None = None
    public_url: str | None = None

    @property
    def is_orphan(self) -> bool:
        return self.parent_id <= 0

    @property
    def file_name(self) -> str:
        """Base name of the stored file, falling back to the public address."""

        if self.storage_path:
            return PurePosixPath(self.storage_path).name
        if self.public_url:
            return PurePosixPath(urlparse(self.public_url).path).name
        return ""

    @property
    def reference_name(self) -> str:
        """File name as it would appear inside content markup (public address first)."""

        if self.public_url:
            name = PurePosixPath(urlparse(self.public_url).path).name
            if name:
                return name
        if self.storage_path:
            return PurePosixPath(self.storage_path).name
        return ""


@dataclass(frozen=True, slots=True)
class ParentRef:
    """Content record (post or page) that contains an attachment."""

    id: int
    title: str


@dataclass(frozen=True, slots=True)
class MappingEntry:
    """Explicit override for one attachment.

    An empty string means "no override for this field".
    """

    record_id: AttachmentId
    proposed_title: str = ""
    proposed_alt: str = ""

    @property
    def has_title(self) -> bool:
        return self.proposed_title != ""

    @property
    def has_alt(self) -> bool:
        return self.proposed_alt != ""
