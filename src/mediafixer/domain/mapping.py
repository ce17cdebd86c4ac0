"""Explicit per-attachment overrides.

A non-empty mapping doubles as an allow-list: attachments without an entry are left alone
for the whole run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mediafixer.domain.model import MappingEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from mediafixer.domain.model import AttachmentId
    from mediafixer.domain.ports import MappingRow


@dataclass(slots=True)
class MediaMapping:
    """Lookup from attachment id to its override pair."""

    entries: dict[AttachmentId, MappingEntry] = field(default_factory=dict)
    loaded_rows: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self.entries

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries.values())

    @property
    def restricts(self) -> bool:
        """Whether unmapped attachments must be skipped."""

        return bool(self.entries)

    def get(self, record_id: AttachmentId) -> MappingEntry | None:
        return self.entries.get(record_id)

    def excludes(self, record_id: AttachmentId) -> bool:
        return self.restricts and record_id not in self.entries


def build_mapping(rows: Iterable[MappingRow]) -> MediaMapping:
    """Build a mapping from parsed rows; the last row for an id wins."""

    mapping = MediaMapping()
    for row in rows:
        if row.attachment_id <= 0:
            continue
        mapping.entries[row.attachment_id] = MappingEntry(
            record_id=row.attachment_id,
            proposed_title=row.proposed_title.strip(),
            proposed_alt=row.proposed_alt.strip(),
        )
        mapping.loaded_rows += 1
    return mapping


def empty_mapping() -> MediaMapping:
    return MediaMapping()
