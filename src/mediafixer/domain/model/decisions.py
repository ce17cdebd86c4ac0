"""Per-record decisions and run accounting."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .media import AttachmentId


class RecordOutcome(StrEnum):
    """How the title dimension of a scanned record was classified."""

    NOT_MAPPED = "not_mapped"
    NO_PARENT = "no_parent"
    TITLE_OK = "title_ok"
    TITLE_FIX = "title_fix"


class AltSource(StrEnum):
    MAPPING = "mapping"
    HEURISTIC = "heuristic"


@dataclass(frozen=True, slots=True)
class TitleAction:
    """Set a new title while re-asserting the slug that was read with the record."""

    old_title: str
    new_title: str
    keep_slug: str


@dataclass(frozen=True, slots=True)
class AltAction:
    old_alt: str
    new_alt: str
    source: AltSource = AltSource.HEURISTIC


@dataclass(frozen=True, slots=True)
class Decision:
    """What should happen to one record. ``None`` actions mean "leave as is"."""

    record_id: AttachmentId
    outcome: RecordOutcome
    title_action: TitleAction | None = None
    alt_action: AltAction | None = None

    @property
    def has_writes(self) -> bool:
        return self.title_action is not None or self.alt_action is not None


@dataclass(slots=True)
class RunSummary:
    """Counters accumulated over one fix run."""

    scanned: int = 0
    updated_titles: int = 0
    updated_alts: int = 0
    skipped_no_parent: int = 0
    skipped_ok: int = 0

    def describe(self) -> str:
        return (
            f"Scanned: {self.scanned} | Updated titles: {self.updated_titles} | "
            f"Updated ALTs: {self.updated_alts} | Skipped (no parent): {self.skipped_no_parent} | "
            f"Skipped OK: {self.skipped_ok}"
        )
