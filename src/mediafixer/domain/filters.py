"""Candidate filters applied before any decision is made."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Final

from mediafixer.config.errors import ConfigurationError

if TYPE_CHECKING:
    from mediafixer.domain.model import Attachment

_DATE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_upload_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` bound."""

    normalized = value.strip()
    if not _DATE_PATTERN.fullmatch(normalized):
        raise ConfigurationError(f"Invalid date format: {value} (expected YYYY-MM-DD)")
    try:
        return date.fromisoformat(normalized)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid date format: {value} (expected YYYY-MM-DD)") from exc


@dataclass(frozen=True, slots=True)
class UploadWindow:
    """Exclusive bounds on the upload day of an attachment."""

    after: date | None = None
    before: date | None = None

    @property
    def active(self) -> bool:
        return self.after is not None or self.before is not None

    def admits(self, record: Attachment) -> bool:
        if not self.active:
            return True
        if record.uploaded_at is None:
            return self.after is None
        uploaded = record.uploaded_at.date()
        if self.after is not None and uploaded <= self.after:
            return False
        return not (self.before is not None and uploaded >= self.before)


@dataclass(frozen=True, slots=True)
class MimeFilter:
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def admits(self, record: Attachment) -> bool:
        if self.include and record.mime_type not in self.include:
            return False
        return not (self.exclude and record.mime_type in self.exclude)
