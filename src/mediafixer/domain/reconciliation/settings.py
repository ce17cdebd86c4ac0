"""Run configuration for a fix run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from mediafixer.domain.classifier import DEFAULT_MIN_LENGTH
from mediafixer.domain.filters import MimeFilter, UploadWindow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

DEFAULT_BATCH_SIZE: Final[int] = 500
MIN_BATCH_SIZE: Final[int] = 50


def split_list(value: str | None) -> tuple[str, ...]:
    """Split a comma list, dropping blanks."""

    if value is None:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True, slots=True, kw_only=True)
class FixSettings:
    """Immutable options for one run, built once and shared by reference."""

    execute: bool = False
    update_alt: bool = False
    search_parent: bool = False
    include_keyword: str = ""
    keyword_categories: tuple[str, ...] = ()
    limit: int | None = None
    batch_size: int = DEFAULT_BATCH_SIZE
    min_length: int = DEFAULT_MIN_LENGTH
    mime: MimeFilter = field(default_factory=MimeFilter)
    upload_window: UploadWindow = field(default_factory=UploadWindow)

    @property
    def dry_run(self) -> bool:
        return not self.execute

    @classmethod
    def build(
        cls,
        *,
        execute: bool = False,
        update_alt: bool = False,
        search_parent: bool = False,
        include_keyword: str | None = None,
        keyword_categories: Iterable[str] = (),
        limit: int | None = None,
        batch_size: int | None = None,
        min_length: int | None = None,
        mime_include: Iterable[str] = (),
        mime_exclude: Iterable[str] = (),
        uploaded_after: date | None = None,
        uploaded_before: date | None = None,
    ) -> FixSettings:
        """Create settings from raw option values, applying the documented floors."""

        if batch_size is None:
            batch_size = DEFAULT_BATCH_SIZE
        if min_length is None:
            min_length = DEFAULT_MIN_LENGTH

        return cls(
            execute=execute,
            update_alt=update_alt,
            search_parent=search_parent,
            include_keyword=(include_keyword or "").strip(),
            keyword_categories=tuple(keyword_categories),
            limit=max(1, limit) if limit is not None else None,
            batch_size=max(MIN_BATCH_SIZE, batch_size),
            min_length=max(1, min_length),
            mime=MimeFilter(include=tuple(mime_include), exclude=tuple(mime_exclude)),
            upload_window=UploadWindow(after=uploaded_after, before=uploaded_before),
        )
