"""Per-record title and alt decisions.

Precedence for a title is: mapping override, then a value derived from the parent record,
then nothing (the record is skipped when no parent can be found). Deciding never writes;
the same decision drives both dry runs and executed runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from mediafixer.domain.classifier import humanize_filename, is_weird
from mediafixer.domain.model import AltAction, AltSource, Decision, RecordOutcome, TitleAction
from mediafixer.domain.parents import resolve_parent

if TYPE_CHECKING:
    from mediafixer.domain.mapping import MediaMapping
    from mediafixer.domain.model import Attachment, MappingEntry, ParentRef
    from mediafixer.domain.ports import MediaStore

    from .settings import FixSettings

FALLBACK_TITLE: Final[str] = "Image"
KEYWORD_SEPARATOR: Final[str] = " – "


def decide_record(
    record: Attachment,
    *,
    settings: FixSettings,
    mapping: MediaMapping,
    store: MediaStore,
) -> Decision:
    """Decide what to write for ``record`` without touching the store's data."""

    if mapping.excludes(record.id):
        return Decision(record_id=record.id, outcome=RecordOutcome.NOT_MAPPED)

    filename = humanize_filename(record.file_name)
    current_title = record.title.strip()
    entry = mapping.get(record.id)

    new_title = current_title
    if entry is not None and entry.has_title:
        new_title = entry.proposed_title
        needs_title = new_title.casefold() != current_title.casefold()
    else:
        needs_title = is_weird(current_title, filename, settings.min_length)
        if needs_title:
            parent = resolve_parent(record, store, search_parent=settings.search_parent)
            if parent is None:
                return Decision(record_id=record.id, outcome=RecordOutcome.NO_PARENT)
            new_title = compose_title(parent, filename, settings=settings, store=store)

    title_action: TitleAction | None = None
    if needs_title:
        title_action = TitleAction(
            old_title=current_title,
            new_title=new_title,
            keep_slug=record.slug,
        )

    alt_action: AltAction | None = None
    if settings.update_alt:
        alt_action = decide_alt(
            record,
            entry=entry,
            target_title=new_title if needs_title else None,
            filename=filename,
            min_length=settings.min_length,
        )

    return Decision(
        record_id=record.id,
        outcome=RecordOutcome.TITLE_FIX if needs_title else RecordOutcome.TITLE_OK,
        title_action=title_action,
        alt_action=alt_action,
    )


def compose_title(
    parent: ParentRef,
    filename: str,
    *,
    settings: FixSettings,
    store: MediaStore,
) -> str:
    base = parent.title.strip() or filename or FALLBACK_TITLE
    keyword = settings.include_keyword
    if not keyword:
        return base
    if settings.keyword_categories:
        memberships = store.category_memberships(parent.id)
        if memberships.isdisjoint(settings.keyword_categories):
            return base
    return f"{base}{KEYWORD_SEPARATOR}{keyword}"


def decide_alt(
    record: Attachment,
    *,
    entry: MappingEntry | None,
    target_title: str | None,
    filename: str,
    min_length: int,
) -> AltAction | None:
    alt_now = record.alt or ""

    if entry is not None and entry.has_alt:
        if alt_now.strip() == entry.proposed_alt:
            return None
        return AltAction(old_alt=alt_now, new_alt=entry.proposed_alt, source=AltSource.MAPPING)

    if not is_weird(alt_now, filename, min_length):
        return None

    if target_title is not None:
        new_alt = target_title
    else:
        new_alt = record.title.strip() or filename or FALLBACK_TITLE
    return AltAction(old_alt=alt_now, new_alt=new_alt)
