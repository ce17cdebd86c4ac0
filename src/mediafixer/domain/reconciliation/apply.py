"""Turn decisions into log lines and, in execute mode, store writes."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from mediafixer.domain.errors import WriteError
from mediafixer.domain.model import AltSource, RecordOutcome

if TYPE_CHECKING:
    from mediafixer.domain.model import AltAction, Decision, RunSummary, TitleAction
    from mediafixer.domain.ports import MediaStore

    from .settings import FixSettings

log = getLogger(__name__)

DRY_RUN_PREFIX = "[DRY] "


@dataclass(slots=True)
class DecisionApplier:
    """Report and persist decisions, counting what was (or would be) written.

    In a dry run nothing is written and updates are counted as if every write succeeded.
    In execute mode an update only counts once the store accepted it.
    """

    store: MediaStore
    settings: FixSettings

    def __call__(self, decision: Decision, summary: RunSummary) -> None:
        if decision.outcome is RecordOutcome.NO_PARENT:
            summary.skipped_no_parent += 1
            return
        if decision.outcome is RecordOutcome.TITLE_OK:
            summary.skipped_ok += 1

        if decision.title_action is not None:
            if not self._apply_title(decision, decision.title_action):
                return
            summary.updated_titles += 1

        if decision.alt_action is not None and self._apply_alt(decision, decision.alt_action):
            summary.updated_alts += 1

    @property
    def _prefix(self) -> str:
        return DRY_RUN_PREFIX if self.settings.dry_run else ""

    def _apply_title(self, decision: Decision, action: TitleAction) -> bool:
        log.info(
            "%s#%s title: '%s' => '%s' (keep slug: %s)",
            self._prefix,
            decision.record_id,
            action.old_title,
            action.new_title,
            action.keep_slug,
        )
        if self.settings.dry_run:
            return True
        try:
            self.store.write_title(decision.record_id, action.new_title, keep_slug=action.keep_slug)
        except WriteError:
            log.exception("#%s: title write rejected, skipping record", decision.record_id)
            return False
        return True

    def _apply_alt(self, decision: Decision, action: AltAction) -> bool:
        suffix = " (from mapping)" if action.source is AltSource.MAPPING else ""
        log.info(
            "%s#%s alt: '%s' => '%s'%s",
            self._prefix,
            decision.record_id,
            action.old_alt,
            action.new_alt,
            suffix,
        )
        if self.settings.dry_run:
            return True
        try:
            self.store.write_alt(decision.record_id, action.new_alt)
        except WriteError:
            log.exception("#%s: alt write rejected", decision.record_id)
            return False
        return True
