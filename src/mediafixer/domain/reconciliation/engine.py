"""Sequential fix run over every candidate attachment.

Pages are fetched from the store one at a time and drained record by record; a record is
fully decided and written before the next one is read. No state survives between records
except the run summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from mediafixer.domain.errors import FixAborted, StoreUnavailableError
from mediafixer.domain.mapping import empty_mapping
from mediafixer.domain.model import RunSummary

from .apply import DecisionApplier
from .decide import decide_record

if TYPE_CHECKING:
    from mediafixer.domain.mapping import MediaMapping
    from mediafixer.domain.model import AttachmentId
    from mediafixer.domain.ports import MediaStore

    from .settings import FixSettings

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationEngine:
    """Audit attachments and fix weird titles and alt text."""

    store: MediaStore
    settings: FixSettings
    mapping: MediaMapping = field(default_factory=empty_mapping)

    def run(self) -> RunSummary:
        """Process candidates until the store is drained or the limit is hit."""

        summary = RunSummary()
        applier = DecisionApplier(store=self.store, settings=self.settings)
        self._log_banner()
        try:
            self._drain(summary, applier)
        except StoreUnavailableError as exc:
            raise FixAborted(f"Media store unavailable: {exc}", summary=summary) from exc
        self._log_summary(summary)
        return summary

    def _drain(self, summary: RunSummary, applier: DecisionApplier) -> None:
        limit = self.settings.limit
        page = 1
        while True:
            candidate_ids = self.store.list_candidate_ids(self.settings.batch_size, page)
            if not candidate_ids:
                return
            log.debug("Batch %s: %s candidates", page, len(candidate_ids))

            for record_id in candidate_ids:
                if limit is not None and summary.scanned >= limit:
                    return
                summary.scanned += 1
                self._process(record_id, summary, applier)

            page += 1

    def _process(
        self,
        record_id: AttachmentId,
        summary: RunSummary,
        applier: DecisionApplier,
    ) -> None:
        record = self.store.read_record(record_id)
        if record is None:
            log.debug("#%s: record vanished, skipping", record_id)
            return
        if not self.settings.upload_window.admits(record):
            return
        if not self.settings.mime.admits(record):
            return

        decision = decide_record(
            record,
            settings=self.settings,
            mapping=self.mapping,
            store=self.store,
        )
        applier(decision, summary)

    def _log_banner(self) -> None:
        settings = self.settings
        log.info("--- Media Title & ALT Fixer ---")
        log.info("Mode: %s", "DRY-RUN" if settings.dry_run else "EXECUTE")
        if settings.update_alt:
            log.info("Will update ALT when missing/weird.")
        if settings.include_keyword:
            log.info(
                'Keyword: "%s" (cats: %s)',
                settings.include_keyword,
                ", ".join(settings.keyword_categories),
            )
        if settings.limit is not None:
            log.info("Limit: %s", settings.limit)
        log.info("Batch size: %s", settings.batch_size)
        if settings.mime.include:
            log.info("MIME include: %s", ", ".join(settings.mime.include))
        if settings.mime.exclude:
            log.info("MIME exclude: %s", ", ".join(settings.mime.exclude))
        if settings.upload_window.after is not None:
            log.info("Uploaded after: %s", settings.upload_window.after.isoformat())
        if settings.upload_window.before is not None:
            log.info("Uploaded before: %s", settings.upload_window.before.isoformat())
        if settings.search_parent:
            log.warning("search-parent enabled: this may be slow.")

    def _log_summary(self, summary: RunSummary) -> None:
        log.info(summary.describe())
        if self.settings.dry_run:
            log.info("Dry run only. Re-run with --execute to persist changes.")


def run_fix(
    store: MediaStore,
    settings: FixSettings,
    *,
    mapping: MediaMapping | None = None,
) -> RunSummary:
    """Run one fix pass and return its summary."""

    engine = ReconciliationEngine(
        store=store,
        settings=settings,
        mapping=mapping or empty_mapping(),
    )
    return engine.run()
