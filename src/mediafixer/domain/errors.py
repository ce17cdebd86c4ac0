"""Errors raised across the fixer's domain boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mediafixer.domain.model import AttachmentId, RunSummary


class StoreError(RuntimeError):
    """Base class for failures reported by a media store."""


class WriteError(StoreError):
    """Raised when the store rejects a title or alt write."""

    def __init__(self, message: str, *, record_id: AttachmentId | None = None) -> None:
        super().__init__(message)
        self.record_id = record_id


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached; aborts the run."""


class FixAborted(RuntimeError):  # noqa: N818
    """Raised when a run stops early on a fatal store failure."""

    def __init__(self, message: str, *, summary: RunSummary) -> None:
        super().__init__(message)
        self.summary = summary
