"""Domain model for media auditing."""

from __future__ import annotations

from .decisions import (
    AltAction,
    AltSource,
    Decision,
    RecordOutcome,
    RunSummary,
    TitleAction,
)
from .media import Attachment, AttachmentId, MappingEntry, ParentRef

__all__ = [
    "AltAction",
    "AltSource",
    "Attachment",
    "AttachmentId",
    "Decision",
    "MappingEntry",
    "ParentRef",
    "RecordOutcome",
    "RunSummary",
    "TitleAction",
]
