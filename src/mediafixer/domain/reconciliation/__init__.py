"""Reconciliation of attachment titles and alt text."""

from __future__ import annotations

from .apply import DecisionApplier
from .decide import FALLBACK_TITLE, KEYWORD_SEPARATOR, compose_title, decide_alt, decide_record
from .engine import ReconciliationEngine, run_fix
from .settings import DEFAULT_BATCH_SIZE, MIN_BATCH_SIZE, FixSettings, split_list

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "FALLBACK_TITLE",
    "KEYWORD_SEPARATOR",
    "MIN_BATCH_SIZE",
    "DecisionApplier",
    "FixSettings",
    "ReconciliationEngine",
    "compose_title",
    "decide_alt",
    "decide_record",
    "run_fix",
    "split_list",
]
