"""Domain port definitions for adapters."""

from __future__ import annotations

from .mapping import MappingRow
from .persistence import (
    CONTAINER_TYPES,
    CONTENT_STATUSES,
    ContentSearch,
    MediaStore,
)

__all__ = [
    "CONTAINER_TYPES",
    "CONTENT_STATUSES",
    "ContentSearch",
    "MappingRow",
    "MediaStore",
]
