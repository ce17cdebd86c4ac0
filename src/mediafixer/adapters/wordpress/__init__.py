"""Public interface for the WordPress REST adapter."""

from __future__ import annotations

from .client import WordPressAPIError, WordPressClient
from .schema import CategoryPayload, MediaPayload, PostPayload
from .store import WordPressMediaStore
from .translator import parse_attachment, parse_parent

__all__ = [
    "CategoryPayload",
    "MediaPayload",
    "PostPayload",
    "WordPressAPIError",
    "WordPressClient",
    "WordPressMediaStore",
    "parse_attachment",
    "parse_parent",
]
