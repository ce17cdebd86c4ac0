"""Heuristics for spotting placeholder titles and alt text.

Text is judged from the string alone (and the file name it may echo). The checks run in a
fixed order and the first hit wins.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Final

DEFAULT_MIN_LENGTH: Final[int] = 3

WEIRD_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"[0-9]+"),  # only numbers
    re.compile(r"[a-f0-9]{8,}", re.IGNORECASE),  # long hex
    re.compile(r"(img|image|dsc|photo|screenshot)[\s_\-]*[0-9]{1,6}", re.IGNORECASE),
    re.compile(r"[0-9]{8}[\s_\-][0-9]{6}"),  # 20240708_123456
    re.compile(r"untitled", re.IGNORECASE),
    re.compile(r"copy of .*", re.IGNORECASE | re.DOTALL),
)

_SEPARATORS = re.compile(r"[_\-]+")
_WHITESPACE = re.compile(r"\s+")


def humanize_filename(file_name: str) -> str:
    """Turn ``IMG_2024-07-08.jpg`` into ``IMG 2024 07 08``."""

    if not file_name:
        return ""
    stem = PurePosixPath(file_name).stem
    stem = _SEPARATORS.sub(" ", stem)
    return _WHITESPACE.sub(" ", stem).strip()


def matches_weird_pattern(text: str) -> bool:
    return any(pattern.fullmatch(text) for pattern in WEIRD_PATTERNS)


def is_weird(
    text: str | None,
    filename_hint: str = "",
    min_length: int = DEFAULT_MIN_LENGTH,
) -> bool:
    """Return whether ``text`` looks like a placeholder rather than a real description.

    ``filename_hint`` is the humanized file name of the record. A text that merely echoes a
    weird file name is weird too, even when the text itself slipped past the patterns.
    """

    stripped = (text or "").strip()
    if not stripped or len(stripped) < min_length:
        return True

    if matches_weird_pattern(stripped):
        return True

    hint = (filename_hint or "").strip()
    if hint and stripped.casefold() == hint.casefold():
        return matches_weird_pattern(hint)

    return False
