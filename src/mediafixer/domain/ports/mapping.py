"""Ports for explicit override sources."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MappingRow:
    """One parsed override row; empty strings mean "no override"."""

    attachment_id: int
    proposed_title: str = ""
    proposed_alt: str = ""


__all__ = ["MappingRow"]
