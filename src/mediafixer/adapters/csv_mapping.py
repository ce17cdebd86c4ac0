"""Load explicit title/alt overrides from a CSV file."""

from __future__ import annotations

import csv
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from mediafixer.domain.mapping import build_mapping
from mediafixer.domain.ports import MappingRow

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from mediafixer.domain.mapping import MediaMapping

log = getLogger(__name__)

ID_COLUMN: Final[str] = "attachment_id"
TITLE_COLUMN: Final[str] = "proposed_title"
ALT_COLUMN: Final[str] = "proposed_alt"


class MappingLoadError(RuntimeError):
    """Raised when a mapping file cannot be used at all."""


class MappingRowPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    attachment_id: int
    proposed_title: str = ""
    proposed_alt: str = ""

    @field_validator("proposed_title", "proposed_alt", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value

    def to_row(self) -> MappingRow:
        return MappingRow(
            attachment_id=self.attachment_id,
            proposed_title=self.proposed_title,
            proposed_alt=self.proposed_alt,
        )


@dataclass(frozen=True, slots=True)
class _Columns:
    attachment_id: int
    proposed_title: int | None
    proposed_alt: int | None

    @classmethod
    def from_header(cls, header: Sequence[str]) -> _Columns:
        index: dict[str, int] = {}
        for position, name in enumerate(header):
            index[name.strip().lower()] = position
        if ID_COLUMN not in index:
            raise MappingLoadError(f"Mapping missing required column: {ID_COLUMN}")
        return cls(
            attachment_id=index[ID_COLUMN],
            proposed_title=index.get(TITLE_COLUMN),
            proposed_alt=index.get(ALT_COLUMN),
        )

    def extract(self, row: Sequence[str]) -> dict[str, str | None]:
        return {
            ID_COLUMN: _cell(row, self.attachment_id),
            TITLE_COLUMN: _cell(row, self.proposed_title),
            ALT_COLUMN: _cell(row, self.proposed_alt),
        }


def _cell(row: Sequence[str], position: int | None) -> str | None:
    if position is None or position >= len(row):
        return None
    return row[position]


def iter_mapping_rows(path: Path) -> Iterator[MappingRow]:
    """Yield valid rows from the CSV at ``path``; malformed ids are dropped."""

    if not path.is_file():
        raise MappingLoadError(f"Mapping file not found: {path}")
    try:
        handle = path.open(newline="", encoding="utf-8-sig")
    except OSError as exc:
        raise MappingLoadError(f"Could not open mapping file: {path}") from exc

    with handle:
        reader = csv.reader(handle)
        try:
            header = next(reader, None)
            if not header:
                raise MappingLoadError("Empty mapping file.")
            columns = _Columns.from_header(header)

            for line_number, raw in enumerate(reader, start=2):
                if not raw:
                    continue
                try:
                    payload = MappingRowPayload.model_validate(columns.extract(raw))
                except ValidationError:
                    log.debug("Skipping malformed mapping row %s", line_number)
                    continue
                yield payload.to_row()
        except (UnicodeDecodeError, csv.Error) as exc:
            raise MappingLoadError(f"Could not read mapping file: {path}") from exc


def load_mapping_csv(path: str | Path) -> MediaMapping:
    """Load a mapping file into an in-memory lookup."""

    mapping = build_mapping(iter_mapping_rows(Path(path)))
    log.info("Loaded mapping rows: %s", mapping.loaded_rows)
    return mapping
