"""Validation and record extraction for code-table sheets.

A sheet is expected to look like this::

    | CodeName   | Gender           |               |
    | code_value | code_description | code_value_mm |
    | Male       | Male Gender      | ကျား           |

The first row carries the code name in its second cell, the second row the
column headers (in any order) and every following non-blank row one record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .io import Row, Sheet

logger = logging.getLogger(__name__)

EXPECTED_HEADERS: Sequence[str] = ("code_value", "code_description", "code_value_mm")

CODE_NAME_ROW = 0
CODE_NAME_COLUMN = 1
HEADER_ROW = 1
FIRST_DATA_ROW = 2


@dataclass(frozen=True)
class CodeRecord:
    """One row of a code table, every field coerced to text."""

    code_value: str = ""
    code_description: str = ""
    code_value_mm: str = ""


@dataclass(frozen=True)
class SheetExtraction:
    """Successful extraction of a sheet."""

    sheet_name: str
    code_name: str
    records: Tuple[CodeRecord, ...]


@dataclass(frozen=True)
class SheetSkip:
    """A sheet that was left out, with the reason why."""

    sheet_name: str
    reason: str


SheetOutcome = Union[SheetExtraction, SheetSkip]


def extract_sheet(sheet: Sheet, sheet_name: str) -> SheetOutcome:
    """Validate ``sheet`` and pull its code records.

    Problems are reported through a :class:`SheetSkip` value instead of an
    exception so the caller can carry on with the remaining sheets.
    """

    if len(sheet) < FIRST_DATA_ROW + 1:
        return SheetSkip(sheet_name, "Not enough rows")

    code_name = cell_text(_cell(sheet[CODE_NAME_ROW], CODE_NAME_COLUMN))
    if not code_name:
        return SheetSkip(sheet_name, "CodeName not found in cell B1")

    header_indexes = map_headers(sheet[HEADER_ROW])
    for header in EXPECTED_HEADERS:
        if header not in header_indexes:
            return SheetSkip(sheet_name, f'Required header "{header}" not found')

    records: List[CodeRecord] = []
    for row in sheet[FIRST_DATA_ROW:]:
        if is_blank_row(row):
            continue
        records.append(
            CodeRecord(
                code_value=cell_text(_cell(row, header_indexes["code_value"])),
                code_description=cell_text(_cell(row, header_indexes["code_description"])),
                code_value_mm=cell_text(_cell(row, header_indexes["code_value_mm"])),
            )
        )

    if not records:
        return SheetSkip(sheet_name, "No data rows found")

    logger.debug("Extracted %d records from sheet '%s'", len(records), sheet_name)
    return SheetExtraction(sheet_name=sheet_name, code_name=code_name, records=tuple(records))


def map_headers(row: Row) -> Dict[str, int]:
    """Map each expected header to the first column it appears in."""

    indexes: Dict[str, int] = {}
    for col_idx, value in enumerate(row):
        header = cell_text(value).strip()
        if header in EXPECTED_HEADERS and header not in indexes:
            indexes[header] = col_idx
    return indexes


def is_blank_row(row: Row) -> bool:
    return all(value is None or value == "" for value in row)


def cell_text(value: Any) -> str:
    """Return the textual representation used for a cell value."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _cell(row: Row, index: int) -> Optional[Any]:
    if index < len(row):
        return row[index]
    return None


__all__ = [
    "EXPECTED_HEADERS",
    "CodeRecord",
    "SheetExtraction",
    "SheetOutcome",
    "SheetSkip",
    "cell_text",
    "extract_sheet",
    "is_blank_row",
    "map_headers",
]
