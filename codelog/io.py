"""IO helpers for decoding workbooks into plain cell grids."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from openpyxl import load_workbook

from .errors import DecodeError

logger = logging.getLogger(__name__)

Row = Tuple[Any, ...]
Sheet = Tuple[Row, ...]
Workbook = Mapping[str, Sheet]

# Compound document header used by legacy .xls workbooks.
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0"


def read_workbook(raw: bytes) -> Workbook:
    """Decode ``raw`` spreadsheet bytes into an ordered, read-only workbook.

    Each sheet becomes a tuple of rows and each row a tuple of cell values.
    Empty cells are ``None``; trailing empty cells and trailing empty rows are
    dropped so the grid only spans the used range. Both xlsx/xlsm and legacy
    xls content is accepted.
    """

    if is_legacy_xls(raw):
        grids = _read_xls_grids(raw)
    else:
        grids = _read_xlsx_grids(raw)

    sheets: Dict[str, Sheet] = {}
    for title, values in grids.items():
        rows = [_trim_row(row) for row in values]
        while rows and not rows[-1]:
            rows.pop()
        sheets[title] = tuple(rows)
        logger.debug("Decoded sheet '%s' with %d rows", title, len(rows))

    logger.info("Decoded workbook with %d sheets", len(sheets))
    return MappingProxyType(sheets)


def read_workbook_file(path: str | Path) -> Workbook:
    """Read and decode the workbook stored at ``path``."""

    file_path = Path(path).expanduser()
    if not file_path.exists():
        raise FileNotFoundError(f"Workbook '{file_path}' does not exist")

    logger.info("Loading workbook from %s", file_path)
    return read_workbook(file_path.read_bytes())


def sheet_names(raw: bytes) -> List[str]:
    """Return the sheet names of ``raw`` in workbook order."""

    if is_legacy_xls(raw):
        try:
            return list(pd.ExcelFile(io.BytesIO(raw), engine="xlrd").sheet_names)
        except Exception as exc:
            raise DecodeError(f"Unable to read the Excel file: {exc}") from exc

    book = _open_workbook(raw)
    try:
        return list(book.sheetnames)
    finally:
        book.close()


def is_legacy_xls(raw: bytes) -> bool:
    return bool(raw) and raw[: len(OLE2_SIGNATURE)] == OLE2_SIGNATURE


def _read_xlsx_grids(raw: bytes) -> Dict[str, List[Sequence[Any]]]:
    book = _open_workbook(raw)
    try:
        return {ws.title: list(ws.iter_rows(values_only=True)) for ws in book.worksheets}
    finally:
        book.close()


def _read_xls_grids(raw: bytes) -> Dict[str, List[Sequence[Any]]]:
    logger.debug("Reading legacy xls workbook")
    try:
        frames = pd.read_excel(
            io.BytesIO(raw),
            sheet_name=None,
            header=None,
            dtype=object,
            engine="xlrd",
        )
    except Exception as exc:
        raise DecodeError(f"Unable to read the Excel file: {exc}") from exc

    return {
        str(title): [_without_nan(row) for row in frame.itertuples(index=False, name=None)]
        for title, frame in frames.items()
    }


def _open_workbook(raw: bytes):
    if not raw:
        raise DecodeError("Workbook content is empty")
    try:
        return load_workbook(io.BytesIO(raw), data_only=True)
    except Exception as exc:
        raise DecodeError(f"Unable to read the Excel file: {exc}") from exc


def _without_nan(values: Iterable[Any]) -> List[Any]:
    return [None if _is_missing(value) else value for value in values]


def _is_missing(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _trim_row(values: Sequence[Any]) -> Row:
    cells = [_normalise_cell(value) for value in values]
    while cells and cells[-1] is None:
        cells.pop()
    return tuple(cells)


def _normalise_cell(value: Any) -> Optional[Any]:
    if isinstance(value, str) and value == "":
        return None
    return value


__all__ = [
    "OLE2_SIGNATURE",
    "Row",
    "Sheet",
    "Workbook",
    "is_legacy_xls",
    "read_workbook",
    "read_workbook_file",
    "sheet_names",
]
