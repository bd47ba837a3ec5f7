from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, Dict, Sequence
import sys

import pytest
from openpyxl import Workbook

# Ensure project root is on sys.path for absolute imports
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

HEADERS = ["code_value", "code_description", "code_value_mm"]


def build_workbook_bytes(sheets: Dict[str, Sequence[Sequence[Any]]]) -> bytes:
    book = Workbook()
    book.remove(book.active)
    for name, rows in sheets.items():
        ws = book.create_sheet(title=name)
        for row in rows:
            ws.append(list(row))
    buffer = io.BytesIO()
    book.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_workbook() -> Callable[[Dict[str, Sequence[Sequence[Any]]]], bytes]:
    return build_workbook_bytes


@pytest.fixture
def gender_rows() -> list:
    return [
        ["CodeName", "Gender"],
        HEADERS,
        ["Male", "Male Gender", "ကျား"],
    ]


@pytest.fixture
def gender_workbook(gender_rows) -> bytes:
    return build_workbook_bytes({"Gender": gender_rows})


def build_xls_bytes(sheets: Dict[str, Sequence[Sequence[Any]]]) -> bytes:
    import xlwt

    book = xlwt.Workbook(encoding="utf-8")
    for name, rows in sheets.items():
        ws = book.add_sheet(name)
        for row_idx, row in enumerate(rows):
            for col_idx, value in enumerate(row):
                if value is not None:
                    ws.write(row_idx, col_idx, value)
    buffer = io.BytesIO()
    book.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_xls_workbook() -> Callable[[Dict[str, Sequence[Sequence[Any]]]], bytes]:
    return build_xls_bytes
