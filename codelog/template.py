"""Sample workbook describing the layout expected by the converter."""

from __future__ import annotations

import io
from typing import Any, List, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .extract import EXPECTED_HEADERS

TEMPLATE_SHEET = "Template"
TEMPLATE_FILENAME = "liquibase_template.xlsx"
COLUMN_WIDTHS: Sequence[int] = (15, 25, 25)

EXAMPLE_SHEETS: Sequence[Tuple[str, Sequence[Sequence[str]]]] = (
    (
        "Gender",
        (
            ("Male", "Male Gender", "ကျား"),
            ("Female", "Female Gender", "မ"),
        ),
    ),
    (
        "RELATIONSHIP",
        (
            ("Father", "Father Relation", "ဖခင်"),
            ("Mother", "Mother Relation", "မိခင်"),
        ),
    ),
    ("ClientType", (("Test", "Test Desc", "စမ်းသပ်မှု"),)),
    ("ClientClassification", (("Test", "Test Desc", "စမ်းသပ်မှု"),)),
)


def build_template_workbook() -> bytes:
    """Serialise the template workbook to XLSX bytes.

    The first sheet shows the bare layout, the following ones are ready to
    convert examples.
    """

    book = Workbook()
    template = book.active
    template.title = TEMPLATE_SHEET
    _fill_sheet(
        template,
        [
            ["CodeName", "YOUR_CODE_NAME_HERE"],
            list(EXPECTED_HEADERS),
            ["example_value", "Example Description", "Example Value (Myanmar)"],
        ],
    )

    for name, values in EXAMPLE_SHEETS:
        ws = book.create_sheet(title=name)
        _fill_sheet(ws, [["CodeName", name], list(EXPECTED_HEADERS), *[list(row) for row in values]])

    buffer = io.BytesIO()
    book.save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


def _fill_sheet(ws, rows: List[List[Any]]) -> None:
    for row in rows:
        ws.append(row)
    for idx, width in enumerate(COLUMN_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


__all__ = ["EXAMPLE_SHEETS", "TEMPLATE_FILENAME", "TEMPLATE_SHEET", "build_template_workbook"]
