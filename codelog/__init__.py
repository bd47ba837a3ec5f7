"""Code Changelog Studio package.

Turns workbooks describing lookup-code tables into a Liquibase XML
changelog. The building blocks are shared by the command line interface and
the Streamlit page distributed with this repository.
"""

from .changelog import escape_xml, render_changeset
from .config import (
    DEFAULT_AUTHOR,
    AppConfig,
    ChangelogSettings,
    OutputConfig,
    load_config,
)
from .conversion import ConversionResult, convert, convert_workbook
from .errors import CodelogError, DecodeError, NoValidSheetsError
from .extract import CodeRecord, SheetExtraction, SheetSkip, extract_sheet
from .io import read_workbook, read_workbook_file, sheet_names
from .reporting import export_changelog, summarise_result, summarise_skips
from .template import build_template_workbook

__all__ = [
    "DEFAULT_AUTHOR",
    "AppConfig",
    "ChangelogSettings",
    "CodeRecord",
    "CodelogError",
    "ConversionResult",
    "DecodeError",
    "NoValidSheetsError",
    "OutputConfig",
    "SheetExtraction",
    "SheetSkip",
    "build_template_workbook",
    "convert",
    "convert_workbook",
    "escape_xml",
    "export_changelog",
    "extract_sheet",
    "load_config",
    "read_workbook",
    "read_workbook_file",
    "render_changeset",
    "sheet_names",
    "summarise_result",
    "summarise_skips",
]
