"""Assemble per-sheet changesets into one Liquibase changelog."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from .changelog import CHANGELOG_FOOTER, CHANGELOG_HEADER, render_changeset
from .config import ChangelogSettings
from .errors import NoValidSheetsError
from .extract import SheetOutcome, SheetSkip, extract_sheet
from .io import Workbook, read_workbook

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Generated changelog and the sheets that contributed to it."""

    xml: str
    processed_sheets: List[str] = field(default_factory=list)
    skipped_sheets: List[Tuple[str, str]] = field(default_factory=list)


def convert(
    raw: bytes,
    author: Optional[str] = None,
    sheet_names: Sequence[str] = (),
    *,
    settings: Optional[ChangelogSettings] = None,
) -> ConversionResult:
    """Convert workbook bytes into a Liquibase changelog.

    ``sheet_names`` selects and orders the sheets to convert; an empty
    sequence converts every sheet in workbook order. Raises
    :class:`~codelog.errors.DecodeError` for unreadable input and
    :class:`~codelog.errors.NoValidSheetsError` when no sheet qualifies.
    """

    workbook = read_workbook(raw)
    return convert_workbook(workbook, author, sheet_names, settings=settings)


def convert_workbook(
    workbook: Workbook,
    author: Optional[str] = None,
    sheet_names: Sequence[str] = (),
    *,
    settings: Optional[ChangelogSettings] = None,
) -> ConversionResult:
    """Same as :func:`convert` for an already decoded workbook."""

    settings = settings or ChangelogSettings()
    if author is None:
        author = settings.author
    requested = list(sheet_names) or list(workbook.keys())

    parts = [CHANGELOG_HEADER]
    processed: List[str] = []
    skipped: List[Tuple[str, str]] = []
    seen_ids: Set[str] = set()

    for sheet_name in requested:
        outcome = _process_sheet(workbook, sheet_name)
        if isinstance(outcome, SheetSkip):
            logger.warning("Skipping sheet %s: %s", outcome.sheet_name, outcome.reason)
            skipped.append((outcome.sheet_name, outcome.reason))
            continue

        changeset_id = settings.changeset_id(outcome.code_name)
        if changeset_id in seen_ids:
            logger.warning(
                "Sheet %s reuses changeset id '%s'; Liquibase will reject the duplicate",
                sheet_name,
                changeset_id,
            )
        seen_ids.add(changeset_id)

        parts.append(render_changeset(outcome.code_name, outcome.records, author, settings=settings))
        processed.append(sheet_name)
        logger.info("Converted sheet %s (%d rows)", sheet_name, len(outcome.records))

    parts.append(CHANGELOG_FOOTER)

    if not processed:
        raise NoValidSheetsError(skipped_sheets=skipped)

    return ConversionResult(xml="".join(parts), processed_sheets=processed, skipped_sheets=skipped)


def _process_sheet(workbook: Workbook, sheet_name: str) -> SheetOutcome:
    sheet = workbook.get(sheet_name)
    if sheet is None:
        return SheetSkip(sheet_name, "Sheet not found in workbook")
    try:
        return extract_sheet(sheet, sheet_name)
    except Exception as exc:
        logger.exception("Error processing sheet %s", sheet_name)
        return SheetSkip(sheet_name, f"Unexpected error: {exc}")


__all__ = ["ConversionResult", "convert", "convert_workbook"]
