"""Utilities for exporting conversion outputs to disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from .config import OutputConfig
from .conversion import ConversionResult

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["sheet", "status", "reason"]


def summarise_result(result: ConversionResult) -> pd.DataFrame:
    """Tabulate processed and skipped sheets, processed ones first."""

    rows = [{"sheet": name, "status": "processed", "reason": ""} for name in result.processed_sheets]
    rows.extend(
        {"sheet": name, "status": "skipped", "reason": reason}
        for name, reason in result.skipped_sheets
    )
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def summarise_skips(skipped_sheets: Sequence[Tuple[str, str]]) -> pd.DataFrame:
    """Tabulate skipped sheets with their reasons."""

    return pd.DataFrame(
        [{"sheet": name, "status": "skipped", "reason": reason} for name, reason in skipped_sheets],
        columns=SUMMARY_COLUMNS,
    )


def export_changelog(
    result: ConversionResult,
    output: OutputConfig,
    *,
    author: Optional[str] = None,
    requested_sheets: Sequence[str] = (),
) -> Dict[str, Path]:
    """Persist the changelog XML and a JSON audit log."""

    output_dir = output.directory
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Writing changelog to %s", output_dir)

    paths: Dict[str, Path] = {}

    changelog_path = output_dir / output.changelog_file
    changelog_path.write_text(result.xml, encoding="utf-8")
    paths["changelog"] = changelog_path

    audit_payload = {
        "author": author,
        "requested_sheets": list(requested_sheets),
        "processed_sheets": list(result.processed_sheets),
        "skipped_sheets": [
            {"sheet": name, "reason": reason} for name, reason in result.skipped_sheets
        ],
    }
    audit_path = output_dir / output.audit_log
    with audit_path.open("w", encoding="utf-8") as handle:
        json.dump(audit_payload, handle, ensure_ascii=False, indent=2)
    paths["audit"] = audit_path

    return paths


__all__ = ["SUMMARY_COLUMNS", "export_changelog", "summarise_result", "summarise_skips"]
