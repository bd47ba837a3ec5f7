"""Exceptions raised by the changelog conversion pipeline."""

from __future__ import annotations

from typing import List, Sequence, Tuple


class CodelogError(Exception):
    """Base class for all fatal conversion errors."""


class DecodeError(CodelogError):
    """Raised when raw bytes cannot be decoded into a workbook."""


class NoValidSheetsError(CodelogError):
    """Raised when no requested sheet produced a changeset."""

    def __init__(
        self,
        message: str = "No valid sheets found in the Excel file",
        skipped_sheets: Sequence[Tuple[str, str]] = (),
    ) -> None:
        super().__init__(message)
        self.skipped_sheets: List[Tuple[str, str]] = list(skipped_sheets)


__all__ = ["CodelogError", "DecodeError", "NoValidSheetsError"]
