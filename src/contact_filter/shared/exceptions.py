"""
Shared exceptions for the filtering pipeline.

Every failure aborts the run; the CLI turns these into a non-zero exit status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AppError(Exception):
    message: str = "Application error"
    details: Optional[dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message


class ContactFilterError(AppError):
    """Base error for anything that stops a filtering run."""


class FilterFileError(ContactFilterError):
    """The country filter file could not be read."""


class InputFileError(ContactFilterError):
    """The input CSV could not be read or decoded."""


class CSVFormatError(ContactFilterError):
    """The input CSV header or one of its rows is malformed."""

    def __init__(
        self,
        message: str,
        line_number: int,
        field: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            details={"line_number": line_number, "field": field, "value": value},
        )
        self.line_number = line_number
        self.field = field
        self.value = value

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.message}"


class OutputWriteError(ContactFilterError):
    """The output CSV could not be created or written."""
