"""Typed-value validation for cell input."""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Any, Union

from sheetgrid._cell import Cell, ColumnType

NUMBER_ERROR = "ERROR: Must be a number"
DATE_ERROR = "ERROR: Invalid date"

# Optional sign, digits, optional fraction. No exponent, no separators.
_NUMBER_RE = re.compile(r"[+-]?\d*\.?\d+", re.ASCII)
_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
    "%d %b %Y",
    "%d %B %Y",
)


@dataclass(frozen=True)
class Empty:
    """Blank input; valid for every column type."""

    value: Any = ""


@dataclass(frozen=True)
class Valid:
    value: Any


@dataclass(frozen=True)
class Invalid:
    message: str


ValidationResult = Union[Empty, Valid, Invalid]


def parse_date(text: str) -> datetime.date | None:
    """Parse *text* as a calendar date, or return None."""
    text = text.strip()
    try:
        return datetime.date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def validate(text: str, column_type: str | ColumnType) -> ValidationResult:
    """Check *text* against the grammar of *column_type*."""
    ctype = ColumnType.coerce(column_type)
    if text.strip() == "":
        return Empty()

    if ctype is ColumnType.NUMBER:
        if not _NUMBER_RE.fullmatch(text):
            return Invalid(NUMBER_ERROR)
        if _INTEGER_RE.fullmatch(text):
            return Valid(int(text))
        return Valid(float(text))

    if ctype is ColumnType.DATE:
        parsed = parse_date(text)
        if parsed is None:
            return Invalid(DATE_ERROR)
        return Valid(parsed.isoformat())

    return Valid(text)


def apply_validation(
    cell: Cell, text: str, result: ValidationResult, policy: str = "discard",
) -> None:
    """Write a validation outcome into *cell* according to *policy*."""
    if isinstance(result, Empty):
        cell.clear_content()
    elif isinstance(result, Valid):
        cell.raw = text
        cell.value = result.value
        cell.error = None
        cell.rejected = None
    elif policy == "retain":
        cell.error = result.message
        cell.rejected = text
    else:
        cell.clear_content()
        cell.error = result.message
