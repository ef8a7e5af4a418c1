"""Cell record and its presentation attributes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

FORMULA_MARKER = "="

DEFAULT_FONT_SIZE = "14px"
DEFAULT_COLOR = "black"

# public attribute name -> Cell field
FORMAT_ATTRIBUTES: dict[str, str] = {
    "bold": "bold",
    "italic": "italic",
    "font_size": "font_size",
    "fontSize": "font_size",
    "color": "color",
}


class ColumnType(str, Enum):
    """Validation grammar applied to every cell of a column."""

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"

    @classmethod
    def coerce(cls, value: str | ColumnType) -> ColumnType:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown column type {value!r}; expected one of "
                f"{', '.join(t.value for t in cls)}"
            ) from None


@dataclass
class Cell:
    """One grid cell.

    ``raw`` is what the user typed and is the only input to re-evaluation.
    ``value`` is derived from ``raw``, the column type and (for formulas) the
    rest of the grid; it is never edited on its own.
    """

    raw: str = ""
    value: Any = ""
    error: str | None = None
    bold: bool = False
    italic: bool = False
    font_size: str = DEFAULT_FONT_SIZE
    color: str = DEFAULT_COLOR
    rejected: str | None = None  # attempted text kept under the retain policy

    @property
    def is_formula(self) -> bool:
        return isinstance(self.raw, str) and self.raw.startswith(FORMULA_MARKER)

    def copy(self) -> Cell:
        return replace(self)

    def clear_content(self) -> None:
        self.raw = ""
        self.value = ""
        self.error = None
        self.rejected = None
