"""Formula and range-reference parsing."""

from __future__ import annotations

import re

from sheetgrid._cell import FORMULA_MARKER
from sheetgrid._utils import column_index

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Range: A1:B5. Uppercase letters, 1-based rows, no sheet prefix, no $ anchors.
_RANGE_RE = re.compile(r"([A-Z]+)([1-9]\d*):([A-Z]+)([1-9]\d*)", re.ASCII)

# Whole formula body after the marker: FUNC(range_text)
_FORMULA_RE = re.compile(r"([A-Z]+)\((.*)\)", re.ASCII)


def is_formula(raw: object) -> bool:
    """True when *raw* is text starting with the formula marker."""
    return isinstance(raw, str) and raw.startswith(FORMULA_MARKER)


# ---------------------------------------------------------------------------
# Range parsing
# ---------------------------------------------------------------------------


def range_bounds(text: str) -> tuple[int, int, int, int] | None:
    """0-based ``(start_row, start_col, end_row, end_col)``, inclusive.

    None when *text* is not exactly ``<Col><Row>:<Col><Row>`` or the range
    is reversed (end above or left of start).
    """
    m = _RANGE_RE.fullmatch(text)
    if not m:
        return None
    start_row, end_row = int(m.group(2)) - 1, int(m.group(4)) - 1
    start_col, end_col = column_index(m.group(1)), column_index(m.group(3))
    if end_row < start_row or end_col < start_col:
        return None
    return start_row, start_col, end_row, end_col


def range_shape(text: str) -> tuple[int, int]:
    """``(n_rows, n_cols)`` of a range reference, ``(0, 0)`` if unparseable."""
    bounds = range_bounds(text)
    if bounds is None:
        return (0, 0)
    start_row, start_col, end_row, end_col = bounds
    return (end_row - start_row + 1, end_col - start_col + 1)


def parse_range(
    text: str, limit: tuple[int, int] | None = None,
) -> list[tuple[int, int]]:
    """Expand ``"A1:B2"`` into 0-based ``(row, col)`` pairs, rows outer.

    Returns ``[]`` for a malformed or reversed range. With *limit* given as
    ``(n_rows, n_cols)`` only the coordinates inside that grid are listed,
    so the cost follows the grid rather than the reference.
    """
    bounds = range_bounds(text)
    if bounds is None:
        return []
    start_row, start_col, end_row, end_col = bounds
    if limit is not None:
        end_row = min(end_row, limit[0] - 1)
        end_col = min(end_col, limit[1] - 1)

    return [
        (r, c)
        for r in range(start_row, end_row + 1)
        for c in range(start_col, end_col + 1)
    ]


# ---------------------------------------------------------------------------
# Formula parsing
# ---------------------------------------------------------------------------


def parse_formula(raw: str) -> tuple[str, str] | None:
    """Split ``"=SUM(A1:B3)"`` into ``("SUM", "A1:B3")``.

    Returns None for non-formula text or a body that is not ``FUNC(...)``.
    The function name is not checked against any registry here.
    """
    if not is_formula(raw):
        return None
    m = _FORMULA_RE.fullmatch(raw[len(FORMULA_MARKER):].strip())
    if not m:
        return None
    return m.group(1), m.group(2).strip()


def formula_references(
    raw: str, limit: tuple[int, int] | None = None,
) -> list[tuple[int, int]]:
    """Every coordinate a formula reads, or ``[]`` if it reads nothing.

    *limit* clips the references to a grid as in :func:`parse_range`.
    """
    parsed = parse_formula(raw)
    if parsed is None:
        return []
    return parse_range(parsed[1], limit)
