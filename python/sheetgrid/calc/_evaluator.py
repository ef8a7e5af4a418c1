"""Formula evaluation against a grid of cells.

A formula is ``=FUNC(RANGE)``: one aggregate over one rectangular range.
There is no cell arithmetic and no nesting. Operands are read from each
target cell's ``value``; anything missing or non-numeric counts as 0.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sheetgrid._cell import Cell
from sheetgrid.calc._functions import (
    ERROR,
    FunctionRegistry,
    Number,
    Operands,
    coerce_number,
)
from sheetgrid.calc._parser import is_formula, parse_formula, parse_range, range_shape

logger = logging.getLogger(__name__)

_DEFAULT_REGISTRY = FunctionRegistry()


def read_value(cells: Sequence[Sequence[Cell]], row: int, col: int) -> Any:
    """Value at ``(row, col)``, or None when the coordinate is off the grid."""
    if row < 0 or col < 0 or row >= len(cells):
        return None
    line = cells[row]
    if col >= len(line):
        return None
    return line[col].value


def gather_operands(
    cells: Sequence[Sequence[Cell]], coords: list[tuple[int, int]],
) -> list[Number]:
    """Coerced numeric operands for *coords*, in range order."""
    return [coerce_number(read_value(cells, r, c)) for r, c in coords]


def evaluate(
    raw: Any,
    cells: Sequence[Sequence[Cell]],
    functions: FunctionRegistry | None = None,
) -> Any:
    """Display value for *raw*.

    Non-formula input comes back unchanged. A formula with the wrong shape,
    an unknown function or an unparseable range evaluates to ``"ERROR"``.
    """
    if not is_formula(raw):
        return raw

    registry = functions or _DEFAULT_REGISTRY
    parsed = parse_formula(raw)
    if parsed is None:
        logger.debug("Malformed formula %r", raw)
        return ERROR

    func_name, range_text = parsed
    func = registry.get(func_name)
    if func is None:
        logger.debug("Unsupported function: %s", func_name)
        return ERROR

    n_rows, n_cols = range_shape(range_text)
    if not n_rows:
        logger.debug("Unparseable range %r in %r", range_text, raw)
        return ERROR

    # Only the in-grid part is read; the rest is counted as zero operands.
    limit = (len(cells), max((len(line) for line in cells), default=0))
    coords = parse_range(range_text, limit)
    values = Operands(gather_operands(cells, coords), n_rows * n_cols - len(coords))
    try:
        return func(values)
    except (ArithmeticError, TypeError, ValueError) as e:
        logger.debug("Error evaluating %s: %s", func_name, e)
        return ERROR
