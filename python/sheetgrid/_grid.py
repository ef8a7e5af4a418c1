"""Grid store - owns the cells, column types and selection of one sheet."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

from sheetgrid._cell import FORMAT_ATTRIBUTES, Cell, ColumnType
from sheetgrid._options import GridOptions
from sheetgrid._utils import a1_to_rowcol
from sheetgrid._validation import Invalid, ValidationResult, apply_validation, validate
from sheetgrid.calc._functions import FunctionRegistry
from sheetgrid.calc._protocol import RecalcResult, RecomputePolicy
from sheetgrid.calc._recompute import make_policy

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


class Grid:
    """A rectangular, mutable grid of typed cells.

    Every operation that can change content or shape ends with a recompute
    pass, so formula values are never older than the mutation that caused
    them (modulo the snapshot policy's one-pass lag for formula chains).

    Usage::

        grid = Grid()
        grid.set_column_type(0, "number")
        grid.set_cell(0, 0, "3")
        grid.set_cell(1, 0, "4")
        grid.set_cell(2, 1, "=SUM(A1:A2)")
        grid.cell(2, 1).value  # 7
    """

    __slots__ = (
        "options", "cells", "column_types", "selection",
        "last_recalc", "_policy",
    )

    def __init__(
        self,
        rows: int | None = None,
        cols: int | None = None,
        options: GridOptions | None = None,
        policy: RecomputePolicy | None = None,
        functions: FunctionRegistry | None = None,
    ) -> None:
        opts = options or GridOptions()
        if rows is not None or cols is not None:
            opts = replace(
                opts,
                rows=rows if rows is not None else opts.rows,
                cols=cols if cols is not None else opts.cols,
            )
        self.options = opts
        self.cells: list[list[Cell]] = [
            [Cell() for _ in range(opts.cols)] for _ in range(opts.rows)
        ]
        self.column_types: list[ColumnType] = [opts.default_column_type] * opts.cols
        self.selection: tuple[int, int] | None = None
        self.last_recalc = RecalcResult()
        if policy is not None and functions is not None:
            raise ValueError("Pass either policy or functions, not both")
        self._policy = policy or make_policy(opts.recompute, functions)

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------

    @property
    def n_rows(self) -> int:
        return len(self.cells)

    @property
    def n_cols(self) -> int:
        return len(self.cells[0])

    @property
    def shape(self) -> tuple[int, int]:
        return self.n_rows, self.n_cols

    def cell(self, row: int, col: int) -> Cell:
        self._check_bounds(row, col)
        return self.cells[row][col]

    def __getitem__(self, key: str) -> Cell:
        """``grid['B3']`` -> Cell."""
        row, col = a1_to_rowcol(key)
        return self.cell(row, col)

    def values(self) -> list[list[Any]]:
        """The displayed value matrix."""
        return [[c.value for c in row] for row in self.cells]

    def raws(self) -> list[list[str]]:
        return [[c.raw for c in row] for row in self.cells]

    def snapshot(self) -> list[list[Cell]]:
        """Independent copy of every cell."""
        return [[c.copy() for c in row] for row in self.cells]

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.n_rows and 0 <= col < self.n_cols):
            raise IndexError(
                f"Cell ({row}, {col}) is outside the {self.n_rows}x{self.n_cols} grid"
            )

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def recompute(self) -> RecalcResult:
        """Run the recompute policy over the whole grid now."""
        self.last_recalc = self._policy.recompute(self)
        return self.last_recalc

    # ------------------------------------------------------------------
    # Cell content
    # ------------------------------------------------------------------

    def set_cell(self, row: int, col: int, text: str) -> ValidationResult:
        """Validate *text* against the column type and store it.

        Invalid input never raises; the outcome is returned so the caller
        can notify the user, and the message is kept on ``Cell.error``.
        """
        self._check_bounds(row, col)
        result = validate(text, self.column_types[col])
        apply_validation(self.cells[row][col], text, result, self.options.invalid_input)
        if isinstance(result, Invalid):
            logger.debug("Rejected %r at (%d, %d): %s", text, row, col, result.message)
        self.recompute()
        return result

    def set_format(self, row: int, col: int, attribute: str, value: Any) -> None:
        """Set a presentation attribute. Content and formulas are untouched."""
        self._check_bounds(row, col)
        field = FORMAT_ATTRIBUTES.get(attribute)
        if field is None:
            raise ValueError(
                f"Unknown format attribute {attribute!r}; expected one of "
                f"{sorted(set(FORMAT_ATTRIBUTES.values()))}"
            )
        setattr(self.cells[row][col], field, value)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select(self, row: int, col: int) -> None:
        self._check_bounds(row, col)
        self.selection = (row, col)

    def clear_selection(self) -> None:
        self.selection = None

    def selected_cell(self) -> Cell | None:
        if self.selection is None:
            return None
        return self.cells[self.selection[0]][self.selection[1]]

    def format_selection(self, attribute: str, value: Any) -> None:
        if self.selection is None:
            raise ValueError("Select a cell first")
        self.set_format(*self.selection, attribute, value)

    def toggle_bold(self) -> None:
        cell = self.selected_cell()
        self.format_selection("bold", not cell.bold if cell else True)

    def toggle_italic(self) -> None:
        cell = self.selected_cell()
        self.format_selection("italic", not cell.italic if cell else True)

    def _drop_stale_selection(self) -> None:
        if self.selection is None:
            return
        row, col = self.selection
        if row >= self.n_rows or col >= self.n_cols:
            self.selection = None

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def add_row(self) -> None:
        self.cells.append([Cell() for _ in range(self.n_cols)])
        self.recompute()

    def delete_row(self) -> None:
        """Remove the last row; a one-row grid is left as is."""
        if self.n_rows <= 1:
            return
        self.cells.pop()
        self._drop_stale_selection()
        self.recompute()

    def add_column(self) -> None:
        for row in self.cells:
            row.append(Cell())
        self.column_types.append(self.options.default_column_type)
        self.recompute()

    def delete_column(self) -> None:
        """Remove the last column; a one-column grid is left as is."""
        if self.n_cols <= 1:
            return
        for row in self.cells:
            row.pop()
        self.column_types.pop()
        self._drop_stale_selection()
        self.recompute()

    def set_column_type(self, col: int, column_type: str | ColumnType) -> None:
        """Change a column's type.

        Existing cells are not re-validated; only later edits see the new
        grammar.
        """
        if not 0 <= col < self.n_cols:
            raise IndexError(f"Column {col} is outside the grid")
        self.column_types[col] = ColumnType.coerce(column_type)

    # ------------------------------------------------------------------
    # Text quality
    # ------------------------------------------------------------------

    def _transform_selection(self, func: Any) -> None:
        cell = self.selected_cell()
        if cell is None:
            return
        was_formula = cell.is_formula
        cell.raw = func(cell.raw)
        # formula values are left to the recompute pass
        if not was_formula:
            cell.value = func(_as_text(cell.value))
        elif not cell.is_formula:
            cell.value = cell.raw
        self.recompute()

    def trim(self) -> None:
        self._transform_selection(str.strip)

    def upper(self) -> None:
        self._transform_selection(str.upper)

    def lower(self) -> None:
        self._transform_selection(str.lower)

    def remove_duplicate_rows(self) -> int:
        """Drop rows whose raw contents repeat an earlier row.

        Returns the number of rows removed.
        """
        seen: set[tuple[str, ...]] = set()
        unique: list[list[Cell]] = []
        for row in self.cells:
            key = tuple(c.raw for c in row)
            if key not in seen:
                seen.add(key)
                unique.append(row)
        removed = self.n_rows - len(unique)
        self.cells = unique
        self._drop_stale_selection()
        self.recompute()
        return removed

    def find_and_replace(self, pattern: str, replacement: str) -> int:
        """Case-insensitive global substitution over every cell.

        *pattern* is a regular expression; *replacement* is inserted
        literally. Returns the number of cells whose raw text changed.
        """
        try:
            regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid search pattern {pattern!r}: {e}") from e

        def sub(text: str) -> str:
            return regex.sub(lambda _m: replacement, text)

        changed = 0
        for row in self.cells:
            for cell in row:
                was_formula = cell.is_formula
                if cell.raw:
                    new_raw = sub(cell.raw)
                    if new_raw != cell.raw:
                        changed += 1
                    cell.raw = new_raw
                if was_formula:
                    if not cell.is_formula:
                        cell.value = cell.raw
                elif cell.value != "":
                    text = _as_text(cell.value)
                    new_text = sub(text)
                    if new_text != text:
                        cell.value = new_text
        self.recompute()
        return changed

    # ------------------------------------------------------------------
    # Bulk load
    # ------------------------------------------------------------------

    def load_values(self, matrix: Iterable[Sequence[Any]]) -> None:
        """Replace the whole grid with *matrix*.

        Short rows are padded with empty cells. Formatting, column types and
        the selection are reset.
        """
        rows = [list(r) for r in matrix]
        width = max((len(r) for r in rows), default=0)
        n_rows, n_cols = max(len(rows), 1), max(width, 1)

        cells: list[list[Cell]] = []
        for r in range(n_rows):
            src = rows[r] if r < len(rows) else []
            line: list[Cell] = []
            for c in range(n_cols):
                value = src[c] if c < len(src) else None
                if value is None or value == "":
                    line.append(Cell())
                else:
                    line.append(Cell(raw=_as_text(value), value=value))
            cells.append(line)

        self.cells = cells
        self.column_types = [self.options.default_column_type] * n_cols
        self.selection = None
        self.recompute()

    def __repr__(self) -> str:
        return f"<Grid {self.n_rows}x{self.n_cols} recompute={self.options.recompute}>"
