"""Import/export of grids to ``.xlsx`` via openpyxl.

Only displayed values travel. Raw formula text, formatting and column types
are not written, and an import starts from default formatting and types.
"""

from __future__ import annotations

import datetime
import logging
import os
from typing import Any

import openpyxl

from sheetgrid._grid import Grid
from sheetgrid._options import GridOptions

logger = logging.getLogger(__name__)

DEFAULT_SHEET_TITLE = "Sheet1"


def _export_value(value: Any) -> Any:
    # openpyxl writes None as an empty cell
    return None if value == "" else value


def _import_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return value


def save_grid(
    grid: Grid,
    filename: str | os.PathLike[str],
    sheet_title: str = DEFAULT_SHEET_TITLE,
) -> None:
    """Write the grid's value matrix to an ``.xlsx`` file."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    for r, row in enumerate(grid.values(), start=1):
        for c, value in enumerate(row, start=1):
            ws.cell(row=r, column=c, value=_export_value(value))
    wb.save(str(filename))
    logger.info("Saved %dx%d grid to %s", grid.n_rows, grid.n_cols, filename)


def load_grid(
    filename: str | os.PathLike[str],
    options: GridOptions | None = None,
) -> Grid:
    """Build a new Grid from the first sheet of an ``.xlsx`` file.

    Cells holding formulas in the file come back as formula text and are
    evaluated by the grid's recompute pass.
    """
    wb = openpyxl.load_workbook(str(filename))
    try:
        ws = wb.worksheets[0]
        matrix = [
            [_import_value(v) for v in row]
            for row in ws.iter_rows(
                min_row=1, min_col=1,
                max_row=ws.max_row, max_col=ws.max_column,
                values_only=True,
            )
        ]
    finally:
        wb.close()

    grid = Grid(options=options)
    grid.load_values(matrix)
    logger.info("Loaded %dx%d grid from %s", grid.n_rows, grid.n_cols, filename)
    return grid
