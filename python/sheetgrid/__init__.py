"""sheetgrid - a typed cell grid with range formulas and xlsx import/export.

Usage::

    from sheetgrid import Grid, load_grid, save_grid

    grid = Grid()
    grid.set_column_type(0, "number")
    grid.set_cell(0, 0, "3")
    grid.set_cell(1, 0, "4")
    grid.set_cell(0, 1, "=SUM(A1:A2)")
    print(grid["B1"].value)  # 7

    save_grid(grid, "out.xlsx")
    grid2 = load_grid("out.xlsx")
"""

from sheetgrid._cell import FORMAT_ATTRIBUTES, FORMULA_MARKER, Cell, ColumnType
from sheetgrid._grid import Grid
from sheetgrid._io import load_grid, save_grid
from sheetgrid._options import GridOptions
from sheetgrid._utils import a1_to_rowcol, column_index, column_letter, rowcol_to_a1
from sheetgrid._validation import Empty, Invalid, Valid, ValidationResult, validate
from sheetgrid.calc import ERROR, evaluate, parse_range

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "ColumnType",
    "ERROR",
    "Empty",
    "FORMAT_ATTRIBUTES",
    "FORMULA_MARKER",
    "Grid",
    "GridOptions",
    "Invalid",
    "Valid",
    "ValidationResult",
    "__version__",
    "a1_to_rowcol",
    "column_index",
    "column_letter",
    "evaluate",
    "load_grid",
    "parse_range",
    "rowcol_to_a1",
    "save_grid",
    "validate",
]
