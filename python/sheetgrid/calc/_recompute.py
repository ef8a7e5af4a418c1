"""Recompute policies: keep formula cells consistent with the grid."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sheetgrid._utils import rowcol_to_a1
from sheetgrid.calc._evaluator import evaluate
from sheetgrid.calc._functions import FunctionRegistry
from sheetgrid.calc._graph import CircularReferenceError, DependencyGraph
from sheetgrid.calc._protocol import CellDelta, RecalcResult, RecomputePolicy

if TYPE_CHECKING:
    from sheetgrid._grid import Grid

logger = logging.getLogger(__name__)

CIRCULAR = "CIRCULAR"
CIRCULAR_ERROR = "Circular reference"


def _values_differ(a: Any, b: Any, tolerance: float = 1e-10) -> bool:
    """Check if two values differ beyond tolerance."""
    if isinstance(a, bool) or isinstance(b, bool):
        return a != b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return abs(float(a) - float(b)) > tolerance
    return type(a) is not type(b) or a != b


def _result(
    grid: Grid,
    old_values: dict[tuple[int, int], Any],
    circular: set[tuple[int, int]] | None = None,
) -> RecalcResult:
    deltas: list[CellDelta] = []
    for (r, c), old in old_values.items():
        cell = grid.cells[r][c]
        if _values_differ(old, cell.value):
            deltas.append(CellDelta(
                cell_ref=rowcol_to_a1(r, c),
                old_value=old,
                new_value=cell.value,
                formula=cell.raw,
            ))
    result = RecalcResult(
        deltas=tuple(deltas),
        total_formula_cells=len(old_values),
        propagated_cells=len(deltas),
        circular=tuple(rowcol_to_a1(r, c) for r, c in sorted(circular or ())),
    )
    logger.debug(
        "Recompute: %d formula cells, %d changed, %d circular",
        result.total_formula_cells, result.propagated_cells, len(result.circular),
    )
    return result


class SnapshotRecompute:
    """Evaluate every formula against one snapshot taken before the pass.

    Formulas in the same pass never see each other's fresh results, so a
    formula reading another formula's cell lags by one pass. Non-formula
    cells keep the value their validation produced.
    """

    def __init__(self, functions: FunctionRegistry | None = None) -> None:
        self._functions = functions or FunctionRegistry()

    def recompute(self, grid: Grid) -> RecalcResult:
        snapshot = grid.snapshot()
        old_values: dict[tuple[int, int], Any] = {}
        for r, row in enumerate(grid.cells):
            for c, cell in enumerate(row):
                if not cell.is_formula:
                    continue
                old_values[(r, c)] = cell.value
                cell.value = evaluate(cell.raw, snapshot, self._functions)
                if cell.error == CIRCULAR_ERROR:
                    cell.error = None
        return _result(grid, old_values)


class DependencyRecompute:
    """Evaluate formulas in dependency order so chains settle in one pass.

    Formula cells caught in (or fed by) a cycle display ``"CIRCULAR"`` and
    carry ``error = "Circular reference"`` until the cycle is broken.
    """

    def __init__(self, functions: FunctionRegistry | None = None) -> None:
        self._functions = functions or FunctionRegistry()

    def recompute(self, grid: Grid) -> RecalcResult:
        graph = DependencyGraph.from_cells(grid.cells)
        try:
            order = graph.topological_order()
            circular: set[tuple[int, int]] = set()
        except CircularReferenceError as e:
            logger.debug("%s", e)
            order = e.ordered
            circular = e.cells

        old_values = {
            coord: grid.cells[coord[0]][coord[1]].value for coord in graph.formulas
        }
        for r, c in order:
            cell = grid.cells[r][c]
            cell.value = evaluate(cell.raw, grid.cells, self._functions)
            if cell.error == CIRCULAR_ERROR:
                cell.error = None
        for r, c in circular:
            cell = grid.cells[r][c]
            cell.value = CIRCULAR
            cell.error = CIRCULAR_ERROR
        return _result(grid, old_values, circular)


def make_policy(mode: str, functions: FunctionRegistry | None = None) -> RecomputePolicy:
    """Policy instance for a ``GridOptions.recompute`` mode name."""
    if mode == "snapshot":
        return SnapshotRecompute(functions)
    if mode == "dependency":
        return DependencyRecompute(functions)
    raise ValueError(f"Unknown recompute mode: {mode!r}")
