"""Dependency graph for formula cells with topological ordering."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sheetgrid.calc._parser import formula_references, is_formula

if TYPE_CHECKING:
    from sheetgrid._cell import Cell

Coord = tuple[int, int]


class CircularReferenceError(ValueError):
    """Raised when formula cells depend on each other in a cycle.

    ``cells`` holds every formula cell that could not be ordered (cycle
    members and anything downstream of them); ``ordered`` is the evaluation
    order of the rest.
    """

    def __init__(self, cells: set[Coord], ordered: list[Coord]) -> None:
        super().__init__(f"Circular reference detected involving: {sorted(cells)}")
        self.cells = cells
        self.ordered = ordered


class DependencyGraph:
    """Tracks formula cell dependencies for evaluation ordering.

    Cells are keyed by 0-based ``(row, col)``.
    """

    __slots__ = ("dependencies", "dependents", "formulas")

    def __init__(self) -> None:
        # cell -> set of cells it reads from
        self.dependencies: dict[Coord, set[Coord]] = {}
        # cell -> set of cells that read from it (reverse edges)
        self.dependents: dict[Coord, set[Coord]] = {}
        # cell -> formula string
        self.formulas: dict[Coord, str] = {}

    def add_formula(
        self, cell: Coord, formula: str, limit: tuple[int, int] | None = None,
    ) -> None:
        """Register a formula cell and its dependencies.

        With *limit* (grid shape) references past the grid edge are dropped;
        they can never be formula cells.
        """
        self.formulas[cell] = formula
        refs = formula_references(formula, limit)
        self.dependencies[cell] = set(refs)
        for ref in refs:
            self.dependents.setdefault(ref, set()).add(cell)

    def topological_order(self) -> list[Coord]:
        """Return formula cells in evaluation order (Kahn's algorithm).

        Ties are broken row-major so the order is deterministic.
        Raises CircularReferenceError if a cycle is detected.
        """
        formula_cells = set(self.formulas)
        if not formula_cells:
            return []

        in_degree: dict[Coord, int] = {
            cell: len(self.dependencies.get(cell, set()) & formula_cells)
            for cell in formula_cells
        }

        queue: deque[Coord] = deque(
            sorted(cell for cell in formula_cells if in_degree[cell] == 0)
        )
        order: list[Coord] = []
        while queue:
            cell = queue.popleft()
            order.append(cell)
            for dep in sorted(self.dependents.get(cell, set())):
                if dep in formula_cells:
                    in_degree[dep] -= 1
                    if in_degree[dep] == 0:
                        queue.append(dep)

        if len(order) != len(formula_cells):
            raise CircularReferenceError(formula_cells - set(order), order)
        return order

    @classmethod
    def from_cells(cls, cells: Sequence[Sequence[Cell]]) -> DependencyGraph:
        """Build a graph by scanning the grid for formula cells."""
        graph = cls()
        limit = (len(cells), max((len(row) for row in cells), default=0))
        for r, row in enumerate(cells):
            for c, cell in enumerate(row):
                if is_formula(cell.raw):
                    graph.add_formula((r, c), cell.raw, limit)
        return graph
