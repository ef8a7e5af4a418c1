"""Tests for sheetgrid.calc dependency graph and topological ordering."""

from __future__ import annotations

import pytest

from sheetgrid import Cell
from sheetgrid.calc._graph import CircularReferenceError, DependencyGraph


class TestAddFormula:
    def test_range_dependency(self) -> None:
        g = DependencyGraph()
        g.add_formula((3, 0), "=SUM(A1:A3)")
        assert g.dependencies[(3, 0)] == {(0, 0), (1, 0), (2, 0)}
        assert (3, 0) in g.dependents[(1, 0)]

    def test_bad_formula_has_no_dependencies(self) -> None:
        g = DependencyGraph()
        g.add_formula((0, 0), "=FOO")
        assert g.dependencies[(0, 0)] == set()
        assert g.topological_order() == [(0, 0)]


class TestTopologicalOrder:
    def test_empty(self) -> None:
        assert DependencyGraph().topological_order() == []

    def test_linear_chain(self) -> None:
        """B1 reads A1, C1 reads B1."""
        g = DependencyGraph()
        g.add_formula((0, 2), "=SUM(B1:B1)")
        g.add_formula((0, 1), "=SUM(A1:A1)")
        order = g.topological_order()
        assert order.index((0, 1)) < order.index((0, 2))

    def test_diamond(self) -> None:
        """B1 and B2 read A1; C1 reads both."""
        g = DependencyGraph()
        g.add_formula((0, 2), "=SUM(B1:B2)")
        g.add_formula((0, 1), "=SUM(A1:A1)")
        g.add_formula((1, 1), "=MAX(A1:A1)")
        order = g.topological_order()
        assert order[-1] == (0, 2)

    def test_independent_cells_row_major(self) -> None:
        g = DependencyGraph()
        g.add_formula((1, 0), "=SUM(D1:D2)")
        g.add_formula((0, 1), "=SUM(D1:D2)")
        g.add_formula((0, 0), "=SUM(D1:D2)")
        assert g.topological_order() == [(0, 0), (0, 1), (1, 0)]

    def test_circular_detection(self) -> None:
        g = DependencyGraph()
        g.add_formula((0, 0), "=SUM(B1:B1)")
        g.add_formula((0, 1), "=SUM(A1:A1)")
        with pytest.raises(CircularReferenceError, match="Circular reference") as info:
            g.topological_order()
        assert info.value.cells == {(0, 0), (0, 1)}
        assert info.value.ordered == []

    def test_self_reference(self) -> None:
        g = DependencyGraph()
        g.add_formula((0, 0), "=SUM(A1:A2)")
        with pytest.raises(CircularReferenceError) as info:
            g.topological_order()
        assert info.value.cells == {(0, 0)}

    def test_cycle_keeps_partial_order(self) -> None:
        """An unrelated formula is still ordered; downstream of the cycle is blocked."""
        g = DependencyGraph()
        g.add_formula((0, 0), "=SUM(B1:B1)")
        g.add_formula((0, 1), "=SUM(A1:A1)")
        g.add_formula((0, 2), "=SUM(A1:B1)")
        g.add_formula((5, 5), "=SUM(Z1:Z2)")
        with pytest.raises(CircularReferenceError) as info:
            g.topological_order()
        assert info.value.ordered == [(5, 5)]
        assert info.value.cells == {(0, 0), (0, 1), (0, 2)}

    def test_is_value_error(self) -> None:
        assert issubclass(CircularReferenceError, ValueError)


class TestFromCells:
    def test_scans_formula_cells_only(self) -> None:
        cells = [
            [Cell(raw="1", value=1), Cell(raw="=SUM(A1:A1)", value=1)],
            [Cell(raw="text", value="text"), Cell()],
        ]
        g = DependencyGraph.from_cells(cells)
        assert set(g.formulas) == {(0, 1)}
        assert g.formulas[(0, 1)] == "=SUM(A1:A1)"

    def test_references_clipped_to_grid(self) -> None:
        cells = [
            [Cell(raw="=SUM(A2:ZZ1000000)"), Cell()],
            [Cell(raw="3", value=3), Cell()],
        ]
        g = DependencyGraph.from_cells(cells)
        assert g.dependencies[(0, 0)] == {(1, 0), (1, 1)}

    def test_add_formula_with_limit(self) -> None:
        g = DependencyGraph()
        g.add_formula((0, 0), "=SUM(B1:D3)", limit=(2, 3))
        assert g.dependencies[(0, 0)] == {(0, 1), (0, 2), (1, 1), (1, 2)}
