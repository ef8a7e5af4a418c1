"""RecomputePolicy protocol and result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sheetgrid._grid import Grid


@dataclass(frozen=True)
class CellDelta:
    """A single formula cell's value change from a recompute pass."""

    cell_ref: str  # A1-style, e.g. "C3"
    old_value: Any
    new_value: Any
    formula: str | None = None  # the raw text that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Outcome of one recompute pass over the grid."""

    deltas: tuple[CellDelta, ...] = ()
    total_formula_cells: int = 0
    propagated_cells: int = 0  # formula cells whose value actually changed
    circular: tuple[str, ...] = ()  # cells left unevaluated by a cycle

    @property
    def propagation_ratio(self) -> float:
        if self.total_formula_cells == 0:
            return 0.0
        return self.propagated_cells / self.total_formula_cells


@runtime_checkable
class RecomputePolicy(Protocol):
    """Decides how formula cells are brought up to date after a mutation."""

    def recompute(self, grid: Grid) -> RecalcResult:
        """Re-evaluate formula cells in *grid* in place."""
        ...
