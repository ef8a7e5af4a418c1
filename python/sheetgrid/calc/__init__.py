"""sheetgrid.calc - Formula evaluation and recompute policies for grids."""

from sheetgrid.calc._evaluator import evaluate, gather_operands, read_value
from sheetgrid.calc._functions import (
    ERROR,
    SUPPORTED_FUNCTIONS,
    FunctionRegistry,
    Operands,
    coerce_number,
)
from sheetgrid.calc._graph import CircularReferenceError, DependencyGraph
from sheetgrid.calc._parser import (
    formula_references,
    is_formula,
    parse_formula,
    parse_range,
    range_bounds,
    range_shape,
)
from sheetgrid.calc._protocol import CellDelta, RecalcResult, RecomputePolicy
from sheetgrid.calc._recompute import (
    CIRCULAR,
    DependencyRecompute,
    SnapshotRecompute,
    make_policy,
)
from sheetgrid.calc._relay import (
    INVALID_FORMULA,
    CalculatorClient,
    RelayError,
    calculate,
    handle_calculate,
)

__all__ = [
    "CIRCULAR",
    "CalculatorClient",
    "CellDelta",
    "CircularReferenceError",
    "DependencyGraph",
    "DependencyRecompute",
    "ERROR",
    "FunctionRegistry",
    "INVALID_FORMULA",
    "Operands",
    "RecalcResult",
    "RecomputePolicy",
    "RelayError",
    "SUPPORTED_FUNCTIONS",
    "SnapshotRecompute",
    "calculate",
    "coerce_number",
    "evaluate",
    "formula_references",
    "gather_operands",
    "handle_calculate",
    "is_formula",
    "make_policy",
    "parse_formula",
    "parse_range",
    "range_bounds",
    "range_shape",
]
