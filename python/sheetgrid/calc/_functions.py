"""Aggregate function implementations and the function registry."""

from __future__ import annotations

import itertools
import math
import re
from collections.abc import Iterator, Sequence
from typing import Any, Callable

# Displayed in place of a result when a formula cannot be evaluated.
ERROR = "ERROR"

Number = int | float

# Plain ASCII decimal, optional exponent. No inf/nan, no underscores.
_NUMERIC_TEXT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


# ---------------------------------------------------------------------------
# Operand coercion
# ---------------------------------------------------------------------------


def coerce_number(value: Any) -> Number:
    """Coerce a cell value to a number; anything non-numeric becomes 0.

    Numeric strings may carry surrounding whitespace. Booleans count as 1/0.
    NaN collapses to 0 so one bad cell cannot poison an aggregate.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_TEXT_RE.fullmatch(text):
            return 0
        num = float(text)
        if not math.isfinite(num):
            return 0
        if num.is_integer() and "." not in text and "e" not in text.lower():
            return int(text)
        return num
    return 0


class Operands(Sequence):
    """Operand list of a range: the in-grid values then *padding* zeros.

    Cells past the grid edge read as 0; they are counted, not stored.
    """

    __slots__ = ("values", "padding")

    def __init__(self, values: list[Number], padding: int = 0) -> None:
        self.values = values
        self.padding = padding

    def __len__(self) -> int:
        return len(self.values) + self.padding

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self)))]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("operand index out of range")
        return self.values[index] if index < len(self.values) else 0

    def __iter__(self) -> Iterator[Number]:
        yield from self.values
        yield from itertools.repeat(0, self.padding)

    def __repr__(self) -> str:
        return f"Operands({self.values!r}, padding={self.padding})"


def _split(values: Sequence[Number]) -> tuple[list[Number], int]:
    if isinstance(values, Operands):
        return values.values, values.padding
    return list(values), 0


# ---------------------------------------------------------------------------
# Builtins - each takes the already-coerced operands
# ---------------------------------------------------------------------------


def _builtin_sum(values: Sequence[Number]) -> Number:
    present, _ = _split(values)
    return sum(present)


def _builtin_average(values: Sequence[Number]) -> Number:
    # Empty ranges are rejected before dispatch; keep the division safe anyway.
    if not len(values):
        return 0
    present, _ = _split(values)
    return sum(present) / len(values)


def _builtin_max(values: Sequence[Number]) -> Number:
    present, padding = _split(values)
    if padding:
        present = [*present, 0]
    return max(present, default=0)


def _builtin_min(values: Sequence[Number]) -> Number:
    present, padding = _split(values)
    if padding:
        present = [*present, 0]
    return min(present, default=0)


def _builtin_count(values: Sequence[Number]) -> int:
    """COUNT - number of operands whose coerced value is non-zero.

    Not Excel's COUNT: a text cell coerces to 0 and is left out, and so is a
    numeric cell holding 0.
    """
    present, _ = _split(values)
    return sum(1 for v in present if v != 0)


_BUILTINS: dict[str, Callable[[Sequence[Number]], Any]] = {
    "SUM": _builtin_sum,
    "AVERAGE": _builtin_average,
    "MAX": _builtin_max,
    "MIN": _builtin_min,
    "COUNT": _builtin_count,
}

SUPPORTED_FUNCTIONS: frozenset[str] = frozenset(_BUILTINS)


class FunctionRegistry:
    """Registry of callable function implementations.

    Starts with the builtins and can be extended with custom aggregates.
    Names are matched exactly; formulas use uppercase function names.
    Functions receive an :class:`Operands` sequence.
    """

    def __init__(self) -> None:
        self._functions: dict[str, Callable[[Sequence[Number]], Any]] = dict(_BUILTINS)

    def register(self, name: str, func: Callable[[Sequence[Number]], Any]) -> None:
        if not name.isalpha() or not name.isupper():
            raise ValueError(f"Function names must be uppercase letters, got {name!r}")
        self._functions[name] = func

    def get(self, name: str) -> Callable[[Sequence[Number]], Any] | None:
        return self._functions.get(name)

    def has(self, name: str) -> bool:
        return name in self._functions

    @property
    def supported_functions(self) -> frozenset[str]:
        return frozenset(self._functions.keys())
