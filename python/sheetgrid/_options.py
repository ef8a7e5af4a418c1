"""Grid configuration."""

from __future__ import annotations

from dataclasses import dataclass

from sheetgrid._cell import ColumnType

DEFAULT_ROWS = 10
DEFAULT_COLS = 10

INVALID_INPUT_POLICIES = ("discard", "retain")
RECOMPUTE_MODES = ("snapshot", "dependency")


@dataclass(frozen=True)
class GridOptions:
    """Construction-time settings for a :class:`~sheetgrid.Grid`.

    invalid_input
        ``"discard"`` clears a cell whose new text fails validation (the
        editor's historical behaviour). ``"retain"`` keeps the previous
        content and records the attempted text on ``Cell.rejected``.
    recompute
        ``"snapshot"`` re-evaluates every formula against one snapshot taken
        before the pass, so formula chains may lag one pass behind.
        ``"dependency"`` evaluates formulas in dependency order and flags
        circular references.
    """

    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS
    default_column_type: ColumnType = ColumnType.TEXT
    invalid_input: str = "discard"
    recompute: str = "snapshot"

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(
                f"Grid needs at least one row and one column, got {self.rows}x{self.cols}"
            )
        # frozen: go through object.__setattr__ to normalize
        object.__setattr__(
            self, "default_column_type", ColumnType.coerce(self.default_column_type),
        )
        if self.invalid_input not in INVALID_INPUT_POLICIES:
            raise ValueError(
                f"invalid_input must be one of {INVALID_INPUT_POLICIES}, got {self.invalid_input!r}"
            )
        if self.recompute not in RECOMPUTE_MODES:
            raise ValueError(
                f"recompute must be one of {RECOMPUTE_MODES}, got {self.recompute!r}"
            )
