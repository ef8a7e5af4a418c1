"""A1-style coordinate helpers. Rows and columns are 0-based."""

from __future__ import annotations

import re

_A1_RE = re.compile(r"^([A-Z]+)(\d+)$", re.ASCII)


def column_index(letters: str) -> int:
    """``"A"`` -> 0, ``"Z"`` -> 25, ``"AA"`` -> 26."""
    if not letters or not letters.isalpha():
        raise ValueError(f"Invalid column letters: {letters!r}")
    idx = 0
    for ch in letters.upper():
        idx = idx * 26 + (ord(ch) - ord("A") + 1)
    return idx - 1


def column_letter(index: int) -> str:
    """0 -> ``"A"``, 25 -> ``"Z"``, 26 -> ``"AA"``."""
    if index < 0:
        raise ValueError(f"Invalid column index: {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def a1_to_rowcol(ref: str) -> tuple[int, int]:
    """``"B3"`` -> ``(2, 1)``."""
    m = _A1_RE.match(ref.strip().upper())
    if not m or int(m.group(2)) < 1:
        raise ValueError(f"Invalid cell reference: {ref!r}")
    return int(m.group(2)) - 1, column_index(m.group(1))


def rowcol_to_a1(row: int, col: int) -> str:
    """``(2, 1)`` -> ``"B3"``."""
    return f"{column_letter(col)}{row + 1}"
