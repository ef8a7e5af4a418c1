"""Stateless calculator and the HTTP relay client that talks to it.

The calculator takes a function name and a flat list of values; it knows
nothing about grids. ``handle_calculate`` is the request body handler a
server mounts at ``POST /calculate``; ``CalculatorClient`` is the caller side.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from sheetgrid.calc._functions import Number, coerce_number

logger = logging.getLogger(__name__)

INVALID_FORMULA = "Invalid formula"
RELAY_FUNCTIONS = frozenset({"SUM", "AVERAGE", "MAX", "MIN"})


class RelayError(RuntimeError):
    """The calculator could not be reached or answered with garbage."""


# ---------------------------------------------------------------------------
# Server side
# ---------------------------------------------------------------------------


def calculate(formula: str, values: list[Any]) -> Number | str:
    """Apply *formula* to *values*; non-numeric entries count as 0.

    AVERAGE divides by ``len(values)`` unguarded, so callers must not send
    an empty list. Unknown names return ``INVALID_FORMULA``.
    """
    if formula not in RELAY_FUNCTIONS:
        return INVALID_FORMULA
    nums = [coerce_number(v) for v in values]
    if formula == "SUM":
        return sum(nums)
    if formula == "AVERAGE":
        return sum(nums) / len(nums)
    if formula == "MAX":
        return max(nums)
    return min(nums)


def handle_calculate(payload: dict[str, Any]) -> dict[str, Any]:
    """``{"formula": ..., "values": [...]}`` -> ``{"result": ...}``."""
    formula = payload.get("formula")
    values = payload.get("values") or []
    if not isinstance(formula, str) or not isinstance(values, list):
        return {"result": INVALID_FORMULA}
    return {"result": calculate(formula, values)}


# ---------------------------------------------------------------------------
# Client side
# ---------------------------------------------------------------------------


class CalculatorClient:
    """Synchronous client for a calculator relay.

    Usage::

        with CalculatorClient("http://localhost:5000") as calc:
            total = calc.calculate("SUM", [1, 2, 3])
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def calculate(self, formula: str, values: list[Any]) -> Number | str:
        """Send one calculation; returns the number or ``INVALID_FORMULA``.

        Raises RelayError on transport failure, a non-2xx status or a body
        without a ``result``. Never substitutes a default number.
        """
        if not values:
            raise ValueError("Calculator relay needs at least one value")
        try:
            resp = self._client.post(
                "/calculate", json={"formula": formula, "values": list(values)},
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("Calculator relay failed for %s: %s", formula, e)
            raise RelayError(f"Calculator relay failed: {e}") from e
        except ValueError as e:
            logger.warning("Calculator relay sent a non-JSON body for %s", formula)
            raise RelayError("Calculator relay returned a malformed body") from e

        if not isinstance(data, dict) or "result" not in data:
            raise RelayError(f"Calculator relay returned no result: {data!r}")
        result = data["result"]
        if isinstance(result, bool) or not isinstance(result, (int, float, str)):
            raise RelayError(f"Calculator relay returned an unusable result: {result!r}")
        return result

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> CalculatorClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
