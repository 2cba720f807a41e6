"""
core/precision.py - Fixed-point numeric boundary

Calculators work in binary floating point with compensated summation.
Everything that leaves the service layer is rounded back to a fixed number
of decimal places using decimal arithmetic, so repeated reads of the same
result are identical down to the last digit.
"""

from __future__ import annotations
from decimal import Context, Decimal, ROUND_HALF_EVEN
from typing import Any, Dict, Optional
import math

from hydrostab.core.constants import DEFAULT_DECIMAL_PLACES


def to_fixed(value: Optional[float], places: int = DEFAULT_DECIMAL_PLACES) -> Optional[float]:
    """
    Round a float to a fixed number of decimal places.

    Uses Decimal quantization (banker's rounding) on the shortest repr of the
    float, so the result does not depend on binary representation noise.
    None and non-finite values pass through unchanged. Quantization runs
    under a local context wide enough for the integer digits, so large
    finite values round without overflowing the default precision.
    """
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return value
    if not math.isfinite(value):
        return value

    exact = Decimal(repr(float(value)))
    quantum = Decimal(1).scaleb(-places)
    context = Context(prec=max(28, exact.adjusted() + places + 2))
    rounded = exact.quantize(quantum, rounding=ROUND_HALF_EVEN, context=context)
    result = float(rounded)
    # Normalize negative zero
    return result + 0.0


def round_mapping(data: Dict[str, Any], places: int = DEFAULT_DECIMAL_PLACES) -> Dict[str, Any]:
    """Recursively apply to_fixed to every float in a serialized result."""
    rounded: Dict[str, Any] = {}
    for key, value in data.items():
        rounded[key] = _round_value(value, places)
    return rounded


def _round_value(value: Any, places: int) -> Any:
    if isinstance(value, dict):
        return round_mapping(value, places)
    if isinstance(value, (list, tuple)):
        return [_round_value(v, places) for v in value]
    if isinstance(value, float):
        return to_fixed(value, places)
    return value
