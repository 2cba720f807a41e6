"""
hydrostab Integration Engine

Numerical quadrature over tabulated (x, y) samples: trapezoidal rule,
Simpson's 1/3 rule for odd point counts (non-uniform spacing allowed),
composite Simpson for arbitrary counts and first/second moments.
`integrate` only uses Simpson on evenly spaced samples.

All summation uses math.fsum so results are independent of accumulation
order.
"""

from __future__ import annotations
from typing import Sequence
import math

from hydrostab.core.constants import UNIFORM_SPACING_FRACTION
from hydrostab.errors import InvalidArgumentError, NumericDomainError


# =============================================================================
# VALIDATION
# =============================================================================

def _check_samples(x: Sequence[float], y: Sequence[float], minimum: int, method: str) -> None:
    if len(x) != len(y):
        raise InvalidArgumentError(
            f"{method}: x and y must have the same length ({len(x)} != {len(y)})",
            param="y",
        )
    if len(x) < minimum:
        raise InvalidArgumentError(
            f"{method}: at least {minimum} points are required, got {len(x)}",
            param="x",
        )
    for i in range(1, len(x)):
        if not x[i] > x[i - 1]:
            raise InvalidArgumentError(
                f"{method}: x must be strictly increasing (x[{i - 1}]={x[i - 1]}, x[{i}]={x[i]})",
                param="x",
            )


# =============================================================================
# QUADRATURE RULES
# =============================================================================

def _simpson_panel(x0: float, x1: float, x2: float, f0: float, f1: float, f2: float) -> float:
    """Exact integral of the parabola through three points; h0 == h1 reduces to h/3(f0 + 4f1 + f2)."""
    h0 = x1 - x0
    h1 = x2 - x1
    s = h0 + h1
    return s / 6.0 * (
        (2.0 - h1 / h0) * f0
        + s * s / (h0 * h1) * f1
        + (2.0 - h0 / h1) * f2
    )


class IntegrationEngine:
    """
    Stateless numerical integrator.

    Every method is a pure function of its inputs; one instance can be
    shared freely across threads.
    """

    def trapezoidal(self, x: Sequence[float], y: Sequence[float]) -> float:
        """Trapezoidal rule. Requires at least 2 points with strictly increasing x."""
        _check_samples(x, y, 2, "trapezoidal")
        return math.fsum(
            0.5 * (x[i + 1] - x[i]) * (y[i] + y[i + 1])
            for i in range(len(x) - 1)
        )

    def simpson(self, x: Sequence[float], y: Sequence[float]) -> float:
        """
        Simpson's 1/3 rule over consecutive point pairs.

        Requires an odd number of points (at least 3). Spacing need not be
        uniform: each pair of intervals integrates the interpolating parabola
        exactly, so quadratics (and cubics on uniform grids) are exact.

        Raises:
            NumericDomainError: Even point count
        """
        if len(x) % 2 == 0:
            raise NumericDomainError(
                f"Simpson's rule requires an odd number of points, got {len(x)}",
                method="simpson",
            )
        _check_samples(x, y, 3, "simpson")
        return math.fsum(
            _simpson_panel(x[i], x[i + 1], x[i + 2], y[i], y[i + 1], y[i + 2])
            for i in range(0, len(x) - 2, 2)
        )

    def composite_simpson(self, x: Sequence[float], y: Sequence[float]) -> float:
        """
        Simpson's rule for any point count of at least 2.

        Two points fall back to the trapezoid; an even count applies Simpson
        to the first n-1 points and the trapezoid to the last interval.
        """
        _check_samples(x, y, 2, "composite_simpson")
        n = len(x)
        if n == 2:
            return self.trapezoidal(x, y)
        if n % 2 == 1:
            return self.simpson(x, y)
        head = self.simpson(x[:-1], y[:-1])
        tail = 0.5 * (x[-1] - x[-2]) * (y[-1] + y[-2])
        return math.fsum((head, tail))

    @staticmethod
    def is_evenly_spaced(x: Sequence[float]) -> bool:
        """True when every interval matches the first to UNIFORM_SPACING_FRACTION of its width."""
        if len(x) < 3:
            return True
        h = x[1] - x[0]
        tolerance = abs(h) * UNIFORM_SPACING_FRACTION
        return all(abs((x[i + 1] - x[i]) - h) <= tolerance for i in range(1, len(x) - 1))

    def integrate(self, x: Sequence[float], y: Sequence[float]) -> float:
        """
        Integrate with the best rule for the samples.

        Evenly spaced samples use Simpson's rule, or composite Simpson for
        an even count. Uneven spacing, such as a profile cut at a draft
        between waterlines, uses the trapezoidal rule. Fewer than 2 points
        integrate to zero (degenerate range).
        """
        if len(x) < 2 and len(x) == len(y):
            return 0.0
        if not self.is_evenly_spaced(x):
            return self.trapezoidal(x, y)
        if len(x) % 2 == 1:
            return self.simpson(x, y)
        return self.composite_simpson(x, y)

    def first_moment(self, x: Sequence[float], y: Sequence[float]) -> float:
        """∫ x·y dx, with the product tabulated at the sample points."""
        if len(x) != len(y):
            raise InvalidArgumentError("first_moment: x and y must have the same length", param="y")
        return self.integrate(x, [xi * yi for xi, yi in zip(x, y)])

    def second_moment(self, x: Sequence[float], y: Sequence[float]) -> float:
        """∫ x²·y dx, with the product tabulated at the sample points."""
        if len(x) != len(y):
            raise InvalidArgumentError("second_moment: x and y must have the same length", param="y")
        return self.integrate(x, [xi * xi * yi for xi, yi in zip(x, y)])


# Module-level default instance
ENGINE = IntegrationEngine()
