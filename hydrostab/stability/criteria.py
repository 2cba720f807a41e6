"""
hydrostab Stability Criteria Checker

Checks a GZ curve against the general intact stability criteria of
IMO A.749(18). A pure function of the curve: no hydrostatics are
recomputed.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import logging
import math

from hydrostab.core.precision import to_fixed
from hydrostab.physics.integration import ENGINE, IntegrationEngine
from hydrostab.stability.constants import IMO_INTACT, STANDARD_NAME, IMOIntactCriteria
from hydrostab.stability.results import (
    StabilityCriteriaResult,
    StabilityCriterion,
    StabilityCurve,
    StabilityPoint,
)

logger = logging.getLogger(__name__)

# Angles closer than this are the same sample (degrees)
ANGLE_EPS_DEG = 1e-9


# =============================================================================
# CURVE HELPERS
# =============================================================================

def _sorted(points: Sequence[StabilityPoint]) -> List[StabilityPoint]:
    return sorted(points, key=lambda p: p.heel_angle)


def interpolate_gz(points: Sequence[StabilityPoint], angle: float) -> float:
    """
    GZ at an angle by linear interpolation.

    Outside the sampled range the nearest end value is returned; an empty
    curve gives 0.
    """
    if not points:
        return 0.0
    pts = _sorted(points)
    if angle <= pts[0].heel_angle:
        return pts[0].gz
    if angle >= pts[-1].heel_angle:
        return pts[-1].gz
    for lower, upper in zip(pts, pts[1:]):
        if lower.heel_angle <= angle <= upper.heel_angle:
            span = upper.heel_angle - lower.heel_angle
            if span <= 0:
                return lower.gz
            fraction = (angle - lower.heel_angle) / span
            return lower.gz + fraction * (upper.gz - lower.gz)
    return pts[-1].gz


def find_max_gz(points: Sequence[StabilityPoint]) -> Tuple[float, float]:
    """(max GZ, angle) of the sampled curve; the first occurrence wins a tie."""
    if not points:
        return 0.0, 0.0
    best = max(points, key=lambda p: p.gz)
    return best.gz, best.heel_angle


def calculate_area_under_curve(
    points: Sequence[StabilityPoint],
    from_angle: float,
    to_angle: float,
    engine: IntegrationEngine = ENGINE,
) -> float:
    """
    Area under the GZ curve between two angles in metre-radians.

    The range is limited to the sampled angles; its ends are linearly
    interpolated and the samples integrated with the integration engine.
    """
    if len(points) < 2 or to_angle <= from_angle:
        return 0.0
    pts = _sorted(points)
    lo = max(from_angle, pts[0].heel_angle)
    hi = min(to_angle, pts[-1].heel_angle)
    if hi - lo <= ANGLE_EPS_DEG:
        return 0.0

    angles = [lo]
    values = [interpolate_gz(pts, lo)]
    for p in pts:
        if lo + ANGLE_EPS_DEG < p.heel_angle < hi - ANGLE_EPS_DEG:
            angles.append(p.heel_angle)
            values.append(p.gz)
    angles.append(hi)
    values.append(interpolate_gz(pts, hi))

    return engine.integrate([math.radians(a) for a in angles], values)


def angle_of_vanishing_stability(points: Sequence[StabilityPoint]) -> Optional[float]:
    """
    First angle past the positive range where GZ returns to zero.

    Interpolated between samples; None when GZ never becomes positive or
    stays positive to the end of the curve.
    """
    pts = _sorted(points)
    seen_positive = False
    for lower, upper in zip(pts, pts[1:]):
        if lower.gz > 0:
            seen_positive = True
        if seen_positive and lower.gz > 0 >= upper.gz:
            fraction = lower.gz / (lower.gz - upper.gz)
            return lower.heel_angle + fraction * (upper.heel_angle - lower.heel_angle)
    return None


# =============================================================================
# CRITERIA CHECKER
# =============================================================================

class StabilityCriteriaChecker:
    """Six-criterion intact stability check."""

    def __init__(self, criteria: IMOIntactCriteria = IMO_INTACT, engine: Optional[IntegrationEngine] = None):
        self.criteria = criteria
        self.engine = engine or ENGINE

    def check_criteria(self, curve: StabilityCurve, places: Optional[int] = None) -> StabilityCriteriaResult:
        """
        Evaluate every criterion independently against the curve.

        The overall result passes only if all six criteria pass. With
        places set, actual values are rounded to that many decimals before
        they are compared, so each flag agrees with the value reported.
        """
        c = self.criteria
        points = curve.points

        def actual(value: float) -> float:
            return value if places is None else to_fixed(value, places)

        results: List[StabilityCriterion] = []

        for lo, hi, required in (
            (0.0, 30.0, c.area_0_30_min_m_rad),
            (0.0, 40.0, c.area_0_40_min_m_rad),
            (30.0, 40.0, c.area_30_40_min_m_rad),
        ):
            area = actual(calculate_area_under_curve(points, lo, hi, self.engine))
            results.append(StabilityCriterion(
                name=f"Area under GZ curve ({lo:g}° to {hi:g}°)",
                required_value=required,
                actual_value=area,
                unit="m·rad",
                passed=area >= required,
                notes=f"Equivalent to {math.degrees(area):.3f} m·deg",
            ))

        max_gz, angle_at_max = find_max_gz(points)
        angle_at_max = actual(angle_at_max)
        results.append(StabilityCriterion(
            name="Angle at maximum GZ",
            required_value=c.angle_gz_max_min_deg,
            actual_value=angle_at_max,
            unit="degrees",
            passed=angle_at_max >= c.angle_gz_max_min_deg,
            notes=f"Maximum GZ = {max_gz:.3f} m",
        ))

        initial_gmt = actual(curve.initial_gmt)
        results.append(StabilityCriterion(
            name="Initial metacentric height (GMt)",
            required_value=c.gm_min_m,
            actual_value=initial_gmt,
            unit="m",
            passed=initial_gmt >= c.gm_min_m,
        ))

        gz_30 = actual(interpolate_gz(points, 30.0))
        results.append(StabilityCriterion(
            name="Righting arm at 30° heel",
            required_value=c.gz_30_min_m,
            actual_value=gz_30,
            unit="m",
            passed=gz_30 >= c.gz_30_min_m,
        ))

        all_passed = all(r.passed for r in results)
        passed = sum(1 for r in results if r.passed)
        total = len(results)
        if all_passed:
            summary = f"All {total} {STANDARD_NAME} intact stability criteria satisfied."
        else:
            failed = ", ".join(r.name for r in results if not r.passed)
            summary = (
                f"{total - passed} of {total} {STANDARD_NAME} criteria not satisfied: {failed}. "
                "Vessel may not meet intact stability requirements."
            )

        logger.info(f"Stability criteria check completed: {passed}/{total} passed")
        return StabilityCriteriaResult(
            all_criteria_passed=all_passed,
            criteria=results,
            standard=STANDARD_NAME,
            summary=summary,
        )
