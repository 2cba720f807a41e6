"""
hydrostab Stability Calculator

GZ and KN curves over a heel-angle grid. The upright hydrostatics at the
requested draft are computed once; the selected method then evaluates each
angle independently.
"""

from __future__ import annotations
from typing import Dict, List, Optional
import logging
import math
import time

from hydrostab.core.cancellation import CancellationToken
from hydrostab.core.constants import MAX_HEEL_ANGLE_DEG
from hydrostab.core.executor import GridExecutor
from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.physics.hydrostatics import HydrostaticsCalculator
from hydrostab.physics.results import HydroResult
from hydrostab.stability.criteria import angle_of_vanishing_stability, find_max_gz, interpolate_gz
from hydrostab.stability.methods import GZMethod, get_method
from hydrostab.stability.results import (
    KNCurve,
    StabilityCurve,
    StabilityMethod,
    StabilityPoint,
    StabilityRequest,
)

logger = logging.getLogger(__name__)

# Tolerance when deciding whether the range end lies on the grid (degrees)
ANGLE_GRID_EPS = 1e-9


def heel_angles(min_angle: float, max_angle: float, increment: float) -> List[float]:
    """
    Heel angles from min to max in fixed increments.

    Angles are generated as min + k·increment so rounding does not
    accumulate; the max is included when it lies on the grid.
    """
    if increment is None or not increment > 0:
        raise InvalidArgumentError(f"Angle increment must be positive, got {increment}", param="angle_increment")
    if min_angle is None or max_angle is None or min_angle >= max_angle:
        raise InvalidArgumentError(
            f"min_angle must be less than max_angle (got {min_angle} >= {max_angle})",
            param="min_angle",
        )
    if abs(min_angle) > MAX_HEEL_ANGLE_DEG or abs(max_angle) > MAX_HEEL_ANGLE_DEG:
        raise InvalidArgumentError(
            f"Heel angles must lie within ±{MAX_HEEL_ANGLE_DEG:g}°",
            param="max_angle",
        )
    count = int(math.floor((max_angle - min_angle) / increment + ANGLE_GRID_EPS)) + 1
    return [min_angle + k * increment for k in range(count)]


class StabilityCalculator:
    """Righting-arm curves for a geometry and loading condition."""

    def __init__(
        self,
        hydrostatics: Optional[HydrostaticsCalculator] = None,
        executor: Optional[GridExecutor] = None,
        methods: Optional[Dict[StabilityMethod, GZMethod]] = None,
    ):
        self.hydrostatics = hydrostatics or HydrostaticsCalculator()
        self.executor = executor or GridExecutor()
        self._methods = dict(methods or {})

    def method_for(self, method: StabilityMethod) -> GZMethod:
        method = StabilityMethod.parse(method)
        return self._methods.get(method) or get_method(method)

    # =========================================================================
    # GZ CURVE
    # =========================================================================

    def compute_gz_curve(
        self,
        geometry: HullGeometry,
        loadcase: Loadcase,
        request: StabilityRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> StabilityCurve:
        """
        GZ curve for a loading condition.

        Raises:
            InvalidArgumentError: Loadcase without KG, bad angle range, no draft
        """
        start_time = time.perf_counter()
        if loadcase is None or not loadcase.has_kg:
            raise InvalidArgumentError(
                "A loadcase with KG is required for stability calculations",
                param="loadcase_id",
            )
        angles = heel_angles(request.min_angle, request.max_angle, request.angle_increment)
        draft = self._resolve_draft(geometry, request)
        method = self.method_for(request.method)
        self._check_evaluable(method, angles)

        upright = self.hydrostatics.compute_at_draft(geometry, draft, loadcase)
        initial_gmt = upright.kmt - loadcase.kg
        points, warnings = self._evaluate(geometry, draft, upright, loadcase.kg, method, angles, cancel_token)

        if upright.volume <= 0:
            warnings.insert(0, f"Nothing is immersed at draft {draft:g} m")
        elif initial_gmt < 0:
            warnings.insert(0, f"Initial GMt is negative ({initial_gmt:.3f} m): vessel is unstable upright")

        max_gz, angle_at_max = find_max_gz(points)
        lo, hi = points[0].heel_angle, points[-1].heel_angle
        curve = StabilityCurve(
            method=method.method,
            draft=draft,
            kg=loadcase.kg,
            displacement=upright.displacement,
            initial_gmt=initial_gmt,
            points=points,
            max_gz=max_gz,
            angle_at_max_gz=angle_at_max,
            gz_at_30=interpolate_gz(points, 30.0) if lo <= 30.0 <= hi else None,
            gz_at_40=interpolate_gz(points, 40.0) if lo <= 40.0 <= hi else None,
            angle_of_vanishing_stability=angle_of_vanishing_stability(points),
            computation_time_ms=int((time.perf_counter() - start_time) * 1000),
            warnings=warnings,
        )
        logger.info(
            f"Computed GZ curve for '{geometry.name}' using {method.method.value}: "
            f"{len(points)} points, max GZ {max_gz:.3f} m at {angle_at_max:g}°"
        )
        return curve

    # =========================================================================
    # KN CURVE
    # =========================================================================

    def compute_kn_curve(
        self,
        geometry: HullGeometry,
        request: StabilityRequest,
        loadcase: Optional[Loadcase] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> KNCurve:
        """KN against heel at one draft; independent of KG."""
        start_time = time.perf_counter()
        angles = heel_angles(request.min_angle, request.max_angle, request.angle_increment)
        draft = self._resolve_draft(geometry, request)
        method = self.method_for(request.method)
        self._check_evaluable(method, angles)
        loadcase = loadcase or Loadcase()

        upright = self.hydrostatics.compute_at_draft(geometry, draft, loadcase)
        points, warnings = self._evaluate(geometry, draft, upright, 0.0, method, angles, cancel_token)

        logger.info(f"Computed KN curve for '{geometry.name}' using {method.method.value}: {len(points)} points")
        return KNCurve(
            method=method.method,
            draft=draft,
            displacement=upright.displacement,
            points=points,
            computation_time_ms=int((time.perf_counter() - start_time) * 1000),
            warnings=warnings,
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _evaluate(
        self,
        geometry: HullGeometry,
        draft: float,
        upright: HydroResult,
        kg: float,
        method: GZMethod,
        angles: List[float],
        cancel_token: Optional[CancellationToken],
    ):
        evaluator = method.evaluator(geometry, draft, upright, kg)
        points: List[StabilityPoint] = self.executor.map(
            evaluator, method.evaluable_angles(angles), cancel_token=cancel_token, operation="stability curve"
        )
        warnings = method.range_warnings(angles) + sorted(set(evaluator.warnings))
        return points, warnings

    @staticmethod
    def _check_evaluable(method: GZMethod, angles: List[float]) -> None:
        if not method.evaluable_angles(angles):
            raise InvalidArgumentError(
                f"{method.method.value} cannot evaluate any heel angle from {angles[0]:g}° to {angles[-1]:g}°",
                param="max_angle",
            )

    @staticmethod
    def _resolve_draft(geometry: HullGeometry, request: StabilityRequest) -> float:
        draft = request.draft if request.draft is not None else geometry.design_draft
        if draft is None:
            raise InvalidArgumentError(
                "No draft given and the vessel has no design draft",
                param="draft",
            )
        if not math.isfinite(draft) or draft <= 0:
            raise InvalidArgumentError(f"Draft must be positive, got {draft}", param="draft")
        return draft
