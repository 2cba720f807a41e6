"""
hydrostab Righting Arm Methods

Strategies for computing GZ and KN at a heel angle:

- WallSided: closed-form GZ = sin φ (GM + ½ BM tan² φ), exact while the
  waterplane stays wall-sided, fast. Angles from 90° on are skipped.
- FullImmersion: re-integrates the immersed part of every section under an
  inclined waterline that preserves the upright displaced volume. Valid to
  any angle, including deck-edge immersion and capsize.

Both treat heel to starboard as positive and keep the upright trim.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import math

from hydrostab.core.constants import (
    FULL_IMMERSION_MAX_ITERATIONS,
    FULL_IMMERSION_VOLUME_TOLERANCE,
    MAX_HEEL_ANGLE_DEG,
    WALL_SIDED_LIMIT_DEG,
    WALL_SIDED_VALID_DEG,
)
from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry
from hydrostab.physics.integration import ENGINE, IntegrationEngine
from hydrostab.physics.results import HydroResult
from hydrostab.stability.results import StabilityMethod, StabilityMethodInfo, StabilityPoint
from hydrostab.stability.sections import (
    Point,
    area_and_centroid,
    clip_below_waterline,
    immersion_depth,
)

logger = logging.getLogger(__name__)


# =============================================================================
# BASE
# =============================================================================

class HeelEvaluator(ABC):
    """Evaluates one loading condition at successive heel angles."""

    def __init__(self, kg: float):
        self.kg = kg
        self.warnings: List[str] = []

    @abstractmethod
    def kn(self, heel_deg: float) -> float:
        """Righting arm about the keel (m)."""

    def __call__(self, heel_deg: float) -> StabilityPoint:
        kn = self.kn(heel_deg)
        gz = kn - self.kg * math.sin(math.radians(heel_deg))
        return StabilityPoint(heel_angle=heel_deg, gz=gz, kn=kn)


class GZMethod(ABC):
    """A righting-arm calculation strategy."""

    method: StabilityMethod
    info: StabilityMethodInfo

    @abstractmethod
    def evaluator(self, geometry: HullGeometry, draft: float, upright: HydroResult, kg: float) -> HeelEvaluator:
        """Prepare per-condition state for evaluating heel angles."""

    def evaluable_angles(self, angles: Sequence[float]) -> List[float]:
        """The requested angles this method is defined at."""
        return list(angles)

    def range_warnings(self, angles: Sequence[float]) -> List[str]:
        """Warnings about the requested angle range."""
        return []


# =============================================================================
# WALL-SIDED
# =============================================================================

class _WallSidedEvaluator(HeelEvaluator):

    def __init__(self, gm: float, bm: float, kg: float):
        super().__init__(kg)
        self.gm = gm
        self.bm = bm

    def kn(self, heel_deg: float) -> float:
        if abs(heel_deg) >= WALL_SIDED_LIMIT_DEG:
            raise InvalidArgumentError(
                f"Wall-sided formula is undefined at {heel_deg:g}° heel",
                param="max_angle",
            )
        phi = math.radians(heel_deg)
        tan_phi = math.tan(phi)
        gz = math.sin(phi) * (self.gm + 0.5 * self.bm * tan_phi * tan_phi)
        return gz + self.kg * math.sin(phi)


class WallSidedMethod(GZMethod):
    """GZ = sin φ (GMt + ½ BMt tan² φ)."""

    method = StabilityMethod.WALL_SIDED
    info = StabilityMethodInfo(
        id=StabilityMethod.WALL_SIDED.value,
        name="Wall-Sided Formula",
        description=(
            "Analytical approximation assuming vertical sides through the waterline. "
            "Exact for box sections until deck-edge immersion or bilge emergence."
        ),
        max_recommended_angle=WALL_SIDED_VALID_DEG,
        computation_speed="Fast",
    )

    def evaluator(self, geometry: HullGeometry, draft: float, upright: HydroResult, kg: float) -> HeelEvaluator:
        return _WallSidedEvaluator(gm=upright.kmt - kg, bm=upright.bmt, kg=kg)

    def evaluable_angles(self, angles: Sequence[float]) -> List[float]:
        return [a for a in angles if abs(a) < WALL_SIDED_LIMIT_DEG]

    def range_warnings(self, angles: Sequence[float]) -> List[str]:
        warnings = []
        beyond = [a for a in angles if WALL_SIDED_VALID_DEG < abs(a) < WALL_SIDED_LIMIT_DEG]
        if beyond:
            warnings.append(
                f"Wall-sided formula is approximate beyond {WALL_SIDED_VALID_DEG:g}°; "
                f"{len(beyond)} angles exceed it (use FullImmersion for large angles)"
            )
        omitted = [a for a in angles if abs(a) >= WALL_SIDED_LIMIT_DEG]
        if omitted:
            warnings.append(
                f"Wall-sided formula is undefined from {WALL_SIDED_LIMIT_DEG:g}° heel; "
                f"{len(omitted)} angles omitted (use FullImmersion for large angles)"
            )
        return warnings


# =============================================================================
# FULL IMMERSION
# =============================================================================

class _FullImmersionEvaluator(HeelEvaluator):

    def __init__(
        self,
        xs: Sequence[float],
        polygons: Sequence[Sequence[Point]],
        target_volume: float,
        kg: float,
        engine: IntegrationEngine,
        tolerance: float,
        max_iterations: int,
    ):
        super().__init__(kg)
        self.xs = list(xs)
        self.polygons = polygons
        self.target_volume = target_volume
        self.engine = engine
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    def _slices(self, sin_phi: float, cos_phi: float, c: float) -> List[Tuple[float, float, float]]:
        return [
            area_and_centroid(clip_below_waterline(poly, sin_phi, cos_phi, c))
            for poly in self.polygons
        ]

    def _volume(self, slices: List[Tuple[float, float, float]]) -> float:
        return self.engine.integrate(self.xs, [s[0] for s in slices])

    def kn(self, heel_deg: float) -> float:
        if self.target_volume <= 0:
            return 0.0

        phi = math.radians(heel_deg)
        sin_phi, cos_phi = math.sin(phi), math.cos(phi)

        depths = [immersion_depth(p, sin_phi, cos_phi) for poly in self.polygons for p in poly]
        lo, hi = min(depths), max(depths)

        slices = self._slices(sin_phi, cos_phi, hi)
        volume = self._volume(slices)
        converged = abs(volume - self.target_volume) <= self.tolerance * self.target_volume
        iterations = 0
        while not converged and iterations < self.max_iterations:
            iterations += 1
            c = 0.5 * (lo + hi)
            slices = self._slices(sin_phi, cos_phi, c)
            volume = self._volume(slices)
            if abs(volume - self.target_volume) <= self.tolerance * self.target_volume:
                converged = True
            elif volume < self.target_volume:
                lo = c
            else:
                hi = c

        if not converged:
            logger.warning(
                f"Waterline search at {heel_deg:g}° stopped after {iterations} iterations "
                f"(volume {volume:.6g} vs {self.target_volume:.6g})"
            )
            self.warnings.append(f"Equilibrium waterline not fully converged at {heel_deg:g}°")

        if volume <= 0:
            return 0.0
        y_b = self.engine.integrate(self.xs, [a * cy for a, cy, _ in slices]) / volume
        z_b = self.engine.integrate(self.xs, [a * cz for a, _, cz in slices]) / volume
        return y_b * cos_phi + z_b * sin_phi


class FullImmersionMethod(GZMethod):
    """Direct integration of the heeled immersed volume at every angle."""

    method = StabilityMethod.FULL_IMMERSION
    info = StabilityMethodInfo(
        id=StabilityMethod.FULL_IMMERSION.value,
        name="Full Immersion",
        description=(
            "Numerical integration of heeled sections with the waterline found by "
            "constant-displacement search. Valid to large angles including deck-edge immersion."
        ),
        max_recommended_angle=MAX_HEEL_ANGLE_DEG,
        computation_speed="Moderate",
    )

    def __init__(
        self,
        engine: Optional[IntegrationEngine] = None,
        tolerance: float = FULL_IMMERSION_VOLUME_TOLERANCE,
        max_iterations: int = FULL_IMMERSION_MAX_ITERATIONS,
    ):
        self.engine = engine or ENGINE
        self.tolerance = tolerance
        self.max_iterations = max_iterations

    def evaluator(self, geometry: HullGeometry, draft: float, upright: HydroResult, kg: float) -> HeelEvaluator:
        grid = geometry.grid
        polygons = [grid.section_polygon(i) for i in range(grid.station_count)]

        # Reference volume from the same polygon integration, so GZ(0) = 0
        upright_areas = [
            area_and_centroid(clip_below_waterline(poly, 0.0, 1.0, draft))[0]
            for poly in polygons
        ]
        target = self.engine.integrate(list(grid.xs), upright_areas)

        evaluator = _FullImmersionEvaluator(
            xs=grid.xs,
            polygons=polygons,
            target_volume=target,
            kg=kg,
            engine=self.engine,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
        )
        if draft > grid.z_max:
            evaluator.warnings.append(
                f"Draft {draft:g} m is above the highest waterline {grid.z_max:g} m; hull treated as closed at the top"
            )
        return evaluator


# =============================================================================
# REGISTRY
# =============================================================================

_METHODS: Dict[StabilityMethod, GZMethod] = {
    StabilityMethod.WALL_SIDED: WallSidedMethod(),
    StabilityMethod.FULL_IMMERSION: FullImmersionMethod(),
}


def get_method(method: StabilityMethod) -> GZMethod:
    """Default strategy instance for a method."""
    return _METHODS[StabilityMethod.parse(method)]


def available_methods() -> List[StabilityMethodInfo]:
    """Catalogue of supported stability methods."""
    return [m.info for m in _METHODS.values()]
