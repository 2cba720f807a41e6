"""
service.py - Hydrostatics service

Identifier-based entry point used by the API and CLI. Fetches geometry and
loadcases through the providers, runs the calculators and rounds every
result to the configured fixed-point precision on the way out.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Union
import logging

from hydrostab.bootstrap.config import ComputeConfig
from hydrostab.core.cancellation import CancellationToken
from hydrostab.core.executor import GridExecutor
from hydrostab.core.precision import round_mapping
from hydrostab.errors import IncompleteGeometryError, InvalidArgumentError, NotFoundError
from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.geometry.providers import GeometryProvider, LoadcaseProvider
from hydrostab.geometry.validation import GeometryValidator, ValidationReport
from hydrostab.physics.curves import CurvesGenerator
from hydrostab.physics.hydrostatics import HydrostaticsCalculator
from hydrostab.physics.results import CurveData, CurvePoint, CurveType, HydroResult, TrimSolution
from hydrostab.physics.trim import TrimSolver
from hydrostab.stability.calculator import StabilityCalculator
from hydrostab.stability.criteria import StabilityCriteriaChecker
from hydrostab.stability.methods import FullImmersionMethod, available_methods
from hydrostab.stability.results import (
    KNCurve,
    StabilityCriteriaResult,
    StabilityCriterion,
    StabilityCurve,
    StabilityMethod,
    StabilityMethodInfo,
    StabilityPoint,
    StabilityRequest,
)

logger = logging.getLogger(__name__)


class HydrostaticsService:
    """
    Hydrostatic and stability operations by vessel and loadcase id.

    Calculations are pure; the service holds only its collaborators and
    configuration, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        geometry_provider: GeometryProvider,
        loadcase_provider: LoadcaseProvider,
        config: Optional[ComputeConfig] = None,
    ):
        self.geometry_provider = geometry_provider
        self.loadcase_provider = loadcase_provider
        self.config = config or ComputeConfig()

        executor = GridExecutor(self.config.max_workers)
        self.hydrostatics = HydrostaticsCalculator(
            gravity=self.config.gravity,
            displacement_convention=self.config.displacement_convention,
            executor=executor,
        )
        self.curves = CurvesGenerator(self.hydrostatics)
        self.stability = StabilityCalculator(
            self.hydrostatics,
            executor,
            methods={
                StabilityMethod.FULL_IMMERSION: FullImmersionMethod(
                    engine=self.hydrostatics.engine,
                    tolerance=self.config.full_immersion_tolerance,
                    max_iterations=self.config.full_immersion_max_iterations,
                ),
            },
        )
        self.criteria = StabilityCriteriaChecker(engine=self.hydrostatics.engine)
        self.trim = TrimSolver(self.hydrostatics)
        self.validator = GeometryValidator()

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get_geometry(self, vessel_id: str) -> HullGeometry:
        """Complete geometry for a vessel."""
        return self.geometry_provider.get_geometry(vessel_id).require_complete()

    def get_loadcase(self, loadcase_id: Optional[str]) -> Loadcase:
        """The loadcase, or the default seawater condition when no id is given."""
        if loadcase_id is None:
            return Loadcase(rho=self.config.default_rho)
        return self.loadcase_provider.get_loadcase(loadcase_id)

    def _require_loadcase(self, loadcase_id: Optional[str], purpose: str) -> Loadcase:
        if loadcase_id is None:
            raise InvalidArgumentError(f"Loadcase id is required to compute {purpose}", param="loadcase_id")
        loadcase = self.get_loadcase(loadcase_id)
        if not loadcase.has_kg:
            raise InvalidArgumentError(
                f"Loadcase {loadcase_id} must define KG to compute {purpose}",
                param="loadcase_id",
            )
        return loadcase

    # =========================================================================
    # HYDROSTATICS
    # =========================================================================

    def compute_at_draft(
        self,
        vessel_id: str,
        draft: float,
        loadcase_id: Optional[str] = None,
        trim_deg: float = 0.0,
    ) -> HydroResult:
        geometry = self.get_geometry(vessel_id)
        loadcase = self.get_loadcase(loadcase_id)
        result = self.hydrostatics.compute_at_draft(geometry, draft, loadcase, trim_deg)
        return self._round_hydro(result)

    def compute_table(
        self,
        vessel_id: str,
        drafts: Sequence[float],
        loadcase_id: Optional[str] = None,
        trim_deg: float = 0.0,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[HydroResult]:
        geometry = self.get_geometry(vessel_id)
        loadcase = self.get_loadcase(loadcase_id)
        results = self.hydrostatics.compute_table(geometry, drafts, loadcase, trim_deg, cancel_token)
        return [self._round_hydro(r) for r in results]

    # =========================================================================
    # CURVES
    # =========================================================================

    def generate_curve(
        self,
        vessel_id: str,
        curve_type: Union[str, CurveType],
        min_draft: float,
        max_draft: float,
        points: Optional[int] = None,
        loadcase_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CurveData:
        curve_type = CurveType.parse(curve_type)
        return self.generate_curves(
            vessel_id, [curve_type], min_draft, max_draft, points, loadcase_id, cancel_token
        )[curve_type]

    def generate_curves(
        self,
        vessel_id: str,
        curve_types: Iterable[Union[str, CurveType]],
        min_draft: float,
        max_draft: float,
        points: Optional[int] = None,
        loadcase_id: Optional[str] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Dict[CurveType, CurveData]:
        types = [CurveType.parse(t) for t in curve_types]
        if any(t.requires_kg for t in types):
            loadcase = self._require_loadcase(loadcase_id, "GM curves")
        else:
            loadcase = self.get_loadcase(loadcase_id)
        geometry = self.get_geometry(vessel_id)
        curves = self.curves.generate_curves(
            geometry,
            types,
            min_draft,
            max_draft,
            points if points is not None else self.config.default_curve_points,
            loadcase,
            cancel_token,
        )
        return {t: self._round_curve(c) for t, c in curves.items()}

    def generate_bonjean_curves(
        self,
        vessel_id: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[CurveData]:
        geometry = self.get_geometry(vessel_id)
        return [self._round_curve(c) for c in self.curves.generate_bonjean_curves(geometry, cancel_token)]

    def try_generate_bonjean_curves(self, vessel_id: str) -> Optional[List[CurveData]]:
        """Bonjean curves, or None when the vessel has no usable geometry."""
        try:
            return self.generate_bonjean_curves(vessel_id)
        except (NotFoundError, IncompleteGeometryError) as e:
            logger.warning(f"Bonjean curves unavailable for vessel {vessel_id}: {e.message}")
            return None

    # =========================================================================
    # STABILITY
    # =========================================================================

    def compute_gz_curve(
        self,
        vessel_id: str,
        request: StabilityRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> StabilityCurve:
        loadcase = self._require_loadcase(request.loadcase_id, "a GZ curve")
        geometry = self.get_geometry(vessel_id)
        curve = self.stability.compute_gz_curve(geometry, loadcase, request, cancel_token)
        return StabilityCurve.from_dict(round_mapping(curve.to_dict(), self.config.decimal_places))

    def compute_kn_curve(
        self,
        vessel_id: str,
        request: StabilityRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> KNCurve:
        geometry = self.get_geometry(vessel_id)
        loadcase = self.get_loadcase(request.loadcase_id)
        curve = self.stability.compute_kn_curve(geometry, request, loadcase, cancel_token)
        places = self.config.decimal_places
        rounded = round_mapping(curve.to_dict(), places)
        return KNCurve(
            method=curve.method,
            draft=rounded["draft"],
            displacement=rounded["displacement"],
            points=[
                StabilityPoint(heel_angle=p["heel_angle"], gz=p["kn"], kn=p["kn"])
                for p in rounded["points"]
            ],
            computation_time_ms=curve.computation_time_ms,
            warnings=list(curve.warnings),
        )

    def check_criteria(self, curve: StabilityCurve) -> StabilityCriteriaResult:
        places = self.config.decimal_places
        result = self.criteria.check_criteria(curve, places)
        return StabilityCriteriaResult(
            all_criteria_passed=result.all_criteria_passed,
            criteria=[
                StabilityCriterion(**round_mapping(c.to_dict(), places))
                for c in result.criteria
            ],
            standard=result.standard,
            summary=result.summary,
        )

    def available_methods(self) -> List[StabilityMethodInfo]:
        return available_methods()

    # =========================================================================
    # TRIM AND VALIDATION
    # =========================================================================

    def solve_trim(
        self,
        vessel_id: str,
        target_displacement_t: float,
        loadcase_id: Optional[str] = None,
        initial_draft: Optional[float] = None,
        max_iterations: int = 20,
    ) -> TrimSolution:
        geometry = self.get_geometry(vessel_id)
        loadcase = self.get_loadcase(loadcase_id)
        solution = self.trim.solve_for_displacement(
            geometry, target_displacement_t, loadcase, initial_draft, max_iterations
        )
        return TrimSolution(**round_mapping(solution.to_dict(), self.config.decimal_places))

    def is_displacement_achievable(self, vessel_id: str, target_displacement_t: float) -> bool:
        try:
            geometry = self.get_geometry(vessel_id)
        except (NotFoundError, IncompleteGeometryError):
            return False
        return self.trim.is_displacement_achievable(geometry, target_displacement_t, self.get_loadcase(None))

    def validate_geometry(self, vessel_id: str) -> ValidationReport:
        """Full validation report for a stored geometry (does not require completeness)."""
        return self.validator.validate(self.geometry_provider.get_geometry(vessel_id))

    # =========================================================================
    # ROUNDING
    # =========================================================================

    def _round_hydro(self, result: HydroResult) -> HydroResult:
        return HydroResult.from_dict(round_mapping(result.to_dict(), self.config.decimal_places))

    def _round_curve(self, curve: CurveData) -> CurveData:
        places = self.config.decimal_places
        rounded = round_mapping({"points": [p.to_dict() for p in curve.points]}, places)
        return CurveData(
            curve_type=curve.curve_type,
            points=tuple(CurvePoint(x=p["x"], y=p["y"]) for p in rounded["points"]),
            x_label=curve.x_label,
            y_label=curve.y_label,
            station_index=curve.station_index,
            station_x=curve.station_x,
        )
