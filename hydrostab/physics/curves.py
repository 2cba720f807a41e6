"""
physics/curves.py - Hydrostatic curves

Drives the hydrostatics calculator across a linear draft grid and extracts
named properties as curves, plus Bonjean curves (sectional area against
draft) for every station.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Union
import logging

from hydrostab.core.cancellation import CancellationToken, check_cancelled
from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry, Loadcase
from hydrostab.physics.hydrostatics import HydrostaticsCalculator, section_properties
from hydrostab.physics.results import CurveData, CurvePoint, CurveType, HydroResult

logger = logging.getLogger(__name__)


# Axis labels per curve type
CURVE_LABELS: Dict[CurveType, str] = {
    CurveType.DISPLACEMENT: "Displacement",
    CurveType.VOLUME: "Volume (m³)",
    CurveType.KB: "KB (m)",
    CurveType.LCB: "LCB (m)",
    CurveType.LCF: "LCF (m)",
    CurveType.AWP: "Waterplane Area (m²)",
    CurveType.IWP: "Transverse Waterplane Inertia (m⁴)",
    CurveType.BMT: "BMt (m)",
    CurveType.BML: "BMl (m)",
    CurveType.KMT: "KMt (m)",
    CurveType.GMT: "GMt (m)",
    CurveType.GML: "GMl (m)",
    CurveType.CB: "Cb",
    CurveType.CP: "Cp",
    CurveType.CM: "Cm",
    CurveType.CWP: "Cwp",
    CurveType.TPC: "TPC (t/cm)",
    CurveType.MCT: "MCT (t·m/cm)",
    CurveType.WETTED_SURFACE: "Wetted Surface (m²)",
    CurveType.BONJEAN: "Sectional Area (m²)",
}


def draft_grid(min_draft: float, max_draft: float, points: int) -> List[float]:
    """Linear grid of `points` drafts from min to max inclusive."""
    if points < 2:
        raise InvalidArgumentError(f"At least 2 curve points are required, got {points}", param="points")
    if min_draft is None or max_draft is None or min_draft >= max_draft:
        raise InvalidArgumentError(
            f"min_draft must be less than max_draft (got {min_draft} >= {max_draft})",
            param="min_draft",
        )
    if min_draft < 0:
        raise InvalidArgumentError(f"min_draft must be >= 0, got {min_draft}", param="min_draft")
    step = (max_draft - min_draft) / (points - 1)
    grid = [min_draft + i * step for i in range(points - 1)]
    grid.append(max_draft)
    return grid


class CurvesGenerator:
    """Builds hydrostatic and Bonjean curves for one geometry at a time."""

    def __init__(self, calculator: Optional[HydrostaticsCalculator] = None):
        self.calculator = calculator or HydrostaticsCalculator()

    # =========================================================================
    # PROPERTY CURVES
    # =========================================================================

    def generate_curve(
        self,
        geometry: HullGeometry,
        curve_type: Union[str, CurveType],
        min_draft: float,
        max_draft: float,
        points: int,
        loadcase: Optional[Loadcase] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CurveData:
        """
        One named property against draft.

        Raises:
            InvalidArgumentError: Bad draft range or point count, Bonjean
                requested as a single curve, or GM curve without KG
        """
        curve_type = CurveType.parse(curve_type)
        return self.generate_curves(
            geometry, [curve_type], min_draft, max_draft, points, loadcase, cancel_token
        )[curve_type]

    def generate_curves(
        self,
        geometry: HullGeometry,
        curve_types: Iterable[Union[str, CurveType]],
        min_draft: float,
        max_draft: float,
        points: int,
        loadcase: Optional[Loadcase] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Dict[CurveType, CurveData]:
        """Several curves from one pass over the draft grid."""
        types = list(dict.fromkeys(CurveType.parse(t) for t in curve_types))
        if not types:
            raise InvalidArgumentError("At least one curve type is required", param="curve_types")
        if CurveType.BONJEAN in types:
            raise InvalidArgumentError(
                "Bonjean curves are per station; use generate_bonjean_curves",
                param="curve_type",
            )
        if any(t.requires_kg for t in types) and (loadcase is None or not loadcase.has_kg):
            raise InvalidArgumentError(
                "A loadcase with KG is required for GM curves",
                param="loadcase_id",
            )

        drafts = draft_grid(min_draft, max_draft, points)
        results = self.calculator.compute_table(geometry, drafts, loadcase, cancel_token=cancel_token)

        curves = {t: self._extract(t, results) for t in types}
        logger.info(
            f"Generated {len(curves)} curves for '{geometry.name}' over {len(drafts)} drafts "
            f"({min_draft:.3f}-{max_draft:.3f} m)"
        )
        return curves

    def _extract(self, curve_type: CurveType, results: List[HydroResult]) -> CurveData:
        attr = curve_type.result_field
        points = []
        for r in results:
            value = getattr(r, attr)
            # GM is undefined where nothing is immersed
            if value is None:
                continue
            points.append(CurvePoint(x=r.draft, y=value))

        y_label = CURVE_LABELS[curve_type]
        if curve_type is CurveType.DISPLACEMENT:
            unit = "kg" if self.calculator.displacement_convention == "mass" else "N"
            y_label = f"{y_label} ({unit})"
        return CurveData(curve_type=curve_type, points=tuple(points), y_label=y_label)

    # =========================================================================
    # BONJEAN CURVES
    # =========================================================================

    def generate_bonjean_curves(
        self,
        geometry: HullGeometry,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[CurveData]:
        """
        Sectional area against draft for every station.

        Sampled at each tabulated waterline, so every curve starts at zero
        area on the keel waterline.
        """
        grid = geometry.grid
        engine = self.calculator.engine
        curves: List[CurveData] = []
        for i, station in enumerate(geometry.stations):
            check_cancelled(cancel_token, "bonjean curves")
            points = tuple(
                CurvePoint(x=z, y=section_properties(grid, i, z, engine).area)
                for z in grid.zs
            )
            curves.append(CurveData(
                curve_type=CurveType.BONJEAN,
                points=points,
                y_label=CURVE_LABELS[CurveType.BONJEAN],
                station_index=station.index,
                station_x=station.x,
            ))
        logger.info(f"Generated {len(curves)} Bonjean curves for '{geometry.name}'")
        return curves
