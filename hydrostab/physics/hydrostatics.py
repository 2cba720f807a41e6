"""
hydrostab Hydrostatics Calculator

Direct-integration hydrostatics from an offsets table.

Per station the half-breadth curve is integrated from the keel up to the
local draft, giving a sectional area and its vertical centroid (the Bonjean
relationship). Integrating sectional properties along the length gives
volume, LCB and KB; integrating the waterline half-breadths gives the
waterplane area, LCF and second moments.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import math

from hydrostab.core.cancellation import CancellationToken
from hydrostab.core.constants import GRAVITY_M_S2, KG_PER_TONNE, MAX_TRIM_DEG
from hydrostab.core.executor import GridExecutor
from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry, Loadcase, OffsetGrid
from hydrostab.physics.integration import ENGINE, IntegrationEngine
from hydrostab.physics.results import HydroResult

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DISPLACEMENT_CONVENTIONS = ("mass", "force")


# =============================================================================
# SECTION PROPERTIES
# =============================================================================

@dataclass(frozen=True)
class SectionProperties:
    """Immersed properties of one station up to a local draft."""
    area: float  # full-breadth sectional area (m²)
    vertical_moment: float  # full-breadth ∫ z·y dz (m³)
    waterline_half_breadth: float  # m
    half_girth: float  # m, centreline to waterline along the section

    @property
    def centroid_z(self) -> float:
        return self.vertical_moment / self.area if self.area > 0 else 0.0


DRY_SECTION = SectionProperties(0.0, 0.0, 0.0, 0.0)


def section_properties(
    grid: OffsetGrid,
    station: int,
    local_draft: float,
    engine: IntegrationEngine = ENGINE,
) -> SectionProperties:
    """Integrate one station's half-breadth curve up to a local draft."""
    if local_draft <= grid.z_min:
        return DRY_SECTION

    zs, ys = grid.immersed_profile(station, local_draft)
    if len(zs) < 2:
        return DRY_SECTION

    half_area = engine.integrate(zs, ys)
    half_moment = engine.first_moment(zs, ys)

    girth = math.fsum(
        [ys[0]] + [math.hypot(ys[k + 1] - ys[k], zs[k + 1] - zs[k]) for k in range(len(zs) - 1)]
    )

    return SectionProperties(
        area=2.0 * half_area,
        vertical_moment=2.0 * half_moment,
        waterline_half_breadth=ys[-1],
        half_girth=girth,
    )


# =============================================================================
# HYDROSTATICS CALCULATOR
# =============================================================================

class HydrostaticsCalculator:
    """
    Hydrostatics from offsets by direct numerical integration.

    Stateless apart from its configuration; safe to share across threads.
    """

    def __init__(
        self,
        engine: Optional[IntegrationEngine] = None,
        gravity: float = GRAVITY_M_S2,
        displacement_convention: str = "mass",
        executor: Optional[GridExecutor] = None,
    ):
        if displacement_convention not in DISPLACEMENT_CONVENTIONS:
            raise InvalidArgumentError(
                f"displacement_convention must be one of {DISPLACEMENT_CONVENTIONS}, got '{displacement_convention}'",
                param="displacement_convention",
            )
        self.engine = engine or ENGINE
        self.gravity = gravity
        self.displacement_convention = displacement_convention
        self.executor = executor or GridExecutor()

    # =========================================================================
    # SINGLE DRAFT
    # =========================================================================

    def compute_at_draft(
        self,
        geometry: HullGeometry,
        draft: float,
        loadcase: Optional[Loadcase] = None,
        trim_deg: float = 0.0,
    ) -> HydroResult:
        """
        Calculate hydrostatics at a draft.

        Args:
            geometry: Complete hull geometry
            draft: Draft at mid-length (m), >= 0
            loadcase: Density and KG; seawater without KG when omitted
            trim_deg: Trim angle, positive by the stern

        Returns:
            HydroResult; all zeros (not an error) when nothing is immersed

        Raises:
            IncompleteGeometryError: Geometry is not a full grid
            InvalidArgumentError: Negative or non-finite draft, excessive trim
        """
        self._check_draft(draft)
        if not math.isfinite(trim_deg) or abs(trim_deg) >= MAX_TRIM_DEG:
            raise InvalidArgumentError(
                f"Trim must be finite and below {MAX_TRIM_DEG}° in magnitude, got {trim_deg}",
                param="trim",
            )
        loadcase = loadcase or Loadcase()
        grid = geometry.grid
        xs = list(grid.xs)

        local_drafts = self.station_drafts(grid, draft, trim_deg)
        sections = [
            section_properties(grid, i, local_drafts[i], self.engine)
            for i in range(grid.station_count)
        ]

        areas = [s.area for s in sections]
        volume = self.engine.integrate(xs, areas)
        freeboard = geometry.depth - draft if geometry.depth is not None else None

        if volume <= 0.0:
            logger.debug(f"Nothing immersed at draft {draft:.4f} m")
            return HydroResult(draft=draft, trim_deg=trim_deg, freeboard=freeboard)

        # Centres of buoyancy
        lcb = self.engine.first_moment(xs, areas) / volume
        kb = self.engine.integrate(xs, [s.vertical_moment for s in sections]) / volume

        # Waterplane
        y_wl = [s.waterline_half_breadth for s in sections]
        awp = 2.0 * self.engine.integrate(xs, y_wl)
        lcf = 2.0 * self.engine.first_moment(xs, y_wl) / awp if awp > 0 else lcb
        iwp = self.engine.integrate(xs, [2.0 / 3.0 * y ** 3 for y in y_wl])
        il = max(2.0 * self.engine.second_moment(xs, y_wl) - awp * lcf * lcf, 0.0)

        bmt = iwp / volume
        bml = il / volume
        kmt = kb + bmt
        kml = kb + bml
        gmt = kmt - loadcase.kg if loadcase.has_kg else None
        gml = kml - loadcase.kg if loadcase.has_kg else None

        # Form coefficients against the waterline rectangle
        lpp = geometry.length_between_perpendiculars
        breadth = 2.0 * max(y_wl)
        mid = self.midship_station(grid)
        midship_area = sections[mid].area
        cb = volume / (lpp * breadth * draft) if lpp > 0 and breadth > 0 and draft > 0 else 0.0
        cm = midship_area / (breadth * draft) if breadth > 0 and draft > 0 else 0.0
        cp = volume / (midship_area * lpp) if midship_area > 0 and lpp > 0 else 0.0
        cwp = awp / (lpp * breadth) if lpp > 0 and breadth > 0 else 0.0

        # Displacement and particulars
        displacement_t = volume * loadcase.rho / KG_PER_TONNE
        displacement = volume * loadcase.rho
        if self.displacement_convention == "force":
            displacement *= self.gravity
        tpc = loadcase.rho * awp / 1.0e5
        mct = displacement_t * bml / (100.0 * lpp) if lpp > 0 else 0.0
        wetted_surface = 2.0 * self.engine.integrate(xs, [s.half_girth for s in sections])

        logger.debug(
            f"Draft {draft:.4f} m trim {trim_deg:.3f}°: V={volume:.3f} m³, "
            f"KB={kb:.4f} m, LCB={lcb:.4f} m, BMt={bmt:.4f} m"
        )

        return HydroResult(
            draft=draft,
            trim_deg=trim_deg,
            volume=volume,
            displacement=displacement,
            displacement_t=displacement_t,
            kb=kb,
            lcb=lcb,
            tcb=0.0,
            awp=awp,
            lcf=lcf,
            iwp=iwp,
            il=il,
            waterline_breadth=breadth,
            bmt=bmt,
            bml=bml,
            kmt=kmt,
            kml=kml,
            gmt=gmt,
            gml=gml,
            cb=cb,
            cp=cp,
            cm=cm,
            cwp=cwp,
            midship_area=midship_area,
            tpc=tpc,
            mct=mct,
            wetted_surface=wetted_surface,
            freeboard=freeboard,
        )

    # =========================================================================
    # TABLE
    # =========================================================================

    def compute_table(
        self,
        geometry: HullGeometry,
        drafts: Sequence[float],
        loadcase: Optional[Loadcase] = None,
        trim_deg: float = 0.0,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[HydroResult]:
        """Hydrostatics at each draft, in the order given."""
        drafts = list(drafts)
        if not drafts:
            raise InvalidArgumentError("At least one draft is required", param="drafts")
        for d in drafts:
            self._check_draft(d)
        geometry.require_complete()

        results = self.executor.map(
            lambda d: self.compute_at_draft(geometry, d, loadcase, trim_deg),
            drafts,
            cancel_token=cancel_token,
            operation="hydrostatic table",
        )
        logger.info(f"Computed hydrostatic table for '{geometry.name}': {len(results)} drafts")
        return results

    # =========================================================================
    # HELPERS
    # =========================================================================

    def sectional_area(self, geometry: HullGeometry, station: int, draft: float) -> float:
        """Full-breadth sectional area of one station (by position in the grid) at a draft."""
        self._check_draft(draft)
        return section_properties(geometry.grid, station, draft, self.engine).area

    @staticmethod
    def station_drafts(grid: OffsetGrid, draft: float, trim_deg: float) -> List[float]:
        """Local draft at each station: T_i = T + (x_mid - x_i)·tan(trim)."""
        if trim_deg == 0.0:
            return [draft] * grid.station_count
        x_mid = 0.5 * (grid.xs[0] + grid.xs[-1])
        slope = math.tan(math.radians(trim_deg))
        return [draft + (x_mid - x) * slope for x in grid.xs]

    @staticmethod
    def midship_station(grid: OffsetGrid) -> int:
        """Index of the station nearest mid-length (aftmost on a tie)."""
        x_mid = 0.5 * (grid.xs[0] + grid.xs[-1])
        return min(range(grid.station_count), key=lambda i: (abs(grid.xs[i] - x_mid), i))

    @staticmethod
    def _check_draft(draft: float) -> None:
        if draft is None or not math.isfinite(draft) or draft < 0:
            raise InvalidArgumentError(f"Draft must be a finite value >= 0, got {draft}", param="draft")
