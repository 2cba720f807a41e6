"""
geometry/templates.py - Template hull forms with analytical references

Generators for hull forms whose hydrostatics are known in closed form:
rectangular barge, V-section (triangular) prism and the Wigley parabolic
hull. Used as reference vessels by the CLI, the API seed data and the
validation benchmarks.

Coordinates: x from the aft perpendicular, z up from the keel, half-breadth
y to starboard. Waterlines run above the design draft to the deck so that
heeled sections can be evaluated.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, List, Optional
import logging

from hydrostab.core.constants import SEAWATER_DENSITY_KG_M3
from hydrostab.errors import InvalidArgumentError
from hydrostab.geometry.models import HullGeometry

logger = logging.getLogger(__name__)


# =============================================================================
# ANALYTICAL REFERENCE
# =============================================================================

@dataclass(frozen=True)
class AnalyticalHydrostatics:
    """Closed-form hydrostatic properties at one draft."""
    volume: float             # m³
    kb: float                 # m
    lcb: float                # m from aft perpendicular
    awp: float                # m²
    it: float                 # m⁴, transverse waterplane inertia
    il: float                 # m⁴, longitudinal inertia about LCF
    bmt: float                # m
    bml: float                # m
    cb: float
    cp: float
    cm: float
    cwp: float
    lcf: float                # m from aft perpendicular
    tcb: float = 0.0

    def displacement(self, rho: float = SEAWATER_DENSITY_KG_M3) -> float:
        """Displacement mass in tonnes."""
        return self.volume * rho / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_dimensions(**dims: float) -> None:
    for name, value in dims.items():
        if value is None or value <= 0:
            raise InvalidArgumentError(f"{name} must be positive, got {value}", param=name)


def _waterline_heights(draft: float, depth: float, intervals_to_draft: int) -> List[float]:
    """Equal spacing up to the draft, same spacing continued to the deck."""
    spacing = draft / intervals_to_draft
    zs = [draft * j / intervals_to_draft for j in range(intervals_to_draft + 1)]
    j = intervals_to_draft + 1
    while j * spacing < depth - spacing * 1e-6:
        zs.append(j * spacing)
        j += 1
    if depth > zs[-1]:
        zs.append(depth)
    return zs


def _station_positions(length: float, num_stations: int) -> List[float]:
    return [length * i / (num_stations - 1) for i in range(num_stations)]


# =============================================================================
# RECTANGULAR BARGE
# =============================================================================

def rectangular_barge(
    length: float = 100.0,
    beam: float = 20.0,
    draft: float = 5.0,
    depth: Optional[float] = None,
    num_stations: int = 11,
    waterline_intervals: int = 5,
    name: str = "Rectangular barge",
) -> HullGeometry:
    """
    Box-shaped hull: constant half-breadth B/2 everywhere.

    Args:
        length: Length between perpendiculars (m)
        beam: Moulded beam (m)
        draft: Design draft (m)
        depth: Moulded depth (m), defaults to twice the draft
        num_stations: Number of equally spaced stations
        waterline_intervals: Waterline intervals between keel and design draft
    """
    depth = 2.0 * draft if depth is None else depth
    _check_dimensions(length=length, beam=beam, draft=draft, depth=depth)
    if num_stations < 2 or waterline_intervals < 1:
        raise InvalidArgumentError("Barge needs at least 2 stations and 1 waterline interval")

    xs = _station_positions(length, num_stations)
    zs = _waterline_heights(draft, depth, waterline_intervals)
    table = [[beam / 2.0 for _ in zs] for _ in xs]

    return HullGeometry.from_table(
        xs, zs, table,
        name=name, lpp=length, beam=beam, design_draft=draft, depth=depth,
    )


def barge_analytical(length: float, beam: float, draft: float) -> AnalyticalHydrostatics:
    """Exact hydrostatics of a rectangular barge at a draft."""
    _check_dimensions(length=length, beam=beam, draft=draft)
    volume = length * beam * draft
    it = length * beam ** 3 / 12.0
    il = beam * length ** 3 / 12.0
    return AnalyticalHydrostatics(
        volume=volume,
        kb=draft / 2.0,
        lcb=length / 2.0,
        awp=length * beam,
        it=it,
        il=il,
        bmt=it / volume,
        bml=il / volume,
        cb=1.0, cp=1.0, cm=1.0, cwp=1.0,
        lcf=length / 2.0,
    )


def barge_wetted_surface(length: float, beam: float, draft: float) -> float:
    """Bottom plus both sides; end bulkheads are not included."""
    return length * (beam + 2.0 * draft)


# =============================================================================
# TRIANGULAR (V-SECTION) PRISM
# =============================================================================

def triangular_hull(
    length: float = 60.0,
    beam: float = 12.0,
    depth: float = 8.0,
    design_draft: Optional[float] = None,
    num_stations: int = 7,
    num_waterlines: int = 9,
    name: str = "Triangular prism",
) -> HullGeometry:
    """
    Prismatic V-section hull: half-breadth grows linearly from zero at the keel
    to B/2 at the deck.
    """
    _check_dimensions(length=length, beam=beam, depth=depth)
    if num_stations < 2 or num_waterlines < 2:
        raise InvalidArgumentError("Triangular hull needs at least 2 stations and 2 waterlines")

    xs = _station_positions(length, num_stations)
    zs = [depth * j / (num_waterlines - 1) for j in range(num_waterlines)]
    table = [[(beam / 2.0) * z / depth for z in zs] for _ in xs]

    return HullGeometry.from_table(
        xs, zs, table,
        name=name, lpp=length, beam=beam,
        design_draft=design_draft if design_draft is not None else depth / 2.0,
        depth=depth,
    )


def triangular_analytical(length: float, beam: float, depth: float, draft: float) -> AnalyticalHydrostatics:
    """Exact hydrostatics of the V-section prism at a draft."""
    _check_dimensions(length=length, beam=beam, depth=depth, draft=draft)
    b_wl = beam * draft / depth  # waterline breadth
    section = b_wl * draft / 2.0
    volume = section * length
    it = length * b_wl ** 3 / 12.0
    il = b_wl * length ** 3 / 12.0
    return AnalyticalHydrostatics(
        volume=volume,
        kb=2.0 * draft / 3.0,
        lcb=length / 2.0,
        awp=length * b_wl,
        it=it,
        il=il,
        bmt=it / volume,
        bml=il / volume,
        # Coefficients are referred to the waterline breadth
        cb=0.5, cp=1.0, cm=0.5, cwp=1.0,
        lcf=length / 2.0,
    )


# =============================================================================
# WIGLEY HULL
# =============================================================================

def wigley_half_breadth(x: float, z: float, length: float, beam: float, draft: float) -> float:
    """
    Wigley parabolic hull ordinate.

    y = (B/2)(1 - ξ²)(1 - ζ²) with ξ = (x - L/2)/(L/2) and ζ = (T - z)/T,
    so the full half-breadth is at the design waterline and zero at the keel.
    Above the design waterline the sides are vertical.
    """
    xi = (x - length / 2.0) / (length / 2.0)
    zeta = max((draft - z) / draft, 0.0)
    return max(0.0, (beam / 2.0) * (1.0 - xi * xi) * (1.0 - zeta * zeta))


def wigley_hull(
    length: float = 100.0,
    beam: float = 10.0,
    draft: float = 6.25,
    depth: Optional[float] = None,
    num_stations: int = 21,
    waterline_intervals: int = 12,
    name: str = "Wigley hull",
) -> HullGeometry:
    """
    Wigley benchmark hull with vertical topsides up to the deck.

    Depth defaults to 1.5 times the draft. Stations and waterline intervals
    default to odd/even counts so that Simpson's rule applies directly.
    """
    depth = 1.5 * draft if depth is None else depth
    _check_dimensions(length=length, beam=beam, draft=draft, depth=depth)
    if num_stations < 3 or waterline_intervals < 2:
        raise InvalidArgumentError("Wigley hull needs at least 3 stations and 2 waterline intervals")

    xs = _station_positions(length, num_stations)
    zs = _waterline_heights(draft, depth, waterline_intervals)
    table = [[wigley_half_breadth(x, z, length, beam, draft) for z in zs] for x in xs]

    return HullGeometry.from_table(
        xs, zs, table,
        name=name, lpp=length, beam=beam, design_draft=draft, depth=depth,
    )


def wigley_analytical(length: float, beam: float, draft: float) -> AnalyticalHydrostatics:
    """Exact hydrostatics of the Wigley hull at its design draft."""
    _check_dimensions(length=length, beam=beam, draft=draft)
    volume = 4.0 / 9.0 * length * beam * draft
    it = 4.0 / 105.0 * beam ** 3 * length
    il = beam * length ** 3 / 30.0
    return AnalyticalHydrostatics(
        volume=volume,
        kb=5.0 * draft / 8.0,
        lcb=length / 2.0,
        awp=2.0 / 3.0 * length * beam,
        it=it,
        il=il,
        bmt=3.0 / 35.0 * beam ** 2 / draft,
        bml=3.0 * length ** 2 / (40.0 * draft),
        cb=4.0 / 9.0, cp=2.0 / 3.0, cm=2.0 / 3.0, cwp=2.0 / 3.0,
        lcf=length / 2.0,
    )


# =============================================================================
# CATALOGUE
# =============================================================================

TEMPLATES: Dict[str, Callable[..., HullGeometry]] = {
    "barge": rectangular_barge,
    "triangle": triangular_hull,
    "wigley": wigley_hull,
}


def build_template(kind: str, **params) -> HullGeometry:
    """Build a template hull by name."""
    try:
        factory = TEMPLATES[kind]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown template '{kind}'. Available: {', '.join(sorted(TEMPLATES))}",
            param="template",
        ) from None
    geometry = factory(**params)
    logger.debug(f"Built template {kind}: {len(geometry.stations)} stations, {len(geometry.waterlines)} waterlines")
    return geometry
