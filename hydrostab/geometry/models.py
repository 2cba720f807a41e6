"""
geometry/models.py - Hull geometry model

Typed representation of a hull offsets table: stations (longitudinal
positions), waterlines (heights above keel) and half-breadth offsets at
every station/waterline intersection. Also the loadcase that accompanies a
geometry into stability calculations.

All types are immutable. Geometry is owned by the persistence collaborator;
the core only reads it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import bisect

from hydrostab.core.constants import SEAWATER_DENSITY_KG_M3, WATERLINE_SNAP_FRACTION
from hydrostab.errors import IncompleteGeometryError, InvalidArgumentError


# =============================================================================
# GRID ELEMENTS
# =============================================================================

@dataclass(frozen=True)
class Station:
    """Longitudinal slice of the hull."""
    index: int
    x: float  # Position from aft reference (m)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "x": self.x}


@dataclass(frozen=True)
class Waterline:
    """Horizontal level above the keel."""
    index: int
    z: float  # Height above keel (m)

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "z": self.z}


@dataclass(frozen=True)
class Offset:
    """Half-breadth at a station/waterline intersection."""
    station_index: int
    waterline_index: int
    half_breadth: float  # m, >= 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "station_index": self.station_index,
            "waterline_index": self.waterline_index,
            "half_breadth": self.half_breadth,
        }


# =============================================================================
# LOADCASE
# =============================================================================

@dataclass(frozen=True)
class Loadcase:
    """
    Loading condition for hydrostatic and stability computations.

    Density defaults to standard seawater. KG is mandatory for any
    GM-dependent output (GMt/GMl, GM curves, GZ curves).
    """
    rho: float = SEAWATER_DENSITY_KG_M3  # Fluid density (kg/m³)
    kg: Optional[float] = None  # Vertical center of gravity above keel (m)
    lcg: Optional[float] = None  # Longitudinal center of gravity (m)
    tcg: Optional[float] = None  # Transverse center of gravity (m)
    name: str = ""
    id: Optional[str] = None

    def __post_init__(self):
        if self.rho is None:
            object.__setattr__(self, "rho", SEAWATER_DENSITY_KG_M3)
        if self.rho <= 0:
            raise InvalidArgumentError(f"Fluid density must be positive, got {self.rho}", param="rho")

    @property
    def has_kg(self) -> bool:
        return self.kg is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rho": self.rho,
            "kg": self.kg,
            "lcg": self.lcg,
            "tcg": self.tcg,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Loadcase":
        return cls(
            rho=data.get("rho", SEAWATER_DENSITY_KG_M3),
            kg=data.get("kg"),
            lcg=data.get("lcg"),
            tcg=data.get("tcg"),
            name=data.get("name", ""),
            id=data.get("id"),
        )


# =============================================================================
# OFFSET GRID
# =============================================================================

@dataclass(frozen=True)
class OffsetGrid:
    """
    Dense rectangular half-breadth table.

    half_breadths[i][j] is the half-breadth at station i and waterline j,
    with stations ordered by x and waterlines ordered by z.
    """
    xs: Tuple[float, ...]
    zs: Tuple[float, ...]
    half_breadths: Tuple[Tuple[float, ...], ...]

    @property
    def station_count(self) -> int:
        return len(self.xs)

    @property
    def waterline_count(self) -> int:
        return len(self.zs)

    @property
    def z_min(self) -> float:
        return self.zs[0]

    @property
    def z_max(self) -> float:
        return self.zs[-1]

    def section(self, station: int) -> Tuple[float, ...]:
        """Half-breadths of one station, keel to top waterline."""
        return self.half_breadths[station]

    def clamp_draft(self, draft: float) -> float:
        """Clamp a draft to the tabulated waterline range."""
        return min(max(draft, self.z_min), self.z_max)

    def half_breadth_at(self, station: int, z: float) -> float:
        """Half-breadth at height z, linearly interpolated between waterlines and clamped."""
        zs = self.zs
        ys = self.half_breadths[station]
        if z <= zs[0]:
            return ys[0]
        if z >= zs[-1]:
            return ys[-1]
        j = bisect.bisect_right(zs, z)
        z0, z1 = zs[j - 1], zs[j]
        if z == z0:
            return ys[j - 1]
        t = (z - z0) / (z1 - z0)
        return ys[j - 1] + t * (ys[j] - ys[j - 1])

    def immersed_profile(self, station: int, draft: float) -> Tuple[List[float], List[float]]:
        """
        Half-breadth curve of one station from the keel up to a draft.

        Returns (z, y) lists covering [z_min, draft] with the draft clamped
        to the tabulated range. A draft within a tiny fraction of a
        waterline spacing snaps to that waterline, so no degenerate
        interval is produced. At or below the lowest waterline the profile
        is the single keel point.
        """
        zs = self.zs
        ys = self.half_breadths[station]
        draft = self.clamp_draft(draft)

        j = bisect.bisect_right(zs, draft)
        z_out = list(zs[:j])
        y_out = list(ys[:j])

        if j < len(zs):
            spacing = zs[j] - zs[j - 1]
            snap = spacing * WATERLINE_SNAP_FRACTION
            gap_below = draft - zs[j - 1]
            if zs[j] - draft <= snap:
                z_out.append(zs[j])
                y_out.append(ys[j])
            elif gap_below > snap:
                z_out.append(draft)
                y_out.append(self.half_breadth_at(station, draft))

        return z_out, y_out

    def section_polygon(self, station: int) -> List[Tuple[float, float]]:
        """
        Closed full-breadth section outline in (y, z) ship coordinates.

        Runs up the starboard side, across the top waterline (deck) and
        down the port side; the keel closes back to the start. The outline
        is counter-clockwise with y to starboard and z up.
        """
        ys = self.half_breadths[station]
        starboard = [(y, z) for y, z in zip(ys, self.zs)]
        port = [(-y, z) for y, z in reversed(starboard)]
        return starboard + port


# =============================================================================
# HULL GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class HullGeometry:
    """
    Complete hull description for one vessel.

    Stations and waterlines are sorted by index on construction. Main
    particulars are optional; when absent they are derived from the grid
    (Lpp from the station span, beam from the widest offset).
    """
    stations: Tuple[Station, ...] = ()
    waterlines: Tuple[Waterline, ...] = ()
    offsets: Tuple[Offset, ...] = ()
    name: str = ""
    lpp: Optional[float] = None
    beam: Optional[float] = None
    design_draft: Optional[float] = None
    depth: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "stations", tuple(sorted(self.stations, key=lambda s: s.index)))
        object.__setattr__(self, "waterlines", tuple(sorted(self.waterlines, key=lambda w: w.index)))
        object.__setattr__(self, "offsets", tuple(self.offsets))

    @classmethod
    def from_table(
        cls,
        xs: Sequence[float],
        zs: Sequence[float],
        half_breadths: Sequence[Sequence[float]],
        **particulars,
    ) -> "HullGeometry":
        """Build geometry from a dense table, half_breadths[i][j] for station i, waterline j."""
        stations = [Station(index=i, x=float(x)) for i, x in enumerate(xs)]
        waterlines = [Waterline(index=j, z=float(z)) for j, z in enumerate(zs)]
        offsets = [
            Offset(station_index=i, waterline_index=j, half_breadth=float(half_breadths[i][j]))
            for i in range(len(xs))
            for j in range(len(zs))
        ]
        return cls(stations=tuple(stations), waterlines=tuple(waterlines), offsets=tuple(offsets), **particulars)

    # -------------------------------------------------------------------------
    # Completeness
    # -------------------------------------------------------------------------

    def completeness_problems(self) -> List[str]:
        """Problems that prevent the geometry from forming a usable grid."""
        problems: List[str] = []
        if not self.stations:
            problems.append("no stations")
        if not self.waterlines:
            problems.append("no waterlines")
        if not self.offsets:
            problems.append("no offsets")
        if problems:
            return problems

        if len({s.index for s in self.stations}) != len(self.stations):
            problems.append("duplicate station indices")
        if len({w.index for w in self.waterlines}) != len(self.waterlines):
            problems.append("duplicate waterline indices")
        if len(self.stations) < 2:
            problems.append("at least 2 stations are required")
        if len(self.waterlines) < 2:
            problems.append("at least 2 waterlines are required")

        for a, b in zip(self.stations, self.stations[1:]):
            if b.x <= a.x:
                problems.append(f"station x must increase with index (station {b.index})")
                break
        for a, b in zip(self.waterlines, self.waterlines[1:]):
            if b.z <= a.z:
                problems.append(f"waterline z must increase with index (waterline {b.index})")
                break
        if self.waterlines and self.waterlines[0].z < 0:
            problems.append("waterline z must be >= 0")

        station_ids = {s.index for s in self.stations}
        waterline_ids = {w.index for w in self.waterlines}
        seen = set()
        for o in self.offsets:
            key = (o.station_index, o.waterline_index)
            if o.station_index not in station_ids or o.waterline_index not in waterline_ids:
                problems.append(f"offset {key} refers to an unknown station or waterline")
            elif key in seen:
                problems.append(f"duplicate offset {key}")
            if o.half_breadth < 0:
                problems.append(f"negative half-breadth at {key}")
            seen.add(key)

        missing = len(station_ids) * len(waterline_ids) - len(seen & {
            (s, w) for s in station_ids for w in waterline_ids
        })
        if missing > 0:
            problems.append(f"{missing} station/waterline cells have no offset")
        return problems

    @property
    def is_complete(self) -> bool:
        return not self.completeness_problems()

    def require_complete(self) -> "HullGeometry":
        """Return self, or raise IncompleteGeometryError listing the problems."""
        problems = self.completeness_problems()
        if problems:
            raise IncompleteGeometryError(problems[0], problems=problems, vessel=self.name)
        return self

    # -------------------------------------------------------------------------
    # Derived grid and particulars
    # -------------------------------------------------------------------------

    @cached_property
    def grid(self) -> OffsetGrid:
        """Dense offset table; raises IncompleteGeometryError when the grid is not full."""
        self.require_complete()
        lookup = {(o.station_index, o.waterline_index): o.half_breadth for o in self.offsets}
        rows = tuple(
            tuple(lookup[(s.index, w.index)] for w in self.waterlines)
            for s in self.stations
        )
        return OffsetGrid(
            xs=tuple(s.x for s in self.stations),
            zs=tuple(w.z for w in self.waterlines),
            half_breadths=rows,
        )

    @property
    def length_between_perpendiculars(self) -> float:
        if self.lpp is not None:
            return self.lpp
        grid = self.grid
        return grid.xs[-1] - grid.xs[0]

    @property
    def max_beam(self) -> float:
        if self.beam is not None:
            return self.beam
        return 2.0 * max((max(row) for row in self.grid.half_breadths), default=0.0)

    @property
    def max_depth(self) -> float:
        if self.depth is not None:
            return self.depth
        return self.grid.z_max

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "lpp": self.lpp,
            "beam": self.beam,
            "design_draft": self.design_draft,
            "depth": self.depth,
            "stations": [s.to_dict() for s in self.stations],
            "waterlines": [w.to_dict() for w in self.waterlines],
            "offsets": [o.to_dict() for o in self.offsets],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HullGeometry":
        return cls(
            stations=tuple(Station(int(s["index"]), float(s["x"])) for s in data.get("stations", [])),
            waterlines=tuple(Waterline(int(w["index"]), float(w["z"])) for w in data.get("waterlines", [])),
            offsets=tuple(
                Offset(int(o["station_index"]), int(o["waterline_index"]), float(o["half_breadth"]))
                for o in data.get("offsets", [])
            ),
            name=data.get("name", ""),
            lpp=data.get("lpp"),
            beam=data.get("beam"),
            design_draft=data.get("design_draft"),
            depth=data.get("depth"),
        )


def stations_from_positions(xs: Iterable[float]) -> Tuple[Station, ...]:
    """Index a sequence of longitudinal positions as stations."""
    return tuple(Station(index=i, x=float(x)) for i, x in enumerate(xs))


def waterlines_from_heights(zs: Iterable[float]) -> Tuple[Waterline, ...]:
    """Index a sequence of heights as waterlines."""
    return tuple(Waterline(index=j, z=float(z)) for j, z in enumerate(zs))
