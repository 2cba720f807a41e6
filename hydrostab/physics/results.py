"""
physics/results.py - Hydrostatic result types

Immutable value objects returned by the hydrostatic calculator, curves
generator and trim solver. Values are unrounded; the service rounds at
the boundary.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from hydrostab.errors import InvalidArgumentError


# =============================================================================
# HYDRO RESULT
# =============================================================================

@dataclass(frozen=True)
class HydroResult:
    """
    Hydrostatic properties at one draft and trim.

    Distances are in metres from the keel (vertical) or from the aft
    perpendicular reference (longitudinal). GM values are None unless the
    loadcase supplies KG; freeboard is None when the depth is unknown.
    """
    # Condition
    draft: float
    trim_deg: float = 0.0

    # Volume and displacement
    volume: float = 0.0  # m³
    displacement: float = 0.0  # kg (mass convention) or N (force convention)
    displacement_t: float = 0.0  # tonnes

    # Centres of buoyancy
    kb: float = 0.0
    lcb: float = 0.0
    tcb: float = 0.0

    # Waterplane
    awp: float = 0.0  # m²
    lcf: float = 0.0
    iwp: float = 0.0  # m⁴, transverse second moment about centreline
    il: float = 0.0  # m⁴, longitudinal second moment about LCF
    waterline_breadth: float = 0.0

    # Metacentre
    bmt: float = 0.0
    bml: float = 0.0
    kmt: float = 0.0
    kml: float = 0.0
    gmt: Optional[float] = None
    gml: Optional[float] = None

    # Form coefficients
    cb: float = 0.0
    cp: float = 0.0
    cm: float = 0.0
    cwp: float = 0.0
    midship_area: float = 0.0

    # Ship's particulars at this draft
    tpc: float = 0.0  # t/cm
    mct: float = 0.0  # t·m/cm
    wetted_surface: float = 0.0  # m²
    freeboard: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HydroResult":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


# =============================================================================
# CURVES
# =============================================================================

class CurveType(Enum):
    """Named hydrostatic curves over draft."""

    DISPLACEMENT = "displacement"
    VOLUME = "volume"
    KB = "kb"
    LCB = "lcb"
    LCF = "lcf"
    AWP = "awp"
    IWP = "iwp"
    BMT = "bmt"
    BML = "bml"
    KMT = "kmt"
    GMT = "gmt"
    GML = "gml"
    CB = "cb"
    CP = "cp"
    CM = "cm"
    CWP = "cwp"
    TPC = "tpc"
    MCT = "mct"
    WETTED_SURFACE = "wetted_surface"
    BONJEAN = "bonjean"

    @property
    def requires_kg(self) -> bool:
        return self in (CurveType.GMT, CurveType.GML)

    @property
    def result_field(self) -> Optional[str]:
        """HydroResult attribute plotted by this curve; Bonjean has none."""
        if self is CurveType.BONJEAN:
            return None
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "CurveType"]) -> "CurveType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown curve type '{value}'. Available: {', '.join(t.value for t in cls)}",
                param="curve_type",
            ) from None


@dataclass(frozen=True)
class CurvePoint:
    """One (x, y) sample on a curve."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class CurveData:
    """
    Ordered samples of one curve.

    Hydrostatic curves have x = draft. Bonjean curves have x = draft and
    y = full sectional area, and carry the station they belong to.
    """
    curve_type: CurveType
    points: Tuple[CurvePoint, ...]
    x_label: str = "Draft (m)"
    y_label: str = ""
    station_index: Optional[int] = None
    station_x: Optional[float] = None

    @property
    def xs(self) -> List[float]:
        return [p.x for p in self.points]

    @property
    def ys(self) -> List[float]:
        return [p.y for p in self.points]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.curve_type.value,
            "x_label": self.x_label,
            "y_label": self.y_label,
            "points": [p.to_dict() for p in self.points],
        }
        if self.station_index is not None:
            data["station_index"] = self.station_index
            data["station_x"] = self.station_x
        return data


# =============================================================================
# TRIM
# =============================================================================

@dataclass(frozen=True)
class TrimSolution:
    """Equilibrium floating condition for a target displacement."""
    target_displacement_t: float
    mean_draft: float
    draft_ap: float
    draft_fp: float
    trim_m: float  # positive by the stern
    trim_deg: float
    lcf: float
    mct: float
    displacement_t: float
    converged: bool
    iterations: int
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
