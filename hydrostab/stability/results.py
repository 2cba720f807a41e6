"""
hydrostab Stability Results

Result dataclasses for GZ/KN curves and intact stability criteria.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from hydrostab.errors import InvalidArgumentError


# =============================================================================
# METHOD SELECTION
# =============================================================================

class StabilityMethod(Enum):
    """Righting-arm calculation methods."""

    WALL_SIDED = "WallSided"
    FULL_IMMERSION = "FullImmersion"

    @classmethod
    def parse(cls, value: Union[str, "StabilityMethod"]) -> "StabilityMethod":
        """Accept the enum, its value or a snake/kebab-case alias, case-insensitively."""
        if isinstance(value, cls):
            return value
        key = str(value).replace("_", "").replace("-", "").replace(" ", "").lower()
        for method in cls:
            if method.value.lower() == key:
                return method
        raise InvalidArgumentError(
            f"Unknown stability method '{value}'. Available: {', '.join(m.value for m in cls)}",
            param="method",
        )


@dataclass
class StabilityRequest:
    """
    Parameters of a GZ/KN curve computation.

    Draft defaults to the vessel's design draft when omitted.
    """
    loadcase_id: Optional[str] = None
    min_angle: float = 0.0
    max_angle: float = 90.0
    angle_increment: float = 1.0
    method: StabilityMethod = StabilityMethod.WALL_SIDED
    draft: Optional[float] = None

    def __post_init__(self):
        self.method = StabilityMethod.parse(self.method)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loadcase_id": self.loadcase_id,
            "min_angle": self.min_angle,
            "max_angle": self.max_angle,
            "angle_increment": self.angle_increment,
            "method": self.method.value,
            "draft": self.draft,
        }


# =============================================================================
# GZ CURVE RESULTS
# =============================================================================

@dataclass
class StabilityPoint:
    """A single point on the righting-arm curve."""
    heel_angle: float  # degrees
    gz: float  # Righting arm (m)
    kn: float  # Righting arm about the keel (m)
    gm_at_angle: Optional[float] = None  # Not derived by either method

    def to_dict(self) -> Dict[str, Optional[float]]:
        return {
            "heel_angle": self.heel_angle,
            "gz": self.gz,
            "kn": self.kn,
            "gm_at_angle": self.gm_at_angle,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StabilityPoint":
        return cls(
            heel_angle=data.get("heel_angle", 0.0),
            gz=data.get("gz", 0.0),
            kn=data.get("kn", 0.0),
            gm_at_angle=data.get("gm_at_angle"),
        )


@dataclass
class StabilityCurve:
    """
    GZ curve for one loading condition.

    max_gz and angle_at_max_gz are the best sampled point of the curve.
    """
    method: StabilityMethod
    draft: float
    kg: float
    displacement: float  # same convention as HydroResult.displacement
    initial_gmt: float
    points: List[StabilityPoint] = field(default_factory=list)
    max_gz: float = 0.0
    angle_at_max_gz: float = 0.0

    # Characteristic values
    gz_at_30: Optional[float] = None
    gz_at_40: Optional[float] = None
    angle_of_vanishing_stability: Optional[float] = None

    # Metadata
    computation_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "draft": self.draft,
            "kg": self.kg,
            "displacement": self.displacement,
            "initial_gmt": self.initial_gmt,
            "points": [p.to_dict() for p in self.points],
            "max_gz": self.max_gz,
            "angle_at_max_gz": self.angle_at_max_gz,
            "gz_at_30": self.gz_at_30,
            "gz_at_40": self.gz_at_40,
            "angle_of_vanishing_stability": self.angle_of_vanishing_stability,
            "computation_time_ms": self.computation_time_ms,
            "warnings": list(self.warnings),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StabilityCurve":
        return cls(
            method=StabilityMethod.parse(data.get("method", StabilityMethod.WALL_SIDED.value)),
            draft=data.get("draft", 0.0),
            kg=data.get("kg", 0.0),
            displacement=data.get("displacement", 0.0),
            initial_gmt=data.get("initial_gmt", 0.0),
            points=[StabilityPoint.from_dict(p) for p in data.get("points", [])],
            max_gz=data.get("max_gz", 0.0),
            angle_at_max_gz=data.get("angle_at_max_gz", 0.0),
            gz_at_30=data.get("gz_at_30"),
            gz_at_40=data.get("gz_at_40"),
            angle_of_vanishing_stability=data.get("angle_of_vanishing_stability"),
            computation_time_ms=data.get("computation_time_ms", 0),
            warnings=data.get("warnings", []),
        )


@dataclass
class KNCurve:
    """Cross-curve values (KN against heel) at one draft."""
    method: StabilityMethod
    draft: float
    displacement: float
    points: List[StabilityPoint] = field(default_factory=list)
    computation_time_ms: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "draft": self.draft,
            "displacement": self.displacement,
            "points": [{"heel_angle": p.heel_angle, "kn": p.kn} for p in self.points],
            "computation_time_ms": self.computation_time_ms,
            "warnings": list(self.warnings),
        }


# =============================================================================
# CRITERIA RESULTS
# =============================================================================

@dataclass
class StabilityCriterion:
    """One regulatory check: actual value against required minimum."""
    name: str
    required_value: float
    actual_value: float
    unit: str
    passed: bool
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "required_value": self.required_value,
            "actual_value": self.actual_value,
            "unit": self.unit,
            "passed": self.passed,
            "notes": self.notes,
        }


@dataclass
class StabilityCriteriaResult:
    """Outcome of checking a GZ curve against an intact stability standard."""
    all_criteria_passed: bool
    criteria: List[StabilityCriterion] = field(default_factory=list)
    standard: str = ""
    summary: str = ""

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.criteria if c.passed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "all_criteria_passed": self.all_criteria_passed,
            "standard": self.standard,
            "summary": self.summary,
            "criteria": [c.to_dict() for c in self.criteria],
        }


# =============================================================================
# METHOD CATALOGUE
# =============================================================================

@dataclass(frozen=True)
class StabilityMethodInfo:
    """Description of an available stability method."""
    id: str
    name: str
    description: str
    max_recommended_angle: Optional[float]
    computation_speed: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "max_recommended_angle": self.max_recommended_angle,
            "computation_speed": self.computation_speed,
        }
