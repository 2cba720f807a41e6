"""
geometry/validation.py - Offsets table validation

Checks stations, waterlines and offsets before they are accepted as
hull geometry. Every problem found is reported, not only the first.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from collections import Counter
from enum import Enum
import logging

from hydrostab.geometry.models import HullGeometry, Offset, Station, Waterline

__all__ = [
    'ValidationSeverity',
    'ValidationIssue',
    'ValidationReport',
    'GeometryValidator',
    'MIN_STATIONS',
    'MIN_WATERLINES',
]

logger = logging.getLogger(__name__)

MIN_STATIONS = 3
MIN_WATERLINES = 3

# Missing/duplicate offset listings are truncated to this many cells
MAX_REPORTED_CELLS = 10


# =============================================================================
# ISSUES
# =============================================================================

class ValidationSeverity(Enum):
    """Severity levels for validation issues."""

    ERROR = "error"       # Geometry cannot be used
    WARNING = "warning"   # Usable, but suspicious


@dataclass
class ValidationIssue:
    """
    A single problem in an offsets table.

    Attributes:
        field: Which part of the table is affected (stations, waterlines, offsets)
        message: Human-readable description
        row: Station or list position, when applicable
        column: Waterline index, when applicable
    """

    field: str
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    row: Optional[int] = None
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "severity": self.severity.value,
            "row": self.row,
            "column": self.column,
        }


@dataclass
class ValidationReport:
    """Outcome of validating an offsets table."""

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not any(i.severity == ValidationSeverity.ERROR for i in self.issues)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def add_error(self, field_name: str, message: str, **kwargs) -> None:
        self.issues.append(ValidationIssue(field=field_name, message=message, **kwargs))

    def add_warning(self, field_name: str, message: str, **kwargs) -> None:
        self.issues.append(ValidationIssue(
            field=field_name, message=message, severity=ValidationSeverity.WARNING, **kwargs
        ))

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        self.issues.extend(other.issues)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }


# =============================================================================
# VALIDATOR
# =============================================================================

class GeometryValidator:
    """Validates the parts of an offsets table."""

    def __init__(self, min_stations: int = MIN_STATIONS, min_waterlines: int = MIN_WATERLINES):
        self.min_stations = min_stations
        self.min_waterlines = min_waterlines

    def validate_stations(self, stations: Sequence[Station]) -> ValidationReport:
        report = ValidationReport()
        if not stations:
            report.add_error("stations", f"At least {self.min_stations} stations are required")
            return report

        if len(stations) < self.min_stations:
            report.add_error(
                "stations",
                f"At least {self.min_stations} stations are required, found {len(stations)}",
            )

        for i in range(len(stations) - 1):
            if stations[i].x >= stations[i + 1].x:
                report.add_error(
                    "stations",
                    f"Station x values must be strictly increasing. Found {stations[i].x} >= {stations[i + 1].x}",
                    row=i + 1,
                )

        for i, station in enumerate(stations):
            if station.x < 0:
                report.add_error("stations", f"Station x values must be non-negative. Found {station.x}", row=i)

        duplicates = sorted(k for k, n in Counter(s.index for s in stations).items() if n > 1)
        if duplicates:
            report.add_error(
                "stations",
                f"Duplicate station indices found: {', '.join(str(d) for d in duplicates)}",
            )
        return report

    def validate_waterlines(self, waterlines: Sequence[Waterline]) -> ValidationReport:
        report = ValidationReport()
        if not waterlines:
            report.add_error("waterlines", f"At least {self.min_waterlines} waterlines are required")
            return report

        if len(waterlines) < self.min_waterlines:
            report.add_error(
                "waterlines",
                f"At least {self.min_waterlines} waterlines are required, found {len(waterlines)}",
            )

        for i in range(len(waterlines) - 1):
            if waterlines[i].z >= waterlines[i + 1].z:
                report.add_error(
                    "waterlines",
                    f"Waterline z values must be strictly increasing. Found {waterlines[i].z} >= {waterlines[i + 1].z}",
                    row=i + 1,
                )

        for i, waterline in enumerate(waterlines):
            if waterline.z < 0:
                report.add_error("waterlines", f"Waterline z values must be non-negative. Found {waterline.z}", row=i)

        duplicates = sorted(k for k, n in Counter(w.index for w in waterlines).items() if n > 1)
        if duplicates:
            report.add_error(
                "waterlines",
                f"Duplicate waterline indices found: {', '.join(str(d) for d in duplicates)}",
            )
        return report

    def validate_offsets(
        self,
        offsets: Sequence[Offset],
        station_indices: Sequence[int],
        waterline_indices: Sequence[int],
    ) -> ValidationReport:
        report = ValidationReport()
        if not offsets:
            report.add_error("offsets", "Offsets data is required")
            return report

        for offset in offsets:
            if offset.half_breadth < 0:
                report.add_error(
                    "offsets",
                    f"Half-breadth must be non-negative at station {offset.station_index}, "
                    f"waterline {offset.waterline_index}. Found {offset.half_breadth}",
                    row=offset.station_index,
                    column=offset.waterline_index,
                )

        cells = Counter((o.station_index, o.waterline_index) for o in offsets)

        missing = [
            (s, w) for s in station_indices for w in waterline_indices if (s, w) not in cells
        ]
        if missing:
            first_s, first_w = missing[0]
            report.add_error(
                "offsets",
                f"Missing offsets for {len(missing)} station/waterline combinations. "
                f"First missing: station {first_s}, waterline {first_w}",
            )

        duplicates = [cell for cell, n in cells.items() if n > 1][:MAX_REPORTED_CELLS]
        if duplicates:
            first_s, first_w = duplicates[0]
            report.add_error(
                "offsets",
                f"Duplicate offsets found for {len(duplicates)} locations. "
                f"First: station {first_s}, waterline {first_w}",
            )

        known_stations = set(station_indices)
        known_waterlines = set(waterline_indices)
        strays = [c for c in cells if c[0] not in known_stations or c[1] not in known_waterlines]
        if strays:
            report.add_error(
                "offsets",
                f"{len(strays)} offsets refer to unknown stations or waterlines. "
                f"First: station {strays[0][0]}, waterline {strays[0][1]}",
            )
        return report

    def validate(self, geometry: HullGeometry) -> ValidationReport:
        """Validate a complete geometry; stations and waterlines are checked in index order."""
        report = ValidationReport()
        report.merge(self.validate_stations(geometry.stations))
        report.merge(self.validate_waterlines(geometry.waterlines))
        report.merge(self.validate_offsets(
            geometry.offsets,
            [s.index for s in geometry.stations],
            [w.index for w in geometry.waterlines],
        ))

        if report.is_valid and geometry.design_draft is not None:
            top = geometry.waterlines[-1].z
            if geometry.design_draft > top:
                report.add_warning(
                    "waterlines",
                    f"Design draft {geometry.design_draft} is above the highest waterline {top}",
                )

        if not report.is_valid:
            logger.info(f"Geometry '{geometry.name}' failed validation with {len(report.errors)} errors")
        return report
