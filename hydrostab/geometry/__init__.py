"""
Hull geometry: offsets tables, loadcases, providers, validation and templates.
"""

from hydrostab.geometry.models import (
    Station,
    Waterline,
    Offset,
    Loadcase,
    OffsetGrid,
    HullGeometry,
)
from hydrostab.geometry.providers import (
    GeometryProvider,
    LoadcaseProvider,
    InMemoryGeometryProvider,
    InMemoryLoadcaseProvider,
)
from hydrostab.geometry.validation import (
    GeometryValidator,
    ValidationIssue,
    ValidationReport,
)
from hydrostab.geometry.templates import (
    AnalyticalHydrostatics,
    rectangular_barge,
    triangular_hull,
    wigley_hull,
    barge_analytical,
    triangular_analytical,
    wigley_analytical,
    build_template,
)
from hydrostab.geometry.csv_import import parse_offsets_csv, offsets_to_csv

__all__ = [
    "Station",
    "Waterline",
    "Offset",
    "Loadcase",
    "OffsetGrid",
    "HullGeometry",
    "GeometryProvider",
    "LoadcaseProvider",
    "InMemoryGeometryProvider",
    "InMemoryLoadcaseProvider",
    "GeometryValidator",
    "ValidationIssue",
    "ValidationReport",
    "AnalyticalHydrostatics",
    "rectangular_barge",
    "triangular_hull",
    "wigley_hull",
    "barge_analytical",
    "triangular_analytical",
    "wigley_analytical",
    "build_template",
    "parse_offsets_csv",
    "offsets_to_csv",
]
