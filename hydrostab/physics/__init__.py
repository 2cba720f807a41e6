"""
Hydrostatics: numerical integration, hydrostatic properties, curves and trim.
"""

from hydrostab.physics.integration import IntegrationEngine, ENGINE
from hydrostab.physics.results import (
    HydroResult,
    CurveType,
    CurvePoint,
    CurveData,
    TrimSolution,
)
from hydrostab.physics.hydrostatics import HydrostaticsCalculator, SectionProperties, section_properties
from hydrostab.physics.curves import CurvesGenerator, draft_grid
from hydrostab.physics.trim import TrimSolver

__all__ = [
    "IntegrationEngine",
    "ENGINE",
    "HydroResult",
    "CurveType",
    "CurvePoint",
    "CurveData",
    "TrimSolution",
    "HydrostaticsCalculator",
    "SectionProperties",
    "section_properties",
    "CurvesGenerator",
    "draft_grid",
    "TrimSolver",
]
