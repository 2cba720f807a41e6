"""
Stability: righting-arm curves and intact stability criteria.
"""

from hydrostab.stability.results import (
    StabilityMethod,
    StabilityRequest,
    StabilityPoint,
    StabilityCurve,
    KNCurve,
    StabilityCriterion,
    StabilityCriteriaResult,
    StabilityMethodInfo,
)
from hydrostab.stability.methods import (
    GZMethod,
    WallSidedMethod,
    FullImmersionMethod,
    get_method,
    available_methods,
)
from hydrostab.stability.calculator import StabilityCalculator, heel_angles
from hydrostab.stability.criteria import (
    StabilityCriteriaChecker,
    calculate_area_under_curve,
    find_max_gz,
    interpolate_gz,
    angle_of_vanishing_stability,
)
from hydrostab.stability.constants import IMOIntactCriteria, IMO_INTACT, STANDARD_NAME

__all__ = [
    "StabilityMethod",
    "StabilityRequest",
    "StabilityPoint",
    "StabilityCurve",
    "KNCurve",
    "StabilityCriterion",
    "StabilityCriteriaResult",
    "StabilityMethodInfo",
    "GZMethod",
    "WallSidedMethod",
    "FullImmersionMethod",
    "get_method",
    "available_methods",
    "StabilityCalculator",
    "heel_angles",
    "StabilityCriteriaChecker",
    "calculate_area_under_curve",
    "find_max_gz",
    "interpolate_gz",
    "angle_of_vanishing_stability",
    "IMOIntactCriteria",
    "IMO_INTACT",
    "STANDARD_NAME",
]
