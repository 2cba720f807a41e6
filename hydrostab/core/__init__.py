"""
hydrostab core

Physical constants, the fixed-point numeric boundary, cooperative
cancellation and the deterministic grid executor shared by all calculators.
"""

from hydrostab.core.constants import (
    SEAWATER_DENSITY_KG_M3,
    FRESHWATER_DENSITY_KG_M3,
    GRAVITY_M_S2,
    DEFAULT_DECIMAL_PLACES,
)
from hydrostab.core.precision import to_fixed, round_mapping
from hydrostab.core.cancellation import CancellationToken, check_cancelled
from hydrostab.core.executor import GridExecutor

__all__ = [
    "SEAWATER_DENSITY_KG_M3",
    "FRESHWATER_DENSITY_KG_M3",
    "GRAVITY_M_S2",
    "DEFAULT_DECIMAL_PLACES",
    "to_fixed",
    "round_mapping",
    "CancellationToken",
    "check_cancelled",
    "GridExecutor",
]
