"""
hydrostab - Hydrostatic and stability computation engine

Computes displaced volume, centers of buoyancy, metacentric radii, form
coefficients, Bonjean and hydrostatic curves, and large-angle righting-arm
(GZ/KN) curves for hulls described by a station/waterline offsets table, and
checks GZ curves against the IMO intact stability criteria.
"""

__version__ = "1.0.0"

from hydrostab.service import HydrostaticsService

__all__ = [
    "HydrostaticsService",
    "__version__",
]
