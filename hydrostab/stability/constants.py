"""
hydrostab Stability Constants

Intact stability criteria applied to GZ curves.

References:
- IMO Resolution A.749(18), Code on Intact Stability, Section 3.1.2
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


STANDARD_NAME = "IMO A.749(18)"


# =============================================================================
# IMO INTACT STABILITY CRITERIA (A.749(18) 3.1.2)
# =============================================================================

@dataclass(frozen=True)
class IMOIntactCriteria:
    """
    General intact stability criteria for all ships.

    Areas are under the GZ curve in metre-radians.
    """
    # Area under GZ curve criteria (meter-radians)
    area_0_30_min_m_rad: float = 0.055  # Area from 0° to 30°
    area_0_40_min_m_rad: float = 0.090  # Area from 0° to 40°
    area_30_40_min_m_rad: float = 0.030  # Area from 30° to 40°

    # GZ curve criteria
    gz_30_min_m: float = 0.20  # Minimum GZ at 30° heel (meters)
    angle_gz_max_min_deg: float = 25.0  # Minimum angle of maximum GZ (degrees)

    # Metacentric height
    gm_min_m: float = 0.15  # Minimum initial GMt (meters)

    def to_dict(self) -> Dict[str, float]:
        return {
            "area_0_30_min_m_rad": self.area_0_30_min_m_rad,
            "area_0_40_min_m_rad": self.area_0_40_min_m_rad,
            "area_30_40_min_m_rad": self.area_30_40_min_m_rad,
            "gz_30_min_m": self.gz_30_min_m,
            "angle_gz_max_min_deg": self.angle_gz_max_min_deg,
            "gm_min_m": self.gm_min_m,
        }


# Singleton instance
IMO_INTACT = IMOIntactCriteria()
