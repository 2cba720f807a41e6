"""
hydrostab Physical Constants

Constants used throughout the hydrostatic and stability calculations.
"""

# ==================== Physical Constants ====================

# Water properties
SEAWATER_DENSITY_KG_M3 = 1025.0  # kg/m³ at 15°C, 35 ppt salinity
FRESHWATER_DENSITY_KG_M3 = 1000.0  # kg/m³ at 15°C

# Gravitational acceleration
GRAVITY_M_S2 = 9.81  # m/s²

# Unit conversions - Mass
KG_PER_TONNE = 1000.0

# ==================== Numerical Settings ====================

# Fixed-point precision applied at the service boundary
DEFAULT_DECIMAL_PLACES = 6

# Evenly spaced samples, relative to the first interval
UNIFORM_SPACING_FRACTION = 1e-6

# Draft snapping tolerance, relative to the waterline spacing
WATERLINE_SNAP_FRACTION = 1e-6

# Full-immersion waterline search
FULL_IMMERSION_VOLUME_TOLERANCE = 1e-9  # relative to target volume
FULL_IMMERSION_MAX_ITERATIONS = 200

# ==================== Stability Ranges ====================

MAX_HEEL_ANGLE_DEG = 180.0
WALL_SIDED_VALID_DEG = 20.0  # Recommended upper limit for wall-sided formula
WALL_SIDED_LIMIT_DEG = 90.0  # tan φ is unbounded here

# ==================== Hydrostatic Ranges ====================

MAX_TRIM_DEG = 45.0  # |trim| must stay below this
