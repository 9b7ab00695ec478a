"""Constants used across the beltline engine.

Engineering thresholds use the EngineeringConstant dataclass for
traceability. Lookup tables (cleat spacing multipliers) are plain tuples.
Rule thresholds that a deployment may tune live in beltline.config and
default to the values here.
"""

from __future__ import annotations

from beltline.units import EngineeringConstant

# =============================================================================
# Geometry
# =============================================================================

# Smaller magnitudes are treated as exactly horizontal
HORIZONTAL_THRESHOLD = EngineeringConstant(0.01, "deg", "Sliderbed geometry model")

# Angles derived from TOB or rise inputs are clamped to this band
MAX_INCLINE = EngineeringConstant(
    45.0, "deg", "Sliderbed geometry model", limits=(-45.0, 45.0)
)

# Divisor floor for H / cos(theta) near vertical
MIN_COSINE = EngineeringConstant(0.01, "", "Numerical guard")

# Centerline differences below this are level
MIN_RISE = EngineeringConstant(0.001, "in", "Numerical guard")

DEFAULT_PULLEY_DIAMETER = EngineeringConstant(4.0, "in", "Standard drive/tail pulley")

# =============================================================================
# Frame height
# =============================================================================

DEFAULT_RETURN_ROLLER_DIAMETER = EngineeringConstant(
    2.0, "in", "Standard gravity return roller"
)

DEFAULT_FRAME_CLEARANCE = EngineeringConstant(0.5, "in", "Frame height design rule")

# Snub rollers required when frame < largest pulley + threshold
SNUB_ROLLER_CLEARANCE_THRESHOLD = EngineeringConstant(
    2.5, "in", "Frame height design rule"
)

MIN_FRAME_HEIGHT = EngineeringConstant(3.0, "in", "Frame height design rule")

DESIGN_REVIEW_FRAME_HEIGHT = EngineeringConstant(4.0, "in", "Frame height design rule")

GRAVITY_ROLLER_SPACING = EngineeringConstant(60.0, "in", "Return roller layout standard")

# =============================================================================
# Pulleys and cleats
# =============================================================================

# Assumed hot-welded cleat spacing when none is given
DEFAULT_CLEAT_SPACING = EngineeringConstant(12.0, "in", "Belt catalog")

MIN_PULLEY_FLOOR = EngineeringConstant(2.0, "in", "Belt catalog")

# Cleat-scaled belt minimums round up to this increment
MIN_PULLEY_ROUNDING = EngineeringConstant(0.25, "in", "Belt catalog")

CLEAT_MIN_PULLEY_ROUNDING = EngineeringConstant(0.5, "in", "Cleat catalog")

# (spacing_in, multiplier) breakpoints, ascending spacing
CLEAT_SPACING_MULTIPLIERS: tuple[tuple[float, float], ...] = (
    (4.0, 1.35),
    (6.0, 1.25),
    (8.0, 1.15),
    (12.0, 1.0),
)

CLEAT_CENTERS_BUCKETS: tuple[int, ...] = (4, 6, 8, 12)
