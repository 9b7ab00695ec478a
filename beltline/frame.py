"""Frame height derivation.

The frame must clear the largest pulley, the cleats on both belt runs and,
for gravity-return designs, the return roller:

    required  = largest_pulley + 2 * cleat_height + return_roller
    reference = required + clearance

Low Profile frames drop the return roller (snub rollers take the belt
return near the pulleys). Custom frames take the entered height as the
reference; the required envelope is still reported so the UI can show how
far below it the custom value sits.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from beltline.constants import (
    DEFAULT_FRAME_CLEARANCE,
    DEFAULT_RETURN_ROLLER_DIAMETER,
    DESIGN_REVIEW_FRAME_HEIGHT,
    GRAVITY_ROLLER_SPACING,
    SNUB_ROLLER_CLEARANCE_THRESHOLD,
)
from beltline.geometry import pulley_diameters
from beltline.inputs import ConfigurationRecord, FrameHeightMode
from beltline.logging import get_logger

log = get_logger(__name__)

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


@dataclass(frozen=True)
class FrameHeightBreakdown:
    """Frame height components and totals (inches)."""

    mode: FrameHeightMode | str
    largest_pulley_in: float
    cleat_height_in: float
    cleat_adder_in: float
    return_roller_in: float
    clearance_in: float
    required_total_in: float
    reference_total_in: float
    formula: str


@dataclass(frozen=True)
class FrameCostFlags:
    low_profile: bool
    custom_frame: bool
    snub_rollers: bool
    design_review: bool


def effective_cleat_height(
    cleats_enabled: Optional[bool],
    cleat_height_in: Optional[float],
    cleat_size: Optional[str],
) -> float:
    """Cleat height that counts toward the frame envelope.

    Zero unless cleats are explicitly enabled. An explicit height wins;
    otherwise the leading number of the catalog size ("1.5in", "2") is used.
    """
    if cleats_enabled is not True:
        return 0.0
    if cleat_height_in is not None and cleat_height_in > 0:
        return float(cleat_height_in)
    if cleat_size:
        match = _LEADING_NUMBER.match(cleat_size)
        if match:
            return float(match.group(1))
    return 0.0


def _formula(largest, cleat_adder, return_roller, clearance, required, reference, mode):
    parts = [f'Largest pulley {largest:.2f}"', f'Cleats 2x = {cleat_adder:.2f}"']
    if mode == FrameHeightMode.LOW_PROFILE:
        parts.append("Return roller 0.00\" (snubs)")
    else:
        parts.append(f'Return roller {return_roller:.2f}"')
    text = " + ".join(parts) + f' = Required {required:.2f}"'
    if mode == FrameHeightMode.CUSTOM:
        return text + f'; Reference (custom) {reference:.2f}"'
    return text + f'; + clearance {clearance:.2f}" = Reference {reference:.2f}"'


def calculate_frame_height(
    drive_od_in: float,
    tail_od_in: float,
    cleat_height_in: float = 0.0,
    return_roller_in: float = DEFAULT_RETURN_ROLLER_DIAMETER.value,
    mode: FrameHeightMode | str | None = FrameHeightMode.STANDARD,
    custom_height_in: Optional[float] = None,
    clearance_in: float = DEFAULT_FRAME_CLEARANCE.value,
) -> FrameHeightBreakdown:
    """Required and reference frame heights with their components.

    Args:
        drive_od_in: Drive pulley finished outer diameter
        tail_od_in: Tail pulley finished outer diameter
        cleat_height_in: Effective cleat height (0 when cleats are off)
        return_roller_in: Gravity return roller diameter
        mode: Standard, Low Profile or Custom (None means Standard)
        custom_height_in: Entered frame height for Custom mode
        clearance_in: Clearance added on top of the required envelope

    Returns:
        FrameHeightBreakdown. Low Profile combined with cleats is computed
        as Standard; callers are expected to reconcile that combination away.
    """
    mode = mode or FrameHeightMode.STANDARD
    if mode == FrameHeightMode.LOW_PROFILE and cleat_height_in > 0:
        log.warning("Low Profile frame requested with cleats; computing as Standard")
        mode = FrameHeightMode.STANDARD

    largest = max(drive_od_in, tail_od_in)
    cleat_adder = 2.0 * cleat_height_in
    roller = 0.0 if mode == FrameHeightMode.LOW_PROFILE else return_roller_in
    required = largest + cleat_adder + roller
    reference = required + clearance_in

    if mode == FrameHeightMode.CUSTOM and custom_height_in is not None:
        reference = float(custom_height_in)

    breakdown = FrameHeightBreakdown(
        mode=mode,
        largest_pulley_in=largest,
        cleat_height_in=cleat_height_in,
        cleat_adder_in=cleat_adder,
        return_roller_in=roller,
        clearance_in=clearance_in,
        required_total_in=required,
        reference_total_in=reference,
        formula=_formula(largest, cleat_adder, roller, clearance_in, required, reference, mode),
    )
    log.debug("Frame height: %s", breakdown.formula)
    return breakdown


def requires_snub_rollers(
    frame_height_in: float, drive_od_in: float, tail_od_in: float
) -> bool:
    largest = max(drive_od_in, tail_od_in)
    return frame_height_in < largest + SNUB_ROLLER_CLEARANCE_THRESHOLD.value


def gravity_roller_quantity(
    length_cc_in: float,
    snubs_required: bool,
    spacing_in: float = GRAVITY_ROLLER_SPACING.value,
) -> int:
    """Return rollers along the conveyor; snubs replace the two end positions."""
    if length_cc_in <= 0:
        return 0
    positions = math.floor(length_cc_in / spacing_in) + 1
    if snubs_required:
        return max(positions - 2, 0)
    return max(positions, 2)


def snub_roller_quantity(snubs_required: bool) -> int:
    return 2 if snubs_required else 0


def frame_cost_flags(
    mode: FrameHeightMode | str | None,
    frame_height_in: float,
    snubs_required: bool,
) -> FrameCostFlags:
    mode = mode or FrameHeightMode.STANDARD
    return FrameCostFlags(
        low_profile=mode == FrameHeightMode.LOW_PROFILE,
        custom_frame=mode == FrameHeightMode.CUSTOM,
        snub_rollers=snubs_required,
        design_review=frame_height_in < DESIGN_REVIEW_FRAME_HEIGHT.value,
    )


def frame_height_for_record(record: ConfigurationRecord) -> FrameHeightBreakdown:
    """Frame breakdown from record fields (pulley diameters stand in for ODs)."""
    drive, tail = pulley_diameters(record)
    clearance = record.frame_clearance_in
    if clearance is None:
        clearance = DEFAULT_FRAME_CLEARANCE.value
    return calculate_frame_height(
        drive,
        tail,
        effective_cleat_height(record.cleats_enabled, record.cleat_height_in, record.cleat_size),
        DEFAULT_RETURN_ROLLER_DIAMETER.value,
        record.frame_height_mode,
        record.custom_frame_height_in,
        clearance,
    )
