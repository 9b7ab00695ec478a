"""
Geometry normalization: one canonical geometry from any input mode.

A conveyor's incline can be entered four equivalent ways. Each mode has its
own primary fields; everything else is derived so that, for a valid result,

    length_cc = horizontal_run / cos(theta)
    rise      = length_cc * sin(theta)

hold (with the near-vertical divisor guard). Angles smaller than
HORIZONTAL_THRESHOLD are snapped to exactly horizontal so trig noise never
leaks into rise or run.

Modes:
- L_ANGLE: axis length + incline
- H_ANGLE: horizontal run + incline
- H_TOB:   horizontal run + tail/drive top-of-belt heights
- H_RISE:  horizontal run + rise
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from beltline.constants import (
    DEFAULT_PULLEY_DIAMETER,
    HORIZONTAL_THRESHOLD,
    MAX_INCLINE,
    MIN_COSINE,
    MIN_RISE,
)
from beltline.inputs import ConfigurationRecord, GeometryMode
from beltline.logging import get_logger

log = get_logger(__name__)

ERR_LENGTH = "Conveyor length must be greater than 0"
ERR_HORIZONTAL = "Horizontal run must be greater than 0"
ERR_TOB = "H_TOB mode requires both tail and drive TOB values"


@dataclass(frozen=True)
class DerivedGeometry:
    """Canonical geometry. Numeric fields are advisory when ``is_valid`` is False."""

    mode: GeometryMode | str
    length_cc_in: float
    horizontal_run_in: float
    incline_deg: float
    rise_in: float
    drive_pulley_dia_in: float
    tail_pulley_dia_in: float
    tail_cl_in: Optional[float] = None
    drive_cl_in: Optional[float] = None
    is_valid: bool = True
    error: Optional[str] = None
    # Incline before the +/- MAX_INCLINE clamp (TOB and rise modes)
    raw_incline_deg: Optional[float] = None


# =============================================================================
# Conversions
# =============================================================================


def is_horizontal(incline_deg: float) -> bool:
    return abs(incline_deg) < HORIZONTAL_THRESHOLD.value


def axis_from_horizontal(horizontal_in: float, incline_deg: float) -> float:
    """Axis length from horizontal run, guarding cos(theta) near zero."""
    if horizontal_in <= 0:
        return 0.0
    if is_horizontal(incline_deg):
        return horizontal_in
    cos_theta = math.cos(math.radians(incline_deg))
    if abs(cos_theta) < MIN_COSINE.value:
        return horizontal_in / MIN_COSINE.value
    return horizontal_in / cos_theta


def horizontal_from_axis(length_in: float, incline_deg: float) -> float:
    if length_in <= 0:
        return 0.0
    if is_horizontal(incline_deg):
        return length_in
    return length_in * math.cos(math.radians(incline_deg))


def rise_from_axis(length_in: float, incline_deg: float) -> float:
    if length_in <= 0 or is_horizontal(incline_deg):
        return 0.0
    return length_in * math.sin(math.radians(incline_deg))


def rise_from_horizontal(horizontal_in: float, incline_deg: float) -> float:
    if horizontal_in <= 0 or is_horizontal(incline_deg):
        return 0.0
    return horizontal_in * math.tan(math.radians(incline_deg))


def tob_to_centerline(tob_in: float, pulley_dia_in: float) -> float:
    return tob_in - pulley_dia_in / 2.0


def centerline_to_tob(centerline_in: float, pulley_dia_in: float) -> float:
    return centerline_in + pulley_dia_in / 2.0


def clamp_incline(incline_deg: float) -> float:
    return MAX_INCLINE.clamp(incline_deg)


def raw_angle_from_centerlines(
    tail_cl_in: float, drive_cl_in: float, horizontal_in: float
) -> float:
    """Incline implied by two centerline heights, unclamped."""
    if horizontal_in <= 0:
        return 0.0
    rise = drive_cl_in - tail_cl_in
    if abs(rise) < MIN_RISE.value:
        return 0.0
    return math.degrees(math.atan(rise / horizontal_in))


def angle_from_centerlines(
    tail_cl_in: float, drive_cl_in: float, horizontal_in: float
) -> float:
    """Incline implied by two centerline heights, clamped to +/- MAX_INCLINE."""
    return clamp_incline(raw_angle_from_centerlines(tail_cl_in, drive_cl_in, horizontal_in))


def implied_angle_from_tobs(
    tail_tob_in: float,
    drive_tob_in: float,
    horizontal_in: float,
    tail_pulley_dia_in: float,
    drive_pulley_dia_in: float,
) -> float:
    return angle_from_centerlines(
        tob_to_centerline(tail_tob_in, tail_pulley_dia_in),
        tob_to_centerline(drive_tob_in, drive_pulley_dia_in),
        horizontal_in,
    )


def opposite_tob_from_angle(
    known_tob_in: float,
    incline_deg: float,
    horizontal_in: float,
    known_pulley_dia_in: float,
    other_pulley_dia_in: float,
    known_end: str = "tail",
) -> float:
    """TOB at the other end given one TOB, the incline and the horizontal run.

    ``known_end`` is ``"tail"`` or ``"drive"``; positive inclines rise from
    tail to drive.
    """
    if known_end not in ("tail", "drive"):
        raise ValueError(f"known_end must be 'tail' or 'drive', got {known_end!r}")
    known_cl = tob_to_centerline(known_tob_in, known_pulley_dia_in)
    rise = rise_from_horizontal(horizontal_in, incline_deg)
    other_cl = known_cl + rise if known_end == "tail" else known_cl - rise
    return centerline_to_tob(other_cl, other_pulley_dia_in)


def pulley_diameters(record: ConfigurationRecord) -> tuple[float, float]:
    """(drive, tail) diameters used for TOB <-> centerline conversion."""
    drive = record.drive_pulley_diameter_in
    if drive is None:
        drive = record.pulley_diameter_in
    if drive is None:
        drive = DEFAULT_PULLEY_DIAMETER.value
    tail = record.tail_pulley_diameter_in
    if tail is None:
        tail = record.pulley_diameter_in
    if tail is None:
        tail = drive
    return float(drive), float(tail)


# =============================================================================
# Normalization
# =============================================================================


def _horizontal_input(record: ConfigurationRecord) -> float:
    if record.horizontal_run_in is not None:
        return float(record.horizontal_run_in)
    return float(record.conveyor_length_cc_in or 0.0)


def normalize_geometry(
    record: ConfigurationRecord,
) -> tuple[ConfigurationRecord, DerivedGeometry]:
    """Derive canonical geometry and return the record with derived primaries.

    Never raises for domain conditions: an invalid mode/field combination
    yields ``is_valid=False`` with an error string, and the record is
    returned unchanged.
    """
    mode = record.geometry_mode or GeometryMode.L_ANGLE
    incline = float(record.conveyor_incline_deg or 0.0)
    drive_dia, tail_dia = pulley_diameters(record)

    tail_cl = drive_cl = None
    if record.tail_tob_in is not None:
        tail_cl = tob_to_centerline(record.tail_tob_in, tail_dia)
    if record.drive_tob_in is not None:
        drive_cl = tob_to_centerline(record.drive_tob_in, drive_dia)

    def invalid(message: str, length: float = 0.0, horizontal: float = 0.0):
        log.debug("Geometry invalid (%s): %s", mode, message)
        derived = DerivedGeometry(
            mode=mode,
            length_cc_in=length,
            horizontal_run_in=horizontal,
            incline_deg=incline,
            rise_in=0.0,
            drive_pulley_dia_in=drive_dia,
            tail_pulley_dia_in=tail_dia,
            tail_cl_in=tail_cl,
            drive_cl_in=drive_cl,
            is_valid=False,
            error=message,
            raw_incline_deg=incline,
        )
        return record, derived

    raw_incline = incline
    if mode == GeometryMode.L_ANGLE:
        length = float(record.conveyor_length_cc_in or 0.0)
        if length <= 0:
            return invalid(ERR_LENGTH, length=length)
        horizontal = horizontal_from_axis(length, incline)

    elif mode in (GeometryMode.H_ANGLE, GeometryMode.H_TOB, GeometryMode.H_RISE):
        horizontal = _horizontal_input(record)
        if horizontal <= 0:
            return invalid(ERR_HORIZONTAL, horizontal=horizontal)
        if mode == GeometryMode.H_TOB:
            if tail_cl is None or drive_cl is None:
                return invalid(ERR_TOB, horizontal=horizontal)
            raw_incline = raw_angle_from_centerlines(tail_cl, drive_cl, horizontal)
            incline = clamp_incline(raw_incline)
        elif mode == GeometryMode.H_RISE:
            raw_incline = raw_angle_from_centerlines(
                0.0, float(record.input_rise_in or 0.0), horizontal
            )
            incline = clamp_incline(raw_incline)
        length = axis_from_horizontal(horizontal, incline)

    else:
        return invalid(f"Unknown geometry mode: {mode}")

    if is_horizontal(incline):
        incline = raw_incline = 0.0
        horizontal = length
    rise = rise_from_axis(length, incline)

    derived = DerivedGeometry(
        mode=mode,
        length_cc_in=length,
        horizontal_run_in=horizontal,
        incline_deg=incline,
        rise_in=rise,
        drive_pulley_dia_in=drive_dia,
        tail_pulley_dia_in=tail_dia,
        tail_cl_in=tail_cl,
        drive_cl_in=drive_cl,
        raw_incline_deg=raw_incline,
    )
    log.debug(
        "Geometry %s: L=%.3f H=%.3f theta=%.3f rise=%.3f",
        mode, length, horizontal, incline, rise,
    )
    normalized = record.replace(
        conveyor_length_cc_in=length,
        horizontal_run_in=horizontal,
        conveyor_incline_deg=incline,
    )
    return normalized, derived


def derive_geometry(record: ConfigurationRecord) -> DerivedGeometry:
    """Canonical geometry only."""
    return normalize_geometry(record)[1]
