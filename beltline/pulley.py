"""
Minimum pulley diameter resolution.

Several independent sources put a floor under the pulley diameter:

- the belt catalog (with or without a V-guide),
- hot-welded cleats, which scale the belt minimum by a spacing multiplier,
- the V-guide profile (solid, or the polyurethane-specific value on PU belts),
- the cleat catalog (profile minimum at the selected cleat centers).

The governing minimum is the strictly largest present, positive candidate.
Candidates are listed belt first, so an exact tie names the belt as the
governing source.

Usage:
    from beltline.pulley import resolve_min_pulley

    result = resolve_min_pulley(
        belt_min_no_vguide=3.0,
        belt_min_with_vguide=4.0,
        is_vguided=True,
        vguide_min_solid=4.5,
    )
    if result is not None:
        print(result.governing_in, result.source)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

import numpy as np

from beltline.constants import (
    CLEAT_CENTERS_BUCKETS,
    CLEAT_MIN_PULLEY_ROUNDING,
    CLEAT_SPACING_MULTIPLIERS,
    DEFAULT_CLEAT_SPACING,
    MIN_PULLEY_ROUNDING,
)
from beltline.inputs import ConfigurationRecord
from beltline.logging import get_logger

log = get_logger(__name__)

HOT_WELDED = "hot_welded"
PU_FAMILY = "PU"
DRILL_SIPED_STYLE = "DRILL_SIPED_1IN"

_SPACINGS = np.array([s for s, _ in CLEAT_SPACING_MULTIPLIERS])
_MULTIPLIERS = np.array([m for _, m in CLEAT_SPACING_MULTIPLIERS])


class MinPulleySource(str, Enum):
    BELT = "belt"
    VGUIDE = "vguide"
    CLEATS = "cleats"


@dataclass(frozen=True)
class MinPulleyCandidate:
    source: MinPulleySource
    value_in: float


@dataclass(frozen=True)
class MinPulleyResult:
    """Governing minimum pulley diameter and where it came from."""

    governing_in: float
    source: MinPulleySource
    cleat_multiplier: Optional[float] = None
    candidates: tuple[MinPulleyCandidate, ...] = field(default_factory=tuple)


# =============================================================================
# Helpers
# =============================================================================


def round_up_to_increment(value: float, increment: float) -> float:
    if increment <= 0:
        raise ValueError(f"increment must be positive, got {increment}")
    return math.ceil(value / increment) * increment


def cleat_spacing_multiplier(spacing_in: Optional[float]) -> float:
    """Belt-minimum multiplier for hot-welded cleats at ``spacing_in`` centers.

    Tighter spacing stiffens the belt more. Values outside the table clamp to
    its ends; values between breakpoints interpolate linearly.
    """
    if spacing_in is None:
        spacing_in = DEFAULT_CLEAT_SPACING.value
    return float(np.interp(spacing_in, _SPACINGS, _MULTIPLIERS))


def cleat_multiplier_applies(cleats_enabled: Optional[bool], cleat_method: Optional[str]) -> bool:
    return cleats_enabled is True and cleat_method == HOT_WELDED


def _present(value: Optional[float]) -> bool:
    return value is not None and value > 0


# =============================================================================
# Resolver
# =============================================================================


def resolve_min_pulley(
    belt_min_no_vguide: Optional[float] = None,
    belt_min_with_vguide: Optional[float] = None,
    is_vguided: bool = False,
    vguide_min_solid: Optional[float] = None,
    vguide_min_solid_pu: Optional[float] = None,
    belt_family: Optional[str] = None,
    cleats_enabled: Optional[bool] = None,
    cleat_method: Optional[str] = None,
    cleat_spacing_in: Optional[float] = None,
    cleat_min_in: Optional[float] = None,
    round_to: Optional[float] = None,
) -> Optional[MinPulleyResult]:
    """Resolve the governing minimum pulley diameter.

    Args:
        belt_min_no_vguide: Belt catalog minimum for crowned tracking
        belt_min_with_vguide: Belt catalog minimum when V-guided
        is_vguided: Whether the belt tracks on a V-guide
        vguide_min_solid: Generic solid V-guide minimum
        vguide_min_solid_pu: Solid V-guide minimum for PU belts
        belt_family: Belt family; "PU" selects the PU V-guide value
        cleats_enabled: Cleats explicitly enabled
        cleat_method: Cleat attachment method; only "hot_welded" scales
        cleat_spacing_in: Cleat spacing (12" when unset)
        cleat_min_in: Cleat catalog minimum, considered after belt and V-guide
        round_to: Round the cleat-scaled belt minimum up to this increment

    Returns:
        MinPulleyResult, or None when no candidate is present.
    """
    belt = belt_min_with_vguide if is_vguided else belt_min_no_vguide

    multiplier: Optional[float] = None
    if _present(belt) and cleat_multiplier_applies(cleats_enabled, cleat_method):
        multiplier = cleat_spacing_multiplier(cleat_spacing_in)
        belt = belt * multiplier
        if round_to:
            belt = round_up_to_increment(belt, round_to)

    vguide: Optional[float] = None
    if is_vguided:
        if belt_family == PU_FAMILY and vguide_min_solid_pu is not None:
            vguide = vguide_min_solid_pu
        else:
            vguide = vguide_min_solid

    candidates = tuple(
        MinPulleyCandidate(source, float(value))
        for source, value in (
            (MinPulleySource.BELT, belt),
            (MinPulleySource.VGUIDE, vguide),
            (MinPulleySource.CLEATS, cleat_min_in),
        )
        if _present(value)
    )
    if not candidates:
        return None

    governing = candidates[0]
    for candidate in candidates[1:]:
        if candidate.value_in > governing.value_in:
            governing = candidate

    log.debug(
        "Min pulley: %.3f from %s (multiplier=%s)",
        governing.value_in, governing.source.value, multiplier,
    )
    return MinPulleyResult(
        governing_in=governing.value_in,
        source=governing.source,
        cleat_multiplier=multiplier,
        candidates=candidates,
    )


def required_min_pulley_for_record(
    record: ConfigurationRecord,
    round_to: Optional[float] = MIN_PULLEY_ROUNDING.value,
    cleat_min_in: Optional[float] = None,
) -> Optional[MinPulleyResult]:
    """Resolver over the record's catalog-derived fields."""
    return resolve_min_pulley(
        belt_min_no_vguide=record.belt_min_pulley_dia_no_vguide_in,
        belt_min_with_vguide=record.belt_min_pulley_dia_with_vguide_in,
        is_vguided=record.is_vguided,
        vguide_min_solid=record.vguide_min_pulley_dia_solid_in,
        vguide_min_solid_pu=record.vguide_min_pulley_dia_solid_pu_in,
        belt_family=record.belt_family,
        cleats_enabled=record.cleats_enabled,
        cleat_method=record.belt_cleat_method,
        cleat_spacing_in=record.cleat_spacing_in,
        cleat_min_in=cleat_min_in,
        round_to=round_to,
    )


# =============================================================================
# Cleat catalog minimums
# =============================================================================


@dataclass(frozen=True)
class CleatCatalogEntry:
    """Cleat profile minimum pulley diameters at 12" centers."""

    profile: str
    size: str
    base_min_pulley_solid_in: float
    base_min_pulley_drill_siped_in: Optional[float] = None


@dataclass(frozen=True)
class CleatMinPulleyResult:
    min_pulley_in: Optional[float]
    centers_bucket_in: int
    centers_factor: float
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


def centers_bucket(centers_in: Optional[float]) -> int:
    """Snap cleat centers to the catalog's 4/6/8/12 inch columns."""
    if centers_in is None:
        return CLEAT_CENTERS_BUCKETS[-1]
    for bucket in CLEAT_CENTERS_BUCKETS[:-1]:
        if centers_in <= bucket:
            return bucket
    return CLEAT_CENTERS_BUCKETS[-1]


def cleat_min_pulley(
    entry: CleatCatalogEntry,
    style: Optional[str],
    centers_in: Optional[float],
    centers_factors: Mapping[int, float],
) -> CleatMinPulleyResult:
    """Cleat catalog minimum at the selected centers, rounded up to 0.5".

    ``centers_factors`` maps a centers bucket to its diameter factor; a
    missing bucket means no adjustment.
    """
    bucket = centers_bucket(centers_in)
    factor = float(centers_factors.get(bucket, 1.0))

    if style == DRILL_SIPED_STYLE:
        base = entry.base_min_pulley_drill_siped_in
        if base is None:
            return CleatMinPulleyResult(
                min_pulley_in=None,
                centers_bucket_in=bucket,
                centers_factor=factor,
                error=(
                    f"No drill & siped minimum pulley diameter for "
                    f"{entry.profile} {entry.size}"
                ),
            )
    else:
        base = entry.base_min_pulley_solid_in

    value = round_up_to_increment(base * factor, CLEAT_MIN_PULLEY_ROUNDING.value)
    return CleatMinPulleyResult(min_pulley_in=value, centers_bucket_in=bucket, centers_factor=factor)
