"""
Belt tracking recommendation.

Guidance only: recommends crowned pulleys, hybrid (crowned + V-guide) or
V-guided (flat pulleys + V-guide) tracking from the length/width ratio and
the disturbances the belt will see. Nothing here blocks a configuration.

Steps:
1. L/W ratio (rounded to 0.1) -> band (low <= 5, medium <= 10, high)
2. Disturbance count -> raw severity
3. Bulk handling and stiff/profiled belts nudge severity one step worse
4. Band x severity matrix -> recommended mode (some cells carry a note)
5. A user preference overrides the mode; the rationale still names the
   computed recommendation
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from beltline.inputs import ConfigurationRecord
from beltline.logging import get_logger

log = get_logger(__name__)


class ApplicationClass(str, Enum):
    UNIT_HANDLING = "unit_handling"
    BULK_HANDLING = "bulk_handling"


class BeltConstruction(str, Enum):
    GENERAL = "general"
    FABRIC_PLY = "fabric_ply"
    THERMOPLASTIC_PVC_PU = "thermoplastic_pvc_pu"
    RUBBER_COMPOUND = "rubber_compound"
    STEEL_CORD_OR_VERY_STIFF = "steel_cord_or_very_stiff"
    PROFILED_SIDEWALL_OR_HIGH_CLEAT = "profiled_sidewall_or_high_cleat"


class TrackingPreference(str, Enum):
    AUTO = "auto"
    PREFER_CROWNED = "prefer_crowned"
    PREFER_HYBRID = "prefer_hybrid"
    PREFER_V_GUIDED = "prefer_v_guided"


class TrackingMode(str, Enum):
    CROWNED = "crowned"
    HYBRID = "hybrid"
    V_GUIDED = "v_guided"


class LwBand(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DisturbanceSeverity(str, Enum):
    MINIMAL = "minimal"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"


LW_BAND_LOW_MAX = 5.0
LW_BAND_MEDIUM_MAX = 10.0
SEVERITY_SIGNIFICANT_MIN_COUNT = 3

STIFF_BELT_CONSTRUCTIONS = (
    BeltConstruction.STEEL_CORD_OR_VERY_STIFF,
    BeltConstruction.PROFILED_SIDEWALL_OR_HIGH_CLEAT,
)

# Least to most tracking control
MODE_ORDER = (TrackingMode.CROWNED, TrackingMode.HYBRID, TrackingMode.V_GUIDED)
_SEVERITY_ORDER = (
    DisturbanceSeverity.MINIMAL,
    DisturbanceSeverity.MODERATE,
    DisturbanceSeverity.SIGNIFICANT,
)

# (mode, with_note)
RECOMMENDATION_MATRIX: dict[LwBand, dict[DisturbanceSeverity, tuple[TrackingMode, bool]]] = {
    LwBand.LOW: {
        DisturbanceSeverity.MINIMAL: (TrackingMode.CROWNED, False),
        DisturbanceSeverity.MODERATE: (TrackingMode.CROWNED, True),
        DisturbanceSeverity.SIGNIFICANT: (TrackingMode.HYBRID, False),
    },
    LwBand.MEDIUM: {
        DisturbanceSeverity.MINIMAL: (TrackingMode.CROWNED, True),
        DisturbanceSeverity.MODERATE: (TrackingMode.HYBRID, False),
        DisturbanceSeverity.SIGNIFICANT: (TrackingMode.V_GUIDED, False),
    },
    LwBand.HIGH: {
        DisturbanceSeverity.MINIMAL: (TrackingMode.HYBRID, False),
        DisturbanceSeverity.MODERATE: (TrackingMode.V_GUIDED, False),
        DisturbanceSeverity.SIGNIFICANT: (TrackingMode.V_GUIDED, False),
    },
}

_PREFERENCE_MODES = {
    TrackingPreference.PREFER_CROWNED: TrackingMode.CROWNED,
    TrackingPreference.PREFER_HYBRID: TrackingMode.HYBRID,
    TrackingPreference.PREFER_V_GUIDED: TrackingMode.V_GUIDED,
}

MODE_DISPLAY_NAMES = {
    TrackingMode.CROWNED: "Crowned pulleys",
    TrackingMode.HYBRID: "Hybrid (crowned pulleys + V-guide)",
    TrackingMode.V_GUIDED: "V-guided (flat pulleys + V-guide)",
}

TRACKING_MODE_LABELS = {
    TrackingMode.CROWNED: "Crowned Pulleys",
    TrackingMode.HYBRID: "Hybrid (Crowned + V-Guide)",
    TrackingMode.V_GUIDED: "V-Guided (Flat Pulleys + V-Guide)",
}

_BAND_TEXT = {LwBand.LOW: "favorable", LwBand.MEDIUM: "moderate", LwBand.HIGH: "high"}

NOTE_LESS_CONTROL = (
    "Selected mode provides less tracking control than recommended. "
    "Tracking margin may be reduced."
)
NOTE_MARGIN = "Conditions may reduce tracking margin. Consider Hybrid if issues appear in service."


@dataclass(frozen=True)
class TrackingRecommendation:
    lw_ratio: float
    lw_band: LwBand
    disturbance_count: int
    severity_raw: DisturbanceSeverity
    severity_modified: DisturbanceSeverity
    mode: TrackingMode
    rationale: str
    note: Optional[str] = None

    @property
    def label(self) -> str:
        return TRACKING_MODE_LABELS[self.mode]


# =============================================================================
# Steps
# =============================================================================


def lw_ratio(length_in: float, width_in: float) -> float:
    if not width_in or width_in <= 0:
        return float("inf")
    scaled = length_in / width_in * 10
    if not math.isfinite(scaled):
        return float("inf")
    # Half-tenths round up (5.05 -> 5.1), never to even
    return math.floor(scaled + 0.5) / 10


def lw_band(ratio: float) -> LwBand:
    if ratio <= LW_BAND_LOW_MAX:
        return LwBand.LOW
    if ratio <= LW_BAND_MEDIUM_MAX:
        return LwBand.MEDIUM
    return LwBand.HIGH


def raw_severity(
    disturbance_count: int, reversing: bool, side_loading: bool
) -> DisturbanceSeverity:
    # Reversing with side loading is significant even at a count of two
    if reversing and side_loading:
        return DisturbanceSeverity.SIGNIFICANT
    if disturbance_count >= SEVERITY_SIGNIFICANT_MIN_COUNT:
        return DisturbanceSeverity.SIGNIFICANT
    if disturbance_count >= 1:
        return DisturbanceSeverity.MODERATE
    return DisturbanceSeverity.MINIMAL


def _worse(severity: DisturbanceSeverity) -> DisturbanceSeverity:
    idx = _SEVERITY_ORDER.index(severity)
    return _SEVERITY_ORDER[min(idx + 1, len(_SEVERITY_ORDER) - 1)]


def apply_modifiers(
    severity: DisturbanceSeverity,
    application_class: Optional[str] = None,
    belt_construction: Optional[str] = None,
) -> DisturbanceSeverity:
    if application_class == ApplicationClass.BULK_HANDLING:
        severity = _worse(severity)
    if belt_construction in STIFF_BELT_CONSTRUCTIONS:
        severity = _worse(severity)
    return severity


def _rationale(
    band: LwBand,
    severity: DisturbanceSeverity,
    mode: TrackingMode,
    computed: TrackingMode,
    is_override: bool,
) -> str:
    if is_override and computed != mode:
        return (
            f"User preference applied. {MODE_DISPLAY_NAMES[mode]} selected. "
            f"System would recommend {MODE_DISPLAY_NAMES[computed]} for these conditions."
        )
    band_text = _BAND_TEXT[band]
    if mode == TrackingMode.CROWNED:
        if severity == DisturbanceSeverity.MINIMAL:
            return (
                f"Crowned pulleys are appropriate. L/W ratio is {band_text} "
                "and disturbance factors are minimal."
            )
        return (
            "Crowned pulleys are appropriate for this geometry. "
            "Selected conditions may reduce tracking margin."
        )
    if mode == TrackingMode.HYBRID:
        return (
            "Hybrid adds tracking margin by combining crowned pulleys with a V-guide. "
            f"Recommended given {band_text} L/W ratio and selected conditions."
        )
    return (
        "V-guided provides positive belt constraint. Recommended when geometry "
        "and conditions increase tracking sensitivity."
    )


def _note(
    with_note: bool, mode: TrackingMode, computed: TrackingMode, is_override: bool
) -> Optional[str]:
    if is_override and computed != mode:
        if MODE_ORDER.index(mode) < MODE_ORDER.index(computed):
            return NOTE_LESS_CONTROL
        return None
    return NOTE_MARGIN if with_note else None


# =============================================================================
# Entry points
# =============================================================================


def recommend_tracking(
    length_in: float,
    width_in: float,
    application_class: Optional[str] = None,
    belt_construction: Optional[str] = None,
    reversing: bool = False,
    side_loading: bool = False,
    load_variability: bool = False,
    environment: bool = False,
    installation_risk: bool = False,
    preference: Optional[str] = None,
) -> TrackingRecommendation:
    """Recommend a belt tracking mode with rationale and optional note."""
    ratio = lw_ratio(length_in, width_in)
    band = lw_band(ratio)

    count = sum(
        bool(flag)
        for flag in (reversing, side_loading, load_variability, environment, installation_risk)
    )
    raw = raw_severity(count, bool(reversing), bool(side_loading))
    modified = apply_modifiers(raw, application_class, belt_construction)

    computed, with_note = RECOMMENDATION_MATRIX[band][modified]
    preferred = None
    for pref, pref_mode in _PREFERENCE_MODES.items():
        if preference == pref:
            preferred = pref_mode
    is_override = preferred is not None
    mode = preferred or computed

    result = TrackingRecommendation(
        lw_ratio=ratio,
        lw_band=band,
        disturbance_count=count,
        severity_raw=raw,
        severity_modified=modified,
        mode=mode,
        rationale=_rationale(band, modified, mode, computed, is_override),
        note=_note(with_note, mode, computed, is_override),
    )
    log.debug(
        "Tracking: L/W=%s band=%s severity=%s -> %s (computed %s)",
        ratio, band.value, modified.value, mode.value, computed.value,
    )
    return result


def tracking_for_record(record: ConfigurationRecord) -> TrackingRecommendation:
    return recommend_tracking(
        length_in=float(record.conveyor_length_cc_in or 0.0),
        width_in=float(record.belt_width_in or 0.0),
        application_class=record.application_class,
        belt_construction=record.belt_construction,
        reversing=record.reversing_operation,
        side_loading=record.disturbance_side_loading,
        load_variability=record.disturbance_load_variability,
        environment=record.disturbance_environment,
        installation_risk=record.disturbance_installation_risk,
        preference=record.tracking_preference,
    )
