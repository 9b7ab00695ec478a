"""
Configuration record: the immutable input snapshot every engine function reads.

The caller (UI, API route or test harness) owns the configuration and hands
the engine a full snapshot on every change. Every field is optional because
partially-configured snapshots are valid inputs; rules that need a missing
field simply do not fire.

Usage:
    from beltline.inputs import ConfigurationRecord, GeometryMode

    record = ConfigurationRecord.from_mapping(payload)
    record = record.replace(geometry_mode=GeometryMode.H_ANGLE)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from dataclasses import replace as _dc_replace
from enum import Enum
from typing import Any, Mapping, Optional, Union


# =============================================================================
# Closed enumerations
# =============================================================================


class GeometryMode(str, Enum):
    """Which geometry fields are primary."""

    L_ANGLE = "L_ANGLE"  # axis length + incline
    H_ANGLE = "H_ANGLE"  # horizontal run + incline
    H_TOB = "H_TOB"  # horizontal run + tail/drive top-of-belt
    H_RISE = "H_RISE"  # horizontal run + rise


class FrameHeightMode(str, Enum):
    STANDARD = "Standard"
    LOW_PROFILE = "Low Profile"
    CUSTOM = "Custom"


class MaterialForm(str, Enum):
    PARTS = "PARTS"
    BULK = "BULK"


class BeltTrackingMethod(str, Enum):
    CROWNED = "Crowned"
    V_GUIDED = "V-guided"


class CoatingMethod(str, Enum):
    POWDER_COAT = "powder_coat"
    WET_PAINT = "wet_paint"


class LacingStyle(str, Enum):
    ENDLESS = "Endless"
    CLIPPER = "Clipper"
    ALLIGATOR = "Alligator"


class CleatsMode(str, Enum):
    NONE = "none"
    CLEATED = "cleated"


class SpecSource(str, Enum):
    STANDARD = "STANDARD"
    CUSTOMER_SPEC = "CUSTOMER_SPEC"


Num = Optional[float]


# =============================================================================
# Record
# =============================================================================


@dataclass(frozen=True)
class ConfigurationRecord:
    """Full conveyor configuration snapshot (all lengths in inches)."""

    # Geometry
    geometry_mode: Union[GeometryMode, str, None] = None
    conveyor_length_cc_in: Num = None
    horizontal_run_in: Num = None
    conveyor_incline_deg: Num = None
    input_rise_in: Num = None
    tail_tob_in: Num = None
    drive_tob_in: Num = None
    belt_width_in: Num = None

    # Pulleys
    pulley_diameter_in: Num = None
    drive_pulley_diameter_in: Num = None
    tail_pulley_diameter_in: Num = None
    drive_pulley_manual_override: bool = False
    tail_pulley_manual_override: bool = False
    drive_tube_od_in: Num = None
    drive_tube_wall_in: Num = None
    tail_tube_od_in: Num = None
    tail_tube_wall_in: Num = None
    drive_pulley_face_width_in: Num = None
    tail_pulley_face_width_in: Num = None

    # Belt (catalog-derived scalars)
    belt_catalog_key: Optional[str] = None
    belt_piw: Num = None
    belt_pil: Num = None
    belt_family: Optional[str] = None
    belt_min_pulley_dia_no_vguide_in: Num = None
    belt_min_pulley_dia_with_vguide_in: Num = None
    belt_tracking_method: Union[BeltTrackingMethod, str, None] = None
    belt_cleat_method: Optional[str] = None
    vguide_min_pulley_dia_solid_in: Num = None
    vguide_min_pulley_dia_notched_in: Num = None
    vguide_min_pulley_dia_solid_pu_in: Num = None
    vguide_min_pulley_dia_notched_pu_in: Num = None

    # Cleats
    cleats_mode: Union[CleatsMode, str, None] = None
    cleats_enabled: Optional[bool] = None
    cleat_profile: Optional[str] = None
    cleat_size: Optional[str] = None
    cleat_pattern: Optional[str] = None
    cleat_style: Optional[str] = None
    cleat_spacing_in: Num = None
    cleat_centers_in: Num = None
    cleat_height_in: Num = None

    # Frame
    frame_construction_type: Optional[str] = None
    frame_height_mode: Union[FrameHeightMode, str, None] = None
    frame_clearance_in: Num = None
    custom_frame_height_in: Num = None

    # Product / throughput
    material_form: Union[MaterialForm, str, None] = None
    part_weight_lbs: Num = None
    part_length_in: Num = None
    part_width_in: Num = None
    drop_height_in: Num = None
    part_spacing_in: Num = None

    # Drive
    belt_speed_fpm: Num = None
    safety_factor: Num = None

    # Lacing, documentation, finish
    lacing_style: Union[LacingStyle, str, None] = None
    lacing_material: Optional[str] = None
    spec_source: Union[SpecSource, str, None] = None
    customer_spec_reference: Optional[str] = None
    finish_coating_method: Union[CoatingMethod, str, None] = None
    finish_powder_color_code: Optional[str] = None
    finish_custom_note: Optional[str] = None
    guarding_coating_method: Union[CoatingMethod, str, None] = None
    guarding_powder_color_code: Optional[str] = None
    guarding_custom_note: Optional[str] = None

    # Tracking
    application_class: Optional[str] = None
    belt_construction: Optional[str] = None
    reversing_operation: bool = False
    disturbance_side_loading: bool = False
    disturbance_load_variability: bool = False
    disturbance_environment: bool = False
    disturbance_installation_risk: bool = False
    tracking_preference: Optional[str] = None

    # -------------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ConfigurationRecord":
        """Build a record from a plain mapping.

        Unknown keys are ignored. Enum-typed fields are coerced when the
        value names a member and kept as the raw string otherwise.

        Raises:
            TypeError: if ``data`` is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Configuration record must be a mapping, got {type(data).__name__}"
            )
        known = {f.name for f in fields(cls)}
        values = {k: _coerce(k, v) for k, v in data.items() if k in known}
        return cls(**values)

    def replace(self, **changes: Any) -> "ConfigurationRecord":
        """Return a copy with ``changes`` applied (coerced like from_mapping)."""
        return _dc_replace(self, **{k: _coerce(k, v) for k, v in changes.items()})

    def to_dict(self) -> dict[str, Any]:
        """Plain-value mapping (enum members replaced by their values)."""
        return {
            k: (v.value if isinstance(v, Enum) else v) for k, v in asdict(self).items()
        }

    # Convenience views used by several derivations

    @property
    def is_vguided(self) -> bool:
        return self.belt_tracking_method == BeltTrackingMethod.V_GUIDED

    @property
    def cleats_on(self) -> bool:
        """Cleats are on only when explicitly enabled."""
        return self.cleats_enabled is True


_ENUM_FIELDS: dict[str, type[Enum]] = {
    "geometry_mode": GeometryMode,
    "frame_height_mode": FrameHeightMode,
    "material_form": MaterialForm,
    "belt_tracking_method": BeltTrackingMethod,
    "finish_coating_method": CoatingMethod,
    "guarding_coating_method": CoatingMethod,
    "lacing_style": LacingStyle,
    "cleats_mode": CleatsMode,
    "spec_source": SpecSource,
}


def _coerce(name: str, value: Any) -> Any:
    enum_cls = _ENUM_FIELDS.get(name)
    if enum_cls is None or value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value
