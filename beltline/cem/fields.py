"""
Field-to-section mapping.

Lets validation messages that only know a field name (for example errors
from a downstream calculation pipeline) be shown in the same tab/section as
the engine's own issues for that field.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from .issues import SECTION_TAB, SectionKey, TabKey


class FieldMapping(NamedTuple):
    tab: TabKey
    section: SectionKey


_SECTION_FIELDS: dict[SectionKey, tuple[str, ...]] = {
    SectionKey.PRODUCT: (
        "material_form",
        "part_weight_lbs",
        "part_length_in",
        "part_width_in",
        "drop_height_in",
    ),
    SectionKey.THROUGHPUT: ("part_spacing_in",),
    SectionKey.ENVIRONMENT: ("application_class",),
    SectionKey.GEOMETRY: (
        "geometry_mode",
        "conveyor_length_cc_in",
        "horizontal_run_in",
        "conveyor_incline_deg",
        "input_rise_in",
        "tail_tob_in",
        "drive_tob_in",
        "belt_width_in",
    ),
    SectionKey.BELT_PULLEYS: (
        "belt_catalog_key",
        "belt_tracking_method",
        "belt_construction",
        "tracking_preference",
        "reversing_operation",
        "disturbance_side_loading",
        "disturbance_load_variability",
        "disturbance_environment",
        "disturbance_installation_risk",
        "pulley_diameter_in",
        "drive_pulley_diameter_in",
        "tail_pulley_diameter_in",
        "cleats_mode",
        "cleats_enabled",
        "cleat_profile",
        "cleat_size",
        "cleat_pattern",
        "cleat_style",
        "cleat_spacing_in",
        "cleat_centers_in",
        "lacing_style",
        "lacing_material",
    ),
    SectionKey.FRAME: (
        "frame_height_mode",
        "custom_frame_height_in",
        "frame_clearance_in",
        "frame_construction_type",
    ),
    SectionKey.SPEED: ("belt_speed_fpm",),
    SectionKey.ADVANCED: ("safety_factor",),
    SectionKey.DOCUMENTATION: (
        "spec_source",
        "customer_spec_reference",
        "finish_coating_method",
        "finish_powder_color_code",
        "finish_custom_note",
        "guarding_coating_method",
        "guarding_powder_color_code",
        "guarding_custom_note",
    ),
}

FIELD_TO_SECTION: dict[str, FieldMapping] = {
    name: FieldMapping(SECTION_TAB[section], section)
    for section, names in _SECTION_FIELDS.items()
    for name in names
}


def field_mapping(field_name: Optional[str]) -> Optional[FieldMapping]:
    """Tab and section for a field, or None when the field is not mapped."""
    if not field_name:
        return None
    return FIELD_TO_SECTION.get(field_name)


def field_section(field_name: Optional[str]) -> Optional[SectionKey]:
    mapping = field_mapping(field_name)
    return mapping.section if mapping else None


def field_tab(field_name: Optional[str]) -> Optional[TabKey]:
    mapping = field_mapping(field_name)
    return mapping.tab if mapping else None
