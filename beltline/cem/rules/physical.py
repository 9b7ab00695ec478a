"""Physical tab rules: geometry, belt & pulleys, cleats, tracking and frame."""

from __future__ import annotations

from typing import Optional

from beltline.constants import DEFAULT_PULLEY_DIAMETER
from beltline.frame import frame_height_for_record
from beltline.geometry import derive_geometry
from beltline.inputs import CleatsMode, FrameHeightMode, LacingStyle
from beltline.pulley import DRILL_SIPED_STYLE, required_min_pulley_for_record
from beltline.tracking import tracking_for_record

from ..issues import (
    Issue,
    IssueCode,
    IssueSeverity,
    MinPulleyData,
    SectionKey,
    make_issue,
)
from . import RuleBase, RuleCategory, RuleContext
from .registry import register_rule


def fmt(value: float) -> str:
    """Compact number for messages: 20 -> '20', 12.5 -> '12.5'."""
    return f"{value:g}"


# =============================================================================
# Geometry
# =============================================================================


@register_rule("conveyor_dimensions", order=50)
class ConveyorDimensionsRule(RuleBase):
    """Length and belt width are required for every downstream derivation."""

    category = RuleCategory.PHYSICAL
    name = "conveyor_dimensions"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        issues = []
        if record.conveyor_length_cc_in is None or record.conveyor_length_cc_in <= 0:
            issues.append(
                make_issue(
                    IssueSeverity.ERROR,
                    "Conveyor length must be greater than 0",
                    SectionKey.GEOMETRY,
                    "conveyor_length_cc_in",
                )
            )
        if record.belt_width_in is None or record.belt_width_in <= 0:
            issues.append(
                make_issue(
                    IssueSeverity.ERROR,
                    "Belt width must be greater than 0",
                    SectionKey.GEOMETRY,
                    "belt_width_in",
                )
            )
        return issues


@register_rule("incline_limits", order=60)
class InclineRule(RuleBase):
    """Steep inclines need cleats or a textured belt; past the hard limit they are unsupported."""

    category = RuleCategory.PHYSICAL
    name = "incline_limits"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        geometry = derive_geometry(context.record)
        if geometry.is_valid:
            # TOB and rise modes clamp the derived angle; judge the implied one
            incline = geometry.raw_incline_deg
        else:
            incline = context.record.conveyor_incline_deg or 0.0

        limits = context.thresholds
        if incline > limits.incline_error_deg:
            return [
                make_issue(
                    IssueSeverity.ERROR,
                    f"Incline exceeds {fmt(limits.incline_error_deg)}°",
                    SectionKey.GEOMETRY,
                    "conveyor_incline_deg",
                    detail=(
                        f"Incline of {fmt(round(incline, 1))}° is not supported "
                        "without positive engagement"
                    ),
                    code=IssueCode.INCLINE_UNSUPPORTED,
                )
            ]
        if incline > limits.incline_warn_deg:
            return [
                make_issue(
                    IssueSeverity.WARNING,
                    "Steep incline may require cleats or textured belt",
                    SectionKey.GEOMETRY,
                    "conveyor_incline_deg",
                    detail=f"Incline of {fmt(incline)}° exceeds typical limit for smooth belt",
                )
            ]
        return []


# =============================================================================
# Belt & pulleys
# =============================================================================


@register_rule("pulley_diameter_floor", order=70)
class PulleyDiameterRule(RuleBase):
    category = RuleCategory.PHYSICAL
    name = "pulley_diameter_floor"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        floor = context.thresholds.min_pulley_dia_in
        ends = (
            ("Drive", "drive_pulley_diameter_in", record.drive_pulley_diameter_in),
            ("Tail", "tail_pulley_diameter_in", record.tail_pulley_diameter_in),
        )
        issues = []
        for label, field_name, diameter in ends:
            if diameter is None:
                diameter = record.pulley_diameter_in
            if diameter is not None and diameter < floor:
                issues.append(
                    make_issue(
                        IssueSeverity.ERROR,
                        f'{label} pulley diameter must be at least {fmt(floor)}"',
                        SectionKey.BELT_PULLEYS,
                        field_name,
                    )
                )
        return issues


@register_rule("lacing_material", order=100)
class LacingRule(RuleBase):
    category = RuleCategory.PHYSICAL
    name = "lacing_material"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        if record.lacing_style == LacingStyle.ENDLESS or record.lacing_material:
            return []
        return [
            make_issue(
                IssueSeverity.ERROR,
                "Lacing material required when not using endless belt",
                SectionKey.BELT_PULLEYS,
                "lacing_material",
            )
        ]


@register_rule("tracking_recommendation", order=140)
class TrackingRecommendationRule(RuleBase):
    """Always report the recommended tracking mode once length and width are known."""

    category = RuleCategory.PHYSICAL
    name = "tracking_recommendation"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        if not (record.conveyor_length_cc_in or 0) > 0 or not (record.belt_width_in or 0) > 0:
            return []
        tracking = tracking_for_record(record)
        return [
            make_issue(
                IssueSeverity.INFO,
                f"Recommended: {tracking.label}",
                SectionKey.BELT_PULLEYS,
                detail=tracking.rationale,
                code=IssueCode.TRACKING_RECOMMENDATION,
                tracking_data=tracking,
            )
        ]


@register_rule("cleat_configuration", order=150)
class CleatsRule(RuleBase):
    """Cleated belts need a profile and size; drill & siped cleats get a caution."""

    category = RuleCategory.PHYSICAL
    name = "cleat_configuration"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        if record.cleats_mode != CleatsMode.CLEATED:
            return []

        issues = []
        if not record.cleat_profile:
            issues.append(
                make_issue(
                    IssueSeverity.ERROR,
                    "Cleat profile is required",
                    SectionKey.BELT_PULLEYS,
                    "cleat_profile",
                    detail="Select a cleat profile from the catalog",
                    code=IssueCode.CLEATS_PROFILE_REQUIRED,
                )
            )
        if not record.cleat_size:
            issues.append(
                make_issue(
                    IssueSeverity.ERROR,
                    "Cleat size is required",
                    SectionKey.BELT_PULLEYS,
                    "cleat_size",
                    detail="Select a cleat size",
                    code=IssueCode.CLEATS_SIZE_REQUIRED,
                )
            )
        if record.cleat_style == DRILL_SIPED_STYLE:
            issues.append(
                make_issue(
                    IssueSeverity.WARNING,
                    "Drill & Siped cleats have reduced durability",
                    SectionKey.BELT_PULLEYS,
                    "cleat_style",
                    detail="Perforated cleats are recommended for drainage applications only",
                    code=IssueCode.CLEATS_DRILL_SIPED_CAUTION,
                )
            )
        return issues


@register_rule("min_pulley_diameter", order=160)
class MinPulleyRule(RuleBase):
    """Drive and tail pulleys are each checked against the governing minimum."""

    category = RuleCategory.PHYSICAL
    name = "min_pulley_diameter"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        result = required_min_pulley_for_record(
            record, round_to=context.thresholds.min_pulley_round_in
        )
        if result is None:
            return []

        required = result.governing_in
        is_vguided = record.is_vguided
        drive = _first(
            record.drive_pulley_diameter_in,
            record.pulley_diameter_in,
            DEFAULT_PULLEY_DIAMETER.value,
        )
        tail = _first(record.tail_pulley_diameter_in, drive)

        ends = (
            ("Drive", "drive_pulley_diameter_in", drive, IssueCode.MIN_PULLEY_DRIVE_TOO_SMALL),
            ("Tail", "tail_pulley_diameter_in", tail, IssueCode.MIN_PULLEY_TAIL_TOO_SMALL),
        )
        tracking_text = "V-guided" if is_vguided else "crowned"
        issues = []
        for label, field_name, current, code in ends:
            if current >= required:
                continue
            issues.append(
                make_issue(
                    IssueSeverity.WARNING,
                    f'{label} pulley below minimum ({fmt(required)}")',
                    SectionKey.BELT_PULLEYS,
                    field_name,
                    detail=(
                        f'Current: {fmt(current)}", Required: {fmt(required)}" '
                        f"for {tracking_text} tracking"
                    ),
                    code=code,
                    min_pulley_data=MinPulleyData(
                        required_in=required,
                        current_in=current,
                        is_vguided=is_vguided,
                        cleat_multiplier=result.cleat_multiplier,
                    ),
                )
            )
        return issues


def _first(*values: Optional[float]) -> float:
    for value in values:
        if value is not None:
            return float(value)
    raise ValueError("no value supplied")


# =============================================================================
# Frame
# =============================================================================


@register_rule("frame_height", order=170)
class FrameHeightRule(RuleBase):
    """Low Profile excludes cleats; custom frames have a floor and a review threshold."""

    category = RuleCategory.PHYSICAL
    name = "frame_height"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        limits = context.thresholds
        mode = record.frame_height_mode

        if mode == FrameHeightMode.LOW_PROFILE and record.cleats_on:
            return [
                make_issue(
                    IssueSeverity.ERROR,
                    "Low Profile not compatible with cleats",
                    SectionKey.FRAME,
                    "frame_height_mode",
                    "cleats_enabled",
                    detail="Switch the frame to Standard or remove cleats",
                    code=IssueCode.FRAME_LOW_PROFILE_CLEATS,
                )
            ]

        if mode == FrameHeightMode.CUSTOM:
            custom = record.custom_frame_height_in
            if custom is None:
                return [
                    make_issue(
                        IssueSeverity.ERROR,
                        "Custom frame height is required",
                        SectionKey.FRAME,
                        "custom_frame_height_in",
                        code=IssueCode.FRAME_CUSTOM_HEIGHT_REQUIRED,
                    )
                ]
            if custom < limits.custom_frame_min_in:
                return [
                    make_issue(
                        IssueSeverity.ERROR,
                        f'Custom frame height must be at least {fmt(limits.custom_frame_min_in)}"',
                        SectionKey.FRAME,
                        "custom_frame_height_in",
                        code=IssueCode.FRAME_CUSTOM_HEIGHT_TOO_LOW,
                    )
                ]

        height = frame_height_for_record(record).reference_total_in
        if height < limits.frame_design_review_in:
            field_name = (
                "custom_frame_height_in" if mode == FrameHeightMode.CUSTOM else "frame_height_mode"
            )
            return [
                make_issue(
                    IssueSeverity.WARNING,
                    f'Frame height below {fmt(limits.frame_design_review_in)}" requires design review',
                    SectionKey.FRAME,
                    field_name,
                    detail=f'Effective frame height is {fmt(height)}"',
                    code=IssueCode.FRAME_DESIGN_REVIEW,
                )
            ]
        return []
