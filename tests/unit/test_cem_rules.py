"""
Unit tests for the issue rule framework.

Tests rule definitions, registry ordering, and category filtering.
"""

import pytest

from beltline.cem.issues import IssueCode, IssueSeverity, SectionKey, TabKey
from beltline.cem.rules import RuleBase, RuleCategory, RuleContext
from beltline.cem.rules.application import DropHeightRule, MaterialFormRule, PartDimensionsRule
from beltline.cem.rules.build import ConveyorFinishRule, CustomerSpecRule, GuardingFinishRule
from beltline.cem.rules.drive import BeltSpeedRule, SafetyFactorRule
from beltline.cem.rules.physical import (
    ConveyorDimensionsRule,
    FrameHeightRule,
    InclineRule,
    LacingRule,
    PulleyDiameterRule,
)
from beltline.cem.rules.registry import (
    RULE_REGISTRY,
    clear_registry,
    disable_rule,
    enable_rule,
    get_active_rules,
    get_rules_by_category,
    list_rules,
    register_rule,
    restore_registry,
    snapshot_registry,
)
from beltline.config import RuleThresholds
from beltline.inputs import ConfigurationRecord


def ctx(**fields) -> RuleContext:
    return RuleContext(record=ConfigurationRecord.from_mapping(fields))


class TestRuleCategory:
    """Tests for RuleCategory enum."""

    def test_values_match_tabs(self):
        """Every category value names a tab."""
        assert {c.value for c in RuleCategory} == {t.value for t in TabKey}


class TestRuleRegistry:
    """Tests for rule registration and lookup."""

    def setup_method(self):
        self._saved = snapshot_registry()
        clear_registry()

    def teardown_method(self):
        restore_registry(self._saved)

    def test_register_rule(self):
        """Register a new rule."""

        @register_rule("test_rule", order=5)
        class TestRule(RuleBase):
            category = RuleCategory.PHYSICAL
            name = "test_rule"

            def evaluate(self, context):
                return []

        assert "test_rule" in RULE_REGISTRY
        assert list_rules() == ["test_rule"]

    def test_duplicate_registration_rejected(self):
        @register_rule("dup")
        class First(RuleBase):
            category = RuleCategory.BUILD
            name = "dup"

            def evaluate(self, context):
                return []

        with pytest.raises(ValueError, match="already registered"):

            @register_rule("dup")
            class Second(RuleBase):
                category = RuleCategory.BUILD
                name = "dup"

                def evaluate(self, context):
                    return []

    def test_order_beats_registration_order(self):
        """Rules run in ascending order regardless of import order."""

        @register_rule("late", order=200)
        class Late(RuleBase):
            category = RuleCategory.DRIVE
            name = "late"

            def evaluate(self, context):
                return []

        @register_rule("early", order=1)
        class Early(RuleBase):
            category = RuleCategory.APPLICATION
            name = "early"

            def evaluate(self, context):
                return []

        assert list_rules() == ["early", "late"]
        assert [type(r).__name__ for r in get_active_rules()] == ["Early", "Late"]
        assert get_rules_by_category(RuleCategory.DRIVE) == [Late]

    def test_disable_and_enable(self):
        @register_rule("toggle", enabled_by_default=False)
        class Toggle(RuleBase):
            category = RuleCategory.BUILD
            name = "toggle"

            def evaluate(self, context):
                return []

        assert get_active_rules() == []
        assert len(get_active_rules(include_disabled=True)) == 1
        enable_rule("toggle")
        assert len(get_active_rules()) == 1
        disable_rule("toggle")
        assert get_active_rules() == []

    def test_enable_unknown_rule(self):
        with pytest.raises(ValueError, match="Unknown rule"):
            enable_rule("missing")


class TestShippedRuleOrder:
    def test_display_order(self):
        names = list_rules()
        assert names[0] == "material_form_required"
        assert names.index("conveyor_dimensions") < names.index("incline_limits")
        assert names.index("tracking_recommendation") < names.index("min_pulley_diameter")
        assert names[-1] == "frame_height"

    def test_category_filter(self):
        drive_rules = get_active_rules([RuleCategory.DRIVE])
        assert [type(r) for r in drive_rules] == [BeltSpeedRule, SafetyFactorRule]


class TestApplicationRules:
    def test_material_form_missing(self):
        issues = MaterialFormRule().evaluate(ctx())
        assert len(issues) == 1
        assert issues[0].severity == IssueSeverity.ERROR
        assert issues[0].section == SectionKey.PRODUCT
        assert issues[0].tab == TabKey.APPLICATION
        assert issues[0].code is None

    def test_part_dimensions_only_for_parts(self):
        assert PartDimensionsRule().evaluate(ctx(material_form="BULK")) == []
        issues = PartDimensionsRule().evaluate(ctx(material_form="PARTS"))
        assert [i.field_keys for i in issues] == [
            ("part_weight_lbs",),
            ("part_length_in",),
            ("part_width_in",),
        ]

    def test_part_wider_than_belt(self):
        issues = PartDimensionsRule().evaluate(
            ctx(material_form="PARTS", part_weight_lbs=1, part_length_in=5, part_width_in=30, belt_width_in=24)
        )
        assert len(issues) == 1
        assert issues[0].severity == IssueSeverity.WARNING

    def test_drop_height_threshold(self):
        assert DropHeightRule().evaluate(ctx(drop_height_in=24)) == []
        assert len(DropHeightRule().evaluate(ctx(drop_height_in=25))) == 1


class TestPhysicalRules:
    def test_dimensions_required(self):
        issues = ConveyorDimensionsRule().evaluate(ctx())
        assert {i.field_keys[0] for i in issues} == {"conveyor_length_cc_in", "belt_width_in"}
        assert all(i.is_error for i in issues)

    def test_incline_warning(self):
        issues = InclineRule().evaluate(ctx(conveyor_length_cc_in=100, conveyor_incline_deg=20))
        assert len(issues) == 1
        assert issues[0].is_warning
        assert issues[0].detail == "Incline of 20° exceeds typical limit for smooth belt"

    def test_incline_at_limit_is_quiet(self):
        assert InclineRule().evaluate(ctx(conveyor_length_cc_in=100, conveyor_incline_deg=15)) == []

    def test_incline_beyond_hard_limit(self):
        issues = InclineRule().evaluate(ctx(conveyor_length_cc_in=100, conveyor_incline_deg=50))
        assert issues[0].is_error
        assert issues[0].code == IssueCode.INCLINE_UNSUPPORTED

    def test_steep_tob_heights_are_unsupported(self):
        """The derived angle clamps to 45°, but 100" over a 10" run is ~84.3°."""
        issues = InclineRule().evaluate(
            ctx(geometry_mode="H_TOB", horizontal_run_in=10, tail_tob_in=0, drive_tob_in=100)
        )
        assert len(issues) == 1
        assert issues[0].is_error
        assert issues[0].code == IssueCode.INCLINE_UNSUPPORTED
        assert issues[0].detail == "Incline of 84.3° is not supported without positive engagement"

    def test_steep_rise_is_unsupported(self):
        issues = InclineRule().evaluate(ctx(geometry_mode="H_RISE", horizontal_run_in=10, input_rise_in=30))
        assert issues[0].code == IssueCode.INCLINE_UNSUPPORTED
        assert "71.6°" in issues[0].detail

    def test_pulley_floor(self):
        issues = PulleyDiameterRule().evaluate(ctx(drive_pulley_diameter_in=1.5, tail_pulley_diameter_in=4))
        assert len(issues) == 1
        assert issues[0].message == 'Drive pulley diameter must be at least 2"'

    def test_lacing_material(self):
        assert LacingRule().evaluate(ctx(lacing_style="Endless")) == []
        assert LacingRule().evaluate(ctx(lacing_style="Clipper", lacing_material="steel")) == []
        assert len(LacingRule().evaluate(ctx(lacing_style="Clipper"))) == 1

    def test_frame_low_profile_with_cleats(self):
        issues = FrameHeightRule().evaluate(ctx(frame_height_mode="Low Profile", cleats_enabled=True))
        assert issues[0].code == IssueCode.FRAME_LOW_PROFILE_CLEATS

    def test_frame_custom_height(self):
        rule = FrameHeightRule()
        assert rule.evaluate(ctx(frame_height_mode="Custom"))[0].code == (
            IssueCode.FRAME_CUSTOM_HEIGHT_REQUIRED
        )
        assert rule.evaluate(ctx(frame_height_mode="Custom", custom_frame_height_in=2.5))[0].code == (
            IssueCode.FRAME_CUSTOM_HEIGHT_TOO_LOW
        )
        review = rule.evaluate(ctx(frame_height_mode="Custom", custom_frame_height_in=3.5))
        assert review[0].code == IssueCode.FRAME_DESIGN_REVIEW
        assert review[0].field_keys == ("custom_frame_height_in",)
        assert rule.evaluate(ctx(frame_height_mode="Custom", custom_frame_height_in=8)) == []

    def test_standard_frame_is_quiet(self):
        assert FrameHeightRule().evaluate(ctx(frame_height_mode="Standard")) == []


class TestDriveRules:
    def test_speed(self):
        assert BeltSpeedRule().evaluate(ctx()) == []
        assert BeltSpeedRule().evaluate(ctx(belt_speed_fpm=0))[0].is_error
        assert BeltSpeedRule().evaluate(ctx(belt_speed_fpm=301))[0].is_warning

    def test_safety_factor(self):
        assert SafetyFactorRule().evaluate(ctx()) == []
        low = SafetyFactorRule().evaluate(ctx(safety_factor=0.8))
        assert low[0].message == "Safety factor must be at least 1.0"
        high = SafetyFactorRule().evaluate(ctx(safety_factor=6))
        assert high[0].message == "Safety factor above 5.0 is unusually high"

    def test_thresholds_are_configurable(self):
        context = RuleContext(
            record=ConfigurationRecord(belt_speed_fpm=150),
            thresholds=RuleThresholds(belt_speed_warn_fpm=100),
        )
        assert BeltSpeedRule().evaluate(context)[0].is_warning


class TestBuildRules:
    def test_customer_spec_reference(self):
        assert CustomerSpecRule().evaluate(ctx(spec_source="STANDARD")) == []
        assert CustomerSpecRule().evaluate(ctx(spec_source="CUSTOMER_SPEC"))[0].is_error
        assert CustomerSpecRule().evaluate(
            ctx(spec_source="CUSTOMER_SPEC", customer_spec_reference="SPEC-42")
        ) == []

    def test_powder_coat_needs_color(self):
        issues = ConveyorFinishRule().evaluate(ctx())
        assert [i.code for i in issues] == [IssueCode.FINISH_COLOR_REQUIRED]

    def test_custom_color_needs_note(self):
        issues = ConveyorFinishRule().evaluate(
            ctx(finish_powder_color_code="CUSTOM", finish_custom_note="   ")
        )
        assert [i.code for i in issues] == [IssueCode.FINISH_NOTE_REQUIRED]
        assert issues[0].message == "Custom color details required"

    def test_wet_paint_needs_note_not_color(self):
        issues = GuardingFinishRule().evaluate(ctx(guarding_coating_method="wet_paint"))
        assert [i.code for i in issues] == [IssueCode.GUARDING_NOTE_REQUIRED]
        assert issues[0].message == "Wet paint details required"
        assert GuardingFinishRule().evaluate(
            ctx(guarding_coating_method="wet_paint", guarding_custom_note="Safety yellow, gloss")
        ) == []
