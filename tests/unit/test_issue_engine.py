"""
Unit tests for the Issue Engine: computation, aggregation, caching and
the status-indicator helpers.
"""

from dataclasses import fields

import pytest

from beltline.cem import (
    FIELD_TO_SECTION,
    Counts,
    IndicatorStatus,
    Issue,
    IssueCode,
    IssueEngine,
    IssueSeverity,
    SectionKey,
    TabKey,
    aggregate_issues,
    compute_issues,
    evaluate,
    field_mapping,
    field_section,
    field_tab,
    indicator_status,
    indicator_text,
    record_hash,
)
from beltline.cem.issues import SECTION_TAB, TAB_SECTIONS
from beltline.inputs import ConfigurationRecord
from beltline.tracking import TrackingMode


class TestComputeIssues:
    def test_valid_record_has_no_errors_or_warnings(self, valid_record):
        issues = compute_issues(valid_record)
        assert [i for i in issues if i.severity != IssueSeverity.INFO] == []

    def test_tracking_info_always_emitted(self, valid_record):
        issues = compute_issues(valid_record)
        tracking = [i for i in issues if i.code == IssueCode.TRACKING_RECOMMENDATION]
        assert len(tracking) == 1
        assert tracking[0].severity == IssueSeverity.INFO
        assert tracking[0].tracking_data is not None
        assert tracking[0].message == "Recommended: Crowned Pulleys"

    def test_steep_tob_geometry_is_unsupported(self, valid_record):
        record = valid_record.replace(
            geometry_mode="H_TOB", horizontal_run_in=10, tail_tob_in=0, drive_tob_in=100
        )
        result = evaluate(record)
        unsupported = [i for i in result.issues if i.code == IssueCode.INCLINE_UNSUPPORTED]
        assert len(unsupported) == 1
        assert unsupported[0].section == SectionKey.GEOMETRY

    def test_tracking_banner_at_half_tenth_ratio(self, valid_record):
        """101/20 = 5.05 rounds up into the medium band."""
        record = valid_record.replace(
            conveyor_length_cc_in=101, belt_width_in=20, disturbance_side_loading=True
        )
        tracking = evaluate(record).tracking_issue()
        assert tracking.tracking_data.lw_ratio == 5.1
        assert tracking.tracking_data.mode == TrackingMode.HYBRID
        assert tracking.message == "Recommended: Hybrid (Crowned + V-Guide)"

    def test_missing_material_form(self, valid_fields):
        """Exactly one error, uncoded, in application/product."""
        valid_fields.pop("material_form")
        result = evaluate(valid_fields)
        errors = [i for i in result.issues if i.is_error]
        assert len(errors) == 1
        assert errors[0].code is None
        assert errors[0].section == SectionKey.PRODUCT
        assert errors[0].tab == TabKey.APPLICATION
        assert result.section_counts[SectionKey.PRODUCT].errors == 1
        assert result.tab_counts[TabKey.APPLICATION].errors == 1

    def test_issues_follow_rule_order(self, valid_record):
        record = valid_record.replace(material_form=None, conveyor_incline_deg=20, belt_speed_fpm=400)
        sections = [i.section for i in compute_issues(record) if i.severity != IssueSeverity.INFO]
        assert sections == [SectionKey.PRODUCT, SectionKey.GEOMETRY, SectionKey.SPEED]

    def test_category_filter(self, valid_record):
        record = valid_record.replace(material_form=None, belt_speed_fpm=-1)
        from beltline.cem.rules import RuleCategory

        issues = compute_issues(record, categories=[RuleCategory.DRIVE])
        assert [i.section for i in issues] == [SectionKey.SPEED]

    def test_min_pulley_payload(self, valid_record):
        record = valid_record.replace(
            belt_min_pulley_dia_with_vguide_in=10,
            belt_tracking_method="V-guided",
            vguide_min_pulley_dia_solid_in=9,
            cleats_enabled=True,
            cleats_mode="cleated",
            cleat_profile="T-CLEAT",
            cleat_size="1in",
            belt_cleat_method="hot_welded",
            cleat_spacing_in=6,
            drive_pulley_diameter_in=8,
            tail_pulley_diameter_in=14,
        )
        result = evaluate(record)
        found = result.min_pulley_issues()
        assert [i.code for i in found] == [IssueCode.MIN_PULLEY_DRIVE_TOO_SMALL]
        payload = found[0].min_pulley_data
        assert payload.required_in == pytest.approx(12.5)
        assert payload.current_in == 8
        assert payload.is_vguided is True
        assert payload.cleat_multiplier == pytest.approx(1.25)
        assert found[0].message == 'Drive pulley below minimum (12.5")'
        assert found[0].detail == 'Current: 8", Required: 12.5" for V-guided tracking'

    def test_tail_falls_back_to_drive(self, valid_record):
        record = valid_record.replace(belt_min_pulley_dia_no_vguide_in=6)
        codes = [i.code for i in evaluate(record).min_pulley_issues()]
        assert codes == [IssueCode.MIN_PULLEY_DRIVE_TOO_SMALL, IssueCode.MIN_PULLEY_TAIL_TOO_SMALL]

    def test_cleat_codes(self, valid_record):
        record = valid_record.replace(cleats_mode="cleated", cleat_style="DRILL_SIPED_1IN")
        codes = [i.code for i in evaluate(record).issues if i.code is not None]
        assert IssueCode.CLEATS_PROFILE_REQUIRED in codes
        assert IssueCode.CLEATS_SIZE_REQUIRED in codes
        assert IssueCode.CLEATS_DRILL_SIPED_CAUTION in codes

    def test_finish_checked_independently(self, valid_record):
        record = valid_record.replace(finish_powder_color_code=None, guarding_coating_method="wet_paint")
        result = evaluate(record)
        assert [i.code for i in result.issues_with_code(
            IssueCode.FINISH_COLOR_REQUIRED, IssueCode.GUARDING_NOTE_REQUIRED
        )] == [IssueCode.FINISH_COLOR_REQUIRED, IssueCode.GUARDING_NOTE_REQUIRED]
        assert result.section_counts[SectionKey.DOCUMENTATION].errors == 2

    def test_accepts_plain_mapping(self, valid_fields):
        assert evaluate(valid_fields).error_count == 0


class TestAggregation:
    def test_info_is_not_counted(self, valid_record):
        result = evaluate(valid_record)
        assert result.error_count == 0
        assert result.warning_count == 0
        assert not result.has_errors()
        assert result.tracking_issue() is not None

    def test_every_section_initialized(self):
        result = aggregate_issues([])
        assert set(result.section_counts) == set(SECTION_TAB)
        assert set(result.tab_counts) == set(TAB_SECTIONS)

    def test_tab_counts_sum_sections(self, valid_record):
        record = valid_record.replace(
            material_form=None, conveyor_incline_deg=20, belt_speed_fpm=400, safety_factor=0.5
        )
        result = evaluate(record)
        for tab, sections in TAB_SECTIONS.items():
            assert result.tab_counts[tab].errors == sum(result.section_counts[s].errors for s in sections)
            assert result.tab_counts[tab].warnings == sum(
                result.section_counts[s].warnings for s in sections
            )
        assert result.tab_counts[TabKey.DRIVE].errors == 1
        assert result.tab_counts[TabKey.DRIVE].warnings == 1
        assert len(result.issues_for_tab(TabKey.DRIVE)) == 2
        assert len(result.issues_for_section(SectionKey.GEOMETRY)) == 1

    def test_issue_section_must_match_tab(self):
        with pytest.raises(ValueError, match="belongs to tab"):
            Issue(IssueSeverity.ERROR, "bad", TabKey.BUILD, SectionKey.PRODUCT)


class TestIssueEngineCache:
    def test_equal_records_hit(self, valid_record, valid_fields):
        engine = IssueEngine()
        first = engine.evaluate(valid_record)
        second = engine.evaluate(valid_fields)
        assert first is second
        assert engine.hits == 1
        assert engine.misses == 1

    def test_field_change_misses(self, valid_record):
        engine = IssueEngine()
        engine.evaluate(valid_record)
        engine.evaluate(valid_record.replace(belt_speed_fpm=66))
        assert engine.misses == 2
        assert len(engine) == 2

    def test_lru_eviction(self, valid_record):
        engine = IssueEngine(cache_size=2)
        for speed in (60, 61, 62):
            engine.evaluate(valid_record.replace(belt_speed_fpm=speed))
        assert len(engine) == 2
        engine.evaluate(valid_record.replace(belt_speed_fpm=60))
        assert engine.misses == 4

    def test_cache_disabled(self, valid_record):
        engine = IssueEngine(cache_size=0)
        assert engine.evaluate(valid_record) is not engine.evaluate(valid_record)
        assert len(engine) == 0

    def test_clear_cache(self, valid_record):
        engine = IssueEngine()
        engine.evaluate(valid_record)
        engine.clear_cache()
        assert len(engine) == 0
        assert engine.hits == engine.misses == 0

    def test_negative_cache_size(self):
        with pytest.raises(ValueError, match="cache_size"):
            IssueEngine(cache_size=-1)

    def test_hash_ignores_enum_vs_string(self, valid_record, valid_fields):
        assert record_hash(valid_record) == record_hash(valid_fields)
        assert record_hash(valid_record) != record_hash(valid_record.replace(belt_width_in=18))


class TestIndicators:
    def test_status(self):
        assert indicator_status(Counts(errors=1, warnings=3)) == IndicatorStatus.ERROR
        assert indicator_status(Counts(warnings=1)) == IndicatorStatus.WARNING
        assert indicator_status(Counts()) == IndicatorStatus.NONE

    def test_text(self):
        assert indicator_text(Counts(errors=2, warnings=1)) == "2E 1W"
        assert indicator_text(Counts(errors=1)) == "1 error"
        assert indicator_text(Counts(errors=3)) == "3 errors"
        assert indicator_text(Counts(warnings=1)) == "1 warning"
        assert indicator_text(Counts(warnings=2)) == "2 warnings"
        assert indicator_text(Counts()) == ""


class TestFieldMapping:
    def test_known_fields(self):
        assert field_section("belt_speed_fpm") == SectionKey.SPEED
        assert field_tab("belt_speed_fpm") == TabKey.DRIVE
        assert field_mapping("material_form") == (TabKey.APPLICATION, SectionKey.PRODUCT)

    def test_unknown_fields(self):
        assert field_mapping(None) is None
        assert field_section("no_such_field") is None
        assert field_tab("") is None

    def test_mapping_agrees_with_section_tabs(self):
        for mapping in FIELD_TO_SECTION.values():
            assert SECTION_TAB[mapping.section] == mapping.tab

    def test_every_mapped_field_is_a_record_field(self):
        record_fields = {f.name for f in fields(ConfigurationRecord)}
        assert set(FIELD_TO_SECTION) <= record_fields
        assert "target_pph" not in FIELD_TO_SECTION

    def test_rule_fields_map_to_their_sections(self, valid_record):
        record = valid_record.replace(
            material_form=None, belt_speed_fpm=400, safety_factor=9, lacing_style="Clipper"
        )
        for issue in compute_issues(record):
            for key in issue.field_keys:
                if key in FIELD_TO_SECTION:
                    assert FIELD_TO_SECTION[key].section == issue.section
