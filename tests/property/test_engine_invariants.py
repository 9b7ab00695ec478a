from hypothesis import given, settings
from hypothesis import strategies as st

from beltline.cem import IssueSeverity, evaluate
from beltline.cem.issues import TAB_SECTIONS
from beltline.frame import calculate_frame_height
from beltline.inputs import ConfigurationRecord, FrameHeightMode
from beltline.pulley import resolve_min_pulley

optional_dims = st.one_of(st.none(), st.floats(min_value=-10.0, max_value=500.0, allow_nan=False))

records = st.builds(
    ConfigurationRecord,
    material_form=st.sampled_from([None, "PARTS", "BULK"]),
    part_weight_lbs=optional_dims,
    part_width_in=optional_dims,
    conveyor_length_cc_in=optional_dims,
    conveyor_incline_deg=st.one_of(st.none(), st.floats(min_value=-60.0, max_value=60.0)),
    belt_width_in=optional_dims,
    belt_speed_fpm=optional_dims,
    safety_factor=st.one_of(st.none(), st.floats(min_value=0.0, max_value=10.0)),
    cleats_mode=st.sampled_from([None, "none", "cleated"]),
    cleats_enabled=st.sampled_from([None, False, True]),
    frame_height_mode=st.sampled_from([None, "Standard", "Low Profile", "Custom"]),
    custom_frame_height_in=optional_dims,
    finish_coating_method=st.sampled_from([None, "powder_coat", "wet_paint"]),
    belt_min_pulley_dia_no_vguide_in=optional_dims,
)


@settings(max_examples=50)
@given(record=records)
def test_counts_agree_with_issue_list(record):
    result = evaluate(record)
    errors = sum(1 for i in result.issues if i.severity == IssueSeverity.ERROR)
    warnings = sum(1 for i in result.issues if i.severity == IssueSeverity.WARNING)
    assert result.error_count == errors
    assert result.warning_count == warnings
    for tab, sections in TAB_SECTIONS.items():
        assert result.tab_counts[tab].errors == sum(result.section_counts[s].errors for s in sections)


@settings(max_examples=50)
@given(record=records)
def test_evaluation_is_deterministic(record):
    assert evaluate(record).issues == evaluate(record).issues


@settings(max_examples=50)
@given(
    drive=st.floats(min_value=2.0, max_value=24.0),
    tail=st.floats(min_value=2.0, max_value=24.0),
    cleat=st.floats(min_value=0.0, max_value=4.0),
    extra=st.floats(min_value=0.0, max_value=4.0),
)
def test_frame_height_monotonic_in_cleat_height(drive, tail, cleat, extra):
    lower = calculate_frame_height(drive, tail, cleat, mode=FrameHeightMode.STANDARD)
    higher = calculate_frame_height(drive, tail, cleat + extra, mode=FrameHeightMode.STANDARD)
    assert higher.required_total_in >= lower.required_total_in
    assert lower.reference_total_in >= lower.required_total_in


@settings(max_examples=50)
@given(
    belt=st.floats(min_value=0.5, max_value=20.0),
    vguide=st.floats(min_value=0.5, max_value=20.0),
    spacing=st.floats(min_value=1.0, max_value=24.0),
)
def test_governing_minimum_is_largest_candidate(belt, vguide, spacing):
    result = resolve_min_pulley(
        belt_min_with_vguide=belt,
        is_vguided=True,
        vguide_min_solid=vguide,
        cleats_enabled=True,
        cleat_method="hot_welded",
        cleat_spacing_in=spacing,
    )
    assert result.governing_in == max(c.value_in for c in result.candidates)
    assert result.governing_in >= belt


@settings(max_examples=50)
@given(
    drive=st.floats(min_value=2.0, max_value=24.0),
    tail=st.floats(min_value=2.0, max_value=24.0),
    extra=st.floats(min_value=0.0, max_value=12.0),
    mode=st.sampled_from([FrameHeightMode.STANDARD, FrameHeightMode.LOW_PROFILE]),
)
def test_frame_height_monotonic_in_pulley_od(drive, tail, extra, mode):
    base = calculate_frame_height(drive, tail, mode=mode)
    bigger_drive = calculate_frame_height(drive + extra, tail, mode=mode)
    bigger_tail = calculate_frame_height(drive, tail + extra, mode=mode)
    assert bigger_drive.required_total_in >= base.required_total_in
    assert bigger_tail.required_total_in >= base.required_total_in
    assert bigger_drive.reference_total_in >= base.reference_total_in
    assert bigger_tail.reference_total_in >= base.reference_total_in


@settings(max_examples=50)
@given(
    drive=st.floats(min_value=2.0, max_value=24.0),
    tail=st.floats(min_value=2.0, max_value=24.0),
    clearance=st.floats(min_value=0.0, max_value=6.0),
    extra=st.floats(min_value=0.0, max_value=6.0),
    mode=st.sampled_from([FrameHeightMode.STANDARD, FrameHeightMode.LOW_PROFILE]),
)
def test_reference_height_monotonic_in_clearance(drive, tail, clearance, extra, mode):
    lower = calculate_frame_height(drive, tail, mode=mode, clearance_in=clearance)
    higher = calculate_frame_height(drive, tail, mode=mode, clearance_in=clearance + extra)
    assert higher.reference_total_in >= lower.reference_total_in
    assert higher.required_total_in == lower.required_total_in
