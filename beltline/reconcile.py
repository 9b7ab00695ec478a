"""
Configuration reconciliation: explicit caller-side fix-ups run before the engine.

Derivations never write back into the configuration. Where a field has to
follow another source (a persisted pulley, the selected V-guide, a forbidden
mode combination, a geometry mode switch) the caller runs one of these steps,
persists the returned record, and shows any notices to the user.

Usage:
    from beltline.reconcile import reconcile

    result = reconcile(record, pulleys=line_pulleys, vguide=vguide_spec)
    for notice in result.notices:
        toast(notice.message)
    record = result.record
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from beltline.geometry import normalize_geometry, opposite_tob_from_angle
from beltline.inputs import ConfigurationRecord, FrameHeightMode, GeometryMode
from beltline.logging import get_logger

log = get_logger(__name__)

LOW_PROFILE_CLEATS_NOTICE = "Switched to Standard: Low Profile not allowed with cleats."


class PulleyPosition(str, Enum):
    DRIVE = "DRIVE"
    TAIL = "TAIL"


@dataclass(frozen=True)
class PulleyConfig:
    """Persisted pulley for one end of a conveyor line."""

    position: PulleyPosition
    finished_od_in: Optional[float] = None
    shell_od_in: Optional[float] = None
    shell_wall_in: Optional[float] = None
    face_width_in: Optional[float] = None


@dataclass(frozen=True)
class VGuideSpec:
    """Minimum pulley diameters for the selected V-guide profile."""

    min_pulley_dia_solid_in: Optional[float] = None
    min_pulley_dia_notched_in: Optional[float] = None
    min_pulley_dia_solid_pu_in: Optional[float] = None
    min_pulley_dia_notched_pu_in: Optional[float] = None


@dataclass(frozen=True)
class ReconciliationNotice:
    """A field the reconciliation changed, with a user-facing message."""

    field: str
    old_value: Any
    new_value: Any
    message: str = ""


@dataclass
class ReconciliationResult:
    record: ConfigurationRecord
    notices: list[ReconciliationNotice] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.notices)


def _apply(
    result: ReconciliationResult, updates: dict[str, Any], message: str = ""
) -> None:
    """Apply only the updates that differ, recording a notice for each."""
    changes = {
        name: value
        for name, value in updates.items()
        if getattr(result.record, name) != value
    }
    if not changes:
        return
    for name, value in changes.items():
        result.notices.append(
            ReconciliationNotice(name, getattr(result.record, name), value, message)
        )
    result.record = result.record.replace(**changes)


# =============================================================================
# Steps
# =============================================================================


def enforce_frame_mode(record: ConfigurationRecord) -> ReconciliationResult:
    """Low Profile frames cannot carry cleats; force Standard when both are set."""
    result = ReconciliationResult(record)
    if record.frame_height_mode == FrameHeightMode.LOW_PROFILE and record.cleats_on:
        log.info("Low Profile frame with cleats enabled; switching to Standard")
        _apply(
            result,
            {"frame_height_mode": FrameHeightMode.STANDARD},
            LOW_PROFILE_CLEATS_NOTICE,
        )
    return result


def sync_pulleys(
    record: ConfigurationRecord, pulleys: Iterable[PulleyConfig]
) -> ReconciliationResult:
    """Copy persisted pulley dimensions into the record.

    Ends flagged as manually overridden keep their entered values. Missing
    or zero persisted values leave the record untouched.
    """
    result = ReconciliationResult(record)
    by_position = {PulleyPosition(p.position): p for p in pulleys}

    drive = by_position.get(PulleyPosition.DRIVE)
    if drive is not None and not record.drive_pulley_manual_override:
        updates: dict[str, Any] = {}
        if drive.finished_od_in:
            updates["drive_pulley_diameter_in"] = drive.finished_od_in
            updates["pulley_diameter_in"] = drive.finished_od_in
        if drive.shell_od_in:
            updates["drive_tube_od_in"] = drive.shell_od_in
        if drive.shell_wall_in:
            updates["drive_tube_wall_in"] = drive.shell_wall_in
        if drive.face_width_in:
            updates["drive_pulley_face_width_in"] = drive.face_width_in
        _apply(result, updates)

    tail = by_position.get(PulleyPosition.TAIL)
    if tail is not None and not record.tail_pulley_manual_override:
        updates = {}
        if tail.finished_od_in:
            updates["tail_pulley_diameter_in"] = tail.finished_od_in
        if tail.shell_od_in:
            updates["tail_tube_od_in"] = tail.shell_od_in
        if tail.shell_wall_in:
            updates["tail_tube_wall_in"] = tail.shell_wall_in
        if tail.face_width_in:
            updates["tail_pulley_face_width_in"] = tail.face_width_in
        _apply(result, updates)

    return result


def sync_vguide(
    record: ConfigurationRecord, vguide: Optional[VGuideSpec]
) -> ReconciliationResult:
    """Copy V-guide minimums into the record; no V-guide clears them."""
    vguide = vguide or VGuideSpec()
    result = ReconciliationResult(record)
    _apply(
        result,
        {
            "vguide_min_pulley_dia_solid_in": vguide.min_pulley_dia_solid_in,
            "vguide_min_pulley_dia_notched_in": vguide.min_pulley_dia_notched_in,
            "vguide_min_pulley_dia_solid_pu_in": vguide.min_pulley_dia_solid_pu_in,
            "vguide_min_pulley_dia_notched_pu_in": vguide.min_pulley_dia_notched_pu_in,
        },
    )
    return result


def switch_geometry_mode(
    record: ConfigurationRecord, new_mode: GeometryMode
) -> ReconciliationResult:
    """Change geometry mode, persisting the new mode's primary fields.

    The new primaries come from the geometry derived under the current mode,
    so nothing the user entered is lost. An invalid current geometry only
    switches the mode.
    """
    _, derived = normalize_geometry(record)
    result = ReconciliationResult(record)
    updates: dict[str, Any] = {"geometry_mode": new_mode}

    if derived.is_valid:
        if new_mode == GeometryMode.L_ANGLE:
            updates["conveyor_length_cc_in"] = derived.length_cc_in
            updates["conveyor_incline_deg"] = derived.incline_deg
        elif new_mode == GeometryMode.H_ANGLE:
            updates["horizontal_run_in"] = derived.horizontal_run_in
            updates["conveyor_incline_deg"] = derived.incline_deg
        elif new_mode == GeometryMode.H_RISE:
            updates["horizontal_run_in"] = derived.horizontal_run_in
            updates["input_rise_in"] = derived.rise_in
        elif new_mode == GeometryMode.H_TOB:
            updates["horizontal_run_in"] = derived.horizontal_run_in
            updates.update(_tob_updates(record, derived))

    _apply(result, updates)
    log.debug("Geometry mode %s -> %s", record.geometry_mode, new_mode)
    return result


def _tob_updates(record: ConfigurationRecord, derived) -> dict[str, float]:
    """Fill in whichever TOB is missing from the other and the incline."""
    tail_tob, drive_tob = record.tail_tob_in, record.drive_tob_in
    if tail_tob is not None and drive_tob is None:
        return {
            "drive_tob_in": opposite_tob_from_angle(
                tail_tob,
                derived.incline_deg,
                derived.horizontal_run_in,
                derived.tail_pulley_dia_in,
                derived.drive_pulley_dia_in,
                known_end="tail",
            )
        }
    if drive_tob is not None and tail_tob is None:
        return {
            "tail_tob_in": opposite_tob_from_angle(
                drive_tob,
                derived.incline_deg,
                derived.horizontal_run_in,
                derived.drive_pulley_dia_in,
                derived.tail_pulley_dia_in,
                known_end="drive",
            )
        }
    return {}


def reconcile(
    record: ConfigurationRecord,
    pulleys: Optional[Iterable[PulleyConfig]] = None,
    vguide: Optional[VGuideSpec] = None,
) -> ReconciliationResult:
    """Run pulley sync, V-guide sync (when given) and frame-mode enforcement."""
    result = ReconciliationResult(record)
    steps = []
    if pulleys is not None:
        steps.append(lambda r: sync_pulleys(r, pulleys))
    if vguide is not None:
        steps.append(lambda r: sync_vguide(r, vguide))
    steps.append(enforce_frame_mode)

    for step in steps:
        step_result = step(result.record)
        result.record = step_result.record
        result.notices.extend(step_result.notices)
    return result
