from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict

import yaml

from beltline.constants import (
    DESIGN_REVIEW_FRAME_HEIGHT,
    MAX_INCLINE,
    MIN_FRAME_HEIGHT,
    MIN_PULLEY_FLOOR,
    MIN_PULLEY_ROUNDING,
)
from beltline.logging import get_logger

log = get_logger(__name__)

THRESHOLDS_ENV = "BELTLINE_THRESHOLDS"


@dataclass(frozen=True)
class RuleThresholds:
    """Numeric limits used by the issue rules.

    Defaults match the shipped rule set; a deployment may override any of
    them from a YAML file.
    """

    drop_height_warn_in: float = 24.0
    incline_warn_deg: float = 15.0
    incline_error_deg: float = MAX_INCLINE.value
    belt_speed_warn_fpm: float = 300.0
    safety_factor_min: float = 1.0
    safety_factor_warn: float = 5.0
    safety_factor_default: float = 2.0
    min_pulley_dia_in: float = MIN_PULLEY_FLOOR.value
    custom_frame_min_in: float = MIN_FRAME_HEIGHT.value
    frame_design_review_in: float = DESIGN_REVIEW_FRAME_HEIGHT.value
    min_pulley_round_in: float = MIN_PULLEY_ROUNDING.value

    def __post_init__(self) -> None:
        if self.safety_factor_min > self.safety_factor_warn:
            raise ValueError(
                "safety_factor_min must not exceed safety_factor_warn "
                f"({self.safety_factor_min} > {self.safety_factor_warn})"
            )
        if self.incline_warn_deg > self.incline_error_deg:
            raise ValueError(
                "incline_warn_deg must not exceed incline_error_deg "
                f"({self.incline_warn_deg} > {self.incline_error_deg})"
            )
        if self.min_pulley_round_in <= 0:
            raise ValueError("min_pulley_round_in must be positive")


def load_cfg(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Configuration root must be a mapping")
    return cfg


def thresholds_from_mapping(data: Dict[str, Any]) -> RuleThresholds:
    """Build thresholds from a mapping, rejecting unknown keys.

    A nested ``thresholds:`` section is accepted so the same file can carry
    other settings.
    """
    section = data.get("thresholds", data)
    if not isinstance(section, dict):
        raise ValueError("'thresholds' section must be a mapping")

    known = {f.name for f in fields(RuleThresholds)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ValueError(f"Unknown threshold keys: {', '.join(unknown)}")

    overrides: Dict[str, float] = {}
    for key, value in section.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Threshold '{key}' must be numeric, got {value!r}")
        overrides[key] = float(value)

    return replace(RuleThresholds(), **overrides)


def load_thresholds(path: str | Path) -> RuleThresholds:
    """Load rule thresholds from a YAML file."""
    thresholds = thresholds_from_mapping(load_cfg(path))
    log.debug("Loaded rule thresholds from %s", path)
    return thresholds


def default_thresholds() -> RuleThresholds:
    """Thresholds from ``$BELTLINE_THRESHOLDS`` if set, else the defaults."""
    path = os.getenv(THRESHOLDS_ENV)
    if not path:
        return RuleThresholds()
    if not Path(path).is_file():
        log.warning("%s points to missing file %s; using defaults", THRESHOLDS_ENV, path)
        return RuleThresholds()
    return load_thresholds(path)
