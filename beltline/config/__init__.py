"""beltline.config - Rule thresholds and YAML configuration loading."""

from .load import (
    THRESHOLDS_ENV,
    RuleThresholds,
    default_thresholds,
    load_cfg,
    load_thresholds,
    thresholds_from_mapping,
)

__all__ = [
    "THRESHOLDS_ENV",
    "RuleThresholds",
    "default_thresholds",
    "load_cfg",
    "load_thresholds",
    "thresholds_from_mapping",
]
