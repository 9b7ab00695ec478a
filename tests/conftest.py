"""
Pytest configuration for the beltline test suite.

Thresholds are pinned to the built-in defaults so a developer's
BELTLINE_THRESHOLDS file never changes test outcomes.
"""

import os

import pytest

os.environ.pop("BELTLINE_THRESHOLDS", None)

from beltline.inputs import ConfigurationRecord  # noqa: E402

VALID_FIELDS = {
    "geometry_mode": "L_ANGLE",
    "conveyor_length_cc_in": 120.0,
    "conveyor_incline_deg": 0.0,
    "belt_width_in": 24.0,
    "pulley_diameter_in": 4.0,
    "material_form": "PARTS",
    "part_weight_lbs": 5.0,
    "part_length_in": 10.0,
    "part_width_in": 8.0,
    "drop_height_in": 6.0,
    "part_spacing_in": 4.0,
    "belt_speed_fpm": 65.0,
    "safety_factor": 2.0,
    "lacing_style": "Endless",
    "frame_height_mode": "Standard",
    "finish_coating_method": "powder_coat",
    "finish_powder_color_code": "RAL5015",
    "guarding_coating_method": "powder_coat",
    "guarding_powder_color_code": "RAL1003",
}


@pytest.fixture
def valid_fields():
    """Plain mapping for a configuration that raises no errors or warnings."""
    return dict(VALID_FIELDS)


@pytest.fixture
def valid_record():
    return ConfigurationRecord.from_mapping(VALID_FIELDS)


@pytest.fixture(autouse=True)
def _no_threshold_file(monkeypatch):
    monkeypatch.delenv("BELTLINE_THRESHOLDS", raising=False)
