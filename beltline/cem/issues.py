"""
Issue model for the configuration engine.

Issues are value objects regenerated on every computation. Each one is
addressed to a tab and a section so the UI can light status indicators, and
may carry a stable machine code plus structured payloads for banners.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from beltline.tracking import TrackingRecommendation


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCode(str, Enum):
    """Stable machine-readable codes; UI banners key off these values."""

    # Tracking
    TRACKING_RECOMMENDATION = "TRACKING_RECOMMENDATION"
    # Min pulley
    MIN_PULLEY_DRIVE_TOO_SMALL = "MIN_PULLEY_DRIVE_TOO_SMALL"
    MIN_PULLEY_TAIL_TOO_SMALL = "MIN_PULLEY_TAIL_TOO_SMALL"
    # Cleats
    CLEATS_PROFILE_REQUIRED = "CLEATS_PROFILE_REQUIRED"
    CLEATS_SIZE_REQUIRED = "CLEATS_SIZE_REQUIRED"
    CLEATS_DRILL_SIPED_CAUTION = "CLEATS_DRILL_SIPED_CAUTION"
    # Finish
    FINISH_COLOR_REQUIRED = "FINISH_COLOR_REQUIRED"
    FINISH_NOTE_REQUIRED = "FINISH_NOTE_REQUIRED"
    GUARDING_COLOR_REQUIRED = "GUARDING_COLOR_REQUIRED"
    GUARDING_NOTE_REQUIRED = "GUARDING_NOTE_REQUIRED"
    # Frame
    FRAME_CUSTOM_HEIGHT_REQUIRED = "FRAME_CUSTOM_HEIGHT_REQUIRED"
    FRAME_CUSTOM_HEIGHT_TOO_LOW = "FRAME_CUSTOM_HEIGHT_TOO_LOW"
    FRAME_DESIGN_REVIEW = "FRAME_DESIGN_REVIEW"
    FRAME_LOW_PROFILE_CLEATS = "FRAME_LOW_PROFILE_CLEATS"
    # Geometry
    INCLINE_UNSUPPORTED = "INCLINE_UNSUPPORTED"


class TabKey(str, Enum):
    APPLICATION = "application"
    PHYSICAL = "physical"
    DRIVE = "drive"
    BUILD = "build"


class SectionKey(str, Enum):
    # application
    PRODUCT = "product"
    THROUGHPUT = "throughput"
    ENVIRONMENT = "environment"
    # physical
    GEOMETRY = "geometry"
    BELT_PULLEYS = "beltPulleys"
    FRAME = "frame"
    # drive
    SPEED = "speed"
    ELECTRICAL = "electrical"
    DRIVE = "drive"
    ADVANCED = "advanced"
    # build
    SUPPORT = "support"
    GUARDS = "guards"
    GUIDES = "guides"
    BELTPULLEY = "beltpulley"
    SENSORS = "sensors"
    DOCUMENTATION = "documentation"


# Adding a section means adding it here; counts are initialized from this map.
TAB_SECTIONS: dict[TabKey, tuple[SectionKey, ...]] = {
    TabKey.APPLICATION: (SectionKey.PRODUCT, SectionKey.THROUGHPUT, SectionKey.ENVIRONMENT),
    TabKey.PHYSICAL: (SectionKey.GEOMETRY, SectionKey.BELT_PULLEYS, SectionKey.FRAME),
    TabKey.DRIVE: (SectionKey.SPEED, SectionKey.ELECTRICAL, SectionKey.DRIVE, SectionKey.ADVANCED),
    TabKey.BUILD: (
        SectionKey.SUPPORT,
        SectionKey.GUARDS,
        SectionKey.GUIDES,
        SectionKey.BELTPULLEY,
        SectionKey.SENSORS,
        SectionKey.DOCUMENTATION,
    ),
}

SECTION_TAB: dict[SectionKey, TabKey] = {
    section: tab for tab, sections in TAB_SECTIONS.items() for section in sections
}


@dataclass(frozen=True)
class MinPulleyData:
    """Banner payload for undersized pulleys."""

    required_in: float
    current_in: float
    is_vguided: bool
    cleat_multiplier: Optional[float] = None


@dataclass(frozen=True)
class Issue:
    severity: IssueSeverity
    message: str
    tab: TabKey
    section: SectionKey
    detail: Optional[str] = None
    field_keys: tuple[str, ...] = field(default_factory=tuple)
    code: Optional[IssueCode] = None
    tracking_data: Optional[TrackingRecommendation] = None
    min_pulley_data: Optional[MinPulleyData] = None

    def __post_init__(self) -> None:
        if SECTION_TAB[self.section] != self.tab:
            raise ValueError(
                f"Section '{self.section.value}' belongs to tab "
                f"'{SECTION_TAB[self.section].value}', not '{self.tab.value}'"
            )

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR

    @property
    def is_warning(self) -> bool:
        return self.severity == IssueSeverity.WARNING


def make_issue(
    severity: IssueSeverity,
    message: str,
    section: SectionKey,
    *field_keys: str,
    **kwargs,
) -> Issue:
    """Issue with its tab derived from the section."""
    return Issue(
        severity=severity,
        message=message,
        tab=SECTION_TAB[section],
        section=section,
        field_keys=tuple(field_keys),
        **kwargs,
    )


@dataclass
class Counts:
    """Error/warning tally for one section or tab."""

    errors: int = 0
    warnings: int = 0

    def add(self, issue: Issue) -> None:
        if issue.severity == IssueSeverity.ERROR:
            self.errors += 1
        elif issue.severity == IssueSeverity.WARNING:
            self.warnings += 1


# Section and tab tallies share a shape
SectionCounts = Counts
TabCounts = Counts
