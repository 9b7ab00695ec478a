"""beltline.cem - Configuration issue engine: rules, aggregation and indicators."""

from .issues import (
    SECTION_TAB,
    TAB_SECTIONS,
    Counts,
    Issue,
    IssueCode,
    IssueSeverity,
    MinPulleyData,
    SectionCounts,
    SectionKey,
    TabCounts,
    TabKey,
)
from .engine import (
    IssueAggregation,
    IssueEngine,
    aggregate_issues,
    compute_issues,
    evaluate,
    record_hash,
)
from .fields import FIELD_TO_SECTION, FieldMapping, field_mapping, field_section, field_tab
from .indicators import IndicatorStatus, indicator_status, indicator_text

__all__ = [
    "Counts",
    "FIELD_TO_SECTION",
    "FieldMapping",
    "IndicatorStatus",
    "Issue",
    "IssueAggregation",
    "IssueCode",
    "IssueEngine",
    "IssueSeverity",
    "MinPulleyData",
    "SECTION_TAB",
    "SectionCounts",
    "SectionKey",
    "TAB_SECTIONS",
    "TabCounts",
    "TabKey",
    "aggregate_issues",
    "compute_issues",
    "evaluate",
    "field_mapping",
    "field_section",
    "field_tab",
    "indicator_status",
    "indicator_text",
    "record_hash",
]
