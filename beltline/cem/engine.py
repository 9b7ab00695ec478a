"""
Issue Engine: run every active rule over a configuration and aggregate.

The whole rule set is re-run on every configuration change; there is no
incremental evaluation. Because the computation is pure, IssueEngine can
memoize results keyed by a content hash of the record (never by object
identity), which avoids recomputation when the same snapshot is validated
more than once in a render cycle.

Usage:
    from beltline.cem import IssueEngine

    engine = IssueEngine()
    result = engine.evaluate(record)
    for issue in result.issues_for_tab(TabKey.PHYSICAL):
        print(f"[{issue.severity.value}] {issue.message}")
    banner = result.tracking_issue()
"""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from beltline.config import RuleThresholds, default_thresholds
from beltline.inputs import ConfigurationRecord
from beltline.logging import get_logger

from .issues import (
    SECTION_TAB,
    TAB_SECTIONS,
    Counts,
    Issue,
    IssueCode,
    IssueSeverity,
    SectionKey,
    TabKey,
)
from .rules import RuleCategory, RuleContext
from .rules import application, build, drive, physical  # noqa: F401  (registers rules)
from .rules.registry import get_active_rules

log = get_logger(__name__)

RecordLike = Union[ConfigurationRecord, Mapping[str, Any]]

MIN_PULLEY_CODES = (IssueCode.MIN_PULLEY_DRIVE_TOO_SMALL, IssueCode.MIN_PULLEY_TAIL_TOO_SMALL)


def _as_record(record: RecordLike) -> ConfigurationRecord:
    if isinstance(record, ConfigurationRecord):
        return record
    return ConfigurationRecord.from_mapping(record)


def record_hash(record: RecordLike) -> str:
    """Stable content hash of a configuration record."""
    items = sorted(_as_record(record).to_dict().items())
    return hashlib.md5(str(items).encode()).hexdigest()[:16]


def compute_issues(
    record: RecordLike,
    thresholds: Optional[RuleThresholds] = None,
    categories: Optional[list[RuleCategory]] = None,
) -> list[Issue]:
    """Run all active rules in order and return the flat issue list."""
    context = RuleContext(
        record=_as_record(record),
        thresholds=thresholds or default_thresholds(),
    )
    issues: list[Issue] = []
    for rule in get_active_rules(categories):
        issues.extend(rule.evaluate(context))
    return issues


# =============================================================================
# Aggregation
# =============================================================================


def _init_section_counts() -> dict[SectionKey, Counts]:
    return {section: Counts() for section in SECTION_TAB}


def _init_tab_counts() -> dict[TabKey, Counts]:
    return {tab: Counts() for tab in TAB_SECTIONS}


@dataclass(frozen=True)
class IssueAggregation:
    """Flat issue list plus per-section and per-tab error/warning tallies."""

    issues: tuple[Issue, ...]
    section_counts: dict[SectionKey, Counts] = field(default_factory=_init_section_counts)
    tab_counts: dict[TabKey, Counts] = field(default_factory=_init_tab_counts)

    @property
    def error_count(self) -> int:
        return sum(c.errors for c in self.tab_counts.values())

    @property
    def warning_count(self) -> int:
        return sum(c.warnings for c in self.tab_counts.values())

    def has_errors(self) -> bool:
        return any(issue.is_error for issue in self.issues)

    def issues_for_section(self, section: SectionKey) -> list[Issue]:
        return [i for i in self.issues if i.section == section]

    def issues_for_tab(self, tab: TabKey) -> list[Issue]:
        return [i for i in self.issues if i.tab == tab]

    def issues_with_code(self, *codes: IssueCode) -> list[Issue]:
        return [i for i in self.issues if i.code is not None and i.code in codes]

    def tracking_issue(self) -> Optional[Issue]:
        found = self.issues_with_code(IssueCode.TRACKING_RECOMMENDATION)
        return found[0] if found else None

    def min_pulley_issues(self) -> list[Issue]:
        return self.issues_with_code(*MIN_PULLEY_CODES)


def aggregate_issues(issues: list[Issue]) -> IssueAggregation:
    """Tally errors and warnings per section and per tab; info is never counted."""
    section_counts = _init_section_counts()
    tab_counts = _init_tab_counts()
    for issue in issues:
        section_counts[issue.section].add(issue)
        tab_counts[issue.tab].add(issue)
    return IssueAggregation(
        issues=tuple(issues),
        section_counts=section_counts,
        tab_counts=tab_counts,
    )


# =============================================================================
# Engine
# =============================================================================


class IssueEngine:
    """
    Compute and aggregate issues, with an optional bounded result cache.

    The cache is keyed by record_hash, so two equal snapshots share a result
    and any field change misses. Safe to share between callers.
    """

    def __init__(
        self,
        thresholds: Optional[RuleThresholds] = None,
        cache_size: int = 128,
    ):
        """
        Initialize the engine.

        Args:
            thresholds: Rule thresholds (defaults from BELTLINE_THRESHOLDS or built-ins)
            cache_size: Maximum cached results; 0 disables caching
        """
        if cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {cache_size}")
        self.thresholds = thresholds or default_thresholds()
        self.cache_size = cache_size
        self._cache: OrderedDict[str, IssueAggregation] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def evaluate(self, record: RecordLike) -> IssueAggregation:
        record = _as_record(record)
        if self.cache_size == 0:
            return aggregate_issues(compute_issues(record, self.thresholds))

        key = record_hash(record)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                self.hits += 1
                return cached

        result = aggregate_issues(compute_issues(record, self.thresholds))

        with self._lock:
            self.misses += 1
            self._cache[key] = result
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_size:
                self._cache.popitem(last=False)
        log.debug(
            "Evaluated %s: %d errors, %d warnings",
            key, result.error_count, result.warning_count,
        )
        return result

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._cache)


def evaluate(record: RecordLike, thresholds: Optional[RuleThresholds] = None) -> IssueAggregation:
    """One-shot compute + aggregate without caching."""
    return aggregate_issues(compute_issues(record, thresholds))
