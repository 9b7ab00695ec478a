"""
Issue Rule Framework: independent validation rules over a configuration record.

Each rule reads only the fields it needs and returns zero or more issues.
Rules never see each other's output; when a rule needs a derived quantity
(tracking recommendation, governing minimum pulley) it calls the derivation
directly. Rules are grouped by the configurator tab they report into and
registered in the rule registry with an explicit evaluation order.

Categories:
- APPLICATION: Material form, part dimensions, throughput
- PHYSICAL: Geometry, belt & pulleys, cleats, tracking, frame
- DRIVE: Belt speed, safety factor
- BUILD: Documentation, finish and guarding finish
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from beltline.config import RuleThresholds
from beltline.inputs import ConfigurationRecord

from ..issues import Issue


class RuleCategory(Enum):
    """Categories for grouping rules; values match the tab keys."""

    APPLICATION = "application"
    PHYSICAL = "physical"
    DRIVE = "drive"
    BUILD = "build"


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may read."""

    record: ConfigurationRecord
    thresholds: RuleThresholds = field(default_factory=RuleThresholds)


class RuleBase(ABC):
    """
    Abstract base class for all issue rules.

    Subclasses must implement:
    - category: The tab the rule reports into
    - name: Rule identifier
    - evaluate: Issues for a context (empty list when the rule passes)
    """

    category: RuleCategory
    name: str

    @abstractmethod
    def evaluate(self, context: RuleContext) -> list[Issue]:
        """
        Evaluate this rule against the given context.

        Args:
            context: Record snapshot plus thresholds

        Returns:
            Issues raised by this rule, in display order
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(category={self.category.value})"


__all__ = ["RuleBase", "RuleCategory", "RuleContext"]
