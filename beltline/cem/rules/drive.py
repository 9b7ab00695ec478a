"""Drive tab rules: belt speed and safety factor."""

from __future__ import annotations

from ..issues import Issue, IssueSeverity, SectionKey, make_issue
from . import RuleBase, RuleCategory, RuleContext
from .registry import register_rule


@register_rule("belt_speed", order=80)
class BeltSpeedRule(RuleBase):
    category = RuleCategory.DRIVE
    name = "belt_speed"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        speed = context.record.belt_speed_fpm
        if speed is None:
            return []
        if speed <= 0:
            return [
                make_issue(
                    IssueSeverity.ERROR,
                    "Belt speed must be greater than 0",
                    SectionKey.SPEED,
                    "belt_speed_fpm",
                )
            ]
        if speed > context.thresholds.belt_speed_warn_fpm:
            return [
                make_issue(
                    IssueSeverity.WARNING,
                    "High belt speed may increase wear",
                    SectionKey.SPEED,
                    "belt_speed_fpm",
                    detail="Consider motor/gearbox requirements for sustained high-speed operation",
                )
            ]
        return []


@register_rule("safety_factor", order=90)
class SafetyFactorRule(RuleBase):
    """Unset safety factor means the default, which is always in bounds."""

    category = RuleCategory.DRIVE
    name = "safety_factor"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        limits = context.thresholds
        value = context.record.safety_factor
        if value is None:
            value = limits.safety_factor_default

        if value < limits.safety_factor_min:
            return [
                make_issue(
                    IssueSeverity.ERROR,
                    f"Safety factor must be at least {limits.safety_factor_min:.1f}",
                    SectionKey.ADVANCED,
                    "safety_factor",
                )
            ]
        if value > limits.safety_factor_warn:
            return [
                make_issue(
                    IssueSeverity.WARNING,
                    f"Safety factor above {limits.safety_factor_warn:.1f} is unusually high",
                    SectionKey.ADVANCED,
                    "safety_factor",
                    detail="May result in over-sized motor selection",
                )
            ]
        return []
