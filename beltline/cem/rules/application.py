"""Application tab rules: material form, product and throughput."""

from __future__ import annotations

from beltline.inputs import MaterialForm

from ..issues import Issue, IssueSeverity, SectionKey, make_issue
from . import RuleBase, RuleCategory, RuleContext
from .registry import register_rule


@register_rule("material_form_required", order=10)
class MaterialFormRule(RuleBase):
    """A material form must be chosen before anything else makes sense."""

    category = RuleCategory.APPLICATION
    name = "material_form_required"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        if context.record.material_form:
            return []
        return [
            make_issue(
                IssueSeverity.ERROR,
                "Material form not selected",
                SectionKey.PRODUCT,
                "material_form",
                detail="Choose PARTS or BULK to proceed with configuration",
            )
        ]


@register_rule("part_dimensions", order=20)
class PartDimensionsRule(RuleBase):
    """Discrete parts need a positive weight, length and width that fit the belt."""

    category = RuleCategory.APPLICATION
    name = "part_dimensions"

    _REQUIRED = (
        ("part_weight_lbs", "Part weight must be greater than 0"),
        ("part_length_in", "Part length must be greater than 0"),
        ("part_width_in", "Part width must be greater than 0"),
    )

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        if record.material_form != MaterialForm.PARTS:
            return []

        issues = [
            make_issue(IssueSeverity.ERROR, message, SectionKey.PRODUCT, field_name)
            for field_name, message in self._REQUIRED
            if not getattr(record, field_name) or getattr(record, field_name) <= 0
        ]

        width = record.part_width_in
        belt_width = record.belt_width_in
        if width and belt_width is not None and width > belt_width:
            issues.append(
                make_issue(
                    IssueSeverity.WARNING,
                    "Part width exceeds belt width",
                    SectionKey.PRODUCT,
                    "part_width_in",
                    detail="Part may not fit on belt or may overhang edges",
                )
            )
        return issues


@register_rule("drop_height", order=30)
class DropHeightRule(RuleBase):
    category = RuleCategory.APPLICATION
    name = "drop_height"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        drop = context.record.drop_height_in
        if drop is None or drop <= context.thresholds.drop_height_warn_in:
            return []
        return [
            make_issue(
                IssueSeverity.WARNING,
                "High drop height may cause belt damage",
                SectionKey.PRODUCT,
                "drop_height_in",
                detail="Consider reducing drop height or using impact-resistant belt",
            )
        ]


@register_rule("part_spacing", order=40)
class PartSpacingRule(RuleBase):
    category = RuleCategory.APPLICATION
    name = "part_spacing"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        spacing = context.record.part_spacing_in
        if spacing is None or spacing >= 0:
            return []
        return [
            make_issue(
                IssueSeverity.ERROR,
                "Part spacing cannot be negative",
                SectionKey.THROUGHPUT,
                "part_spacing_in",
            )
        ]
