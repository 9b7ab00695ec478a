"""Build tab rules: documentation references and finish specifications."""

from __future__ import annotations

from typing import Optional

from beltline.inputs import CoatingMethod, SpecSource

from ..issues import Issue, IssueCode, IssueSeverity, SectionKey, make_issue
from . import RuleBase, RuleCategory, RuleContext
from .registry import register_rule

CUSTOM_COLOR = "CUSTOM"


@register_rule("customer_spec_reference", order=110)
class CustomerSpecRule(RuleBase):
    category = RuleCategory.BUILD
    name = "customer_spec_reference"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        if record.spec_source != SpecSource.CUSTOMER_SPEC or record.customer_spec_reference:
            return []
        return [
            make_issue(
                IssueSeverity.ERROR,
                "Customer spec reference required",
                SectionKey.DOCUMENTATION,
                "customer_spec_reference",
                detail="Provide specification document number or reference",
            )
        ]


def finish_issues(
    coating: Optional[str],
    color_code: Optional[str],
    note: Optional[str],
    *,
    subject: str,
    color_message: str,
    color_field: str,
    note_field: str,
    color_issue_code: IssueCode,
    note_issue_code: IssueCode,
) -> list[Issue]:
    """Color/note completeness for one finished surface.

    Powder coat (the default when no method is chosen) needs a color. Wet
    paint, or the CUSTOM powder color, needs a non-blank note.
    """
    coating = coating or CoatingMethod.POWDER_COAT
    is_powder = coating == CoatingMethod.POWDER_COAT
    is_wet = coating == CoatingMethod.WET_PAINT

    issues = []
    if is_powder and not color_code:
        issues.append(
            make_issue(
                IssueSeverity.ERROR,
                color_message,
                SectionKey.DOCUMENTATION,
                color_field,
                detail=f"Select a powder coat color for {subject}",
                code=color_issue_code,
            )
        )

    note_required = is_wet or color_code == CUSTOM_COLOR
    if note_required and not (note or "").strip():
        issues.append(
            make_issue(
                IssueSeverity.ERROR,
                "Wet paint details required" if is_wet else "Custom color details required",
                SectionKey.DOCUMENTATION,
                note_field,
                detail=(
                    "Specify paint color, finish type, and any special requirements"
                    if is_wet
                    else "Provide details about the custom color selection"
                ),
                code=note_issue_code,
            )
        )
    return issues


@register_rule("conveyor_finish", order=120)
class ConveyorFinishRule(RuleBase):
    category = RuleCategory.BUILD
    name = "conveyor_finish"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        return finish_issues(
            record.finish_coating_method,
            record.finish_powder_color_code,
            record.finish_custom_note,
            subject="the conveyor",
            color_message="Conveyor finish color is required",
            color_field="finish_powder_color_code",
            note_field="finish_custom_note",
            color_issue_code=IssueCode.FINISH_COLOR_REQUIRED,
            note_issue_code=IssueCode.FINISH_NOTE_REQUIRED,
        )


@register_rule("guarding_finish", order=130)
class GuardingFinishRule(RuleBase):
    category = RuleCategory.BUILD
    name = "guarding_finish"

    def evaluate(self, context: RuleContext) -> list[Issue]:
        record = context.record
        return finish_issues(
            record.guarding_coating_method,
            record.guarding_powder_color_code,
            record.guarding_custom_note,
            subject="guarding",
            color_message="Guarding finish color is required",
            color_field="guarding_powder_color_code",
            note_field="guarding_custom_note",
            color_issue_code=IssueCode.GUARDING_COLOR_REQUIRED,
            note_issue_code=IssueCode.GUARDING_NOTE_REQUIRED,
        )
