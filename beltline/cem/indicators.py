"""Status-indicator helpers for section and tab chips."""

from __future__ import annotations

from enum import Enum

from .issues import Counts


class IndicatorStatus(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NONE = "none"


def indicator_status(counts: Counts) -> IndicatorStatus:
    """Errors outrank warnings; no chip at all when there is nothing to show."""
    if counts.errors > 0:
        return IndicatorStatus.ERROR
    if counts.warnings > 0:
        return IndicatorStatus.WARNING
    return IndicatorStatus.NONE


def indicator_text(counts: Counts) -> str:
    if counts.errors > 0 and counts.warnings > 0:
        return f"{counts.errors}E {counts.warnings}W"
    if counts.errors > 0:
        return "1 error" if counts.errors == 1 else f"{counts.errors} errors"
    if counts.warnings > 0:
        return "1 warning" if counts.warnings == 1 else f"{counts.warnings} warnings"
    return ""
