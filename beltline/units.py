"""Typed engineering constants for conveyor configuration.

Every threshold the engine compares against carries its unit and the
source it was taken from, so derived values and issue messages can be
traced back to a catalog sheet or a design rule.

Usage:
    from beltline.constants import MAX_INCLINE

    theta = MAX_INCLINE.clamp(theta_deg)
    if not MAX_INCLINE.in_range(theta_deg):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EngineeringConstant:
    """A value with its unit and provenance.

    ``limits`` is an inclusive (low, high) band. Constants that describe a
    limit (the maximum incline, for example) carry it so callers can clamp
    against the constant rather than a bare number.
    """

    value: float
    unit: str
    source: str
    limits: Optional[tuple[float, float]] = None

    def in_range(self, candidate: float) -> bool:
        if self.limits is None:
            return True
        low, high = self.limits
        return low <= candidate <= high

    def clamp(self, candidate: float) -> float:
        """Pull ``candidate`` into ``limits``; unbounded constants pass it through."""
        if self.limits is None:
            return candidate
        low, high = self.limits
        return max(low, min(high, candidate))

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit}"
