"""
Issue Rule Registry: registration and ordered lookup of validation rules.

Rules register at import time with a decorator that also fixes their
evaluation order. The engine asks for the active rules and runs them in
ascending order, so issue lists come out in a stable display order no
matter which module registered a rule first.

Usage:
    from beltline.cem.rules.registry import register_rule, get_active_rules

    @register_rule("drop_height", order=30)
    class DropHeightRule(RuleBase):
        ...

    # Physical-tab rules, in evaluation order
    physical = get_active_rules([RuleCategory.PHYSICAL])
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Type

from beltline.logging import get_logger

from . import RuleBase, RuleCategory

log = get_logger(__name__)


@dataclass(frozen=True)
class RegisteredRule:
    """A registry entry; ``seq`` breaks order ties by registration time."""

    rule_cls: Type[RuleBase]
    order: int
    seq: int = field(compare=False)

    @property
    def category(self) -> Optional[RuleCategory]:
        return getattr(self.rule_cls, "category", None)

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.order, self.seq)


# Rule name -> entry
RULE_REGISTRY: dict[str, RegisteredRule] = {}

# Names evaluated by default
ENABLED_RULES: set[str] = set()

_sequence = itertools.count()

RegistryState = tuple[dict, set]


def register_rule(
    name: str, order: int = 1000, enabled_by_default: bool = True
) -> Callable[[Type[RuleBase]], Type[RuleBase]]:
    """
    Class decorator adding a rule to the registry.

    Args:
        name: Unique rule name (also used to enable/disable it)
        order: Ascending evaluation order; equal orders run in registration order
        enabled_by_default: Whether the engine runs the rule without enable_rule()

    Raises:
        ValueError: if ``name`` is already registered
    """

    def decorator(cls: Type[RuleBase]) -> Type[RuleBase]:
        if name in RULE_REGISTRY:
            raise ValueError(f"Rule '{name}' already registered")
        RULE_REGISTRY[name] = RegisteredRule(cls, order, next(_sequence))
        if enabled_by_default:
            ENABLED_RULES.add(name)
        log.debug("Registered rule %s (order %d)", name, order)
        return cls

    return decorator


def get_rule(name: str) -> Optional[Type[RuleBase]]:
    entry = RULE_REGISTRY.get(name)
    return entry.rule_cls if entry else None


def list_rules() -> list[str]:
    """Registered rule names in evaluation order."""
    return sorted(RULE_REGISTRY, key=lambda n: RULE_REGISTRY[n].sort_key)


def get_rules_by_category(category: RuleCategory) -> list[Type[RuleBase]]:
    return [
        RULE_REGISTRY[name].rule_cls
        for name in list_rules()
        if RULE_REGISTRY[name].category == category
    ]


def get_active_rules(
    categories: Optional[Iterable[RuleCategory]] = None, include_disabled: bool = False
) -> list[RuleBase]:
    """
    Instantiate the rules the engine should run, in evaluation order.

    Args:
        categories: Only these categories (None = all)
        include_disabled: Also return rules that are currently disabled
    """
    wanted = None if categories is None else tuple(categories)
    active = []
    for name in list_rules():
        entry = RULE_REGISTRY[name]
        if name not in ENABLED_RULES and not include_disabled:
            continue
        if wanted is not None and entry.category not in wanted:
            continue
        active.append(entry.rule_cls())
    return active


def enable_rule(name: str) -> None:
    if name not in RULE_REGISTRY:
        raise ValueError(f"Unknown rule: {name}")
    ENABLED_RULES.add(name)


def disable_rule(name: str) -> None:
    ENABLED_RULES.discard(name)


def clear_registry() -> None:
    """Drop every registration (tests only; pair with snapshot_registry)."""
    RULE_REGISTRY.clear()
    ENABLED_RULES.clear()


def snapshot_registry() -> RegistryState:
    return dict(RULE_REGISTRY), set(ENABLED_RULES)


def restore_registry(state: RegistryState) -> None:
    entries, enabled = state
    clear_registry()
    RULE_REGISTRY.update(entries)
    ENABLED_RULES.update(enabled)


__all__ = [
    "ENABLED_RULES",
    "RULE_REGISTRY",
    "RegisteredRule",
    "clear_registry",
    "disable_rule",
    "enable_rule",
    "get_active_rules",
    "get_rule",
    "get_rules_by_category",
    "list_rules",
    "register_rule",
    "restore_registry",
    "snapshot_registry",
]
