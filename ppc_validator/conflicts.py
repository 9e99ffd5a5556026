"""
Conflict detection between a proposed rule and the rules already defined.
"""
from __future__ import annotations

from typing import Iterable, List

from .models import Rule


def find_conflicts(new_rule: Rule, existing_rules: Iterable[Rule]) -> List[Rule]:
    """
    Rules conflict when their condition trees are structurally identical
    but their actions differ.

    Condition trees are immutable dataclasses, so == is a deep comparison
    independent of payload key order or formatting.
    """
    return [
        existing for existing in existing_rules
        if existing.conditions == new_rule.conditions
        and existing.action != new_rule.action
    ]


def find_overlapping_rules(new_rule: Rule, existing_rules: Iterable[Rule]) -> List[Rule]:
    """Rules that read at least one of the same metrics with a different action."""
    new_metrics = set(new_rule.metrics_used())
    return [
        existing for existing in existing_rules
        if new_metrics.intersection(existing.metrics_used())
        and existing.action != new_rule.action
    ]
