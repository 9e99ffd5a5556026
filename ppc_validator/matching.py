"""
Rule matching - evaluates condition trees against campaign metrics.

  - A condition reads one metric; an absent metric never matches.
  - A group combines its conditions with AND (all) or OR (any).
  - A rule matches when ANY of its groups matches.
"""
from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import (
    BetweenCondition,
    Campaign,
    ComparisonCondition,
    Condition,
    ConditionGroup,
    Rule,
)


def matches_condition(campaign: Campaign, condition: Condition) -> bool:
    metric_value = campaign.metrics.lookup(condition.metric)
    if metric_value is None:
        return False

    if isinstance(condition, BetweenCondition):
        return condition.low <= metric_value <= condition.high

    if isinstance(condition, ComparisonCondition):
        op = condition.operator
        if op == "greater_than":
            return metric_value > condition.value
        if op == "less_than":
            return metric_value < condition.value
        if op == "equal_to":
            # Exact comparison, no tolerance
            return metric_value == condition.value
        if op == "not_equal_to":
            return metric_value != condition.value

    return False


def matches_group(campaign: Campaign, group: ConditionGroup) -> bool:
    """AND over an empty group is True, OR over an empty group is False."""
    if group.operator == "AND":
        return all(matches_condition(campaign, c) for c in group.conditions)
    if group.operator == "OR":
        return any(matches_condition(campaign, c) for c in group.conditions)
    return False


def matches_rule(campaign: Campaign, rule: Rule) -> bool:
    return any(matches_group(campaign, g) for g in rule.conditions)


def partition_campaigns(
    rule: Rule, campaigns: Iterable[Campaign]
) -> Tuple[List[Campaign], List[Campaign]]:
    """Split campaigns into (affected, unaffected), keeping input order."""
    affected: List[Campaign] = []
    unaffected: List[Campaign] = []
    for campaign in campaigns:
        if matches_rule(campaign, rule):
            affected.append(campaign)
        else:
            unaffected.append(campaign)
    return affected, unaffected
