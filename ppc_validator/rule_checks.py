"""
Structural checks for a rule before it is saved or activated.

Unlike validate_rule (which scores the projected impact), these checks catch
rules that cannot work as written:
- No condition groups, or an empty group
- Unknown action
- Adjustment outside a sensible range for the action
- Metric overlap with existing rules that take a different action

Usage:
    from ppc_validator.rule_checks import check_rule

    check = check_rule(rule, campaigns, existing_rules)
    if not check.is_valid:
        for error in check.errors:
            print(f"  - {error}")
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence

from .conflicts import find_overlapping_rules
from .logging_config import get_logger
from .matching import matches_rule
from .models import BID_ACTIONS, Campaign, Rule, format_number

logger = get_logger(__name__)

ALLOWED_ACTIONS = {
    'increase_bid',
    'decrease_bid',
    'pause_campaign',
    'enable_campaign',
    'set_bid',
}


@dataclass
class RuleCheck:
    """Outcome of the structural checks."""
    is_valid: bool = True
    affected_count: int = 0
    potential_conflicts: int = 0
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def check_rule(
    rule: Rule,
    campaigns: Sequence[Campaign] = (),
    existing_rules: Iterable[Rule] = (),
) -> RuleCheck:
    """
    Run structural checks on a rule.

    Args:
        rule: Rule to check
        campaigns: Campaigns used to count how many the rule would touch
        existing_rules: Rules checked for metric overlap

    Returns:
        RuleCheck (errors make the rule invalid; warnings do not)
    """
    result = RuleCheck()

    if not rule.conditions:
        result.is_valid = False
        result.errors.append("Rule must have at least one condition group")
        return result

    if any(not group.conditions for group in rule.conditions):
        result.is_valid = False
        result.errors.append("Each condition group must have at least one condition")
        return result

    result.affected_count = sum(1 for c in campaigns if matches_rule(c, rule))

    overlapping = find_overlapping_rules(rule, existing_rules)
    result.potential_conflicts = len(overlapping)
    if overlapping:
        result.warnings.append(
            f"This rule may conflict with {len(overlapping)} existing rule(s)"
        )

    if rule.action not in ALLOWED_ACTIONS:
        result.is_valid = False
        result.errors.append(
            f"Invalid action: '{rule.action}'. Allowed actions: {sorted(ALLOWED_ACTIONS)}"
        )

    if not is_reasonable_adjustment(rule.action, rule.adjustment):
        result.warnings.append(f"The adjustment value of {format_number(rule.adjustment)} may be too extreme")

    if result.errors:
        logger.error(f"Rule '{rule.name}' failed structural checks: {'; '.join(result.errors)}")

    return result


def is_reasonable_adjustment(action: str, adjustment: float) -> bool:
    """
    Bid percent actions: 1% to 100%.
    set_bid: absolute bid between $0.01 and $10.00.
    """
    if action in BID_ACTIONS:
        return 1 <= adjustment <= 100
    if action == 'set_bid':
        return 0.01 <= adjustment <= 10
    return True
