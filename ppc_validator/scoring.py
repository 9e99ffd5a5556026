"""
Warnings and the 0-100 validation score for a proposed rule.
"""
from __future__ import annotations

from typing import List, Sequence

from .models import Campaign, ImpactSummary, Rule, format_number

BASE_SCORE = 70.0
NO_MATCH_PENALTY = 30.0
BROAD_RULE_PENALTY = 10.0
CONFLICT_PENALTY = 15.0
CONFIDENCE_WEIGHT = 20.0
WARNING_PENALTY = 5.0
EXPECTED_MOVEMENT_BONUS = 10.0
UNFAVORABLE_MOVEMENT_PENALTY = 15.0

SIGNIFICANT_ADJUSTMENT_PCT = 30.0
BROAD_RULE_CAMPAIGNS = 10
ACOS_RISE_LIMIT = 5.0
ROAS_DROP_LIMIT = -0.5


def generate_warnings(
    rule: Rule,
    affected_campaigns: Sequence[Campaign],
    conflicting_rules: Sequence[Rule],
    impact_summary: ImpactSummary,
) -> List[str]:
    """All applicable warnings, in a fixed order."""
    warnings: List[str] = []

    if len(affected_campaigns) == 0:
        warnings.append("No campaigns currently match this rule's conditions.")

    if conflicting_rules:
        warnings.append(f"This rule conflicts with {len(conflicting_rules)} existing rule(s).")

    if abs(rule.adjustment) > SIGNIFICANT_ADJUSTMENT_PCT:
        warnings.append(
            f"Bid adjustment of {format_number(rule.adjustment)}% is significant and may cause rapid budget changes."
        )

    if len(affected_campaigns) > BROAD_RULE_CAMPAIGNS:
        warnings.append(
            "This rule affects a large number of campaigns. Consider making conditions more specific."
        )

    if (
        (rule.action == "increase_bid" and impact_summary.estimated_acos_delta > ACOS_RISE_LIMIT)
        or (rule.action == "decrease_bid" and impact_summary.estimated_roas_delta < ROAS_DROP_LIMIT)
    ):
        warnings.append("This rule may have a negative impact on campaign performance.")

    return warnings


def calculate_validation_score(
    affected_count: int,
    conflict_count: int,
    impact_summary: ImpactSummary,
    warning_count: int,
) -> float:
    """
    Score starts at 70 and is clamped to [0, 100]:
      -30 no campaigns affected, else -10 when more than 10 are affected
      -15 per conflicting rule
      +20 x average confidence (0-1)
      -5 per warning
      +10 when ACOS and ROAS deltas move in opposite directions,
      else -15 when ACOS rises while ROAS falls
    """
    score = BASE_SCORE

    if affected_count == 0:
        score -= NO_MATCH_PENALTY
    elif affected_count > BROAD_RULE_CAMPAIGNS:
        score -= BROAD_RULE_PENALTY

    score -= conflict_count * CONFLICT_PENALTY
    score += impact_summary.confidence * CONFIDENCE_WEIGHT
    score -= warning_count * WARNING_PENALTY

    acos_delta = impact_summary.estimated_acos_delta
    roas_delta = impact_summary.estimated_roas_delta
    if (acos_delta < 0 and roas_delta > 0) or (acos_delta > 0 and roas_delta < 0):
        score += EXPECTED_MOVEMENT_BONUS
    elif acos_delta > 0 and roas_delta < 0:
        # Unreachable: ACOS up with ROAS down already took the bonus above
        score -= UNFAVORABLE_MOVEMENT_PENALTY

    return max(0.0, min(100.0, score))
