"""
Rule Validator - Orchestrates matching, impact estimation, conflicts and scoring.

Flow:
  1. Partition campaigns into affected / unaffected
  2. Estimate impact per affected campaign (heuristic or bid predictor)
  3. Summarize impacts (averages guard against zero campaigns)
  4. Find conflicting rules
  5. Snapshot current metrics and project them forward
  6. Generate warnings, then the validation score
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml

from .conflicts import find_conflicts
from .impact import estimate_impact
from .logging_config import get_logger
from .matching import partition_campaigns
from .models import (
    BetweenCondition,
    Campaign,
    CampaignImpact,
    Condition,
    ImpactSummary,
    MetricSnapshot,
    Rule,
    ValidationResult,
)
from .predictor import BidPredictor
from .schemas import parse_campaign, parse_rule
from .scoring import calculate_validation_score, generate_warnings

logger = get_logger(__name__)


def validate_rule(
    rule: Rule,
    campaigns: Sequence[Campaign],
    existing_rules: Iterable[Rule] = (),
    predictor: Optional[BidPredictor] = None,
) -> ValidationResult:
    """
    Validate a proposed rule against campaigns and existing rules.

    Pure apart from logging; never mutates its inputs.
    """
    affected, unaffected = partition_campaigns(rule, campaigns)

    impacts = [estimate_impact(c, rule, predictor) for c in affected]
    summary = summarize_impacts(impacts)

    conflicting = find_conflicts(rule, existing_rules)
    if conflicting:
        logger.warning(
            f"Rule '{rule.name}' conflicts with {len(conflicting)} existing rule(s): "
            f"{', '.join(r.name for r in conflicting)}"
        )

    current = current_metrics(affected)
    projected = project_metrics(current, summary)

    warnings = generate_warnings(rule, affected, conflicting, summary)
    score = calculate_validation_score(
        affected_count=len(affected),
        conflict_count=len(conflicting),
        impact_summary=summary,
        warning_count=len(warnings),
    )

    logger.info(
        f"Rule '{rule.name}': {len(affected)}/{len(affected) + len(unaffected)} campaigns affected, "
        f"score {score:.1f}, {len(warnings)} warning(s)"
    )

    return ValidationResult(
        affected_campaigns=affected,
        unaffected_campaigns=unaffected,
        impact_summary=summary,
        current_metrics=current,
        projected_metrics=projected,
        campaign_impacts=impacts,
        conflicting_rules=conflicting,
        validation_score=score,
        warnings=warnings,
    )


def summarize_impacts(impacts: Sequence[CampaignImpact]) -> ImpactSummary:
    n = len(impacts)
    if n == 0:
        return ImpactSummary()

    total_bid_change = sum(i.bid_change for i in impacts)
    return ImpactSummary(
        total_bid_change=total_bid_change,
        average_bid_change=total_bid_change / n,
        estimated_acos_delta=sum(i.acos_delta for i in impacts) / n,
        estimated_roas_delta=sum(i.roas_delta for i in impacts) / n,
        confidence=sum(i.confidence for i in impacts) / n,
    )


def current_metrics(campaigns: Sequence[Campaign]) -> MetricSnapshot:
    """Summed spend/sales, averaged ACOS/ROAS/CTR (all 0 with no campaigns)."""
    n = len(campaigns)
    if n == 0:
        return MetricSnapshot()

    return MetricSnapshot(
        spend=sum(c.metrics.value("spend") for c in campaigns),
        sales=sum(c.metrics.value("sales") for c in campaigns),
        acos=sum(c.metrics.value("acos") for c in campaigns) / n,
        roas=sum(c.metrics.value("roas") for c in campaigns) / n,
        ctr=sum(c.metrics.value("ctr") for c in campaigns) / n,
    )


def project_metrics(current: MetricSnapshot, summary: ImpactSummary) -> MetricSnapshot:
    # Sales are assumed to grow at half the rate of spend
    return MetricSnapshot(
        spend=current.spend * (1 + summary.average_bid_change / 100),
        sales=current.sales * (1 + summary.average_bid_change / 200),
        acos=current.acos + summary.estimated_acos_delta,
        roas=current.roas + summary.estimated_roas_delta,
        ctr=current.ctr,
    )


# ─────────────────────────────────────────────────────────────
# Payload loading
# ─────────────────────────────────────────────────────────────
def _read_payload(path: str) -> Any:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Payload not found: {p}")

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def _as_list(data: Any, key: str) -> List[Dict[str, Any]]:
    if isinstance(data, dict) and key in data:
        data = data[key]
    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of {key} or a mapping with a '{key}' key")
    return data


def load_campaigns(path: str) -> List[Campaign]:
    """Load campaigns from a JSON/YAML list (or {"campaigns": [...]})."""
    return [parse_campaign(row) for row in _as_list(_read_payload(path), "campaigns")]


def load_rules(path: str) -> List[Rule]:
    """Load one rule or a list of rules (or {"rules": [...]}) from JSON/YAML."""
    data = _read_payload(path)
    if data is None:
        return []
    return [parse_rule(row) for row in _as_list(data, "rules")]


# ─────────────────────────────────────────────────────────────
# Reporting
# ─────────────────────────────────────────────────────────────
def _campaign_dict(c: Campaign) -> Dict[str, Any]:
    return {
        "id": c.id,
        "name": c.name,
        "budget": c.budget,
        "status": c.status,
        "metrics": {m.value: v for m, v in c.metrics.values.items()},
    }


def _condition_dict(cond: Condition) -> Dict[str, Any]:
    out: Dict[str, Any] = {"metric": cond.metric, "operator": cond.operator}
    if isinstance(cond, BetweenCondition):
        out["value"] = cond.low
        out["value2"] = cond.high
    else:
        if cond.value is not None:
            out["value"] = cond.value
        if cond.value2 is not None:
            out["value2"] = cond.value2
    if cond.timeframe is not None:
        out["timeframe"] = cond.timeframe
    return out


def _rule_dict(r: Rule) -> Dict[str, Any]:
    return {
        "id": r.id,
        "name": r.name,
        "conditions": [
            {"operator": g.operator, "conditions": [_condition_dict(c) for c in g.conditions]}
            for g in r.conditions
        ],
        "action": r.action,
        "adjustment": r.adjustment,
        "isActive": r.is_active,
    }


def _snapshot_dict(s: MetricSnapshot) -> Dict[str, float]:
    return {"spend": s.spend, "sales": s.sales, "acos": s.acos, "roas": s.roas, "ctr": s.ctr}


def validation_report(result: ValidationResult) -> Dict[str, Any]:
    """JSON-ready report in the shape the dashboard API returns."""
    s = result.impact_summary
    return {
        "affectedCampaigns": [_campaign_dict(c) for c in result.affected_campaigns],
        "unaffectedCampaigns": [_campaign_dict(c) for c in result.unaffected_campaigns],
        "impactSummary": {
            "totalBidChange": s.total_bid_change,
            "averageBidChange": s.average_bid_change,
            "estimatedAcosDelta": s.estimated_acos_delta,
            "estimatedRoasDelta": s.estimated_roas_delta,
            "confidence": round(s.confidence, 4),
        },
        "metrics": {
            "current": _snapshot_dict(result.current_metrics),
            "projected": _snapshot_dict(result.projected_metrics),
        },
        "campaignImpacts": [
            {
                "campaign": _campaign_dict(i.campaign),
                "bidChange": i.bid_change,
                "currentBid": i.current_bid,
                "newBid": i.new_bid,
                "metrics": {
                    "currentAcos": i.current_acos,
                    "projectedAcos": i.projected_acos,
                    "currentRoas": i.current_roas,
                    "projectedRoas": i.projected_roas,
                    "acosDelta": i.acos_delta,
                    "roasDelta": i.roas_delta,
                },
                "confidence": round(i.confidence, 4),
            }
            for i in result.campaign_impacts
        ],
        "conflictingRules": [_rule_dict(r) for r in result.conflicting_rules],
        "validationScore": result.validation_score,
        "warnings": list(result.warnings),
    }
