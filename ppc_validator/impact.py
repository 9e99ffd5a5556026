"""
Impact estimation - projected bid and ACOS/ROAS effect of a rule on one campaign.

Heuristic (used unless a bid predictor returns a prediction):
  increase_bid: bid +adj%, ACOS +10% of current, ROAS -5% of current
  decrease_bid: bid -adj%, ACOS -10% of current, ROAS +5% of current
  other action: no change
"""
from __future__ import annotations

from typing import Optional

from .logging_config import get_logger
from .models import (
    Campaign,
    CampaignImpact,
    PredictionFailure,
    PredictionResult,
    PredictionSuccess,
    Rule,
    parse_budget,
)
from .predictor import BidPredictor

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 0.7
ACOS_SHIFT = 0.10
ROAS_SHIFT = 0.05


def estimate_impact(
    campaign: Campaign,
    rule: Rule,
    predictor: Optional[BidPredictor] = None,
) -> CampaignImpact:
    current_acos = campaign.metrics.value("acos")
    current_roas = campaign.metrics.value("roas")
    factor = rule.adjustment / 100

    bid_change = 0.0
    acos_delta = 0.0
    roas_delta = 0.0

    if rule.action == "increase_bid":
        bid_change = factor
        acos_delta = current_acos * ACOS_SHIFT
        roas_delta = -current_roas * ROAS_SHIFT
    elif rule.action == "decrease_bid":
        bid_change = -factor
        acos_delta = -current_acos * ACOS_SHIFT
        roas_delta = current_roas * ROAS_SHIFT

    current_bid = parse_budget(campaign.budget)
    new_bid = current_bid * (1 + bid_change)

    projected_acos = current_acos + acos_delta
    projected_roas = current_roas + roas_delta
    confidence = DEFAULT_CONFIDENCE

    if predictor is not None:
        outcome = _run_predictor(predictor, campaign, rule.adjustment)
        if isinstance(outcome, PredictionSuccess):
            pred = outcome.prediction
            projected_acos = pred.predicted_acos
            projected_roas = pred.predicted_roas
            acos_delta = projected_acos - current_acos
            roas_delta = projected_roas - current_roas
            confidence = pred.confidence
        else:
            logger.warning(
                f"Campaign {campaign.id}: bid prediction unavailable ({outcome.reason}), "
                f"using heuristic estimate"
            )

    logger.debug(
        f"Campaign {campaign.id}: bid {current_bid:.2f} -> {new_bid:.2f} "
        f"(ACOS {acos_delta:+.2f}, ROAS {roas_delta:+.2f}, confidence {confidence:.2f})"
    )

    return CampaignImpact(
        campaign=campaign,
        bid_change=bid_change * 100,
        current_bid=current_bid,
        new_bid=new_bid,
        current_acos=current_acos,
        projected_acos=projected_acos,
        current_roas=current_roas,
        projected_roas=projected_roas,
        acos_delta=acos_delta,
        roas_delta=roas_delta,
        confidence=confidence,
    )


def _run_predictor(predictor: BidPredictor, campaign: Campaign, adjustment_pct: float) -> PredictionResult:
    """Call the predictor, turning an unexpected exception into a PredictionFailure."""
    try:
        return predictor.predict(campaign, adjustment_pct)
    except Exception as e:
        # A broken predictor must not stop validation
        return PredictionFailure(reason=f"{type(e).__name__}: {e}")
