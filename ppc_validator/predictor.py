"""
Bid predictor - optional refinement for rule impact estimates.

Any object with a ``predict(campaign, adjustment_pct)`` method returning a
PredictionSuccess or PredictionFailure can be passed to the estimator.
HeuristicBidPredictor is the built-in implementation: it suggests a bid that
moves the campaign toward a target ACOS and scores its confidence from data
volume.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .models import (
    BidPrediction,
    Campaign,
    PredictionFailure,
    PredictionResult,
    PredictionSuccess,
)

DEFAULT_BID = 0.25
INDUSTRY_AVG_CTR = 0.01
MIN_BID = 0.10
MAX_BID = 10.00


class BidPredictor(Protocol):
    def predict(self, campaign: Campaign, adjustment_pct: Optional[float] = None) -> PredictionResult:
        ...


@dataclass(frozen=True)
class CampaignFeatures:
    historical_acos: float
    historical_roas: float
    historical_ctr: float
    impressions: float
    clicks: float
    spend: float
    sales: float


def extract_features(campaign: Campaign) -> CampaignFeatures:
    m = campaign.metrics
    return CampaignFeatures(
        historical_acos=m.value("acos"),
        historical_roas=m.value("roas"),
        historical_ctr=m.value("ctr"),
        impressions=m.value("impressions"),
        clicks=m.value("clicks"),
        spend=m.value("spend"),
        sales=m.value("sales"),
    )


def predict_optimal_bid(features: CampaignFeatures, target_acos: float = 30.0) -> float:
    """
    Suggest a bid that moves ACOS toward target_acos.

    Bounds:
        - 1.2x to 1.5x up / 0.7x to 0.5x down, widening with click volume
        - absolute $0.10 to $10.00
    """
    if features.clicks == 0 or features.spend == 0:
        return DEFAULT_BID

    current_acos = features.historical_acos
    current_bid = features.spend / features.clicks

    if current_acos == 0:
        # No ACOS: scale by CTR relative to the industry average
        if features.historical_ctr > 0 and features.impressions > 100:
            ctr_ratio = features.historical_ctr / INDUSTRY_AVG_CTR
            return current_bid * min(ctr_ratio, 1.5)
        return current_bid

    suggested = current_bid * (target_acos / current_acos)

    data_volume = min(features.clicks / 100, 1)  # 0-1
    max_increase = current_bid * (1.2 + 0.3 * data_volume)
    min_decrease = current_bid * (0.7 - 0.2 * data_volume)

    suggested = min(max(suggested, min_decrease), max_increase)
    suggested = min(max(suggested, MIN_BID), MAX_BID)

    return round(suggested, 2)


def calculate_confidence(features: CampaignFeatures) -> float:
    """Confidence 0-100 based on data volume and consistency."""
    click_conf = min(features.clicks / 200, 0.5)
    sales_conf = min(features.sales / 20, 0.3)
    impression_conf = min(features.impressions / 10000, 0.2)

    confidence = (click_conf + sales_conf + impression_conf) * 100

    if features.historical_acos > 0 and features.historical_roas > 0:
        confidence += 10

    # Very low CTR on real traffic suggests a targeting problem
    if features.historical_ctr < 0.001 and features.impressions > 1000:
        confidence -= 20

    if features.historical_acos > 100:
        confidence -= 15

    return min(max(confidence, 0.0), 100.0)


class HeuristicBidPredictor:
    """Target-ACOS bid predictor built from campaign history."""

    def __init__(self, target_acos: float = 30.0):
        if target_acos <= 0:
            raise ValueError(f"target_acos must be positive, got {target_acos}")
        self.target_acos = target_acos

    def predict(self, campaign: Campaign, adjustment_pct: Optional[float] = None) -> PredictionResult:
        features = extract_features(campaign)
        if features.clicks == 0 or features.spend == 0:
            return PredictionFailure(
                reason=f"Insufficient data for campaign {campaign.id}: "
                       f"{features.clicks:.0f} clicks, spend {features.spend:.2f}"
            )

        prediction = BidPrediction(
            campaign_id=campaign.id,
            current_bid=features.spend / features.clicks,
            suggested_bid=predict_optimal_bid(features, self.target_acos),
            confidence=calculate_confidence(features) / 100,
            predicted_acos=self.target_acos,
            predicted_roas=100 / self.target_acos,
            predicted_ctr=features.historical_ctr,
        )
        return PredictionSuccess(prediction=prediction)
