"""
Test the heuristic bid predictor.

Covers:
1. Optimal bid bounds (volume-based and absolute)
2. CTR fallback when ACOS is missing
3. Confidence scoring
4. Prediction results (success / insufficient data)

Run: python tools/testing/test_bid_predictor.py
"""

import math
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ppc_validator.models import PredictionFailure, PredictionSuccess
from ppc_validator.predictor import (
    CampaignFeatures,
    HeuristicBidPredictor,
    calculate_confidence,
    extract_features,
    predict_optimal_bid,
)
from ppc_validator.schemas import parse_campaign


def features(acos=0.0, roas=0.0, ctr=0.0, impressions=0.0, clicks=0.0, spend=0.0, sales=0.0):
    return CampaignFeatures(
        historical_acos=acos,
        historical_roas=roas,
        historical_ctr=ctr,
        impressions=impressions,
        clicks=clicks,
        spend=spend,
        sales=sales,
    )


def test_default_bid_without_clicks():
    assert predict_optimal_bid(features(spend=50)) == 0.25
    assert predict_optimal_bid(features(clicks=50)) == 0.25
    print("✅ PASS: default bid without click/spend data")


def test_ctr_fallback_without_acos():
    # current bid 0.50, CTR 2x industry average -> capped at 1.5x
    f = features(ctr=0.02, impressions=500, clicks=100, spend=50)
    assert math.isclose(predict_optimal_bid(f), 0.75)

    f = features(ctr=0.012, impressions=500, clicks=100, spend=50)
    assert math.isclose(predict_optimal_bid(f), 0.6)

    # Not enough impressions: keep current bid
    f = features(ctr=0.02, impressions=50, clicks=100, spend=50)
    assert math.isclose(predict_optimal_bid(f), 0.5)
    print("✅ PASS: CTR-based bid when ACOS is missing")


def test_bid_moves_toward_target_acos():
    # current bid 1.00, ACOS 60 vs target 30 -> halve, within 0.5x floor at full volume
    f = features(acos=60, clicks=100, spend=100)
    assert predict_optimal_bid(f, target_acos=30) == 0.5

    # ACOS 10 vs target 30 -> 3x, capped at 1.5x at full volume
    f = features(acos=10, clicks=100, spend=100)
    assert predict_optimal_bid(f, target_acos=30) == 1.5
    print("✅ PASS: bid scaled toward target ACOS within bounds")


def test_low_volume_bounds_are_tighter():
    # 20 clicks -> volume 0.2 -> max 1.26x, min 0.66x
    f = features(acos=10, clicks=20, spend=20)
    assert predict_optimal_bid(f, target_acos=30) == 1.26

    f = features(acos=90, clicks=20, spend=20)
    assert predict_optimal_bid(f, target_acos=30) == 0.66
    print("✅ PASS: low data volume narrows bid bounds")


def test_absolute_bid_limits():
    f = features(acos=30, clicks=100, spend=2000)      # current bid 20.00
    assert predict_optimal_bid(f, target_acos=30) == 10.0

    f = features(acos=30, clicks=100, spend=5)         # current bid 0.05
    assert predict_optimal_bid(f, target_acos=30) == 0.1
    print("✅ PASS: absolute $0.10-$10.00 limits")


def test_confidence_components():
    # clicks 50 -> 25, sales 2 -> 10, impressions 1000 -> 10, +10 ACOS & ROAS
    f = features(acos=20, roas=5, ctr=0.5, impressions=1000, clicks=50, sales=2)
    assert math.isclose(calculate_confidence(f), 55.0)

    high_acos = features(acos=120, roas=0.8, ctr=0.5, impressions=1000, clicks=50, sales=2)
    assert math.isclose(calculate_confidence(high_acos), 40.0)

    low_ctr = features(acos=20, roas=5, ctr=0.0005, impressions=5000, clicks=50, sales=2)
    # 25 + 10 + 20 + 10 - 20
    assert math.isclose(calculate_confidence(low_ctr), 45.0)
    print("✅ PASS: confidence components")


def test_confidence_clamped():
    full = features(acos=20, roas=5, ctr=0.5, impressions=50000, clicks=1000, sales=500)
    assert calculate_confidence(full) == 100.0

    empty = features(acos=150, ctr=0.0001, impressions=2000)
    assert calculate_confidence(empty) == 0.0
    print("✅ PASS: confidence clamped to 0-100")


def test_extract_features_defaults_missing_to_zero():
    campaign = parse_campaign({"id": 1, "name": "Sparse", "budget": "$1", "status": "enabled",
                               "metrics": {"clicks": 12}})
    f = extract_features(campaign)

    assert f.clicks == 12
    assert f.historical_acos == 0
    assert f.spend == 0
    print("✅ PASS: missing metrics default to zero")


def test_predict_success():
    campaign = parse_campaign({
        "id": 5, "name": "Kitchen - Exact", "budget": "$1.00", "status": "enabled",
        "metrics": {"acos": 60, "roas": 1.67, "ctr": 0.4, "impressions": 10000,
                    "clicks": 100, "spend": 100, "sales": 166},
    })
    outcome = HeuristicBidPredictor(target_acos=25).predict(campaign, 10)

    assert isinstance(outcome, PredictionSuccess)
    p = outcome.prediction
    assert p.campaign_id == "5"
    assert p.current_bid == 1.0
    assert p.suggested_bid == 0.5
    assert p.predicted_acos == 25
    assert math.isclose(p.predicted_roas, 4.0)
    assert p.predicted_ctr == 0.4
    assert 0.0 <= p.confidence <= 1.0, "Confidence reported on a 0-1 scale"
    print("✅ PASS: prediction for campaign with data")


def test_predict_insufficient_data():
    campaign = parse_campaign({"id": 6, "name": "New", "budget": "$1.00", "status": "enabled",
                               "metrics": {"impressions": 300}})
    outcome = HeuristicBidPredictor().predict(campaign)

    assert isinstance(outcome, PredictionFailure)
    assert "Insufficient data" in outcome.reason
    print("✅ PASS: insufficient data reported as failure")


def test_invalid_target_acos():
    try:
        HeuristicBidPredictor(target_acos=0)
    except ValueError as e:
        assert "must be positive" in str(e)
    else:
        raise AssertionError("target_acos=0 should be rejected")
    print("✅ PASS: non-positive target ACOS rejected")


if __name__ == "__main__":
    print("=" * 60)
    print("Bid Predictor Tests")
    print("=" * 60)

    tests = [
        test_default_bid_without_clicks,
        test_ctr_fallback_without_acos,
        test_bid_moves_toward_target_acos,
        test_low_volume_bounds_are_tighter,
        test_absolute_bid_limits,
        test_confidence_components,
        test_confidence_clamped,
        test_extract_features_defaults_missing_to_zero,
        test_predict_success,
        test_predict_insufficient_data,
        test_invalid_target_acos,
    ]

    all_passed = True
    for test in tests:
        try:
            test()
        except AssertionError as e:
            print(f"❌ FAIL: {test.__name__}: {e}")
            all_passed = False

    print("=" * 60)
    print("ALL TESTS PASSED" if all_passed else "SOME TESTS FAILED")
    sys.exit(0 if all_passed else 1)
