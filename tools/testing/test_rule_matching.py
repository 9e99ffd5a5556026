"""
Test rule matching - conditions, condition groups and rules.

Covers:
1. Operator semantics (between inclusive, equal_to exact)
2. Absent / unknown metrics never match
3. Empty AND / OR groups
4. Rules OR their condition groups

Run: python tools/testing/test_rule_matching.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ppc_validator.matching import (
    matches_condition,
    matches_group,
    matches_rule,
    partition_campaigns,
)
from ppc_validator.models import (
    BetweenCondition,
    ComparisonCondition,
    ConditionGroup,
    Rule,
    UnsupportedCondition,
)
from ppc_validator.schemas import parse_campaign, parse_rule


def make_campaign(campaign_id="1", **metrics):
    return parse_campaign({
        "id": campaign_id,
        "name": f"Campaign {campaign_id}",
        "budget": "$1.00",
        "status": "enabled",
        "metrics": metrics,
    })


def test_between_is_inclusive():
    """Both bounds of a between condition match."""
    cond = BetweenCondition(metric="acos", low=10, high=20)

    assert matches_condition(make_campaign(acos=10), cond), "Lower bound should match"
    assert matches_condition(make_campaign(acos=20), cond), "Upper bound should match"
    assert matches_condition(make_campaign(acos=15.5), cond)
    assert not matches_condition(make_campaign(acos=20.01), cond)
    assert not matches_condition(make_campaign(acos=9.99), cond)
    print("✅ PASS: between includes both bounds")


def test_equal_to_is_exact():
    cond = ComparisonCondition(metric="acos", operator="equal_to", value=15)

    assert not matches_condition(make_campaign(acos=14.999999), cond), "No tolerance on equal_to"
    assert matches_condition(make_campaign(acos=15.0), cond)
    print("✅ PASS: equal_to uses exact comparison")


def test_comparison_operators():
    c = make_campaign(roas=4.0)

    assert matches_condition(c, ComparisonCondition("roas", "greater_than", 3))
    assert not matches_condition(c, ComparisonCondition("roas", "greater_than", 4))
    assert matches_condition(c, ComparisonCondition("roas", "less_than", 4.5))
    assert not matches_condition(c, ComparisonCondition("roas", "less_than", 4))
    assert matches_condition(c, ComparisonCondition("roas", "not_equal_to", 3))
    assert not matches_condition(c, ComparisonCondition("roas", "not_equal_to", 4))
    print("✅ PASS: comparison operators")


def test_absent_metric_never_matches():
    """A metric missing from the campaign excludes it, even for not_equal_to."""
    c = make_campaign(acos=20)

    assert not matches_condition(c, ComparisonCondition("ctr", "greater_than", 0))
    assert not matches_condition(c, ComparisonCondition("ctr", "not_equal_to", 1))
    assert not matches_condition(c, ComparisonCondition("conversions", "greater_than", 0)), \
        "Unknown metric name should not match"
    assert not matches_condition(c, ComparisonCondition(None, "greater_than", 0)), \
        "Condition without metric should not match"
    print("✅ PASS: absent metrics never match")


def test_zero_metric_is_present():
    c = make_campaign(spend=0)
    assert matches_condition(c, ComparisonCondition("spend", "equal_to", 0))
    print("✅ PASS: zero-valued metric is still present")


def test_unsupported_operator_never_matches():
    c = make_campaign(acos=20)
    assert not matches_condition(c, UnsupportedCondition(metric="acos", operator="contains"))
    print("✅ PASS: unknown operator does not match")


def test_empty_groups():
    c = make_campaign(acos=20)

    assert matches_group(c, ConditionGroup(operator="AND", conditions=())), "Empty AND matches"
    assert not matches_group(c, ConditionGroup(operator="OR", conditions=())), "Empty OR does not match"
    print("✅ PASS: empty AND matches, empty OR does not")


def test_group_operators():
    c = make_campaign(acos=20, clicks=5)
    high_acos = ComparisonCondition("acos", "greater_than", 15)
    many_clicks = ComparisonCondition("clicks", "greater_than", 50)

    assert not matches_group(c, ConditionGroup("AND", (high_acos, many_clicks)))
    assert matches_group(c, ConditionGroup("OR", (high_acos, many_clicks)))
    assert not matches_group(c, ConditionGroup("and", (high_acos,))), "Group operator is case-sensitive"
    assert not matches_group(c, ConditionGroup("XOR", (high_acos,)))
    print("✅ PASS: AND / OR group semantics")


def test_rule_groups_are_ored():
    rule = parse_rule({
        "name": "High ACOS or low CTR",
        "action": "decrease_bid",
        "adjustment": 10,
        "conditions": [
            {"operator": "AND", "conditions": [{"metric": "acos", "operator": "greater_than", "value": 40}]},
            {"operator": "AND", "conditions": [{"metric": "ctr", "operator": "less_than", "value": 0.2}]},
        ],
    })

    assert matches_rule(make_campaign(acos=50, ctr=0.5), rule)
    assert matches_rule(make_campaign(acos=10, ctr=0.1), rule)
    assert not matches_rule(make_campaign(acos=10, ctr=0.5), rule)
    print("✅ PASS: rule matches when any group matches")


def test_rule_without_groups_matches_nothing():
    rule = Rule(id="1", name="Empty", conditions=(), action="increase_bid", adjustment=10)
    assert not matches_rule(make_campaign(acos=20), rule)
    print("✅ PASS: rule with no groups matches nothing")


def test_partition_keeps_order():
    rule = parse_rule({
        "name": "ACOS over 15",
        "action": "increase_bid",
        "adjustment": 10,
        "conditions": [{"operator": "AND", "conditions": [{"metric": "acos", "operator": "greater_than", "value": 15}]}],
    })
    campaigns = [
        make_campaign("a", acos=20),
        make_campaign("b", acos=10),
        make_campaign("c", acos=30),
        make_campaign("d"),
    ]

    affected, unaffected = partition_campaigns(rule, campaigns)

    assert [c.id for c in affected] == ["a", "c"]
    assert [c.id for c in unaffected] == ["b", "d"]
    print("✅ PASS: partition preserves campaign order")


if __name__ == "__main__":
    print("=" * 60)
    print("Rule Matching Tests")
    print("=" * 60)

    tests = [
        test_between_is_inclusive,
        test_equal_to_is_exact,
        test_comparison_operators,
        test_absent_metric_never_matches,
        test_zero_metric_is_present,
        test_unsupported_operator_never_matches,
        test_empty_groups,
        test_group_operators,
        test_rule_groups_are_ored,
        test_rule_without_groups_matches_nothing,
        test_partition_keeps_order,
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
