"""
Rule Validator CLI – Check a proposed rule against campaigns before activating it.

Usage:
    python -m ppc_validator.cli validate samples/rule_high_acos.yaml samples/campaigns.json --existing samples/existing_rules.yaml
    python -m ppc_validator.cli check samples/rule_high_acos.yaml samples/campaigns.json
    python -m ppc_validator.cli predict samples/campaigns.json --target-acos 25
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from .engine import load_campaigns, load_rules, validate_rule, validation_report
from .logging_config import get_logger
from .models import PredictionSuccess, Rule
from .predictor import HeuristicBidPredictor
from .rule_checks import check_rule
from .settings import get_settings

logger = get_logger(__name__)


def _load_single_rule(path: str) -> Rule:
    rules = load_rules(path)
    if len(rules) != 1:
        raise ValueError(f"Expected exactly one rule in {path}, found {len(rules)}")
    return rules[0]


def cmd_validate(args: argparse.Namespace) -> int:
    settings = get_settings()

    rule = _load_single_rule(args.rule)
    campaigns = load_campaigns(args.campaigns)
    existing = load_rules(args.existing) if args.existing else []
    print(f"[Validator] Loaded rule '{rule.name}', {len(campaigns)} campaigns, {len(existing)} existing rules")

    predictor = None
    if args.predict or settings.use_predictor:
        target_acos = args.target_acos if args.target_acos is not None else settings.target_acos
        predictor = HeuristicBidPredictor(target_acos=target_acos)
        print(f"[Validator] Using bid predictor (target ACOS {target_acos:.1f}%)")

    result = validate_rule(rule, campaigns, existing, predictor=predictor)
    report = validation_report(result)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"[Validator] Report saved: {out_path}")

    s = result.impact_summary
    print(f"\n{'='*70}")
    print(f"RULE VALIDATION: {rule.name}")
    print(f"{'='*70}")
    print(f"  Score:        {result.validation_score:.1f} / 100")
    print(f"  Affected:     {len(result.affected_campaigns)} | Unaffected: {len(result.unaffected_campaigns)}")
    print(f"  Avg bid:      {s.average_bid_change:+.1f}%")
    print(f"  ACOS delta:   {s.estimated_acos_delta:+.2f} | ROAS delta: {s.estimated_roas_delta:+.2f}")
    print(f"  Confidence:   {s.confidence:.2f}")
    print(f"  Spend:        {result.current_metrics.spend:.2f} -> {result.projected_metrics.spend:.2f}")
    print(f"  Sales:        {result.current_metrics.sales:.2f} -> {result.projected_metrics.sales:.2f}")
    for r in result.conflicting_rules:
        print(f"  Conflict:     [{r.id}] {r.name} ({r.action})")
    for w in result.warnings:
        print(f"  ⚠️  {w}")

    return 0


def cmd_check(args: argparse.Namespace) -> int:
    rule = _load_single_rule(args.rule)
    campaigns = load_campaigns(args.campaigns) if args.campaigns else []
    existing = load_rules(args.existing) if args.existing else []

    check = check_rule(rule, campaigns, existing)

    status = "VALID" if check.is_valid else "INVALID"
    print(f"[Validator] {rule.name}: {status}")
    print(f"[Validator]   affected campaigns:  {check.affected_count}")
    print(f"[Validator]   potential conflicts: {check.potential_conflicts}")
    for e in check.errors:
        print(f"  ❌ {e}")
    for w in check.warnings:
        print(f"  ⚠️  {w}")

    return 0 if check.is_valid else 1


def cmd_predict(args: argparse.Namespace) -> int:
    settings = get_settings()
    target_acos = args.target_acos if args.target_acos is not None else settings.target_acos
    predictor = HeuristicBidPredictor(target_acos=target_acos)

    campaigns = load_campaigns(args.campaigns)
    print(f"[Validator] Bid predictions for {len(campaigns)} campaigns (target ACOS {target_acos:.1f}%)")

    for c in campaigns:
        outcome = predictor.predict(c)
        if isinstance(outcome, PredictionSuccess):
            p = outcome.prediction
            print(
                f"  [{c.id}] {c.name}: bid {p.current_bid:.2f} -> {p.suggested_bid:.2f} "
                f"| confidence {p.confidence:.2f}"
            )
        else:
            print(f"  [{c.id}] {c.name}: no prediction – {outcome.reason}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ppc_validator", description="Amazon PPC rule validator")
    sub = p.add_subparsers(dest="cmd", required=True)

    v = sub.add_parser("validate", help="Score a rule's projected impact on campaigns")
    v.add_argument("rule", help="Path to rule JSON/YAML")
    v.add_argument("campaigns", help="Path to campaigns JSON/YAML")
    v.add_argument("--existing", default=None, help="Path to existing rules JSON/YAML")
    v.add_argument("--predict", action="store_true", help="Refine estimates with the bid predictor")
    v.add_argument("--target-acos", type=float, default=None, help="Predictor target ACOS (percent)")
    v.add_argument("--out", default=None, help="Write the JSON report to this path")
    v.set_defaults(func=cmd_validate)

    c = sub.add_parser("check", help="Run structural checks on a rule")
    c.add_argument("rule", help="Path to rule JSON/YAML")
    c.add_argument("campaigns", nargs="?", default=None, help="Path to campaigns JSON/YAML")
    c.add_argument("--existing", default=None, help="Path to existing rules JSON/YAML")
    c.set_defaults(func=cmd_check)

    pr = sub.add_parser("predict", help="Suggest bids for campaigns")
    pr.add_argument("campaigns", help="Path to campaigns JSON/YAML")
    pr.add_argument("--target-acos", type=float, default=None, help="Target ACOS (percent)")
    pr.set_defaults(func=cmd_predict)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except (FileNotFoundError, ValueError, ValidationError) as e:
        logger.error(f"{args.cmd} failed: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
