"""
PPC Rule Validator

Checks a proposed Amazon PPC bid rule before it is activated:
- Which campaigns its condition tree matches
- Projected bid, ACOS and ROAS impact
- Conflicts with existing rules
- A 0-100 validation score with warnings
"""

__version__ = "1.0.0"

from .engine import load_campaigns, load_rules, validate_rule, validation_report
from .models import Campaign, ConditionGroup, Rule, ValidationResult
from .predictor import BidPredictor, HeuristicBidPredictor
from .rule_checks import check_rule

__all__ = [
    'validate_rule',
    'validation_report',
    'load_campaigns',
    'load_rules',
    'check_rule',
    'Campaign',
    'ConditionGroup',
    'Rule',
    'ValidationResult',
    'BidPredictor',
    'HeuristicBidPredictor',
]
