"""
Validator data models - campaigns, rule condition trees, predictions and results.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class Metric(str, Enum):
    """Campaign metrics a rule condition can reference."""
    SPEND = "spend"
    SALES = "sales"
    ACOS = "acos"
    ROAS = "roas"
    CTR = "ctr"
    IMPRESSIONS = "impressions"
    CLICKS = "clicks"
    CPC = "cpc"
    ORDERS = "orders"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["Metric"]:
        if name is None:
            return None
        try:
            return cls(name)
        except ValueError:
            return None


BID_ACTIONS = ("increase_bid", "decrease_bid")
_NUMERIC_PREFIX = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)")


@dataclass(frozen=True)
class CampaignMetrics:
    """Metrics actually reported for a campaign (absent metrics are not stored)."""
    values: Dict[Metric, float] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, raw: Dict[str, Any]) -> "CampaignMetrics":
        values: Dict[Metric, float] = {}
        for key, val in (raw or {}).items():
            metric = Metric.parse(key)
            if metric is None or val is None:
                continue
            values[metric] = float(val)
        return cls(values=values)

    def lookup(self, name: Union[str, Metric, None]) -> Optional[float]:
        """Return the metric value, or None when the metric is unknown or absent."""
        metric = name if isinstance(name, Metric) else Metric.parse(name)
        if metric is None:
            return None
        return self.values.get(metric)

    def value(self, name: Union[str, Metric]) -> float:
        v = self.lookup(name)
        return 0.0 if v is None else v

    def __hash__(self) -> int:
        return hash(tuple(sorted((m.value, v) for m, v in self.values.items())))


@dataclass(frozen=True)
class Campaign:
    id: str
    name: str
    budget: str                         # monetary string, e.g. "$12.50"
    status: str
    metrics: CampaignMetrics = field(default_factory=CampaignMetrics)


# ─────────────────────────────────────────────────────────────
# Conditions
# ─────────────────────────────────────────────────────────────
COMPARISON_OPERATORS = ("greater_than", "less_than", "equal_to", "not_equal_to")


@dataclass(frozen=True)
class ComparisonCondition:
    """Single-bound comparison: greater_than | less_than | equal_to | not_equal_to."""
    metric: Optional[str]
    operator: str
    value: float
    timeframe: Optional[str] = None
    value2: Optional[float] = None      # carried for equality, not evaluated


@dataclass(frozen=True)
class BetweenCondition:
    """Inclusive range check: low <= metric <= high."""
    metric: Optional[str]
    low: float
    high: float
    timeframe: Optional[str] = None

    @property
    def operator(self) -> str:
        return "between"


@dataclass(frozen=True)
class UnsupportedCondition:
    """Condition with an operator the evaluator does not know. Never matches."""
    metric: Optional[str]
    operator: str
    timeframe: Optional[str] = None
    value: Optional[float] = None
    value2: Optional[float] = None


Condition = Union[ComparisonCondition, BetweenCondition, UnsupportedCondition]


@dataclass(frozen=True)
class ConditionGroup:
    operator: str                       # AND | OR
    conditions: Tuple[Condition, ...] = ()


@dataclass(frozen=True)
class Rule:
    id: Optional[str]
    name: str
    conditions: Tuple[ConditionGroup, ...]
    action: str                         # increase_bid | decrease_bid | pause_campaign | enable_campaign | set_bid
    adjustment: float                   # percent for bid actions
    is_active: bool = True

    def metrics_used(self) -> List[str]:
        """Distinct metric names referenced by the rule, in first-seen order."""
        seen: List[str] = []
        for group in self.conditions:
            for cond in group.conditions:
                if cond.metric is not None and cond.metric not in seen:
                    seen.append(cond.metric)
        return seen


# ─────────────────────────────────────────────────────────────
# Bid predictions
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class BidPrediction:
    campaign_id: str
    current_bid: float
    suggested_bid: float
    confidence: float                   # 0-1
    predicted_acos: float
    predicted_roas: float
    predicted_ctr: float


@dataclass(frozen=True)
class PredictionSuccess:
    prediction: BidPrediction


@dataclass(frozen=True)
class PredictionFailure:
    reason: str


PredictionResult = Union[PredictionSuccess, PredictionFailure]


# ─────────────────────────────────────────────────────────────
# Validation results
# ─────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class CampaignImpact:
    campaign: Campaign
    bid_change: float                   # percent, e.g. 10.0 = +10%
    current_bid: float
    new_bid: float
    current_acos: float
    projected_acos: float
    current_roas: float
    projected_roas: float
    acos_delta: float
    roas_delta: float
    confidence: float                   # 0-1


@dataclass(frozen=True)
class ImpactSummary:
    total_bid_change: float = 0.0
    average_bid_change: float = 0.0
    estimated_acos_delta: float = 0.0
    estimated_roas_delta: float = 0.0
    confidence: float = 0.0


@dataclass(frozen=True)
class MetricSnapshot:
    spend: float = 0.0
    sales: float = 0.0
    acos: float = 0.0
    roas: float = 0.0
    ctr: float = 0.0


@dataclass(frozen=True)
class ValidationResult:
    affected_campaigns: List[Campaign]
    unaffected_campaigns: List[Campaign]
    impact_summary: ImpactSummary
    current_metrics: MetricSnapshot
    projected_metrics: MetricSnapshot
    campaign_impacts: List[CampaignImpact]
    conflicting_rules: List[Rule]
    validation_score: float
    warnings: List[str]


def _safe_float(x: Any, default: float = 0.0) -> float:
    if x is None:
        return default
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def parse_budget(budget: Any) -> float:
    """
    Parse a monetary string like "$12.50" into a float.

    Reads the numeric prefix after an optional currency symbol, so "$12.50/day"
    gives 12.5. Unparsable values give 0.
    """
    if budget is None:
        return 0.0
    text = str(budget).strip()
    if text and not (text[0].isdigit() or text[0] in "-+."):
        text = text[1:]
    m = _NUMERIC_PREFIX.match(text.replace(",", ""))
    return _safe_float(m.group(0)) if m else 0.0


def format_number(x: float) -> str:
    """Plain decimal text without exponent notation or trailing zeros."""
    text = f"{x:f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-", "-0") else "0"
