import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional, Union

from .models import (
    COMPARISON_OPERATORS,
    BetweenCondition,
    Campaign,
    CampaignMetrics,
    ComparisonCondition,
    Condition,
    ConditionGroup,
    Metric,
    Rule,
    UnsupportedCondition,
)


class CampaignPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: Union[int, str]
    name: str
    budget: Union[str, float, int] = "0"
    status: str = "enabled"
    metrics: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("metrics")
    @classmethod
    def known_metrics_numeric(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        # Unknown keys pass through untouched; known metrics must be finite numbers
        out: Dict[str, Any] = {}
        for key, val in v.items():
            if Metric.parse(key) is None or val is None:
                out[key] = val
                continue
            try:
                num = float(val)
            except (TypeError, ValueError):
                raise ValueError(f"metric '{key}' must be a number, got {val!r}")
            if not math.isfinite(num):
                raise ValueError(f"metric '{key}' must be finite, got {val!r}")
            out[key] = num
        return out

    def to_campaign(self) -> Campaign:
        return Campaign(
            id=str(self.id),
            name=self.name,
            budget=str(self.budget),
            status=self.status,
            metrics=CampaignMetrics.from_mapping(self.metrics),
        )


class ConditionPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    metric: Optional[str] = None
    operator: str
    value: Optional[float] = None
    value2: Optional[float] = None
    timeframe: Optional[str] = None

    @model_validator(mode="after")
    def bounds_present(self) -> "ConditionPayload":
        if self.operator == "between" and (self.value is None or self.value2 is None):
            raise ValueError("between condition requires value and value2")
        if self.operator in COMPARISON_OPERATORS and self.value is None:
            raise ValueError(f"{self.operator} condition requires value")
        return self

    def to_condition(self) -> Condition:
        if self.operator == "between":
            return BetweenCondition(
                metric=self.metric, low=self.value, high=self.value2, timeframe=self.timeframe
            )
        if self.operator in COMPARISON_OPERATORS:
            return ComparisonCondition(
                metric=self.metric,
                operator=self.operator,
                value=self.value,
                timeframe=self.timeframe,
                value2=self.value2,
            )
        return UnsupportedCondition(
            metric=self.metric,
            operator=self.operator,
            timeframe=self.timeframe,
            value=self.value,
            value2=self.value2,
        )


class ConditionGroupPayload(BaseModel):
    operator: str = "AND"
    conditions: List[ConditionPayload] = Field(default_factory=list)

    def to_group(self) -> ConditionGroup:
        return ConditionGroup(
            operator=self.operator,
            conditions=tuple(c.to_condition() for c in self.conditions),
        )


class RulePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = None
    name: str
    conditions: List[ConditionGroupPayload] = Field(default_factory=list)
    action: str
    adjustment: float = 0.0
    is_active: bool = Field(default=True, alias="isActive")

    def to_rule(self) -> Rule:
        return Rule(
            id=None if self.id is None else str(self.id),
            name=self.name,
            conditions=tuple(g.to_group() for g in self.conditions),
            action=self.action,
            adjustment=self.adjustment,
            is_active=self.is_active,
        )


def parse_campaign(data: Dict[str, Any]) -> Campaign:
    # Raises ValidationError if invalid
    return CampaignPayload.model_validate(data).to_campaign()


def parse_rule(data: Dict[str, Any]) -> Rule:
    # Raises ValidationError if invalid
    return RulePayload.model_validate(data).to_rule()
