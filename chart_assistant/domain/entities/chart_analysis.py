"""Structured chart analysis as returned by the model in JSON mode."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Confidence = Literal["low", "medium", "high"]

ComparisonType = Literal["YoY", "QoQ", "MoM", "WoW", "vs_target", "period_over_period"]


class Metric(BaseModel):
    name: str
    unit: Optional[str] = None


class Timeframe(BaseModel):
    start: Optional[str] = None
    end: Optional[str] = None
    frequency: Optional[str] = None  # e.g. "daily", "quarterly", "1D"


class KeyValue(BaseModel):
    label: str
    value: Union[float, int, str]
    unit: Optional[str] = None
    where_in_chart: Optional[str] = None


class Comparison(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: ComparisonType
    from_: str = Field(alias="from")
    to: str
    delta_abs: Optional[float] = None
    delta_pct: Optional[float] = None


class Outlier(BaseModel):
    point: str
    reason: Optional[str] = None
    impact: Optional[str] = None


class ChartAnalysis(BaseModel):
    """Every field is optional; models routinely omit sections."""
    model_config = ConfigDict(populate_by_name=True)

    prose_summary: Optional[str] = None
    chart_type: Optional[str] = None
    metric: Optional[Metric] = None
    timeframe: Optional[Timeframe] = None
    main_trends: Optional[List[str]] = None
    key_values: Optional[List[KeyValue]] = None
    comparisons: Optional[List[Comparison]] = None
    outliers: Optional[List[Outlier]] = None
    insights: Optional[List[str]] = None
    risks_or_limitations: Optional[List[str]] = None
    recommended_actions: Optional[List[str]] = None
    assumptions: Optional[List[str]] = None
    confidence: Optional[Confidence] = None
    follow_up_questions: Optional[List[str]] = None
