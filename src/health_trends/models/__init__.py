"""Domain models."""

from health_trends.models.metric import (
    DeltaTone,
    DisplayUnit,
    MetricKind,
    MonthlyAggregation,
    ScaleType,
    TargetDirection,
)
from health_trends.models.policy import METRIC_POLICIES, MetricPolicy, get_policy
from health_trends.models.sample import DatedSample

__all__ = [
    "DatedSample",
    "DeltaTone",
    "DisplayUnit",
    "METRIC_POLICIES",
    "MetricKind",
    "MetricPolicy",
    "MonthlyAggregation",
    "ScaleType",
    "TargetDirection",
    "get_policy",
]
