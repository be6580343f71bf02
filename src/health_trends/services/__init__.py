"""Pipeline services."""

from health_trends.services.aggregator import PERIOD_WINDOWS, PeriodAggregator, PeriodWindow
from health_trends.services.controller import (
    ControllerState,
    MetricController,
    MetricFeeds,
)
from health_trends.services.display import DisplayMapper
from health_trends.services.scale import ScaleCalculator, scale_values
from health_trends.services.store import TimeSeriesStore

__all__ = [
    "ControllerState",
    "DisplayMapper",
    "MetricController",
    "MetricFeeds",
    "PERIOD_WINDOWS",
    "PeriodAggregator",
    "PeriodWindow",
    "ScaleCalculator",
    "TimeSeriesStore",
    "scale_values",
]
