"""Output schemas."""

from health_trends.schemas.snapshot import (
    ChartPoint,
    MonthlyMetricEntry,
    PeriodAverageEntry,
    ScaleResult,
    Snapshot,
)

__all__ = [
    "ChartPoint",
    "MonthlyMetricEntry",
    "PeriodAverageEntry",
    "ScaleResult",
    "Snapshot",
]
