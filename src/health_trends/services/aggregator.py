"""Rolling-window and monthly aggregation over a daily series.

All results are in the metric's base unit. ``None`` is the "no data"
sentinel: a window without a single positive sample has no average, which is
different from an average of zero.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from statistics import mean

import structlog

from health_trends.models.metric import MetricKind, MonthlyAggregation
from health_trends.models.policy import get_policy
from health_trends.models.sample import DatedSample
from health_trends.services.store import TimeSeriesStore

logger = structlog.get_logger()

CHART_DAYS = 90
MONTHLY_MONTHS = 5


@dataclass(frozen=True)
class PeriodWindow:
    """A rolling lookback ending the day before ``as_of``."""

    label: str
    days: int

    def bounds(self, as_of: date) -> tuple[date, date]:
        """First and last day of the window, inclusive."""
        return as_of - timedelta(days=self.days), as_of - timedelta(days=1)


PERIOD_WINDOWS: tuple[PeriodWindow, ...] = tuple(
    PeriodWindow(label=f"{days}T", days=days) for days in (7, 14, 30, 90, 180, 365)
)


@dataclass(frozen=True)
class MonthlyBucket:
    """Base-unit roll-up of one calendar month."""

    month: date
    value: float | None
    sample_count: int = 0


def month_start(day: date) -> date:
    """First day of the month containing ``day``."""
    return day.replace(day=1)


def shift_months(first_of_month: date, months: int) -> date:
    """Move a first-of-month date by a number of months."""
    index = first_of_month.year * 12 + (first_of_month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


class PeriodAggregator:
    """Generic aggregator shared by every metric kind.

    Kinds differ only through their policy entry (monthly roll-up mode); the
    windowing rules are the same for all of them:

    - Rolling windows exclude ``as_of`` itself to avoid partial-day skew.
    - Days with a value of zero or less are not measurements: they count
      neither in the sum nor in the denominator.
    - The chart series includes ``as_of`` and keeps every day, gaps as 0.
    """

    def __init__(self, windows: tuple[PeriodWindow, ...] = PERIOD_WINDOWS) -> None:
        """Initialize aggregator.

        Args:
            windows: Rolling windows for ``period_averages``
        """
        self.windows = windows
        self.logger = logger.bind(service="aggregator")

    def average(
        self,
        kind: MetricKind,
        window_days: int,
        series: TimeSeriesStore,
        as_of: date,
    ) -> float | None:
        """Mean of the positive samples in ``[as_of - window_days, as_of - 1]``.

        Args:
            kind: Metric kind (for logging context)
            window_days: Window length in calendar days
            series: Daily series in base unit
            as_of: Day treated as today (excluded from the window)

        Returns:
            Base-unit average, or None when no day in the window qualifies

        Raises:
            ValueError: If window_days is not positive
        """
        if window_days <= 0:
            raise ValueError(f"window_days must be positive, got {window_days}")

        start, end = PeriodWindow(label="", days=window_days).bounds(as_of)
        values = [s.value for s in series.positive(start, end)]

        if not values:
            self.logger.debug(
                "No data in window", kind=kind.value, window_days=window_days, as_of=str(as_of)
            )
            return None

        return mean(values)

    def period_averages(
        self,
        kind: MetricKind,
        series: TimeSeriesStore,
        as_of: date,
    ) -> list[tuple[PeriodWindow, float | None]]:
        """Base-unit average for every configured window."""
        return [(w, self.average(kind, w.days, series, as_of)) for w in self.windows]

    def chart_series(
        self,
        series: TimeSeriesStore,
        as_of: date,
        days: int = CHART_DAYS,
    ) -> list[DatedSample]:
        """Daily series for ``[as_of - (days - 1), as_of]`` with gaps as 0.

        Returns:
            Exactly ``days`` samples, ascending, none negative
        """
        if days <= 0:
            raise ValueError(f"days must be positive, got {days}")
        start = as_of - timedelta(days=days - 1)
        return series.daily_series(start, as_of)

    def resolve_current(
        self,
        today_value: float | None,
        series: TimeSeriesStore,
        as_of: date,
    ) -> float | None:
        """Today's value, falling back to the latest positive sample.

        Sparse sources (weight, body fat) often have no reading today; the
        latest known measurement stands in for it.
        """
        if today_value is not None and today_value > 0:
            return today_value

        latest = series.latest_positive(on_or_before=as_of)
        if latest is None:
            return None

        self.logger.debug(
            "Using latest known value for today",
            latest_date=str(latest.date),
            as_of=str(as_of),
        )
        return latest.value

    def monthly_series(
        self,
        kind: MetricKind,
        series: TimeSeriesStore,
        as_of: date,
        months: int = MONTHLY_MONTHS,
    ) -> list[MonthlyBucket]:
        """Calendar-month roll-up ending with the month of ``as_of``.

        Cumulative kinds (steps, energy) sum their positive days; level kinds
        (weight, heart rate) average them. Months without data get None.

        Args:
            kind: Metric kind, selects sum or mean
            series: Daily series in base unit
            as_of: Last day included
            months: Number of months, current month included

        Returns:
            One bucket per month, oldest first
        """
        if months <= 0:
            raise ValueError(f"months must be positive, got {months}")

        aggregation = get_policy(kind).monthly_aggregation
        first = shift_months(month_start(as_of), -(months - 1))

        buckets: list[MonthlyBucket] = []
        for offset in range(months):
            start = shift_months(first, offset)
            end = min(shift_months(start, 1) - timedelta(days=1), as_of)
            values = [s.value for s in series.positive(start, end)]

            if not values:
                value = None
            elif aggregation == MonthlyAggregation.SUM:
                value = sum(values)
            else:
                value = mean(values)

            buckets.append(MonthlyBucket(month=start, value=value, sample_count=len(values)))

        return buckets
