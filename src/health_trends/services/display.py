"""Base-unit results to display-unit entries and KPI strings."""

import math
from collections.abc import Iterable

import structlog

from health_trends.models.metric import DeltaTone, DisplayUnit, MetricKind, TargetDirection
from health_trends.models.policy import get_policy
from health_trends.models.sample import DatedSample
from health_trends.schemas.snapshot import ChartPoint, MonthlyMetricEntry, PeriodAverageEntry
from health_trends.services.aggregator import MonthlyBucket, PeriodWindow
from health_trends.services.conversion import to_display

logger = structlog.get_logger()

NO_DATA_TEXT = "–"
MINUS_SIGN = "−"
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    ``round()`` uses banker's rounding (``round(2.5) == 2``), which is not
    what people expect on a chart label.
    """
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def format_number(value: float, fraction_digits: int = 1) -> str:
    """Decimal string with thousands separators."""
    return f"{value:,.{fraction_digits}f}"


class DisplayMapper:
    """Map one metric's base-unit results into one display unit."""

    def __init__(self, kind: MetricKind, unit: DisplayUnit) -> None:
        """Initialize display mapper.

        Args:
            kind: Metric kind
            unit: Display unit, must be valid for the kind

        Raises:
            UnsupportedUnitError: If the unit is not valid for the kind
        """
        self.kind = kind
        self.unit = unit
        self.policy = get_policy(kind)
        self.policy.factor(unit)
        self.logger = logger.bind(service="display", kind=kind.value, unit=unit.value)

    def convert(self, base_value: float) -> float:
        """Base to display unit, no rounding."""
        return to_display(base_value, self.kind, self.unit)

    def map_period_averages(
        self,
        base_averages: Iterable[tuple[PeriodWindow, float | None]],
    ) -> list[PeriodAverageEntry]:
        """Convert window averages and round them to whole display units.

        Windows without data map to 0.
        """
        entries = []
        for window, base_value in base_averages:
            value = 0 if base_value is None else round_half_away(self.convert(base_value))
            entries.append(PeriodAverageEntry(label=window.label, days=window.days, value=value))
        return entries

    def map_chart_series(self, samples: Iterable[DatedSample]) -> list[ChartPoint]:
        """Convert the raw daily series, keeping fractions, floored at 0."""
        return [
            ChartPoint(day=s.date, value=max(0.0, self.convert(s.value))) for s in samples
        ]

    def map_monthly(self, buckets: Iterable[MonthlyBucket]) -> list[MonthlyMetricEntry]:
        """Convert monthly buckets and round to whole display units."""
        return [
            MonthlyMetricEntry(
                month=b.month,
                label=MONTH_LABELS[b.month.month - 1],
                value=0 if b.value is None else max(0, round_half_away(self.convert(b.value))),
            )
            for b in buckets
        ]

    def format_value(self, base_value: float | None) -> str:
        """One-decimal display value with unit label, or a dash for no data."""
        if base_value is None or base_value <= 0:
            return NO_DATA_TEXT
        return f"{format_number(self.convert(base_value))} {self.unit.label}"

    def format_current(self, base_value: float | None) -> str:
        """KPI text for the current value."""
        return self.format_value(base_value)

    def format_target(self, base_value: float | None) -> str:
        """KPI text for the target value."""
        return self.format_value(base_value)

    def delta_tone(self, base_delta: float) -> DeltaTone:
        """Color classification for a current-minus-target delta."""
        if base_delta == 0:
            return DeltaTone.NEUTRAL

        above_target = base_delta > 0
        if self.policy.target_direction == TargetDirection.LOWER_IS_BETTER:
            return DeltaTone.ADVERSE if above_target else DeltaTone.FAVORABLE
        return DeltaTone.FAVORABLE if above_target else DeltaTone.ADVERSE

    def format_delta(self, base_delta: float) -> tuple[str, DeltaTone]:
        """Signed delta text and its tone.

        Sign and tone follow the delta as displayed, rounded to one decimal:
        a difference too small to show renders as zero with a plus-minus
        sign. Positives get "+", negatives a true minus sign (U+2212).

        Returns:
            Tuple of (text, tone)
        """
        shown = round_half_away(self.convert(base_delta) * 10) / 10

        if shown == 0:
            sign, tone = "±", DeltaTone.NEUTRAL
        elif shown > 0:
            sign, tone = "+", self.delta_tone(base_delta)
        else:
            sign, tone = MINUS_SIGN, self.delta_tone(base_delta)

        return f"{sign}{format_number(abs(shown))} {self.unit.label}", tone

    def format_kpi_delta(
        self, current: float | None, target: float | None
    ) -> tuple[str, DeltaTone]:
        """Delta between current and target, dash when either is missing."""
        if current is None or current <= 0 or target is None or target <= 0:
            return NO_DATA_TEXT, DeltaTone.NEUTRAL
        return self.format_delta(current - target)

    def remaining_to_target(self, current: float | None, target: float | None) -> float | None:
        """Display-unit amount left to reach a higher-is-better target.

        Returns None for lower-is-better kinds and when no target is set.
        """
        if self.policy.target_direction != TargetDirection.HIGHER_IS_BETTER:
            return None
        if target is None or target <= 0:
            return None
        return self.convert(max(target - (current or 0.0), 0.0))
