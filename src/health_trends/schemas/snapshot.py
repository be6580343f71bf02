"""Pydantic schemas for the published pipeline output."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from health_trends.models.metric import DeltaTone, DisplayUnit, MetricKind


class PeriodAverageEntry(BaseModel):
    """Rolling average over one period window, in display unit."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Window label (e.g., '7T')")
    days: int = Field(gt=0, description="Window length in calendar days")
    value: int = Field(description="Average in display unit, 0 when no data")


class ChartPoint(BaseModel):
    """One day of the raw chart series, in display unit."""

    model_config = ConfigDict(frozen=True)

    day: date = Field(description="Calendar day")
    value: float = Field(ge=0, description="Value in display unit, 0 when no data")


class MonthlyMetricEntry(BaseModel):
    """One calendar month of the monthly series, in display unit."""

    model_config = ConfigDict(frozen=True)

    month: date = Field(description="First day of the month")
    label: str = Field(description="Abbreviated month name")
    value: int = Field(description="Monthly sum or mean in display unit")


class ScaleResult(BaseModel):
    """Axis descriptor for one chart."""

    model_config = ConfigDict(frozen=True)

    ticks: tuple[float, ...] = Field(description="Tick positions, ascending")
    min: float = Field(description="Lower axis bound")
    max: float = Field(description="Upper axis bound")
    step: float = Field(gt=0, description="Distance between ticks")
    labels: tuple[str, ...] = Field(default=(), description="Tick labels")


class Snapshot(BaseModel):
    """Complete output of one recompute pass.

    Every field is derived from the same generation of inputs. A new
    snapshot replaces the previous one; snapshots are never mutated.
    """

    model_config = ConfigDict(frozen=True)

    # Metadata
    kind: MetricKind = Field(description="Metric kind")
    unit: DisplayUnit = Field(description="Display unit of every display field")
    generation: int = Field(description="Input generation this snapshot reflects")
    as_of: date = Field(description="Calendar day treated as today")
    generated_at: datetime = Field(description="When the snapshot was built")

    # Base-unit KPI inputs
    today_value: float | None = Field(
        default=None, description="Today's value (base unit), latest known if today is missing"
    )
    target_value: float | None = Field(default=None, description="Target (base unit)")

    # Series
    chart_series: tuple[ChartPoint, ...] = Field(
        default=(), description="Raw daily series, inclusive of today"
    )
    period_averages: tuple[PeriodAverageEntry, ...] = Field(
        default=(), description="Rolling averages per window"
    )
    monthly_series: tuple[MonthlyMetricEntry, ...] = Field(
        default=(), description="Calendar month roll-up"
    )

    # Scales
    daily_scale: ScaleResult = Field(description="Axis for the chart series")
    period_scale: ScaleResult = Field(description="Axis for the period averages")
    monthly_scale: ScaleResult = Field(description="Axis for the monthly series")

    # KPI strings
    current_text: str = Field(description="Formatted current value")
    target_text: str = Field(description="Formatted target value")
    delta_text: str = Field(description="Formatted current minus target")
    delta_tone: DeltaTone = Field(description="Color classification of the delta")
    remaining_to_target: float | None = Field(
        default=None,
        description="Display-unit amount still needed to reach a higher-is-better target",
    )
