"""Chart axis scaling.

Scales are always computed from display-unit values, after conversion: a
kilogram axis must never be drawn under a pound series. Each chart (daily,
period, monthly) gets its own scale since their value ranges differ.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import structlog

from health_trends.models.metric import DisplayUnit, MetricKind, ScaleType
from health_trends.models.policy import get_policy
from health_trends.schemas.snapshot import ScaleResult

logger = structlog.get_logger()


class LabelStyle(str, Enum):
    """How tick values are rendered."""

    INTEGER = "integer"
    THOUSANDS = "thousands"  # 10000 -> "10k"
    HOURS = "hours"  # minutes on the axis, hours on the label
    ONE_DECIMAL = "one_decimal"


@dataclass(frozen=True)
class ScaleBand:
    """Step to use while the largest value is below ``below``.

    ``upper`` pins the axis top instead of rounding the maximum up.
    """

    below: float
    step: float
    upper: float | None = None


@dataclass(frozen=True)
class ScalePolicy:
    """Axis rules for one scale type.

    Attributes:
        default_ticks: Axis used when there is no positive value
        bands: Steps by magnitude of the largest value, checked in order
        fallback_step: Step once the maximum exceeds every band
        min_upper: Axis top never drops below this
        window: Axis spans at most this much below the top (heart rate)
        fixed: Ignore values and always use default_ticks
        label_style: Tick label rendering
    """

    default_ticks: tuple[float, ...]
    bands: tuple[ScaleBand, ...] = ()
    fallback_step: float = 1.0
    min_upper: float = 0.0
    window: float | None = None
    fixed: bool = False
    label_style: LabelStyle = LabelStyle.INTEGER


SCALE_POLICIES: Mapping[ScaleType, ScalePolicy] = MappingProxyType(
    {
        ScaleType.ENERGY_DAILY: ScalePolicy(
            default_ticks=(0, 500, 1000, 1500, 2000),
            bands=(ScaleBand(4000, 250), ScaleBand(8000, 500), ScaleBand(20000, 1000)),
            fallback_step=2000,
        ),
        ScaleType.ENERGY_MONTHLY: ScalePolicy(
            default_ticks=(0, 5000, 10000, 15000),
            bands=(ScaleBand(5000, 500), ScaleBand(20000, 1000)),
            fallback_step=2500,
        ),
        ScaleType.GRAMS_DAILY: ScalePolicy(
            default_ticks=(0, 50, 100),
            bands=(
                ScaleBand(100, 25, upper=100),
                ScaleBand(200, 50, upper=200),
                ScaleBand(300, 50, upper=300),
                ScaleBand(400, 100, upper=400),
                ScaleBand(500, 100, upper=500),
                ScaleBand(700, 100, upper=700),
                ScaleBand(900, 150, upper=900),
                ScaleBand(1200, 200, upper=1200),
            ),
            fallback_step=250,
        ),
        ScaleType.GRAMS_MONTHLY: ScalePolicy(
            default_ticks=(0, 250, 500, 750, 1000),
            bands=(ScaleBand(500, 50), ScaleBand(1000, 100), ScaleBand(2000, 200)),
            fallback_step=500,
        ),
        ScaleType.STEPS: ScalePolicy(
            default_ticks=(0, 2000, 4000, 6000, 8000, 10000),
            bands=(ScaleBand(4000, 500), ScaleBand(10000, 1000), ScaleBand(20000, 2000)),
            fallback_step=5000,
            label_style=LabelStyle.THOUSANDS,
        ),
        ScaleType.STEPS_MONTHLY: ScalePolicy(
            default_ticks=(0, 50000, 100000, 150000, 200000),
            bands=(ScaleBand(50000, 10000), ScaleBand(150000, 25000), ScaleBand(300000, 50000)),
            fallback_step=100000,
            label_style=LabelStyle.THOUSANDS,
        ),
        ScaleType.WEIGHT: ScalePolicy(
            default_ticks=(40, 60, 80, 100),
            bands=(ScaleBand(80, 10), ScaleBand(240, 20)),
            fallback_step=50,
        ),
        ScaleType.SLEEP_MINUTES: ScalePolicy(
            default_ticks=(0, 240, 360, 480),
            bands=(ScaleBand(300, 60), ScaleBand(600, 120)),
            fallback_step=180,
            label_style=LabelStyle.HOURS,
        ),
        ScaleType.HEART_RATE: ScalePolicy(
            default_ticks=(40, 60, 80, 100, 120),
            bands=(
                ScaleBand(60, 10, upper=80),
                ScaleBand(100, 10, upper=100),
                ScaleBand(140, 10, upper=140),
                ScaleBand(200, 20, upper=200),
            ),
            fallback_step=20,
            window=160,
        ),
        ScaleType.EXERCISE_MINUTES: ScalePolicy(
            default_ticks=(0, 15, 30, 45, 60),
            bands=(
                ScaleBand(30, 5, upper=30),
                ScaleBand(60, 10, upper=60),
                ScaleBand(90, 15, upper=90),
                ScaleBand(150, 15, upper=150),
            ),
            fallback_step=30,
        ),
        ScaleType.MOVE_MINUTES: ScalePolicy(
            default_ticks=(0, 60, 120, 180, 240),
            bands=(
                ScaleBand(120, 30, upper=120),
                ScaleBand(240, 60, upper=240),
                ScaleBand(360, 90, upper=360),
            ),
            fallback_step=120,
        ),
        ScaleType.PERCENT_0_TO_100: ScalePolicy(
            default_ticks=(0, 25, 50, 75, 100),
            fixed=True,
        ),
        ScaleType.GLUCOSE_MEAN_MGDL: ScalePolicy(
            default_ticks=(0, 50, 100, 150, 200, 250, 300),
            bands=(ScaleBand(120, 20), ScaleBand(200, 25), ScaleBand(300, 50)),
            fallback_step=75,
            min_upper=200,
        ),
        ScaleType.GLUCOSE_MEAN_MMOL: ScalePolicy(
            default_ticks=(0, 4, 8, 12, 16),
            bands=(ScaleBand(7, 1), ScaleBand(11, 2), ScaleBand(17, 3)),
            fallback_step=4,
            min_upper=11,
            label_style=LabelStyle.ONE_DECIMAL,
        ),
        ScaleType.DISTANCE: ScalePolicy(
            default_ticks=(0, 2, 4, 6, 8, 10),
            bands=(ScaleBand(5, 1), ScaleBand(10, 2), ScaleBand(25, 5), ScaleBand(50, 10)),
            fallback_step=25,
        ),
    }
)


def format_tick(value: float, style: LabelStyle) -> str:
    """Render one tick value."""
    if style == LabelStyle.THOUSANDS and value >= 1000:
        return f"{value / 1000:g}k"
    if style == LabelStyle.HOURS:
        return str(round(value / 60.0))
    if style == LabelStyle.ONE_DECIMAL:
        return f"{value:.1f}"
    return str(int(math.floor(value + 0.5)))


def _ticks(start: float, upper: float, step: float) -> list[float]:
    count = int(round((upper - start) / step))
    return [start + i * step for i in range(count + 1)]


def _result(ticks: list[float], step: float, style: LabelStyle) -> ScaleResult:
    return ScaleResult(
        ticks=tuple(ticks),
        min=ticks[0],
        max=ticks[-1],
        step=step,
        labels=tuple(format_tick(t, style) for t in ticks),
    )


def scale_values(values: Iterable[float], scale_type: ScaleType) -> ScaleResult:
    """Derive an axis for display-unit values.

    Non-positive values (no data) are ignored. Empty or all-zero input
    returns the policy's default axis.

    Args:
        values: Display-unit values
        scale_type: Axis policy

    Returns:
        Axis with ``max`` at or above the largest value
    """
    policy = SCALE_POLICIES[scale_type]
    cleaned = [v for v in values if v > 0 and math.isfinite(v)]

    if policy.fixed or not cleaned:
        ticks = list(policy.default_ticks)
        step = ticks[1] - ticks[0] if len(ticks) > 1 else max(ticks[0], 1.0)
        return _result(ticks, step, policy.label_style)

    max_value = max(cleaned)
    band = next((b for b in policy.bands if max_value < b.below), None)

    if band is not None and band.upper is not None:
        step = band.step
        upper = band.upper
    else:
        step = band.step if band is not None else policy.fallback_step
        upper = math.ceil(max_value / step) * step

    upper = max(upper, math.ceil(policy.min_upper / step) * step)
    start = max(0.0, upper - policy.window) if policy.window is not None else 0.0

    return _result(_ticks(start, upper, step), step, policy.label_style)


class ScaleCalculator:
    """Resolve a metric's axis policy and scale its display values."""

    def __init__(self) -> None:
        """Initialize scale calculator."""
        self.logger = logger.bind(service="scale")

    def scale(
        self,
        values: Iterable[float],
        kind: MetricKind,
        unit: DisplayUnit | None = None,
        monthly: bool = False,
    ) -> ScaleResult:
        """Axis for one chart of a metric.

        Args:
            values: Values already converted to ``unit``
            kind: Metric kind
            unit: Display unit of the values (base unit if None)
            monthly: Use the kind's monthly axis policy

        Raises:
            UnsupportedUnitError: If the unit is not valid for the kind
        """
        policy = get_policy(kind)
        scale_type = policy.scale_for(unit or policy.base_unit, monthly=monthly)
        result = scale_values(values, scale_type)
        self.logger.debug(
            "Scale computed",
            kind=policy.kind.value,
            scale_type=scale_type.value,
            max=result.max,
            step=result.step,
        )
        return result
