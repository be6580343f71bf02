"""Per-metric strategy table.

Every metric kind shares one aggregation pipeline. What differs between kinds
(base unit, convertible display units, chart scale, monthly roll-up and which
side of the target is desirable) lives here as data instead of in subclasses.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from health_trends.core.exceptions import UnsupportedUnitError
from health_trends.models.metric import (
    DisplayUnit,
    MetricKind,
    MonthlyAggregation,
    ScaleType,
    TargetDirection,
)


@dataclass(frozen=True)
class MetricPolicy:
    """Static rules for one metric kind.

    Attributes:
        kind: Metric this policy belongs to
        base_unit: Canonical unit samples are stored and averaged in
        factors: Multiplier from base unit to each allowed display unit
        scale_type: Axis policy for daily and period charts
        monthly_scale_type: Axis policy for the monthly chart
        monthly_aggregation: Roll-up of daily values into months
        target_direction: Which side of the target is desirable
        unit_scale_types: Display units that need their own axis policy
    """

    kind: MetricKind
    base_unit: DisplayUnit
    factors: Mapping[DisplayUnit, float]
    scale_type: ScaleType
    monthly_scale_type: ScaleType
    monthly_aggregation: MonthlyAggregation
    target_direction: TargetDirection
    unit_scale_types: Mapping[DisplayUnit, ScaleType] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def display_units(self) -> tuple[DisplayUnit, ...]:
        """Units this kind can be displayed in, base unit first."""
        return tuple(self.factors)

    def factor(self, unit: DisplayUnit) -> float:
        """Base-to-display multiplier for a unit.

        Raises:
            UnsupportedUnitError: If the unit is not valid for this kind
        """
        try:
            return self.factors[unit]
        except KeyError:
            raise UnsupportedUnitError(self.kind, unit) from None

    def scale_for(self, unit: DisplayUnit, monthly: bool = False) -> ScaleType:
        """Axis policy for values already converted to ``unit``."""
        self.factor(unit)
        if unit in self.unit_scale_types:
            return self.unit_scale_types[unit]
        return self.monthly_scale_type if monthly else self.scale_type


def _single(unit: DisplayUnit) -> Mapping[DisplayUnit, float]:
    return MappingProxyType({unit: 1.0})


KG_TO_LBS = 2.20462
MGDL_PER_MMOL = 18.0
MILES_PER_KM = 0.62137119223733

METRIC_POLICIES: Mapping[MetricKind, MetricPolicy] = MappingProxyType(
    {
        MetricKind.WEIGHT: MetricPolicy(
            kind=MetricKind.WEIGHT,
            base_unit=DisplayUnit.KILOGRAM,
            factors=MappingProxyType(
                {DisplayUnit.KILOGRAM: 1.0, DisplayUnit.POUND: KG_TO_LBS}
            ),
            scale_type=ScaleType.WEIGHT,
            monthly_scale_type=ScaleType.WEIGHT,
            monthly_aggregation=MonthlyAggregation.MEAN,
            target_direction=TargetDirection.LOWER_IS_BETTER,
        ),
        MetricKind.STEPS: MetricPolicy(
            kind=MetricKind.STEPS,
            base_unit=DisplayUnit.STEPS,
            factors=_single(DisplayUnit.STEPS),
            scale_type=ScaleType.STEPS,
            monthly_scale_type=ScaleType.STEPS_MONTHLY,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
        MetricKind.SLEEP_MINUTES: MetricPolicy(
            kind=MetricKind.SLEEP_MINUTES,
            base_unit=DisplayUnit.MINUTES,
            factors=_single(DisplayUnit.MINUTES),
            scale_type=ScaleType.SLEEP_MINUTES,
            monthly_scale_type=ScaleType.SLEEP_MINUTES,
            monthly_aggregation=MonthlyAggregation.MEAN,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
        MetricKind.EXERCISE_MINUTES: MetricPolicy(
            kind=MetricKind.EXERCISE_MINUTES,
            base_unit=DisplayUnit.MINUTES,
            factors=_single(DisplayUnit.MINUTES),
            scale_type=ScaleType.EXERCISE_MINUTES,
            monthly_scale_type=ScaleType.MOVE_MINUTES,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
        MetricKind.MOVE_MINUTES: MetricPolicy(
            kind=MetricKind.MOVE_MINUTES,
            base_unit=DisplayUnit.MINUTES,
            factors=_single(DisplayUnit.MINUTES),
            scale_type=ScaleType.MOVE_MINUTES,
            monthly_scale_type=ScaleType.MOVE_MINUTES,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
        MetricKind.ACTIVITY_ENERGY: MetricPolicy(
            kind=MetricKind.ACTIVITY_ENERGY,
            base_unit=DisplayUnit.KILOCALORIE,
            factors=_single(DisplayUnit.KILOCALORIE),
            scale_type=ScaleType.ENERGY_DAILY,
            monthly_scale_type=ScaleType.ENERGY_MONTHLY,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
        MetricKind.NUTRITION_ENERGY: MetricPolicy(
            kind=MetricKind.NUTRITION_ENERGY,
            base_unit=DisplayUnit.KILOCALORIE,
            factors=_single(DisplayUnit.KILOCALORIE),
            scale_type=ScaleType.ENERGY_DAILY,
            monthly_scale_type=ScaleType.ENERGY_MONTHLY,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.LOWER_IS_BETTER,
        ),
        MetricKind.CARBS: MetricPolicy(
            kind=MetricKind.CARBS,
            base_unit=DisplayUnit.GRAM,
            factors=_single(DisplayUnit.GRAM),
            scale_type=ScaleType.GRAMS_DAILY,
            monthly_scale_type=ScaleType.GRAMS_MONTHLY,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.LOWER_IS_BETTER,
        ),
        MetricKind.RESTING_HEART_RATE: MetricPolicy(
            kind=MetricKind.RESTING_HEART_RATE,
            base_unit=DisplayUnit.BEATS_PER_MINUTE,
            factors=_single(DisplayUnit.BEATS_PER_MINUTE),
            scale_type=ScaleType.HEART_RATE,
            monthly_scale_type=ScaleType.HEART_RATE,
            monthly_aggregation=MonthlyAggregation.MEAN,
            target_direction=TargetDirection.LOWER_IS_BETTER,
        ),
        MetricKind.BODY_FAT: MetricPolicy(
            kind=MetricKind.BODY_FAT,
            base_unit=DisplayUnit.PERCENT,
            factors=_single(DisplayUnit.PERCENT),
            scale_type=ScaleType.PERCENT_0_TO_100,
            monthly_scale_type=ScaleType.PERCENT_0_TO_100,
            monthly_aggregation=MonthlyAggregation.MEAN,
            target_direction=TargetDirection.LOWER_IS_BETTER,
        ),
        MetricKind.GLUCOSE: MetricPolicy(
            kind=MetricKind.GLUCOSE,
            base_unit=DisplayUnit.MG_PER_DL,
            factors=MappingProxyType(
                {DisplayUnit.MG_PER_DL: 1.0, DisplayUnit.MMOL_PER_L: 1 / MGDL_PER_MMOL}
            ),
            scale_type=ScaleType.GLUCOSE_MEAN_MGDL,
            monthly_scale_type=ScaleType.GLUCOSE_MEAN_MGDL,
            monthly_aggregation=MonthlyAggregation.MEAN,
            target_direction=TargetDirection.LOWER_IS_BETTER,
            unit_scale_types=MappingProxyType(
                {DisplayUnit.MMOL_PER_L: ScaleType.GLUCOSE_MEAN_MMOL}
            ),
        ),
        MetricKind.DISTANCE: MetricPolicy(
            kind=MetricKind.DISTANCE,
            base_unit=DisplayUnit.KILOMETER,
            factors=MappingProxyType(
                {DisplayUnit.KILOMETER: 1.0, DisplayUnit.MILE: MILES_PER_KM}
            ),
            scale_type=ScaleType.DISTANCE,
            monthly_scale_type=ScaleType.DISTANCE,
            monthly_aggregation=MonthlyAggregation.SUM,
            target_direction=TargetDirection.HIGHER_IS_BETTER,
        ),
    }
)


def get_policy(kind: MetricKind) -> MetricPolicy:
    """Look up the policy for a metric kind.

    Raises:
        UnsupportedUnitError: If the kind has no policy entry
    """
    try:
        return METRIC_POLICIES[MetricKind(kind)]
    except (KeyError, ValueError):
        raise UnsupportedUnitError(kind, None) from None
