"""Metric and unit enumerations."""

from enum import Enum


class MetricKind(str, Enum):
    """Canonical metric streams.

    The kind selects both the unit conversion and the chart scale policy.
    """

    WEIGHT = "weight"
    STEPS = "steps"
    SLEEP_MINUTES = "sleep_minutes"
    EXERCISE_MINUTES = "exercise_minutes"
    MOVE_MINUTES = "move_minutes"
    ACTIVITY_ENERGY = "activity_energy"
    NUTRITION_ENERGY = "nutrition_energy"
    CARBS = "carbs"
    RESTING_HEART_RATE = "resting_heart_rate"
    BODY_FAT = "body_fat"
    GLUCOSE = "glucose"
    DISTANCE = "distance"


class DisplayUnit(str, Enum):
    """Units a metric can be shown in. The value doubles as the label."""

    KILOGRAM = "kg"
    POUND = "lbs"
    STEPS = "steps"
    MINUTES = "min"
    KILOCALORIE = "kcal"
    GRAM = "g"
    BEATS_PER_MINUTE = "bpm"
    PERCENT = "%"
    MG_PER_DL = "mg/dL"
    MMOL_PER_L = "mmol/L"
    KILOMETER = "km"
    MILE = "mi"

    @property
    def label(self) -> str:
        """Unit label appended to formatted values."""
        return self.value


class ScaleType(str, Enum):
    """Chart axis policies."""

    ENERGY_DAILY = "energy_daily"
    ENERGY_MONTHLY = "energy_monthly"
    GRAMS_DAILY = "grams_daily"
    GRAMS_MONTHLY = "grams_monthly"
    STEPS = "steps"
    STEPS_MONTHLY = "steps_monthly"
    WEIGHT = "weight"
    SLEEP_MINUTES = "sleep_minutes"
    HEART_RATE = "heart_rate"
    EXERCISE_MINUTES = "exercise_minutes"
    MOVE_MINUTES = "move_minutes"
    PERCENT_0_TO_100 = "percent_0_to_100"
    GLUCOSE_MEAN_MGDL = "glucose_mean_mgdl"
    GLUCOSE_MEAN_MMOL = "glucose_mean_mmol"
    DISTANCE = "distance"


class MonthlyAggregation(str, Enum):
    """How daily values roll up into a calendar month."""

    SUM = "sum"  # Cumulative metrics (steps, energy)
    MEAN = "mean"  # Level metrics (weight, heart rate)


class TargetDirection(str, Enum):
    """Which side of the target is desirable."""

    LOWER_IS_BETTER = "lower_is_better"
    HIGHER_IS_BETTER = "higher_is_better"


class DeltaTone(str, Enum):
    """Color classification of a current-vs-target delta."""

    FAVORABLE = "favorable"
    ADVERSE = "adverse"
    NEUTRAL = "neutral"

    @property
    def color(self) -> str:
        """Color name used by the rendering layer."""
        return {
            DeltaTone.FAVORABLE: "green",
            DeltaTone.ADVERSE: "red",
            DeltaTone.NEUTRAL: "blue",
        }[self]
