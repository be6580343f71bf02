"""Tests for chart scaling."""

import math

import pytest

from health_trends.core.exceptions import UnsupportedUnitError
from health_trends.models.metric import DisplayUnit, MetricKind, ScaleType
from health_trends.services.scale import (
    SCALE_POLICIES,
    LabelStyle,
    ScaleCalculator,
    format_tick,
    scale_values,
)


class TestScaleValues:
    """Tests for scale_values."""

    @pytest.mark.parametrize("scale_type", list(ScaleType))
    @pytest.mark.parametrize("values", [[], [0, 0, 0], [-5, 0]])
    def test_no_data_gives_default_axis(self, scale_type, values) -> None:
        """Test empty or non-positive input yields a sane default range."""
        result = scale_values(values, scale_type)

        assert result.max > result.min
        assert result.step > 0
        assert all(math.isfinite(t) for t in result.ticks)
        assert result.ticks == tuple(SCALE_POLICIES[scale_type].default_ticks)

    def test_steps_thousands(self) -> None:
        """Test step counts get round thousand increments above the max."""
        result = scale_values([10000, 12000, 8000], ScaleType.STEPS)

        assert result.step == 2000
        assert result.max == 12000
        assert result.ticks == (0, 2000, 4000, 6000, 8000, 10000, 12000)
        assert result.labels[-1] == "12k"

    @pytest.mark.parametrize("scale_type", list(ScaleType))
    @pytest.mark.parametrize("peak", [0.4, 7.3, 55, 99.9, 163, 1234, 18500, 420000])
    def test_max_covers_largest_value(self, scale_type, peak) -> None:
        """Test every non-fixed axis reaches the largest value."""
        if SCALE_POLICIES[scale_type].fixed:
            pytest.skip("fixed axis")
        result = scale_values([peak / 2, peak], scale_type)

        assert result.max >= peak
        assert result.ticks[0] == result.min
        assert result.ticks[-1] == result.max
        assert all(b - a == pytest.approx(result.step) for a, b in zip(result.ticks, result.ticks[1:]))

    def test_percent_is_fixed(self) -> None:
        """Test percentages always span 0-100."""
        result = scale_values([12.5, 30.0], ScaleType.PERCENT_0_TO_100)

        assert result.min == 0
        assert result.max == 100

    def test_weight_pounds_range(self) -> None:
        """Test a pound series gets a pound-sized axis."""
        result = scale_values([158.7, 161.0], ScaleType.WEIGHT)

        assert result.step == 20
        assert result.max == 180

    def test_fixed_band_upper(self) -> None:
        """Test bands with a pinned top ignore the exact max."""
        result = scale_values([42], ScaleType.EXERCISE_MINUTES)

        assert result.max == 60
        assert result.step == 10

    def test_heart_rate_window(self) -> None:
        """Test the heart rate axis starts at most 160 below the top."""
        result = scale_values([230], ScaleType.HEART_RATE)

        assert result.max == 240
        assert result.min == 80

    def test_glucose_minimum_top(self) -> None:
        """Test glucose axes never stop below 200 mg/dL."""
        assert scale_values([95], ScaleType.GLUCOSE_MEAN_MGDL).max == 200
        assert scale_values([5.3], ScaleType.GLUCOSE_MEAN_MMOL).max == 11

    def test_sleep_hour_labels(self) -> None:
        """Test sleep minutes are labelled in hours."""
        result = scale_values([430, 475], ScaleType.SLEEP_MINUTES)

        assert result.step == 120
        assert result.max == 480
        assert result.labels == ("0", "2", "4", "6", "8")


class TestFormatTick:
    """Tests for tick labels."""

    def test_styles(self) -> None:
        """Test each label style."""
        assert format_tick(2500, LabelStyle.THOUSANDS) == "2.5k"
        assert format_tick(500, LabelStyle.THOUSANDS) == "500"
        assert format_tick(360, LabelStyle.HOURS) == "6"
        assert format_tick(5.5, LabelStyle.ONE_DECIMAL) == "5.5"
        assert format_tick(42.0, LabelStyle.INTEGER) == "42"


class TestScaleCalculator:
    """Tests for ScaleCalculator."""

    def test_resolves_unit_specific_policy(self) -> None:
        """Test mmol/L values are scaled on the mmol axis."""
        calculator = ScaleCalculator()

        mgdl = calculator.scale([110, 140], MetricKind.GLUCOSE, DisplayUnit.MG_PER_DL)
        mmol = calculator.scale([6.1, 7.8], MetricKind.GLUCOSE, DisplayUnit.MMOL_PER_L)

        assert mgdl.max == 200
        assert mmol.max == 12
        assert mmol.step == 2

    def test_monthly_uses_monthly_policy(self) -> None:
        """Test monthly step totals are not scaled like daily counts."""
        result = ScaleCalculator().scale([240000, 310000], MetricKind.STEPS, monthly=True)

        assert result.step == 100000
        assert result.max == 400000

    def test_unsupported_unit(self) -> None:
        """Test an invalid pairing raises."""
        with pytest.raises(UnsupportedUnitError):
            ScaleCalculator().scale([1.0], MetricKind.STEPS, DisplayUnit.MILE)
