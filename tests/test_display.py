"""Tests for the display mapper."""

from datetime import date

import pytest

from health_trends.core.exceptions import UnsupportedUnitError
from health_trends.models.metric import DeltaTone, DisplayUnit, MetricKind
from health_trends.models.sample import DatedSample
from health_trends.services.aggregator import PERIOD_WINDOWS, MonthlyBucket, PeriodWindow
from health_trends.services.display import NO_DATA_TEXT, DisplayMapper, round_half_away


class TestRoundHalfAway:
    """Tests for round_half_away."""

    @pytest.mark.parametrize(
        "value, expected",
        [(2.5, 3), (3.5, 4), (2.4, 2), (-2.5, -3), (160.937, 161), (0.0, 0)],
    )
    def test_rounding(self, value: float, expected: int) -> None:
        """Test halves round away from zero, unlike round()."""
        assert round_half_away(value) == expected


class TestPeriodAverages:
    """Tests for map_period_averages."""

    def test_weight_in_pounds(self) -> None:
        """Test 73 kg over seven days shows as 161 lbs."""
        mapper = DisplayMapper(MetricKind.WEIGHT, DisplayUnit.POUND)

        entries = mapper.map_period_averages([(PeriodWindow(label="7T", days=7), 73.0)])

        assert entries[0].label == "7T"
        assert entries[0].days == 7
        assert entries[0].value == 161

    def test_no_data_maps_to_zero(self) -> None:
        """Test a window without data becomes 0."""
        mapper = DisplayMapper(MetricKind.STEPS, DisplayUnit.STEPS)

        entries = mapper.map_period_averages([(w, None) for w in PERIOD_WINDOWS])

        assert [e.value for e in entries] == [0] * 6
        assert [e.label for e in entries] == ["7T", "14T", "30T", "90T", "180T", "365T"]


class TestChartAndMonthly:
    """Tests for chart and monthly mapping."""

    def test_chart_keeps_fraction(self) -> None:
        """Test chart values stay continuous in display unit."""
        mapper = DisplayMapper(MetricKind.WEIGHT, DisplayUnit.POUND)

        points = mapper.map_chart_series([DatedSample(date=date(2026, 3, 1), value=70.0)])

        assert points[0].day == date(2026, 3, 1)
        assert points[0].value == pytest.approx(154.3234)

    def test_chart_zero_stays_zero(self) -> None:
        """Test gap days chart as 0 in any unit."""
        mapper = DisplayMapper(MetricKind.GLUCOSE, DisplayUnit.MMOL_PER_L)
        points = mapper.map_chart_series([DatedSample(date=date(2026, 3, 1), value=0.0)])
        assert points[0].value == 0.0

    def test_monthly_labels_and_rounding(self) -> None:
        """Test monthly buckets get month labels and whole values."""
        mapper = DisplayMapper(MetricKind.STEPS, DisplayUnit.STEPS)

        entries = mapper.map_monthly(
            [
                MonthlyBucket(month=date(2025, 12, 1), value=None),
                MonthlyBucket(month=date(2026, 1, 1), value=245000.5, sample_count=31),
            ]
        )

        assert [e.label for e in entries] == ["Dec", "Jan"]
        assert [e.value for e in entries] == [0, 245001]


class TestKpiFormatting:
    """Tests for current/target/delta strings."""

    @pytest.fixture
    def kg(self) -> DisplayMapper:
        return DisplayMapper(MetricKind.WEIGHT, DisplayUnit.KILOGRAM)

    def test_current_with_unit(self, kg) -> None:
        """Test values render with one decimal and the unit label."""
        assert kg.format_current(72.46) == "72.5 kg"
        assert kg.format_target(75) == "75.0 kg"

    @pytest.mark.parametrize("value", [None, 0.0, -4.0])
    def test_no_data_renders_dash(self, kg, value) -> None:
        """Test non-positive values render as the placeholder."""
        assert kg.format_current(value) == NO_DATA_TEXT
        assert kg.format_target(value) == NO_DATA_TEXT

    def test_thousands_separator(self) -> None:
        """Test large values are grouped."""
        mapper = DisplayMapper(MetricKind.STEPS, DisplayUnit.STEPS)
        assert mapper.format_current(12345) == "12,345.0 steps"

    def test_delta_below_target_is_favorable_for_weight(self, kg) -> None:
        """Test 70 kg against a 75 kg target."""
        text, tone = kg.format_delta(70.0 - 75.0)

        assert text == "−5.0 kg"
        assert tone == DeltaTone.FAVORABLE
        assert tone.color == "green"

    def test_delta_above_target_is_adverse_for_weight(self, kg) -> None:
        """Test 80 kg against a 75 kg target."""
        text, tone = kg.format_delta(80.0 - 75.0)

        assert text == "+5.0 kg"
        assert tone == DeltaTone.ADVERSE
        assert tone.color == "red"

    def test_zero_delta_is_neutral(self, kg) -> None:
        """Test current == target."""
        text, tone = kg.format_delta(0.0)

        assert text == "±0.0 kg"
        assert tone == DeltaTone.NEUTRAL

    @pytest.mark.parametrize("base_delta", [0.01, -0.04, 0.0001])
    def test_delta_below_display_precision_is_neutral(self, kg, base_delta) -> None:
        """Test a difference that rounds to 0.0 is shown and toned as zero."""
        assert kg.format_delta(base_delta) == ("±0.0 kg", DeltaTone.NEUTRAL)

    def test_smallest_visible_delta_keeps_tone(self, kg) -> None:
        """Test a delta that survives rounding keeps its sign and tone."""
        assert kg.format_delta(0.06) == ("+0.1 kg", DeltaTone.ADVERSE)
        assert kg.format_kpi_delta(75.01, 75.0) == ("±0.0 kg", DeltaTone.NEUTRAL)

    def test_delta_tone_flips_for_higher_is_better(self) -> None:
        """Test steps above target are favorable."""
        mapper = DisplayMapper(MetricKind.STEPS, DisplayUnit.STEPS)

        assert mapper.format_delta(1500)[1] == DeltaTone.FAVORABLE
        assert mapper.format_delta(-1500)[1] == DeltaTone.ADVERSE

    def test_delta_converted_to_display_unit(self) -> None:
        """Test the delta magnitude is shown in the display unit."""
        mapper = DisplayMapper(MetricKind.WEIGHT, DisplayUnit.POUND)
        assert mapper.format_delta(-5.0)[0] == "−11.0 lbs"

    def test_kpi_delta_without_target(self, kg) -> None:
        """Test a missing target gives a neutral dash."""
        assert kg.format_kpi_delta(72.0, None) == (NO_DATA_TEXT, DeltaTone.NEUTRAL)
        assert kg.format_kpi_delta(None, 75.0) == (NO_DATA_TEXT, DeltaTone.NEUTRAL)

    def test_remaining_to_target(self) -> None:
        """Test steps still needed, never negative, only for higher-is-better."""
        steps = DisplayMapper(MetricKind.STEPS, DisplayUnit.STEPS)

        assert steps.remaining_to_target(6000, 10000) == 4000
        assert steps.remaining_to_target(12000, 10000) == 0
        assert steps.remaining_to_target(None, 10000) == 10000
        assert steps.remaining_to_target(6000, None) is None
        assert DisplayMapper(MetricKind.WEIGHT, DisplayUnit.KILOGRAM).remaining_to_target(
            80, 75
        ) is None

    def test_rejects_unsupported_unit(self) -> None:
        """Test a mapper cannot be built for an invalid pairing."""
        with pytest.raises(UnsupportedUnitError):
            DisplayMapper(MetricKind.STEPS, DisplayUnit.POUND)
