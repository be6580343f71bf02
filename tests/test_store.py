"""Tests for the time-series store."""

from datetime import date, datetime, timedelta, timezone

from health_trends.models.sample import DatedSample
from health_trends.services.store import TimeSeriesStore


class TestDatedSample:
    """Tests for DatedSample."""

    def test_from_naive_timestamp(self) -> None:
        """Test a naive timestamp keeps its calendar day."""
        sample = DatedSample.from_timestamp(datetime(2026, 3, 14, 23, 30), 72.5)
        assert sample.date == date(2026, 3, 14)
        assert sample.value == 72.5

    def test_from_aware_timestamp_uses_zone(self) -> None:
        """Test an aware timestamp is attributed to the day in the given zone."""
        ts = datetime(2026, 3, 14, 23, 30, tzinfo=timezone.utc)
        plus_two = timezone(timedelta(hours=2))
        assert DatedSample.from_timestamp(ts, 1.0, tz=plus_two).date == date(2026, 3, 15)


class TestTimeSeriesStore:
    """Tests for TimeSeriesStore."""

    def test_query_sorted_inclusive(self) -> None:
        """Test query returns ascending samples with inclusive bounds."""
        store = TimeSeriesStore(
            [
                DatedSample(date=date(2026, 3, 3), value=3),
                DatedSample(date=date(2026, 3, 1), value=1),
                DatedSample(date=date(2026, 3, 2), value=2),
                DatedSample(date=date(2026, 3, 4), value=4),
            ]
        )

        result = store.query(date(2026, 3, 1), date(2026, 3, 3))

        assert [s.value for s in result] == [1, 2, 3]

    def test_same_day_last_write_wins(self) -> None:
        """Test duplicate days collapse to the last sample received."""
        store = TimeSeriesStore(
            [
                DatedSample(date=date(2026, 3, 1), value=70.0),
                DatedSample(date=date(2026, 3, 1), value=71.5),
            ]
        )

        assert len(store) == 1
        assert store.get(date(2026, 3, 1)).value == 71.5

    def test_ingest_replaces_whole_series(self) -> None:
        """Test ingest is a full replace, not a merge."""
        store = TimeSeriesStore([DatedSample(date=date(2026, 3, 1), value=1)])
        store.ingest([DatedSample(date=date(2026, 3, 2), value=2)])

        assert date(2026, 3, 1) not in store
        assert [s.date for s in store] == [date(2026, 3, 2)]
        assert store.revision == 2

    def test_ingest_empty_clears(self) -> None:
        """Test an empty refresh empties the store."""
        store = TimeSeriesStore([DatedSample(date=date(2026, 3, 1), value=1)])
        store.ingest([])

        assert len(store) == 0
        assert store.first_date is None
        assert store.latest_positive() is None

    def test_positive_excludes_zero_and_negative(self) -> None:
        """Test the averaging view drops non-positive days."""
        store = TimeSeriesStore(
            [
                DatedSample(date=date(2026, 3, 1), value=0),
                DatedSample(date=date(2026, 3, 2), value=-1),
                DatedSample(date=date(2026, 3, 3), value=5),
            ]
        )

        assert [s.value for s in store.positive(date(2026, 3, 1), date(2026, 3, 3))] == [5]

    def test_daily_series_fills_gaps_with_zero(self) -> None:
        """Test the chart view has one point per day, gaps and negatives as 0."""
        store = TimeSeriesStore(
            [
                DatedSample(date=date(2026, 3, 1), value=4),
                DatedSample(date=date(2026, 3, 3), value=-2),
            ]
        )

        series = store.daily_series(date(2026, 3, 1), date(2026, 3, 4))

        assert [s.date.day for s in series] == [1, 2, 3, 4]
        assert [s.value for s in series] == [4, 0, 0, 0]

    def test_daily_series_empty_range(self) -> None:
        """Test an inverted range yields nothing."""
        store = TimeSeriesStore()
        assert store.daily_series(date(2026, 3, 2), date(2026, 3, 1)) == []

    def test_latest_positive_respects_bound(self) -> None:
        """Test latest_positive skips zero days and future days."""
        store = TimeSeriesStore(
            [
                DatedSample(date=date(2026, 3, 1), value=70),
                DatedSample(date=date(2026, 3, 2), value=0),
                DatedSample(date=date(2026, 3, 5), value=69),
            ]
        )

        assert store.latest_positive().value == 69
        assert store.latest_positive(on_or_before=date(2026, 3, 4)).value == 70
        assert store.first_date == date(2026, 3, 1)
        assert store.last_date == date(2026, 3, 5)
