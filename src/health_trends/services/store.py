"""In-memory mirror of one metric's daily series."""

from collections.abc import Iterable, Iterator
from datetime import date, timedelta

import structlog

from health_trends.models.sample import DatedSample

logger = structlog.get_logger()


class TimeSeriesStore:
    """Daily samples keyed by calendar day.

    The upstream source replaces the whole series on every refresh; there is
    no incremental patching. Keys are unique per day: when a refresh carries
    several samples for the same day, the last one wins.

    Values of zero or less are kept (they chart as 0) but never count as a
    measurement when averaging.
    """

    def __init__(self, samples: Iterable[DatedSample] = ()) -> None:
        """Initialize store.

        Args:
            samples: Optional initial series
        """
        self._by_day: dict[date, DatedSample] = {}
        self._ordered: tuple[DatedSample, ...] = ()
        self.revision = 0
        self.logger = logger.bind(service="store")
        if samples:
            self.ingest(samples)

    def ingest(self, samples: Iterable[DatedSample]) -> None:
        """Replace the whole series.

        Args:
            samples: New series, any order; same-day duplicates collapse
        """
        by_day: dict[date, DatedSample] = {}
        received = 0
        for sample in samples:
            by_day[sample.date] = sample
            received += 1

        self._by_day = by_day
        self._ordered = tuple(by_day[day] for day in sorted(by_day))
        self.revision += 1

        self.logger.debug(
            "Series replaced",
            received=received,
            days=len(self._ordered),
            revision=self.revision,
        )

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[DatedSample]:
        return iter(self._ordered)

    def __contains__(self, day: object) -> bool:
        return day in self._by_day

    def get(self, day: date) -> DatedSample | None:
        """Sample for one calendar day, if any."""
        return self._by_day.get(day)

    @property
    def first_date(self) -> date | None:
        """Earliest day in the series."""
        return self._ordered[0].date if self._ordered else None

    @property
    def last_date(self) -> date | None:
        """Latest day in the series."""
        return self._ordered[-1].date if self._ordered else None

    def query(self, start: date, end: date) -> list[DatedSample]:
        """Samples between two days, inclusive, ascending by date."""
        return [s for s in self._ordered if start <= s.date <= end]

    def positive(self, start: date, end: date) -> list[DatedSample]:
        """Samples in range that count as a real measurement (value > 0)."""
        return [s for s in self.query(start, end) if s.value > 0]

    def daily_series(self, start: date, end: date) -> list[DatedSample]:
        """One sample per calendar day in range, gaps filled with 0.

        Non-positive values are floored to 0 so the chart never dips below
        the axis.
        """
        if end < start:
            return []

        series = []
        day = start
        while day <= end:
            sample = self._by_day.get(day)
            value = max(sample.value, 0.0) if sample is not None else 0.0
            series.append(DatedSample(date=day, value=value))
            day += timedelta(days=1)
        return series

    def latest_positive(self, on_or_before: date | None = None) -> DatedSample | None:
        """Most recent real measurement, optionally bounded by a day."""
        for sample in reversed(self._ordered):
            if on_or_before is not None and sample.date > on_or_before:
                continue
            if sample.value > 0:
                return sample
        return None
