"""Shared test fixtures."""

from collections.abc import Callable
from datetime import date

import pytest

from health_trends.models.sample import DatedSample
from health_trends.services.store import TimeSeriesStore
from tests.fixtures.series import daily_samples

AS_OF = date(2026, 3, 15)


@pytest.fixture
def as_of() -> date:
    """Fixed calendar day treated as today."""
    return AS_OF


@pytest.fixture
def clock(as_of: date) -> Callable[[], date]:
    """Clock pinned to ``as_of``."""
    return lambda: as_of


@pytest.fixture
def weight_week(as_of: date) -> list[DatedSample]:
    """70..76 kg over the seven days before today."""
    return daily_samples([70, 71, 72, 73, 74, 75, 76], end=as_of, start_offset=1)


@pytest.fixture
def weight_store(weight_week: list[DatedSample]) -> TimeSeriesStore:
    """Store holding one week of weight."""
    return TimeSeriesStore(weight_week)


@pytest.fixture
def steps_year(as_of: date) -> list[DatedSample]:
    """A year of steps ending today, with every seventh day missing (0)."""
    values = [0.0 if i % 7 == 0 else 8000.0 + (i % 5) * 500 for i in range(366)]
    return daily_samples(values, end=as_of)
