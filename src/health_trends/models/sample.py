"""Dated sample model."""

from datetime import date as date_type
from datetime import datetime, tzinfo

from pydantic import BaseModel, ConfigDict, Field


class DatedSample(BaseModel):
    """One daily value of a metric stream, in the metric's base unit.

    ``date`` is a calendar day in the user's local time zone. A value of zero
    or less means "no measurement" for averaging purposes.
    """

    model_config = ConfigDict(frozen=True)

    date: date_type = Field(description="Local calendar day")
    value: float = Field(description="Daily value in base unit")

    @classmethod
    def from_timestamp(
        cls, timestamp: datetime, value: float, tz: tzinfo | None = None
    ) -> "DatedSample":
        """Build a sample from a timestamp, attributing it to its local day.

        Args:
            timestamp: Measurement time; naive values are taken as local
            value: Value in base unit
            tz: Zone to attribute the day in (system local zone if None)

        Returns:
            Sample keyed by the local calendar day
        """
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(tz)
        return cls(date=timestamp.date(), value=value)
