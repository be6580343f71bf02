"""Application configuration."""

from datetime import date, datetime, tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from health_trends.models.metric import DisplayUnit, MetricKind
from health_trends.models.policy import get_policy


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_TRENDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra env vars without error
    )

    # Calendar
    timezone: str | None = Field(
        default=None,
        description="IANA zone used to decide calendar days (system local if unset)",
    )

    # Display unit preferences
    weight_unit: DisplayUnit = Field(
        default=DisplayUnit.KILOGRAM,
        description="Preferred weight unit (kg or lbs)",
    )
    glucose_unit: DisplayUnit = Field(
        default=DisplayUnit.MG_PER_DL,
        description="Preferred glucose unit (mg/dL or mmol/L)",
    )
    distance_unit: DisplayUnit = Field(
        default=DisplayUnit.KILOMETER,
        description="Preferred distance unit (km or mi)",
    )

    # Series shape
    chart_days: int = Field(
        default=90,
        gt=0,
        description="Days in the raw chart series (inclusive of today)",
    )
    monthly_months: int = Field(
        default=5,
        gt=0,
        description="Calendar months in the monthly series (current month included)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "console"] = Field(
        default="json",
        description="Log renderer",
    )

    def tzinfo(self) -> tzinfo | None:
        """Configured zone, or None for the system local zone."""
        return ZoneInfo(self.timezone) if self.timezone else None

    def today(self) -> date:
        """Current calendar day in the configured zone."""
        return datetime.now(self.tzinfo()).date()

    def unit_for(self, kind: MetricKind) -> DisplayUnit:
        """Preferred display unit for a metric kind.

        Kinds with a single unit always use their base unit.
        """
        policy = get_policy(kind)
        preferences = {
            MetricKind.WEIGHT: self.weight_unit,
            MetricKind.GLUCOSE: self.glucose_unit,
            MetricKind.DISTANCE: self.distance_unit,
        }
        unit = preferences.get(policy.kind, policy.base_unit)
        policy.factor(unit)
        return unit


# Global settings instance
settings = Settings()
