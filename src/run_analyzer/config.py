"""Configuration settings for the run analyzer."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .metrics.zones import HRZones
from .units import METERS_PER_KM, METERS_PER_MILE


# __file__ = src/run_analyzer/config.py
# PACKAGE_ROOT.parent.parent = project root
PACKAGE_ROOT = Path(__file__).parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent

DISTANCE_UNITS = {"km": METERS_PER_KM, "mi": METERS_PER_MILE}
PACE_UNITS = {"min/km": METERS_PER_KM, "min/mi": METERS_PER_MILE}


class Settings(BaseSettings):
    """Athlete and display settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RUN_ANALYZER_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Athlete heart rate configuration
    resting_hr: float = 50
    max_hr: float = 185
    threshold_hr: Optional[float] = 165

    # Display preferences
    distance_unit: str = "km"
    pace_unit: str = "min/km"

    # Time windows (days)
    pr_lookback_days: int = 365
    ef_current_period_days: int = 7
    ef_trend_compare_days: int = 28

    @model_validator(mode="after")
    def _check_athlete(self) -> "Settings":
        if self.resting_hr <= 0:
            raise ConfigurationError("Resting HR must be positive", field="resting_hr")
        if self.max_hr <= self.resting_hr:
            raise ConfigurationError(
                "Max HR must be greater than resting HR",
                field="max_hr",
                details={"resting_hr": self.resting_hr, "max_hr": self.max_hr},
            )
        if self.distance_unit not in DISTANCE_UNITS:
            raise ConfigurationError(
                f"Unsupported distance unit: {self.distance_unit}",
                field="distance_unit",
            )
        if self.pace_unit not in PACE_UNITS:
            raise ConfigurationError(
                f"Unsupported pace unit: {self.pace_unit}",
                field="pace_unit",
            )
        return self

    @property
    def pace_unit_meters(self) -> float:
        """Meters in one pace unit (1000 for min/km, 1609.34 for min/mi)."""
        return PACE_UNITS[self.pace_unit]

    @property
    def distance_unit_meters(self) -> float:
        """Meters in one distance unit."""
        return DISTANCE_UNITS[self.distance_unit]

    def hr_zones(self) -> HRZones:
        """Build the immutable HR zone configuration for metric computations."""
        return HRZones(
            resting_hr=self.resting_hr,
            max_hr=self.max_hr,
            lthr=self.threshold_hr,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
