"""Activity, stream and per-activity metrics data models."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


# Providers report single-leg cadence
CADENCE_MULTIPLIER = 2.0


@dataclass(frozen=True)
class StreamPoint:
    """
    A single sample from an activity's recorded streams.

    Every field besides the time offset is optional because any sensor can
    drop out for any sample.
    """

    time_offset: int  # seconds from activity start
    distance: Optional[float] = None  # cumulative meters
    velocity: Optional[float] = None  # m/s (smoothed)
    heartrate: Optional[float] = None  # bpm
    cadence: Optional[float] = None  # single-leg steps/min
    grade: Optional[float] = None  # percent

    @property
    def normalized_cadence(self) -> Optional[float]:
        """Cadence in total steps per minute (both legs)."""
        if self.cadence is None:
            return None
        return self.cadence * CADENCE_MULTIPLIER


@dataclass(frozen=True)
class Activity:
    """Summary record of a single activity as supplied by storage."""

    id: int
    distance: float  # meters
    moving_time: int  # seconds
    start_date: Optional[datetime] = None
    name: str = ""
    average_heartrate: Optional[float] = None
    average_cadence: Optional[float] = None  # single-leg
    total_elevation_gain: float = 0.0  # meters

    @property
    def average_speed(self) -> float:
        """Average moving speed in m/s, or 0.0 with no moving time."""
        if self.moving_time <= 0:
            return 0.0
        return self.distance / self.moving_time


@dataclass
class ActivityMetrics:
    """
    Derived metrics for one activity.

    Each field is None when its preconditions were not met. The record is
    always recomputed as a whole, never patched field by field.
    """

    activity_id: int
    efficiency_factor: Optional[float] = None
    aerobic_decoupling: Optional[float] = None  # percent
    cardiac_drift: Optional[float] = None  # bpm
    pace_at_z1: Optional[float] = None  # seconds per pace unit
    pace_at_z2: Optional[float] = None
    pace_at_z3: Optional[float] = None
    trimp: Optional[float] = None
    hrss: Optional[float] = None
    data_quality_score: Optional[float] = None  # 0.0-1.0
    steady_state_pct: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)
