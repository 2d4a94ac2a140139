"""Aggregate statistics over a single activity's stream."""

from dataclasses import dataclass
from typing import Sequence

from ..models.activity import StreamPoint
from .efficiency import MIN_MOVING_VELOCITY
from .zones import MAX_VALID_HR, MIN_VALID_HR


@dataclass
class StreamStats:
    """HR, cadence, moving time and distance totals from stream samples."""

    hr_sum: float = 0.0
    hr_count: int = 0
    cadence_sum: float = 0.0  # total steps/min, both legs
    cadence_count: int = 0
    moving_time: int = 0  # seconds with velocity above the moving threshold
    total_distance: float = 0.0  # meters

    @property
    def avg_hr(self) -> float:
        """Average valid HR, or 0.0 without readings."""
        if self.hr_count == 0:
            return 0.0
        return self.hr_sum / self.hr_count

    @property
    def avg_cadence(self) -> float:
        """Average normalized cadence, or 0.0 without readings."""
        if self.cadence_count == 0:
            return 0.0
        return self.cadence_sum / self.cadence_count


def aggregate_stream_stats(stream: Sequence[StreamPoint]) -> StreamStats:
    """
    Sum HR, cadence, moving time and distance over a stream.

    HR readings outside the plausible range are skipped; cadence is
    normalized to both legs. Moving time counts the gap to the previous
    sample only when the current sample is moving.
    """
    stats = StreamStats()

    for i, point in enumerate(stream):
        hr = point.heartrate
        if hr is not None and MIN_VALID_HR < hr < MAX_VALID_HR:
            stats.hr_sum += hr
            stats.hr_count += 1

        cadence = point.normalized_cadence
        if cadence is not None and cadence > 0:
            stats.cadence_sum += cadence
            stats.cadence_count += 1

        if i > 0 and point.velocity is not None and point.velocity > MIN_MOVING_VELOCITY:
            stats.moving_time += point.time_offset - stream[i - 1].time_offset

    for point in reversed(stream):
        if point.distance is not None:
            stats.total_distance = point.distance
            break

    return stats
