"""Best-effort search and race-distance matching."""

import logging
from dataclasses import dataclass, asdict
from typing import List, Optional, Sequence, Tuple

from ..models.activity import StreamPoint
from ..models.personal_records import (
    DISTANCE_10K,
    DISTANCE_1K,
    DISTANCE_1_MILE,
    DISTANCE_400M,
    DISTANCE_5K,
    DISTANCE_HALF_MARATHON,
    DISTANCE_MARATHON,
    RecordCategory,
)
from ..units import calculate_pace_per_mile


logger = logging.getLogger(__name__)

MIN_POINTS_FOR_EFFORT = 10
DISTANCE_TOLERANCE = 0.05  # 5% for race distance matching
MIN_SEGMENT_HR = 50  # lower readings are dropped-sensor zeros

# Best-effort distances searched inside every stream
EFFORT_CATEGORIES: Tuple[Tuple[float, RecordCategory], ...] = (
    (DISTANCE_400M, RecordCategory.EFFORT_400M),
    (DISTANCE_1K, RecordCategory.EFFORT_1K),
    (DISTANCE_1_MILE, RecordCategory.EFFORT_1MI),
    (DISTANCE_5K, RecordCategory.EFFORT_5K),
    (DISTANCE_10K, RecordCategory.EFFORT_10K),
)

# Whole-activity race distances
RACE_CATEGORIES: Tuple[Tuple[float, RecordCategory], ...] = (
    (DISTANCE_1_MILE, RecordCategory.DISTANCE_1MI),
    (DISTANCE_5K, RecordCategory.DISTANCE_5K),
    (DISTANCE_10K, RecordCategory.DISTANCE_10K),
    (DISTANCE_HALF_MARATHON, RecordCategory.DISTANCE_HALF),
    (DISTANCE_MARATHON, RecordCategory.DISTANCE_FULL),
)


@dataclass(frozen=True)
class BestEffort:
    """The fastest segment of a given distance within one activity."""

    distance_meters: float
    duration_seconds: int
    start_offset: int  # stream time offset where the effort starts
    end_offset: int  # stream time offset where the effort ends
    avg_heartrate: float  # 0.0 when the segment has no valid HR

    @property
    def pace_per_mile(self) -> float:
        return calculate_pace_per_mile(self.distance_meters, self.duration_seconds)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)


def _segment_avg_hr(points: List[StreamPoint], left: int, right: int) -> float:
    readings = [
        p.heartrate for p in points[left:right + 1]
        if p.heartrate is not None and p.heartrate > MIN_SEGMENT_HR
    ]
    if not readings:
        return 0.0
    return sum(readings) / len(readings)


def find_best_effort(stream: Sequence[StreamPoint], target_distance: float) -> Optional[BestEffort]:
    """
    Find the fastest segment covering at least target_distance meters.

    Two-pointer sweep: for each start point the end pointer advances to the
    first point covering the target distance. Distance is non-decreasing,
    so the end pointer never moves backwards and the sweep is O(n). When
    that point shares the start's timestamp, the first later sample is used.

    Args:
        stream: Activity stream samples
        target_distance: Effort distance in meters

    Returns:
        BestEffort, or None when fewer than 10 points carry distance or the
        activity covers less than the target distance
    """
    if len(stream) < MIN_POINTS_FOR_EFFORT:
        return None

    points = [p for p in stream if p.distance is not None]
    if len(points) < MIN_POINTS_FOR_EFFORT:
        return None

    if points[-1].distance - points[0].distance < target_distance:
        return None

    best: Optional[Tuple[int, int, int]] = None  # (duration, left, end)
    right = 0
    for left in range(len(points)):
        right = max(right, left + 1)
        while right < len(points) and points[right].distance - points[left].distance < target_distance:
            right += 1
        if right == len(points):
            break

        end = right
        duration = points[end].time_offset - points[left].time_offset
        if duration <= 0:
            # Same-timestamp end point; the next later sample still covers the
            # target. The shared end pointer stays put.
            end = right + 1
            while end < len(points) and points[end].time_offset <= points[left].time_offset:
                end += 1
            if end == len(points):
                continue
            duration = points[end].time_offset - points[left].time_offset
        if best is None or duration < best[0]:
            best = (duration, left, end)

    if best is None:
        logger.debug(f"No positive-duration segment of {target_distance}m found")
        return None

    duration, left, end = best
    return BestEffort(
        distance_meters=points[end].distance - points[left].distance,
        duration_seconds=duration,
        start_offset=points[left].time_offset,
        end_offset=points[end].time_offset,
        avg_heartrate=_segment_avg_hr(points, left, end),
    )


def matches_race_distance(distance: float, race_distance: float) -> bool:
    """Whether a distance is within 5% of a race distance."""
    lower = race_distance * (1 - DISTANCE_TOLERANCE)
    upper = race_distance * (1 + DISTANCE_TOLERANCE)
    return lower <= distance <= upper


def get_matching_race_category(activity_distance: float) -> Optional[RecordCategory]:
    """Race category whose distance the whole activity matches, if any."""
    for race_distance, category in RACE_CATEGORIES:
        if matches_race_distance(activity_distance, race_distance):
            return category
    return None
