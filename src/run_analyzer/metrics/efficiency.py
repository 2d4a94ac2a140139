"""Pace:HR efficiency calculations (EF, grade-normalized EF, pace at HR)."""

from typing import Iterator, Optional, Sequence, Tuple

from ..models.activity import StreamPoint
from ..units import METERS_PER_KM


# Sample filters: must be actually moving with a plausible HR
MIN_MOVING_VELOCITY = 0.5  # m/s
MIN_EF_HR = 80
MAX_EF_HR = 220

# Grade adjustment: +10% grade is roughly 30% more effort
GRADE_EFFORT_MULTIPLIER = 3.0
MIN_GRADE_FACTOR = 0.5  # steep descents
MAX_GRADE_FACTOR = 3.0  # very steep climbs

# One sample per second, so 30 samples is 30 seconds at the target HR
MIN_PACE_AT_HR_SAMPLES = 30


def valid_samples(stream: Sequence[StreamPoint]) -> Iterator[Tuple[StreamPoint, float, float]]:
    """
    Yield (point, velocity, hr) for samples that are moving with a plausible HR.

    Filters out stopped time and dropped or noisy HR readings.
    """
    for point in stream:
        if point.velocity is None or point.heartrate is None:
            continue
        velocity = point.velocity
        hr = point.heartrate
        if velocity > MIN_MOVING_VELOCITY and MIN_EF_HR < hr < MAX_EF_HR:
            yield point, velocity, hr


def grade_factor(grade_pct: Optional[float]) -> float:
    """
    Effort multiplier for a grade given in percent.

    Flat ground (or missing grade) gives 1.0. Clamped so steep descents are
    not over-rewarded and steep climbs are not over-penalized.
    """
    grade = (grade_pct or 0.0) / 100.0
    factor = 1.0 + grade * GRADE_EFFORT_MULTIPLIER
    return max(MIN_GRADE_FACTOR, min(MAX_GRADE_FACTOR, factor))


def efficiency_factor(stream: Sequence[StreamPoint]) -> float:
    """
    Efficiency Factor: average speed (m/min) divided by average HR.

    Higher is better - running faster for the same heart rate. Typical
    values range from 1.0 to 2.0.

    Args:
        stream: Activity stream samples

    Returns:
        EF, or 0.0 if no sample qualifies
    """
    total_velocity = 0.0
    total_hr = 0.0
    count = 0

    for _, velocity, hr in valid_samples(stream):
        total_velocity += velocity
        total_hr += hr
        count += 1

    if count == 0:
        return 0.0

    avg_velocity = total_velocity / count
    avg_hr = total_hr / count
    return avg_velocity * 60 / avg_hr


def normalized_efficiency_factor(stream: Sequence[StreamPoint]) -> float:
    """
    Efficiency Factor using grade-adjusted speed.

    Each sample's velocity is divided by its grade factor so uphill running
    counts as harder effort than its raw speed suggests.

    Returns:
        Grade-normalized EF, or 0.0 if no sample qualifies
    """
    total_ngp = 0.0
    total_hr = 0.0
    count = 0

    # Shares the EF filter, so readings at exactly 0.5 m/s, 80 or 220 bpm are dropped
    for point, velocity, hr in valid_samples(stream):
        total_ngp += velocity / grade_factor(point.grade)
        total_hr += hr
        count += 1

    if count == 0:
        return 0.0

    return (total_ngp / count) * 60 / (total_hr / count)


def pace_at_hr(
    stream: Sequence[StreamPoint],
    target_hr: float,
    tolerance: float,
    unit_meters: float = METERS_PER_KM,
) -> float:
    """
    Average pace while heart rate is within tolerance of a target.

    Args:
        stream: Activity stream samples
        target_hr: Target heart rate in bpm
        tolerance: Allowed deviation from target_hr in bpm (inclusive)
        unit_meters: Distance unit for the pace (1000 for sec/km)

    Returns:
        Pace in seconds per unit, or 0.0 with fewer than 30 qualifying samples
    """
    total_pace = 0.0
    count = 0

    for point in stream:
        if point.velocity is None or point.heartrate is None:
            continue
        velocity = point.velocity
        hr = point.heartrate
        if target_hr - tolerance <= hr <= target_hr + tolerance and velocity > MIN_MOVING_VELOCITY:
            total_pace += unit_meters / velocity
            count += 1

    if count < MIN_PACE_AT_HR_SAMPLES:
        return 0.0

    return total_pace / count
