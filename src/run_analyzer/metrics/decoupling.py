"""Aerobic decoupling, cardiac drift and steady-state analysis."""

from typing import List, Optional, Sequence

from ..models.activity import StreamPoint
from .efficiency import valid_samples


# Streams are sampled at 1 Hz, so sample counts double as seconds
MIN_DECOUPLING_SAMPLES = 120  # 2 minutes
MIN_DRIFT_SAMPLES = 240  # 4 minutes
MIN_STEADY_SAMPLES = 120  # 2 minutes of steady running

# Steady state: velocity within 10% of the activity average
STEADY_LOWER_RATIO = 0.9
STEADY_UPPER_RATIO = 1.1


def _efficiency_ratio(velocities: List[float], hrs: List[float]) -> Optional[float]:
    if not velocities:
        return None
    avg_velocity = sum(velocities) / len(velocities)
    avg_hr = sum(hrs) / len(hrs)
    return avg_velocity / avg_hr


def _is_steady(velocity: float, avg_speed: float) -> bool:
    ratio = velocity / avg_speed
    return STEADY_LOWER_RATIO < ratio < STEADY_UPPER_RATIO


def average_hr(stream: Sequence[StreamPoint]) -> float:
    """Average of positive HR readings, or 0.0 when there are none."""
    readings = [p.heartrate for p in stream if p.heartrate is not None and p.heartrate > 0]
    if not readings:
        return 0.0
    return sum(readings) / len(readings)


def compute_decoupling(stream: Sequence[StreamPoint]) -> Optional[float]:
    """Aerobic decoupling percentage, or None when there is not enough data."""
    if len(stream) < MIN_DECOUPLING_SAMPLES:
        return None

    velocities: List[float] = []
    hrs: List[float] = []
    for _, velocity, hr in valid_samples(stream):
        velocities.append(velocity)
        hrs.append(hr)

    mid = len(velocities) // 2
    first = _efficiency_ratio(velocities[:mid], hrs[:mid])
    second = _efficiency_ratio(velocities[mid:], hrs[mid:])
    if not first or not second:
        return None

    return (first / second - 1) * 100


def aerobic_decoupling(stream: Sequence[StreamPoint]) -> float:
    """
    Pace:HR drift between the first and second half of an activity.

    The stream is filtered to moving samples with plausible HR and split in
    half by sample count. Positive means the second half was less efficient.
    Under 5% on a long run indicates a good aerobic base.

    Args:
        stream: Activity stream samples (1 Hz)

    Returns:
        Decoupling percentage, or 0.0 for streams under two minutes
    """
    decoupling = compute_decoupling(stream)
    return 0.0 if decoupling is None else decoupling


def compute_cardiac_drift(stream: Sequence[StreamPoint], avg_speed: float) -> Optional[float]:
    """Cardiac drift in bpm, or None when there is not enough steady data."""
    if len(stream) < MIN_DRIFT_SAMPLES or avg_speed == 0:
        return None

    steady = [
        p for p in stream
        if p.velocity is not None and p.heartrate is not None and _is_steady(p.velocity, avg_speed)
    ]
    if len(steady) < MIN_STEADY_SAMPLES:
        return None

    quarter = len(steady) // 4
    first_hr = average_hr(steady[:quarter])
    last_hr = average_hr(steady[len(steady) - quarter:])
    if first_hr == 0:
        return None

    return last_hr - first_hr


def cardiac_drift(stream: Sequence[StreamPoint], avg_speed: float) -> float:
    """
    Heart rate rise during steady-state running.

    Only samples within 10% of the average speed are kept; the result is
    the mean HR of the last quarter of those samples minus the mean HR of
    the first quarter.

    Args:
        stream: Activity stream samples (1 Hz)
        avg_speed: Activity average speed in m/s

    Returns:
        Drift in bpm, or 0.0 when the stream is under four minutes, the
        average speed is zero, or under two minutes of it is steady
    """
    drift = compute_cardiac_drift(stream, avg_speed)
    return 0.0 if drift is None else drift


def compute_steady_state_pct(stream: Sequence[StreamPoint], avg_speed: float) -> Optional[float]:
    """Steady-state percentage, or None when it cannot be determined."""
    if not stream or avg_speed == 0:
        return None

    valid = [p.velocity for p in stream if p.velocity is not None]
    if not valid:
        return None

    steady = sum(1 for velocity in valid if _is_steady(velocity, avg_speed))
    return steady / len(valid) * 100


def steady_state_pct(stream: Sequence[StreamPoint], avg_speed: float) -> float:
    """
    Percentage of the activity run at steady effort (within 10% of average speed).

    Returns:
        Percentage 0-100, or 0.0 for an empty stream or zero average speed
    """
    pct = compute_steady_state_pct(stream, avg_speed)
    return 0.0 if pct is None else pct
