"""Training load calculations (TRIMP, HRSS)."""

import math
from typing import Optional, Sequence

from ..models.activity import Activity, StreamPoint
from .decoupling import average_hr
from .zones import HRZones


# Banister exponential weighting (male coefficient; female is 1.67)
TRIMP_EXPONENT = 1.92

# Roughly 100 TRIMP for one hour at lactate threshold
THRESHOLD_TRIMP = 100.0


def heart_rate_ratio(avg_hr: float, zones: HRZones) -> Optional[float]:
    """
    Fraction of heart rate reserve used, clamped to [0, 1].

    Returns None when the HR reserve is zero or negative.
    """
    hr_reserve = zones.hr_reserve
    if hr_reserve <= 0:
        return None
    ratio = (avg_hr - zones.resting_hr) / hr_reserve
    return max(0.0, min(1.0, ratio))


def calculate_trimp(
    activity: Activity,
    stream: Sequence[StreamPoint],
    zones: HRZones,
) -> float:
    """
    Training Impulse using Banister's exponential formula.

    TRIMP = duration (min) * HRr * e^(1.92 * HRr)

    where HRr is the fraction of heart rate reserve. Average HR comes from
    the stream when it carries HR, otherwise from the activity summary.

    Args:
        activity: Activity summary (moving time, summary HR)
        stream: Activity stream samples, may be empty
        zones: Athlete HR configuration

    Returns:
        TRIMP value (arbitrary units, typical session: 50-150), or 0.0 when
        there is no HR signal or the HR reserve is not positive
    """
    duration_min = activity.moving_time / 60.0

    avg_hr = average_hr(stream)
    if avg_hr == 0 and activity.average_heartrate is not None:
        avg_hr = activity.average_heartrate
    if avg_hr == 0:
        return 0.0

    ratio = heart_rate_ratio(avg_hr, zones)
    if ratio is None:
        return 0.0

    return duration_min * ratio * math.exp(TRIMP_EXPONENT * ratio)


def calculate_hrss(
    activity: Activity,
    stream: Sequence[StreamPoint],
    zones: HRZones,
) -> float:
    """
    Heart Rate Stress Score - TRIMP normalized to a one hour threshold effort.

    Returns:
        HRSS value (100 = 1 hour at threshold)
    """
    trimp = calculate_trimp(activity, stream, zones)
    return trimp / THRESHOLD_TRIMP * 100
