"""Per-activity metrics assembly."""

import logging
from typing import Optional, Sequence

from ..models.activity import Activity, ActivityMetrics, StreamPoint
from ..units import METERS_PER_KM
from .decoupling import compute_cardiac_drift, compute_decoupling, compute_steady_state_pct
from .efficiency import efficiency_factor, pace_at_hr
from .load import calculate_hrss, calculate_trimp
from .zones import HRZones


logger = logging.getLogger(__name__)

PACE_AT_HR_TOLERANCE = 5  # bpm either side of the band target


def data_quality_score(stream: Sequence[StreamPoint]) -> float:
    """Fraction of samples carrying a positive HR reading (0.0 for an empty stream)."""
    if not stream:
        return 0.0
    valid = sum(1 for p in stream if p.heartrate is not None and p.heartrate > 0)
    return valid / len(stream)


def _positive(value: float) -> Optional[float]:
    return value if value > 0 else None


def compute_activity_metrics(
    activity: Activity,
    stream: Sequence[StreamPoint],
    zones: HRZones,
    pace_unit_meters: float = METERS_PER_KM,
) -> ActivityMetrics:
    """
    Calculate all metrics for a single activity.

    Each metric is left as None when its preconditions are not met, so a
    genuinely zero decoupling or drift stays distinguishable from one that
    could not be computed.

    Args:
        activity: Activity summary
        stream: The activity's stream samples
        zones: Athlete HR configuration
        pace_unit_meters: Distance unit for pace-at-HR values

    Returns:
        ActivityMetrics for the activity
    """
    metrics = ActivityMetrics(activity_id=activity.id)

    if not stream:
        logger.debug(f"Activity {activity.id} has no stream; metrics left empty")
        return metrics

    avg_speed = activity.average_speed

    metrics.efficiency_factor = _positive(efficiency_factor(stream))
    metrics.aerobic_decoupling = compute_decoupling(stream)
    metrics.cardiac_drift = compute_cardiac_drift(stream, avg_speed)
    metrics.trimp = _positive(calculate_trimp(activity, stream, zones))
    metrics.hrss = _positive(calculate_hrss(activity, stream, zones))
    metrics.data_quality_score = data_quality_score(stream)
    metrics.steady_state_pct = compute_steady_state_pct(stream, avg_speed)

    z1_hr, z2_hr, z3_hr = zones.pace_band_targets()
    metrics.pace_at_z1 = _positive(pace_at_hr(stream, z1_hr, PACE_AT_HR_TOLERANCE, pace_unit_meters))
    metrics.pace_at_z2 = _positive(pace_at_hr(stream, z2_hr, PACE_AT_HR_TOLERANCE, pace_unit_meters))
    metrics.pace_at_z3 = _positive(pace_at_hr(stream, z3_hr, PACE_AT_HR_TOLERANCE, pace_unit_meters))

    return metrics


def data_quality_description(score: float) -> str:
    """Human-readable data quality assessment."""
    if score >= 0.95:
        return "Excellent"
    elif score >= 0.85:
        return "Good"
    elif score >= 0.70:
        return "Fair"
    elif score >= 0.50:
        return "Poor"
    else:
        return "Very Poor"


def decoupling_assessment(decoupling: float) -> str:
    """Human-readable aerobic decoupling assessment."""
    if decoupling < 3:
        return "Excellent aerobic base"
    elif decoupling < 5:
        return "Good aerobic fitness"
    elif decoupling < 8:
        return "Developing aerobic base"
    elif decoupling < 12:
        return "Needs more easy miles"
    else:
        return "Aerobic system needs work"
