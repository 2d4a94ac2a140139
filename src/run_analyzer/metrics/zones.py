"""Heart rate zone configuration and zone classification."""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from ..models.activity import StreamPoint


# Upper bound of each zone as a fraction of max HR
HR_ZONE_THRESHOLDS: Tuple[float, ...] = (0.6, 0.7, 0.8, 0.9, 1.0)

# Exclusive upper bound of zones 1-3 as a fraction of lactate threshold HR.
# Zone 4 runs up to LTHR inclusive, zone 5 is above it.
LTHR_ZONE_THRESHOLDS: Tuple[float, ...] = (0.75, 0.85, 0.95)

# Fractions of heart rate reserve used as pace-at-HR targets (Z1, Z2, Z3)
PACE_BAND_RESERVE_FRACTIONS: Tuple[float, ...] = (0.6, 0.7, 0.8)

# Plausible HR readings for zone distribution
MIN_VALID_HR = 50
MAX_VALID_HR = 220


@dataclass(frozen=True)
class HRZones:
    """Athlete heart rate anchors supplied by configuration."""

    resting_hr: float
    max_hr: float
    lthr: Optional[float] = None  # lactate threshold HR

    @property
    def hr_reserve(self) -> float:
        """Heart rate reserve (max - resting)."""
        return self.max_hr - self.resting_hr

    def hr_at_reserve(self, fraction: float) -> float:
        """Heart rate at a fraction of heart rate reserve (Karvonen)."""
        return self.resting_hr + self.hr_reserve * fraction

    def pace_band_targets(self) -> Tuple[float, ...]:
        """Target HRs for the three pace-at-HR bands."""
        return tuple(self.hr_at_reserve(f) for f in PACE_BAND_RESERVE_FRACTIONS)


def default_zones() -> HRZones:
    """Sensible defaults when the athlete has not configured zones."""
    return HRZones(resting_hr=50, max_hr=185)


def get_zone_for_hr(hr: float, zones: HRZones) -> int:
    """
    Return zone number (1-5) for a heart rate.

    Zones are anchored on lactate threshold HR when one is configured and
    on percentages of max HR otherwise.

    Args:
        hr: Heart rate to classify
        zones: Athlete HR configuration

    Returns:
        Zone number (1-5); readings above max HR fall in zone 5
    """
    if zones.lthr:
        for zone_num, fraction in enumerate(LTHR_ZONE_THRESHOLDS, start=1):
            if hr < zones.lthr * fraction:
                return zone_num
        return 4 if hr <= zones.lthr else 5

    for zone_num, threshold in enumerate(HR_ZONE_THRESHOLDS, start=1):
        if hr <= zones.max_hr * threshold:
            return zone_num
    return len(HR_ZONE_THRESHOLDS)


def calculate_zone_time_distribution(
    stream: Iterable[StreamPoint],
    zones: HRZones,
) -> Dict[str, float]:
    """
    Calculate the share of valid HR samples spent in each zone.

    Samples without HR or outside the plausible HR range are ignored.

    Returns:
        Dictionary with zone percentages and the sample count
    """
    zone_counts = {zone_num: 0 for zone_num in range(1, len(HR_ZONE_THRESHOLDS) + 1)}
    total = 0

    for point in stream:
        hr = point.heartrate
        if hr is None or hr <= MIN_VALID_HR or hr >= MAX_VALID_HR:
            continue
        zone_counts[get_zone_for_hr(hr, zones)] += 1
        total += 1

    result: Dict[str, float] = {
        f"zone{zone_num}_pct": (round(count / total * 100, 1) if total else 0.0)
        for zone_num, count in zone_counts.items()
    }
    result["total_samples"] = total
    return result
