"""
VDOT race-equivalence table (Daniels' Running Formula).

VDOT is a "pseudo-VO2max" derived from race performance. Rather than solving
Daniels' oxygen-cost equations, this module uses the published lookup table
of equivalent race times, covering recreational (VDOT 30) to elite (VDOT 85)
runners at six standard distances.

Key operations:
- calculate_vdot: fitness score from a race result
- predict_time: race time at a distance for a fitness score

Non-standard distances are handled by log-linear interpolation between the
two bracketing standard distances, which approximates the power-law
relationship between race distance and time.

References:
- Jack Daniels' Running Formula (3rd edition)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..exceptions import RaceTimeParseError, UnknownRaceDistanceError
from ..models.personal_records import (
    DISTANCE_10K,
    DISTANCE_1500M,
    DISTANCE_1_MILE,
    DISTANCE_5K,
    DISTANCE_HALF_MARATHON,
    DISTANCE_MARATHON,
)
from ..units import format_duration


# Columns of the table, in meters
STANDARD_DISTANCES: Tuple[float, ...] = (
    DISTANCE_1500M,
    DISTANCE_1_MILE,
    DISTANCE_5K,
    DISTANCE_10K,
    DISTANCE_HALF_MARATHON,
    DISTANCE_MARATHON,
)

DISTANCE_MATCH_TOLERANCE = 0.05


@dataclass(frozen=True)
class VDOTEntry:
    """A row of the VDOT table; times in seconds, aligned with STANDARD_DISTANCES."""

    vdot: float
    times: Tuple[float, float, float, float, float, float]


def _row(vdot, t1500, t_mile, t5k, t10k, t_half, t_full) -> VDOTEntry:
    return VDOTEntry(vdot=float(vdot), times=(t1500, t_mile, t5k, t10k, t_half, t_full))


# Times get faster (smaller) as VDOT increases
VDOT_TABLE: Tuple[VDOTEntry, ...] = (
    _row(30, 510, 552, 1860, 3876, 8388, 17496),
    _row(31, 496, 536, 1806, 3762, 8136, 16980),
    _row(32, 482, 521, 1752, 3654, 7896, 16488),
    _row(33, 469, 507, 1704, 3552, 7674, 16020),
    _row(34, 457, 494, 1656, 3450, 7458, 15570),
    _row(35, 445, 481, 1614, 3360, 7254, 15138),
    _row(36, 434, 469, 1572, 3270, 7062, 14730),
    _row(37, 423, 457, 1530, 3186, 6876, 14334),
    _row(38, 413, 446, 1494, 3102, 6702, 13956),
    _row(39, 403, 435, 1458, 3024, 6534, 13596),
    _row(40, 394, 425, 1422, 2952, 6372, 13248),
    _row(41, 385, 416, 1392, 2880, 6222, 12918),
    _row(42, 376, 406, 1356, 2814, 6078, 12600),
    _row(43, 368, 398, 1326, 2748, 5940, 12300),
    _row(44, 360, 389, 1296, 2688, 5802, 12006),
    _row(45, 352, 381, 1266, 2628, 5676, 11730),
    _row(46, 345, 373, 1242, 2568, 5550, 11460),
    _row(47, 338, 365, 1212, 2514, 5430, 11202),
    _row(48, 331, 358, 1188, 2460, 5316, 10956),
    _row(49, 324, 351, 1164, 2412, 5208, 10722),
    _row(50, 318, 344, 1140, 2364, 5100, 10494),
    _row(51, 312, 337, 1116, 2316, 4998, 10278),
    _row(52, 306, 331, 1098, 2274, 4902, 10068),
    _row(53, 300, 325, 1074, 2232, 4806, 9870),
    _row(54, 295, 319, 1056, 2190, 4716, 9678),
    _row(55, 290, 313, 1038, 2154, 4632, 9492),
    _row(56, 285, 308, 1020, 2112, 4548, 9312),
    _row(57, 280, 302, 1002, 2076, 4470, 9144),
    _row(58, 275, 297, 984, 2040, 4392, 8976),
    _row(59, 270, 292, 972, 2010, 4320, 8820),
    _row(60, 266, 288, 954, 1974, 4248, 8664),
    _row(61, 262, 283, 942, 1944, 4182, 8520),
    _row(62, 258, 279, 924, 1914, 4116, 8376),
    _row(63, 254, 274, 912, 1884, 4050, 8238),
    _row(64, 250, 270, 900, 1860, 3990, 8106),
    _row(65, 246, 266, 888, 1830, 3930, 7980),
    _row(66, 242, 262, 876, 1806, 3876, 7860),
    _row(67, 239, 258, 864, 1782, 3822, 7740),
    _row(68, 235, 254, 852, 1758, 3768, 7626),
    _row(69, 232, 251, 840, 1734, 3720, 7518),
    _row(70, 229, 247, 834, 1716, 3672, 7410),
    _row(71, 226, 244, 822, 1692, 3624, 7308),
    _row(72, 223, 241, 810, 1674, 3582, 7212),
    _row(73, 220, 238, 804, 1656, 3540, 7116),
    _row(74, 217, 235, 792, 1632, 3498, 7026),
    _row(75, 214, 232, 786, 1614, 3456, 6936),
    _row(76, 212, 229, 774, 1596, 3420, 6852),
    _row(77, 209, 226, 768, 1578, 3384, 6768),
    _row(78, 206, 223, 756, 1560, 3348, 6690),
    _row(79, 204, 221, 750, 1548, 3312, 6612),
    _row(80, 201, 218, 744, 1530, 3282, 6540),
    _row(81, 199, 215, 738, 1518, 3246, 6468),
    _row(82, 197, 213, 726, 1500, 3216, 6396),
    _row(83, 194, 210, 720, 1488, 3186, 6330),
    _row(84, 192, 208, 714, 1470, 3156, 6264),
    _row(85, 190, 206, 708, 1458, 3126, 6198),
)


class RaceDistance(Enum):
    """Common race distances with values in meters."""
    FIFTEEN_HUNDRED = DISTANCE_1500M
    MILE = DISTANCE_1_MILE
    FIVE_K = DISTANCE_5K
    TEN_K = DISTANCE_10K
    HALF_MARATHON = DISTANCE_HALF_MARATHON
    MARATHON = DISTANCE_MARATHON

    @classmethod
    def from_string(cls, s: str) -> Optional["RaceDistance"]:
        """Parse race distance from string."""
        mapping = {
            "1500": cls.FIFTEEN_HUNDRED,
            "1500m": cls.FIFTEEN_HUNDRED,
            "mile": cls.MILE,
            "1mi": cls.MILE,
            "1_mile": cls.MILE,
            "5k": cls.FIVE_K,
            "5km": cls.FIVE_K,
            "5000": cls.FIVE_K,
            "10k": cls.TEN_K,
            "10km": cls.TEN_K,
            "10000": cls.TEN_K,
            "half": cls.HALF_MARATHON,
            "half_marathon": cls.HALF_MARATHON,
            "halfmarathon": cls.HALF_MARATHON,
            "21k": cls.HALF_MARATHON,
            "21.1k": cls.HALF_MARATHON,
            "marathon": cls.MARATHON,
            "full": cls.MARATHON,
            "42k": cls.MARATHON,
            "42.2k": cls.MARATHON,
        }
        return mapping.get(s.lower().replace("-", "_").replace(" ", "_"))

    @property
    def display_name(self) -> str:
        """Get human-readable name."""
        names = {
            RaceDistance.FIFTEEN_HUNDRED: "1500m",
            RaceDistance.MILE: "Mile",
            RaceDistance.FIVE_K: "5K",
            RaceDistance.TEN_K: "10K",
            RaceDistance.HALF_MARATHON: "Half Marathon",
            RaceDistance.MARATHON: "Marathon",
        }
        return names[self]


def matches_distance(distance: float, target: float) -> bool:
    """Whether distance is within 5% of target."""
    return abs(distance - target) <= target * DISTANCE_MATCH_TOLERANCE


def interpolate_time_for_distance(entry: VDOTEntry, distance: float) -> float:
    """
    Estimate the time for a non-standard distance from one table row.

    Interpolates log(time) against log(distance) between the two bracketing
    standard distances. Distances outside the table extend the first or
    last segment.
    """
    standards = list(zip(STANDARD_DISTANCES, entry.times))

    lower, upper = standards[-2], standards[-1]
    for i, (std_distance, _) in enumerate(standards):
        if distance <= std_distance:
            if i == 0:
                lower, upper = standards[0], standards[1]
            else:
                lower, upper = standards[i - 1], standards[i]
            break

    (lower_dist, lower_time), (upper_dist, upper_time) = lower, upper
    log_dist_ratio = math.log(distance / lower_dist) / math.log(upper_dist / lower_dist)
    log_time_ratio = math.log(upper_time) - math.log(lower_time)

    return math.exp(math.log(lower_time) + log_dist_ratio * log_time_ratio)


def time_for_distance(entry: VDOTEntry, distance: float) -> float:
    """Table time for a distance: the matching column or a synthesized one."""
    for column, std_distance in enumerate(STANDARD_DISTANCES):
        if matches_distance(distance, std_distance):
            return entry.times[column]
    return interpolate_time_for_distance(entry, distance)


def calculate_vdot(distance_m: float, duration_sec: float) -> float:
    """
    Derive VDOT from a race result.

    The table is binary searched for the two rows bracketing the duration
    and the score is linearly interpolated between them. Results faster
    than the fastest row clamp to 85, slower than the slowest row to 30.

    Args:
        distance_m: Race distance in meters
        duration_sec: Finish time in seconds

    Returns:
        VDOT rounded to one decimal, or 0.0 for a non-positive duration

    Example:
        >>> calculate_vdot(5000, 1140)  # 5K in 19:00
        50.0
    """
    if duration_sec <= 0 or distance_m <= 0:
        return 0.0

    low, high = 0, len(VDOT_TABLE) - 1

    if duration_sec >= time_for_distance(VDOT_TABLE[low], distance_m):
        return VDOT_TABLE[low].vdot
    if duration_sec <= time_for_distance(VDOT_TABLE[high], distance_m):
        return VDOT_TABLE[high].vdot

    while high - low > 1:
        mid = (low + high) // 2
        if duration_sec <= time_for_distance(VDOT_TABLE[mid], distance_m):
            low = mid
        else:
            high = mid

    low_entry = VDOT_TABLE[low]
    high_entry = VDOT_TABLE[high]
    low_time = time_for_distance(low_entry, distance_m)
    high_time = time_for_distance(high_entry, distance_m)

    if low_time == high_time:
        return low_entry.vdot

    fraction = (low_time - duration_sec) / (low_time - high_time)
    vdot = low_entry.vdot + fraction * (high_entry.vdot - low_entry.vdot)
    return round(vdot, 1)


def predict_time(vdot: float, distance_m: float) -> int:
    """
    Predict race time at a distance for a VDOT.

    Args:
        vdot: Fitness score
        distance_m: Target distance in meters

    Returns:
        Predicted time in whole seconds, or 0 for a non-positive VDOT.
        Scores outside the table clamp to its first or last row.
    """
    if vdot <= 0 or distance_m <= 0:
        return 0

    low, high = 0, len(VDOT_TABLE) - 1

    if vdot <= VDOT_TABLE[0].vdot:
        high = low
    elif vdot >= VDOT_TABLE[-1].vdot:
        low = high
    else:
        while high - low > 1:
            mid = (low + high) // 2
            if VDOT_TABLE[mid].vdot <= vdot:
                low = mid
            else:
                high = mid

    if low == high:
        return int(round(time_for_distance(VDOT_TABLE[low], distance_m)))

    low_entry = VDOT_TABLE[low]
    high_entry = VDOT_TABLE[high]
    fraction = (vdot - low_entry.vdot) / (high_entry.vdot - low_entry.vdot)

    low_time = time_for_distance(low_entry, distance_m)
    high_time = time_for_distance(high_entry, distance_m)
    return int(round(low_time + fraction * (high_time - low_time)))


def get_vdot_label(vdot: float) -> str:
    """Human-readable fitness level for a VDOT value."""
    if vdot >= 75:
        return "Elite"
    elif vdot >= 65:
        return "Highly Competitive"
    elif vdot >= 55:
        return "Competitive"
    elif vdot >= 45:
        return "Advanced Recreational"
    elif vdot >= 38:
        return "Intermediate"
    elif vdot >= 30:
        return "Beginner"
    else:
        return "Novice"


def parse_race_time(time_str: str) -> int:
    """
    Parse a race time string to seconds.

    Accepts formats: H:MM:SS, MM:SS, or just seconds

    Args:
        time_str: Time string (e.g., "1:45:00", "25:30", "1200")

    Returns:
        Time in seconds

    Raises:
        RaceTimeParseError: If time format is invalid
    """
    time_str = time_str.strip()

    try:
        return int(float(time_str))
    except ValueError:
        pass

    parts = time_str.split(":")

    try:
        if len(parts) == 3:
            hours, minutes, seconds = parts
            return int(hours) * 3600 + int(minutes) * 60 + int(float(seconds))
        elif len(parts) == 2:
            minutes, seconds = parts
            return int(minutes) * 60 + int(float(seconds))
    except (ValueError, TypeError) as e:
        raise RaceTimeParseError(time_str) from e

    raise RaceTimeParseError(time_str)


@dataclass
class VDOTCalculation:
    """VDOT derived from a race result, with equivalent times at every standard distance."""

    vdot: float
    label: str
    race_distance: str
    race_time_sec: int
    race_time_formatted: str
    equivalent_times: Dict[str, int]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "vdot": self.vdot,
            "label": self.label,
            "race_distance": self.race_distance,
            "race_time_sec": self.race_time_sec,
            "race_time_formatted": self.race_time_formatted,
            "equivalent_times": {
                name: {"time_sec": seconds, "time_formatted": format_duration(seconds)}
                for name, seconds in self.equivalent_times.items()
            },
        }


def calculate_vdot_from_race(
    distance: str,
    time_str: str,
    custom_distance_m: Optional[float] = None,
) -> VDOTCalculation:
    """
    Calculate VDOT from a user-entered race result.

    Args:
        distance: Race distance ("5K", "10K", "half", "marathon", ... or "custom")
        time_str: Race time as string (e.g., "25:30" for 25min 30sec)
        custom_distance_m: Distance in meters if distance is "custom"

    Returns:
        VDOTCalculation with VDOT and equivalent times

    Raises:
        UnknownRaceDistanceError: For unrecognized distance labels or a
            missing custom distance
        RaceTimeParseError: For unparseable times

    Example:
        >>> calculate_vdot_from_race("5K", "19:00").vdot
        50.0
    """
    if distance.lower() == "custom":
        if custom_distance_m is None or custom_distance_m <= 0:
            raise UnknownRaceDistanceError(distance)
        distance_m = custom_distance_m
        distance_name = f"{custom_distance_m / 1000:.2f}K"
    else:
        race_dist = RaceDistance.from_string(distance)
        if race_dist is None:
            raise UnknownRaceDistanceError(distance)
        distance_m = race_dist.value
        distance_name = race_dist.display_name

    time_sec = parse_race_time(time_str)
    vdot = calculate_vdot(distance_m, time_sec)

    return VDOTCalculation(
        vdot=vdot,
        label=get_vdot_label(vdot),
        race_distance=distance_name,
        race_time_sec=time_sec,
        race_time_formatted=format_duration(time_sec),
        equivalent_times={
            race.display_name: predict_time(vdot, race.value)
            for race in RaceDistance
        },
    )
