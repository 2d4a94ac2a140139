"""Unit conversions and duration/pace formatting."""

METERS_PER_KM = 1000.0
METERS_PER_MILE = 1609.34


def meters_to_miles(meters: float) -> float:
    """Convert meters to miles."""
    return meters / METERS_PER_MILE


def pace_per_unit(duration_seconds: float, distance_meters: float, unit_meters: float) -> float:
    """
    Pace in seconds per distance unit.

    Returns 0.0 when either the distance or the duration is not positive.
    """
    if distance_meters <= 0 or duration_seconds <= 0:
        return 0.0
    return duration_seconds / (distance_meters / unit_meters)


def calculate_pace_per_mile(distance_meters: float, duration_seconds: float) -> float:
    """Pace in seconds per mile, 0.0 for empty efforts."""
    return pace_per_unit(duration_seconds, distance_meters, METERS_PER_MILE)


def format_duration(seconds: int) -> str:
    """Format time in seconds to H:MM:SS or M:SS string."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    else:
        return f"{minutes}:{secs:02d}"


def format_pace(pace_seconds: float, unit_label: str = "km") -> str:
    """Format pace in seconds per unit as M:SS/unit, or '-' when not computed."""
    if pace_seconds <= 0:
        return "-"
    minutes = int(pace_seconds // 60)
    seconds = int(pace_seconds % 60)
    return f"{minutes}:{seconds:02d}/{unit_label}"
