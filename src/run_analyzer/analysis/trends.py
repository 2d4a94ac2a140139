"""
Efficiency Trend Analysis

Compare recent aerobic efficiency with the longer-term baseline.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional, Tuple


logger = logging.getLogger(__name__)

EF_CURRENT_PERIOD_DAYS = 7
EF_TREND_COMPARE_DAYS = 28


@dataclass
class EFTrend:
    """Recent efficiency factor against the baseline period."""

    current_ef: float           # 0.0 without runs in the current period
    baseline_ef: Optional[float]
    change: Optional[float]     # Fractional change, e.g. -0.08 for an 8% decline
    current_count: int
    baseline_count: int

    @property
    def arrow(self) -> str:
        return ef_trend_arrow(self.change)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "current_ef": round(self.current_ef, 2),
            "baseline_ef": round(self.baseline_ef, 2) if self.baseline_ef is not None else None,
            "change_pct": round(self.change * 100, 1) if self.change is not None else None,
            "current_count": self.current_count,
            "baseline_count": self.baseline_count,
            "arrow": self.arrow,
        }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def calculate_ef_trend(
    entries: Iterable[Tuple[datetime, Optional[float]]],
    as_of: Optional[datetime] = None,
    current_days: int = EF_CURRENT_PERIOD_DAYS,
    compare_days: int = EF_TREND_COMPARE_DAYS,
) -> EFTrend:
    """
    Calculate the efficiency factor trend.

    The current EF is the average over activities started within the last
    `current_days`; the baseline averages the last `compare_days`, so it
    includes the current period. Activities without an EF are ignored.

    Args:
        entries: (start_date, efficiency_factor) pairs
        as_of: Reference time, defaults to now
        current_days: Length of the current period
        compare_days: Length of the baseline period

    Returns:
        EFTrend; change is None when either average is unavailable
    """
    as_of = _as_utc(as_of or datetime.now(timezone.utc))
    current_start = as_of - timedelta(days=current_days)
    baseline_start = as_of - timedelta(days=compare_days)

    current_sum = baseline_sum = 0.0
    current_count = baseline_count = 0

    for start_date, ef in entries:
        if ef is None:
            continue
        started = _as_utc(start_date)
        if started > current_start:
            current_sum += ef
            current_count += 1
        if started > baseline_start:
            baseline_sum += ef
            baseline_count += 1

    current_ef = current_sum / current_count if current_count else 0.0
    baseline_ef = baseline_sum / baseline_count if baseline_count else None

    change = None
    if baseline_ef and current_ef > 0:
        change = (current_ef - baseline_ef) / baseline_ef
    else:
        logger.debug("Not enough recent efficiency data for a trend")

    return EFTrend(
        current_ef=current_ef,
        baseline_ef=baseline_ef,
        change=change,
        current_count=current_count,
        baseline_count=baseline_count,
    )


def ef_trend_arrow(change: Optional[float]) -> str:
    """Display arrow for a trend change; empty when flat or unknown."""
    if change is None or change == 0:
        return ""
    return "↑" if change > 0 else "↓"
