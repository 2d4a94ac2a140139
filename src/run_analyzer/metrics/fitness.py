"""Fitness-Fatigue model calculations (CTL, ATL, TSB)."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union


logger = logging.getLogger(__name__)

CTL_TIME_CONSTANT = 42  # days, "fitness"
ATL_TIME_CONSTANT = 7  # days, "fatigue"


@dataclass(frozen=True)
class DailyLoad:
    """Training impulse attributed to one day."""

    date: Union[date, datetime]
    trimp: float


@dataclass
class FitnessMetrics:
    """Daily fitness metrics from the Fitness-Fatigue model."""

    date: date
    daily_load: float  # summed TRIMP for the day
    ctl: float  # Chronic Training Load (fitness) - 42 day EMA
    atl: float  # Acute Training Load (fatigue) - 7 day EMA
    tsb: float  # Training Stress Balance (form) = CTL - ATL

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date.isoformat(),
            "daily_load": self.daily_load,
            "ctl": self.ctl,
            "atl": self.atl,
            "tsb": self.tsb,
        }


def ema_decay(time_constant: int) -> float:
    """Smoothing factor for an N-day exponential moving average: 2 / (N + 1)."""
    return 2.0 / (time_constant + 1.0)


def calculate_ema(current_value: float, previous_ema: float, decay: float) -> float:
    """
    One step of an exponential moving average.

    EMA_n = EMA_{n-1} + decay * (value - EMA_{n-1})
    """
    return previous_ema + decay * (current_value - previous_ema)


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_fitness_trend(daily_loads: Iterable[DailyLoad]) -> List[FitnessMetrics]:
    """
    Calculate CTL, ATL and TSB for every calendar day covered by the loads.

    Loads on the same date are summed. Every day from the earliest to the
    latest date gets a row; days without activity carry zero load so rest
    periods decay both averages. The averages depend on the previous day, so
    this is a single ordered pass over the calendar.

    Args:
        daily_loads: Per-activity or per-day loads, in any order

    Returns:
        List of FitnessMetrics, one per calendar day, oldest first
    """
    loads = list(daily_loads)
    if not loads:
        return []

    start = min(_as_date(load.date) for load in loads)
    end = max(_as_date(load.date) for load in loads)

    # One bucket per day, indexed by offset from the start date
    buckets = [0.0] * ((end - start).days + 1)
    for load in loads:
        buckets[(_as_date(load.date) - start).days] += load.trimp

    ctl_decay = ema_decay(CTL_TIME_CONSTANT)
    atl_decay = ema_decay(ATL_TIME_CONSTANT)
    ctl = 0.0
    atl = 0.0

    results = []
    for offset, day_load in enumerate(buckets):
        ctl = calculate_ema(day_load, ctl, ctl_decay)
        atl = calculate_ema(day_load, atl, atl_decay)
        results.append(
            FitnessMetrics(
                date=start + timedelta(days=offset),
                daily_load=day_load,
                ctl=ctl,
                atl=atl,
                tsb=ctl - atl,
            )
        )

    logger.debug(f"Computed fitness trend over {len(results)} days from {len(loads)} loads")
    return results


def get_current_fitness(daily_loads: Iterable[DailyLoad]) -> Optional[FitnessMetrics]:
    """Most recent day of the fitness trend, or None without any loads."""
    metrics = calculate_fitness_trend(daily_loads)
    if not metrics:
        return None
    return metrics[-1]


def form_description(tsb: float) -> str:
    """
    Human-readable description of Training Stress Balance.

    Args:
        tsb: Training Stress Balance (CTL - ATL)

    Returns:
        Form description string
    """
    if tsb > 25:
        return "Very fresh (possibly detrained)"
    elif tsb > 10:
        return "Fresh and ready to race"
    elif tsb > 0:
        return "Neutral - good for training"
    elif tsb > -10:
        return "Slightly fatigued"
    elif tsb > -25:
        return "Tired but building fitness"
    else:
        return "Very fatigued - rest needed"
