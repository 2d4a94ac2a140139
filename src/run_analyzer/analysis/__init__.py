"""Trend analysis over an athlete's activity history."""

from .trends import EFTrend, calculate_ef_trend, ef_trend_arrow

__all__ = [
    "EFTrend",
    "calculate_ef_trend",
    "ef_trend_arrow",
]
