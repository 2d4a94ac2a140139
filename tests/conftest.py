"""Shared fixtures for run analyzer tests."""

from datetime import datetime, timezone

import pytest

from run_analyzer.metrics.zones import HRZones
from run_analyzer.models.activity import Activity, StreamPoint


def build_stream(velocities, heartrates, grades=None, cadence=None):
    """1 Hz stream with cumulative distance integrated from velocity."""
    points = []
    distance = 0.0
    for i, (velocity, hr) in enumerate(zip(velocities, heartrates)):
        if i > 0 and velocity is not None:
            distance += velocity
        points.append(
            StreamPoint(
                time_offset=i,
                distance=distance,
                velocity=velocity,
                heartrate=hr,
                cadence=cadence,
                grade=grades[i] if grades is not None else None,
            )
        )
    return points


@pytest.fixture
def make_stream():
    """Factory for synthetic 1 Hz streams."""
    return build_stream


@pytest.fixture
def steady_stream():
    """Ten minutes at 3.0 m/s and 150 bpm."""
    return build_stream([3.0] * 600, [150.0] * 600)


@pytest.fixture
def zones():
    """Athlete with resting HR 50 and max HR 190."""
    return HRZones(resting_hr=50, max_hr=190, lthr=170)


@pytest.fixture
def race_day():
    return datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_activity(race_day):
    """Factory for activity summaries."""
    def _make(activity_id=1, distance=10000.0, moving_time=3000, **kwargs):
        kwargs.setdefault("start_date", race_day)
        return Activity(id=activity_id, distance=distance, moving_time=moving_time, **kwargs)
    return _make
