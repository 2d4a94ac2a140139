"""Tests for the personal record catalog and PRDetectionService."""

import pytest
from datetime import datetime, timezone

from run_analyzer.models.activity import Activity
from run_analyzer.models.personal_records import (
    CompareMode,
    PersonalRecord,
    RecordCategory,
    compare_mode_for,
    get_category_label,
)
from run_analyzer.services.pr_detection_service import (
    PersonalRecordCatalog,
    PRDetectionService,
    candidate_wins,
)


ACHIEVED = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_pr(category="distance_5k", activity_id=1, distance=5000.0, duration=1200, pace=None):
    return PersonalRecord(
        category=category,
        activity_id=activity_id,
        distance_meters=distance,
        duration_seconds=duration,
        pace_per_mile=pace,
        achieved_at=ACHIEVED,
    )


@pytest.fixture
def catalog():
    return PersonalRecordCatalog()


@pytest.fixture
def service(catalog):
    return PRDetectionService(catalog)


class TestRecordCategory:
    """Tests for category metadata."""

    def test_kinds(self):
        assert RecordCategory.DISTANCE_HALF.is_race_distance
        assert RecordCategory.EFFORT_1K.is_best_effort
        assert not RecordCategory.LONGEST_RUN.is_race_distance
        assert not RecordCategory.LONGEST_RUN.is_best_effort

    def test_distances(self):
        assert RecordCategory.DISTANCE_FULL.distance_m == 42195.0
        assert RecordCategory.EFFORT_400M.distance_m == 400.0
        assert RecordCategory.FASTEST_PACE.distance_m is None

    def test_labels(self):
        assert get_category_label("distance_half") == "Half Marathon"
        assert get_category_label("effort_1mi") == "1 Mile (best effort)"
        assert get_category_label("mystery") == "mystery"
        assert RecordCategory.LONGEST_RUN.label == "Longest Run"

    def test_from_string(self):
        assert RecordCategory.from_string("longest_run") is RecordCategory.LONGEST_RUN
        assert RecordCategory.from_string("distance_50k") is None


class TestCompareModes:
    """Tests for candidate-vs-stored comparison."""

    def test_shorter_duration(self):
        stored = make_pr(duration=1200)
        assert candidate_wins(make_pr(duration=1190), stored, CompareMode.SHORTER_DURATION)
        assert not candidate_wins(make_pr(duration=1200), stored, CompareMode.SHORTER_DURATION)
        assert not candidate_wins(make_pr(duration=1210), stored, CompareMode.SHORTER_DURATION)

    def test_longer_distance(self):
        stored = make_pr(distance=20000)
        assert candidate_wins(make_pr(distance=21000), stored, CompareMode.LONGER_DISTANCE)
        assert not candidate_wins(make_pr(distance=20000), stored, CompareMode.LONGER_DISTANCE)

    def test_lower_pace(self):
        stored = make_pr(pace=420.0)
        assert candidate_wins(make_pr(pace=410.0), stored, CompareMode.LOWER_PACE)
        assert not candidate_wins(make_pr(pace=420.0), stored, CompareMode.LOWER_PACE)

    def test_lower_pace_missing_value(self):
        """A pace that cannot be compared lets the candidate through."""
        assert candidate_wins(make_pr(pace=500.0), make_pr(pace=None), CompareMode.LOWER_PACE)
        assert candidate_wins(make_pr(pace=None), make_pr(pace=400.0), CompareMode.LOWER_PACE)

    def test_category_modes(self):
        assert compare_mode_for("longest_run") is CompareMode.LONGER_DISTANCE
        assert compare_mode_for("highest_elevation") is CompareMode.LONGER_DISTANCE
        assert compare_mode_for("fastest_pace") is CompareMode.LOWER_PACE
        assert compare_mode_for("effort_1k") is CompareMode.SHORTER_DURATION
        assert compare_mode_for("something_else") is CompareMode.SHORTER_DURATION


class TestPersonalRecordCatalog:
    """Tests for catalog upserts."""

    def test_first_record_stored(self, catalog):
        assert catalog.upsert(make_pr()) is True
        assert catalog.get("distance_5k").duration_seconds == 1200

    def test_faster_replaces(self, catalog):
        catalog.upsert(make_pr(activity_id=1, duration=1200))
        assert catalog.upsert(make_pr(activity_id=2, duration=1150)) is True
        assert catalog.get("distance_5k").activity_id == 2
        assert len(catalog) == 1

    def test_shorter_duration_idempotent(self, catalog):
        """Re-submitting an identical or slower record changes nothing."""
        catalog.upsert(make_pr(activity_id=1, duration=1200))
        assert catalog.upsert(make_pr(activity_id=1, duration=1200)) is False
        assert catalog.upsert(make_pr(activity_id=2, duration=1250)) is False
        assert catalog.get("distance_5k").activity_id == 1

    def test_longest_run_uses_distance(self, catalog):
        catalog.upsert(make_pr("longest_run", activity_id=1, distance=20000, duration=6000))
        # Faster but shorter does not win
        assert catalog.upsert(make_pr("longest_run", activity_id=2, distance=15000, duration=4000)) is False
        assert catalog.upsert(make_pr("longest_run", activity_id=3, distance=25000, duration=9000)) is True
        assert catalog.get("longest_run").activity_id == 3

    def test_explicit_mode(self, catalog):
        catalog.upsert(make_pr(distance=5000, duration=1200))
        candidate = make_pr(activity_id=2, distance=5100, duration=1300)
        assert catalog.upsert(candidate, mode=CompareMode.LONGER_DISTANCE) is True

    def test_enum_category_normalized(self, catalog):
        catalog.upsert(make_pr(category=RecordCategory.EFFORT_1K, duration=240))
        assert "effort_1k" in catalog
        assert catalog.get(RecordCategory.EFFORT_1K).duration_seconds == 240

    def test_seeded_and_ordered(self):
        catalog = PersonalRecordCatalog([make_pr("effort_5k"), make_pr("distance_10k", distance=10000)])
        assert [r.category for r in catalog.all()] == ["distance_10k", "effort_5k"]

    def test_activity_lookup_and_removal(self, catalog):
        catalog.upsert(make_pr("distance_5k", activity_id=7))
        catalog.upsert(make_pr("effort_1k", activity_id=7, duration=230))
        catalog.upsert(make_pr("effort_400m", activity_id=8, duration=80))
        assert len(catalog.for_activity(7)) == 2
        assert catalog.remove_activity(7) == 2
        assert [r.category for r in catalog.all()] == ["effort_400m"]


class TestPRDetectionService:
    """Tests for detecting records in an activity."""

    def test_race_distance_and_achievements(self, service, make_activity):
        activity = make_activity(distance=5020.0, moving_time=1200, total_elevation_gain=35.0)
        result = service.process_activity(activity)

        categories = {pr.category for pr in result.new_prs}
        assert categories == {"distance_5k", "longest_run", "highest_elevation", "fastest_pace"}
        assert result.has_new_pr

        elevation = service.catalog.get("highest_elevation")
        assert elevation.distance_meters == 35.0

    def test_best_efforts_from_stream(self, service, make_activity, make_stream):
        stream = make_stream([4.0] * 1300, [150.0] * 1300)
        activity = make_activity(distance=5196.0, moving_time=1299)
        result = service.process_activity(activity, stream)

        effort = service.catalog.get("effort_1k")
        assert effort is not None
        assert effort.duration_seconds == 250
        assert effort.avg_heartrate == pytest.approx(150.0)
        assert effort.end_offset - effort.start_offset == 250
        assert "effort_10k" not in service.catalog
        assert {"effort_400m", "effort_1k", "effort_1mi", "effort_5k"} <= {pr.category for pr in result.new_prs}

    def test_repeat_activity_is_noop(self, service, make_activity, make_stream):
        stream = make_stream([4.0] * 600, [150.0] * 600)
        activity = make_activity(distance=2396.0, moving_time=599)
        service.process_activity(activity, stream)

        result = service.process_activity(activity, stream)
        assert result.new_prs == []
        assert result.has_new_pr is False

    def test_short_run_has_no_fastest_pace(self, service, make_activity):
        result = service.process_activity(make_activity(distance=1200.0, moving_time=300))
        assert "fastest_pace" not in {pr.category for pr in result.new_prs}
        assert "longest_run" in service.catalog

    def test_fastest_pace_compares_pace(self, service, make_activity):
        service.process_activity(make_activity(activity_id=1, distance=10000.0, moving_time=3000))
        service.process_activity(make_activity(activity_id=2, distance=5000.0, moving_time=1400))
        assert service.catalog.get("fastest_pace").activity_id == 2
        assert service.catalog.get("longest_run").activity_id == 1

    def test_no_start_date(self, service):
        activity = Activity(id=9, distance=5000.0, moving_time=1200)
        result = service.process_activity(activity)
        assert result.new_prs == []
        assert len(service.catalog) == 0

    def test_result_serializes(self, service, make_activity):
        result = service.process_activity(make_activity(distance=5000.0, moving_time=1200))
        data = result.model_dump(by_alias=True)
        assert data["hasNewPr"] is True
        assert data["newPrs"][0]["activityId"] == 1
