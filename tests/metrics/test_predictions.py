"""Tests for race prediction source selection, confidence and generation."""

import pytest
from datetime import datetime, timedelta, timezone

from run_analyzer.metrics.predictions import (
    calculate_confidence,
    confidence_label,
    generate_predictions,
    get_target_label,
    predict_from_records,
    select_best_source_record,
)
from run_analyzer.metrics.vdot import predict_time
from run_analyzer.models.personal_records import PersonalRecord, RecordCategory
from run_analyzer.models.predictions import SourceRecord


AS_OF = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_record(category, distance, duration, days_ago=10, activity_id=1):
    return PersonalRecord(
        category=category,
        activity_id=activity_id,
        distance_meters=distance,
        duration_seconds=duration,
        achieved_at=AS_OF - timedelta(days=days_ago),
    )


def make_source(distance=5000.0, duration=1140, days_ago=10, category="distance_5k"):
    return SourceRecord(
        category=category,
        activity_id=1,
        distance_meters=distance,
        duration_seconds=duration,
        achieved_at=AS_OF - timedelta(days=days_ago),
    )


class TestSourceSelection:
    """Tests for choosing the record predictions are based on."""

    def test_highest_priority_wins(self):
        records = [
            make_record(RecordCategory.EFFORT_5K, 5000, 1150, activity_id=1),
            make_record(RecordCategory.DISTANCE_10K, 10000, 2400, activity_id=2),
            make_record(RecordCategory.DISTANCE_5K, 5000, 1160, activity_id=3),
        ]
        source = select_best_source_record(records, as_of=AS_OF)
        assert source.category == "distance_10k"
        assert source.activity_id == 2

    def test_race_outranks_effort_of_same_distance(self):
        records = [
            make_record(RecordCategory.EFFORT_10K, 10000, 2300),
            make_record(RecordCategory.DISTANCE_10K, 10000, 2400),
        ]
        assert select_best_source_record(records, as_of=AS_OF).category == "distance_10k"

    def test_old_records_ignored(self):
        records = [
            make_record(RecordCategory.DISTANCE_FULL, 42195, 12000, days_ago=400),
            make_record(RecordCategory.EFFORT_1K, 1000, 210, days_ago=20),
        ]
        assert select_best_source_record(records, as_of=AS_OF).category == "effort_1k"

    def test_achievements_and_unknown_categories_ignored(self):
        records = [
            make_record(RecordCategory.LONGEST_RUN, 30000, 9000),
            make_record("distance_50k", 50000, 15000),
        ]
        assert select_best_source_record(records, as_of=AS_OF) is None

    def test_no_records(self):
        assert select_best_source_record([], as_of=AS_OF) is None

    def test_naive_timestamps_treated_as_utc(self):
        record = PersonalRecord(
            category="distance_5k",
            activity_id=1,
            distance_meters=5000,
            duration_seconds=1140,
            achieved_at=datetime(2024, 5, 1),
        )
        assert select_best_source_record([record], as_of=AS_OF) is not None


class TestConfidence:
    """Tests for the prediction confidence heuristic."""

    def test_full_confidence(self):
        """Recent record, close distance, no EF decline."""
        score, label = calculate_confidence(make_source(), 6000, as_of=AS_OF)
        assert score == pytest.approx(1.0)
        assert label == "high"

    @pytest.mark.parametrize("target,expected", [
        (7000, 1.0),    # 1.4x, unchanged
        (8000, 0.95),   # 1.6x
        (10000, 0.95),  # exactly 2x stays in the 1.5x tier
        (12000, 0.85),  # 2.4x
        (21097, 0.70),  # 4.2x
    ])
    def test_distance_ratio_tiers(self, target, expected):
        source = make_source(days_ago=0)
        score, _ = calculate_confidence(source, target, as_of=AS_OF)
        assert score == pytest.approx(expected)

    def test_ratio_is_symmetric(self):
        source = make_source(distance=21097.0, duration=5100, days_ago=0)
        score, _ = calculate_confidence(source, 5000, as_of=AS_OF)
        assert score == pytest.approx(0.70)

    @pytest.mark.parametrize("days_ago,expected", [
        (10, 1.0),
        (45, 0.95),
        (100, 0.90),
        (200, 0.75),
    ])
    def test_age_tiers(self, days_ago, expected):
        score, _ = calculate_confidence(make_source(days_ago=days_ago), 5500, as_of=AS_OF)
        assert score == pytest.approx(expected)

    def test_ef_decline_penalty(self):
        source = make_source(days_ago=0)
        score, _ = calculate_confidence(source, 5500, ef_trend_change=-0.10, as_of=AS_OF)
        assert score == pytest.approx(0.85)

    def test_small_ef_decline_ignored(self):
        source = make_source(days_ago=0)
        score, _ = calculate_confidence(source, 5500, ef_trend_change=-0.04, as_of=AS_OF)
        assert score == pytest.approx(1.0)

    def test_combined_penalties(self):
        source = make_source(days_ago=100)
        score, label = calculate_confidence(source, 42195, ef_trend_change=-0.10, as_of=AS_OF)
        assert score == pytest.approx(0.70 * 0.90 * 0.85)
        assert label == "low"

    def test_no_source(self):
        assert calculate_confidence(None, 5000, as_of=AS_OF) == (0.0, "low")

    def test_more_extrapolation_never_more_confident(self):
        source = make_source(days_ago=0)
        scores = [calculate_confidence(source, t, as_of=AS_OF)[0] for t in (5000, 8000, 12000, 25000, 42195)]
        assert scores == sorted(scores, reverse=True)


class TestConfidenceLabel:
    """Tests for inclusive label boundaries."""

    def test_boundaries(self):
        assert confidence_label(0.85) == "high"
        assert confidence_label(0.849) == "medium"
        assert confidence_label(0.65) == "medium"
        assert confidence_label(0.649) == "low"


class TestGeneratePredictions:
    """Tests for building the prediction set."""

    def test_skips_source_distance(self):
        predictions = generate_predictions(make_source(), as_of=AS_OF)
        names = [p.target_name for p in predictions]
        assert names == ["10k", "half", "marathon"]

    def test_uses_source_vdot(self):
        predictions = generate_predictions(make_source(), as_of=AS_OF)
        marathon = predictions[-1]
        assert marathon.vdot == 50.0
        assert marathon.predicted_seconds == predict_time(50.0, 42195)
        assert marathon.target_label == "Marathon"
        assert marathon.source_category == "distance_5k"
        assert marathon.predicted_pace == pytest.approx(marathon.predicted_seconds / (42195 / 1609.34))

    def test_confidence_attached(self):
        predictions = {p.target_name: p for p in generate_predictions(make_source(), as_of=AS_OF)}
        assert predictions["10k"].confidence == "high"
        assert predictions["marathon"].confidence == "medium"
        assert predictions["marathon"].confidence_score == pytest.approx(0.70)

    def test_effort_source_predicts_all_targets(self):
        source = make_source(distance=1609.34, duration=344, category="effort_1mi")
        predictions = generate_predictions(source, as_of=AS_OF)
        assert [p.target_name for p in predictions] == ["5k", "10k", "half", "marathon"]

    def test_no_source(self):
        assert generate_predictions(None, as_of=AS_OF) == []

    def test_serializes_camel_case(self):
        prediction = generate_predictions(make_source(), as_of=AS_OF)[0]
        data = prediction.model_dump(by_alias=True)
        assert "predictedSeconds" in data
        assert "confidenceScore" in data


class TestPredictFromRecords:
    """Tests for the end-to-end prediction entry point."""

    def test_from_records(self):
        records = [make_record(RecordCategory.DISTANCE_HALF, 21097, 5100)]
        predictions = predict_from_records(records, as_of=AS_OF)
        assert [p.target_name for p in predictions] == ["5k", "10k", "marathon"]

    def test_nothing_recent(self):
        records = [make_record(RecordCategory.DISTANCE_HALF, 21097, 5100, days_ago=500)]
        assert predict_from_records(records, as_of=AS_OF) == []

    def test_custom_lookback(self):
        records = [make_record(RecordCategory.DISTANCE_HALF, 21097, 5100, days_ago=500)]
        assert len(predict_from_records(records, as_of=AS_OF, max_age_days=730)) == 3
        assert select_best_source_record(records, AS_OF, max_age_days=400) is None

    def test_target_labels(self):
        assert get_target_label("half") == "Half Marathon"
        assert get_target_label("ultra") == "ultra"
