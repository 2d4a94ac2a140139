"""Race time predictions from personal records."""

import logging
from datetime import datetime, timedelta, timezone
from types import MappingProxyType
from typing import Iterable, List, Optional, Tuple

from ..models.personal_records import (
    DISTANCE_10K,
    DISTANCE_5K,
    DISTANCE_HALF_MARATHON,
    DISTANCE_MARATHON,
    PersonalRecord,
    RecordCategory,
)
from ..models.predictions import RacePrediction, SourceRecord
from ..units import calculate_pace_per_mile
from .vdot import calculate_vdot, matches_distance, predict_time


logger = logging.getLogger(__name__)

SOURCE_RECORD_MAX_AGE_DAYS = 365

# Higher priority wins; race results outrank best efforts of the same distance
PR_PRIORITY = MappingProxyType({
    RecordCategory.DISTANCE_FULL: 100,
    RecordCategory.DISTANCE_HALF: 90,
    RecordCategory.DISTANCE_10K: 80,
    RecordCategory.DISTANCE_5K: 70,
    RecordCategory.DISTANCE_1MI: 60,
    RecordCategory.EFFORT_10K: 50,
    RecordCategory.EFFORT_5K: 40,
    RecordCategory.EFFORT_1MI: 30,
    RecordCategory.EFFORT_1K: 20,
    RecordCategory.EFFORT_400M: 10,
})

# (name, label, meters)
PREDICTION_TARGETS: Tuple[Tuple[str, str, float], ...] = (
    ("5k", "5K", DISTANCE_5K),
    ("10k", "10K", DISTANCE_10K),
    ("half", "Half Marathon", DISTANCE_HALF_MARATHON),
    ("marathon", "Marathon", DISTANCE_MARATHON),
)

# (threshold, multiplier) tiers, checked in order
DISTANCE_RATIO_PENALTIES = ((4.0, 0.70), (2.0, 0.85), (1.5, 0.95))
RECORD_AGE_PENALTIES = ((180, 0.75), (90, 0.90), (30, 0.95))
EF_DECLINE_THRESHOLD = -0.05
EF_DECLINE_PENALTY = 0.85

HIGH_CONFIDENCE = 0.85
MEDIUM_CONFIDENCE = 0.65


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _age_days(achieved_at: datetime, as_of: datetime) -> float:
    # Naive timestamps are treated as UTC
    if achieved_at.tzinfo is None:
        achieved_at = achieved_at.replace(tzinfo=timezone.utc)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=timezone.utc)
    return (as_of - achieved_at) / timedelta(days=1)


def get_target_label(target_name: str) -> str:
    """Human-readable label for a prediction target."""
    for name, label, _ in PREDICTION_TARGETS:
        if name == target_name:
            return label
    return target_name


def select_best_source_record(
    records: Iterable[PersonalRecord],
    as_of: Optional[datetime] = None,
    max_age_days: int = SOURCE_RECORD_MAX_AGE_DAYS,
) -> Optional[SourceRecord]:
    """
    Choose the personal record that race predictions are based on.

    Records older than max_age_days and categories without a priority (such as
    achievements) are ignored; of the rest the highest-priority category wins.

    Args:
        records: The current personal records
        as_of: Reference time, defaults to now
        max_age_days: Lookback window for usable records

    Returns:
        SourceRecord, or None when no recent race or effort record exists
    """
    as_of = as_of or _utcnow()
    best: Optional[PersonalRecord] = None
    best_priority = -1

    for record in records:
        if _age_days(record.achieved_at, as_of) > max_age_days:
            continue

        category = RecordCategory.from_string(record.category)
        priority = PR_PRIORITY.get(category) if category is not None else None
        if priority is None:
            continue

        if priority > best_priority:
            best_priority = priority
            best = record

    if best is None:
        return None

    return SourceRecord(
        category=best.category,
        activity_id=best.activity_id,
        distance_meters=best.distance_meters,
        duration_seconds=best.duration_seconds,
        achieved_at=best.achieved_at,
    )


def confidence_label(score: float) -> str:
    """Label for a confidence score; boundaries are inclusive."""
    if score >= HIGH_CONFIDENCE:
        return "high"
    elif score >= MEDIUM_CONFIDENCE:
        return "medium"
    else:
        return "low"


def calculate_confidence(
    source: Optional[SourceRecord],
    target_distance: float,
    ef_trend_change: Optional[float] = None,
    as_of: Optional[datetime] = None,
) -> Tuple[float, str]:
    """
    Confidence in a prediction, from 0.0 to 1.0.

    Starts at 1.0 and is reduced for:
    - Distance extrapolation (ratio between target and source, either way)
    - Age of the source record
    - A decline of more than 5% in the efficiency factor trend

    Args:
        source: The source record, None gives (0.0, "low")
        target_distance: Target distance in meters
        ef_trend_change: Fractional EF change (e.g. -0.08 for an 8% decline)
        as_of: Reference time, defaults to now

    Returns:
        (score, label) where label is "high", "medium" or "low"
    """
    if source is None or source.distance_meters <= 0:
        return 0.0, "low"

    score = 1.0

    ratio = target_distance / source.distance_meters
    if ratio < 1:
        ratio = 1 / ratio
    for threshold, multiplier in DISTANCE_RATIO_PENALTIES:
        if ratio > threshold:
            score *= multiplier
            break

    age = _age_days(source.achieved_at, as_of or _utcnow())
    for threshold, multiplier in RECORD_AGE_PENALTIES:
        if age > threshold:
            score *= multiplier
            break

    if ef_trend_change is not None and ef_trend_change < EF_DECLINE_THRESHOLD:
        score *= EF_DECLINE_PENALTY

    return score, confidence_label(score)


def generate_predictions(
    source: Optional[SourceRecord],
    ef_trend_change: Optional[float] = None,
    as_of: Optional[datetime] = None,
) -> List[RacePrediction]:
    """
    Predict race times at 5K, 10K, half marathon and marathon.

    Targets within 5% of the source record's distance are skipped. The
    prediction set is always rebuilt from scratch.

    Args:
        source: Record to base predictions on
        ef_trend_change: Fractional EF change for the confidence heuristic
        as_of: Reference time, defaults to now

    Returns:
        Predictions, empty when there is no usable source
    """
    if source is None:
        return []

    vdot = calculate_vdot(source.distance_meters, source.duration_seconds)
    if vdot <= 0:
        logger.debug(f"Source record {source.category} gives no VDOT")
        return []

    as_of = as_of or _utcnow()
    predictions = []

    for name, label, meters in PREDICTION_TARGETS:
        if matches_distance(meters, source.distance_meters):
            continue

        predicted_seconds = predict_time(vdot, meters)
        if predicted_seconds <= 0:
            continue

        score, conf_label = calculate_confidence(source, meters, ef_trend_change, as_of)
        predictions.append(
            RacePrediction(
                target_name=name,
                target_label=label,
                target_meters=meters,
                predicted_seconds=predicted_seconds,
                predicted_pace=calculate_pace_per_mile(meters, predicted_seconds),
                vdot=vdot,
                source_category=source.category,
                source_activity_id=source.activity_id,
                confidence=conf_label,
                confidence_score=round(score, 2),
            )
        )

    logger.info(
        f"Generated {len(predictions)} race predictions from {source.category} (VDOT {vdot})"
    )
    return predictions


def predict_from_records(
    records: Iterable[PersonalRecord],
    ef_trend_change: Optional[float] = None,
    as_of: Optional[datetime] = None,
    max_age_days: int = SOURCE_RECORD_MAX_AGE_DAYS,
) -> List[RacePrediction]:
    """Select the source record and generate the full prediction set."""
    as_of = as_of or _utcnow()
    source = select_best_source_record(records, as_of, max_age_days)
    if source is None:
        logger.debug("No recent race or best-effort record; skipping predictions")
        return []
    return generate_predictions(source, ef_trend_change, as_of)
