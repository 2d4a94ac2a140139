"""Data models for activities, personal records and race predictions."""

from .activity import (
    CADENCE_MULTIPLIER,
    Activity,
    ActivityMetrics,
    StreamPoint,
)
from .personal_records import (
    CompareMode,
    PersonalRecord,
    PRDetectionResult,
    RecordCategory,
    compare_mode_for,
    get_category_label,
)
from .predictions import RacePrediction, SourceRecord

__all__ = [
    "CADENCE_MULTIPLIER",
    "Activity",
    "ActivityMetrics",
    "StreamPoint",
    "CompareMode",
    "PersonalRecord",
    "PRDetectionResult",
    "RecordCategory",
    "compare_mode_for",
    "get_category_label",
    "RacePrediction",
    "SourceRecord",
]
