"""Services that apply the metrics to an athlete's records."""

from .pr_detection_service import PersonalRecordCatalog, PRDetectionService, candidate_wins
from .prediction_service import RacePredictionService

__all__ = [
    "PersonalRecordCatalog",
    "PRDetectionService",
    "RacePredictionService",
    "candidate_wins",
]
