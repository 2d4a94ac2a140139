"""Race prediction data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .personal_records import to_camel


class SourceRecord(BaseModel):
    """The personal record selected as the basis for race predictions."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    category: str = Field(..., description="Category of the source PR")
    activity_id: int = Field(..., description="Activity the source PR came from")
    distance_meters: float = Field(..., description="Distance of the source PR")
    duration_seconds: int = Field(..., description="Duration of the source PR")
    achieved_at: datetime = Field(..., description="When the source PR was achieved")


class RacePrediction(BaseModel):
    """Predicted finish time for one target distance."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    target_name: str = Field(..., description="Target key: 5k, 10k, half or marathon")
    target_label: str = Field(..., description="Human-readable target label")
    target_meters: float = Field(..., description="Target distance in meters")
    predicted_seconds: int = Field(..., description="Predicted finish time in seconds")
    predicted_pace: float = Field(..., description="Predicted pace in seconds per mile")
    vdot: float = Field(..., description="Fitness score used for the prediction")
    source_category: str = Field(..., description="Category of the source PR")
    source_activity_id: int = Field(..., description="Activity of the source PR")
    confidence: str = Field(..., description="Confidence label: high, medium or low")
    confidence_score: float = Field(..., ge=0.0, le=1.0, description="Confidence score 0-1")
