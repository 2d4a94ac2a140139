"""Personal Records (PR) data models for tracking athletic achievements."""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..units import METERS_PER_MILE


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


# Standard distances in meters
DISTANCE_400M = 400.0
DISTANCE_1K = 1000.0
DISTANCE_1500M = 1500.0
DISTANCE_1_MILE = METERS_PER_MILE
DISTANCE_5K = 5000.0
DISTANCE_10K = 10000.0
DISTANCE_HALF_MARATHON = 21097.0
DISTANCE_MARATHON = 42195.0


class RecordCategory(str, Enum):
    """Categories of personal records; exactly one live record per category."""

    # Whole-activity race distances
    DISTANCE_1MI = "distance_1mi"
    DISTANCE_5K = "distance_5k"
    DISTANCE_10K = "distance_10k"
    DISTANCE_HALF = "distance_half"
    DISTANCE_FULL = "distance_full"
    # Best efforts found inside an activity's stream
    EFFORT_400M = "effort_400m"
    EFFORT_1K = "effort_1k"
    EFFORT_1MI = "effort_1mi"
    EFFORT_5K = "effort_5k"
    EFFORT_10K = "effort_10k"
    # Achievements
    LONGEST_RUN = "longest_run"
    HIGHEST_ELEVATION = "highest_elevation"
    FASTEST_PACE = "fastest_pace"

    @classmethod
    def from_string(cls, s: str) -> Optional["RecordCategory"]:
        """Parse a stored category string, or None if it is not recognized."""
        try:
            return cls(s)
        except ValueError:
            return None

    @property
    def is_race_distance(self) -> bool:
        return self.value.startswith("distance_")

    @property
    def is_best_effort(self) -> bool:
        return self.value.startswith("effort_")

    @property
    def distance_m(self) -> Optional[float]:
        """Nominal distance of the category, None for achievements."""
        return CATEGORY_DISTANCES.get(self)

    @property
    def label(self) -> str:
        """Human-readable label."""
        return CATEGORY_LABELS[self]


class CompareMode(str, Enum):
    """How a candidate record is compared with the stored one."""

    SHORTER_DURATION = "shorter_duration"  # lower duration wins (default)
    LONGER_DISTANCE = "longer_distance"  # higher distance wins
    LOWER_PACE = "lower_pace"  # lower pace wins


CATEGORY_DISTANCES = MappingProxyType({
    RecordCategory.DISTANCE_1MI: DISTANCE_1_MILE,
    RecordCategory.DISTANCE_5K: DISTANCE_5K,
    RecordCategory.DISTANCE_10K: DISTANCE_10K,
    RecordCategory.DISTANCE_HALF: DISTANCE_HALF_MARATHON,
    RecordCategory.DISTANCE_FULL: DISTANCE_MARATHON,
    RecordCategory.EFFORT_400M: DISTANCE_400M,
    RecordCategory.EFFORT_1K: DISTANCE_1K,
    RecordCategory.EFFORT_1MI: DISTANCE_1_MILE,
    RecordCategory.EFFORT_5K: DISTANCE_5K,
    RecordCategory.EFFORT_10K: DISTANCE_10K,
})

CATEGORY_LABELS = MappingProxyType({
    RecordCategory.DISTANCE_1MI: "1 Mile",
    RecordCategory.DISTANCE_5K: "5K",
    RecordCategory.DISTANCE_10K: "10K",
    RecordCategory.DISTANCE_HALF: "Half Marathon",
    RecordCategory.DISTANCE_FULL: "Marathon",
    RecordCategory.EFFORT_400M: "400m (best effort)",
    RecordCategory.EFFORT_1K: "1K (best effort)",
    RecordCategory.EFFORT_1MI: "1 Mile (best effort)",
    RecordCategory.EFFORT_5K: "5K (best effort)",
    RecordCategory.EFFORT_10K: "10K (best effort)",
    RecordCategory.LONGEST_RUN: "Longest Run",
    RecordCategory.HIGHEST_ELEVATION: "Highest Elevation Gain",
    RecordCategory.FASTEST_PACE: "Fastest Average Pace",
})

CATEGORY_COMPARE_MODES = MappingProxyType({
    RecordCategory.LONGEST_RUN: CompareMode.LONGER_DISTANCE,
    RecordCategory.HIGHEST_ELEVATION: CompareMode.LONGER_DISTANCE,
    RecordCategory.FASTEST_PACE: CompareMode.LOWER_PACE,
})


def compare_mode_for(category: str) -> CompareMode:
    """Comparison mode used for a category; race and effort categories compare duration."""
    parsed = RecordCategory.from_string(category)
    if parsed is None:
        return CompareMode.SHORTER_DURATION
    return CATEGORY_COMPARE_MODES.get(parsed, CompareMode.SHORTER_DURATION)


def get_category_label(category: str) -> str:
    """Human-readable label for a category, or the raw string if unknown."""
    parsed = RecordCategory.from_string(category)
    if parsed is None:
        return category
    return parsed.label


class PersonalRecord(BaseModel):
    """The current best performance for a single category."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    category: str = Field(..., description="Record category (see RecordCategory)")
    activity_id: int = Field(..., description="ID of the activity where the PR was achieved")
    distance_meters: float = Field(
        ...,
        description="Distance covered (elevation gain in meters for highest_elevation)",
    )
    duration_seconds: int = Field(..., description="Duration in seconds")
    pace_per_mile: Optional[float] = Field(None, description="Pace in seconds per mile")
    avg_heartrate: Optional[float] = Field(None, description="Average HR over the effort")
    achieved_at: datetime = Field(..., description="When the PR was achieved")
    start_offset: Optional[int] = Field(None, description="Stream offset where a best effort starts")
    end_offset: Optional[int] = Field(None, description="Stream offset where a best effort ends")

    @field_validator("category", mode="before")
    @classmethod
    def _category_value(cls, value):
        if isinstance(value, Enum):
            return value.value
        return value


class PRDetectionResult(BaseModel):
    """Result of PR detection for a single activity."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    activity_id: int = Field(..., description="ID of the analyzed activity")
    new_prs: List[PersonalRecord] = Field(
        default_factory=list,
        description="Records that replaced the stored record for their category",
    )
    has_new_pr: bool = Field(default=False, description="Whether any new PR was achieved")
