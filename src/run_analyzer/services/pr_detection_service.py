"""Personal Record (PR) detection service.

This service handles:
- Comparison of candidate records against the stored record per category
- Detection of new personal records from an activity and its stream
- Retrieval of the current record set

The catalog assumes a single writer. Each upsert compares and replaces in
one step; concurrent writers must serialize access themselves.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from ..models.activity import Activity, StreamPoint
from ..models.personal_records import (
    DISTANCE_1_MILE,
    CompareMode,
    PersonalRecord,
    PRDetectionResult,
    RecordCategory,
    compare_mode_for,
)
from ..metrics.best_efforts import EFFORT_CATEGORIES, find_best_effort, get_matching_race_category
from ..units import calculate_pace_per_mile

logger = logging.getLogger(__name__)


def _key(category) -> str:
    return category.value if isinstance(category, Enum) else category


def candidate_wins(candidate: PersonalRecord, stored: PersonalRecord, mode: CompareMode) -> bool:
    """Whether a candidate supersedes the stored record under a comparison mode.

    Ties keep the stored record.
    """
    if mode is CompareMode.SHORTER_DURATION:
        return candidate.duration_seconds < stored.duration_seconds
    elif mode is CompareMode.LONGER_DISTANCE:
        return candidate.distance_meters > stored.distance_meters
    elif mode is CompareMode.LOWER_PACE:
        # A missing pace on either side cannot be compared; the candidate wins
        if candidate.pace_per_mile is None or stored.pace_per_mile is None:
            return True
        return candidate.pace_per_mile < stored.pace_per_mile
    raise ValueError(f"Unhandled compare mode: {mode}")


class PersonalRecordCatalog:
    """In-memory set of current personal records, one per category."""

    def __init__(self, records: Optional[Sequence[PersonalRecord]] = None):
        """Initialize the catalog.

        Args:
            records: Previously stored records to start from
        """
        self._records: Dict[str, PersonalRecord] = {}
        for record in records or []:
            self._records[record.category] = record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, category: str) -> bool:
        return _key(category) in self._records

    def get(self, category: str) -> Optional[PersonalRecord]:
        """Current record for a category, if any."""
        return self._records.get(_key(category))

    def all(self) -> List[PersonalRecord]:
        """All current records, ordered by category."""
        return [self._records[c] for c in sorted(self._records)]

    def for_activity(self, activity_id: int) -> List[PersonalRecord]:
        """Current records achieved during a specific activity."""
        return [r for r in self.all() if r.activity_id == activity_id]

    def remove_activity(self, activity_id: int) -> int:
        """Drop every record owned by an activity; returns how many were removed."""
        owned = [c for c, r in self._records.items() if r.activity_id == activity_id]
        for category in owned:
            del self._records[category]
        return len(owned)

    def upsert(self, candidate: PersonalRecord, mode: Optional[CompareMode] = None) -> bool:
        """Store a candidate if it beats the current record for its category.

        Args:
            candidate: Candidate record
            mode: Comparison mode, defaults to the category's mode

        Returns:
            True if the candidate was stored, False if the stored record stands
        """
        mode = mode or compare_mode_for(candidate.category)
        stored = self._records.get(candidate.category)

        if stored is not None and not candidate_wins(candidate, stored, mode):
            return False

        self._records[candidate.category] = candidate
        if stored is None:
            logger.info(f"First {candidate.category} record from activity {candidate.activity_id}")
        else:
            logger.info(
                f"New {candidate.category} record from activity {candidate.activity_id} "
                f"(was activity {stored.activity_id})"
            )
        return True


class PRDetectionService:
    """Service for detecting personal records in activities."""

    def __init__(self, catalog: Optional[PersonalRecordCatalog] = None):
        """Initialize the PR detection service.

        Args:
            catalog: Catalog to update, a new empty one by default
        """
        self.catalog = catalog if catalog is not None else PersonalRecordCatalog()

    def process_activity(
        self,
        activity: Activity,
        stream: Sequence[StreamPoint] = (),
    ) -> PRDetectionResult:
        """
        Detect personal records in an activity.

        Checks whole-activity race distances, achievements (longest run,
        highest elevation gain, fastest average pace) and best efforts
        found in the stream, upserting each candidate into the catalog.

        Args:
            activity: Activity summary
            stream: The activity's stream samples; efforts are skipped when empty

        Returns:
            PRDetectionResult listing the records that were stored
        """
        if activity.start_date is None:
            logger.warning(f"Activity {activity.id} has no start date; skipping PR detection")
            return PRDetectionResult(activity_id=activity.id)

        candidates: List[PersonalRecord] = []

        race = self._check_race_distance(activity)
        if race is not None:
            candidates.append(race)

        candidates.extend(self._check_achievements(activity))

        if stream:
            candidates.extend(self._check_best_efforts(activity, stream))

        new_prs = [c for c in candidates if self.catalog.upsert(c)]

        if new_prs:
            logger.info(f"Activity {activity.id}: {len(new_prs)} new personal records")

        return PRDetectionResult(
            activity_id=activity.id,
            new_prs=new_prs,
            has_new_pr=bool(new_prs),
        )

    def _whole_activity_record(
        self,
        activity: Activity,
        category: RecordCategory,
        distance_meters: Optional[float] = None,
    ) -> PersonalRecord:
        """Record built from the activity summary."""
        return PersonalRecord(
            category=category,
            activity_id=activity.id,
            distance_meters=activity.distance if distance_meters is None else distance_meters,
            duration_seconds=activity.moving_time,
            pace_per_mile=calculate_pace_per_mile(activity.distance, activity.moving_time),
            avg_heartrate=activity.average_heartrate,
            achieved_at=activity.start_date,
        )

    def _check_race_distance(self, activity: Activity) -> Optional[PersonalRecord]:
        """Candidate for the race distance the whole activity matches."""
        if activity.moving_time <= 0:
            return None
        category = get_matching_race_category(activity.distance)
        if category is None:
            return None
        return self._whole_activity_record(activity, category)

    def _check_achievements(self, activity: Activity) -> List[PersonalRecord]:
        """Candidates for longest run, highest elevation and fastest pace."""
        achievements = []

        if activity.distance > 0:
            achievements.append(self._whole_activity_record(activity, RecordCategory.LONGEST_RUN))

        if activity.total_elevation_gain > 0:
            # Elevation gain is stored in the distance field
            achievements.append(
                self._whole_activity_record(
                    activity,
                    RecordCategory.HIGHEST_ELEVATION,
                    distance_meters=activity.total_elevation_gain,
                )
            )

        if activity.distance >= DISTANCE_1_MILE and activity.moving_time > 0:
            achievements.append(self._whole_activity_record(activity, RecordCategory.FASTEST_PACE))

        return achievements

    def _check_best_efforts(
        self,
        activity: Activity,
        stream: Sequence[StreamPoint],
    ) -> List[PersonalRecord]:
        """Candidates for each best-effort distance found in the stream."""
        efforts = []
        for target_distance, category in EFFORT_CATEGORIES:
            effort = find_best_effort(stream, target_distance)
            if effort is None:
                continue

            efforts.append(
                PersonalRecord(
                    category=category,
                    activity_id=activity.id,
                    distance_meters=effort.distance_meters,
                    duration_seconds=effort.duration_seconds,
                    pace_per_mile=effort.pace_per_mile,
                    avg_heartrate=effort.avg_heartrate if effort.avg_heartrate > 0 else None,
                    achieved_at=activity.start_date,
                    start_offset=effort.start_offset,
                    end_offset=effort.end_offset,
                )
            )
        return efforts
