"""Running analysis metrics."""

from .zones import (
    HRZones,
    default_zones,
    get_zone_for_hr,
    calculate_zone_time_distribution,
)
from .efficiency import (
    efficiency_factor,
    normalized_efficiency_factor,
    grade_factor,
    pace_at_hr,
)
from .decoupling import (
    average_hr,
    aerobic_decoupling,
    cardiac_drift,
    steady_state_pct,
    compute_decoupling,
    compute_cardiac_drift,
    compute_steady_state_pct,
)
from .load import calculate_hrss, calculate_trimp, heart_rate_ratio
from .fitness import (
    DailyLoad,
    FitnessMetrics,
    calculate_ema,
    calculate_fitness_trend,
    ema_decay,
    form_description,
    get_current_fitness,
)
from .streams import StreamStats, aggregate_stream_stats
from .compute import (
    compute_activity_metrics,
    data_quality_description,
    data_quality_score,
    decoupling_assessment,
)
from .best_efforts import (
    BestEffort,
    EFFORT_CATEGORIES,
    RACE_CATEGORIES,
    find_best_effort,
    get_matching_race_category,
    matches_race_distance,
)
from .vdot import (
    RaceDistance,
    VDOTCalculation,
    VDOT_TABLE,
    calculate_vdot,
    calculate_vdot_from_race,
    get_vdot_label,
    parse_race_time,
    predict_time,
)
from .predictions import (
    PR_PRIORITY,
    PREDICTION_TARGETS,
    calculate_confidence,
    confidence_label,
    generate_predictions,
    get_target_label,
    predict_from_records,
    select_best_source_record,
)

__all__ = [
    # HR zones
    "HRZones",
    "default_zones",
    "get_zone_for_hr",
    "calculate_zone_time_distribution",
    # Efficiency
    "efficiency_factor",
    "normalized_efficiency_factor",
    "grade_factor",
    "pace_at_hr",
    # Decoupling and drift
    "average_hr",
    "aerobic_decoupling",
    "cardiac_drift",
    "steady_state_pct",
    "compute_decoupling",
    "compute_cardiac_drift",
    "compute_steady_state_pct",
    # Load calculations
    "calculate_hrss",
    "calculate_trimp",
    "heart_rate_ratio",
    # Fitness model
    "DailyLoad",
    "FitnessMetrics",
    "calculate_ema",
    "calculate_fitness_trend",
    "ema_decay",
    "form_description",
    "get_current_fitness",
    # Stream aggregates
    "StreamStats",
    "aggregate_stream_stats",
    # Per-activity assembly
    "compute_activity_metrics",
    "data_quality_description",
    "data_quality_score",
    "decoupling_assessment",
    # Best efforts
    "BestEffort",
    "EFFORT_CATEGORIES",
    "RACE_CATEGORIES",
    "find_best_effort",
    "get_matching_race_category",
    "matches_race_distance",
    # VDOT
    "RaceDistance",
    "VDOTCalculation",
    "VDOT_TABLE",
    "calculate_vdot",
    "calculate_vdot_from_race",
    "get_vdot_label",
    "parse_race_time",
    "predict_time",
    # Race predictions
    "PR_PRIORITY",
    "PREDICTION_TARGETS",
    "calculate_confidence",
    "confidence_label",
    "generate_predictions",
    "get_target_label",
    "predict_from_records",
    "select_best_source_record",
]
