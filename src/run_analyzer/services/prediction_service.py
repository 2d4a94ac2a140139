"""
Race Prediction Service

Builds race predictions from the current personal record catalog, using the
athlete's configured lookback window and efficiency trend periods.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from ..analysis.trends import EFTrend, calculate_ef_trend
from ..config import Settings, get_settings
from ..metrics.predictions import predict_from_records
from ..models.predictions import RacePrediction
from .pr_detection_service import PersonalRecordCatalog

logger = logging.getLogger(__name__)


class RacePredictionService:
    """
    Service for race predictions.

    This service provides:
    - The efficiency factor trend over the configured periods
    - Race predictions from recent records, adjusted by that trend
    """

    def __init__(
        self,
        catalog: PersonalRecordCatalog,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the prediction service.

        Args:
            catalog: Personal records to predict from
            settings: Time windows to use, defaults to get_settings()
        """
        self.catalog = catalog
        self.settings = settings or get_settings()

    def ef_trend(
        self,
        entries: Iterable[Tuple[datetime, Optional[float]]],
        as_of: Optional[datetime] = None,
    ) -> EFTrend:
        """Efficiency trend over the configured current and baseline periods."""
        return calculate_ef_trend(
            entries,
            as_of=as_of,
            current_days=self.settings.ef_current_period_days,
            compare_days=self.settings.ef_trend_compare_days,
        )

    def predict(
        self,
        ef_entries: Iterable[Tuple[datetime, Optional[float]]] = (),
        as_of: Optional[datetime] = None,
    ) -> List[RacePrediction]:
        """
        Predict race times from the catalog.

        Args:
            ef_entries: (start_date, efficiency_factor) pairs for the trend
            as_of: Reference time, defaults to now

        Returns:
            Predictions, empty when no record falls inside the lookback window
        """
        trend = self.ef_trend(ef_entries, as_of)
        predictions = predict_from_records(
            self.catalog.all(),
            ef_trend_change=trend.change,
            as_of=as_of,
            max_age_days=self.settings.pr_lookback_days,
        )
        logger.debug(
            f"{len(predictions)} predictions with a {self.settings.pr_lookback_days}-day lookback"
        )
        return predictions
