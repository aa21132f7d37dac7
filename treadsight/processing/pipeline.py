"""
processing/pipeline.py
-----------------------
AnalysisPipeline: orchestrates the once-per-photo analysis chain.

  PixelBuffer
    → ImageQualityAssessor + TreadClassifier → TreadEstimate, ImageQuality
    → zip_to_climate + WearModel             → WearPrediction
    → compute_health_score                   → HealthScoreResult
    → AnalysisResult (returned to caller)

The time-travel engine and the deterioration pipeline are built from the
same config but invoked by the caller on every change of ``t``.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from treadsight.core.config import AppConfig
from treadsight.core.models import (
    AnalysisResult,
    DepthRange,
    ImageQuality,
    PixelBuffer,
    TreadBucket,
    TreadEstimate,
    UsageProfile,
    WearPredictionInput,
)
from treadsight.processing.classifier import TreadClassifier
from treadsight.rules.health import compute_health_score
from treadsight.rules.thresholds import Thresholds
from treadsight.rules.weather import WeatherRiskEngine
from treadsight.simulation.deterioration import DeteriorationPipeline
from treadsight.simulation.time_travel import TimeTravelEngine
from treadsight.wear.climate import zip_to_climate
from treadsight.wear.timeline import WearModel

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """End-to-end per-photo analysis."""

    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self._cfg = config or AppConfig()
        self._classifier = TreadClassifier(self._cfg.classifier, self._cfg.quality)
        self._wear = WearModel(self._cfg.wear)
        self._weather = WeatherRiskEngine(Thresholds.from_config(self._cfg.weather))
        self._deterioration = DeteriorationPipeline(self._cfg.deterioration)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(
        self,
        buffer: PixelBuffer,
        usage: Optional[UsageProfile] = None,
        today: Optional[dt.date] = None,
    ) -> AnalysisResult:
        """Analyse one photo.

        Raises:
            InvalidImageError: If the buffer has zero area.
            UnknownEnumError: If the usage ZIP code is malformed.
        """
        estimate, quality, _ = self._classifier.estimate_with_details(buffer)
        if not quality.acceptable:
            logger.warning(
                "Image quality %.2f below %.2f for %s; estimate is unreliable",
                quality.overall, self._cfg.quality.min_acceptable, buffer.source or "<buffer>",
            )
        return self.analyze_estimate(estimate.bucket, estimate.depth_range, estimate.confidence,
                                     quality, usage, today=today)

    def analyze_estimate(
        self,
        bucket: TreadBucket | str,
        depth_range: DepthRange,
        confidence: float,
        quality: ImageQuality,
        usage: Optional[UsageProfile] = None,
        today: Optional[dt.date] = None,
    ) -> AnalysisResult:
        """Run wear prediction and scoring for an estimate produced elsewhere.

        *bucket* is validated; an unknown value raises ``UnknownEnumError``.
        """
        bucket = TreadBucket.parse(bucket)
        usage = usage or UsageProfile(miles_per_year=self._cfg.ingestion.default_miles_per_year)
        climate = zip_to_climate(usage.zip)

        prediction = self._wear.predict(
            WearPredictionInput(
                depth_range=depth_range,
                miles_per_year=usage.miles_per_year,
                climate=climate,
            ),
            today=today,
        )
        health = compute_health_score(prediction.current_depth, bucket)

        logger.info(
            "Analysis: bucket=%s depth=%.1f/32 score=%d risk=%s remaining=%d months",
            bucket.value, prediction.current_depth, health.score,
            health.risk_level.value, prediction.remaining_months,
        )
        return AnalysisResult(
            tread_estimate=TreadEstimate(bucket=bucket, depth_range=depth_range, confidence=confidence),
            wear_prediction=prediction,
            health_score=health,
            image_quality=quality,
            miles_per_year=usage.miles_per_year,
            climate=climate,
        )

    def time_travel(self, analysis: AnalysisResult, today: Optional[dt.date] = None) -> TimeTravelEngine:
        """Build a :class:`TimeTravelEngine` sharing this pipeline's config."""
        return TimeTravelEngine(analysis, self._cfg.wear, self._weather, today=today)

    # ------------------------------------------------------------------
    # Component accessors (for the CLI, tests, etc.)
    # ------------------------------------------------------------------

    @property
    def classifier(self) -> TreadClassifier:
        return self._classifier

    @property
    def weather(self) -> WeatherRiskEngine:
        return self._weather

    @property
    def deterioration(self) -> DeteriorationPipeline:
        return self._deterioration
