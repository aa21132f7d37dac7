"""tests/integration/test_pipeline.py — End-to-end analysis using synthetic tire photos."""

import datetime as dt

import numpy as np
import pytest

from treadsight.core.config import load_config
from treadsight.core.exceptions import InvalidImageError, UnknownEnumError
from treadsight.core.models import (
    Climate,
    DeteriorationOptions,
    PixelBuffer,
    RiskLevel,
    TreadBucket,
    UsageProfile,
)
from treadsight.processing.pipeline import AnalysisPipeline

TODAY = dt.date(2026, 1, 15)


class TestPipelineIntegration:
    def setup_method(self):
        self.cfg = load_config()
        self.pipeline = AnalysisPipeline(self.cfg)

    def test_deep_tread_photo(self, striped_buffer):
        result = self.pipeline.run(striped_buffer, UsageProfile(miles_per_year=12000), today=TODAY)
        assert result.tread_estimate.bucket is TreadBucket.NEW
        assert result.wear_prediction.current_depth == 9.0
        assert result.wear_prediction.remaining_months == 50
        assert result.health_score.risk_level is RiskLevel.SAFE
        assert result.climate is Climate.NEUTRAL
        assert result.image_quality.acceptable

    def test_hot_climate_wears_faster(self, striped_buffer):
        neutral = self.pipeline.run(striped_buffer, UsageProfile(12000), today=TODAY)
        hot = self.pipeline.run(striped_buffer, UsageProfile(12000, zip="90210"), today=TODAY)
        assert hot.climate is Climate.HOT
        assert hot.wear_prediction.remaining_months == 43
        assert hot.wear_prediction.remaining_months < neutral.wear_prediction.remaining_months

    def test_featureless_photo_flagged(self, flat_buffer, caplog):
        with caplog.at_level("WARNING"):
            result = self.pipeline.run(flat_buffer, today=TODAY)
        assert result.tread_estimate.bucket is TreadBucket.CRITICAL
        assert not result.image_quality.acceptable
        assert "unreliable" in caplog.text

    def test_default_usage_from_config(self, striped_buffer):
        result = self.pipeline.run(striped_buffer, today=TODAY)
        assert result.miles_per_year == self.cfg.ingestion.default_miles_per_year

    def test_bad_zip_rejected(self, striped_buffer):
        with pytest.raises(UnknownEnumError):
            self.pipeline.run(striped_buffer, UsageProfile(12000, zip="ABC"), today=TODAY)

    def test_empty_photo_rejected(self):
        with pytest.raises(InvalidImageError):
            self.pipeline.run(PixelBuffer(np.zeros((0, 0, 4), dtype=np.uint8)), today=TODAY)

    def test_external_bucket_validated(self, striped_buffer):
        quality = self.pipeline.classifier.estimate_with_details(striped_buffer)[1]
        with pytest.raises(UnknownEnumError):
            self.pipeline.analyze_estimate("EXCELLENT", TreadBucket.NEW.depth_range, 0.8, quality, today=TODAY)
        result = self.pipeline.analyze_estimate("LOW", TreadBucket.LOW.depth_range, 0.7, quality, today=TODAY)
        assert result.health_score.bucket is TreadBucket.LOW
        assert result.wear_prediction.remaining_months == 7


class TestTimeTravelAndRendering:
    def setup_method(self):
        self.pipeline = AnalysisPipeline(load_config())

    def test_slider_sweep(self, striped_buffer):
        analysis = self.pipeline.run(striped_buffer, UsageProfile(12000), today=TODAY)
        engine = self.pipeline.time_travel(analysis, today=TODAY)

        start = engine.state_at(0.0)
        assert start.current_depth == analysis.wear_prediction.current_depth
        assert start.current_risk is analysis.health_score.risk_level

        end = engine.state_at(1.0, "snow", skip_rotations=True)
        assert end.current_risk is RiskLevel.REPLACE_NOW
        assert end.total_months < engine.state_at(1.0).total_months

    def test_render_each_slider_position(self, striped_buffer):
        previous = None
        for t in (0.0, 0.25, 0.5, 0.75, 1.0):
            frame = self.pipeline.deterioration.render(striped_buffer, DeteriorationOptions(t=t))
            again = self.pipeline.deterioration.render(striped_buffer, DeteriorationOptions(t=t))
            assert frame.pixels.tobytes() == again.pixels.tobytes()
            if previous is not None:
                assert not np.array_equal(frame.pixels, previous)
            previous = frame.pixels
