"""
conftest.py
-----------
Shared pytest fixtures for the TreadSight test suite.
"""

from __future__ import annotations

import datetime as dt

import numpy as np
import pytest

from treadsight.core.models import (
    AnalysisResult,
    DepthRange,
    ImageQuality,
    PixelBuffer,
    TreadBucket,
    TreadEstimate,
    WearPredictionInput,
)
from treadsight.rules.health import compute_health_score
from treadsight.wear.timeline import WearModel

TODAY = dt.date(2026, 1, 15)


def make_striped_rgb(height: int = 64, width: int = 64, stripe: int = 4) -> np.ndarray:
    """Vertical stripes alternating between luminance 40 and 200."""
    cols = (np.arange(width) // stripe) % 2
    row = np.where(cols == 0, 40, 200).astype(np.uint8)
    grey = np.tile(row, (height, 1))
    return np.repeat(grey[:, :, None], 3, axis=2)


# ---------------------------------------------------------------------------
# Reusable fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def striped_rgb() -> np.ndarray:
    return make_striped_rgb()


@pytest.fixture
def striped_buffer() -> PixelBuffer:
    """A 64×64 high-contrast 'deep groove' pattern."""
    return PixelBuffer.from_rgb(make_striped_rgb(), source="fixture_stripes")


@pytest.fixture
def flat_buffer() -> PixelBuffer:
    """A 64×64 uniform mid-grey image (no tread signal at all)."""
    return PixelBuffer.from_rgb(np.full((64, 64, 3), 128, dtype=np.uint8), source="fixture_flat")


@pytest.fixture
def noise_buffer() -> PixelBuffer:
    """A 48×80 RGB noise image with a fixed seed."""
    rng = np.random.default_rng(7)
    rgb = rng.integers(0, 256, (48, 80, 3), dtype=np.uint8)
    return PixelBuffer.from_rgb(rgb, source="fixture_noise")


@pytest.fixture
def sample_analysis() -> AnalysisResult:
    """NEW tire (8–10/32), 12 000 mi/yr, neutral climate, dated from TODAY."""
    depth = DepthRange(8.0, 10.0)
    prediction = WearModel().predict(WearPredictionInput(depth_range=depth), today=TODAY)
    return AnalysisResult(
        tread_estimate=TreadEstimate(TreadBucket.NEW, depth, confidence=0.8),
        wear_prediction=prediction,
        health_score=compute_health_score(prediction.current_depth, TreadBucket.NEW),
        image_quality=ImageQuality(blur=0.9, brightness=0.95, contrast=0.8, overall=0.88, acceptable=True),
    )
