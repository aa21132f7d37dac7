"""
processing/classifier.py
------------------------
Heuristic tread classifier: turns a photo into a tread-depth bucket and a
(deliberately modest) confidence score.

Signals, each normalised to [0, 1]
----------------------------------
1. **Edge density**: share of stride-2 sample points whose central-difference
   luminance gradient exceeds a threshold. Deep grooves produce many edges.
2. **Texture variance**: mean luminance variance of 8×8 blocks taken every
   16 px. Worn rubber is smooth.
3. **Contrast ratio**: luminance span over every 4th pixel.

The weighted sum is mapped to a :class:`TreadBucket` through fixed
descending thresholds. Confidence rises with image quality and with
distance from the ambiguous mid-signal, and never leaves [0.55, 0.90].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from treadsight.core.config import ClassifierConfig, QualityConfig
from treadsight.core.models import ImageQuality, PixelBuffer, TreadBucket, TreadEstimate
from treadsight.processing.quality import ImageQualityAssessor

logger = logging.getLogger(__name__)

_EDGE_STRIDE = 2
_EDGE_DENSITY_GAIN = 2.5
_BLOCK_SIZE = 8
_BLOCK_STRIDE = 16
_TEXTURE_VAR_SCALE = 1200.0
# Contrast ratio looks at every 4th pixel in raster order
_CONTRAST_PIXEL_STEP = 4

_BUCKETS_BEST_FIRST = (
    TreadBucket.NEW,
    TreadBucket.HEALTHY,
    TreadBucket.MODERATE,
    TreadBucket.LOW,
)


@dataclass
class TreadSignals:
    """Raw classifier signals, kept for diagnostics."""

    edge_density: float
    texture_variance: float
    contrast_ratio: float
    combined: float


class TreadClassifier:
    """Classifies tread condition from a :class:`PixelBuffer`."""

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        quality_config: Optional[QualityConfig] = None,
    ) -> None:
        self._cfg = config or ClassifierConfig()
        self._assessor = ImageQualityAssessor(quality_config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def estimate(self, buffer: PixelBuffer) -> TreadEstimate:
        """Return the :class:`TreadEstimate` for *buffer*."""
        estimate, _, _ = self.estimate_with_details(buffer)
        return estimate

    def estimate_with_details(
        self, buffer: PixelBuffer
    ) -> tuple[TreadEstimate, ImageQuality, TreadSignals]:
        """Same as :meth:`estimate` but also returns the quality and raw signals.

        Raises:
            InvalidImageError: If the buffer has zero area.
        """
        quality = self._assessor.assess(buffer)
        signals = self.signals(buffer)
        bucket = self.signal_to_bucket(signals.combined)
        confidence = self.confidence(quality, signals.combined)

        logger.debug(
            "Tread signals %s: edge=%.3f texture=%.3f contrast=%.3f -> %.3f (%s, conf=%.2f)",
            buffer.source or "<buffer>",
            signals.edge_density, signals.texture_variance, signals.contrast_ratio,
            signals.combined, bucket.value, confidence,
        )
        estimate = TreadEstimate(
            bucket=bucket,
            depth_range=bucket.depth_range,
            confidence=confidence,
        )
        return estimate, quality, signals

    def signals(self, buffer: PixelBuffer) -> TreadSignals:
        buffer.require_area()
        lum = buffer.luminance()
        edge = edge_density(lum, self._cfg.edge_threshold)
        texture = texture_variance(lum)
        contrast = contrast_ratio(lum)
        cfg = self._cfg
        combined = (
            edge * cfg.edge_weight
            + texture * cfg.texture_weight
            + contrast * cfg.contrast_weight
        )
        return TreadSignals(edge, texture, contrast, combined)

    def signal_to_bucket(self, signal: float) -> TreadBucket:
        for bucket, threshold in zip(_BUCKETS_BEST_FIRST, self._cfg.bucket_thresholds):
            if signal >= threshold:
                return bucket
        return TreadBucket.CRITICAL

    def confidence(self, quality: ImageQuality, signal: float) -> float:
        """Confidence from image quality plus a bonus for clear-cut signals."""
        extremity = abs(signal - 0.5) * 2
        value = 0.55 + quality.overall * 0.30 + extremity * 0.05
        return max(self._cfg.min_confidence, min(self._cfg.max_confidence, value))


# ---------------------------------------------------------------------------
# Signal functions (operate on a float luminance array)
# ---------------------------------------------------------------------------

def edge_density(lum: np.ndarray, threshold: float = 30.0) -> float:
    """Fraction of stride-2 interior points with gradient above *threshold*, ×2.5, clamped."""
    if lum.shape[0] < 3 or lum.shape[1] < 3:
        return 0.0
    gx = np.abs(lum[1:-1, 2:] - lum[1:-1, :-2])[::_EDGE_STRIDE, ::_EDGE_STRIDE]
    gy = np.abs(lum[2:, 1:-1] - lum[:-2, 1:-1])[::_EDGE_STRIDE, ::_EDGE_STRIDE]
    gradient = np.hypot(gx, gy)
    edges = int(np.count_nonzero(gradient > threshold))
    return min(1.0, edges / gradient.size * _EDGE_DENSITY_GAIN)


def texture_variance(lum: np.ndarray) -> float:
    """Mean variance of non-overlapping 8×8 blocks sampled every 16 px, /1200, clamped."""
    h, w = lum.shape
    ys = np.arange(0, h - _BLOCK_SIZE, _BLOCK_STRIDE)
    xs = np.arange(0, w - _BLOCK_SIZE, _BLOCK_STRIDE)
    if ys.size == 0 or xs.size == 0:
        return 0.0
    offsets = np.arange(_BLOCK_SIZE)
    rows = ys[:, None] + offsets            # (nby, 8)
    cols = xs[:, None] + offsets            # (nbx, 8)
    blocks = lum[rows[:, None, :, None], cols[None, :, None, :]]   # (nby, nbx, 8, 8)
    block_var = blocks.var(axis=(2, 3))
    return min(1.0, float(block_var.mean()) / _TEXTURE_VAR_SCALE)


def contrast_ratio(lum: np.ndarray) -> float:
    """Luminance span over every 4th pixel, as a fraction of 255."""
    sampled = lum.ravel()[::_CONTRAST_PIXEL_STEP]
    if sampled.size == 0:
        return 0.0
    return float(sampled.max() - sampled.min()) / 255.0


def estimate_tread_bucket(buffer: PixelBuffer, config: Optional[ClassifierConfig] = None) -> TreadEstimate:
    """Convenience wrapper around :meth:`TreadClassifier.estimate`."""
    return TreadClassifier(config).estimate(buffer)
