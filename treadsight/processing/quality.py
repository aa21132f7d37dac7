"""
processing/quality.py
---------------------
Image quality assessment: scores brightness, contrast and sharpness of a
:class:`PixelBuffer` so callers can reject unusable photos and the tread
classifier can scale its confidence.

Scores (each in [0, 1]):
  * brightness: peaks at mid-grey, flat 0.3 outside the usable band
  * contrast:   luminance standard deviation / 60
  * sharpness:  variance of a 4-neighbour Laplacian / 500
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from treadsight.core.config import QualityConfig
from treadsight.core.models import ImageQuality, PixelBuffer

logger = logging.getLogger(__name__)

# Mean luminance (as a fraction of 255) outside this band is badly exposed
_BRIGHTNESS_BAND = (0.15, 0.85)
_OUT_OF_BAND_BRIGHTNESS = 0.3
_CONTRAST_STD_SCALE = 60.0
_SHARPNESS_VAR_SCALE = 500.0
# Laplacian sampled on every 3rd row/column
_LAPLACIAN_STRIDE = 3


class ImageQualityAssessor:
    """Computes :class:`ImageQuality` for a pixel buffer."""

    def __init__(self, config: Optional[QualityConfig] = None) -> None:
        self._cfg = config or QualityConfig()

    def assess(self, buffer: PixelBuffer) -> ImageQuality:
        """Score *buffer*.

        Raises:
            InvalidImageError: If the buffer has zero area.
        """
        buffer.require_area()
        lum = buffer.luminance()

        avg_brightness = float(lum.mean()) / 255.0
        lo, hi = _BRIGHTNESS_BAND
        if lo < avg_brightness < hi:
            brightness = 1.0 - abs(avg_brightness - 0.5) * 1.5
        else:
            brightness = _OUT_OF_BAND_BRIGHTNESS

        contrast = min(1.0, float(lum.std()) / _CONTRAST_STD_SCALE)
        sharpness = min(1.0, laplacian_variance(lum) / _SHARPNESS_VAR_SCALE)

        cfg = self._cfg
        overall = (
            brightness * cfg.brightness_weight
            + contrast * cfg.contrast_weight
            + sharpness * cfg.sharpness_weight
        )
        quality = ImageQuality(
            blur=sharpness,
            brightness=brightness,
            contrast=contrast,
            overall=overall,
            acceptable=overall >= cfg.min_acceptable,
        )
        logger.debug(
            "Quality %s: brightness=%.3f contrast=%.3f sharpness=%.3f overall=%.3f",
            buffer.source or "<buffer>", brightness, contrast, sharpness, overall,
        )
        return quality


def laplacian_variance(lum: np.ndarray, stride: int = _LAPLACIAN_STRIDE) -> float:
    """Variance of the discrete 4-neighbour Laplacian on a strided interior grid.

    Returns 0.0 for images too small to have an interior.
    """
    if lum.shape[0] < 3 or lum.shape[1] < 3:
        return 0.0
    centre = lum[1:-1, 1:-1]
    lap = lum[:-2, 1:-1] + lum[2:, 1:-1] + lum[1:-1, :-2] + lum[1:-1, 2:] - 4.0 * centre
    sampled = lap[::stride, ::stride]
    return float(sampled.var())


def assess_image_quality(buffer: PixelBuffer, config: Optional[QualityConfig] = None) -> ImageQuality:
    """Convenience wrapper around :meth:`ImageQualityAssessor.assess`."""
    return ImageQualityAssessor(config).assess(buffer)
