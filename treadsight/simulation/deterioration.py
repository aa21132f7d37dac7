"""
simulation/deterioration.py
---------------------------
DeteriorationPipeline: visually ages a tire photo for a wear parameter
``t ∈ [0, 1]`` (0 = as photographed, 1 = end of life).

Steps applied (in order, each gated on t):
1. Fit the photo to the requested canvas size (area interpolation)
2. Contrast reduction            t > 0.01
3. Gaussian-weighted smoothing   t > 0.15
4. Groove erosion                t > 0.20
5. Edge softening                t > 0.35
6. Micro-cracks                  t > 0.60
7. Ageing overlay (wash, vignette above 0.3, tint above 0.6)

Passes 2–6 are weighted by the tread mask and each one reads the previous
pass's output while writing a fresh array. The caller's buffer is never
modified and no state survives between calls, so identical
``(image, t, uneven_wear, size, seed)`` always yields identical bytes.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Optional

import cv2
import numpy as np

from treadsight.core.config import DeteriorationConfig
from treadsight.core.exceptions import InvalidImageError
from treadsight.core.models import DeteriorationOptions, PixelBuffer
from treadsight.core.numeric import clamp
from treadsight.simulation import effects
from treadsight.simulation.mask import create_tread_mask
from treadsight.simulation.rng import LinearCongruentialGenerator, UniformSource

logger = logging.getLogger(__name__)

NO_OP_T = 0.01
SMOOTHING_T = 0.15
EROSION_T = 0.20
SOFTENING_T = 0.35
CRACKS_T = 0.60


class DeteriorationPipeline:
    """Renders aged versions of a photo."""

    def __init__(
        self,
        config: Optional[DeteriorationConfig] = None,
        rng_factory: Callable[[int], UniformSource] = LinearCongruentialGenerator,
    ) -> None:
        self._cfg = config or DeteriorationConfig()
        self._rng_factory = rng_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        source: PixelBuffer,
        options: DeteriorationOptions,
        seed: Optional[int] = None,
    ) -> PixelBuffer:
        """Return a new :class:`PixelBuffer` showing *source* aged to ``options.t``.

        ``options.width`` / ``options.height`` of 0 keep the source size.

        Raises:
            InvalidImageError: If the source is empty or the target size is negative.
        """
        source.require_area()
        width = options.width or source.width
        height = options.height or source.height
        if width <= 0 or height <= 0:
            raise InvalidImageError(f"Invalid render size {width}x{height}")

        t = clamp(float(options.t), 0.0, 1.0)
        frame = _fit(source.pixels, width, height)
        if t <= NO_OP_T:
            return PixelBuffer(frame, source=source.source)

        mask = create_tread_mask(width, height, options.uneven_wear)
        applied = ["contrast"]

        # Step 2: contrast reduction
        frame = effects.reduce_contrast(frame, mask, t)

        # Step 3: smoothing
        if t > SMOOTHING_T:
            frame = effects.smooth(frame, mask, min(1.0, (t - SMOOTHING_T) * 1.2))
            applied.append("smoothing")

        # Step 4: groove erosion
        if t > EROSION_T:
            frame = effects.erode_grooves(frame, mask, min(1.0, (t - EROSION_T) * 1.5))
            applied.append("erosion")

        # Step 5: edge softening
        if t > SOFTENING_T:
            frame = effects.soften_edges(frame, mask, min(1.0, (t - SOFTENING_T) * 1.6))
            applied.append("softening")

        # Step 6: micro-cracks (fresh generator per render)
        if t > CRACKS_T:
            rng = self._rng_factory(self._cfg.crack_seed if seed is None else seed)
            frame = effects.add_micro_cracks(frame, mask, min(1.0, (t - CRACKS_T) * 2.5), rng)
            applied.append("cracks")

        # Step 7: overlays
        frame = effects.apply_ageing_overlay(frame, t)

        logger.debug(
            "Deterioration %s t=%.3f uneven=%s size=%dx%d passes=%s",
            source.source or "<buffer>", t, options.uneven_wear, width, height, applied,
        )
        return PixelBuffer(frame, source=source.source)

    def render_sequence(
        self,
        source: PixelBuffer,
        frames: int,
        uneven_wear: Optional[bool] = None,
        width: int = 0,
        height: int = 0,
    ) -> Iterator[tuple[float, PixelBuffer]]:
        """Yield ``(t, aged_buffer)`` for *frames* evenly spaced t values from 0 to 1."""
        uneven = self._cfg.uneven_wear if uneven_wear is None else uneven_wear
        count = max(1, frames)
        for i in range(count):
            t = i / (count - 1) if count > 1 else 0.0
            opts = DeteriorationOptions(t=t, uneven_wear=uneven, width=width, height=height)
            yield t, self.render(source, opts)


def _fit(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """Private working copy of *pixels* at ``width × height``."""
    if pixels.shape[1] == width and pixels.shape[0] == height:
        return pixels.copy()
    return cv2.resize(pixels, (width, height), interpolation=cv2.INTER_AREA)


def apply_deterioration(
    source: PixelBuffer,
    options: DeteriorationOptions,
    seed: Optional[int] = None,
) -> PixelBuffer:
    """Convenience wrapper around :meth:`DeteriorationPipeline.render`."""
    return DeteriorationPipeline().render(source, options, seed=seed)
