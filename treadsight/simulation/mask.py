"""
simulation/mask.py
------------------
Tread mask: per-pixel weight in [0, 1] confining the ageing effects to the
tread band of a tire photo.

The mask is a smoothstep falloff from an ellipse centred slightly below the
middle of the frame (radii 35 % of the width and 40 % of the height). With
uneven wear the outer half of the width (the shoulders) is boosted.
"""

from __future__ import annotations

import numpy as np

_CENTRE_Y_FRACTION = 0.55
_RADIUS_X_FRACTION = 0.35
_RADIUS_Y_FRACTION = 0.40
# Shoulder band starts half-way from the centre to the frame edge
_SHOULDER_START = 0.5
_SHOULDER_BOOST = 1.5


def smoothstep(x: np.ndarray) -> np.ndarray:
    x = np.clip(x, 0.0, 1.0)
    return x * x * (3.0 - 2.0 * x)


def create_tread_mask(width: int, height: int, uneven_wear: bool = False) -> np.ndarray:
    """Return a float32 mask of shape (height, width)."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    cx = width / 2.0
    cy = height * _CENTRE_Y_FRACTION
    dx = (xs - cx) / (width * _RADIUS_X_FRACTION)
    dy = (ys - cy) / (height * _RADIUS_Y_FRACTION)
    mask = smoothstep(1.0 - np.sqrt(dx * dx + dy * dy))

    if uneven_wear:
        offset = np.abs(xs - cx) / (width / 2.0)
        shoulder = np.clip((offset - _SHOULDER_START) / (1.0 - _SHOULDER_START), 0.0, 1.0)
        mask = np.minimum(1.0, mask * (1.0 + _SHOULDER_BOOST * shoulder))

    return mask.astype(np.float32)
