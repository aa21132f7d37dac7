"""
simulation/effects.py
---------------------
Individual ageing passes used by the deterioration pipeline.

Every pass takes a read-only RGBA uint8 array plus the tread mask and
returns a *new* RGBA uint8 array; nothing is modified in place, so a pass
never reads pixels it has already written. The alpha channel is carried
through untouched and colour values are clamped to [0, 255].
"""

from __future__ import annotations

import math

import numpy as np
from scipy import ndimage

from treadsight.core.models import LUMA_WEIGHTS
from treadsight.simulation.rng import UniformSource

# --- contrast reduction ---
MAX_CONTRAST_REDUCTION = 0.45
_CONTRAST_MIN_WEIGHT = 0.01

# --- smoothing ---
_SMOOTHING_MIN_WEIGHT = 0.05

# --- groove erosion ---
GROOVE_DARK_LEVEL = 110.0
GROOVE_EDGE_VARIANCE = 15.0
_GROOVE_DARK_LIFT = 0.4
_GROOVE_EDGE_LIFT = 0.25
_GROOVE_EDGE_STD_CAP = 40.0
_EROSION_MIN_WEIGHT = 0.05
# 8-neighbour mean, centre excluded
_NEIGHBOUR_WEIGHTS = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.float64) / 8.0

# --- edge softening ---
_SOFTEN_GRADIENT_MIN = 25.0
_SOFTEN_GRADIENT_FULL = 100.0

# --- micro-cracks ---
CRACK_PROBABILITY = 0.035
CRACK_GRID_STRIDE = 2
_CRACK_MIN_WEIGHT = 0.1
_CRACK_MIN_LENGTH = 2
_CRACK_MAX_LENGTH = 6
_CRACK_GRADIENT_MIN = 40.0
_CRACK_JITTER = 0.5
_CRACK_DARKEN_BASE = 28.0
_CRACK_DARKEN_SPAN = 24.0

# --- overlays ---
_WASH_COLOUR = np.array([40.0, 30.0, 20.0])
_WASH_ALPHA = 0.08
VIGNETTE_START_T = 0.3
_VIGNETTE_ALPHA = 0.2
_VIGNETTE_RADII = (0.3, 0.7)   # as fractions of the width
TINT_START_T = 0.6
_TINT_COLOUR = np.array([90.0, 60.0, 30.0])
_TINT_ALPHA = 0.15


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _luminance(rgba: np.ndarray) -> np.ndarray:
    return rgba[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def _compose(src: np.ndarray, rgb: np.ndarray) -> np.ndarray:
    """New RGBA array: clamped *rgb* plus the alpha channel of *src*."""
    out = np.empty_like(src)
    out[..., :3] = np.clip(np.rint(rgb), 0, 255).astype(np.uint8)
    out[..., 3] = src[..., 3]
    return out


def _blend_towards(src: np.ndarray, target_rgb: np.ndarray, weight: np.ndarray) -> np.ndarray:
    rgb = src[..., :3].astype(np.float64)
    return _compose(src, rgb + (target_rgb - rgb) * weight[..., None])


def _central_gradients(lum: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Horizontal and vertical central differences with edge replication."""
    padded = np.pad(lum, 1, mode="edge")
    gx = padded[1:-1, 2:] - padded[1:-1, :-2]
    gy = padded[2:, 1:-1] - padded[:-2, 1:-1]
    return gx, gy


def gaussian_stride_kernel(radius: int) -> np.ndarray:
    """(2r+1)² kernel with Gaussian weights on the stride-2 offsets ``-r, -r+2, …``, summing to 1."""
    size = 2 * radius + 1
    sigma = max(1.0, radius / 1.5)
    kernel = np.zeros((size, size), dtype=np.float64)
    offsets = range(-radius, radius + 1, 2)
    for dy in offsets:
        for dx in offsets:
            kernel[dy + radius, dx + radius] = math.exp(-(dx * dx + dy * dy) / (2 * sigma * sigma))
    return kernel / kernel.sum()


# ---------------------------------------------------------------------------
# 1. Contrast reduction
# ---------------------------------------------------------------------------

def reduce_contrast(src: np.ndarray, mask: np.ndarray, t: float) -> np.ndarray:
    """Pull tread pixels towards their own luminance grey; strength ``0.45·t``."""
    weight = mask * (MAX_CONTRAST_REDUCTION * t)
    weight = np.where(weight < _CONTRAST_MIN_WEIGHT, 0.0, weight)
    grey = _luminance(src)[..., None]
    return _blend_towards(src, grey, weight)


# ---------------------------------------------------------------------------
# 2. Gaussian-weighted smoothing
# ---------------------------------------------------------------------------

def smoothing_radius(strength: float) -> int:
    return math.ceil(strength * 2) + 1


def smooth(src: np.ndarray, mask: np.ndarray, strength: float) -> np.ndarray:
    """Blend towards a stride-2 Gaussian blur whose radius grows with *strength*."""
    kernel = gaussian_stride_kernel(smoothing_radius(strength))
    rgb = src[..., :3].astype(np.float64)
    blurred = np.stack(
        [ndimage.correlate(rgb[..., c], kernel, mode="nearest") for c in range(3)],
        axis=-1,
    )
    weight = mask * strength
    weight = np.where(weight < _SMOOTHING_MIN_WEIGHT, 0.0, weight)
    return _blend_towards(src, blurred, weight)


# ---------------------------------------------------------------------------
# 3. Groove erosion
# ---------------------------------------------------------------------------

def erode_grooves(src: np.ndarray, mask: np.ndarray, strength: float) -> np.ndarray:
    """Brighten dark groove pixels and, more gently, high-variance edge pixels."""
    lum = _luminance(src)
    local_mean = ndimage.correlate(lum, _NEIGHBOUR_WEIGHTS, mode="nearest")
    local_sq = ndimage.correlate(lum * lum, _NEIGHBOUR_WEIGHTS, mode="nearest")
    variance = np.maximum(0.0, local_sq - local_mean * local_mean)

    weight = mask * strength
    active = weight >= _EROSION_MIN_WEIGHT
    dark = active & (lum < GROOVE_DARK_LEVEL)
    edge = active & ~dark & (variance > GROOVE_EDGE_VARIANCE)

    lift = np.zeros_like(lum)
    lift[dark] = (weight * (GROOVE_DARK_LEVEL - lum) * _GROOVE_DARK_LIFT)[dark]
    edge_std = np.minimum(np.sqrt(variance), _GROOVE_EDGE_STD_CAP)
    lift[edge] = (weight * edge_std * _GROOVE_EDGE_LIFT)[edge]

    return _compose(src, src[..., :3].astype(np.float64) + lift[..., None])


# ---------------------------------------------------------------------------
# 4. Edge softening
# ---------------------------------------------------------------------------

def soften_edges(src: np.ndarray, mask: np.ndarray, strength: float) -> np.ndarray:
    """Average strong-gradient pixels with their two neighbours across the edge."""
    gx, gy = _central_gradients(_luminance(src))
    gradient = np.hypot(gx, gy)

    rgb = src[..., :3].astype(np.float64)
    padded = np.pad(rgb, ((1, 1), (1, 1), (0, 0)), mode="edge")
    horizontal = (padded[1:-1, :-2] + rgb + padded[1:-1, 2:]) / 3.0
    vertical = (padded[:-2, 1:-1] + rgb + padded[2:, 1:-1]) / 3.0
    average = np.where((np.abs(gx) >= np.abs(gy))[..., None], horizontal, vertical)

    weight = mask * strength * np.minimum(1.0, gradient / _SOFTEN_GRADIENT_FULL)
    weight = np.where(gradient > _SOFTEN_GRADIENT_MIN, weight, 0.0)
    return _blend_towards(src, average, weight)


# ---------------------------------------------------------------------------
# 5. Micro-cracks
# ---------------------------------------------------------------------------

def add_micro_cracks(
    src: np.ndarray,
    mask: np.ndarray,
    strength: float,
    rng: UniformSource,
) -> np.ndarray:
    """Scatter short dark lines over the tread.

    Walks a stride-2 grid in raster order; each cell with enough mask weight
    consumes one draw from *rng* and cracks with probability ``0.035·strength``.
    A crack consumes four more draws (length, random angle, jitter, darkening)
    and runs along the local gradient direction when the gradient is strong.
    """
    dst = src.copy()
    h, w = src.shape[:2]
    gx, gy = _central_gradients(_luminance(src))
    weight = mask * strength
    probability = CRACK_PROBABILITY * strength

    grid = weight[::CRACK_GRID_STRIDE, ::CRACK_GRID_STRIDE] >= _CRACK_MIN_WEIGHT
    rows, cols = np.nonzero(grid)
    for gy_idx, gx_idx in zip(rows, cols):
        y = int(gy_idx) * CRACK_GRID_STRIDE
        x = int(gx_idx) * CRACK_GRID_STRIDE
        if rng.next_float() >= probability:
            continue

        span = _CRACK_MAX_LENGTH - _CRACK_MIN_LENGTH + 1
        length = min(_CRACK_MAX_LENGTH, _CRACK_MIN_LENGTH + int(rng.next_float() * span))
        random_angle = rng.next_float() * math.pi
        jitter = (rng.next_float() - 0.5) * _CRACK_JITTER
        darken = float(weight[y, x]) * (_CRACK_DARKEN_BASE + rng.next_float() * _CRACK_DARKEN_SPAN)

        if math.hypot(gx[y, x], gy[y, x]) > _CRACK_GRADIENT_MIN:
            angle = math.atan2(gy[y, x], gx[y, x])
        else:
            angle = random_angle
        angle += jitter
        step_x, step_y = math.cos(angle), math.sin(angle)

        for s in range(length):
            px = int(math.floor(x + step_x * s + 0.5))
            py = int(math.floor(y + step_y * s + 0.5))
            if px < 0 or px >= w or py < 0 or py >= h:
                break
            darker = src[py, px, :3].astype(np.float64) - darken
            dst[py, px, :3] = np.clip(np.rint(darker), 0, 255).astype(np.uint8)

    return dst


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------

def apply_ageing_overlay(src: np.ndarray, t: float) -> np.ndarray:
    """Warm wash ∝ t, a radial vignette above t=0.3 and a warm tint above t=0.6."""
    h, w = src.shape[:2]
    rgb = src[..., :3].astype(np.float64)

    alpha = t * _WASH_ALPHA
    rgb = rgb * (1.0 - alpha) + _WASH_COLOUR * alpha

    if t > VIGNETTE_START_T:
        ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)
        r = np.hypot(xs - w / 2.0, ys - h / 2.0)
        r0, r1 = (f * w for f in _VIGNETTE_RADII)
        ramp = np.clip((r - r0) / (r1 - r0), 0.0, 1.0)
        vignette = (t - VIGNETTE_START_T) * _VIGNETTE_ALPHA * ramp
        rgb = rgb * (1.0 - vignette[..., None])

    if t > TINT_START_T:
        tint = (t - TINT_START_T) * _TINT_ALPHA
        rgb = rgb * (1.0 - tint) + _TINT_COLOUR * tint

    return _compose(src, rgb)
