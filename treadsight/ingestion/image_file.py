"""
ingestion/image_file.py
-----------------------
Photo ingestion: decodes an image file (or raw upload bytes) with OpenCV
into an RGBA :class:`PixelBuffer`, downscaled so the longest side does not
exceed ``max_dimension``; and writes rendered buffers back to disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from treadsight.core.exceptions import IngestionError
from treadsight.core.models import PixelBuffer

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIMENSION = 400


def load_image(path: str | Path, max_dimension: int = DEFAULT_MAX_DIMENSION) -> PixelBuffer:
    """Read *path* into an RGBA buffer.

    Raises:
        IngestionError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        raise IngestionError(f"Image file not found: {path}")

    image = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise IngestionError(f"OpenCV could not decode image: {path}")

    buffer = PixelBuffer(downscale(to_rgba(image), max_dimension), source=str(path))
    logger.info("Loaded image: %s | %dx%d", path.name, buffer.width, buffer.height)
    return buffer


def decode_image(data: bytes, max_dimension: int = DEFAULT_MAX_DIMENSION, source: str = "upload") -> PixelBuffer:
    """Decode encoded image bytes (JPEG, PNG, …) into an RGBA buffer."""
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise IngestionError(f"OpenCV could not decode {len(data)} bytes from {source}")
    return PixelBuffer(downscale(to_rgba(image), max_dimension), source=source)


def save_image(buffer: PixelBuffer, path: str | Path) -> Path:
    """Write *buffer* to *path*; the format follows the file extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    bgra = cv2.cvtColor(buffer.pixels, cv2.COLOR_RGBA2BGRA)
    if not cv2.imwrite(str(path), bgra):
        raise IngestionError(f"OpenCV could not write image: {path}")
    logger.debug("Saved image: %s", path)
    return path


def to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-decoded array (grey, BGR or BGRA) to RGBA uint8."""
    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF
        image = (image / 257).astype(np.uint8)
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    channels = image.shape[2]
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    raise IngestionError(f"Unsupported channel count: {channels}")


def downscale(rgba: np.ndarray, max_dimension: int) -> np.ndarray:
    """Shrink so the longest side is at most *max_dimension*; never upscales."""
    h, w = rgba.shape[:2]
    longest = max(h, w)
    if longest <= max_dimension or longest == 0:
        return rgba
    scale = max_dimension / longest
    size = (max(1, round(w * scale)), max(1, round(h * scale)))
    return cv2.resize(rgba, size, interpolation=cv2.INTER_AREA)
