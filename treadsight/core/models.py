"""
core/models.py
--------------
Central data-transfer objects (enums + dataclasses) used throughout the
TreadSight core. Pixel data is kept as plain numpy arrays; everything else
is plain Python types so results can be serialised without circular imports.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np

from treadsight.core.exceptions import (
    DepthRangeError,
    InvalidImageError,
    InvalidUsageError,
    UnknownEnumError,
)

# BT.601 luma weights (R, G, B)
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

MAX_DEPTH_32NDS = 10.0


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class _Choice(str, Enum):
    """String enum that rejects unknown values with :class:`UnknownEnumError`."""

    @classmethod
    def parse(cls, value: object) -> "_Choice":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(repr(m.value) for m in cls)
            raise UnknownEnumError(
                f"Unknown {cls.__name__} {value!r}; expected one of {allowed}"
            ) from None

    def __str__(self) -> str:
        return self.value


class TreadBucket(_Choice):
    """Tread condition, best first."""

    NEW = "NEW"
    HEALTHY = "HEALTHY"
    MODERATE = "MODERATE"
    LOW = "LOW"
    CRITICAL = "CRITICAL"

    @property
    def depth_range(self) -> "DepthRange":
        lo, hi = _BUCKET_DEPTHS[self]
        return DepthRange(lo, hi)

    @property
    def score_range(self) -> tuple[int, int]:
        return _BUCKET_SCORES[self]


class RiskLevel(_Choice):
    """Ordered safety classification, lowest risk first."""

    SAFE = "Safe"
    MONITOR = "Monitor"
    PLAN_SOON = "Plan Soon"
    REPLACE_NOW = "Replace Now"

    @property
    def rank(self) -> int:
        return list(RiskLevel).index(self)

    def escalate(self, steps: int) -> "RiskLevel":
        """Move *steps* up the scale, saturating at Replace Now. Never moves down."""
        order = list(RiskLevel)
        return order[min(len(order) - 1, self.rank + max(0, steps))]


class WeatherMode(_Choice):
    DRY = "dry"
    WET = "wet"
    SNOW = "snow"


class Climate(_Choice):
    COLD = "cold"
    MODERATE = "moderate"
    HOT = "hot"
    NEUTRAL = "neutral"


class Rotation(_Choice):
    NORMAL = "normal"
    SKIP_ROTATIONS = "skip-rotations"


class DrivingStyle(_Choice):
    NORMAL = "normal"
    AGGRESSIVE = "aggressive"


_BUCKET_DEPTHS: dict[TreadBucket, tuple[float, float]] = {
    TreadBucket.NEW: (8.0, 10.0),
    TreadBucket.HEALTHY: (6.0, 8.0),
    TreadBucket.MODERATE: (4.0, 6.0),
    TreadBucket.LOW: (2.0, 4.0),
    TreadBucket.CRITICAL: (0.0, 2.0),
}

_BUCKET_SCORES: dict[TreadBucket, tuple[int, int]] = {
    TreadBucket.NEW: (85, 100),
    TreadBucket.HEALTHY: (70, 85),
    TreadBucket.MODERATE: (50, 70),
    TreadBucket.LOW: (25, 50),
    TreadBucket.CRITICAL: (0, 25),
}


# ---------------------------------------------------------------------------
# Image layer
# ---------------------------------------------------------------------------

@dataclass
class PixelBuffer:
    """An RGBA image owned by the caller."""

    pixels: np.ndarray
    """RGBA array, shape (H, W, 4), dtype uint8."""

    source: str = ""
    """Human-readable source identifier (file path, fixture name, …)."""

    def __post_init__(self) -> None:
        px = self.pixels
        if not isinstance(px, np.ndarray) or px.ndim != 3 or px.shape[2] != 4:
            shape = getattr(px, "shape", None)
            raise InvalidImageError(f"Pixel buffer must have shape (H, W, 4), got {shape}")
        if px.dtype != np.uint8:
            raise InvalidImageError(f"Pixel buffer must be uint8, got {px.dtype}")

    @classmethod
    def from_rgb(cls, rgb: np.ndarray, source: str = "") -> "PixelBuffer":
        """Wrap an (H, W, 3) RGB array, adding an opaque alpha channel."""
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise InvalidImageError(f"RGB array must have shape (H, W, 3), got {rgb.shape}")
        alpha = np.full(rgb.shape[:2] + (1,), 255, dtype=np.uint8)
        rgb = np.clip(rgb, 0, 255).astype(np.uint8)
        return cls(np.concatenate([rgb, alpha], axis=2), source=source)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    def require_area(self) -> None:
        """Raise :class:`InvalidImageError` when the buffer has no pixels."""
        if self.total_pixels <= 0:
            raise InvalidImageError(
                f"Pixel buffer has zero area ({self.width}x{self.height})"
            )

    def luminance(self) -> np.ndarray:
        """BT.601 luminance as float64, shape (H, W), range 0–255."""
        return self.pixels[..., :3].astype(np.float64) @ LUMA_WEIGHTS

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy(), source=self.source)


@dataclass
class ImageQuality:
    """Brightness / contrast / sharpness scores of a photo, each in [0, 1]."""

    blur: float
    """Sharpness score (1 = sharp)."""

    brightness: float
    contrast: float
    overall: float
    acceptable: bool


# ---------------------------------------------------------------------------
# Tread layer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DepthRange:
    """Tread depth interval in 32nds of an inch."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if not (0 <= self.min <= self.max <= MAX_DEPTH_32NDS):
            raise DepthRangeError(
                f"Depth range must satisfy 0 <= min <= max <= {MAX_DEPTH_32NDS:g}, "
                f"got min={self.min}, max={self.max}"
            )

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass
class TreadEstimate:
    """Output of the tread signal classifier."""

    bucket: TreadBucket
    depth_range: DepthRange
    confidence: float
    """Heuristic confidence, always within [0.55, 0.90]."""


@dataclass
class HealthScoreResult:
    score: int
    """0–100, clamped into the bucket's score range."""

    risk_level: RiskLevel
    bucket: TreadBucket


# ---------------------------------------------------------------------------
# Wear layer
# ---------------------------------------------------------------------------

@dataclass
class WearPredictionInput:
    depth_range: DepthRange
    miles_per_year: float = 12000
    climate: Climate = Climate.NEUTRAL
    rotation: Rotation = Rotation.NORMAL
    driving_style: DrivingStyle = DrivingStyle.NORMAL


@dataclass
class WearPrediction:
    """Linear wear timeline projected from a depth reading."""

    current_depth: float
    """Midpoint of the depth range (32nds)."""

    wear_rate_per_1000_miles: float
    wet_traction_drop_date: dt.date
    """Date the tread crosses the wet-traction depth (4/32)."""

    legal_minimum_date: dt.date
    """Date the tread crosses the legal minimum (2/32)."""

    tire_dead_date: dt.date
    """Same as ``legal_minimum_date``: the tire is dead at the legal minimum."""

    remaining_months: int
    confidence_band: float
    """Relative ± uncertainty of the timeline, within [0.15, 0.20]."""


@dataclass
class WeatherRiskResult:
    adjusted_risk_level: RiskLevel
    risk_modifier: float
    description: str


@dataclass
class UsageProfile:
    """Usage parameters supplied alongside the photo."""

    miles_per_year: int = 12000
    zip: Optional[str] = None

    def __post_init__(self) -> None:
        if self.miles_per_year < 0:
            raise InvalidUsageError(f"miles_per_year must be >= 0, got {self.miles_per_year}")


@dataclass
class AnalysisResult:
    """Everything computed once per uploaded photo."""

    tread_estimate: TreadEstimate
    wear_prediction: WearPrediction
    health_score: HealthScoreResult
    image_quality: ImageQuality
    miles_per_year: float = 12000
    climate: Climate = Climate.NEUTRAL


# ---------------------------------------------------------------------------
# Time-travel / synthesis layer
# ---------------------------------------------------------------------------

@dataclass
class TimeTravelState:
    """Derived state at normalised time *t* (0 = today, 1 = tire dead)."""

    t: float
    current_date: dt.date
    current_depth: float
    current_score: int
    current_risk: RiskLevel
    weather_mode: WeatherMode = WeatherMode.DRY
    skip_rotations: bool = False
    aggressive_driving: bool = False
    total_months: int = 0


@dataclass
class DeteriorationOptions:
    """Input contract for the deterioration pipeline."""

    t: float
    uneven_wear: bool = False
    width: int = 0
    height: int = 0


# ---------------------------------------------------------------------------
# Narrative layer
# ---------------------------------------------------------------------------

@dataclass
class Explanation:
    narrative: str
    key_insights: list[str] = field(default_factory=list)
    recommended_action: str = ""
    disclaimer: str = ""


@dataclass(frozen=True)
class CallToAction:
    label: str
    description: str
    icon: str
    urgency: str
    """One of: low, medium, high, critical."""
