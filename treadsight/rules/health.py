"""
rules/health.py
---------------
Tire health score (0–100) and the base risk level derived from it.

Weights:
  * depth        80 %  (linear: 0/32 → 0, 10/32 → 100)
  * age          10 %  (100 up to 24 months, linear to 40 at 60 months)
  * wear pattern 10 %  (100 even, 65 uneven)

The combined score is clamped into the bucket's canonical score range so the
score never contradicts the classifier's bucket.
"""

from __future__ import annotations

from typing import Optional

from treadsight.core.models import MAX_DEPTH_32NDS, HealthScoreResult, RiskLevel, TreadBucket
from treadsight.core.numeric import clamp, round_half_up

_DEPTH_WEIGHT = 0.80
_AGE_WEIGHT = 0.10
_PATTERN_WEIGHT = 0.10
_UNEVEN_WEAR_SCORE = 65.0


def compute_health_score(
    depth_32nds: float,
    bucket: TreadBucket | str,
    age_months: Optional[float] = None,
    even_wear: bool = True,
) -> HealthScoreResult:
    """Score a tire from its depth, bucket and optional age / wear pattern.

    Raises:
        UnknownEnumError: If *bucket* is not a known tread bucket.
    """
    bucket = TreadBucket.parse(bucket)
    depth_score = _depth_score(depth_32nds)
    age_score = _age_score(age_months) if age_months is not None else 100.0
    pattern_score = 100.0 if even_wear else _UNEVEN_WEAR_SCORE

    raw = depth_score * _DEPTH_WEIGHT + age_score * _AGE_WEIGHT + pattern_score * _PATTERN_WEIGHT
    lo, hi = bucket.score_range
    score = int(clamp(round_half_up(raw), lo, hi))
    return HealthScoreResult(score=score, risk_level=risk_level_from_score(score), bucket=bucket)


def score_from_depth(depth_32nds: float) -> int:
    """Depth-only score used while time-travelling: ``clamp(round(d/10·100), 0, 100)``."""
    return int(clamp(round_half_up(_depth_score(depth_32nds)), 0, 100))


def risk_level_from_score(score: float) -> RiskLevel:
    if score >= 70:
        return RiskLevel.SAFE
    if score >= 50:
        return RiskLevel.MONITOR
    if score > 25:
        return RiskLevel.PLAN_SOON
    return RiskLevel.REPLACE_NOW


def _depth_score(depth_32nds: float) -> float:
    return clamp(depth_32nds, 0.0, MAX_DEPTH_32NDS) / MAX_DEPTH_32NDS * 100


def _age_score(age_months: float) -> float:
    if age_months <= 24:
        return 100.0
    if age_months >= 60:
        return 40.0
    return 100.0 - (age_months - 24) / 36 * 60
