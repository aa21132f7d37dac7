"""
export/report.py
----------------
Transport serialisation of an :class:`AnalysisResult`.

Dates are written as ISO-8601 strings and parsed back into ``datetime.date``
objects, so a result that went through JSON can re-enter the time-travel
engine unchanged. Enum fields are validated on the way in.

Can be called programmatically or via ``treadsight analyze --report``.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Any, Optional

from treadsight.core.models import (
    AnalysisResult,
    Climate,
    DepthRange,
    Explanation,
    HealthScoreResult,
    ImageQuality,
    RiskLevel,
    TreadBucket,
    TreadEstimate,
    WearPrediction,
)

logger = logging.getLogger(__name__)

REPORT_VERSION = 1


# ---------------------------------------------------------------------------
# dict <-> AnalysisResult
# ---------------------------------------------------------------------------

def analysis_to_dict(result: AnalysisResult) -> dict[str, Any]:
    est = result.tread_estimate
    wp = result.wear_prediction
    hs = result.health_score
    q = result.image_quality
    return {
        "tread_estimate": {
            "bucket": est.bucket.value,
            "depth_range": {"min": est.depth_range.min, "max": est.depth_range.max},
            "confidence": est.confidence,
        },
        "wear_prediction": {
            "current_depth": wp.current_depth,
            "wear_rate_per_1000_miles": wp.wear_rate_per_1000_miles,
            "wet_traction_drop_date": wp.wet_traction_drop_date.isoformat(),
            "legal_minimum_date": wp.legal_minimum_date.isoformat(),
            "tire_dead_date": wp.tire_dead_date.isoformat(),
            "remaining_months": wp.remaining_months,
            "confidence_band": wp.confidence_band,
        },
        "health_score": {
            "score": hs.score,
            "risk_level": hs.risk_level.value,
            "bucket": hs.bucket.value,
        },
        "image_quality": {
            "blur": q.blur,
            "brightness": q.brightness,
            "contrast": q.contrast,
            "overall": q.overall,
            "acceptable": q.acceptable,
        },
        "miles_per_year": result.miles_per_year,
        "climate": result.climate.value,
    }


def analysis_from_dict(data: dict[str, Any]) -> AnalysisResult:
    """Rebuild an :class:`AnalysisResult` from :func:`analysis_to_dict` output.

    Raises:
        UnknownEnumError: For an unrecognised bucket, risk level or climate.
        DepthRangeError:  For an out-of-range depth interval.
        KeyError:         If a required field is missing.
    """
    est = data["tread_estimate"]
    wp = data["wear_prediction"]
    hs = data["health_score"]
    q = data["image_quality"]
    return AnalysisResult(
        tread_estimate=TreadEstimate(
            bucket=TreadBucket.parse(est["bucket"]),
            depth_range=DepthRange(float(est["depth_range"]["min"]), float(est["depth_range"]["max"])),
            confidence=float(est["confidence"]),
        ),
        wear_prediction=WearPrediction(
            current_depth=float(wp["current_depth"]),
            wear_rate_per_1000_miles=float(wp["wear_rate_per_1000_miles"]),
            wet_traction_drop_date=parse_iso_date(wp["wet_traction_drop_date"]),
            legal_minimum_date=parse_iso_date(wp["legal_minimum_date"]),
            tire_dead_date=parse_iso_date(wp["tire_dead_date"]),
            remaining_months=int(wp["remaining_months"]),
            confidence_band=float(wp["confidence_band"]),
        ),
        health_score=HealthScoreResult(
            score=int(hs["score"]),
            risk_level=RiskLevel.parse(hs["risk_level"]),
            bucket=TreadBucket.parse(hs["bucket"]),
        ),
        image_quality=ImageQuality(
            blur=float(q["blur"]),
            brightness=float(q["brightness"]),
            contrast=float(q["contrast"]),
            overall=float(q["overall"]),
            acceptable=bool(q["acceptable"]),
        ),
        miles_per_year=float(data.get("miles_per_year", 12000)),
        climate=Climate.parse(data.get("climate", Climate.NEUTRAL.value)),
    )


def parse_iso_date(value: str) -> dt.date:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp (``2027-01-31T00:00:00.000Z``) to a date."""
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {value!r}")
    return dt.date.fromisoformat(value.strip()[:10])


# ---------------------------------------------------------------------------
# JSON files
# ---------------------------------------------------------------------------

def write_report_json(
    result: AnalysisResult,
    path: str | Path,
    weather_mode: str = "dry",
    explanation: Optional[Explanation] = None,
) -> Path:
    """Write a JSON report for *result*; returns the written path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: dict[str, Any] = {
        "version": REPORT_VERSION,
        "generated_on": dt.date.today().isoformat(),
        "weather_mode": weather_mode,
        "analysis": analysis_to_dict(result),
    }
    if explanation is not None:
        payload["explanation"] = {
            "narrative": explanation.narrative,
            "key_insights": explanation.key_insights,
            "recommended_action": explanation.recommended_action,
            "disclaimer": explanation.disclaimer,
        }
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info("Report written: %s", path)
    return path


def read_report_json(path: str | Path) -> AnalysisResult:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Report not found: {path}")
    payload = json.loads(path.read_text(encoding="utf-8"))
    return analysis_from_dict(payload["analysis"])
