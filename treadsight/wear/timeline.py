"""
wear/timeline.py
----------------
Linear tread-wear projector.

  depth range + usage profile
    → adjusted wear rate (32nds / 1000 mi)
    → monthly depth loss
    → months (and dates) until the wet-traction depth and the legal minimum

The tire is considered "dead" at the legal minimum, not at zero tread, so
``tire_dead_date`` always equals ``legal_minimum_date``.

A non-positive monthly loss (e.g. zero miles per year) cannot be
extrapolated; in that case a 10-year sentinel is returned instead of an
error.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from treadsight.core.config import WearConfig
from treadsight.core.models import (
    Climate,
    DrivingStyle,
    Rotation,
    WearPrediction,
    WearPredictionInput,
)
from treadsight.core.numeric import add_months, clamp, round2, round_half_up

logger = logging.getLogger(__name__)

SENTINEL_MONTHS = 120
SENTINEL_CONFIDENCE_BAND = 0.20

_BAND_BASE = 0.175
_BAND_LIMITS = (0.15, 0.20)


class WearModel:
    """Projects a :class:`WearPrediction` from a depth range and usage profile."""

    def __init__(self, config: Optional[WearConfig] = None) -> None:
        self._cfg = config or WearConfig()

    @property
    def config(self) -> WearConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def adjusted_rate(
        self,
        climate: Climate | str = Climate.NEUTRAL,
        rotation: Rotation | str = Rotation.NORMAL,
        driving_style: DrivingStyle | str = DrivingStyle.NORMAL,
    ) -> float:
        """Wear rate in 32nds per 1000 miles after all usage modifiers.

        Raises:
            UnknownEnumError: For an unrecognised climate, rotation or driving style.
        """
        cfg = self._cfg
        return (
            cfg.base_rate_per_1000_miles
            * cfg.climate_modifiers[Climate.parse(climate)]
            * cfg.rotation_modifiers[Rotation.parse(rotation)]
            * cfg.driving_modifiers[DrivingStyle.parse(driving_style)]
        )

    def predict(self, inp: WearPredictionInput, today: Optional[dt.date] = None) -> WearPrediction:
        """Project the wear timeline for *inp*, dated from *today* (default: current date)."""
        today = today or dt.date.today()
        current_depth = inp.depth_range.midpoint
        rate = self.adjusted_rate(inp.climate, inp.rotation, inp.driving_style)
        loss_per_month = monthly_wear_rate(rate, inp.miles_per_year)

        if loss_per_month <= 0:
            logger.info(
                "Wear rate undefined (%.4f 32nds/month at %s mi/yr), assuming %d months of life",
                loss_per_month, inp.miles_per_year, SENTINEL_MONTHS,
            )
            far_future = add_months(today, SENTINEL_MONTHS)
            return WearPrediction(
                current_depth=current_depth,
                wear_rate_per_1000_miles=rate,
                wet_traction_drop_date=far_future,
                legal_minimum_date=far_future,
                tire_dead_date=far_future,
                remaining_months=SENTINEL_MONTHS,
                confidence_band=SENTINEL_CONFIDENCE_BAND,
            )

        cfg = self._cfg
        months_to_wet = max(0.0, (current_depth - cfg.wet_traction_depth) / loss_per_month)
        months_to_legal = max(0.0, (current_depth - cfg.legal_minimum_depth) / loss_per_month)
        months_to_dead = months_to_legal

        prediction = WearPrediction(
            current_depth=current_depth,
            wear_rate_per_1000_miles=rate,
            wet_traction_drop_date=add_months(today, months_to_wet),
            legal_minimum_date=add_months(today, months_to_legal),
            tire_dead_date=add_months(today, months_to_dead),
            remaining_months=round_half_up(months_to_dead),
            confidence_band=confidence_band(current_depth, inp.miles_per_year),
        )
        logger.debug(
            "Wear: depth=%.2f rate=%.4f loss/month=%.4f wet=%.1fmo legal=%.1fmo band=%.3f",
            current_depth, rate, loss_per_month, months_to_wet, months_to_legal,
            prediction.confidence_band,
        )
        return prediction


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def monthly_wear_rate(wear_rate_per_1000_miles: float, miles_per_year: float) -> float:
    """32nds lost per month."""
    return (miles_per_year / 12 / 1000) * wear_rate_per_1000_miles


def depth_at_time(
    current_depth: float,
    t: float,
    total_months: float,
    wear_rate_per_month: float,
) -> float:
    """Depth after ``t * total_months`` months of linear wear; never negative."""
    depth = current_depth - t * total_months * wear_rate_per_month
    return max(0.0, round2(depth))


def date_at_time(t: float, total_months: float, today: Optional[dt.date] = None) -> dt.date:
    return add_months(today or dt.date.today(), t * total_months)


def confidence_band(depth: float, miles_per_year: float) -> float:
    """Relative ± band: wider at low tread and at unusual mileage."""
    band = _BAND_BASE
    if depth < 3:
        band += 0.025
    if miles_per_year > 18000:
        band += 0.015
    if miles_per_year < 6000:
        band += 0.01
    return clamp(band, *_BAND_LIMITS)


def predict_wear_timeline(
    inp: WearPredictionInput,
    config: Optional[WearConfig] = None,
    today: Optional[dt.date] = None,
) -> WearPrediction:
    """Convenience wrapper around :meth:`WearModel.predict`."""
    return WearModel(config).predict(inp, today=today)
