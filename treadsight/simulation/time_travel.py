"""
simulation/time_travel.py
-------------------------
TimeTravelEngine: derives depth, score, date and weather-adjusted risk for
any normalised time ``t ∈ [0, 1]`` between today and the end of the tire's
projected life.

  AnalysisResult + (t, weather, skip rotations, aggressive driving)
    → adjusted wear rate / total months
    → depth_at_time → score_from_depth → base risk
    → WeatherRiskEngine → TimeTravelState

The state is fully derived; nothing is cached between calls, so the engine
can be re-invoked on every slider change.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional

from treadsight.core.config import WearConfig
from treadsight.core.models import (
    AnalysisResult,
    DrivingStyle,
    Rotation,
    TimeTravelState,
    WeatherMode,
)
from treadsight.core.numeric import clamp, round_half_up
from treadsight.rules.health import risk_level_from_score, score_from_depth
from treadsight.rules.weather import WeatherRiskEngine
from treadsight.wear.timeline import date_at_time, depth_at_time, monthly_wear_rate

logger = logging.getLogger(__name__)


class TimeTravelEngine:
    """Computes :class:`TimeTravelState` snapshots for one analysis session."""

    def __init__(
        self,
        analysis: AnalysisResult,
        wear_config: Optional[WearConfig] = None,
        weather_engine: Optional[WeatherRiskEngine] = None,
        today: Optional[dt.date] = None,
    ) -> None:
        self._analysis = analysis
        self._wear = wear_config or WearConfig()
        self._weather = weather_engine or WeatherRiskEngine()
        self._today = today

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------

    def _usage_factor(self, skip_rotations: bool, aggressive_driving: bool) -> float:
        factor = 1.0
        if skip_rotations:
            factor *= self._wear.rotation_modifiers[Rotation.SKIP_ROTATIONS]
        if aggressive_driving:
            factor *= self._wear.driving_modifiers[DrivingStyle.AGGRESSIVE]
        return factor

    def adjusted_wear_rate(self, skip_rotations: bool = False, aggressive_driving: bool = False) -> float:
        """Stored wear rate (32nds / 1000 mi) with the toggled multipliers applied."""
        rate = self._analysis.wear_prediction.wear_rate_per_1000_miles
        return rate * self._usage_factor(skip_rotations, aggressive_driving)

    def total_months(
        self,
        weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
        skip_rotations: bool = False,
        aggressive_driving: bool = False,
    ) -> int:
        """Months spanned by ``t = 0 … 1`` for the given toggles."""
        months = self._analysis.wear_prediction.remaining_months
        if skip_rotations or aggressive_driving:
            months = round_half_up(months / self._usage_factor(skip_rotations, aggressive_driving))
        return self._weather.adjust_remaining_months(months, weather_mode)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def state_at(
        self,
        t: float,
        weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
        skip_rotations: bool = False,
        aggressive_driving: bool = False,
    ) -> TimeTravelState:
        """Return the state at *t* (clamped to [0, 1]).

        Raises:
            UnknownEnumError: For an unrecognised weather mode.
        """
        mode = WeatherMode.DRY if weather_mode is None else WeatherMode.parse(weather_mode)
        t = clamp(float(t), 0.0, 1.0)

        total = self.total_months(mode, skip_rotations, aggressive_driving)
        per_month = monthly_wear_rate(
            self.adjusted_wear_rate(skip_rotations, aggressive_driving),
            self._analysis.miles_per_year,
        )

        depth = depth_at_time(self._analysis.wear_prediction.current_depth, t, total, per_month)
        score = score_from_depth(depth)
        base_risk = risk_level_from_score(score)
        risk = self._weather.evaluate(depth, base_risk, mode).adjusted_risk_level

        return TimeTravelState(
            t=t,
            current_date=date_at_time(t, total, today=self._today),
            current_depth=depth,
            current_score=score,
            current_risk=risk,
            weather_mode=mode,
            skip_rotations=skip_rotations,
            aggressive_driving=aggressive_driving,
            total_months=total,
        )

    def sweep(
        self,
        steps: int,
        weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
        skip_rotations: bool = False,
        aggressive_driving: bool = False,
    ) -> list[TimeTravelState]:
        """States at *steps* evenly spaced values of t from 0 to 1 inclusive."""
        if steps < 2:
            return [self.state_at(0.0, weather_mode, skip_rotations, aggressive_driving)]
        states = [
            self.state_at(i / (steps - 1), weather_mode, skip_rotations, aggressive_driving)
            for i in range(steps)
        ]
        logger.debug("Swept %d states over %d months", len(states), states[-1].total_months)
        return states


def compute_time_travel_state(
    analysis: AnalysisResult,
    t: float,
    weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
    skip_rotations: bool = False,
    aggressive_driving: bool = False,
    today: Optional[dt.date] = None,
) -> TimeTravelState:
    """Pure-function form of :meth:`TimeTravelEngine.state_at` with default config."""
    engine = TimeTravelEngine(analysis, today=today)
    return engine.state_at(t, weather_mode, skip_rotations, aggressive_driving)
