"""
rules/weather.py
----------------
WeatherRiskEngine: adjusts a base :class:`RiskLevel` for wet or snowy
roads, given the current tread depth.

Branches (wet / snow only; dry is a pass-through):
  * depth <= critical     → forced to Replace Now
  * depth <= warning      → escalated two steps
  * depth <= warning + 1  → escalated one step
  * otherwise             → unchanged

Escalation never lowers the risk and saturates at Replace Now. The
per-mode multiplier is also used to deflate the remaining-life estimate.
"""

from __future__ import annotations

import logging
from typing import Optional

from treadsight.core.config import WeatherConfig
from treadsight.core.models import RiskLevel, WeatherMode, WeatherRiskResult
from treadsight.core.numeric import round_half_up
from treadsight.rules.thresholds import Thresholds

logger = logging.getLogger(__name__)

# Fallback multiplier when no weather mode is supplied at all
DEFAULT_MULTIPLIER = 1.0

_DRY_DESCRIPTION = "Standard dry conditions, normal risk assessment."

_DESCRIPTIONS: dict[WeatherMode, dict[str, str]] = {
    WeatherMode.WET: {
        "critical": "Dangerously low tread for wet conditions. Hydroplaning risk is high.",
        "warning": "Reduced wet traction. Stopping distances increase significantly.",
        "watch": "Wet performance starting to decline. Monitor closely.",
        "ok": "Good tread depth for wet conditions.",
    },
    WeatherMode.SNOW: {
        "critical": "Critically insufficient tread for snow. Loss of control likely on ice or packed snow.",
        "warning": "Snow traction severely compromised. Consider winter tires or replacement.",
        "watch": "Approaching snow safety limits. Plan for replacement soon.",
        "ok": "Adequate tread for light snow. Deep snow may require dedicated winter tires.",
    },
}


class WeatherRiskEngine:
    """Converts (depth, base risk, weather mode) into a :class:`WeatherRiskResult`."""

    def __init__(self, thresholds: Optional[Thresholds] = None) -> None:
        self._t = thresholds or Thresholds.from_config(WeatherConfig())

    def evaluate(
        self,
        depth_32nds: float,
        base_risk: RiskLevel | str,
        weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
    ) -> WeatherRiskResult:
        """Return the weather-adjusted risk for *depth_32nds*.

        A ``None`` weather mode is treated as dry.

        Raises:
            UnknownEnumError: For an unrecognised risk level or weather mode.
        """
        base = RiskLevel.parse(base_risk)
        mode = WeatherMode.DRY if weather_mode is None else WeatherMode.parse(weather_mode)
        limits = self._t.for_mode(mode)

        if mode is WeatherMode.DRY:
            return WeatherRiskResult(base, limits.multiplier, _DRY_DESCRIPTION)

        texts = _DESCRIPTIONS[mode]
        if depth_32nds <= limits.critical_depth:
            adjusted, branch = RiskLevel.REPLACE_NOW, "critical"
        elif depth_32nds <= limits.warning_depth:
            adjusted, branch = base.escalate(2), "warning"
        elif depth_32nds <= limits.warning_depth + 1:
            adjusted, branch = base.escalate(1), "watch"
        else:
            adjusted, branch = base, "ok"

        if adjusted is not base:
            logger.debug(
                "Weather %s at %.2f/32: %s -> %s (%s)",
                mode.value, depth_32nds, base.value, adjusted.value, branch,
            )
        return WeatherRiskResult(adjusted, limits.multiplier, texts[branch])

    def multiplier(self, weather_mode: Optional[WeatherMode | str]) -> float:
        if weather_mode is None:
            return DEFAULT_MULTIPLIER
        return self._t.for_mode(WeatherMode.parse(weather_mode)).multiplier

    def adjust_remaining_months(
        self, base_months: float, weather_mode: Optional[WeatherMode | str]
    ) -> int:
        """Deflate *base_months* by the weather multiplier; rounded, never negative."""
        return max(0, round_half_up(base_months / self.multiplier(weather_mode)))


_default_engine = WeatherRiskEngine()


def calculate_weather_risk(
    depth_32nds: float,
    base_risk: RiskLevel | str,
    weather_mode: Optional[WeatherMode | str] = WeatherMode.DRY,
) -> WeatherRiskResult:
    """Module-level shortcut using the default thresholds."""
    return _default_engine.evaluate(depth_32nds, base_risk, weather_mode)


def adjust_remaining_months(base_months: float, weather_mode: Optional[WeatherMode | str]) -> int:
    return _default_engine.adjust_remaining_months(base_months, weather_mode)
