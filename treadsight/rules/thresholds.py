"""
rules/thresholds.py
--------------------
Strongly-typed weather threshold objects populated from AppConfig.
"""

from __future__ import annotations

from dataclasses import dataclass

from treadsight.core.config import WeatherConfig
from treadsight.core.models import WeatherMode


@dataclass(frozen=True)
class ModeThresholds:
    multiplier: float
    warning_depth: float
    critical_depth: float


@dataclass(frozen=True)
class Thresholds:
    dry: ModeThresholds
    wet: ModeThresholds
    snow: ModeThresholds

    def for_mode(self, mode: WeatherMode) -> ModeThresholds:
        if mode is WeatherMode.WET:
            return self.wet
        if mode is WeatherMode.SNOW:
            return self.snow
        return self.dry

    @classmethod
    def from_config(cls, cfg: WeatherConfig) -> "Thresholds":
        def _mode(mode: WeatherMode) -> ModeThresholds:
            src = cfg.for_mode(mode)
            return ModeThresholds(
                multiplier=src.multiplier,
                warning_depth=src.warning_depth,
                critical_depth=src.critical_depth,
            )

        return cls(
            dry=_mode(WeatherMode.DRY),
            wet=_mode(WeatherMode.WET),
            snow=_mode(WeatherMode.SNOW),
        )
