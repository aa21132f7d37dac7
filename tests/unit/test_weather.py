"""tests/unit/test_weather.py — WeatherRiskEngine escalation tests."""

import pytest

from treadsight.core.config import WeatherConfig, WeatherThreshold
from treadsight.core.exceptions import UnknownEnumError
from treadsight.core.models import RiskLevel, WeatherMode
from treadsight.rules.thresholds import Thresholds
from treadsight.rules.weather import WeatherRiskEngine, adjust_remaining_months, calculate_weather_risk


def make_thresholds() -> Thresholds:
    return Thresholds.from_config(WeatherConfig())


class TestDryConditions:
    def setup_method(self):
        self.engine = WeatherRiskEngine(make_thresholds())

    def test_dry_passes_through(self):
        r = self.engine.evaluate(6.0, "Safe", "dry")
        assert r.adjusted_risk_level is RiskLevel.SAFE
        assert r.risk_modifier == 1.0
        assert "dry" in r.description

    def test_dry_never_escalates_even_at_low_depth(self):
        r = self.engine.evaluate(1.0, RiskLevel.MONITOR, WeatherMode.DRY)
        assert r.adjusted_risk_level is RiskLevel.MONITOR

    def test_missing_mode_treated_as_dry(self):
        r = self.engine.evaluate(3.0, RiskLevel.SAFE, None)
        assert r.adjusted_risk_level is RiskLevel.SAFE
        assert r.risk_modifier == 1.0


class TestWetConditions:
    def setup_method(self):
        self.engine = WeatherRiskEngine(make_thresholds())

    def test_critical_depth_forces_replace_now(self):
        r = self.engine.evaluate(2.0, "Plan Soon", "wet")
        assert r.adjusted_risk_level is RiskLevel.REPLACE_NOW
        assert "Hydroplaning" in r.description

    def test_exactly_at_critical_boundary(self):
        assert self.engine.evaluate(3.0, "Safe", "wet").adjusted_risk_level is RiskLevel.REPLACE_NOW

    def test_warning_escalates_two_steps(self):
        r = self.engine.evaluate(4.5, RiskLevel.SAFE, WeatherMode.WET)
        assert r.adjusted_risk_level is RiskLevel.PLAN_SOON
        assert r.risk_modifier == pytest.approx(1.35)

    def test_watch_band_escalates_one_step(self):
        r = self.engine.evaluate(5.5, RiskLevel.SAFE, WeatherMode.WET)
        assert r.adjusted_risk_level is RiskLevel.MONITOR
        assert "Monitor closely" in r.description

    def test_deep_tread_unchanged(self):
        r = self.engine.evaluate(7.0, RiskLevel.SAFE, WeatherMode.WET)
        assert r.adjusted_risk_level is RiskLevel.SAFE
        assert r.description == "Good tread depth for wet conditions."


class TestSnowConditions:
    def setup_method(self):
        self.engine = WeatherRiskEngine(make_thresholds())

    def test_critical(self):
        assert self.engine.evaluate(4.0, "Monitor", "snow").adjusted_risk_level is RiskLevel.REPLACE_NOW

    def test_watch(self):
        r = self.engine.evaluate(6.5, "Safe", "snow")
        assert r.adjusted_risk_level is RiskLevel.MONITOR
        assert r.risk_modifier == pytest.approx(1.70)

    def test_warning_saturates(self):
        r = self.engine.evaluate(5.0, "Plan Soon", "snow")
        assert r.adjusted_risk_level is RiskLevel.REPLACE_NOW


class TestEscalationProperties:
    def setup_method(self):
        self.engine = WeatherRiskEngine(make_thresholds())

    def test_never_lowers_and_bounded(self):
        for mode in WeatherMode:
            for base in RiskLevel:
                for tenths in range(0, 101, 5):
                    r = self.engine.evaluate(tenths / 10, base, mode)
                    assert base.rank <= r.adjusted_risk_level.rank <= RiskLevel.REPLACE_NOW.rank

    def test_unknown_mode_raises(self):
        with pytest.raises(UnknownEnumError):
            self.engine.evaluate(5.0, "Safe", "hail")

    def test_unknown_risk_raises(self):
        with pytest.raises(UnknownEnumError):
            self.engine.evaluate(5.0, "Fine", "wet")

    def test_custom_thresholds(self):
        cfg = WeatherConfig(wet=WeatherThreshold(multiplier=1.2, warning_depth=7.0, critical_depth=5.0))
        engine = WeatherRiskEngine(Thresholds.from_config(cfg))
        assert engine.evaluate(5.0, "Safe", "wet").adjusted_risk_level is RiskLevel.REPLACE_NOW
        assert engine.multiplier("wet") == pytest.approx(1.2)


class TestRemainingMonths:
    def test_wet_and_snow_shorten(self):
        assert adjust_remaining_months(50, "dry") == 50
        assert adjust_remaining_months(50, "wet") == 37
        assert adjust_remaining_months(50, "snow") == 29

    def test_missing_mode_uses_default_multiplier(self):
        assert adjust_remaining_months(50, None) == 50

    def test_invalid_mode_raises(self):
        with pytest.raises(UnknownEnumError):
            adjust_remaining_months(50, "fog")


class TestModuleShortcut:
    def test_wet_low_depth_is_replace_now(self):
        assert calculate_weather_risk(2, "Plan Soon", "wet").adjusted_risk_level is RiskLevel.REPLACE_NOW

    def test_dry_safe(self):
        r = calculate_weather_risk(6, "Safe", "dry")
        assert r.adjusted_risk_level is RiskLevel.SAFE
        assert r.risk_modifier == 1.0
