"""tests/unit/test_wear.py — Wear timeline projector tests."""

import datetime as dt

import pytest

from treadsight.core.config import WearConfig
from treadsight.core.exceptions import UnknownEnumError
from treadsight.core.models import Climate, DepthRange, DrivingStyle, Rotation, WearPredictionInput
from treadsight.wear.timeline import (
    SENTINEL_MONTHS,
    WearModel,
    confidence_band,
    date_at_time,
    depth_at_time,
    monthly_wear_rate,
    predict_wear_timeline,
)

TODAY = dt.date(2026, 1, 15)


def make_input(lo=8.0, hi=10.0, miles=12000, **kw) -> WearPredictionInput:
    return WearPredictionInput(depth_range=DepthRange(lo, hi), miles_per_year=miles, **kw)


class TestWearModel:
    def setup_method(self):
        self.model = WearModel(WearConfig())

    def test_new_tire_at_typical_mileage(self):
        p = self.model.predict(make_input(), today=TODAY)
        assert p.current_depth == 9.0
        assert p.wear_rate_per_1000_miles == pytest.approx(0.14)
        assert p.remaining_months == 50
        assert p.remaining_months > 24

    def test_dates_from_fixed_today(self):
        p = self.model.predict(make_input(), today=TODAY)
        # (9 - 4) / 0.14 = 35.7 -> 36 months, (9 - 2) / 0.14 = 50 months
        assert p.wet_traction_drop_date == dt.date(2029, 1, 15)
        assert p.legal_minimum_date == dt.date(2030, 3, 15)

    def test_dead_date_is_legal_minimum(self):
        p = self.model.predict(make_input(), today=TODAY)
        assert p.wet_traction_drop_date <= p.legal_minimum_date == p.tire_dead_date

    @pytest.mark.parametrize("lo, hi", [(0, 2), (2, 4), (4, 6), (6, 8), (8, 10)])
    def test_date_ordering_for_every_bucket(self, lo, hi):
        p = self.model.predict(make_input(lo, hi, miles=9000), today=TODAY)
        assert p.wet_traction_drop_date <= p.legal_minimum_date == p.tire_dead_date

    def test_already_below_legal_minimum(self):
        p = self.model.predict(make_input(0, 2), today=TODAY)
        assert p.remaining_months == 0
        assert p.legal_minimum_date == TODAY

    def test_more_miles_means_fewer_months(self):
        low = self.model.predict(make_input(miles=12000), today=TODAY)
        high = self.model.predict(make_input(miles=15000), today=TODAY)
        assert high.remaining_months < low.remaining_months

    def test_aggressive_and_skipped_rotations_shorten_life(self):
        base = self.model.predict(make_input(), today=TODAY).remaining_months
        skip = self.model.predict(make_input(rotation=Rotation.SKIP_ROTATIONS), today=TODAY).remaining_months
        aggr = self.model.predict(make_input(driving_style=DrivingStyle.AGGRESSIVE), today=TODAY).remaining_months
        assert skip < base
        assert aggr < base

    def test_climate_modifier(self):
        assert self.model.adjusted_rate(Climate.HOT) == pytest.approx(0.14 * 1.15)
        assert self.model.adjusted_rate("cold") == pytest.approx(0.14 * 1.05)

    def test_combined_modifiers(self):
        rate = self.model.adjusted_rate("moderate", "skip-rotations", "aggressive")
        assert rate == pytest.approx(0.14 * 1.15 * 1.10)

    def test_unknown_climate_raises(self):
        with pytest.raises(UnknownEnumError):
            self.model.adjusted_rate("arctic")

    def test_zero_miles_returns_sentinel(self):
        p = self.model.predict(make_input(miles=0), today=TODAY)
        assert p.remaining_months == SENTINEL_MONTHS
        assert p.confidence_band == pytest.approx(0.20)
        assert p.legal_minimum_date == dt.date(2036, 1, 15)
        assert p.tire_dead_date == p.wet_traction_drop_date == p.legal_minimum_date

    def test_module_wrapper(self):
        assert predict_wear_timeline(make_input(), today=TODAY) == self.model.predict(make_input(), today=TODAY)


class TestConfidenceBand:
    def test_typical(self):
        assert confidence_band(9.0, 12000) == pytest.approx(0.175)

    def test_low_mileage_widens(self):
        assert confidence_band(9.0, 5000) == pytest.approx(0.185)

    def test_clamped_at_upper_limit(self):
        assert confidence_band(1.0, 20000) == pytest.approx(0.20)

    def test_always_in_range(self):
        for depth in (0.5, 5.0, 9.0):
            for miles in (0, 3000, 12000, 30000):
                assert 0.15 <= confidence_band(depth, miles) <= 0.20


class TestHelpers:
    def test_monthly_wear_rate(self):
        assert monthly_wear_rate(0.14, 12000) == pytest.approx(0.14)

    def test_depth_at_time_endpoints(self):
        assert depth_at_time(9.0, 0.0, 50, 0.14) == 9.0
        assert depth_at_time(9.0, 1.0, 50, 0.14) == pytest.approx(2.0)

    def test_depth_at_time_never_negative(self):
        for i in range(11):
            assert depth_at_time(1.0, i / 10, 100, 0.5) >= 0.0

    def test_depth_at_time_rounds_to_two_decimals(self):
        assert depth_at_time(9.0, 0.333, 50, 0.14) == pytest.approx(6.67)

    def test_date_at_time(self):
        assert date_at_time(0.5, 24, today=TODAY) == dt.date(2027, 1, 15)
