"""tests/unit/test_numeric.py — Rounding and calendar helper tests."""

import datetime as dt

import pytest

from treadsight.core.numeric import add_months, clamp, round2, round_half_up


class TestRounding:
    @pytest.mark.parametrize("value, expected", [(2.5, 3), (2.49, 2), (-2.5, -2), (0.0, 0), (49.5, 50)])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_round2(self):
        assert round2(3.14159) == pytest.approx(3.14)
        assert round2(2.0) == 2.0

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2


class TestAddMonths:
    def test_simple(self):
        assert add_months(dt.date(2026, 3, 10), 2) == dt.date(2026, 5, 10)

    def test_year_rollover(self):
        assert add_months(dt.date(2026, 11, 15), 2) == dt.date(2027, 1, 15)

    def test_day_clamped_to_month_end(self):
        assert add_months(dt.date(2026, 1, 31), 1) == dt.date(2026, 2, 28)

    def test_leap_year(self):
        assert add_months(dt.date(2024, 1, 31), 1) == dt.date(2024, 2, 29)

    def test_fractional_months_round_half_up(self):
        assert add_months(dt.date(2026, 1, 15), 0.5) == dt.date(2026, 2, 15)
        assert add_months(dt.date(2026, 1, 15), 0.4) == dt.date(2026, 1, 15)

    def test_zero(self):
        d = dt.date(2026, 6, 30)
        assert add_months(d, 0) == d
