"""
core/numeric.py
---------------
Small numeric helpers shared by the scoring, wear and simulation layers.
"""

from __future__ import annotations

import calendar
import datetime as dt
import math


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to two decimals, halves towards +inf."""
    return round_half_up(value * 100) / 100


def add_months(start: dt.date, months: float) -> dt.date:
    """Shift *start* by ``round_half_up(months)`` calendar months.

    The day of month is clamped to the length of the target month
    (Jan 31 + 1 month -> Feb 28/29).
    """
    whole = round_half_up(months)
    index = start.year * 12 + (start.month - 1) + whole
    year, month0 = divmod(index, 12)
    last_day = calendar.monthrange(year, month0 + 1)[1]
    return dt.date(year, month0 + 1, min(start.day, last_day))
