"""tests/unit/test_climate.py — ZIP prefix to climate lookup tests."""

import pytest

from treadsight.core.exceptions import UnknownEnumError
from treadsight.core.models import Climate
from treadsight.wear.climate import zip_to_climate


@pytest.mark.parametrize(
    "zip_code, climate",
    [
        ("02139", Climate.COLD),
        ("19104", Climate.COLD),
        ("20001", Climate.MODERATE),
        ("30301", Climate.HOT),
        ("46204", Climate.MODERATE),
        ("55401", Climate.COLD),
        ("60601", Climate.MODERATE),
        ("77002", Climate.HOT),
        ("80202", Climate.MODERATE),
        ("94103", Climate.HOT),
    ],
)
def test_prefix_ranges(zip_code, climate):
    assert zip_to_climate(zip_code) is climate


def test_missing_zip_is_neutral():
    assert zip_to_climate(None) is Climate.NEUTRAL
    assert zip_to_climate("  ") is Climate.NEUTRAL


def test_whitespace_is_stripped():
    assert zip_to_climate(" 94103 ") is Climate.HOT


@pytest.mark.parametrize("bad", ["1234", "123456", "9410a", "ABCDE", "94103-1234"])
def test_malformed_zip_raises(bad):
    with pytest.raises(UnknownEnumError, match="5 digits"):
        zip_to_climate(bad)
