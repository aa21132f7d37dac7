"""
wear/climate.py
---------------
Coarse US climate lookup from the 3-digit ZIP prefix.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from treadsight.core.exceptions import UnknownEnumError
from treadsight.core.models import Climate

logger = logging.getLogger(__name__)

_ZIP_RE = re.compile(r"^\d{5}$")

# (first prefix, last prefix, climate), inclusive
_PREFIX_RANGES: tuple[tuple[int, int, Climate], ...] = (
    (0, 199, Climate.COLD),        # New England, NY area
    (200, 299, Climate.MODERATE),  # Mid-Atlantic
    (300, 399, Climate.HOT),       # Southeast
    (400, 499, Climate.MODERATE),  # Midwest
    (500, 599, Climate.COLD),      # Upper Midwest
    (600, 699, Climate.MODERATE),  # Central
    (700, 799, Climate.HOT),       # South / Texas
    (800, 899, Climate.MODERATE),  # Mountain
    (900, 999, Climate.HOT),       # West Coast / Southwest
)


def zip_to_climate(zip_code: Optional[str]) -> Climate:
    """Map a 5-digit US ZIP code to a :class:`Climate`.

    A missing (``None`` or blank) ZIP maps to ``Climate.NEUTRAL``.

    Raises:
        UnknownEnumError: If *zip_code* is present but not five digits.
    """
    if zip_code is None or not zip_code.strip():
        return Climate.NEUTRAL
    zip_code = zip_code.strip()
    if not _ZIP_RE.match(zip_code):
        raise UnknownEnumError(f"ZIP code must be 5 digits, got {zip_code!r}")

    prefix = int(zip_code[:3])
    for first, last, climate in _PREFIX_RANGES:
        if first <= prefix <= last:
            logger.debug("ZIP %s -> prefix %03d -> %s", zip_code, prefix, climate.value)
            return climate
    return Climate.NEUTRAL
