"""
core/exceptions.py
------------------
Custom exception hierarchy for the TreadSight core.
"""


class TreadSightError(Exception):
    """Root exception for all TreadSight-specific errors."""


# --- Images ---

class InvalidImageError(TreadSightError):
    """Raised when a pixel buffer is empty or structurally malformed."""


class IngestionError(TreadSightError):
    """Raised when a photo cannot be read or decoded."""


# --- Boundary values ---

class UnknownEnumError(TreadSightError, ValueError):
    """Raised when a weather mode, climate, bucket or similar value is not recognised."""


class DepthRangeError(TreadSightError, ValueError):
    """Raised when a depth range violates ``0 <= min <= max <= 10``."""


class InvalidUsageError(TreadSightError, ValueError):
    """Raised when usage parameters (miles per year) are out of range."""


# --- Configuration ---

class ConfigError(TreadSightError):
    """Raised when the configuration file is missing or invalid."""
