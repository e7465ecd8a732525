"""Per-level QC flag bits and shared sentinels."""

from __future__ import annotations

from enum import IntFlag

# Reserved float marking a missing value at the data-handler boundary
MISSING_VALUE_FLOAT = -3.3687953e38

# Index sentinel for "no such level"
MISSING_INDEX = -1

# Zero degrees Celsius in kelvin
T0C = 273.15


class ProfileFlag(IntFlag):
    """Bitmask for per-level QC outcomes (can be combined)."""

    NONE = 0
    FINAL_REJECT = 1 << 0
    SURFACE_LEVEL = 1 << 1
    INTERPOLATION = 1 << 2

    @classmethod
    def describe(cls, value: int) -> list[str]:
        """Names of the bits set in an integer flag value."""
        return [
            member.name
            for member in cls
            if member is not cls.NONE and value & member
        ]


def is_missing(value: float) -> bool:
    """Whether a float is NaN or the reserved missing value."""
    return value != value or value == MISSING_VALUE_FLOAT
