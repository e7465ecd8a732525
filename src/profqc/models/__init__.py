"""Data models for profqc."""

from profqc.models.flags import ProfileFlag, MISSING_VALUE_FLOAT, MISSING_INDEX
from profqc.models.report import LevelFlag, ProfileReport

__all__ = [
    "ProfileFlag",
    "MISSING_VALUE_FLOAT",
    "MISSING_INDEX",
    "LevelFlag",
    "ProfileReport",
]
