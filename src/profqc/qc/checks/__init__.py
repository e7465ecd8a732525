"""QC checks module."""

from profqc.qc.checks._base import BaseCheck
from profqc.qc.checks.interpolation import InterpolationCheck

__all__ = [
    "BaseCheck",
    "InterpolationCheck",
]
