"""Base class for profile QC checks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from profqc.models.flags import MISSING_VALUE_FLOAT

if TYPE_CHECKING:
    from numpy.typing import NDArray
    from profqc.qc.data_handler import ProfileDataHandler
    from profqc.qc.options import ProfileCheckOptions
    from profqc.qc.profile_indices import ProfileIndices
    from profqc.qc.validator import ProfileCheckValidator


class BaseCheck(ABC):
    """Abstract base class for all profile checks.

    A check is built for one profile and run once. It reads and writes
    per-level sequences through the data handler and keeps its
    intermediate results as attributes until :meth:`fill_validator`
    publishes them.
    """

    def __init__(
        self,
        options: ProfileCheckOptions,
        profile_indices: ProfileIndices,
        handler: ProfileDataHandler,
        validator: ProfileCheckValidator | None = None,
    ) -> None:
        """Initialize check.

        Args:
            options: Thresholds shared by all checks of the run.
            profile_indices: Levels eligible for QC.
            handler: Data handler of the profile being checked.
            validator: Optional collaborator comparing published state
                against reference values.
        """
        self.options = options
        self.profile_indices = profile_indices
        self.handler = handler
        self.validator = validator

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key of this check."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of the check."""
        ...

    @abstractmethod
    def run_check(self) -> None:
        """Execute the check, updating flags and counters in the handler."""
        ...

    @abstractmethod
    def fill_validator(self) -> None:
        """Publish intermediate working state into the handler."""
        ...

    @property
    def validation_names(self) -> list[str]:
        """Handler names published by :meth:`fill_validator`."""
        return []

    def validate(self) -> int:
        """Publish working state and compare it against reference values.

        Returns:
            Number of mismatches found (0 without a validator).
        """
        if self.validator is None:
            return 0
        self.fill_validator()
        return self.validator.validate(self.handler, self.name, self.validation_names)

    @staticmethod
    def any_empty(*sequences: NDArray) -> bool:
        """Whether any of the sequences has no elements."""
        return any(len(s) == 0 for s in sequences)

    @staticmethod
    def all_same_size(*sequences: NDArray) -> bool:
        """Whether all sequences share one length."""
        return len({len(s) for s in sequences}) <= 1

    @staticmethod
    def correct_values(
        values: NDArray[np.floating],
        correction: NDArray[np.floating],
    ) -> NDArray[np.float64]:
        """Add a correction term to observed values.

        Missing values stay missing; a missing correction leaves the
        value as observed.
        """
        values = np.asarray(values, dtype=np.float64)
        correction = np.asarray(correction, dtype=np.float64)
        value_missing = np.isnan(values) | (values == MISSING_VALUE_FLOAT)
        correction_missing = np.isnan(correction) | (correction == MISSING_VALUE_FLOAT)
        corrected = np.where(correction_missing, values, values + correction)
        return np.where(value_missing, MISSING_VALUE_FLOAT, corrected)
