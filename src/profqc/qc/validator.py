"""Comparison of published check state against reference values."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from profqc.qc.variable_names import reference_name
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    from profqc.qc.data_handler import ProfileDataHandler
    from profqc.qc.options import ProfileCheckOptions

logger = get_logger("qc.validator")


class ProfileCheckValidator:
    """Compare values a check published against stored reference values.

    References live in the same data handler under ``reference_<name>``.
    Names without a reference are skipped. Integer sequences must match
    exactly; float sequences within ``options.comparison_tol``.
    """

    def __init__(self, options: ProfileCheckOptions) -> None:
        self.tolerance = options.comparison_tol
        self.n_mismatches = 0

    def validate(
        self,
        handler: ProfileDataHandler,
        check_name: str,
        names: list[str],
    ) -> int:
        """Compare published sequences with their references.

        Args:
            handler: Handler holding both published and reference values.
            check_name: Name of the check, for log messages.
            names: Published sequence names to compare.

        Returns:
            Number of mismatches found in this call.
        """
        mismatches = 0
        for name in names:
            ref = reference_name(name)
            if not handler.has(name) or not handler.has(ref):
                continue

            published = handler.get(name)
            reference = handler.get(ref)

            if len(published) != len(reference):
                logger.warning(
                    f"{check_name}: {name} has length {len(published)}, "
                    f"reference has {len(reference)}"
                )
                mismatches += 1
                continue

            tol = 0.0 if handler.is_integer(name) else self.tolerance
            bad = np.flatnonzero(np.abs(published - reference) > tol)
            for jlev in bad:
                logger.warning(
                    f"{check_name}: mismatch in {name} at level {jlev}: "
                    f"{published[jlev]} vs reference {reference[jlev]}"
                )
            mismatches += len(bad)

        self.n_mismatches += mismatches
        return mismatches
