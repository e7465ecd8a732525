"""Levels of a profile that are eligible for QC."""

from __future__ import annotations

from typing import TYPE_CHECKING

from profqc.models.flags import ProfileFlag
from profqc.qc import variable_names as vn

if TYPE_CHECKING:
    from profqc.qc.data_handler import ProfileDataHandler
    from profqc.qc.options import ProfileCheckOptions


class ProfileIndices:
    """Number of levels the checks should look at.

    Computed once from the handler: the profile length, less any trailing
    levels already carrying a final-reject flag, capped at
    ``options.max_levels`` when set. Dropping only trailing levels keeps
    the remaining ones index-aligned with the handler's sequences.
    """

    def __init__(
        self,
        handler: ProfileDataHandler,
        options: ProfileCheckOptions | None = None,
    ) -> None:
        self._num_levels_to_check = self._count(handler, options)

    @staticmethod
    def _count(
        handler: ProfileDataHandler,
        options: ProfileCheckOptions | None,
    ) -> int:
        if not handler.has(vn.AIR_PRESSURE):
            return 0

        num_levels = len(handler.get(vn.AIR_PRESSURE))

        if handler.has(vn.QC_T_FLAGS):
            flags = handler.get(vn.QC_T_FLAGS, int)
            if len(flags) == num_levels:
                while num_levels > 0 and int(flags[num_levels - 1]) & ProfileFlag.FINAL_REJECT:
                    num_levels -= 1

        if options is not None and options.max_levels is not None:
            num_levels = min(num_levels, options.max_levels)

        return num_levels

    @property
    def num_levels_to_check(self) -> int:
        """Count of levels eligible for QC."""
        return self._num_levels_to_check

    def get_num_levels_to_check(self) -> int:
        return self._num_levels_to_check
