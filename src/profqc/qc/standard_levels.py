"""Standard and significant level bookkeeping shared by profile checks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from profqc.models.flags import MISSING_INDEX, ProfileFlag, is_missing
from profqc.qc import variable_names as vn
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    from numpy.typing import NDArray
    from profqc.qc.options import ProfileCheckOptions

logger = get_logger("qc.standard_levels")

UNUSABLE_FLAGS = ProfileFlag.SURFACE_LEVEL | ProfileFlag.FINAL_REJECT


def round_hpa(pressure: float) -> int:
    """Pressure in Pa rounded half away from zero to whole hPa."""
    hpa = pressure * 0.01
    return int(math.floor(hpa + 0.5)) if hpa >= 0 else -int(math.floor(-hpa + 0.5))


@dataclass
class StandardLevel:
    """A profile level sitting on a standard pressure.

    Attributes:
        level: Index of the level in the profile.
        table_index: Position of the matched pressure in the standard level table.
        pressure_hpa: Level pressure rounded to whole hPa.
        sig_below: Nearest significant level at lower index (higher pressure).
        sig_above: Nearest significant level at higher index (lower pressure).
    """

    level: int
    table_index: int
    pressure_hpa: int
    sig_below: int | None = None
    sig_above: int | None = None

    @property
    def is_bracketed(self) -> bool:
        """Whether significant levels exist on both sides."""
        return self.sig_below is not None and self.sig_above is not None


class StandardLevelsMixin:
    """Locates standard levels and their significant-level brackets.

    Mixed into checks that need them; the host class must provide an
    ``options`` attribute holding :class:`ProfileCheckOptions`. Results
    are per-run working state, reset by every call to
    :meth:`calc_std_levels`.
    """

    options: ProfileCheckOptions

    def reset_std_levels(self, num_levels: int = 0) -> None:
        """Reset working state to the empty, sentinel-filled arrays."""
        self.num_levels_std = num_levels
        self.std_levels: list[StandardLevel] = []
        self.num_sig = 0
        self.log_p: NDArray[np.float64] = np.zeros(num_levels, dtype=np.float64)

    @property
    def num_std(self) -> int:
        """Number of standard levels found."""
        return len(self.std_levels)

    def calc_std_levels(
        self,
        num_levels_to_check: int,
        pressures: NDArray[np.floating],
        values: NDArray[np.floating],
        flags: NDArray[np.integer],
    ) -> list[StandardLevel]:
        """Find standard levels, their brackets and the log-pressure series.

        A level takes part when its pressure is positive, its value is
        present and it is neither a surface level nor rejected. Among
        those, a level whose pressure rounds to a standard pressure is a
        standard level; all the others are significant levels. When two
        levels round to the same standard pressure the first in index
        order is the standard level and later ones count as significant.

        Args:
            num_levels_to_check: Number of leading levels to examine.
            pressures: Pressure per level (Pa).
            values: Reference values; missing ones disqualify a level.
            flags: QC flag bitmask per level.

        Returns:
            The standard levels found, in index order.
        """
        self.reset_std_levels(num_levels_to_check)

        table = [round_hpa(p * 100.0) for p in self.options.standard_levels]
        claimed: set[int] = set()
        is_sig = np.zeros(num_levels_to_check, dtype=bool)

        for jlev in range(num_levels_to_check):
            pressure = float(pressures[jlev])
            if pressure > 0:
                self.log_p[jlev] = math.log(pressure)

            if not self._is_usable(pressure, float(values[jlev]), int(flags[jlev])):
                continue

            rounded = round_hpa(pressure)
            table_index = None
            for i, std_pressure in enumerate(table):
                if rounded == std_pressure and i not in claimed:
                    table_index = i
                    break

            if table_index is None:
                is_sig[jlev] = True
                self.num_sig += 1
            else:
                claimed.add(table_index)
                self.std_levels.append(StandardLevel(jlev, table_index, rounded))

        for std in self.std_levels:
            std.sig_below = _nearest(is_sig, std.level, -1)
            std.sig_above = _nearest(is_sig, std.level, 1)

        logger.debug(
            f"Found {self.num_std} standard and {self.num_sig} significant levels "
            f"in {num_levels_to_check} levels"
        )
        return self.std_levels

    @staticmethod
    def _is_usable(pressure: float, value: float, flag: int) -> bool:
        if pressure <= 0 or is_missing(value) or not math.isfinite(value):
            return False
        return not flag & UNUSABLE_FLAGS

    def std_level_arrays(self) -> dict[str, NDArray[np.int64]]:
        """Working state as sentinel-filled arrays, one slot per level.

        ``StdLev``, ``SigAbove`` and ``SigBelow`` hold one entry per
        standard level, in discovery order, followed by -1 padding.
        ``IndStd`` maps each level back to its slot in ``StdLev``.
        """
        n = self.num_levels_std
        std_lev = np.full(n, MISSING_INDEX, dtype=np.int64)
        sig_above = np.full(n, MISSING_INDEX, dtype=np.int64)
        sig_below = np.full(n, MISSING_INDEX, dtype=np.int64)
        ind_std = np.full(n, MISSING_INDEX, dtype=np.int64)

        for slot, std in enumerate(self.std_levels):
            std_lev[slot] = std.level
            sig_above[slot] = _or_missing(std.sig_above)
            sig_below[slot] = _or_missing(std.sig_below)
            ind_std[std.level] = slot

        return {
            vn.STD_LEV: std_lev,
            vn.SIG_ABOVE: sig_above,
            vn.SIG_BELOW: sig_below,
            vn.IND_STD: ind_std,
        }


def _nearest(mask: NDArray[np.bool_], start: int, step: int) -> int | None:
    """First index after ``start`` in direction ``step`` where ``mask`` is set."""
    jlev = start + step
    while 0 <= jlev < len(mask):
        if mask[jlev]:
            return jlev
        jlev += step
    return None


def _or_missing(index: int | None) -> int:
    return MISSING_INDEX if index is None else index
