"""Interpolation check - standard levels against their significant-level brackets."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from profqc.models.flags import MISSING_INDEX, MISSING_VALUE_FLOAT, T0C, ProfileFlag
from profqc.qc import variable_names as vn
from profqc.qc.checks._base import BaseCheck
from profqc.qc.standard_levels import StandardLevelsMixin
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    from profqc.qc.data_handler import ProfileDataHandler
    from profqc.qc.options import ProfileCheckOptions
    from profqc.qc.profile_indices import ProfileIndices
    from profqc.qc.validator import ProfileCheckValidator

logger = get_logger("qc.checks.interpolation")


class InterpolationCheck(BaseCheck, StandardLevelsMixin):
    """Compare each standard level with a log-pressure interpolation of its brackets.

    The temperature at a standard level is interpolated linearly in
    ln(p) between the nearest significant levels below and above it.
    When the bias-corrected observation differs from that value by more
    than the tolerance, all three levels get the interpolation flag.

    Counters are incremented, never reset, so the check must be run
    exactly once per profile: a second :meth:`run_check` on the same
    handler counts every failure again.
    """

    def __init__(
        self,
        options: ProfileCheckOptions,
        profile_indices: ProfileIndices,
        handler: ProfileDataHandler,
        validator: ProfileCheckValidator | None = None,
    ) -> None:
        super().__init__(options, profile_indices, handler, validator)
        num_levels = profile_indices.get_num_levels_to_check()
        self.reset_std_levels(num_levels)
        self.lev_errors = np.full(num_levels, MISSING_INDEX, dtype=np.int64)
        self.t_interp = np.full(num_levels, MISSING_VALUE_FLOAT, dtype=np.float64)

    @property
    def name(self) -> str:
        return "Interpolation"

    @property
    def description(self) -> str:
        return "Flags standard levels inconsistent with interpolation between significant levels"

    @property
    def validation_names(self) -> list[str]:
        return [
            vn.STD_LEV, vn.SIG_ABOVE, vn.SIG_BELOW, vn.IND_STD, vn.LEV_ERRORS,
            vn.T_INTERP, vn.LOG_P, vn.NUM_STD, vn.NUM_SIG,
        ]

    def run_check(self) -> None:
        """Run interpolation check."""
        logger.debug("Interpolation check")

        num_levels_to_check = self.profile_indices.get_num_levels_to_check()

        pressures = self.handler.get(vn.AIR_PRESSURE)
        t_obs = self.handler.get(vn.OBS_AIR_TEMPERATURE)
        t_bkg = self.handler.get(vn.HOFX_AIR_TEMPERATURE)
        t_flags = self.handler.get(vn.QC_T_FLAGS, int)
        t_obs_correction = self.handler.get(vn.T_OBS_CORRECTION)
        counters = [self.handler.get(name, int) for name in vn.COUNTERS]

        if self.any_empty(pressures, t_obs, t_bkg, t_flags, t_obs_correction, *counters):
            logger.warning("At least one vector is empty. Check will not be performed.")
            return
        if not self.all_same_size(pressures, t_obs, t_bkg, t_flags, t_obs_correction):
            logger.warning("Not all vectors have the same size. Check will not be performed.")
            return

        # Writable access only once the profile is known to be checkable
        t_flags = self.handler.get(vn.QC_T_FLAGS, int, writable=True)
        num_any_errors = self.handler.get(vn.COUNTER_NUM_ANY_ERRORS, int, writable=True)
        num_interp_errors = self.handler.get(vn.COUNTER_NUM_INTERP_ERRORS, int, writable=True)
        num_interp_err_obs = self.handler.get(vn.COUNTER_NUM_INTERP_ERR_OBS, int, writable=True)

        num_levels_to_check = min(num_levels_to_check, len(pressures))

        t_obs_final = self.correct_values(t_obs, t_obs_correction)

        self.calc_std_levels(num_levels_to_check, pressures, t_obs_final, t_flags)

        self.lev_errors = np.full(num_levels_to_check, MISSING_INDEX, dtype=np.int64)
        self.t_interp = np.full(num_levels_to_check, MISSING_VALUE_FLOAT, dtype=np.float64)

        # Too few significant levels for a reliable check anywhere in the profile
        min_sig = max(3, self.num_std // 2)

        num_errors = 0
        for std in self.std_levels:
            jlev = std.level

            if self.num_sig < min_sig:
                continue
            if not std.is_bracketed:
                continue

            sig_b = std.sig_below
            sig_a = std.sig_above
            p_std = pressures[jlev]
            big_gap = self.options.big_gap_for(std.pressure_hpa)

            if (pressures[sig_b] - p_std > big_gap
                    or p_std - pressures[sig_a] > big_gap
                    or self.log_p[sig_b] == self.log_p[sig_a]):
                continue

            ratio = (self.log_p[jlev] - self.log_p[sig_b]) / (self.log_p[sig_a] - self.log_p[sig_b])
            self.t_interp[jlev] = t_obs_final[sig_b] + (t_obs_final[sig_a] - t_obs_final[sig_b]) * ratio

            if abs(t_obs_final[jlev] - self.t_interp[jlev]) > self.options.tolerance_for(p_std):
                num_any_errors[0] += 1
                num_interp_errors[0] += 1
                num_errors += 1

                # Other checks may later unset the flag on sig or std levels
                for level in (jlev, sig_b, sig_a):
                    t_flags[level] |= int(ProfileFlag.INTERPOLATION)
                    self.lev_errors[level] += 1

                self._log_failure(jlev, sig_b, sig_a, pressures, t_obs_final, t_bkg)

        if num_errors > 0:
            num_interp_err_obs[0] += 1

    def _log_failure(self, jlev, sig_b, sig_a, pressures, t_obs, t_bkg) -> None:
        logger.debug(
            f" -> Failed interpolation check for levels {jlev} (central), "
            f"{sig_b} (lower) and {sig_a} (upper)"
        )
        logger.debug(
            f" -> Level {jlev}: P = {pressures[jlev] * 0.01}hPa, "
            f"tObs = {t_obs[jlev] - T0C}C, tBkg = {t_bkg[jlev] - T0C}C, "
            f"tInterp = {self.t_interp[jlev] - T0C}C, "
            f"tInterp - tObs = {self.t_interp[jlev] - t_obs[jlev]}"
        )
        for level in (sig_b, sig_a):
            logger.debug(
                f" -> Level {level}: P = {pressures[level] * 0.01}hPa, "
                f"tObs = {t_obs[level] - T0C}C, tBkg = {t_bkg[level] - T0C}C"
            )

    def fill_validator(self) -> None:
        """Publish standard levels, brackets, interpolated values and error tallies."""
        for name, values in self.std_level_arrays().items():
            self.handler.set(name, values)
        self.handler.set(vn.LEV_ERRORS, self.lev_errors)
        self.handler.set(vn.T_INTERP, self.t_interp)
        self.handler.set(vn.LOG_P, self.log_p)
        self.handler.set(vn.NUM_STD, np.full(self.num_levels_std, self.num_std, dtype=np.int64))
        self.handler.set(vn.NUM_SIG, np.full(self.num_levels_std, self.num_sig, dtype=np.int64))
