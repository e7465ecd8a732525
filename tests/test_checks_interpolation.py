"""Tests for the interpolation check."""

import math

import numpy as np
import pytest

from profqc.models.flags import MISSING_VALUE_FLOAT, ProfileFlag
from profqc.qc import variable_names as vn
from profqc.qc.options import ProfileCheckOptions


def _counters(handler):
    return [int(handler.get(name, int)[0]) for name in vn.COUNTERS]


class TestInterpolationCheck:
    """Test suite for InterpolationCheck."""

    def test_flags_standard_level_and_brackets(self, sample_handler, options_700, run_interpolation):
        """Test the three implicated levels are flagged and counted once."""
        check = run_interpolation(sample_handler, options_700)

        ratio = (math.log(70000) - math.log(85000)) / (math.log(50000) - math.log(85000))
        expected = 280.0 + (260.0 - 280.0) * ratio
        assert check.t_interp[2] == pytest.approx(expected)
        assert abs(270.0 - expected) > 1.0

        flags = sample_handler.get(vn.QC_T_FLAGS, int)
        for level in (1, 2, 3):
            assert flags[level] & ProfileFlag.INTERPOLATION
        assert flags[0] == 0
        assert flags[4] == 0

        any_errors, interp_errors, interp_err_obs = _counters(sample_handler)
        assert any_errors == 1
        assert interp_errors == 1
        assert interp_err_obs == 1

    def test_consistent_profile_passes(self, make_handler, options_700, run_interpolation):
        """Test a standard level close to the interpolated value is not flagged."""
        handler = make_handler(t_obs=[288.0, 280.0, 272.5, 260.0, 250.0])
        check = run_interpolation(handler, options_700)

        assert check.t_interp[2] != MISSING_VALUE_FLOAT
        assert not np.any(handler.get(vn.QC_T_FLAGS, int))
        assert _counters(handler) == [0, 0, 0]

    def test_bias_correction_applied(self, make_handler, options_700, run_interpolation):
        """Test the comparison uses observation plus correction."""
        handler = make_handler(t_correction=[0.0, 0.0, 2.6, 0.0, 0.0])
        run_interpolation(handler, options_700)

        assert _counters(handler) == [0, 0, 0]

    def test_existing_flag_bits_preserved(self, make_handler, options_700, run_interpolation):
        """Test flags are OR-ed in, never overwritten."""
        handler = make_handler(t_flags=[0, 0, 0, ProfileFlag.FINAL_REJECT << 8, 0])
        run_interpolation(handler, options_700)

        flags = handler.get(vn.QC_T_FLAGS, int)
        assert flags[3] == (ProfileFlag.FINAL_REJECT << 8) | ProfileFlag.INTERPOLATION

    def test_second_run_counts_again(self, sample_handler, options_700, run_interpolation):
        """Test running twice doubles counters; one run per profile is the caller's job."""
        run_interpolation(sample_handler, options_700)
        flags_once = sample_handler.get(vn.QC_T_FLAGS, int).copy()
        run_interpolation(sample_handler, options_700)

        assert _counters(sample_handler) == [2, 2, 2]
        np.testing.assert_array_equal(sample_handler.get(vn.QC_T_FLAGS, int), flags_once)

    @pytest.mark.parametrize("empty", [
        vn.AIR_PRESSURE,
        vn.OBS_AIR_TEMPERATURE,
        vn.HOFX_AIR_TEMPERATURE,
        vn.QC_T_FLAGS,
        vn.T_OBS_CORRECTION,
    ])
    def test_empty_sequence_skips_check(self, sample_handler, options_700, run_interpolation, empty):
        """Test an empty input leaves flags and counters untouched."""
        sample_handler.set(empty, np.array([], dtype=np.int64 if empty == vn.QC_T_FLAGS else np.float64))
        flags_before = sample_handler.get(vn.QC_T_FLAGS, int).copy()

        run_interpolation(sample_handler, options_700)

        assert _counters(sample_handler) == [0, 0, 0]
        np.testing.assert_array_equal(sample_handler.get(vn.QC_T_FLAGS, int), flags_before)

    def test_length_mismatch_skips_check(self, sample_handler, options_700, run_interpolation):
        """Test sequences of different lengths leave state untouched."""
        sample_handler.set(vn.HOFX_AIR_TEMPERATURE, [280.0, 270.0])

        run_interpolation(sample_handler, options_700)

        assert _counters(sample_handler) == [0, 0, 0]
        assert not np.any(sample_handler.get(vn.QC_T_FLAGS, int))

    def test_skipped_check_keeps_stored_types(self, sample_handler, options_700, run_interpolation):
        """Test an early exit leaves float-stored flags and counters as they were."""
        sample_handler.set(vn.QC_T_FLAGS, np.zeros(5, dtype=np.float64))
        sample_handler.set(vn.COUNTER_NUM_ANY_ERRORS, np.zeros(1, dtype=np.float64))
        sample_handler.set(vn.T_OBS_CORRECTION, np.array([], dtype=np.float64))

        run_interpolation(sample_handler, options_700)

        assert not sample_handler.is_integer(vn.QC_T_FLAGS)
        assert not sample_handler.is_integer(vn.COUNTER_NUM_ANY_ERRORS)

    def test_float_flags_converted_when_check_runs(self, make_handler, options_700, run_interpolation):
        handler = make_handler()
        handler.set(vn.QC_T_FLAGS, np.zeros(5, dtype=np.float64))

        run_interpolation(handler, options_700)

        assert handler.is_integer(vn.QC_T_FLAGS)
        assert handler.get(vn.QC_T_FLAGS, int)[2] == ProfileFlag.INTERPOLATION

    def test_missing_variable_is_hard_failure(self, sample_handler, options_700, run_interpolation):
        """Test an unregistered input raises rather than skipping."""
        from profqc.utils.exceptions import VariableNotFoundError

        handler = type(sample_handler)({
            name: sample_handler.get(name)
            for name in sample_handler.names()
            if name != vn.T_OBS_CORRECTION
        })

        with pytest.raises(VariableNotFoundError):
            run_interpolation(handler, options_700)

    def test_too_few_significant_levels(self, make_handler, run_interpolation):
        """Test nothing is checked when significant levels are scarce."""
        options = ProfileCheckOptions(
            standard_levels=(850.0, 700.0),
            big_gaps=((1.0, 1000.0),),
        )
        handler = make_handler(
            pressures=[92500.0, 85000.0, 70000.0, 60000.0],
            t_obs=[285.0, 300.0, 250.0, 275.0],
        )

        check = run_interpolation(handler, options)

        assert check.num_sig == 2
        assert _counters(handler) == [0, 0, 0]
        assert not np.any(handler.get(vn.QC_T_FLAGS, int))
        assert np.all(check.t_interp == MISSING_VALUE_FLOAT)

    def test_big_gap_skips_level(self, sample_handler, run_interpolation):
        """Test a bracket further away than the big gap disables the check."""
        options = ProfileCheckOptions(
            standard_levels=(700.0,),
            big_gaps=((700.0, 100.0),),
        )
        sample_handler.set(vn.OBS_AIR_TEMPERATURE, [288.0, 280.0, 200.0, 260.0, 250.0])

        check = run_interpolation(sample_handler, options)

        assert _counters(sample_handler) == [0, 0, 0]
        assert check.t_interp[2] == MISSING_VALUE_FLOAT

    def test_identical_bracket_pressures_skipped(self, make_handler, options_700, run_interpolation):
        """Test brackets with equal log-pressure do not divide by zero."""
        handler = make_handler(
            pressures=[90000.0, 80000.0, 70000.0, 80000.0, 60000.0],
            t_obs=[285.0, 280.0, 200.0, 275.0, 265.0],
        )

        check = run_interpolation(handler, options_700)

        assert check.std_levels[0].sig_below == 1
        assert check.std_levels[0].sig_above == 3
        assert _counters(handler) == [0, 0, 0]
        assert not np.any(handler.get(vn.QC_T_FLAGS, int))

    def test_surface_standard_level_not_checked(self, make_handler, options_700, run_interpolation):
        """Test a standard level flagged as surface is left alone."""
        handler = make_handler(t_flags=[0, 0, ProfileFlag.SURFACE_LEVEL, 0, 0])

        run_interpolation(handler, options_700)

        assert _counters(handler) == [0, 0, 0]
        assert handler.get(vn.QC_T_FLAGS, int)[2] == ProfileFlag.SURFACE_LEVEL

    def test_missing_bracket_skipped(self, make_handler, options_700, run_interpolation):
        """Test a standard level with no significant level above is skipped."""
        handler = make_handler(
            pressures=[100000.0, 92000.0, 85000.0, 78000.0, 70000.0],
            t_obs=[288.0, 284.0, 280.0, 276.0, 200.0],
        )

        check = run_interpolation(handler, options_700)

        assert check.std_levels[0].sig_above is None
        assert _counters(handler) == [0, 0, 0]

    def test_only_implicated_levels_flagged(self, make_handler, run_interpolation):
        """Test flags change only on standard levels and their brackets."""
        options = ProfileCheckOptions(
            standard_levels=(850.0, 500.0),
            big_gaps=((1.0, 1000.0),),
        )
        handler = make_handler(
            pressures=[100000.0, 90000.0, 85000.0, 70000.0, 60000.0, 50000.0, 40000.0, 30000.0],
            t_obs=[288.0, 284.0, 260.0, 274.0, 266.0, 258.0, 250.0, 240.0],
        )

        run_interpolation(handler, options)

        flagged = set(np.flatnonzero(handler.get(vn.QC_T_FLAGS, int) & ProfileFlag.INTERPOLATION))
        assert flagged == {1, 2, 3}
        assert _counters(handler) == [1, 1, 1]

    def test_error_observation_counted_once(self, make_handler, run_interpolation):
        """Test several failing levels increment the profile counter only once."""
        options = ProfileCheckOptions(
            standard_levels=(850.0, 500.0),
            big_gaps=((1.0, 1000.0),),
        )
        handler = make_handler(
            pressures=[100000.0, 90000.0, 85000.0, 70000.0, 50000.0, 40000.0, 30000.0],
            t_obs=[288.0, 284.0, 260.0, 274.0, 240.0, 250.0, 240.0],
        )

        check = run_interpolation(handler, options)

        assert _counters(handler) == [2, 2, 1]
        # 700 hPa brackets both standard levels
        assert check.lev_errors[3] == 1
        assert check.lev_errors[2] == 0
        assert check.lev_errors[0] == -1
        flagged = set(np.flatnonzero(handler.get(vn.QC_T_FLAGS, int) & ProfileFlag.INTERPOLATION))
        assert flagged == {1, 2, 3, 4, 5}


class TestTolerance:
    """Pressure-dependent tolerance of the interpolation check."""

    def _profile(self, make_handler, std_pressure):
        return make_handler(
            pressures=[50000.0, 40000.0, std_pressure, 20000.0, 15000.0],
            t_obs=[240.0, 230.0, 231.2, 230.0, 220.0],
        )

    def test_boundary_uses_unrelaxed_tolerance(self, make_handler, run_interpolation):
        """Test a level exactly at the threshold uses the base tolerance."""
        options = ProfileCheckOptions(
            standard_levels=(300.0,),
            big_gaps=((1.0, 1000.0),),
            t_interp_tol=1.0,
            tol_relax=1.5,
            tol_relax_p_thresh=30000.0,
        )
        handler = self._profile(make_handler, 30000.0)

        check = run_interpolation(handler, options)

        assert check.t_interp[2] == pytest.approx(230.0)
        assert _counters(handler) == [1, 1, 1]

    def test_relaxed_above_threshold_altitude(self, make_handler, run_interpolation):
        """Test a level at lower pressure than the threshold uses the relaxed tolerance."""
        options = ProfileCheckOptions(
            standard_levels=(250.0,),
            big_gaps=((1.0, 1000.0),),
            t_interp_tol=1.0,
            tol_relax=1.5,
            tol_relax_p_thresh=30000.0,
        )
        handler = self._profile(make_handler, 25000.0)

        check = run_interpolation(handler, options)

        assert check.t_interp[2] == pytest.approx(230.0)
        assert _counters(handler) == [0, 0, 0]

    def test_tolerance_for(self):
        """Test the tolerance on both sides of the threshold."""
        options = ProfileCheckOptions(t_interp_tol=2.0, tol_relax=1.5, tol_relax_p_thresh=30000.0)

        assert options.tolerance_for(30000.0) == 2.0
        assert options.tolerance_for(50000.0) == 2.0
        assert options.tolerance_for(29999.0) == pytest.approx(3.0)


class TestFillValidator:
    """Publishing of working state."""

    def test_before_run_publishes_sentinels(self, sample_handler, options_700):
        """Test fill_validator before run_check yields the initial state."""
        from profqc.qc.checks.interpolation import InterpolationCheck
        from profqc.qc.profile_indices import ProfileIndices

        check = InterpolationCheck(options_700, ProfileIndices(sample_handler), sample_handler)
        check.fill_validator()

        np.testing.assert_array_equal(sample_handler.get(vn.STD_LEV, int), [-1] * 5)
        np.testing.assert_array_equal(sample_handler.get(vn.LEV_ERRORS, int), [-1] * 5)
        assert np.all(sample_handler.get(vn.T_INTERP) == MISSING_VALUE_FLOAT)
        np.testing.assert_array_equal(sample_handler.get(vn.NUM_STD, int), [0] * 5)

    def test_after_run_publishes_working_state(self, sample_handler, options_700, run_interpolation):
        """Test published names and values after a run."""
        check = run_interpolation(sample_handler, options_700)
        check.fill_validator()

        np.testing.assert_array_equal(sample_handler.get(vn.STD_LEV, int), [2, -1, -1, -1, -1])
        np.testing.assert_array_equal(sample_handler.get(vn.SIG_BELOW, int), [1, -1, -1, -1, -1])
        np.testing.assert_array_equal(sample_handler.get(vn.SIG_ABOVE, int), [3, -1, -1, -1, -1])
        np.testing.assert_array_equal(sample_handler.get(vn.IND_STD, int), [-1, -1, 0, -1, -1])
        np.testing.assert_array_equal(sample_handler.get(vn.LEV_ERRORS, int), [-1, 0, 0, 0, -1])
        np.testing.assert_array_equal(sample_handler.get(vn.NUM_STD, int), [1] * 5)
        np.testing.assert_array_equal(sample_handler.get(vn.NUM_SIG, int), [4] * 5)
        assert sample_handler.get(vn.LOG_P)[2] == pytest.approx(math.log(70000.0))
        assert sample_handler.get(vn.T_INTERP)[2] == pytest.approx(check.t_interp[2])
