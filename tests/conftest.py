"""Pytest configuration and fixtures."""

from __future__ import annotations

import numpy as np
import pytest
import xarray as xr

from profqc.qc import variable_names as vn
from profqc.qc.data_handler import ProfileDataHandler
from profqc.qc.options import ProfileCheckOptions

# Pressures (Pa) and observed temperatures (K) of a five-level sounding
# whose 700 hPa level sits 2.7 K below the interpolation of 850 and 500 hPa
SAMPLE_PRESSURES = [100000.0, 85000.0, 70000.0, 50000.0, 30000.0]
SAMPLE_T_OBS = [288.0, 280.0, 270.0, 260.0, 250.0]


@pytest.fixture
def make_handler():
    """Factory fixture for creating profile data handlers."""

    def _make(
        pressures: list[float] = SAMPLE_PRESSURES,
        t_obs: list[float] = SAMPLE_T_OBS,
        t_bkg: list[float] | None = None,
        t_flags: list[int] | None = None,
        t_correction: list[float] | None = None,
        counters: bool = True,
    ) -> ProfileDataHandler:
        n = len(pressures)
        handler = ProfileDataHandler({
            vn.AIR_PRESSURE: pressures,
            vn.OBS_AIR_TEMPERATURE: t_obs,
            vn.HOFX_AIR_TEMPERATURE: t_bkg if t_bkg is not None else [t + 0.5 for t in t_obs],
            vn.QC_T_FLAGS: np.asarray(t_flags if t_flags is not None else [0] * n, dtype=np.int64),
            vn.T_OBS_CORRECTION: t_correction if t_correction is not None else [0.0] * n,
        })
        if counters:
            handler.ensure_counters(vn.COUNTERS)
        return handler

    return _make


@pytest.fixture
def sample_handler(make_handler) -> ProfileDataHandler:
    """Five-level sounding failing the interpolation check at 700 hPa."""
    return make_handler()


@pytest.fixture
def options_700() -> ProfileCheckOptions:
    """Options with 700 hPa as the only standard level and no gap limit to speak of."""
    return ProfileCheckOptions(
        standard_levels=(700.0,),
        big_gaps=((1.0, 1000.0),),
        t_interp_tol=1.0,
    )


@pytest.fixture
def run_interpolation():
    """Build and run an interpolation check, returning the check instance."""

    def _run(handler: ProfileDataHandler, options: ProfileCheckOptions):
        from profqc.qc.checks.interpolation import InterpolationCheck
        from profqc.qc.profile_indices import ProfileIndices

        check = InterpolationCheck(options, ProfileIndices(handler, options), handler)
        check.run_check()
        return check

    return _run


@pytest.fixture
def sample_dataset() -> xr.Dataset:
    """Two soundings along a profile dimension, the second NaN-padded."""
    nan = np.nan
    pressures = np.array([
        SAMPLE_PRESSURES,
        [100000.0, 85000.0, 70000.0, nan, nan],
    ])
    t_obs = np.array([
        SAMPLE_T_OBS,
        [288.0, 280.0, 272.0, nan, nan],
    ])

    return xr.Dataset(
        {
            vn.AIR_PRESSURE: (["profile", "level"], pressures, {"units": "Pa"}),
            vn.OBS_AIR_TEMPERATURE: (["profile", "level"], t_obs, {"units": "K"}),
            vn.HOFX_AIR_TEMPERATURE: (["profile", "level"], t_obs + 0.5, {"units": "K"}),
        },
        coords={"profile": ["sonde_a", "sonde_b"]},
    )
