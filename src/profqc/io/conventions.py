"""CF Conventions helpers for profile variables and QC flags."""

from __future__ import annotations

from typing import TYPE_CHECKING

from profqc.models.flags import ProfileFlag
from profqc.qc import variable_names as vn

if TYPE_CHECKING:
    import xarray as xr


PROFILE_DIM = "profile"
LEVEL_DIM = "level"

# Expected units for per-level inputs
EXPECTED_UNITS = {
    vn.AIR_PRESSURE: "Pa",
    vn.OBS_AIR_TEMPERATURE: "K",
    vn.HOFX_AIR_TEMPERATURE: "K",
    vn.T_OBS_CORRECTION: "K",
}

# Variables the interpolation check cannot run without
REQUIRED_VARIABLES = (
    vn.AIR_PRESSURE,
    vn.OBS_AIR_TEMPERATURE,
    vn.HOFX_AIR_TEMPERATURE,
)


class CFConventions:
    """Helper class for CF conventions compliance."""

    @staticmethod
    def validate_units(dataset: xr.Dataset, variable: str) -> bool:
        """Check if variable has expected units.

        Args:
            dataset: xarray Dataset.
            variable: Variable name to check.

        Returns:
            True if units are valid or not specified.
        """
        if variable not in dataset:
            return False

        var_attrs = dataset[variable].attrs
        if "units" not in var_attrs:
            return True  # No units specified, cannot validate

        expected = EXPECTED_UNITS.get(variable)
        if expected is None:
            return True

        return var_attrs["units"] == expected

    @staticmethod
    def missing_variables(dataset: xr.Dataset) -> list[str]:
        """Required inputs absent from the dataset."""
        return [name for name in REQUIRED_VARIABLES if name not in dataset]

    @staticmethod
    def add_qc_flag_attributes(flag_array: xr.DataArray) -> xr.DataArray:
        """Add CF-compliant bitmask attributes to a QC flag array.

        Args:
            flag_array: DataArray containing temperature QC flags.

        Returns:
            DataArray with added attributes.
        """
        members = [m for m in ProfileFlag if m is not ProfileFlag.NONE]
        flag_array.attrs.update({
            "long_name": "Quality control flags for air temperature",
            "standard_name": "air_temperature status_flag",
            "flag_masks": [int(m) for m in members],
            "flag_meanings": " ".join(m.name.lower() for m in members),
        })
        return flag_array
