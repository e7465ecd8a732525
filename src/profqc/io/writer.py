"""NetCDF writer for QC flags and report export."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from profqc.io.conventions import CFConventions, LEVEL_DIM, PROFILE_DIM
from profqc.qc import variable_names as vn

if TYPE_CHECKING:
    import xarray as xr
    from profqc.models.report import ProfileReport
    from profqc.qc.data_handler import ProfileDataHandler


class ProfileWriter:
    """Writer for exporting QC flags and reports."""

    def __init__(self, filepath: str | Path) -> None:
        """Initialize writer with output path.

        Args:
            filepath: Path for output file.
        """
        self.filepath = Path(filepath)

    def write_dataset(self, dataset: xr.Dataset) -> None:
        """Write dataset to NetCDF file.

        Args:
            dataset: xarray Dataset to write.
        """
        dataset.to_netcdf(self.filepath)

    def write_flags(
        self,
        dataset: xr.Dataset,
        handlers: list[ProfileDataHandler],
    ) -> None:
        """Write dataset with the temperature QC flags of each profile.

        Args:
            dataset: Original dataset the handlers were read from.
            handlers: One handler per profile, in dataset order.
        """
        import xarray as xr

        num_levels = int(dataset.sizes[LEVEL_DIM])
        if PROFILE_DIM in dataset.dims:
            flags = np.zeros((int(dataset.sizes[PROFILE_DIM]), num_levels), dtype=np.int32)
            for i, handler in enumerate(handlers):
                profile_flags = handler.get(vn.QC_T_FLAGS, int)
                flags[i, :len(profile_flags)] = profile_flags
            flag_array = xr.DataArray(flags, dims=(PROFILE_DIM, LEVEL_DIM))
        else:
            flags = np.zeros(num_levels, dtype=np.int32)
            profile_flags = handlers[0].get(vn.QC_T_FLAGS, int)
            flags[:len(profile_flags)] = profile_flags
            flag_array = xr.DataArray(flags, dims=(LEVEL_DIM,))

        ds_with_flags = dataset.copy()
        ds_with_flags[vn.QC_T_FLAGS] = CFConventions.add_qc_flag_attributes(flag_array)
        ds_with_flags.to_netcdf(self.filepath)

    def export_report_json(
        self,
        reports: list[ProfileReport],
        filepath: str | Path | None = None,
    ) -> None:
        """Export QC reports to JSON.

        Args:
            reports: Reports, one per profile.
            filepath: Output JSON path (defaults to the writer's path).
        """
        import json

        with open(filepath or self.filepath, "w") as f:
            json.dump([r.to_dict() for r in reports], f, indent=2, default=str)

    def export_reports_csv(
        self,
        reports: list[ProfileReport],
        filepath: str | Path | None = None,
    ) -> None:
        """Export flagged levels of all reports to CSV format.

        Args:
            reports: Reports, one per profile.
            filepath: Output CSV path (defaults to the writer's path).
        """
        import pandas as pd

        frames = [r.to_dataframe() for r in reports]
        df = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
        df.to_csv(filepath or self.filepath, index=False)
