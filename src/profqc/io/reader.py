"""NetCDF reader turning sounding files into profile data handlers."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterator

import numpy as np

from profqc.io.conventions import CFConventions, LEVEL_DIM, PROFILE_DIM
from profqc.models.flags import MISSING_VALUE_FLOAT
from profqc.qc import variable_names as vn
from profqc.qc.data_handler import ProfileDataHandler
from profqc.utils.exceptions import ProfileIOError
from profqc.utils.logging import get_logger

if TYPE_CHECKING:
    import xarray as xr

logger = get_logger("io.reader")


class ProfileReader:
    """Reader for NetCDF files holding one or more soundings.

    A file is either one profile (variables along ``level``) or several
    (variables along ``profile`` x ``level``, NaN-padded at the top).
    """

    def __init__(self, filepath: str | Path) -> None:
        """Initialize reader with file path.

        Args:
            filepath: Path to NetCDF file.
        """
        self.filepath = Path(filepath)
        self._dataset: xr.Dataset | None = None

    def open(self) -> xr.Dataset:
        """Open and return the dataset.

        Raises:
            ProfileIOError: If the file cannot be opened.
        """
        import xarray as xr

        try:
            self._dataset = xr.open_dataset(self.filepath, decode_cf=True)
        except (OSError, ValueError) as e:
            raise ProfileIOError(f"Cannot open {self.filepath}: {e}") from e
        return self._dataset

    def close(self) -> None:
        """Close the dataset."""
        if self._dataset is not None:
            self._dataset.close()
            self._dataset = None

    def __enter__(self) -> ProfileReader:
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    @property
    def dataset(self) -> xr.Dataset:
        """Get the opened dataset."""
        if self._dataset is None:
            raise RuntimeError("Dataset not opened. Call open() first.")
        return self._dataset

    def get_variables(self) -> list[str]:
        """Get list of data variable names."""
        return list(self.dataset.data_vars)

    def num_profiles(self) -> int:
        """Number of soundings in the file."""
        if PROFILE_DIM in self.dataset.dims:
            return int(self.dataset.sizes[PROFILE_DIM])
        return 1

    def iter_profiles(self) -> Iterator[tuple[str, ProfileDataHandler]]:
        """Yield (profile id, data handler) for every sounding in the file."""
        missing = CFConventions.missing_variables(self.dataset)
        if missing:
            logger.warning(f"{self.filepath.name} lacks {', '.join(missing)}")

        if PROFILE_DIM not in self.dataset.dims:
            yield self.filepath.stem, dataset_to_handler(self.dataset)
            return

        ids = self._profile_ids()
        for i in range(self.num_profiles()):
            yield ids[i], dataset_to_handler(self.dataset.isel({PROFILE_DIM: i}))

    def _profile_ids(self) -> list[str]:
        if PROFILE_DIM in self.dataset.coords:
            return [str(v) for v in self.dataset[PROFILE_DIM].values]
        return [str(i) for i in range(self.num_profiles())]


def dataset_to_handler(dataset: xr.Dataset) -> ProfileDataHandler:
    """Build a handler from a single-profile dataset.

    Levels after the last valid pressure are treated as padding and
    dropped. Missing floats become the reserved missing value. Flags and
    the bias correction default to zero when the file has none.
    """
    handler = ProfileDataHandler()

    num_levels = None
    if vn.AIR_PRESSURE in dataset:
        pressures = np.asarray(dataset[vn.AIR_PRESSURE].values, dtype=np.float64)
        valid = np.flatnonzero(~np.isnan(pressures))
        num_levels = int(valid[-1]) + 1 if len(valid) else 0

    for name, variable in dataset.data_vars.items():
        if variable.dims != (LEVEL_DIM,):
            continue
        values = np.asarray(variable.values)[:num_levels]
        if values.dtype.kind not in "iufb":
            continue
        if name == vn.QC_T_FLAGS or values.dtype.kind in "iub":
            values = np.nan_to_num(values.astype(np.float64), nan=0.0).astype(np.int64)
        else:
            values = np.where(np.isnan(values), MISSING_VALUE_FLOAT, values.astype(np.float64))
        handler.set(str(name), values)

    if handler.has(vn.AIR_PRESSURE):
        size = len(handler.get(vn.AIR_PRESSURE))
        if not handler.has(vn.QC_T_FLAGS):
            handler.set(vn.QC_T_FLAGS, np.zeros(size, dtype=np.int64))
        if not handler.has(vn.T_OBS_CORRECTION):
            handler.set(vn.T_OBS_CORRECTION, np.zeros(size, dtype=np.float64))

    return handler
