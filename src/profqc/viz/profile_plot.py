"""Sounding plot with QC flag overlay."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from profqc.models.flags import MISSING_VALUE_FLOAT, T0C, ProfileFlag
from profqc.qc import variable_names as vn

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure
    from profqc.qc.data_handler import ProfileDataHandler


# Colors and markers for the overlaid flag bits
FLAG_STYLES = {
    ProfileFlag.INTERPOLATION: ("#e74c3c", "x"),   # Red
    ProfileFlag.SURFACE_LEVEL: ("#95a5a6", "s"),   # Gray
    ProfileFlag.FINAL_REJECT: ("#f39c12", "o"),    # Orange
}


class ProfilePlot:
    """Temperature against log-pressure, with flagged levels marked."""

    def __init__(self, figsize: tuple[int, int] = (6, 8)) -> None:
        """Initialize plotter.

        Args:
            figsize: Figure size in inches.
        """
        self.figsize = figsize
        self._fig: Figure | None = None
        self._ax: Axes | None = None

    def create_figure(self) -> tuple[Figure, Axes]:
        """Create new figure and axes.

        Returns:
            Tuple of (figure, axes).
        """
        import matplotlib.pyplot as plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        return self._fig, self._ax

    def plot_profile(
        self,
        handler: ProfileDataHandler,
        ax: Axes | None = None,
        show_background: bool = True,
    ) -> Axes:
        """Plot observed (and background) temperature in Celsius.

        Args:
            handler: Data handler of the profile.
            ax: Axes to plot on (creates new if None).
            show_background: Also plot the model-equivalent temperature.

        Returns:
            Axes with plot.
        """
        if ax is None:
            _, ax = self.create_figure()

        p_hpa, t_obs = _valid_pairs(handler, vn.OBS_AIR_TEMPERATURE)
        ax.plot(t_obs - T0C, p_hpa, marker=".", label="observed")

        if show_background and handler.has(vn.HOFX_AIR_TEMPERATURE):
            p_bkg, t_bkg = _valid_pairs(handler, vn.HOFX_AIR_TEMPERATURE)
            ax.plot(t_bkg - T0C, p_bkg, linestyle="--", label="background")

        ax.set_yscale("log")
        if not ax.yaxis_inverted():
            ax.invert_yaxis()
        ax.set_xlabel("Temperature (C)")
        ax.set_ylabel("Pressure (hPa)")
        ax.legend()

        return ax

    def add_flags(
        self,
        ax: Axes,
        handler: ProfileDataHandler,
        flags: list[ProfileFlag] | None = None,
    ) -> int:
        """Mark levels carrying the given flag bits.

        Args:
            ax: Axes holding a profile plot.
            handler: Data handler of the profile.
            flags: Flag bits to show (None = all styled bits).

        Returns:
            Number of markers drawn.
        """
        if not handler.has(vn.QC_T_FLAGS):
            return 0

        level_flags = handler.get(vn.QC_T_FLAGS, int)
        pressures = handler.get(vn.AIR_PRESSURE)
        t_obs = handler.get(vn.OBS_AIR_TEMPERATURE)
        num_levels = min(len(level_flags), len(pressures), len(t_obs))

        drawn = 0
        for flag in flags or list(FLAG_STYLES):
            color, marker = FLAG_STYLES[flag]
            idx = [
                j for j in range(num_levels)
                if int(level_flags[j]) & flag and t_obs[j] != MISSING_VALUE_FLOAT
            ]
            if not idx:
                continue
            ax.scatter(
                t_obs[idx] - T0C,
                pressures[idx] * 0.01,
                c=color,
                marker=marker,
                s=60,
                label=flag.name.lower(),
                zorder=5,
            )
            drawn += len(idx)

        if drawn:
            ax.legend()
        return drawn

    def save(self, filepath: str, **kwargs) -> None:
        """Save current figure.

        Args:
            filepath: Output path.
            **kwargs: Additional savefig arguments.
        """
        if self._fig is not None:
            self._fig.savefig(filepath, **kwargs)


def _valid_pairs(handler: ProfileDataHandler, name: str) -> tuple[np.ndarray, np.ndarray]:
    """Pressure (hPa) and values at levels where both are present."""
    pressures = handler.get(vn.AIR_PRESSURE)
    values = handler.get(name)
    n = min(len(pressures), len(values))
    pressures, values = pressures[:n], values[:n]
    keep = (pressures > 0) & (values != MISSING_VALUE_FLOAT) & ~np.isnan(values)
    return pressures[keep] * 0.01, values[keep]
