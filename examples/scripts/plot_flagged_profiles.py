"""Plot every sounding of a file that failed the interpolation check."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from profqc.io.reader import ProfileReader  # noqa: E402
from profqc.qc.engine import ProfileQCEngine  # noqa: E402
from profqc.utils.config import load_config  # noqa: E402
from profqc.viz.profile_plot import ProfilePlot  # noqa: E402


def plot_flagged_profiles(input_file: str, output_dir: str) -> None:
    """Write one PNG per flagged sounding.

    Args:
        input_file: Path to input NetCDF file.
        output_dir: Directory for the figures.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    engine = ProfileQCEngine(load_config())
    written = 0

    with ProfileReader(input_file) as reader:
        for profile_id, handler in reader.iter_profiles():
            report = engine.run(handler, profile_id=profile_id)
            if not report.total_flagged:
                continue

            plot = ProfilePlot()
            ax = plot.plot_profile(handler)
            plot.add_flags(ax, handler)
            ax.set_title(profile_id)
            plot.save(str(output_path / f"{profile_id}.png"), dpi=120)
            plt.close("all")
            written += 1

    print(f"Wrote {written} figures to {output_path}")


if __name__ == "__main__":
    import sys

    if len(sys.argv) != 3:
        print("Usage: python plot_flagged_profiles.py <input.nc> <output_dir>")
        sys.exit(1)

    plot_flagged_profiles(sys.argv[1], sys.argv[2])
