"""Batch QC processing example."""

from pathlib import Path

from profqc.io.reader import ProfileReader
from profqc.io.writer import ProfileWriter
from profqc.qc.engine import ProfileQCEngine
from profqc.utils.config import load_config


def run_batch_qc(input_dir: str, output_dir: str) -> None:
    """Run QC on all NetCDF files in a directory.

    Args:
        input_dir: Directory with input files.
        output_dir: Directory for output reports and flagged files.
    """
    input_path = Path(input_dir)
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    engine = ProfileQCEngine(load_config())

    for nc_file in sorted(input_path.glob("*.nc")):
        print(f"Processing {nc_file.name}...")

        reports = []
        handlers = []
        with ProfileReader(nc_file) as reader:
            for profile_id, handler in reader.iter_profiles():
                reports.append(engine.run(handler, profile_id=profile_id))
                handlers.append(handler)

            ProfileWriter(output_path / f"{nc_file.stem}_qc.nc").write_flags(reader.dataset, handlers)

        flagged = sum(r.total_flagged for r in reports)
        print(f"  {len(reports)} profiles, {flagged} levels flagged")

        ProfileWriter(output_path / f"{nc_file.stem}_qc_report.json").export_report_json(reports)

    print("Batch processing complete!")


if __name__ == "__main__":
    import sys

    if len(sys.argv) != 3:
        print("Usage: python run_qc_batch.py <input_dir> <output_dir>")
        sys.exit(1)

    run_batch_qc(sys.argv[1], sys.argv[2])
