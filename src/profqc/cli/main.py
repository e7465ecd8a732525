"""Command-line interface for profqc."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from profqc import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="profqc",
        description="Consistency QC for radiosonde profile observations",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # QC command
    qc_parser = subparsers.add_parser("qc", help="Run QC checks")
    qc_parser.add_argument("input", help="Input NetCDF file")
    qc_parser.add_argument(
        "-o", "--out",
        help="Output report file (.json or .csv)",
    )
    qc_parser.add_argument(
        "-c", "--config",
        help="Custom config file",
    )
    qc_parser.add_argument(
        "--checks",
        help="Comma-separated list of checks to run",
    )
    qc_parser.add_argument(
        "--flags-out",
        help="Write input with QC flags to this NetCDF file",
    )
    qc_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # Checks command
    subparsers.add_parser("checks", help="List available checks")

    return parser


def run_qc(args: argparse.Namespace) -> int:
    """Run QC command."""
    from profqc.io.reader import ProfileReader
    from profqc.io.writer import ProfileWriter
    from profqc.qc import variable_names as vn
    from profqc.qc.engine import ProfileQCEngine
    from profqc.utils.config import load_config
    from profqc.utils.exceptions import ProfQCError
    from profqc.utils.logging import get_logger, setup_logging

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    logger = get_logger("cli")

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    try:
        overrides = {"checks": args.checks} if args.checks else None
        engine = ProfileQCEngine(load_config(args.config, overrides))

        reports = []
        handlers = []
        with ProfileReader(input_path) as reader:
            logger.info(f"Found variables: {reader.get_variables()}")
            for profile_id, handler in reader.iter_profiles():
                reports.append(engine.run(handler, profile_id=profile_id))
                handlers.append(handler)

            if args.flags_out:
                ProfileWriter(args.flags_out).write_flags(reader.dataset, handlers)
                print(f"Flags saved to {args.flags_out}")
    except ProfQCError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    total_errors = sum(r.counters.get(vn.COUNTER_NUM_INTERP_ERRORS, 0) for r in reports)
    flagged = sum(1 for r in reports if r.counters.get(vn.COUNTER_NUM_INTERP_ERR_OBS, 0))
    print(
        f"QC complete. {len(reports)} profiles, {total_errors} interpolation errors "
        f"in {flagged} profiles."
    )

    # Save report
    if args.out:
        writer = ProfileWriter(args.out)
        if Path(args.out).suffix.lower() == ".csv":
            writer.export_reports_csv(reports)
        else:
            writer.export_report_json(reports)
        print(f"Report saved to {args.out}")

    return 0


def run_checks(args: argparse.Namespace) -> int:
    """List registered checks."""
    from profqc.qc.registry import check_registry

    for key in check_registry.list_checks():
        print(key)
    return 0


def cli(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command == "qc":
        return run_qc(args)
    elif args.command == "checks":
        return run_checks(args)
    else:
        parser.print_help()
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
