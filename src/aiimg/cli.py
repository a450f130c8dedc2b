"""
Command-line interface for aiimg.

Usage:
  aiimg photo.jpg                    # Default mode
  aiimg --full photo.jpg             # Verdict plus raw file data
  aiimg -o report.json *.jpg         # JSON export
  aiimg -q *.jpg                     # Quick summary
  aiimg --sequence f1.png f2.png     # Temporal analysis of frames
"""

from __future__ import annotations

import argparse
import logging
import sys

from aiimg._version import __version__
from aiimg.analyze import ScanError, analyze_file
from aiimg.detectors import print_detector_status
from aiimg.extractors import print_extractor_status
from aiimg.formatters import (
    format_default,
    format_full,
    format_json_list,
    format_quiet,
    format_sequence,
)
from aiimg.sequence import analyze_sequence
from aiimg.utils import print_dependency_status


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="aiimg",
        description="AI image forensics - score images for generative synthesis and editing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  (default)    Verdict, both scores, forensic summary and method breakdown
  --full       Default output plus the raw file data stream (EXIF/XMP/C2PA tags)
  -q/--quiet   Quick summary only
  --sequence   Treat the files as ordered frames and check temporal stability

Detection Control:
  --lineage    Attach the experimental model lineage guess (not scored)

Utilities:
  --status     Show extractor and detector availability status

Examples:
  aiimg photo.jpg                    # Default mode
  aiimg --full photo.jpg             # Full details
  aiimg -o report.json *.jpg         # JSON export
  aiimg -q *.png                     # Quick summary
  aiimg --sequence frame_*.png       # Frame sequence
        """,
    )
    parser.add_argument("files", nargs="*", help="Image file(s) to analyze")
    parser.add_argument("-o", "--output", help="Save report to JSON file")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser.add_argument(
        "--lineage",
        action="store_true",
        help="Attach the experimental model lineage guess",
    )

    # Mode selection (mutually exclusive)
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--full",
        action="store_true",
        help="Full mode: show the raw file data stream",
    )
    mode_group.add_argument("-q", "--quiet", action="store_true", help="Quick summary only")
    mode_group.add_argument(
        "--sequence",
        action="store_true",
        help="Analyze files as an ordered frame sequence",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Show extractor and detector availability status",
    )
    return parser


def print_status() -> None:
    """Print extractor, detector and dependency status."""
    print_extractor_status()
    print()
    print_detector_status()
    print()
    print_dependency_status()


def main(argv: list[str] | None = None) -> int:
    """Main entry point for aiimg CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Handle --status mode (no files required)
    if args.status:
        print_status()
        return 0

    if not args.files:
        parser.error("the following arguments are required: files")

    if args.sequence:
        return run_sequence(args)

    all_reports = []
    errors = 0

    for file_path in args.files:
        try:
            print(f"Analyzing: {file_path}")
            report = analyze_file(file_path, lineage=args.lineage or None)
            all_reports.append(report)

            if args.quiet:
                print(format_quiet(report))
            elif args.full:
                print(format_full(report))
            else:
                print(format_default(report))

            print()

        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            errors += 1
        except ScanError as e:
            print(f"Error analyzing {file_path}: {e}", file=sys.stderr)
            errors += 1

    # JSON export
    if args.output and all_reports:
        json_output = format_json_list(all_reports)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(json_output)
        print(f"Report saved to: {args.output}")

    return 1 if errors > 0 else 0


def run_sequence(args: argparse.Namespace) -> int:
    """Analyze the given files as one ordered frame sequence.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        report = analyze_sequence(args.files)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error decoding frames: {e}", file=sys.stderr)
        return 1

    print(format_sequence(report))

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(report.model_dump_json(indent=2))
        print(f"Report saved to: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
