"""
Command-line interface for the heapstrings snapshot analyzer.

This module provides the main CLI entry point, handling command-line
arguments, configuration loading and mapping fatal analysis errors to
operator-facing messages and exit codes.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..errors import AnalyzerError, SnapshotNotFoundError, UsageError
from ..validation import ErrorSeverity, ValidationError, handle_cli_error
from .runner import SnapshotAnalysis

# --- Logging Setup ---
# stdout carries the report, so log records go to stderr.
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

BANNER = "Heap String Analyser - string encoding report for managed heap snapshots\n"
USAGE = "Usage:\n  heapstrings <snapshot file> [--gcinfo]\n"
GC_INFO_FLAGS = ("--gcinfo", "-gcinfo")


def normalize_arguments(argv: List[str]) -> List[str]:
    """Accept the gc-info flag in any letter case (e.g. `-GCINFO`)."""
    return ["--gcinfo" if arg.lower() in GC_INFO_FLAGS else arg for arg in argv]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heapstrings",
        description="Estimate how much memory the strings in a heap snapshot would "
        "need if each were stored in its narrowest encoding.",
    )
    parser.add_argument(
        "snapshot",
        nargs="?",
        type=Path,
        help="Snapshot manifest file to analyze.",
    )
    parser.add_argument(
        "--gcinfo",
        action="store_true",
        help="Also print memory region and GC heap segment information.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a config.toml overriding the default configuration.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for the analyzer.

    Exits with status 0 after a completed analysis, even when layout
    mismatches or consistency errors were reported; 1 on fatal errors; 2 on
    usage errors.

    Raises:
        SystemExit: On usage errors, missing snapshot, or fatal analysis errors.
    """
    args = build_parser().parse_args(
        normalize_arguments(sys.argv[1:] if argv is None else list(argv))
    )

    print(BANNER)

    if args.snapshot is None:
        handle_cli_error(
            error=UsageError(USAGE),
            context="argument parsing",
            severity=ErrorSeverity.WARNING,
            logger=logger,
        )

    if not args.snapshot.exists():
        handle_cli_error(
            error=SnapshotNotFoundError(args.snapshot),
            context="argument parsing",
            logger=logger,
        )

    try:
        if args.config is not None:
            set_config_path(args.config)
        config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(error=e, context="configuration loading", logger=logger)

    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)

    analysis = SnapshotAnalysis(args.snapshot, config, show_gc_info=args.gcinfo)
    try:
        analysis.run()
    except AnalyzerError as e:
        handle_cli_error(error=e, context="snapshot analysis", logger=logger)


if __name__ == "__main__":
    main_cli()
