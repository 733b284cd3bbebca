#!/usr/bin/env python3
"""
Command-line interface for dirdiff.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import parse_min_size
from .detector import deduplicate_dirs, partition_records
from .exceptions import ConfigurationError
from .formatter import (
    BLOCKSIZES,
    DEFAULT_BLOCKSIZE,
    FORMATS,
    VERBOSITIES,
    format_output,
    format_results_file,
    format_summary,
    write_results_to_file,
)

DESCRIPTION = """Compare and contrast directories.
Example invocation: dirdiff -d /home/jon/downloads /home/jon/documents -v duplicates
Example pipe: dirdiff -d ~/Downloads/ -o no -v all -f json | someJsonParser.bin"""


def _min_size_arg(value: str) -> int:
    try:
        return parse_min_size(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e))


def _workers_arg(value: str) -> int:
    workers = int(value)
    if workers < 1:
        raise argparse.ArgumentTypeError("Worker count must be at least 1")
    return workers


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="dirdiff",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-d", "--directories",
        nargs="+",
        required=True,
        type=Path,
        help="Directories to parse",
    )
    parser.add_argument(
        "-i", "--ignore",
        nargs="+",
        default=[],
        type=Path,
        help="Directories to ignore",
    )
    parser.add_argument(
        "-b", "--blocksize",
        type=str.upper,
        choices=list(BLOCKSIZES),
        default=DEFAULT_BLOCKSIZE,
        help="Display sizes in Bytes, Kilobytes, Megabytes or Gigabytes (default: M)",
    )
    parser.add_argument(
        "-v", "--verbosity",
        type=str.lower,
        choices=VERBOSITIES,
        default="quiet",
        help="Sets verbosity for printed output (default: quiet)",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default="Results.txt",
        help="File to save all output to. Use 'no' for no file output (default: Results.txt)",
    )
    parser.add_argument(
        "-f", "--format",
        type=str.lower,
        choices=FORMATS,
        default="standard",
        help="Output format (default: standard)",
    )
    parser.add_argument(
        "-m", "--minimum",
        type=_min_size_arg,
        default=0,
        help="Minimum file size in bytes to consider (default: 0)",
    )
    parser.add_argument(
        "-w", "--workers",
        type=_workers_arg,
        help="Manual override for hashing worker count",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Do not show progress bars",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_arguments(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(message)s')
    elif args.format == "json":
        logging.basicConfig(level=logging.ERROR, format='%(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(message)s')

    try:
        records, errors = deduplicate_dirs(
            args.directories,
            ignore_dirs=args.ignore,
            min_size=args.minimum,
            quiet=args.no_progress,
            max_workers=args.workers,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    shared, unique = partition_records(records)

    print(format_summary(records, shared, unique, args.blocksize))

    output = format_output(records, shared, unique, errors, args.format, args.verbosity)
    if output:
        print(output)

    if args.output.lower() == "no":
        return

    content = format_results_file(records, shared, unique, args.format)
    try:
        written = write_results_to_file(Path(args.output), content)
    except OSError as e:
        print(f"Error encountered opening file {args.output}. Err: {e}", file=sys.stderr)
        sys.exit(1)

    if written:
        print(f"{args.format.capitalize()} results written to {args.output}")


if __name__ == "__main__":
    main()
