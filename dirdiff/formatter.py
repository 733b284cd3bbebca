"""
Output formatting for deduplication results.
"""

import json
import logging
from pathlib import Path
from typing import Callable, Dict, List, Sequence, Tuple

from .models import ErrorRecord, Fileinfo

logger = logging.getLogger(__name__)

# Display unit -> (label, divisor)
BLOCKSIZES: Dict[str, Tuple[str, int]] = {
    "B": ("Bytes", 1),
    "K": ("Kilobytes", 1024),
    "M": ("Megabytes", 1024 ** 2),
    "G": ("Gigabytes", 1024 ** 3),
}
DEFAULT_BLOCKSIZE = "M"

FORMATS = ("standard", "json")
VERBOSITIES = ("quiet", "duplicates", "all")


def _blocksize(blocksize: str) -> Tuple[str, int]:
    return BLOCKSIZES.get(blocksize.upper(), BLOCKSIZES[DEFAULT_BLOCKSIZE])


def format_summary(
    records: Sequence[Fileinfo],
    shared: Sequence[Fileinfo],
    unique: Sequence[Fileinfo],
    blocksize: str = DEFAULT_BLOCKSIZE,
) -> str:
    """
    Build the four-line summary of a run.

    Sizes are whole multiples of the chosen unit, rounded down.
    """
    label, divisor = _blocksize(blocksize)

    total_instances = sum(len(r.paths) for r in records)
    total_size = sum(len(r.paths) * r.length for r in records)
    distinct_size = sum(r.length for r in records)
    unique_size = sum(r.length for r in unique)
    shared_size = sum(r.length for r in shared)
    shared_instances = sum(len(r.paths) for r in shared)

    lines = [
        f"{total_instances} Total files (with duplicates): {total_size // divisor} {label}",
        f"{len(records)} Total files (without duplicates): {distinct_size // divisor} {label}",
        f"{len(unique)} Single instance files: {unique_size // divisor} {label}",
        f"{len(shared)} Shared instance files: {shared_size // divisor} {label} ({shared_instances} instances)",
    ]
    return "\n".join(lines)


def format_json(records: Sequence[Fileinfo]) -> str:
    return json.dumps([record.to_dict() for record in records], indent=2)


def _format_shared_groups(shared: Sequence[Fileinfo]) -> List[str]:
    lines = ["Shared instance files and instance locations"]
    for record in shared:
        lines.append(f"instances of {record.representative_name} with file length {record.length}:")
        lines.extend(f"\t{path}" for path in record.paths)
    return lines


def format_output(
    records: Sequence[Fileinfo],
    shared: Sequence[Fileinfo],
    unique: Sequence[Fileinfo],
    errors: Sequence[ErrorRecord],
    fmt: str = "standard",
    verbosity: str = "quiet",
) -> str:
    """
    Render the detailed listing for the terminal.

    Args:
        records: Every content-identity record
        shared: Records with two or more paths
        unique: Records with one path
        errors: Paths that could not be processed
        fmt: "standard" or "json"
        verbosity: "quiet" (nothing), "duplicates" or "all"

    Returns:
        Text to print, empty for quiet verbosity
    """
    if verbosity == "quiet":
        return ""

    if fmt == "json":
        return format_json(shared if verbosity == "duplicates" else records)

    lines = []
    if verbosity == "all":
        lines.append("Single instance files")
        lines.extend(str(record.paths[0]) for record in unique)

    lines.extend(_format_shared_groups(shared))

    if verbosity == "all":
        for error in errors:
            lines.append(f"Could not process {error.path} due to error {error.kind}")

    return "\n".join(lines)


def format_results_file(
    records: Sequence[Fileinfo],
    shared: Sequence[Fileinfo],
    unique: Sequence[Fileinfo],
    fmt: str = "standard",
) -> str:
    """Render the full results written to the output file."""
    if fmt == "json":
        return format_json(records)

    lines = ["Duplicates:"]
    for record in shared:
        lines.append(record.representative_name)
        lines.extend(f"\t{path}" for path in record.paths)
    lines.append("Singletons:")
    for record in unique:
        lines.append(record.representative_name)
        lines.extend(f"\t{path}" for path in record.paths)
    return "\n".join(lines) + "\n"


def write_results_to_file(
    destination: Path,
    content: str,
    confirm: Callable[[str], str] = input,
) -> bool:
    """
    Write results, asking before an existing file is replaced.

    Args:
        destination: Output file path
        content: Text to write
        confirm: Prompt function returning the user's answer

    Returns:
        True if the file was written

    Raises:
        OSError: If the file cannot be written
    """
    destination = Path(destination)
    if destination.exists():
        print("---")
        print(f"File {destination} already exists.")
        try:
            answer = confirm("Overwrite? Y/N ")
        except EOFError:
            answer = ""
        if answer.strip()[:1] not in ("y", "Y"):
            print("Exiting.")
            return False
        print(f"Over writing {destination}")

    destination.write_text(content, encoding="utf-8")
    logger.debug("Wrote %d bytes to %s", len(content), destination)
    return True
