"""
Duplicate file detection: size grouping, content hashing and merge.
"""

import logging
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import ScanConfig
from .errors import ErrorCollector
from .models import Candidate, ErrorRecord, Fileinfo
from .parallel_hasher import parallel_hash_files
from .scanner import scan_directories

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def group_by_size(candidates: Iterable[Candidate]) -> Dict[int, List[Path]]:
    """Bucket candidate paths by byte length, keeping discovery order."""
    size_to_files = defaultdict(list)
    for candidate in candidates:
        size_to_files[candidate.length].append(candidate.path)
    return dict(size_to_files)


def merge_records(
    size_to_files: Dict[int, List[Path]],
    hashes: Dict[Path, str],
) -> List[Fileinfo]:
    """
    Merge size buckets and content hashes into content-identity records.

    The merge key is (length, hash). Buckets with one member are keyed
    (length, None) and never need a hash. Members of larger buckets that have
    no hash (their read failed) are left out. Buckets are visited in
    ascending length and paths in discovery order, so the output does not
    depend on how hashing work was scheduled.

    Args:
        size_to_files: length -> paths
        hashes: path -> hex digest for members of multi-file buckets

    Returns:
        One Fileinfo per distinct content
    """
    records: Dict[Tuple[int, Optional[str]], Fileinfo] = {}

    for size in sorted(size_to_files):
        file_group = size_to_files[size]
        if len(file_group) == 1:
            key = (size, None)
            records[key] = Fileinfo(length=size, paths=[file_group[0]])
            continue

        for file_path in file_group:
            full_hash = hashes.get(file_path)
            if full_hash is None:
                continue
            key = (size, full_hash)
            if key not in records:
                records[key] = Fileinfo(length=size, full_hash=full_hash)
            records[key].paths.append(file_path)

    return list(records.values())


def partition_records(records: Iterable[Fileinfo]) -> Tuple[List[Fileinfo], List[Fileinfo]]:
    """
    Split records into (shared, unique).

    Shared records have two or more paths, unique records exactly one.
    """
    shared = []
    unique = []
    for record in records:
        if len(record.paths) > 1:
            shared.append(record)
        else:
            unique.append(record)
    return shared, unique


def deduplicate_dirs(
    directories: Sequence[PathLike],
    ignore_dirs: Sequence[PathLike] = (),
    min_size: Union[int, str] = 0,
    quiet: bool = True,
    max_workers: Optional[int] = None,
) -> Tuple[List[Fileinfo], List[ErrorRecord]]:
    """
    Find every distinct file content under the given directories.

    Stage 1: Walk the roots and collect candidates
    Stage 2: Group candidates by file size
    Stage 3: Full hash for files that share their size with another file
    Stage 4: Merge into content-identity records

    Per-path failures never abort the run; they are returned as error
    records and the affected paths appear in no content-identity record.

    Args:
        directories: Roots to scan, in order
        ignore_dirs: Directories whose subtrees are skipped
        min_size: Minimum file size in bytes
        quiet: Suppress progress bars
        max_workers: Hashing pool size (None for auto)

    Returns:
        Tuple of (records, errors)

    Raises:
        ConfigurationError: If a root is missing or unreadable, or min_size
            is not a non-negative integer
    """
    config = ScanConfig(
        directories=directories,
        ignore_dirs=ignore_dirs,
        min_size=min_size,
        max_workers=max_workers,
    ).validate()

    errors = ErrorCollector()

    logger.info("Scanning %s", ", ".join(str(d) for d in config.directories))
    scan = scan_directories(
        config.directories,
        ignore_dirs=config.ignore_dirs,
        min_size=config.min_size,
        quiet=quiet,
    )
    errors.extend(scan.errors)

    size_to_files = group_by_size(scan.candidates)
    files_to_hash = [f for group in size_to_files.values() if len(group) > 1 for f in group]

    logger.info("Found %d files in %d distinct sizes", len(scan.candidates), len(size_to_files))
    logger.info("%d files need content comparison", len(files_to_hash))

    hashes, hash_errors = parallel_hash_files(
        files_to_hash,
        desc="Hashing",
        quiet=quiet,
        max_workers=config.max_workers,
    )
    errors.extend(hash_errors)

    records = merge_records(size_to_files, hashes)

    if errors:
        logger.info("%d paths could not be processed", len(errors))

    return records, errors.records
