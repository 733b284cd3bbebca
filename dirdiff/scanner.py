"""
Directory scanning functionality.
"""

import errno
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from tqdm import tqdm

from .config import is_within
from .errors import make_error_record
from .models import Candidate, ErrorRecord

logger = logging.getLogger(__name__)


class ScanResult:
    """Container for scan results and per-path errors."""

    def __init__(self):
        self.candidates: List[Candidate] = []
        self.errors: List[ErrorRecord] = []
        self.skipped_items: Dict[str, int] = {
            'ignored_dirs': 0,
            'symlinks': 0,
            'below_min_size': 0,
            'special_files': 0,
        }

    def merge(self, other: "ScanResult") -> None:
        """Append another worker's results after this one's."""
        self.candidates.extend(other.candidates)
        self.errors.extend(other.errors)
        for item_type, count in other.skipped_items.items():
            self.skipped_items[item_type] = self.skipped_items.get(item_type, 0) + count


def _is_ignored(path: Path, ignore_dirs: Sequence[Path]) -> bool:
    return any(is_within(path, ignored) for ignored in ignore_dirs)


def scan_tree(
    root: Path,
    ignore_dirs: Sequence[Path] = (),
    min_size: int = 0,
    pbar: Optional[tqdm] = None,
) -> ScanResult:
    """
    Walk one directory tree depth-first and collect candidate files.

    Entries are visited in name order. Symbolic links are never followed,
    so the walk cannot loop.

    Args:
        root: Resolved directory to walk
        ignore_dirs: Resolved directories whose subtrees are skipped
        min_size: Files smaller than this are dropped silently
        pbar: Optional progress bar updated with the number of entries seen

    Returns:
        ScanResult with this tree's candidates and errors
    """
    result = ScanResult()

    if _is_ignored(root, ignore_dirs):
        logger.debug("Skipping ignored root %s", root)
        result.skipped_items['ignored_dirs'] += 1
        return result

    stack = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            result.errors.append(make_error_record(current, e))
            continue

        subdirs = []
        for entry in entries:
            subdir = _process_entry(entry, result, ignore_dirs, min_size)
            if subdir is not None:
                subdirs.append(subdir)

        # Reversed so the first subdirectory by name is walked first
        stack.extend(reversed(subdirs))

        if pbar is not None:
            pbar.update(len(entries))

    return result


def _process_entry(
    entry: os.DirEntry,
    result: ScanResult,
    ignore_dirs: Sequence[Path],
    min_size: int,
) -> Optional[Path]:
    """
    Classify a single directory entry.

    Returns:
        The entry's path if it is a subdirectory to descend into, else None
    """
    path = Path(entry.path)
    try:
        if entry.is_symlink():
            result.skipped_items['symlinks'] += 1
            return None

        if entry.is_dir(follow_symlinks=False):
            if _is_ignored(path, ignore_dirs):
                logger.debug("Skipping ignored directory %s", path)
                result.skipped_items['ignored_dirs'] += 1
                return None
            return path

        if entry.is_file(follow_symlinks=False):
            size = entry.stat(follow_symlinks=False).st_size
            if size < min_size:
                result.skipped_items['below_min_size'] += 1
            elif not os.access(entry.path, os.R_OK):
                denied = PermissionError(errno.EACCES, os.strerror(errno.EACCES), entry.path)
                result.errors.append(make_error_record(path, denied))
            else:
                result.candidates.append(Candidate(path, size))
            return None

        # Sockets, FIFOs and device nodes
        result.skipped_items['special_files'] += 1

    except OSError as e:
        result.errors.append(make_error_record(path, e))

    return None


def scan_directories(
    directories: Sequence[Path],
    ignore_dirs: Sequence[Path] = (),
    min_size: int = 0,
    quiet: bool = True,
    max_workers: Optional[int] = None,
) -> ScanResult:
    """
    Scan several roots in parallel, one worker per root.

    Each worker fills its own ScanResult; the results are concatenated in
    root order once every worker has finished.

    Args:
        directories: Resolved, non-overlapping roots
        ignore_dirs: Resolved directories whose subtrees are skipped
        min_size: Minimum file size in bytes
        quiet: Suppress the progress bar
        max_workers: Maximum number of walker threads

    Returns:
        Combined ScanResult
    """
    combined = ScanResult()
    if not directories:
        return combined

    workers = max(1, min(len(directories), max_workers or len(directories)))
    logger.debug("Scanning %d root(s) with %d worker(s)", len(directories), workers)

    with tqdm(desc="Scanning", unit=" items", leave=False, disable=quiet) as pbar:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(scan_tree, root, ignore_dirs, min_size, pbar)
                for root in directories
            ]
            for future in futures:
                combined.merge(future.result())

    logger.debug(
        "Scan found %d candidates, %d errors, skipped %s",
        len(combined.candidates), len(combined.errors), combined.skipped_items,
    )
    return combined
