"""
Parallel file hashing utilities for improved I/O performance.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from .errors import make_error_record
from .hasher import calculate_file_hash
from .models import ErrorRecord

logger = logging.getLogger(__name__)


def get_optimal_worker_count() -> int:
    """
    Determine the number of hashing threads from the CPU count.

    Hashing is mostly I/O bound, so twice the CPU count is used, capped at 16.
    """
    cpu_count = os.cpu_count() or 4
    return min(cpu_count * 2, 16)


def _hash_one(file_path: Path) -> Tuple[Path, Optional[str], Optional[ErrorRecord]]:
    try:
        return file_path, calculate_file_hash(file_path), None
    except OSError as e:
        return file_path, None, make_error_record(file_path, e)


def parallel_hash_files(
    files: Sequence[Path],
    desc: str = "Hashing files",
    quiet: bool = True,
    max_workers: Optional[int] = None,
) -> Tuple[Dict[Path, str], List[ErrorRecord]]:
    """
    Hash multiple files in parallel using ThreadPoolExecutor.

    A file that cannot be read is reported as an ErrorRecord and left out of
    the hash map; the other files are unaffected.

    Args:
        files: File paths to hash
        desc: Description for progress bar
        quiet: Suppress progress output
        max_workers: Maximum number of worker threads (None for auto)

    Returns:
        Tuple of (path -> hex digest, errors)
    """
    if not files:
        return {}, []

    if max_workers is None:
        max_workers = get_optimal_worker_count()

    hashes: Dict[Path, str] = {}
    errors: List[ErrorRecord] = []

    logger.debug("Hashing %d files with %d workers", len(files), max_workers)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_hash_one, file_path) for file_path in files]

        with tqdm(
            total=len(files),
            desc=desc,
            unit=" files",
            disable=quiet,
            leave=False
        ) as pbar:
            for future in as_completed(futures):
                file_path, hash_value, error = future.result()
                if error is not None:
                    errors.append(error)
                else:
                    hashes[file_path] = hash_value
                pbar.update(1)

    # as_completed order depends on thread timing
    order = {path: i for i, path in enumerate(files)}
    errors.sort(key=lambda e: order[e.path])

    return hashes, errors
