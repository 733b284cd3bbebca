"""
Scan configuration and precondition checks.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parse_min_size(value) -> int:
    """
    Parse a minimum file size in bytes.

    Args:
        value: Non-negative int, or a string of decimal digits

    Returns:
        The size as int

    Raises:
        ConfigurationError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Minimum size must be a non-negative integer, got {value!r}")
    if isinstance(value, int):
        size = value
    elif isinstance(value, str) and value.strip().isdecimal():
        size = int(value.strip())
    else:
        raise ConfigurationError(f"Minimum size must be a non-negative integer, got {value!r}")
    if size < 0:
        raise ConfigurationError(f"Minimum size must be a non-negative integer, got {value!r}")
    return size


def is_within(path: Path, parent: Path) -> bool:
    """True if path is parent itself or lies anywhere below it."""
    return path == parent or parent in path.parents


def _drop_nested(roots: List[Path]) -> List[Path]:
    """Remove repeated roots and roots contained in another root, keeping order."""
    kept = []
    for root in roots:
        if any(other != root and is_within(root, other) for other in roots):
            logger.debug("Skipping root %s: already covered by another root", root)
            continue
        if root not in kept:
            kept.append(root)
    return kept


@dataclass
class ScanConfig:
    """
    Everything a deduplication run needs to know.

    Attributes:
        directories: Roots to scan, in order
        ignore_dirs: Directories whose subtrees are skipped
        min_size: Files smaller than this many bytes are not considered
        max_workers: Hashing pool size (None picks one from the CPU count)
    """
    directories: Sequence[PathLike]
    ignore_dirs: Sequence[PathLike] = field(default_factory=list)
    min_size: Union[int, str] = 0
    max_workers: Optional[int] = None

    def validate(self) -> "ScanConfig":
        """
        Check preconditions and return a normalised copy.

        Roots and ignore entries come back as resolved absolute paths, roots
        nested in other roots are dropped and min_size is an int.

        Raises:
            ConfigurationError: On a missing or unreadable root, an invalid
                minimum size or an invalid worker count
        """
        if not self.directories:
            raise ConfigurationError("At least one directory to scan is required")

        min_size = parse_min_size(self.min_size)

        if self.max_workers is not None and (
            isinstance(self.max_workers, bool) or not isinstance(self.max_workers, int) or self.max_workers < 1
        ):
            raise ConfigurationError(f"Worker count must be a positive integer, got {self.max_workers!r}")

        roots = []
        for directory in self.directories:
            path = Path(directory).expanduser()
            if not path.exists():
                raise ConfigurationError(f"Directory '{directory}' does not exist")
            if not path.is_dir():
                raise ConfigurationError(f"Path '{directory}' is not a directory")
            if not os.access(path, os.R_OK | os.X_OK):
                raise ConfigurationError(f"Directory '{directory}' is not readable")
            roots.append(path.resolve())

        ignores = [Path(d).expanduser().resolve() for d in self.ignore_dirs]

        return replace(
            self,
            directories=_drop_nested(roots),
            ignore_dirs=ignores,
            min_size=min_size,
        )
