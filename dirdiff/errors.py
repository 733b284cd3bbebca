"""
Collection of per-path failures gathered while scanning and hashing.
"""

import errno
import logging
from pathlib import Path
from typing import Dict, Iterable, List

from .models import ErrorRecord

logger = logging.getLogger(__name__)

_MAX_WARNINGS_PER_KIND = 5

_ERRNO_KINDS = {
    errno.EACCES: "PermissionDenied",
    errno.EPERM: "PermissionDenied",
    errno.ENOENT: "NotFound",
    errno.ENOTDIR: "NotADirectory",
    errno.EISDIR: "IsADirectory",
    errno.EINTR: "Interrupted",
    errno.ETIMEDOUT: "TimedOut",
    errno.ELOOP: "FilesystemLoop",
    errno.ENAMETOOLONG: "InvalidFilename",
}


def error_kind(exc: OSError) -> str:
    """Map an OSError onto a stable error-kind name."""
    if isinstance(exc, PermissionError):
        return "PermissionDenied"
    if isinstance(exc, FileNotFoundError):
        return "NotFound"
    if isinstance(exc, NotADirectoryError):
        return "NotADirectory"
    if isinstance(exc, IsADirectoryError):
        return "IsADirectory"
    return _ERRNO_KINDS.get(exc.errno, "Other")


def make_error_record(path: Path, exc: OSError) -> ErrorRecord:
    return ErrorRecord(path, error_kind(exc), exc.strerror or str(exc))


class ErrorCollector:
    """
    Append-only accumulator of error records, one per failing path.

    Workers build their own local lists of ErrorRecord; the collector is fed
    from a single thread at each join point, so it needs no locking.
    """

    def __init__(self):
        self._records: List[ErrorRecord] = []
        self._seen = set()
        self._counts: Dict[str, int] = {}

    @property
    def records(self) -> List[ErrorRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def record(self, path: Path, exc: OSError) -> None:
        self.add(make_error_record(path, exc))

    def add(self, error: ErrorRecord) -> None:
        # The first failure seen for a path is the one reported
        if error.path in self._seen:
            return
        self._seen.add(error.path)
        self._records.append(error)
        self._log_warning(error)

    def extend(self, errors: Iterable[ErrorRecord]) -> None:
        for error in errors:
            self.add(error)

    def summary(self) -> Dict[str, int]:
        """Number of failing paths per error kind."""
        return dict(self._counts)

    def _log_warning(self, error: ErrorRecord) -> None:
        """Log with rate limiting per kind to avoid spam."""
        count = self._counts.get(error.kind, 0)
        self._counts[error.kind] = count + 1

        if count < _MAX_WARNINGS_PER_KIND:
            logger.warning("Could not process %s (%s: %s)", error.path, error.kind, error.message)
        elif count == _MAX_WARNINGS_PER_KIND:
            logger.warning("%s: additional warnings suppressed...", error.kind)
