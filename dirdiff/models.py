"""
Data model for scan candidates, content-identity records and error records.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NamedTuple, Optional


class Candidate(NamedTuple):
    """A discovered regular file that passed the ignore and size filters."""
    path: Path
    length: int


class ErrorRecord(NamedTuple):
    """A path that could not be processed and why."""
    path: Path
    kind: str
    message: str = ""


@dataclass
class Fileinfo:
    """
    One distinct file content and every path holding it.

    Attributes:
        length: Size of the content in bytes
        paths: Owning paths in discovery order
        full_hash: Hex SHA-256 digest, or None when the file was unique by size
    """
    length: int
    paths: List[Path] = field(default_factory=list)
    full_hash: Optional[str] = None

    @property
    def representative_name(self) -> str:
        """Display name taken from the first owning path."""
        if not self.paths:
            return ""
        return self.paths[0].name

    def to_dict(self) -> dict:
        return {
            "length": self.length,
            "representative_name": self.representative_name,
            "full_hash": self.full_hash,
            "paths": [str(p) for p in self.paths],
        }
