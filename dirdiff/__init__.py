"""
dirdiff - compare directory trees and find files with identical content.
"""

import logging

from .config import ScanConfig
from .detector import deduplicate_dirs, partition_records
from .exceptions import ConfigurationError, DirDiffError
from .models import Candidate, ErrorRecord, Fileinfo

__version__ = "1.0.0"

__all__ = [
    "Candidate",
    "ConfigurationError",
    "DirDiffError",
    "ErrorRecord",
    "Fileinfo",
    "ScanConfig",
    "deduplicate_dirs",
    "partition_records",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
