"""
File content hashing for duplicate detection.
"""

import hashlib
from pathlib import Path

CHUNK_SIZE = 65536


def calculate_file_hash(file_path: Path) -> str:
    """
    Calculate the SHA256 hash of a file's full content.

    Args:
        file_path: Path to the file

    Returns:
        Hex string of the digest

    Raises:
        OSError: If the file cannot be opened or a read fails partway
    """
    sha256_hash = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            sha256_hash.update(chunk)
    return sha256_hash.hexdigest()
