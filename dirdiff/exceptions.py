"""Exception hierarchy."""


class DirDiffError(Exception):
    """Base exception for all dirdiff errors."""


class ConfigurationError(DirDiffError):
    """Invalid scan configuration; raised before any traversal starts."""
