"""Exceptions raised by the scan-git core."""


class ScanGitError(Exception):
    """Base class for all scan-git errors."""


class RepositoryNotFoundError(ScanGitError):
    """No git metadata could be located for a path."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"No git repository found at {path}")


class MalformedMetadataError(ScanGitError):
    """A ``.git`` file does not hold a valid ``gitdir:`` reference."""


class ObjectReadError(ScanGitError):
    """The object database failed to resolve a commit or tree."""


class NoAttributionError(ScanGitError):
    """No non-merge commit ever touched the requested path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"failed to get commit information for file: {path}")


class ConfigError(ScanGitError):
    """The configuration file could not be loaded."""
