"""scan-git: attribute files to the commits that last changed them."""

from scan_git.core.errors import (
    MalformedMetadataError,
    NoAttributionError,
    ObjectReadError,
    RepositoryNotFoundError,
    ScanGitError,
)
from scan_git.core.locator import locate_git_dir
from scan_git.core.repository import LocalGitRepository
from scan_git.models import CommitView, GitLocation

__all__ = [
    "CommitView",
    "GitLocation",
    "LocalGitRepository",
    "MalformedMetadataError",
    "NoAttributionError",
    "ObjectReadError",
    "RepositoryNotFoundError",
    "ScanGitError",
    "locate_git_dir",
]
