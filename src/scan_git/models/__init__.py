"""Data models for scan-git."""

from .change import Change, ChangeType
from .commit import CommitView
from .location import GitLocation

__all__ = ["Change", "ChangeType", "CommitView", "GitLocation"]
