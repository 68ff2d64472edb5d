"""Change model for tree-level differences between two commits."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ChangeType(str, Enum):
    """Classification of a path between a "from" tree and a "to" tree."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


class Change(BaseModel):
    """A single path changed between two trees."""

    path: str
    change_type: ChangeType
    old_path: Optional[str] = None  # Only set for renames
    old_sha: Optional[str] = None
    new_sha: Optional[str] = None

    model_config = {"frozen": True}
