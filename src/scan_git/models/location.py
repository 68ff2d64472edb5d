"""Location of a repository's metadata store on disk."""

from pathlib import Path

from pydantic import BaseModel


class GitLocation(BaseModel):
    """Where a working tree keeps its git metadata."""

    git_dir: Path
    work_tree: Path
    is_linked: bool = False  # Reached through a ``.git`` file (worktree/submodule)

    model_config = {"frozen": True}
