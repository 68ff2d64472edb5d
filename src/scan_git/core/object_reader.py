"""Read-only access to commits and trees through GitPython."""

import contextlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, Iterator, Optional, Tuple

import git
from git import Repo, Tree
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, ODBError

from scan_git.core.errors import ObjectReadError
from scan_git.models.location import GitLocation


@dataclass(frozen=True)
class CommitRecord:
    """A commit copied out of the object database."""

    sha: str
    author_name: str
    author_email: str
    authored_date: int
    authored_datetime: datetime
    message: str
    parents: Tuple[str, ...]
    tree_sha: str

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1


@contextlib.contextmanager
def reading_objects(what: str) -> Iterator[None]:
    """Wrap object database failures in ObjectReadError."""
    try:
        yield
    except (ODBError, GitCommandError, ValueError) as e:
        raise ObjectReadError(f"Failed to read {what}: {e}") from e


class ObjectGraphReader:
    """Adapter over a GitPython repository opened at a located metadata store."""

    def __init__(self, location: GitLocation):
        self.location = location
        self._repo: Optional[Repo] = None
        self._shallow: Optional[FrozenSet[str]] = None

    @property
    def repo(self) -> Repo:
        """Get the GitPython repository, opening it on first use."""
        if self._repo is None:
            self._repo = self._open()
        return self._repo

    def _open(self) -> Repo:
        if not self.location.git_dir.is_dir():
            raise ObjectReadError(f"Git metadata {self.location.git_dir} does not exist")
        # Linked worktrees keep objects in the common dir; GitPython only
        # follows that indirection when opened from the work tree.
        if (self.location.git_dir / "objects").is_dir():
            path = self.location.git_dir
        else:
            path = self.location.work_tree
        try:
            return Repo(str(path))
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ObjectReadError(
                f"Cannot open git metadata at {self.location.git_dir}: {e}"
            ) from e

    def head_sha(self) -> Optional[str]:
        """Resolve HEAD to a commit sha, or None while HEAD is unborn.

        HEAD is unborn only when it names a branch that has no ref yet. A
        ref that exists but points at a missing object is a read failure.

        Raises:
            ObjectReadError: If HEAD cannot be resolved to a commit
        """
        head = self.repo.head
        with reading_objects("HEAD"):
            if not head.is_detached:
                branch_path = head.reference.path
                if branch_path not in {ref.path for ref in self.repo.refs}:
                    return None
            return head.commit.hexsha

    def shallow_commits(self) -> FrozenSet[str]:
        """Shas of the boundary commits of a shallow clone.

        Their parents are not in the object store, so git treats them as
        root commits.
        """
        if self._shallow is None:
            shallow_file = Path(self.repo.common_dir) / "shallow"
            try:
                self._shallow = frozenset(shallow_file.read_text().split())
            except FileNotFoundError:
                self._shallow = frozenset()
        return self._shallow

    def commit(self, sha: str) -> CommitRecord:
        """Read a commit by sha."""
        with reading_objects(f"commit {sha}"):
            commit = self.repo.commit(sha)
            if commit.hexsha in self.shallow_commits():
                parents: Tuple[str, ...] = ()
            else:
                parents = tuple(parent.hexsha for parent in commit.parents)
            return CommitRecord(
                sha=commit.hexsha,
                author_name=commit.author.name or "",
                author_email=commit.author.email or "",
                authored_date=commit.authored_date,
                authored_datetime=commit.authored_datetime,
                message=commit.message,
                parents=parents,
                tree_sha=commit.tree.hexsha,
            )

    def tree(self, tree_sha: str) -> Tree:
        """Read a tree object by sha."""
        with reading_objects(f"tree {tree_sha}"):
            return self.repo.tree(tree_sha)

    def branch_name(self) -> str:
        """Name of the checked-out branch, empty when HEAD is detached."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            # Detached HEAD
            return ""

    def remote_url(self) -> str:
        """URL of the current branch's remote, else origin, else any remote."""
        repo = self.repo
        remote = None

        branch = self.branch_name()
        if branch:
            with contextlib.suppress(git.exc.GitError, IndexError, ValueError):
                tracking = repo.heads[branch].tracking_branch()
                if tracking is not None:
                    remote = repo.remote(tracking.remote_name)

        if remote is None:
            names = [r.name for r in repo.remotes]
            if "origin" in names:
                remote = repo.remote("origin")
            elif names:
                remote = repo.remote(names[0])

        if remote is None:
            return ""
        return remote.url

    def close(self) -> None:
        """Release GitPython's helper processes."""
        if self._repo is not None:
            self._repo.close()
            self._repo = None
