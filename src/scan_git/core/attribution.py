"""Map every path in a repository's history to the commit that last changed it."""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from scan_git.core.errors import NoAttributionError, ObjectReadError
from scan_git.core.history import HistoryWalker
from scan_git.core.object_reader import CommitRecord, ObjectGraphReader
from scan_git.core.tree_diff import diff_trees
from scan_git.logger import get_logger
from scan_git.models.commit import CommitView

logger = get_logger(__name__)


class IndexState(str, Enum):
    """Lifecycle of an attribution index."""

    UNINDEXED = "unindexed"
    INDEXING = "indexing"
    INDEXED = "indexed"
    FAILED = "failed"


@dataclass(frozen=True)
class Attribution:
    """The winning commit for one path."""

    path: str
    commit: CommitRecord

    @property
    def authored_date(self) -> int:
        return self.commit.authored_date


def to_commit_view(commit: CommitRecord) -> CommitView:
    """Convert an internal commit record to the public view."""
    return CommitView(
        sha=commit.sha,
        author_name=commit.author_name,
        author_email=commit.author_email,
        author_date=commit.authored_datetime,
        message=commit.message,
    )


def build_attribution_index(
    reader: ObjectGraphReader, walker: Optional[HistoryWalker] = None
) -> Dict[str, Attribution]:
    """Attribute every path touched by a non-merge commit reachable from HEAD.

    Merge commits are skipped entirely. For the others, each path in the
    diff against the single parent (or every path, for a root commit) is a
    candidate. A candidate replaces the recorded one only when its author
    date is strictly later, so on equal dates the commit met first in walk
    order is kept.
    """
    walker = walker or HistoryWalker(reader)
    index: Dict[str, Attribution] = {}
    commits = 0
    merges = 0

    for commit in walker.walk(reader.head_sha()):
        commits += 1
        if commit.is_merge:
            merges += 1
            continue

        parent_tree = None
        if commit.parents:
            parent_tree = reader.commit(commit.parents[0]).tree_sha

        for change in diff_trees(reader, parent_tree, commit.tree_sha):
            # A rename changes both its old and its new path
            paths = (change.old_path, change.path) if change.old_path else (change.path,)
            for path in paths:
                current = index.get(path)
                if current is None or current.authored_date < commit.authored_date:
                    index[path] = Attribution(path=path, commit=commit)

    logger.debug(
        "Attributed %d paths from %d commits (%d merges skipped)",
        len(index),
        commits,
        merges,
    )
    return index


class AttributionEngine:
    """Lazily built, per-handle cache of path attributions.

    The index is built in full on the first lookup and then reused. The
    build runs at most once: concurrent first lookups wait on a lock, and
    a failed build is remembered, and every later lookup raises an
    ObjectReadError chained to the original failure.
    """

    def __init__(self, reader: ObjectGraphReader):
        self.reader = reader
        self.state = IndexState.UNINDEXED
        self.build_count = 0
        self._index: Optional[Dict[str, Attribution]] = None
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()

    def last_commit_for(self, path: str) -> CommitView:
        """Return the last non-merge commit that changed ``path``.

        Args:
            path: File path relative to the repository root, ``/`` separated

        Raises:
            NoAttributionError: If no non-merge commit touched the path
            ObjectReadError: If the index could not be built
        """
        attribution = self.index().get(path)
        if attribution is None:
            raise NoAttributionError(path)
        return to_commit_view(attribution.commit)

    def index(self) -> Dict[str, Attribution]:
        """Get the attribution index, building it on first use."""
        index = self._index
        if index is not None:
            return index

        with self._lock:
            if self._index is not None:
                return self._index
            if self._error is not None:
                raise ObjectReadError(
                    f"Attribution index unavailable after a failed build: {self._error}"
                ) from self._error

            self.state = IndexState.INDEXING
            self.build_count += 1
            logger.debug("Building attribution index for %s", self.reader.location.git_dir)
            try:
                index = build_attribution_index(self.reader)
            except Exception as e:
                self.state = IndexState.FAILED
                self._error = e
                logger.error("Failed to build attribution index: %s", e)
                raise

            self._index = index
            self.state = IndexState.INDEXED
            return index
