"""Local git repository handle used to annotate scan results."""

import os
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, Optional, Union

from scan_git.core.attribution import AttributionEngine, IndexState, to_commit_view
from scan_git.core.errors import NoAttributionError, ObjectReadError, RepositoryNotFoundError
from scan_git.core.locator import locate_git_dir
from scan_git.core.object_reader import ObjectGraphReader
from scan_git.models.commit import CommitView
from scan_git.models.location import GitLocation


class LocalGitRepository:
    """A located git repository and its cached file attributions.

    The handle is cheap to create; the full-history pass only runs on the
    first ``last_commit_for`` call and its result is kept for the lifetime
    of the handle. Later changes to the repository are not picked up.
    """

    def __init__(self, path: Union[str, Path], detect_parents: bool = True):
        location = locate_git_dir(path, detect_parents=detect_parents)
        if location is None:
            raise RepositoryNotFoundError(path)
        self.location: GitLocation = location
        self._reader = ObjectGraphReader(location)
        self._engine = AttributionEngine(self._reader)

    def __enter__(self) -> "LocalGitRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def root_dir(self) -> Path:
        """Root of the working tree."""
        return self.location.work_tree

    @property
    def git_dir(self) -> Path:
        """The repository's metadata store."""
        return self.location.git_dir

    @property
    def branch_name(self) -> str:
        return self._reader.branch_name()

    @property
    def remote_url(self) -> str:
        return self._reader.remote_url()

    @property
    def index_state(self) -> IndexState:
        return self._engine.state

    @property
    def attribution_builds(self) -> int:
        """How many times the full-history pass has started."""
        return self._engine.build_count

    @property
    def is_unborn(self) -> bool:
        """True while HEAD names a branch without any commits."""
        return self._reader.head_sha() is None

    def last_commit(self) -> CommitView:
        """The commit HEAD points to."""
        head = self._reader.head_sha()
        if head is None:
            raise ObjectReadError(f"HEAD of {self.git_dir} does not point to a commit")
        return to_commit_view(self._reader.commit(head))

    def last_commit_for(self, file_path: Union[str, Path]) -> CommitView:
        """Get the last non-merge commit that changed ``file_path``.

        Args:
            file_path: Path relative to the work tree root, or an absolute
                path inside it

        Raises:
            NoAttributionError: If no non-merge commit touched the path
            ObjectReadError: If history could not be read
        """
        return self._engine.last_commit_for(self.relative_path(file_path))

    def last_commits_for(
        self, file_paths: Iterable[Union[str, Path]]
    ) -> Dict[str, Optional[CommitView]]:
        """Look up several paths, mapping unattributed ones to None."""
        results: Dict[str, Optional[CommitView]] = {}
        for file_path in file_paths:
            try:
                results[str(file_path)] = self.last_commit_for(file_path)
            except NoAttributionError:
                results[str(file_path)] = None
        return results

    def relative_path(self, file_path: Union[str, Path]) -> str:
        """Normalise a path to git's ``/``-separated form relative to the root."""
        path = Path(file_path)
        if path.is_absolute():
            root = os.path.abspath(self.root_dir)
            try:
                path = Path(os.path.relpath(os.path.abspath(path), root))
            except ValueError:
                # Different drive on Windows
                return path.as_posix()
        return str(PurePosixPath(*path.parts)) if path.parts else ""

    def close(self) -> None:
        """Release the underlying object database."""
        self._reader.close()
