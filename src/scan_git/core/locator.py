"""Locate a repository's git metadata starting from any path."""

import os
import stat
from pathlib import Path
from typing import Optional, Union

from scan_git.core.errors import MalformedMetadataError
from scan_git.logger import get_logger
from scan_git.models.location import GitLocation

logger = get_logger(__name__)

GIT_DIR_NAME = ".git"
GITDIR_PREFIX = "gitdir: "


def locate_git_dir(
    start_path: Union[str, Path], detect_parents: bool = True
) -> Optional[GitLocation]:
    """Find the git metadata store for ``start_path``.

    Args:
        start_path: Any path inside (or at the root of) a working tree
        detect_parents: Keep searching parent directories until the
            filesystem root when ``start_path`` has no ``.git`` entry

    Returns:
        The located metadata store, or None if there is none

    Raises:
        MalformedMetadataError: If a ``.git`` file has no ``gitdir:`` line
        OSError: On any filesystem error other than a missing entry
    """
    candidate = Path(os.path.abspath(start_path))
    if detect_parents and candidate.is_file():
        candidate = candidate.parent

    while True:
        entry = candidate / GIT_DIR_NAME
        entry_stat = _stat_entry(entry)
        if entry_stat is not None:
            break
        if not detect_parents or candidate.parent == candidate:
            return None
        candidate = candidate.parent

    if stat.S_ISDIR(entry_stat.st_mode):
        return GitLocation(git_dir=entry, work_tree=candidate)

    return GitLocation(
        git_dir=_read_gitdir_file(entry, candidate),
        work_tree=candidate,
        is_linked=True,
    )


def _stat_entry(entry: Path) -> Optional[os.stat_result]:
    """Stat a ``.git`` entry, returning None when it does not exist."""
    try:
        return os.stat(entry)
    except (FileNotFoundError, NotADirectoryError):
        return None


def _read_gitdir_file(entry: Path, work_tree: Path) -> Path:
    """Resolve the ``gitdir:`` reference held by a ``.git`` file."""
    content = entry.read_text(encoding="utf-8")
    if not content.startswith(GITDIR_PREFIX):
        raise MalformedMetadataError(
            f"{entry} has no '{GITDIR_PREFIX.strip()}' prefix"
        )

    target = content[len(GITDIR_PREFIX) :].split("\n", 1)[0].strip()
    if not target:
        raise MalformedMetadataError(f"{entry} references an empty gitdir")

    if os.path.isabs(target):
        logger.debug("dotGit: %s", target)
        return Path(target)

    logger.debug("dotGit: %s/%s", work_tree, target)
    return Path(os.path.normpath(work_tree / target))
