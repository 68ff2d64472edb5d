"""Tree-level diff between two commit snapshots."""

from typing import List, Optional

from scan_git.core.object_reader import ObjectGraphReader, reading_objects
from scan_git.models.change import Change, ChangeType

# git diff-tree status letters; type changes count as modifications
CHANGE_TYPES = {
    "A": ChangeType.ADDED,
    "D": ChangeType.DELETED,
    "R": ChangeType.RENAMED,
}


def diff_trees(
    reader: ObjectGraphReader,
    old_tree_sha: Optional[str],
    new_tree_sha: Optional[str],
    detect_renames: bool = True,
) -> List[Change]:
    """Diff two trees by sha.

    A missing side behaves like an empty tree, so diffing a root commit
    reports every path as added. Rename detection is git's own.

    Args:
        reader: Object reader of the repository both trees belong to
        old_tree_sha: The "from" tree, or None
        new_tree_sha: The "to" tree, or None
        detect_renames: Report renames instead of delete + add pairs

    Returns:
        Changes sorted by path
    """
    if old_tree_sha == new_tree_sha:
        return []
    if old_tree_sha is None:
        changes = _whole_tree(reader, new_tree_sha, ChangeType.ADDED)
    elif new_tree_sha is None:
        changes = _whole_tree(reader, old_tree_sha, ChangeType.DELETED)
    else:
        changes = _diff(reader, old_tree_sha, new_tree_sha, detect_renames)
    changes.sort(key=lambda change: change.path)
    return changes


def _whole_tree(reader: ObjectGraphReader, tree_sha: str, change_type: ChangeType) -> List[Change]:
    tree = reader.tree(tree_sha)
    changes = []
    with reading_objects(f"tree {tree_sha}"):
        for item in tree.traverse():
            if item.type == "tree":
                continue
            if change_type == ChangeType.ADDED:
                changes.append(Change(path=item.path, change_type=change_type, new_sha=item.hexsha))
            else:
                changes.append(Change(path=item.path, change_type=change_type, old_sha=item.hexsha))
    return changes


def _diff(
    reader: ObjectGraphReader, old_tree_sha: str, new_tree_sha: str, detect_renames: bool
) -> List[Change]:
    old_tree = reader.tree(old_tree_sha)
    new_tree = reader.tree(new_tree_sha)
    options = {} if detect_renames else {"no_renames": True}

    changes = []
    with reading_objects(f"diff {old_tree_sha}..{new_tree_sha}"):
        for diff in old_tree.diff(new_tree, **options):
            change_type = CHANGE_TYPES.get(diff.change_type, ChangeType.MODIFIED)
            changes.append(
                Change(
                    path=diff.b_path or diff.a_path,
                    change_type=change_type,
                    old_path=diff.a_path if change_type == ChangeType.RENAMED else None,
                    old_sha=diff.a_blob.hexsha if diff.a_blob is not None else None,
                    new_sha=diff.b_blob.hexsha if diff.b_blob is not None else None,
                )
            )
    return changes
