"""Tests for the GitPython-backed object reader."""

from pathlib import Path

import pytest
from git import Repo

from scan_git.core.errors import ObjectReadError
from scan_git.core.locator import locate_git_dir
from scan_git.core.object_reader import ObjectGraphReader


@pytest.fixture
def reader(git_repo):
    location = locate_git_dir(git_repo.working_tree_dir)
    reader = ObjectGraphReader(location)
    yield reader
    reader.close()


def test_unborn_head(reader):
    """Test that a fresh repository has no HEAD commit."""
    assert reader.head_sha() is None


def test_dangling_head_raises(reader, git_repo, make_commit):
    """Test that a branch pointing at a missing object is not mistaken for unborn."""
    make_commit({"README.md": "# Project\n"}, when=1000)
    branch_ref = Path(git_repo.git_dir) / git_repo.head.reference.path
    branch_ref.write_text("1234567890" * 4 + "\n")

    with pytest.raises(ObjectReadError):
        reader.head_sha()


def test_detached_head(reader, git_repo, make_commit):
    """Test that a detached HEAD resolves to its commit."""
    commit = make_commit({"README.md": "# Project\n"}, when=1000)
    git_repo.head.reference = commit

    assert reader.head_sha() == commit.hexsha


def test_head_and_commit_record(reader, make_commit):
    """Test copying commit fields out of the object database."""
    root = make_commit({"README.md": "# Project\n"}, when=1000, message="Initial commit")
    child = make_commit({"deploy.yaml": "kind: Deployment\n"}, when=2000, message="Add deploy")

    assert reader.head_sha() == child.hexsha

    record = reader.commit(child.hexsha)
    assert record.sha == child.hexsha
    assert record.author_name == "Test User"
    assert record.author_email == "test@example.com"
    assert record.authored_date == 2000
    assert record.authored_datetime.timestamp() == 2000
    assert record.message == "Add deploy"
    assert record.parents == (root.hexsha,)
    assert record.tree_sha == child.tree.hexsha
    assert not record.is_merge

    assert reader.commit(root.hexsha).parents == ()


def test_tree(reader, make_commit):
    """Test reading a tree object by sha."""
    commit = make_commit(
        {"charts/app/values.yaml": "replicas: 1\n", "README.md": "# Project\n"},
        when=1000,
    )

    tree = reader.tree(commit.tree.hexsha)

    assert tree.hexsha == commit.tree.hexsha
    assert {item.path for item in tree} == {"README.md", "charts"}


def test_unknown_commit_raises(reader, make_commit):
    """Test that a missing commit is a read error."""
    make_commit({"README.md": "# Project\n"}, when=1000)

    with pytest.raises(ObjectReadError):
        reader.commit("0" * 40)


def test_unknown_tree_raises(reader, make_commit):
    """Test that a missing tree is a read error."""
    make_commit({"README.md": "# Project\n"}, when=1000)

    with pytest.raises(ObjectReadError):
        reader.tree("1" * 40)


def test_shallow_boundary_has_no_parents(git_repo, make_commit, temp_dir):
    """Test that the boundary of a shallow clone reads as a root commit."""
    make_commit({"a.yaml": "a\n"}, when=1000)
    head = make_commit({"b.yaml": "b\n"}, when=2000)
    clone = Repo.clone_from(f"file://{git_repo.working_tree_dir}", temp_dir / "shallow", depth=1)
    clone.close()

    reader = ObjectGraphReader(locate_git_dir(temp_dir / "shallow"))

    assert reader.shallow_commits() == {head.hexsha}
    assert reader.commit(head.hexsha).parents == ()
    reader.close()


def test_full_clone_is_not_shallow(reader, make_commit):
    """Test that a complete repository has no shallow boundary."""
    make_commit({"a.yaml": "a\n"}, when=1000)

    assert reader.shallow_commits() == frozenset()


def test_branch_name(reader, git_repo, make_commit):
    """Test the checked-out branch name."""
    make_commit({"README.md": "# Project\n"}, when=1000)

    assert reader.branch_name() == git_repo.active_branch.name


def test_branch_name_detached(reader, git_repo, make_commit):
    """Test that a detached HEAD has no branch name."""
    commit = make_commit({"README.md": "# Project\n"}, when=1000)
    git_repo.head.reference = commit

    assert reader.branch_name() == ""


def test_remote_url(reader, git_repo, make_commit):
    """Test remote preference: any remote, then origin."""
    make_commit({"README.md": "# Project\n"}, when=1000)
    assert reader.remote_url() == ""

    git_repo.create_remote("upstream", "https://example.com/upstream.git")
    assert reader.remote_url() == "https://example.com/upstream.git"

    git_repo.create_remote("origin", "https://example.com/origin.git")
    assert reader.remote_url() == "https://example.com/origin.git"


def test_missing_object_store(temp_dir):
    """Test that a gitdir pointing nowhere fails on first use."""
    checkout = temp_dir / "checkout"
    checkout.mkdir()
    (checkout / ".git").write_text("gitdir: ../missing\n")
    reader = ObjectGraphReader(locate_git_dir(checkout))

    with pytest.raises(ObjectReadError):
        reader.head_sha()


def test_close_is_idempotent(reader, make_commit):
    """Test that closing twice is harmless and the reader reopens on demand."""
    make_commit({"README.md": "# Project\n"}, when=1000)
    reader.head_sha()

    reader.close()
    reader.close()

    assert Path(reader.repo.git_dir).name == ".git"
