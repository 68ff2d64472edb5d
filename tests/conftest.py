"""Shared fixtures for scan-git tests."""

import tempfile
from pathlib import Path

import pytest
from git import Actor, Repo

AUTHOR = Actor("Test User", "test@example.com")


@pytest.fixture
def temp_dir():
    """A temporary directory that is not a git repository."""
    with tempfile.TemporaryDirectory() as temp:
        yield Path(temp)


@pytest.fixture
def git_repo(temp_dir):
    """Create an empty git repository with a configured user."""
    repo_path = temp_dir / "repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    with repo.config_writer() as config:
        config.set_value("user", "name", AUTHOR.name)
        config.set_value("user", "email", AUTHOR.email)

    yield repo
    repo.close()


@pytest.fixture
def make_commit(git_repo):
    """Return a helper that writes files and commits them at a fixed time.

    The helper removes ``removed`` paths, stages ``files`` (path -> content)
    on top of the current index, and commits with author and committer
    dates set to the ``when`` epoch. ``parents`` and ``head`` are passed to
    GitPython so side branches and merges can be built without checkouts.
    """
    root = Path(git_repo.working_tree_dir)

    def _make_commit(files, when, message=None, parents=None, head=True, removed=()):
        if removed:
            git_repo.index.remove(list(removed), working_tree=True, f=True)
        for rel_path, content in files.items():
            target = root / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        if files:
            git_repo.index.add(list(files))

        date = f"{when} +0000"
        return git_repo.index.commit(
            message or f"commit at {when}",
            parent_commits=parents,
            head=head,
            author=AUTHOR,
            committer=AUTHOR,
            author_date=date,
            commit_date=date,
        )

    return _make_commit
