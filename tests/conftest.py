"""Shared fixtures for gitcentral tests."""

import io
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import git
import pytest
import structlog
from rich.console import Console

from gitcentral.models import RemoteIdentity, SyncCursor
from gitcentral.remote import InMemoryRemote
from gitcentral.repository.base import LocalRepository, RevisionWithParents

CommitSpec = Tuple[str, Sequence[str], str]


class FakeRepository(LocalRepository):
    """Local repository holding a linear chain of commits in memory."""

    def __init__(
        self,
        commits: Optional[List[CommitSpec]] = None,
        base: str = "h0",
        dirty: bool = False,
        diverged: Optional[List[str]] = None,
    ) -> None:
        self.base = base
        self.commits = list(commits or [])
        self.dirty = dirty
        self.diverged = list(diverged or [])
        self.range_queries: List[Tuple[str, str, Optional[int]]] = []
        self.rebases: List[Tuple[str, str]] = []

    def has_uncommitted_changes(self) -> bool:
        return self.dirty

    def resolve_range(self, lower: str, upper: str, limit: Optional[int] = None) -> List[RevisionWithParents]:
        self.range_queries.append((lower, upper, limit))
        hashes = [self.base] + [commit_hash for commit_hash, _, _ in self.commits]
        if lower not in hashes:
            return []
        start = hashes.index(lower)
        entries = [(commit_hash, list(parents)) for commit_hash, parents, _ in self.commits[start:]]
        return entries[:limit] if limit is not None else entries

    def commit_message(self, commit_hash: str, parent_hash: str) -> str:
        for candidate, _, message in self.commits:
            if candidate == commit_hash:
                return message
        raise KeyError(commit_hash)

    def rebase_onto(self, new_base: str, old_base: str) -> None:
        self.rebases.append((new_base, old_base))

    def unreachable_commits(self, rev: str, excluded: str) -> List[str]:
        return list(self.diverged)

    def resolve_rev(self, rev: str) -> str:
        if rev == "HEAD":
            return self.commits[-1][0] if self.commits else self.base
        return rev

    def find_last_synced(self, rev: str = "HEAD", remote_id: str = "default") -> Optional[SyncCursor]:
        return SyncCursor(
            remote_changeset_id=10,
            local_commit_hash=self.base,
            remote=RemoteIdentity(remote_id=remote_id),
        )


class RacingRemote(InMemoryRemote):
    """In-memory remote where someone else checks in right after ``race_after``."""

    def __init__(self, cursor, repository=None, race_after=None):
        super().__init__(cursor, repository)
        self.race_after = race_after if race_after is not None else cursor.remote_changeset_id + 1

    def fetch_with_merge(self, changeset_id, extra_parent_hashes):
        super().fetch_with_merge(changeset_id, extra_parent_hashes)
        if changeset_id == self.race_after:
            self.inject_external_changeset()


def linear_commits(n: int) -> List[CommitSpec]:
    """Commits h1..hn, each on top of the previous one."""
    return [(f"h{i}", [f"h{i - 1}"], f"commit message for h{i}") for i in range(1, n + 1)]


@pytest.fixture
def cursor():
    """Cursor at changeset 10, mirrored by commit h0."""
    return SyncCursor(
        remote_changeset_id=10,
        local_commit_hash="h0",
        remote=RemoteIdentity(remote_id="default", url="https://tfs.example.com", repository_path="$/Project"),
    )


@pytest.fixture
def fake_repo():
    """Clean fake repository with two queued commits."""
    return FakeRepository(commits=linear_commits(2))


@pytest.fixture
def console():
    """Console writing plain text into a buffer."""
    return Console(file=io.StringIO(), width=200, color_system=None)


def output_lines(console: Console) -> List[str]:
    """Lines printed to a buffered console."""
    return console.file.getvalue().splitlines()


@pytest.fixture
def repo_factory():
    """Build FakeRepository instances."""
    return FakeRepository


@pytest.fixture
def make_commits():
    """Build linear commit chains."""
    return linear_commits


@pytest.fixture
def read_output():
    """Read the lines printed to a buffered console."""
    return output_lines


@pytest.fixture
def test_repo():
    """Create a temporary Git repository whose root commit mirrors changeset 42."""
    with tempfile.TemporaryDirectory() as tmpdir:
        repo_path = Path(tmpdir)
        repo = git.Repo.init(repo_path)

        # Configure git
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()

        # Commit mirroring the remote
        (repo_path / "README.md").write_text("# Test Project\n")
        repo.index.add(["README.md"])
        repo.index.commit("Import from server\n\ngitcentral-id: [https://tfs.example.com]$/Project;C42")

        # Local work on top of it
        (repo_path / "main.py").write_text("def hello():\n    print('Hello, World!')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Add main.py")

        (repo_path / "main.py").write_text("def hello():\n    print('Hello, remote!')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Fix: Update hello message\n\nwork item 7:resolve")

        yield repo_path


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI commands."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def racing_remote():
    """Build remotes that lose a race against a third-party checkin."""
    return RacingRemote
