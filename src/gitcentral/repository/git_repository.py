"""GitPython-backed local repository."""

from pathlib import Path
from typing import List, Optional

import git
import structlog
from git import Repo

from gitcentral.exceptions import RepositoryError
from gitcentral.models import RemoteIdentity, SyncCursor
from gitcentral.patterns import CHANGESET_TRAILER_PATTERN
from gitcentral.repository.base import LocalRepository, RevisionWithParents

logger = structlog.get_logger(__name__)


def format_changeset_trailer(url: str, repository_path: str, changeset_id: int) -> str:
    """Build the trailer line marking a commit as the mirror of a changeset.

    Args:
        url: Server URL
        repository_path: Repository path on the server
        changeset_id: Changeset id

    Returns:
        Trailer line, e.g. ``gitcentral-id: [https://server]$/project;C42``
    """
    return f"gitcentral-id: [{url}]{repository_path};C{changeset_id}"


class GitRepository(LocalRepository):
    """Local repository operations implemented with GitPython."""

    def __init__(self, repo_path: Path) -> None:
        """Open the repository.

        Args:
            repo_path: Path to the Git repository

        Raises:
            ValueError: If repository path is invalid
        """
        self.repo_path = Path(repo_path)
        if not self.repo_path.exists():
            raise ValueError(f"Repository path does not exist: {self.repo_path}")

        try:
            self.repo = Repo(self.repo_path)
        except git.exc.InvalidGitRepositoryError as e:
            raise ValueError(f"Invalid Git repository: {self.repo_path}") from e

    def has_uncommitted_changes(self) -> bool:
        # Untracked files are ignored.
        return self.repo.is_dirty(index=True, working_tree=True, untracked_files=False)

    def resolve_range(
        self,
        lower: str,
        upper: str,
        limit: Optional[int] = None,
    ) -> List[RevisionWithParents]:
        # --max-count would apply before --reverse, so the limit is applied afterwards
        try:
            output = self.repo.git.rev_list(
                "--parents",
                "--ancestry-path",
                "--first-parent",
                "--reverse",
                f"{lower}..{upper}",
            )
        except git.GitCommandError as e:
            raise RepositoryError(f"Could not list commits in {lower}..{upper}: {e}") from e

        entries: List[RevisionWithParents] = []
        for line in output.splitlines():
            parts = line.split()
            if not parts:
                continue
            entries.append((parts[0], parts[1:]))
            if limit is not None and len(entries) >= limit:
                break

        logger.debug("resolved_range", lower=lower, upper=upper, count=len(entries))
        return entries

    def commit_message(self, commit_hash: str, parent_hash: str) -> str:
        try:
            return self.repo.commit(commit_hash).message
        except (git.exc.BadName, ValueError) as e:
            raise RepositoryError(f"Commit not found: {commit_hash}") from e

    def rebase_onto(self, new_base: str, old_base: str) -> None:
        logger.info("rebasing_tail", new_base=new_base, old_base=old_base)
        try:
            self.repo.git.rebase("--rebase-merges", "--onto", new_base, old_base)
        except git.GitCommandError as e:
            raise RepositoryError(f"Rebase onto {new_base} failed: {e}").with_recommendation(
                "Resolve the conflicts, run 'git rebase --continue' and checkin again."
            ) from e

    def unreachable_commits(self, rev: str, excluded: str) -> List[str]:
        try:
            output = self.repo.git.rev_list(rev, f"^{excluded}")
        except git.GitCommandError as e:
            raise RepositoryError(f"Could not compare {rev} with {excluded}: {e}") from e
        return [line.strip() for line in output.splitlines() if line.strip()]

    def resolve_rev(self, rev: str) -> str:
        try:
            return self.repo.commit(rev).hexsha
        except (git.exc.BadName, ValueError) as e:
            raise RepositoryError(f"Revision not found: {rev}") from e

    def find_last_synced(self, rev: str = "HEAD", remote_id: str = "default") -> Optional[SyncCursor]:
        try:
            commits = self.repo.iter_commits(rev, first_parent=True)
            for commit in commits:
                match = CHANGESET_TRAILER_PATTERN.search(commit.message)
                if match is None:
                    continue

                logger.debug(
                    "found_synced_commit",
                    commit=commit.hexsha,
                    changeset_id=match.group("changeset_id"),
                )
                return SyncCursor(
                    remote_changeset_id=int(match.group("changeset_id")),
                    local_commit_hash=commit.hexsha,
                    remote=RemoteIdentity(
                        remote_id=remote_id,
                        url=match.group("url") or None,
                        repository_path=match.group("path") or None,
                    ),
                )
        except (git.exc.BadName, git.GitCommandError, ValueError) as e:
            raise RepositoryError(f"Could not read history of {rev}: {e}") from e

        return None
