"""Base class for local repositories."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from gitcentral.models import SyncCursor

RevisionWithParents = Tuple[str, List[str]]


class LocalRepository(ABC):
    """Abstract view of the local repository used during replay."""

    @abstractmethod
    def has_uncommitted_changes(self) -> bool:
        """Check whether the working tree or index holds uncommitted changes."""
        pass

    @abstractmethod
    def resolve_range(
        self,
        lower: str,
        upper: str,
        limit: Optional[int] = None,
    ) -> List[RevisionWithParents]:
        """List the first-parent ancestry path from ``lower`` to ``upper``.

        Args:
            lower: Exclusive lower bound
            upper: Inclusive upper bound
            limit: Return at most this many entries, oldest first

        Returns:
            List of (commit_hash, parent_hashes) ordered oldest first

        Raises:
            RepositoryError: If the underlying command fails
        """
        pass

    @abstractmethod
    def commit_message(self, commit_hash: str, parent_hash: str) -> str:
        """Get the message of ``commit_hash``.

        Args:
            commit_hash: Commit whose message is wanted
            parent_hash: Mainline parent the commit is replayed on top of

        Returns:
            Full commit message
        """
        pass

    @abstractmethod
    def rebase_onto(self, new_base: str, old_base: str) -> None:
        """Rebase the commits after ``old_base`` onto ``new_base``, keeping merges.

        Raises:
            RepositoryError: If the rebase fails
        """
        pass

    @abstractmethod
    def unreachable_commits(self, rev: str, excluded: str) -> List[str]:
        """List commits reachable from ``rev`` but not from ``excluded``."""
        pass

    @abstractmethod
    def resolve_rev(self, rev: str) -> str:
        """Resolve a revision to a full commit hash."""
        pass

    @abstractmethod
    def find_last_synced(self, rev: str = "HEAD", remote_id: str = "default") -> Optional[SyncCursor]:
        """Find the most recent first-parent ancestor that mirrors a remote changeset.

        Args:
            rev: Revision to search from
            remote_id: Name given to the remote in the returned cursor

        Returns:
            SyncCursor, or None if no ancestor mirrors a changeset
        """
        pass
