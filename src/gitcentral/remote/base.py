"""Base class for remote connectors."""

from abc import ABC, abstractmethod
from typing import Sequence

from gitcentral.models import CheckinConfig, SyncCursor


class RemoteConnector(ABC):
    """Abstract connection to the centralized remote server.

    Transport, authentication and timeouts belong to the implementation.
    Any failure is raised as an exception and ends the current replay.
    """

    @abstractmethod
    def fetch(self) -> None:
        """Bring the local mirror of the remote up to date."""
        pass

    @property
    @abstractmethod
    def max_changeset_id(self) -> int:
        """Highest changeset id currently on the remote."""
        pass

    @property
    @abstractmethod
    def max_commit_hash(self) -> str:
        """Local commit mirroring the highest known changeset."""
        pass

    @abstractmethod
    def checkin(
        self,
        commit_hash: str,
        parent_commit_hash: str,
        base: SyncCursor,
        config: CheckinConfig,
    ) -> int:
        """Check in the changes between ``parent_commit_hash`` and ``commit_hash``.

        Args:
            commit_hash: Local commit to check in
            parent_commit_hash: Local commit the changes are computed against
            base: Cursor the new changeset builds on
            config: Checkin options for this commit

        Returns:
            Id of the created changeset
        """
        pass

    @abstractmethod
    def fetch_with_merge(self, changeset_id: int, extra_parent_hashes: Sequence[str]) -> None:
        """Fetch up to ``changeset_id`` and merge side-branch parents into the mirror commit.

        Args:
            changeset_id: Changeset just created by ``checkin``
            extra_parent_hashes: Non-mainline parents of the checked-in commit
        """
        pass
