"""Checks that keep the local and remote histories consistent during replay."""

from typing import Optional

import structlog
from rich.console import Console

from gitcentral.exceptions import (
    ConcurrentChangesetError,
    Errors,
    LocalChangesError,
    NotAncestorError,
    Recommendations,
    UpstreamChangesError,
)
from gitcentral.models import SyncCursor
from gitcentral.remote.base import RemoteConnector
from gitcentral.replay.messages import Messages
from gitcentral.repository.base import LocalRepository

logger = structlog.get_logger(__name__)


class ConsistencyGuard:
    """Validates the run before the first checkin and after every checkin.

    The remote offers no locking, so concurrent checkins by other parties are
    detected after the fact by comparing changeset ids.
    """

    def __init__(
        self,
        repository: LocalRepository,
        remote: RemoteConnector,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize the guard.

        Args:
            repository: Local repository
            remote: Remote connector
            console: Rich console for progress output (optional)
        """
        self.repository = repository
        self.remote = remote
        self.console = console or Console()

    def check_preconditions(self, cursor: SyncCursor, tip: str = "HEAD") -> str:
        """Verify that replay can start from ``cursor``.

        Args:
            cursor: Last synchronized changeset
            tip: Revision to replay up to

        Returns:
            Hash of the local commit mirroring the latest remote changeset

        Raises:
            LocalChangesError: If the working tree is dirty
            UpstreamChangesError: If the remote moved past the cursor
            NotAncestorError: If the latest remote commit is not an ancestor of ``tip``
        """
        if self.repository.has_uncommitted_changes():
            raise LocalChangesError(Errors.LOCAL_CHANGES).with_recommendation(
                Recommendations.TRY_STASH
            )

        self.console.print(Messages.FETCHING_CHANGES, markup=False, highlight=False, soft_wrap=True)
        self.remote.fetch()
        max_changeset_id = self.remote.max_changeset_id
        if cursor.remote_changeset_id != max_changeset_id:
            logger.warning(
                "upstream_changes",
                cursor_changeset=cursor.remote_changeset_id,
                remote_changeset=max_changeset_id,
            )
            raise UpstreamChangesError(Errors.NEW_UPSTREAM_CHANGES).with_recommendation(
                Recommendations.TRY_REBASE
            )

        remote_latest = self.remote.max_commit_hash
        diverged = self.repository.unreachable_commits(remote_latest, tip)
        if diverged:
            logger.warning("remote_not_ancestor", remote_commit=remote_latest, diverged=len(diverged))
            raise NotAncestorError(
                Errors.LATEST_REMOTE_COMMIT_MUST_BE_A_PARENT_OF_HEAD
            ).with_recommendation(Recommendations.TRY_REBASE)

        logger.debug("preconditions_passed", changeset=max_changeset_id, remote_commit=remote_latest)
        return remote_latest

    def check_postcondition(self, changeset_id: int) -> None:
        """Verify that no one else checked in alongside ``changeset_id``.

        Raises:
            ConcurrentChangesetError: If the remote's latest changeset differs
        """
        max_changeset_id = self.remote.max_changeset_id
        if max_changeset_id != changeset_id:
            logger.error(
                "concurrent_changesets",
                expected=changeset_id,
                found=max_changeset_id,
            )
            raise ConcurrentChangesetError(Errors.CONCURRENT_CHANGESETS)
