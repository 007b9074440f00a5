"""In-memory remote connector.

Keeps changesets in process memory and treats every checked-in commit as its
own mirror commit. Useful for rehearsing a replay without touching a server,
and for tests.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, Field

from gitcentral.exceptions import RemoteError
from gitcentral.models import CheckinConfig, SyncCursor
from gitcentral.remote.base import RemoteConnector
from gitcentral.repository.base import LocalRepository

logger = structlog.get_logger(__name__)


class CheckinRecord(BaseModel):
    """A changeset created on the in-memory remote."""

    changeset_id: int = Field(..., description="Assigned changeset id")
    commit_hash: str = Field(..., description="Local commit that was checked in")
    parent_commit_hash: str = Field(..., description="Local parent the changes were computed against")
    base_changeset_id: int = Field(..., description="Changeset the checkin was based on")
    comment: Optional[str] = Field(None, description="Checkin comment")
    config: CheckinConfig = Field(..., description="Options used for the checkin")
    merged_parents: Tuple[str, ...] = Field(default_factory=tuple, description="Side-branch parents merged in")


class InMemoryRemote(RemoteConnector):
    """Remote connector backed by a dictionary of changesets."""

    def __init__(self, cursor: SyncCursor, repository: Optional[LocalRepository] = None) -> None:
        """Start the remote at the changeset the cursor points to.

        Args:
            cursor: Last synchronized changeset
            repository: Local repository (unused, accepted for the connector factory signature)
        """
        self.identity = cursor.remote
        self.repository = repository
        self._max_changeset_id = cursor.remote_changeset_id
        self._max_commit_hash = cursor.local_commit_hash
        self.changesets: Dict[int, CheckinRecord] = {}
        self.fetch_count = 0

    @property
    def max_changeset_id(self) -> int:
        return self._max_changeset_id

    @property
    def max_commit_hash(self) -> str:
        return self._max_commit_hash

    @property
    def checkins(self) -> List[CheckinRecord]:
        """Changesets created through ``checkin``, oldest first."""
        return [self.changesets[key] for key in sorted(self.changesets)]

    def fetch(self) -> None:
        self.fetch_count += 1

    def checkin(
        self,
        commit_hash: str,
        parent_commit_hash: str,
        base: SyncCursor,
        config: CheckinConfig,
    ) -> int:
        if base.remote_changeset_id != self._max_changeset_id:
            raise RemoteError(
                f"Checkin of {commit_hash} is based on C{base.remote_changeset_id} "
                f"but the latest changeset is C{self._max_changeset_id}"
            )

        changeset_id = self._max_changeset_id + 1
        self.changesets[changeset_id] = CheckinRecord(
            changeset_id=changeset_id,
            commit_hash=commit_hash,
            parent_commit_hash=parent_commit_hash,
            base_changeset_id=base.remote_changeset_id,
            comment=config.comment_override,
            config=config,
        )
        self._max_changeset_id = changeset_id
        logger.info("changeset_created", changeset_id=changeset_id, commit=commit_hash)
        return changeset_id

    def fetch_with_merge(self, changeset_id: int, extra_parent_hashes: Sequence[str]) -> None:
        record = self.changesets.get(changeset_id)
        if record is None:
            raise RemoteError(f"Changeset C{changeset_id} does not exist")

        self.changesets[changeset_id] = record.model_copy(
            update={"merged_parents": tuple(extra_parent_hashes)}
        )
        self._max_commit_hash = record.commit_hash

    def inject_external_changeset(self) -> int:
        """Simulate a checkin made by someone else.

        Returns:
            Id of the injected changeset
        """
        self._max_changeset_id += 1
        logger.debug("external_changeset", changeset_id=self._max_changeset_id)
        return self._max_changeset_id
