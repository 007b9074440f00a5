"""Synchronization cursor models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RemoteIdentity(BaseModel):
    """Identifies the centralized remote a cursor belongs to."""

    model_config = ConfigDict(frozen=True)

    remote_id: str = Field("default", description="Local name of the remote")
    url: Optional[str] = Field(None, description="Server URL")
    repository_path: Optional[str] = Field(None, description="Path of the repository on the server")


class SyncCursor(BaseModel):
    """Last remote changeset known to correspond to a local commit."""

    model_config = ConfigDict(frozen=True)

    remote_changeset_id: int = Field(..., description="Changeset id on the remote")
    local_commit_hash: str = Field(..., description="Local commit mirroring that changeset")
    remote: RemoteIdentity = Field(default_factory=RemoteIdentity, description="Remote handle")

    def advance(self, changeset_id: int, commit_hash: str) -> "SyncCursor":
        """Return the cursor that follows a successful checkin."""
        return SyncCursor(
            remote_changeset_id=changeset_id,
            local_commit_hash=commit_hash,
            remote=self.remote,
        )
