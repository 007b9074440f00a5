"""Data models for commit replay."""

from gitcentral.models.checkin import ChangesetResult, CheckinConfig, CommitNode
from gitcentral.models.cursor import RemoteIdentity, SyncCursor

__all__ = [
    "CheckinConfig",
    "CommitNode",
    "ChangesetResult",
    "RemoteIdentity",
    "SyncCursor",
]
