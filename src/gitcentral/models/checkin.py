"""Data models for commits and checkins."""

from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

WORK_ITEM_ACTIONS = ("associate", "resolve")


class CommitNode(BaseModel):
    """A single commit queued for replay."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(..., description="Full commit SHA hash")
    mainline_parent_hash: str = Field(..., description="First-parent hash along the replayed chain")
    extra_parent_hashes: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Parents merged in from side branches",
    )
    raw_message: str = Field("", description="Commit message, trimmed")

    @property
    def short_hash(self) -> str:
        """First 8 characters of the commit hash."""
        return self.hash[:8]


class CheckinConfig(BaseModel):
    """Options applied to a remote checkin.

    Instances are immutable. The per-commit configuration is produced with
    ``model_copy`` from a baseline, so the baseline is never touched.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "comment_override": "Fix authentication bug",
                "generate_comment": True,
                "allow_merge": True,
                "force": False,
                "force_reason": None,
                "override_gated_checkin": False,
                "work_items_to_associate": ["12345"],
                "work_items_to_resolve": [],
            }
        },
    )

    comment_override: Optional[str] = Field(None, description="Checkin comment to use verbatim")
    generate_comment: bool = Field(True, description="Generate a comment when none is given")
    allow_merge: bool = Field(True, description="Allow checking in merge commits")
    force: bool = Field(False, description="Override checkin policies")
    force_reason: Optional[str] = Field(None, description="Reason recorded for a policy override")
    override_gated_checkin: bool = Field(False, description="Bypass gated checkin on the server")
    work_items_to_associate: FrozenSet[str] = Field(
        default_factory=frozenset, description="Work item ids to associate"
    )
    work_items_to_resolve: FrozenSet[str] = Field(
        default_factory=frozenset, description="Work item ids to resolve"
    )

    def with_work_item(self, item_id: str, action: str = "associate") -> "CheckinConfig":
        """Return a copy with one more work item attached.

        Args:
            item_id: Work item id
            action: ``associate`` or ``resolve``

        Returns:
            New CheckinConfig

        Raises:
            ValueError: If the action is unknown
        """
        if action not in WORK_ITEM_ACTIONS:
            raise ValueError(f"Unknown work item action: {action}")

        field = f"work_items_to_{action}"
        return self.model_copy(update={field: getattr(self, field) | {item_id}})


class ChangesetResult(BaseModel):
    """Outcome of one replayed commit."""

    model_config = ConfigDict(frozen=True)

    changeset_id: int = Field(..., description="Changeset id assigned by the server")
    resulting_commit_hash: Optional[str] = Field(
        None, description="Local commit mirroring the new changeset; None until it is fetched back"
    )
    source_commit_hash: str = Field(..., description="Local commit that was checked in")
