"""Replay engine - checks in local commits one by one.

A run moves through ``IDLE -> VALIDATING -> REPLAYING`` and ends in
``SUCCEEDED`` or ``FAILED``. Checkins completed before a failure stay on the
remote; nothing is rolled back.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional, Set

import structlog
from pydantic import BaseModel, Field
from rich.console import Console

from gitcentral.exceptions import Errors, GitCentralError, PreconditionError, Recommendations
from gitcentral.models import ChangesetResult, CheckinConfig, CommitNode, SyncCursor
from gitcentral.remote.base import RemoteConnector
from gitcentral.replay.directives import DirectiveParser
from gitcentral.replay.guard import ConsistencyGuard
from gitcentral.replay.messages import Messages
from gitcentral.replay.resolver import CommitRangeResolver
from gitcentral.repository.base import LocalRepository

logger = structlog.get_logger(__name__)


class ReplayState(str, Enum):
    """States of a replay run."""

    IDLE = "idle"
    VALIDATING = "validating"
    REPLAYING = "replaying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ReplayResult(BaseModel):
    """Result of a successful replay run."""

    state: ReplayState = Field(..., description="Final state of the run")
    cursor: SyncCursor = Field(..., description="Cursor after the last checkin")
    changesets: List[ChangesetResult] = Field(default_factory=list, description="Changesets created, oldest first")


CheckinRecorder = Callable[[ChangesetResult, Optional[SyncCursor]], None]


class ReplayStrategy(ABC):
    """A way of walking the commit range and checking each commit in."""

    def __init__(
        self,
        repository: LocalRepository,
        remote: RemoteConnector,
        guard: ConsistencyGuard,
        parser: DirectiveParser,
        resolver: CommitRangeResolver,
        console: Console,
        record: Optional[CheckinRecorder] = None,
    ) -> None:
        self.repository = repository
        self.remote = remote
        self.guard = guard
        self.parser = parser
        self.resolver = resolver
        self.console = console
        self.record = record
        self._replayed: Set[str] = set()

    @abstractmethod
    def replay(self, cursor: SyncCursor, tip: str) -> SyncCursor:
        """Check in every commit after ``cursor`` up to ``tip``.

        Args:
            cursor: Cursor positioned on the latest remote commit
            tip: Revision to replay up to

        Returns:
            Cursor after the last checkin
        """
        pass

    def checkin_commit(self, node: CommitNode, cursor: SyncCursor) -> SyncCursor:
        """Check in a single commit and fold the result back into local history.

        The changeset is recorded as soon as the remote accepts it, so a
        failure in the merge-fetch or the postcondition still reports it.
        The cursor only advances once both succeed.

        Returns:
            Cursor pointing at the new changeset

        Raises:
            ConcurrentChangesetError: If someone else checked in meanwhile
        """
        if node.hash in self._replayed:
            raise GitCentralError(f"Commit {node.hash} was already checked in during this run")

        config = self.parser.derive(node.raw_message)
        self.emit(Messages.STARTING_CHECKIN_0_1.format(node.short_hash, config.comment_override))

        changeset_id = self.remote.checkin(node.hash, node.mainline_parent_hash, cursor, config)
        self._replayed.add(node.hash)
        self._record(ChangesetResult(changeset_id=changeset_id, source_commit_hash=node.hash))

        self.remote.fetch_with_merge(changeset_id, node.extra_parent_hashes)
        self.guard.check_postcondition(changeset_id)

        new_cursor = cursor.advance(changeset_id, self.remote.max_commit_hash)
        logger.info(
            "commit_checked_in",
            commit=node.hash,
            changeset_id=changeset_id,
            merged_parents=len(node.extra_parent_hashes),
        )
        self._record(
            ChangesetResult(
                changeset_id=changeset_id,
                resulting_commit_hash=new_cursor.local_commit_hash,
                source_commit_hash=node.hash,
            ),
            new_cursor,
        )
        return new_cursor

    def emit(self, message: str) -> None:
        """Print a progress line verbatim."""
        self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def _record(self, result: ChangesetResult, cursor: Optional[SyncCursor] = None) -> None:
        if self.record is not None:
            self.record(result, cursor)


class QuickReplay(ReplayStrategy):
    """Plans the whole range up front and never rebases.

    Faster, but relies on nobody changing the local branch during the run.
    """

    def replay(self, cursor: SyncCursor, tip: str) -> SyncCursor:
        plan = self.resolver.resolve(cursor.local_commit_hash, tip)
        logger.info("replay_plan", commits=len(plan), mode="quick")

        for node in plan:
            cursor = self.checkin_commit(node, cursor)
            self.emit(Messages.DONE_WITH_0.format(node.hash))

        self.emit(Messages.NO_MORE)
        return cursor


class SafeReplay(ReplayStrategy):
    """Checks in one commit at a time and rebases the rest onto the result."""

    def replay(self, cursor: SyncCursor, tip: str) -> SyncCursor:
        while True:
            node = self.resolver.next_commit(cursor.local_commit_hash, tip)
            if node is None:
                self.emit(Messages.NO_MORE)
                return cursor

            cursor = self.checkin_commit(node, cursor)
            self.emit(Messages.DONE_WITH_0_REBASING.format(node.hash))

            self.repository.rebase_onto(cursor.local_commit_hash, node.hash)
            self.emit(Messages.REBASE_DONE)


class ReplayEngine:
    """Replays local commits as remote checkins.

    Coordinates the consistency guard, the commit range resolver and the
    directive parser through one of two strategies: safe (default) or quick.
    """

    def __init__(
        self,
        repository: LocalRepository,
        remote: RemoteConnector,
        baseline: Optional[CheckinConfig] = None,
        quick: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize the replay engine.

        Args:
            repository: Local repository
            remote: Remote connector
            baseline: Checkin options shared by all commits
            quick: Use quick mode (no rebase between checkins)
            console: Rich console for progress output (optional)
        """
        self.repository = repository
        self.remote = remote
        self.quick = quick
        self.console = console or Console()
        self.guard = ConsistencyGuard(repository, remote, self.console)
        self.parser = DirectiveParser(baseline or CheckinConfig())
        self.resolver = CommitRangeResolver(repository)

        self.state = ReplayState.IDLE
        self.cursor: Optional[SyncCursor] = None
        self.changesets: List[ChangesetResult] = []

    def create_strategy(self) -> ReplayStrategy:
        """Build the strategy selected for this run."""
        strategy_class = QuickReplay if self.quick else SafeReplay
        return strategy_class(
            self.repository,
            self.remote,
            self.guard,
            self.parser,
            self.resolver,
            self.console,
            record=self._record,
        )

    def run(self, cursor: SyncCursor, tip: str = "HEAD") -> ReplayResult:
        """Replay every commit after ``cursor`` up to ``tip``.

        Quick mode pins ``tip`` to the commit it resolves to when the run
        starts. Safe mode rebases the branch after every checkin and re-reads
        ``tip`` each time, so ``tip`` must be symbolic (``HEAD`` or a branch
        name); a commit hash would be orphaned by the first rebase and is
        rejected before anything is sent to the remote.

        Args:
            cursor: Last synchronized changeset
            tip: Revision to replay up to

        Returns:
            ReplayResult in the SUCCEEDED state

        Raises:
            PreconditionError: If the run cannot start
            ConcurrentChangesetError: If someone else checked in during the run
            Exception: Any error raised by the repository or the remote, unchanged
        """
        if self.state is not ReplayState.IDLE:
            raise RuntimeError(f"Replay already ran (state: {self.state.value})")

        self.cursor = cursor
        self._transition(ReplayState.VALIDATING)
        try:
            tip = self._resolve_tip(tip)
            remote_latest = self.guard.check_preconditions(cursor, tip)
            cursor = cursor.model_copy(update={"local_commit_hash": remote_latest})
            self.cursor = cursor

            self._transition(ReplayState.REPLAYING)
            cursor = self.create_strategy().replay(cursor, tip)
        except Exception:
            self._transition(ReplayState.FAILED)
            raise

        self._transition(ReplayState.SUCCEEDED)
        return ReplayResult(state=self.state, cursor=cursor, changesets=list(self.changesets))

    def _resolve_tip(self, tip: str) -> str:
        commit_hash = self.repository.resolve_rev(tip)
        if self.quick:
            logger.debug("tip_pinned", tip=tip, commit=commit_hash)
            return commit_hash

        if commit_hash.startswith(tip.lower()):
            raise PreconditionError(Errors.TIP_MUST_BE_SYMBOLIC).with_recommendation(
                Recommendations.TRY_QUICK_OR_BRANCH
            )
        return tip

    def _record(self, result: ChangesetResult, cursor: Optional[SyncCursor]) -> None:
        # A completed checkin replaces the entry recorded when the remote accepted it.
        if self.changesets and self.changesets[-1].changeset_id == result.changeset_id:
            self.changesets[-1] = result
        else:
            self.changesets.append(result)
        if cursor is not None:
            self.cursor = cursor

    def _transition(self, state: ReplayState) -> None:
        logger.debug("replay_state", previous=self.state.value, state=state.value)
        self.state = state
