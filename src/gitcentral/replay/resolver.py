"""Resolution of the commits to replay."""

from typing import List, Optional, Sequence

from gitcentral.models import CommitNode
from gitcentral.repository.base import LocalRepository, RevisionWithParents

TRIM_CHARS = " \r\n"


class CommitRangeResolver:
    """Turns a commit range into CommitNodes along the first-parent chain."""

    def __init__(self, repository: LocalRepository) -> None:
        """Initialize the resolver.

        Args:
            repository: Local repository to query
        """
        self.repository = repository

    def resolve(self, lower_exclusive: str, upper_inclusive: str) -> List[CommitNode]:
        """Read the whole range with a single query.

        Args:
            lower_exclusive: Last synchronized commit
            upper_inclusive: Replay tip

        Returns:
            CommitNodes ordered oldest first; empty when there is nothing to replay
        """
        entries = self.repository.resolve_range(lower_exclusive, upper_inclusive)
        return self._build_nodes(lower_exclusive, entries)

    def next_commit(self, lower_exclusive: str, upper_inclusive: str) -> Optional[CommitNode]:
        """Read only the first commit past ``lower_exclusive``.

        The repository is queried again on every call, so the result reflects
        any rewrite that happened since the previous call.

        Returns:
            The next CommitNode, or None when the range is exhausted
        """
        entries = self.repository.resolve_range(lower_exclusive, upper_inclusive, limit=1)
        nodes = self._build_nodes(lower_exclusive, entries[:1])
        return nodes[0] if nodes else None

    def _build_nodes(
        self, lower_exclusive: str, entries: Sequence[RevisionWithParents]
    ) -> List[CommitNode]:
        nodes = []
        current_parent = lower_exclusive
        for commit_hash, parent_hashes in entries:
            message = self.repository.commit_message(commit_hash, current_parent)
            nodes.append(
                CommitNode(
                    hash=commit_hash,
                    mainline_parent_hash=current_parent,
                    extra_parent_hashes=tuple(p for p in parent_hashes if p != current_parent),
                    raw_message=message.strip(TRIM_CHARS),
                )
            )
            current_parent = commit_hash
        return nodes
