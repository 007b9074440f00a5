"""Replay of local commits as remote checkins.

This package walks the first-parent chain between the last synchronized
commit and the tip, derives checkin options from each commit message, and
checks each commit in while guarding against concurrent remote changes.
"""

from gitcentral.replay.directives import DirectiveParser, derive, parse_work_item_option
from gitcentral.replay.engine import (
    QuickReplay,
    ReplayEngine,
    ReplayResult,
    ReplayState,
    ReplayStrategy,
    SafeReplay,
)
from gitcentral.replay.guard import ConsistencyGuard
from gitcentral.replay.messages import Messages
from gitcentral.replay.resolver import CommitRangeResolver

__all__ = [
    "DirectiveParser",
    "derive",
    "parse_work_item_option",
    "CommitRangeResolver",
    "ConsistencyGuard",
    "Messages",
    "ReplayEngine",
    "ReplayResult",
    "ReplayState",
    "ReplayStrategy",
    "QuickReplay",
    "SafeReplay",
]
