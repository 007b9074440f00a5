"""Directives embedded in commit messages.

A commit message may carry special lines that are consumed before the message
is used as the checkin comment:

    work item 12345:associate
    work item 678:resolve
    force: reviewed by the release manager

Work item lines attach work items to the checkin. A single ``force:`` line
overrides checkin policies with the given reason.
"""

from typing import Tuple

import structlog

from gitcentral.models import CheckinConfig
from gitcentral.patterns import FORCE_PATTERN, WORK_ITEM_OPTION_PATTERN, WORK_ITEM_PATTERN

logger = structlog.get_logger(__name__)

TRIM_CHARS = " \r\n"


def derive(baseline: CheckinConfig, raw_message: str) -> CheckinConfig:
    """Build the checkin configuration for a single commit.

    Args:
        baseline: Configuration supplied by the caller; never modified
        raw_message: Commit message of the commit being checked in

    Returns:
        New CheckinConfig with the stripped message as comment
    """
    config = baseline.model_copy(update={"comment_override": raw_message})
    config = _apply_work_item_directives(config)
    config = _apply_force_directive(config)
    return config


def _apply_work_item_directives(config: CheckinConfig) -> CheckinConfig:
    comment = config.comment_override or ""
    matches = list(WORK_ITEM_PATTERN.finditer(comment))
    if not matches:
        return config

    to_associate = set(config.work_items_to_associate)
    to_resolve = set(config.work_items_to_resolve)
    for match in matches:
        action = match.group("action").lower()
        if action == "associate":
            to_associate.add(match.group("item_id"))
        elif action == "resolve":
            to_resolve.add(match.group("item_id"))

    logger.debug(
        "work_item_directives",
        associate=sorted(to_associate),
        resolve=sorted(to_resolve),
    )
    return config.model_copy(
        update={
            "comment_override": WORK_ITEM_PATTERN.sub("", comment).strip(TRIM_CHARS),
            "work_items_to_associate": frozenset(to_associate),
            "work_items_to_resolve": frozenset(to_resolve),
        }
    )


def _apply_force_directive(config: CheckinConfig) -> CheckinConfig:
    comment = config.comment_override or ""
    matches = list(FORCE_PATTERN.finditer(comment))
    # Only a single force line is honored.
    if len(matches) != 1:
        if matches:
            logger.warning("force_directive_ignored", count=len(matches))
        return config

    update = {"comment_override": FORCE_PATTERN.sub("", comment).strip(TRIM_CHARS)}
    reason = matches[0].group("reason")
    if reason.strip():
        update["force"] = True
        update["force_reason"] = reason
    return config.model_copy(update=update)


def parse_work_item_option(value: str) -> Tuple[str, str]:
    """Parse a ``--work-item`` option value.

    Args:
        value: ``<id>`` or ``<id>:associate`` or ``<id>:resolve``

    Returns:
        Tuple of (item_id, action)

    Raises:
        ValueError: If the value is malformed
    """
    match = WORK_ITEM_OPTION_PATTERN.match(value.strip())
    if match is None:
        raise ValueError(f"Invalid work item: {value!r} (expected ID[:associate|resolve])")
    return match.group("item_id"), match.group("action") or "associate"


class DirectiveParser:
    """Derives per-commit checkin configurations from one baseline."""

    def __init__(self, baseline: CheckinConfig) -> None:
        self.baseline = baseline

    def derive(self, raw_message: str) -> CheckinConfig:
        """Derive the configuration for a commit message."""
        return derive(self.baseline, raw_message)
