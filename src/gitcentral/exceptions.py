"""Exceptions raised while replaying commits."""

from typing import List


class GitCentralError(Exception):
    """Base error carrying actionable recommendations for the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.recommendations: List[str] = []

    def with_recommendation(self, recommendation: str) -> "GitCentralError":
        """Attach a recommendation and return the error for raising."""
        self.recommendations.append(recommendation)
        return self


class PreconditionError(GitCentralError):
    """The run cannot start; nothing was sent to the remote."""


class LocalChangesError(PreconditionError):
    """The working tree has uncommitted changes."""


class UpstreamChangesError(PreconditionError):
    """The remote has changesets that are not known locally."""


class NotAncestorError(PreconditionError):
    """The latest remote commit is not an ancestor of the replay tip."""


class ConcurrentChangesetError(GitCentralError):
    """Another party checked in while this run was replaying.

    Checkins completed before the error are durable on the remote.
    """


class RepositoryError(GitCentralError):
    """A local git command failed."""


class ConnectorError(GitCentralError):
    """A remote connector could not be loaded."""


class RemoteError(GitCentralError):
    """The remote rejected or failed an operation."""


class Errors:
    """User-facing error messages."""

    LOCAL_CHANGES = (
        "error: You have local changes; rebase-workflow checkin only possible "
        "with clean working directory."
    )
    NEW_UPSTREAM_CHANGES = "error: New remote changesets were found."
    LATEST_REMOTE_COMMIT_MUST_BE_A_PARENT_OF_HEAD = (
        "error: latest remote commit must be parent of the commits being checked in "
        "so that rebase-workflow checkin can happen without conflicts."
    )
    CONCURRENT_CHANGESETS = "error: New remote changesets were found. Checkin was not finished."
    TIP_MUST_BE_SYMBOLIC = (
        "error: rebase-workflow checkin rewrites the branch, so the tip must be HEAD "
        "or a branch name, not a commit hash."
    )


class Recommendations:
    """Follow-up actions suggested alongside errors."""

    TRY_STASH = "Try 'git stash' to stash your local changes and checkin again."
    TRY_REBASE = "Try to rebase HEAD onto latest remote checkin and repeat checkin."
    TRY_QUICK_OR_BRANCH = "Check out the branch to check in, or use --quick to check in up to a fixed commit."
