"""Local repository access."""

from gitcentral.repository.base import LocalRepository
from gitcentral.repository.git_repository import GitRepository, format_changeset_trailer

__all__ = [
    "LocalRepository",
    "GitRepository",
    "format_changeset_trailer",
]
