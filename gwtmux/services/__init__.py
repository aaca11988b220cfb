"""Collaborator services for gwtmux."""

from .git import GitOperations, WorktreeService, RepositoryLocator, detect_default_branch
from .tmux_service import TmuxService
from .github_service import PullRequestResolver
from .resolver import IdentifierResolver

__all__ = [
    "GitOperations",
    "WorktreeService",
    "RepositoryLocator",
    "detect_default_branch",
    "TmuxService",
    "PullRequestResolver",
    "IdentifierResolver",
]
