"""Git-related services for gwtmux."""

from .operations import GitOperations
from .worktrees import WorktreeService
from .repository import RepositoryLocator, context_for, detect_default_branch, is_git_dir

__all__ = [
    "GitOperations",
    "WorktreeService",
    "RepositoryLocator",
    "context_for",
    "detect_default_branch",
    "is_git_dir",
]
