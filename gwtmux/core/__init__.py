"""Worktree lifecycle engines."""

from .create import WorktreeOpener
from .delete import WorktreeCleaner
from .rename import WorktreeRenamer

__all__ = ["WorktreeOpener", "WorktreeCleaner", "WorktreeRenamer"]
