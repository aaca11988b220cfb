"""Data models for gwtmux."""

from .worktree import WorktreeInfo, RepoContext, ResolvedTarget
from .session import SessionContext
from .options import LocalDeleteMode, DeleteOptions
from .results import OpenResult, DeleteEntry, DeleteResult, RenameResult

__all__ = [
    "WorktreeInfo",
    "RepoContext",
    "ResolvedTarget",
    "SessionContext",
    "LocalDeleteMode",
    "DeleteOptions",
    "OpenResult",
    "DeleteEntry",
    "DeleteResult",
    "RenameResult",
]
