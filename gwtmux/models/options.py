"""Structured options for the delete command."""

from dataclasses import dataclass
from enum import Enum


class LocalDeleteMode(Enum):
    """How to delete the local branch."""
    NONE = "none"
    SAFE = "safe"    # git branch -d, must be merged into the default branch
    FORCE = "force"  # git branch -D


@dataclass(frozen=True)
class DeleteOptions:
    worktree: bool = False
    local_mode: LocalDeleteMode = LocalDeleteMode.NONE
    remote: bool = False

    @property
    def destructive(self) -> bool:
        """True when a worktree or a local branch is going to be deleted."""
        return self.worktree or self.local_mode is not LocalDeleteMode.NONE

    @property
    def deletes_branch(self) -> bool:
        return self.local_mode is not LocalDeleteMode.NONE

