"""Result objects returned by the lifecycle engines."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class OpenResult:
    opened: List[str] = field(default_factory=list)    # new windows
    selected: List[str] = field(default_factory=list)  # windows that already existed
    reused: Optional[str] = None                       # invoking window renamed in place
    skipped: List[str] = field(default_factory=list)   # identifiers that failed
    created_worktrees: List[Path] = field(default_factory=list)
    closed_invoking_window: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.opened) + len(self.selected) + (1 if self.reused else 0)


@dataclass
class DeleteEntry:
    """One validated deletion target."""

    name: str
    worktree_path: Path
    branch: str  # empty for a detached worktree
    window_name: str


@dataclass
class DeleteResult:
    entries: List[DeleteEntry] = field(default_factory=list)
    removed_worktrees: List[Path] = field(default_factory=list)
    deleted_branches: List[str] = field(default_factory=list)
    deleted_remote_branches: List[str] = field(default_factory=list)
    closed_windows: List[str] = field(default_factory=list)
    deferred_window: Optional[str] = None
    renamed_to: Optional[str] = None  # last-window policy kept the window alive
    warnings: List[str] = field(default_factory=list)


@dataclass
class RenameResult:
    old_branch: str
    new_branch: str
    old_path: Path
    new_path: Path
    window_name: str
    remote_updated: bool = False
