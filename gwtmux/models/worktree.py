"""Worktree data models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class WorktreeInfo:
    """Information about a git worktree."""

    path: str
    branch_name: str  # empty when HEAD is detached
    commit_sha: str
    is_main: bool  # Is this the main working tree?
    is_orphaned: bool  # Directory missing?

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass(frozen=True)
class RepoContext:
    """Where a repository lives under the <repo parent>/<worktree> convention.

    ``git_root`` is the directory holding the shared metadata directory (the
    main checkout), ``repo_parent`` its parent and ``repo_name`` the parent's
    basename.  ``is_main_repo`` tells whether the directory the context was
    derived from is the main checkout itself.
    """

    git_root: Path
    git_common_dir: Path
    is_main_repo: bool = False

    @property
    def repo_parent(self) -> Path:
        return self.git_root.parent

    @property
    def repo_name(self) -> str:
        return self.repo_parent.name


@dataclass(frozen=True)
class ResolvedTarget:
    """A user-supplied identifier resolved to a branch and a worktree path."""

    identifier: str
    branch: str
    worktree_path: Path
    repo_name_override: Optional[str] = None
    from_path: bool = False  # identifier was a path to an existing worktree
    from_pr: bool = False
