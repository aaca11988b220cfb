"""Naming convention shared by every lifecycle operation.

Directories use underscores in place of slashes, branches and window names
keep the slashes.
"""

from pathlib import Path


def dir_name(branch: str) -> str:
    """Directory name for a branch: ``feature/x`` -> ``feature_x``."""
    return branch.replace("/", "_")


def window_name(repo_name: str, branch: str) -> str:
    """Window name for a branch: ``myrepo/feature/x``."""
    return f"{repo_name}/{branch}"


def worktree_path(repo_parent: Path, branch: str) -> Path:
    """Sibling worktree directory for a branch below the repo parent."""
    return Path(repo_parent) / dir_name(branch)
