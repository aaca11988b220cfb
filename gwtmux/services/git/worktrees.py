"""Worktree operations service for gwtmux."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import git

from gwtmux.exceptions import (
    ModifiedOrUntrackedFilesError,
    WorktreeCreationError,
    WorktreeMoveError,
    WorktreeRemovalError,
)
from gwtmux.models.worktree import WorktreeInfo
from gwtmux.services.git.command import command_stderr, git_command
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)

DIRTY_WORKTREE_MARKER = "modified or untracked files"


class WorktreeService:
    """Service for managing the worktrees of one repository."""

    def __init__(self, repo_path: Union[str, Path]):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the main checkout (or any worktree) of the repository
        """
        self.repo_path = Path(repo_path)

    def _git(self) -> git.Git:
        return git_command(self.repo_path)

    def get_worktree_info(self) -> list[WorktreeInfo]:
        """Get detailed information about all worktrees.

        Returns:
            List of WorktreeInfo objects, the main worktree first
        """
        output = self._git().worktree("list", "--porcelain")

        # Format:
        # worktree /path/to/worktree
        # HEAD commit_sha
        # branch refs/heads/branch-name   (or: detached)
        # (blank line between worktrees)
        worktree_list: list[WorktreeInfo] = []
        current: Dict[str, Any] = {}

        def flush():
            path = current.get("path", "")
            if path:
                worktree_list.append(
                    WorktreeInfo(
                        path=path,
                        branch_name=current.get("branch", ""),
                        commit_sha=current.get("HEAD", ""),
                        is_main=not worktree_list,  # first entry is always the main one
                        is_orphaned=not os.path.exists(path),
                    )
                )
            current.clear()

        for line in output.split("\n"):
            line = line.strip()
            if not line:
                flush()
                continue

            if line.startswith("worktree "):
                if current:
                    flush()
                current["path"] = line.split(" ", 1)[1]
            elif line.startswith("HEAD "):
                current["HEAD"] = line.split(" ", 1)[1]
            elif line.startswith("branch "):
                branch_ref = line.split(" ", 1)[1]
                if branch_ref.startswith("refs/heads/"):
                    current["branch"] = branch_ref[len("refs/heads/"):]
            elif line == "detached":
                current["branch"] = ""
        flush()

        logger.debug(f"Found {len(worktree_list)} worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def worktree_paths(self) -> list[Path]:
        return [Path(wt.path) for wt in self.get_worktree_info()]

    def is_registered(self, path: Union[str, Path]) -> bool:
        """Check whether ``path`` is a worktree of this repository."""
        target = Path(path).resolve()
        return any(Path(p).resolve() == target for p in self.worktree_paths())

    def add_worktree(
        self, path: Union[str, Path], ref: str, new_branch: Optional[str] = None
    ) -> None:
        """Create a worktree at ``path`` checking out ``ref``.

        With ``new_branch`` a branch of that name is created at ``ref`` first.
        """
        args = ["add", "--quiet"]
        if new_branch:
            args += ["-b", new_branch]
        args += ["--", str(path), ref]
        try:
            self._git().worktree(*args)
        except git.exc.GitCommandError as e:
            raise WorktreeCreationError(new_branch or ref, command_stderr(e)) from e
        logger.info(f"Created worktree at {path} ({new_branch or ref})")

    def remove_worktree(self, path: Union[str, Path]) -> None:
        """Remove a worktree. Never forces: local changes make git refuse."""
        try:
            self._git().worktree("remove", str(path))
        except git.exc.GitCommandError as e:
            stderr = command_stderr(e)
            if DIRTY_WORKTREE_MARKER in stderr:
                raise ModifiedOrUntrackedFilesError(str(path), stderr) from e
            raise WorktreeRemovalError(str(path), stderr) from e
        logger.info(f"Removed worktree at {path}")

    def move_worktree(self, old_path: Union[str, Path], new_path: Union[str, Path]) -> None:
        try:
            self._git().worktree("move", str(old_path), str(new_path))
        except git.exc.GitCommandError as e:
            raise WorktreeMoveError(str(old_path), command_stderr(e)) from e
        logger.info(f"Moved worktree {old_path} -> {new_path}")
