"""Branch and remote operations service"""

from pathlib import Path
from typing import Union

import git

from gwtmux.exceptions import (
    BranchDeletionError,
    BranchRenameError,
    GitOperationError,
    RemoteDeletionError,
    RemotePushError,
    UpstreamError,
)
from gwtmux.services.git.command import absolute, command_stderr, git_command
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class GitOperations:
    """Git operations run from one working directory (a worktree or the main checkout)."""

    def __init__(self, repo_path: Union[str, Path], remote_name: str = "origin"):
        """Initialize the service.

        Args:
            repo_path: Directory the git commands run in
            remote_name: Name of the remote used for tracking branches
        """
        self.repo_path = Path(repo_path)
        self.remote_name = remote_name

    def _git(self) -> git.Git:
        return git_command(self.repo_path)

    # -- queries -----------------------------------------------------------

    def current_branch(self) -> str:
        """Name of the checked-out branch, empty when HEAD is detached."""
        try:
            return self._git().branch("--show-current")
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not read current branch in {self.repo_path}: {e}")
            return ""

    def toplevel(self) -> Path:
        return absolute(self._git().rev_parse("--show-toplevel"), self.repo_path)

    def _ref_exists(self, ref: str) -> bool:
        try:
            self._git().show_ref("--verify", "--quiet", ref)
            return True
        except git.exc.GitCommandError:
            return False

    def has_local_branch(self, branch_name: str) -> bool:
        return self._ref_exists(f"refs/heads/{branch_name}")

    def has_remote_branch(self, branch_name: str) -> bool:
        """Check if a remote-tracking ref exists for the branch."""
        return self._ref_exists(f"refs/remotes/{self.remote_name}/{branch_name}")

    def has_upstream(self) -> bool:
        """Check if the current branch tracks a remote branch."""
        try:
            self._git().rev_parse("--abbrev-ref", "--symbolic-full-name", "@{u}")
            return True
        except git.exc.GitCommandError:
            return False

    def default_remote_branch(self) -> str:
        """Branch the remote's HEAD points at, empty if unset."""
        try:
            ref = self._git().symbolic_ref(
                "--quiet", "--short", f"refs/remotes/{self.remote_name}/HEAD"
            )
        except git.exc.GitCommandError:
            return ""
        prefix = f"{self.remote_name}/"
        return ref[len(prefix):] if ref.startswith(prefix) else ref

    def is_merged_into(self, branch_name: str, base: str) -> bool:
        """Check if the branch's history is fully contained in ``base``."""
        try:
            output = self._git().branch("--merged", base, "--format=%(refname:short)")
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not list branches merged into {base}: {e}")
            return False
        merged = {line.strip() for line in output.splitlines()}
        return branch_name in merged

    def last_commit_author_email(self) -> str:
        try:
            return self._git().log("-1", "--format=%ae")
        except git.exc.GitCommandError:
            return ""

    def user_email(self) -> str:
        try:
            return self._git().config("user.email")
        except git.exc.GitCommandError:
            return ""

    # -- mutations ---------------------------------------------------------

    def fetch(self, *args: str) -> None:
        try:
            self._git().fetch(*args)
        except git.exc.GitCommandError as e:
            raise GitOperationError("fetch", self.remote_name, command_stderr(e)) from e

    def rename_branch(self, old_name: str, new_name: str) -> None:
        try:
            self._git().branch("-m", old_name, new_name)
        except git.exc.GitCommandError as e:
            raise BranchRenameError(old_name, command_stderr(e)) from e
        logger.info(f"Renamed branch {old_name} -> {new_name}")

    def delete_branch(self, branch_name: str, force: bool = False) -> None:
        """Delete a local branch, ``git branch -d`` or ``-D`` with force."""
        try:
            self._git().branch("-D" if force else "-d", branch_name)
        except git.exc.GitCommandError as e:
            raise BranchDeletionError(branch_name, command_stderr(e)) from e
        logger.info(f"Deleted local branch {branch_name}")

    def set_upstream(self, branch_name: str) -> None:
        """Track ``<remote>/<branch_name>``."""
        upstream = f"{self.remote_name}/{branch_name}"
        try:
            self._git().branch(f"--set-upstream-to={upstream}", branch_name)
        except git.exc.GitCommandError as e:
            raise UpstreamError(branch_name, command_stderr(e)) from e

    def push(self, branch_name: str) -> None:
        try:
            self._git().push(self.remote_name, branch_name)
        except git.exc.GitCommandError as e:
            raise RemotePushError(f"{self.remote_name}/{branch_name}", command_stderr(e)) from e
        logger.info(f"Pushed {branch_name} to {self.remote_name}")

    def push_delete_remote(self, branch_name: str) -> None:
        try:
            self._git().push(self.remote_name, "--delete", branch_name)
        except git.exc.GitCommandError as e:
            raise RemoteDeletionError(f"{self.remote_name}/{branch_name}", command_stderr(e)) from e
        logger.info(f"Deleted remote branch {self.remote_name}/{branch_name}")
