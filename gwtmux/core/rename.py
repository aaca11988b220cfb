"""Rename engine: move a worktree, its branch, remote branch and window together."""

from pathlib import Path
from typing import Union

from gwtmux.config import Config
from gwtmux.exceptions import (
    GwtmuxError,
    InMainRepoError,
    NewNameRequiredError,
    NotAGitRepoError,
    NotAuthoredByYouError,
    NotInMultiplexerError,
    NotOnBranchError,
    RemotePushError,
    TargetExistsError,
)
from gwtmux.models.results import RenameResult
from gwtmux.models.session import SessionContext
from gwtmux.naming import window_name, worktree_path
from gwtmux.services.git import GitOperations, WorktreeService, context_for
from gwtmux.services.tmux_service import TmuxService
from gwtmux.utils.console import print_error
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class WorktreeRenamer:
    """Renames the worktree the command runs in."""

    def __init__(self, config: Config, tmux: TmuxService):
        self.config = config
        self.tmux = tmux

    def rename(
        self, new_name: str, working_dir: Union[str, Path], session: SessionContext
    ) -> RenameResult:
        """Rename directory, branch, remote branch and window to ``new_name``.

        Only a failed push of the renamed branch is rolled back; a failure in
        any other step stops with whatever was already done.
        """
        if not session.in_session:
            raise NotInMultiplexerError()
        if not new_name:
            raise NewNameRequiredError()

        working_dir = Path(working_dir).resolve()
        context = context_for(working_dir)
        if context is None:
            raise NotAGitRepoError("not in a git repo")
        if context.is_main_repo:
            raise InMainRepoError("rename")

        ops = GitOperations(working_dir, self.config.remote_name)
        current_branch = ops.current_branch()
        if not current_branch:
            raise NotOnBranchError()

        old_path = ops.toplevel()
        repo_parent = old_path.parent
        new_path = worktree_path(repo_parent, new_name)
        if new_path.exists():
            raise TargetExistsError(str(new_path))

        # Someone else's commit on top means the remote branch is not ours to rename
        author = ops.last_commit_author_email()
        user = ops.user_email()
        if author != user:
            raise NotAuthoredByYouError(author, user)

        has_remote = ops.has_upstream()
        worktrees = WorktreeService(context.git_root)

        worktrees.move_worktree(old_path, new_path)
        new_ops = GitOperations(new_path, self.config.remote_name)
        new_ops.rename_branch(current_branch, new_name)

        if has_remote:
            try:
                new_ops.push(new_name)
            except RemotePushError:
                print_error("failed to push new branch. Reverting local changes...")
                self._roll_back(new_ops, worktrees, current_branch, new_name, old_path, new_path)
                raise
            new_ops.push_delete_remote(current_branch)
            new_ops.set_upstream(new_name)

        name = window_name(repo_parent.name, new_name)
        self.tmux.rename_window(name, target=session.window_id or None)
        # keep the shell in the same subdirectory of the moved worktree
        relative = working_dir.relative_to(old_path) if working_dir.is_relative_to(old_path) else Path()
        self.tmux.change_directory(new_path / relative, pane=session.pane_id or None)

        return RenameResult(
            old_branch=current_branch,
            new_branch=new_name,
            old_path=old_path,
            new_path=new_path,
            window_name=name,
            remote_updated=has_remote,
        )

    def _roll_back(self, ops, worktrees, old_branch, new_branch, old_path, new_path) -> None:
        try:
            ops.rename_branch(new_branch, old_branch)
            worktrees.move_worktree(new_path, old_path)
        except GwtmuxError as e:
            logger.error(f"Rollback incomplete: {e}")
            print_error(f"rollback incomplete: {e}")
