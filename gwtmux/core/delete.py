"""Delete engine: remove worktrees, branches and their tmux windows."""

from pathlib import Path
from typing import Optional, Sequence, Union

from gwtmux.config import Config
from gwtmux.exceptions import (
    BranchDeletionError,
    InMainRepoError,
    NotAGitRepoError,
    NotMergedError,
    RemoteDeletionError,
    TmuxError,
    WorktreeNotFoundError,
    WorktreeRemovalError,
)
from gwtmux.models.options import DeleteOptions, LocalDeleteMode
from gwtmux.models.results import DeleteEntry, DeleteResult
from gwtmux.models.session import SessionContext
from gwtmux.models.worktree import RepoContext
from gwtmux.naming import window_name, worktree_path
from gwtmux.services.git import (
    GitOperations,
    RepositoryLocator,
    WorktreeService,
    context_for,
    detect_default_branch,
)
from gwtmux.services.tmux_service import TmuxService
from gwtmux.utils.console import print_warning
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class WorktreeCleaner:
    """Deletes worktrees, their branches and windows.

    Named worktrees are validated as a whole before anything is deleted.
    Once deleting starts, per-entry failures become warnings. The current
    worktree (no names given) stops at its first failure instead.
    """

    def __init__(self, config: Config, tmux: TmuxService, locator: Optional[RepositoryLocator] = None):
        self.config = config
        self.tmux = tmux
        self.locator = locator or RepositoryLocator(config.default_dir_name)

    def _warn(self, result: DeleteResult, message: str) -> None:
        print_warning(message)
        result.warnings.append(message)

    def delete(
        self,
        names: Sequence[str],
        options: DeleteOptions,
        working_dir: Union[str, Path],
        session: SessionContext,
    ) -> DeleteResult:
        working_dir = Path(working_dir).resolve()
        if names:
            return self.delete_named(names, options, working_dir, session)
        return self.delete_current(options, working_dir, session)

    # -- current worktree --------------------------------------------------

    def delete_current(
        self, options: DeleteOptions, working_dir: Path, session: SessionContext
    ) -> DeleteResult:
        """Delete the worktree, branch and window the command runs in."""
        context = context_for(working_dir)
        if context is None:
            raise NotAGitRepoError()

        ops = GitOperations(working_dir, self.config.remote_name)
        branch = ops.current_branch()
        worktree_root = ops.toplevel()
        result = DeleteResult(
            entries=[
                DeleteEntry(
                    name=worktree_root.name,
                    worktree_path=worktree_root,
                    branch=branch,
                    window_name=session.window_name,
                )
            ]
        )

        if options.destructive and context.is_main_repo:
            raise InMainRepoError("delete")

        root_ops = GitOperations(context.git_root, self.config.remote_name)
        if branch and options.local_mode is LocalDeleteMode.SAFE:
            default_branch = detect_default_branch(context.git_root, self.config.remote_name)
            if not root_ops.is_merged_into(branch, default_branch):
                raise NotMergedError(branch, default_branch)

        if options.worktree:
            WorktreeService(context.git_root).remove_worktree(worktree_root)
            result.removed_worktrees.append(worktree_root)

        if branch and options.deletes_branch:
            root_ops.delete_branch(branch, force=options.local_mode is LocalDeleteMode.FORCE)
            result.deleted_branches.append(branch)
            if options.remote:
                self._delete_remote_branch(root_ops, branch, result)

        if session.in_session:
            self._close_invoking_window(session, worktree_root.parent, result)
        return result

    # -- named worktrees ---------------------------------------------------

    def delete_named(
        self,
        names: Sequence[str],
        options: DeleteOptions,
        working_dir: Path,
        session: SessionContext,
    ) -> DeleteResult:
        """Validate every named worktree, then delete them in order."""
        context = self.locator.locate(working_dir, names)
        entries = self._validate(names, options, context)
        result = DeleteResult(entries=entries)

        worktrees = WorktreeService(context.git_root)
        ops = GitOperations(context.git_root, self.config.remote_name)
        current_window = session.window_name if session.in_session else None

        for entry in entries:
            if options.worktree:
                try:
                    worktrees.remove_worktree(entry.worktree_path)
                    result.removed_worktrees.append(entry.worktree_path)
                except WorktreeRemovalError as e:
                    logger.debug(str(e))
                    self._warn(result, f"failed to remove worktree at '{entry.worktree_path}': {e.message}")

            if entry.branch and options.deletes_branch:
                force = options.local_mode is LocalDeleteMode.FORCE
                try:
                    ops.delete_branch(entry.branch, force=force)
                    result.deleted_branches.append(entry.branch)
                except BranchDeletionError as e:
                    logger.debug(str(e))
                    verb = "force delete" if force else "delete"
                    self._warn(result, f"failed to {verb} branch '{entry.branch}'")
                if options.remote:
                    self._delete_remote_branch(ops, entry.branch, result)

            if current_window is None:
                continue
            if entry.window_name == current_window:
                # closing it now would kill this process; done after the loop
                result.deferred_window = entry.window_name
                continue
            try:
                if self.tmux.kill_window_by_name(entry.window_name):
                    result.closed_windows.append(entry.window_name)
            except TmuxError as e:
                logger.debug(f"Could not close window {entry.window_name}: {e}")

        if result.deferred_window:
            cd_to = context.repo_parent if not working_dir.exists() else None
            self._close_invoking_window(session, cd_to, result)
        return result

    def _validate(
        self, names: Sequence[str], options: DeleteOptions, context: RepoContext
    ) -> list[DeleteEntry]:
        """Check every entry before touching any of them."""
        worktrees = WorktreeService(context.git_root)
        infos = {Path(wt.path).resolve(): wt for wt in worktrees.get_worktree_info()}

        paths = [worktree_path(context.repo_parent, name) for name in names]
        missing = [
            (name, str(path)) for name, path in zip(names, paths) if path.resolve() not in infos
        ]
        if missing:
            raise WorktreeNotFoundError(missing)

        default_branch = None
        if options.local_mode is LocalDeleteMode.SAFE:
            default_branch = detect_default_branch(context.git_root, self.config.remote_name)
        ops = GitOperations(context.git_root, self.config.remote_name)

        entries = []
        for name, path in zip(names, paths):
            info = infos[path.resolve()]
            if options.destructive and info.is_main:
                raise InMainRepoError("delete", name)
            branch = info.branch_name
            if branch and default_branch and not ops.is_merged_into(branch, default_branch):
                raise NotMergedError(branch, default_branch, worktree=name)
            entries.append(
                DeleteEntry(
                    name=name,
                    worktree_path=path,
                    branch=branch,
                    window_name=window_name(context.repo_name, branch),
                )
            )
        return entries

    # -- helpers -----------------------------------------------------------

    def _delete_remote_branch(self, ops: GitOperations, branch: str, result: DeleteResult) -> None:
        """Delete ``<remote>/<branch>`` if it exists; a missing remote branch is fine."""
        if not ops.has_remote_branch(branch):
            logger.debug(f"No remote branch {self.config.remote_name}/{branch}")
            return
        try:
            ops.push_delete_remote(branch)
            result.deleted_remote_branches.append(branch)
        except RemoteDeletionError as e:
            logger.debug(str(e))
            self._warn(result, f"failed to delete remote branch '{self.config.remote_name}/{branch}'")

    def _close_invoking_window(
        self, session: SessionContext, cd_to: Optional[Path], result: DeleteResult
    ) -> None:
        """Close the invoking window, or keep it as an idle shell if it is the last one."""
        if self.tmux.session_window_count() == 1:
            if cd_to is not None:
                self.tmux.change_directory(cd_to, pane=session.pane_id or None)
            self.tmux.rename_window(session.shell_name, target=session.window_id or None)
            result.renamed_to = session.shell_name
        else:
            self.tmux.kill_window(session.window_id or None)
            result.closed_windows.append(session.window_name)
