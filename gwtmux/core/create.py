"""Create/Open engine: one worktree and one tmux window per branch."""

from pathlib import Path
from typing import Optional, Sequence, Union

from gwtmux.config import Config
from gwtmux.exceptions import (
    BranchOrPrRequiredError,
    GitOperationError,
    NotInMultiplexerError,
    TmuxError,
    WorktreeCreationError,
)
from gwtmux.models.results import OpenResult
from gwtmux.models.session import SessionContext
from gwtmux.models.worktree import ResolvedTarget
from gwtmux.naming import window_name
from gwtmux.services.git import (
    GitOperations,
    RepositoryLocator,
    WorktreeService,
    detect_default_branch,
)
from gwtmux.services.github_service import PullRequestResolver
from gwtmux.services.resolver import IdentifierResolver
from gwtmux.services.tmux_service import TmuxService
from gwtmux.utils.console import print_warning
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class WorktreeOpener:
    """Ensures a worktree and a window exist for each requested branch."""

    def __init__(
        self,
        config: Config,
        tmux: TmuxService,
        pr_resolver: Optional[PullRequestResolver] = None,
        locator: Optional[RepositoryLocator] = None,
    ):
        self.config = config
        self.tmux = tmux
        self.pr_resolver = pr_resolver
        self.locator = locator or RepositoryLocator(config.default_dir_name)

    def _warn(self, result: OpenResult, message: str) -> None:
        print_warning(message)
        result.warnings.append(message)

    def open(
        self,
        identifiers: Sequence[str],
        working_dir: Union[str, Path],
        session: SessionContext,
    ) -> OpenResult:
        """Open (creating when needed) a worktree window per identifier.

        Identifiers are handled left to right; a failure on one is reported
        as a warning and the rest still run.  The first successful one may
        take over the invoking window if it is an idle single-pane shell.
        """
        if not session.in_session:
            raise NotInMultiplexerError()

        working_dir = Path(working_dir).resolve()
        if not identifiers:
            return self.open_all(working_dir, session)

        context = self.locator.locate(
            working_dir, error_message="not in a git repo or parent of default/.git"
        )
        ops = GitOperations(context.git_root, self.config.remote_name)
        result = OpenResult()

        if self.config.fetch:
            try:
                ops.fetch("-a")
            except GitOperationError as e:
                self._warn(result, str(e))

        default_branch = detect_default_branch(context.git_root, self.config.remote_name)
        resolver = IdentifierResolver(context, self.pr_resolver)
        worktrees = WorktreeService(context.git_root)
        # Decided once, from the window as it was when we were invoked
        can_reuse_window = session.can_reuse_window

        for identifier in identifiers:
            target = resolver.resolve(identifier, working_dir)
            name = window_name(target.repo_name_override or context.repo_name, target.branch)

            if self.tmux.has_window(name):
                logger.info(f"Window {name} already open, selecting it")
                try:
                    self.tmux.select_window(name)
                except TmuxError as e:
                    self._warn(result, f"failed to select window '{name}': {e.message}")
                    result.skipped.append(identifier)
                    continue
                result.selected.append(name)
                continue

            if not target.from_path and not worktrees.is_registered(target.worktree_path):
                try:
                    self._create_worktree(ops, worktrees, target, default_branch)
                except WorktreeCreationError as e:
                    logger.debug(str(e))
                    self._warn(
                        result, f"failed to create worktree for '{target.branch}', skipping: {e.message}"
                    )
                    result.skipped.append(identifier)
                    continue
                result.created_worktrees.append(target.worktree_path)

            try:
                if result.success_count == 0 and can_reuse_window:
                    self.tmux.rename_window(name, target=session.window_id)
                    self.tmux.change_directory(target.worktree_path, pane=session.pane_id or None)
                    result.reused = name
                else:
                    self.tmux.new_window(name, target.worktree_path)
                    result.opened.append(name)
            except TmuxError as e:
                # the worktree stays; only the window is missing
                self._warn(result, f"failed to open window '{name}': {e.message}")
                result.skipped.append(identifier)

        return result

    def _create_worktree(
        self,
        ops: GitOperations,
        worktrees: WorktreeService,
        target: ResolvedTarget,
        default_branch: str,
    ) -> None:
        """Create the worktree from the local branch, the remote branch or the default branch."""
        branch = target.branch
        if ops.has_local_branch(branch):
            worktrees.add_worktree(target.worktree_path, branch)
        elif ops.has_remote_branch(branch):
            worktrees.add_worktree(
                target.worktree_path, f"{self.config.remote_name}/{branch}", new_branch=branch
            )
        else:
            worktrees.add_worktree(target.worktree_path, default_branch, new_branch=branch)

    def open_all(self, working_dir: Path, session: SessionContext) -> OpenResult:
        """Open a window for every worktree that lives directly in ``working_dir``.

        Only valid from a repo parent, the directory holding ``default``.
        The invoking window is closed afterwards when it was an idle shell.
        """
        if not self.locator.has_default_checkout(working_dir):
            raise BranchOrPrRequiredError()

        default_root = working_dir / self.config.default_dir_name
        repo_name = working_dir.name
        result = OpenResult()

        if self.config.fetch:
            try:
                GitOperations(default_root, self.config.remote_name).fetch(
                    "--prune", "--no-recurse-submodules", "--quiet"
                )
            except GitOperationError as e:
                self._warn(result, str(e))

        open_windows = set(self.tmux.list_window_names())
        for wt in WorktreeService(default_root).get_worktree_info():
            path = Path(wt.path)
            if path.parent.resolve() != working_dir:
                continue
            if wt.is_orphaned:
                self._warn(result, f"worktree at '{path}' is missing, skipping")
                continue

            if path.resolve() == default_root.resolve():
                name = window_name(repo_name, self.config.default_dir_name)
            elif wt.branch_name:
                name = window_name(repo_name, wt.branch_name)
            else:
                self._warn(result, f"worktree at '{path}' is not on a branch, skipping")
                continue

            if name in open_windows:
                continue
            try:
                self.tmux.new_window(name, path)
            except TmuxError as e:
                self._warn(result, f"failed to open window '{name}': {e.message}")
                result.skipped.append(str(path))
                continue
            open_windows.add(name)
            result.opened.append(name)

        if session.can_reuse_window:
            try:
                self.tmux.kill_window(session.window_id)
                result.closed_invoking_window = True
            except TmuxError as e:
                self._warn(result, f"failed to close window '{session.window_name}': {e.message}")
        return result
