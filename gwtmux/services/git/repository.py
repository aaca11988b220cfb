"""Repository locator and default branch detection."""

from pathlib import Path
from typing import Optional, Sequence, Union

import git

from gwtmux.exceptions import NotAGitRepoError
from gwtmux.models.worktree import RepoContext
from gwtmux.naming import dir_name
from gwtmux.services.git.command import absolute, git_command
from gwtmux.services.git.operations import GitOperations
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BRANCH_FALLBACK = "main"
DEFAULT_BRANCH_CANDIDATES = ("main", "master")


def is_git_dir(path: Union[str, Path]) -> bool:
    """Check whether ``path`` is an existing directory inside a git work tree."""
    path = Path(path)
    if not path.is_dir():
        return False
    try:
        git_command(path).rev_parse("--git-dir")
        return True
    except git.exc.GitCommandError:
        return False


def context_for(path: Union[str, Path]) -> Optional[RepoContext]:
    """Derive the repository context of a directory, or None outside a repository."""
    path = Path(path)
    if not path.is_dir():
        return None
    runner = git_command(path)
    try:
        common_dir = absolute(runner.rev_parse("--git-common-dir"), path)
        git_dir = absolute(runner.rev_parse("--git-dir"), path)
    except git.exc.GitCommandError:
        return None
    return RepoContext(
        git_root=common_dir.parent,
        git_common_dir=common_dir,
        is_main_repo=git_dir == common_dir,
    )


class RepositoryLocator:
    """Finds the repository a command operates on."""

    def __init__(self, default_dir_name: str = "default"):
        self.default_dir_name = default_dir_name

    def has_default_checkout(self, directory: Union[str, Path]) -> bool:
        """True when ``directory`` is a repo parent holding the main checkout."""
        return (Path(directory) / self.default_dir_name / ".git").is_dir()

    def locate(
        self,
        working_dir: Union[str, Path],
        names: Sequence[str] = (),
        error_message: str = "not in a git repository",
    ) -> RepoContext:
        """Locate the repository for ``working_dir``.

        Tries, in order: the directory itself, a ``default`` main checkout
        right below it, and the first named worktree below it.
        """
        working_dir = Path(working_dir).resolve()

        context = context_for(working_dir)
        if context is not None:
            logger.debug(f"Located repository {context.git_root} from {working_dir}")
            return context

        if self.has_default_checkout(working_dir):
            default_root = working_dir / self.default_dir_name
            context = context_for(default_root)
            if context is not None:
                logger.debug(f"Located repository via {default_root}")
                return RepoContext(context.git_root, context.git_common_dir, is_main_repo=False)

        if names:
            first = working_dir / dir_name(names[0])
            context = context_for(first)
            if context is not None:
                logger.debug(f"Located repository via named worktree {first}")
                return RepoContext(context.git_root, context.git_common_dir, is_main_repo=False)

        raise NotAGitRepoError(error_message)


def detect_default_branch(repo_path: Union[str, Path], remote_name: str = "origin") -> str:
    """Detect the default branch of a repository.

    Order: the remote's symbolic HEAD, then a remote branch named ``main``,
    then ``master``, and finally the literal ``main``.
    """
    ops = GitOperations(repo_path, remote_name)
    branch = ops.default_remote_branch()
    if branch:
        logger.debug(f"Default branch from {remote_name}/HEAD: {branch}")
        return branch

    for candidate in DEFAULT_BRANCH_CANDIDATES:
        if ops.has_remote_branch(candidate):
            logger.debug(f"Default branch from {remote_name}/{candidate}")
            return candidate

    logger.debug(f"No default branch found, falling back to {DEFAULT_BRANCH_FALLBACK}")
    return DEFAULT_BRANCH_FALLBACK
