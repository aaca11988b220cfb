"""Identifier resolution: path, pull request or literal branch name."""

from pathlib import Path
from typing import Optional, Union

from gwtmux.models.worktree import RepoContext, ResolvedTarget
from gwtmux.naming import worktree_path
from gwtmux.services.git.operations import GitOperations
from gwtmux.services.git.repository import context_for, is_git_dir
from gwtmux.services.github_service import PullRequestResolver
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


def looks_like_path(token: str) -> bool:
    return token.startswith("/") or token.startswith(".") or "/" in token


class IdentifierResolver:
    """Turns one command-line token into a branch and a worktree path."""

    def __init__(self, context: RepoContext, pr_resolver: Optional[PullRequestResolver] = None):
        self.context = context
        self.pr_resolver = pr_resolver

    def resolve(self, token: str, working_dir: Union[str, Path]) -> ResolvedTarget:
        """Resolve ``token``; the first matching form wins.

        1. a path to an existing git working directory on a branch, which may
           belong to another repository;
        2. a pull request known to the PR resolver;
        3. the token itself as a branch name.
        """
        target = self._resolve_path(token, Path(working_dir))
        if target is not None:
            return target

        branch = None
        if self.pr_resolver is not None:
            branch = self.pr_resolver.resolve(token, cwd=self.context.git_root)
        if branch:
            return ResolvedTarget(
                identifier=token,
                branch=branch,
                worktree_path=worktree_path(self.context.repo_parent, branch),
                from_pr=True,
            )

        return ResolvedTarget(
            identifier=token,
            branch=token,
            worktree_path=worktree_path(self.context.repo_parent, token),
        )

    def _resolve_path(self, token: str, working_dir: Path) -> Optional[ResolvedTarget]:
        if not looks_like_path(token):
            return None

        candidate = Path(token)
        if not candidate.is_absolute():
            candidate = working_dir / candidate
        if not candidate.is_dir():
            return None

        resolved = candidate.resolve()
        if not is_git_dir(resolved):
            return None

        branch = GitOperations(resolved).current_branch()
        if not branch:
            logger.debug(f"{resolved} is not on a branch, not treating '{token}' as a path")
            return None

        path_context = context_for(resolved)
        override = path_context.repo_name if path_context else None
        logger.debug(f"'{token}' is worktree {resolved} on {branch} (repo {override})")
        return ResolvedTarget(
            identifier=token,
            branch=branch,
            worktree_path=resolved,
            repo_name_override=override,
            from_path=True,
        )
