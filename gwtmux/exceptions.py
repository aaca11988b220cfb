"""Custom exceptions for gwtmux"""

from typing import Iterable, Optional


class GwtmuxError(Exception):
    """Base exception for all gwtmux errors."""

    kind = "GwtmuxError"


class PreflightError(GwtmuxError):
    """Validation failure detected before anything was changed."""


class NotInMultiplexerError(PreflightError):
    kind = "NotInMultiplexer"

    def __init__(self):
        super().__init__("not in tmux")


class NotAGitRepoError(PreflightError):
    kind = "NotAGitRepo"

    def __init__(self, message: str = "not in a git repository"):
        super().__init__(message)


class InMainRepoError(PreflightError):
    kind = "InMainRepo"

    def __init__(self, action: str = "delete", name: Optional[str] = None):
        if name:
            message = f"worktree '{name}' is the main repo. Refusing to {action}."
        else:
            message = f"in main repo, not a worktree. Refusing to {action}."
        super().__init__(message)


class NotOnBranchError(PreflightError):
    kind = "NotOnBranch"

    def __init__(self):
        super().__init__("not on a branch")


class NewNameRequiredError(PreflightError):
    kind = "NewNameRequired"

    def __init__(self):
        super().__init__("new name required")


class BranchOrPrRequiredError(PreflightError):
    kind = "BranchOrPrRequired"

    def __init__(self):
        super().__init__("branch or PR number required")


class TargetExistsError(PreflightError):
    kind = "TargetExists"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path} already exists")


class NotAuthoredByYouError(PreflightError):
    kind = "NotAuthoredByYou"

    def __init__(self, author: str, user: str):
        self.author = author
        self.user = user
        super().__init__(f"latest commit not authored by you ({author} vs {user})")


class WorktreeNotFoundError(PreflightError):
    kind = "WorktreeNotFound"

    def __init__(self, entries: Iterable[tuple[str, str]]):
        # (name, expected path) pairs
        self.entries = list(entries)
        described = ", ".join(f"'{name}' (path: {path})" for name, path in self.entries)
        noun = "worktree" if len(self.entries) == 1 else "worktrees"
        verb = "does" if len(self.entries) == 1 else "do"
        super().__init__(f"{noun} {described} {verb} not exist")


class NotMergedError(PreflightError):
    kind = "NotMerged"

    def __init__(self, branch: str, default_branch: str, worktree: Optional[str] = None):
        self.branch = branch
        self.default_branch = default_branch
        self.worktree = worktree
        where = f" (worktree '{worktree}')" if worktree else ""
        super().__init__(
            f"branch '{branch}'{where} is not merged into '{default_branch}'. Use -B to force delete."
        )


class GitOperationError(GwtmuxError):
    """Exception raised for errors in Git operations."""

    kind = "GitOperationFailed"

    def __init__(self, operation: str, target: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.target = target
        self.message = message

        error_msg = f"git {operation} failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeCreationError(GitOperationError):
    kind = "WorktreeCreationFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("worktree add", target, message)


class WorktreeRemovalError(GitOperationError):
    kind = "WorktreeRemovalFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("worktree remove", target, message)


class ModifiedOrUntrackedFilesError(WorktreeRemovalError):
    """git refused to remove a worktree with local changes; message is git's own."""

    kind = "ModifiedOrUntrackedFiles"

    def __init__(self, target: str, stderr: str):
        super().__init__(target, stderr)
        self.stderr = stderr

    def __str__(self) -> str:
        return self.stderr


class WorktreeMoveError(GitOperationError):
    kind = "WorktreeMoveFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("worktree move", target, message)


class BranchRenameError(GitOperationError):
    kind = "BranchRenameFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("branch -m", target, message)


class BranchDeletionError(GitOperationError):
    kind = "BranchDeletionFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("branch delete", target, message)


class RemoteDeletionError(GitOperationError):
    kind = "RemoteDeletionFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("push --delete", target, message)


class RemotePushError(GitOperationError):
    kind = "RemotePushFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("push", target, message)


class UpstreamError(GitOperationError):
    kind = "UpstreamFailed"

    def __init__(self, target: str, message: Optional[str] = None):
        super().__init__("branch -u", target, message)


class TmuxError(GwtmuxError):
    """Exception raised when a tmux command fails."""

    kind = "TmuxFailed"

    def __init__(self, command: str, message: Optional[str] = None):
        self.command = command
        self.message = message
        error_msg = f"tmux {command} failed"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)
