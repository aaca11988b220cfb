"""Thin helpers around GitPython's command runner."""

from pathlib import Path
from typing import Union

import git


def git_command(path: Union[str, Path]) -> git.Git:
    """Get a git command runner bound to a working directory.

    Unlike ``git.Repo`` this does not require ``path`` to be a repository,
    which is what the locator needs when probing arbitrary directories.
    """
    return git.Git(str(path))


def command_stderr(error: git.exc.CommandError) -> str:
    """Recover git's own stderr text from a GitPython command error."""
    stderr = (getattr(error, "stderr", "") or "").strip()
    # GitPython wraps it as: stderr: '<text>'
    if stderr.startswith("stderr: '"):
        stderr = stderr[len("stderr: '"):]
        if stderr.endswith("'"):
            stderr = stderr[:-1]
    return stderr.strip() or str(error)


def absolute(path_text: str, base: Union[str, Path]) -> Path:
    """Resolve a path printed by git relative to the directory it ran in."""
    path = Path(path_text)
    if not path.is_absolute():
        path = Path(base) / path
    return path.resolve()
