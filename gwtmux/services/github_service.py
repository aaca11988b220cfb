"""GitHub pull request lookup through the gh CLI."""

import os
import subprocess
from pathlib import Path
from typing import Optional, Union

from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class PullRequestResolver:
    """Maps a PR number (or URL) to its head branch, if gh knows it."""

    def __init__(self, gh_bin: str = "gh"):
        self.gh_bin = gh_bin

    def resolve(self, identifier: str, cwd: Union[str, Path, None] = None) -> Optional[str]:
        """Return the PR's head branch name, or None.

        A missing gh binary, an unknown identifier and any other failure all
        give None so the caller falls back to the literal branch name.
        """
        env = dict(os.environ, GH_PAGER="")
        cmd = [self.gh_bin, "pr", "view", identifier, "--json", "headRefName", "--jq", ".headRefName"]
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd) if cwd else None,
                env=env,
                check=True,
                text=True,
                capture_output=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"gh could not resolve '{identifier}': {e}")
            return None

        branch = result.stdout.strip()
        if branch:
            logger.debug(f"Resolved PR {identifier} to branch {branch}")
        return branch or None
