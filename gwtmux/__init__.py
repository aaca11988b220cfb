"""
gwtmux - Git worktree + tmux window lifecycle manager
"""

from .__version__ import __version__
from .core import WorktreeCleaner, WorktreeOpener, WorktreeRenamer
from .cli.main import main

__all__ = ["WorktreeOpener", "WorktreeCleaner", "WorktreeRenamer", "main", "__version__"]
