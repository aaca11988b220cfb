"""Command-line argument parsing for gwtmux."""

import argparse
from typing import List, Optional

from gwtmux.__version__ import __version__
from gwtmux.models.options import DeleteOptions, LocalDeleteMode

EPILOG = """\
examples:
  gwtmux feature/auth      create worktree for feature/auth branch
  gwtmux 123               create worktree for PR #123 (uses the gh cli)
  gwtmux ../other/wt       open an existing worktree path
  gwtmux                   (from the repo parent) open windows for all worktrees
  gwtmux -dwbr             clean up current worktree completely
  gwtmux -dw feat1 feat2   delete worktrees for feat1 and feat2
  gwtmux --rename new-name rename current branch to new-name

Branch names with slashes become underscores in directory names.
Flags combine: -dwbr, -dBrw, etc. If the current window is the last in the
session it is renamed to the shell name instead of being closed.
"""


def build_parser() -> argparse.ArgumentParser:
    """Construct the argparse parser."""
    parser = argparse.ArgumentParser(
        prog="gwtmux",
        description="Create git worktrees from branches or PR numbers in new tmux windows, "
        "and manage their lifecycle with cleanup and rename operations.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "targets",
        nargs="*",
        metavar="branch_or_pr",
        help="Branches, PR numbers or worktree paths to open (with -d: worktree names to delete)",
    )
    parser.add_argument("-d", "--done", action="store_true", help="Done mode: close the worktree's window")
    parser.add_argument("-w", dest="delete_worktree", action="store_true", help="Also delete the worktree directory")
    parser.add_argument(
        "-b", dest="delete_branch", action="store_true", help="Also delete local branch (safe - must be merged)"
    )
    parser.add_argument(
        "-B", dest="force_delete_branch", action="store_true", help="Also delete local branch (force - even if unmerged)"
    )
    parser.add_argument(
        "-r", dest="delete_remote", action="store_true", help="Also delete remote branch (requires -b or -B)"
    )
    parser.add_argument(
        "--rename",
        metavar="NEW_NAME",
        nargs="?",
        const="",
        help="Rename current worktree dir, branch, remote branch and window",
    )
    parser.add_argument("--no-fetch", action="store_true", help="Do not fetch before creating worktrees")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--debug", action="store_true", help="Show debug information for troubleshooting")
    parser.add_argument("--version", action="version", version=f"gwtmux {__version__}")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments and check the flag combination."""
    parser = build_parser()
    args = parser.parse_args(argv)

    delete_flags = args.delete_worktree or args.delete_branch or args.force_delete_branch or args.delete_remote
    if delete_flags and not args.done:
        parser.error("-w, -b, -B and -r require -d")
    if args.rename is not None:
        if args.done:
            parser.error("--rename cannot be combined with -d")
        if args.targets:
            parser.error("--rename takes exactly one name")
    return args


def delete_options(args: argparse.Namespace) -> DeleteOptions:
    """Decode the delete flags into structured options; -B wins over -b."""
    if args.force_delete_branch:
        local_mode = LocalDeleteMode.FORCE
    elif args.delete_branch:
        local_mode = LocalDeleteMode.SAFE
    else:
        local_mode = LocalDeleteMode.NONE
    return DeleteOptions(
        worktree=args.delete_worktree,
        local_mode=local_mode,
        remote=args.delete_remote,
    )
