"""Command-line interface for gwtmux"""

import shutil
import sys
from pathlib import Path
from typing import List, Optional

from gwtmux.cli.args import delete_options, parse_args
from gwtmux.config import Config
from gwtmux.core import WorktreeCleaner, WorktreeOpener, WorktreeRenamer
from gwtmux.exceptions import GwtmuxError
from gwtmux.services.github_service import PullRequestResolver
from gwtmux.services.tmux_service import TmuxService
from gwtmux.utils.console import console, print_error, print_warning
from gwtmux.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)

REQUIRED_COMMANDS = ("git", "tmux")


def check_dependencies() -> None:
    missing = [cmd for cmd in REQUIRED_COMMANDS if shutil.which(cmd) is None]
    if missing:
        raise GwtmuxError(
            f"missing required dependencies: {' '.join(missing)}\n"
            f"Install with: brew install {' '.join(missing)}"
        )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    args = None
    try:
        args = parse_args(argv)
        setup_logging(verbose=args.verbose, debug=args.debug)
        check_dependencies()

        config = Config.from_env(fetch=not args.no_fetch, verbose=args.verbose, debug=args.debug)
        tmux = TmuxService()
        session = tmux.capture_session(config.shell_name)
        working_dir = Path.cwd()
        logger.debug(f"Session: {session}")

        if args.rename is not None:
            WorktreeRenamer(config, tmux).rename(args.rename, working_dir, session)
        elif args.done:
            options = delete_options(args)
            if options.remote and not options.deletes_branch:
                print_warning("-r has no effect without -b or -B")
            WorktreeCleaner(config, tmux).delete(args.targets, options, working_dir, session)
        else:
            opener = WorktreeOpener(config, tmux, pr_resolver=PullRequestResolver())
            opener.open(args.targets, working_dir, session)
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        print_error(e)
        if args is not None and args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
