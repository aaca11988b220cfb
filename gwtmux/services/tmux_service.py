"""Tmux session manager service"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Union

from gwtmux.exceptions import TmuxError
from gwtmux.models.session import SessionContext
from gwtmux.utils.logging import get_logger

logger = get_logger(__name__)


class TmuxService:
    """Runs tmux commands against the session the tool was started from."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, tmux_bin: str = "tmux"):
        self.environ = os.environ if environ is None else environ
        self.tmux_bin = tmux_bin

    def _run(self, *args: str) -> str:
        """Run a tmux command and return its stripped stdout."""
        cmd = [self.tmux_bin, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=True, text=True, capture_output=True)
        except FileNotFoundError as e:
            raise TmuxError(args[0], f"{self.tmux_bin} not found on PATH") from e
        except subprocess.CalledProcessError as e:
            raise TmuxError(args[0], (e.stderr or "").strip() or f"exit {e.returncode}") from e
        return result.stdout.strip()

    def _display(self, fmt: str) -> str:
        return self._run("display-message", "-p", fmt)

    # -- queries -----------------------------------------------------------

    def is_active_session(self) -> bool:
        return bool(self.environ.get("TMUX"))

    def current_window_name(self) -> str:
        return self._display("#W")

    def current_window_id(self) -> str:
        return self._display("#{window_id}")

    def current_pane_id(self) -> str:
        return self._display("#{pane_id}")

    def current_window_pane_count(self) -> int:
        return int(self._display("#{window_panes}") or 0)

    def current_session_name(self) -> str:
        return self._display("#S")

    def list_window_names(self) -> List[str]:
        output = self._run("list-windows", "-F", "#W")
        return output.splitlines() if output else []

    def has_window(self, name: str) -> bool:
        return name in self.list_window_names()

    def find_window_index(self, name: str) -> Optional[str]:
        """Index of the first window whose name is exactly ``name``."""
        session = self.current_session_name()
        output = self._run("list-windows", "-t", session, "-F", "#{window_index} #W")
        for line in output.splitlines():
            index, _, window = line.partition(" ")
            if window == name:
                return f"{session}:{index}"
        return None

    def session_window_count(self) -> int:
        return len(self.list_window_names())

    def capture_session(self, shell_name: str) -> SessionContext:
        """Snapshot the invoking window before anything changes it."""
        if not self.is_active_session():
            return SessionContext.outside(shell_name)
        return SessionContext(
            in_session=True,
            window_name=self.current_window_name(),
            window_id=self.current_window_id(),
            pane_id=self.environ.get("TMUX_PANE") or self.current_pane_id(),
            pane_count=self.current_window_pane_count(),
            shell_name=shell_name,
        )

    # -- mutations ---------------------------------------------------------

    def new_window(self, name: str, cwd: Union[str, Path]) -> None:
        self._run("new-window", "-n", name, "-c", str(cwd))
        logger.info(f"Opened window {name} in {cwd}")

    def select_window(self, name: str) -> None:
        target = self.find_window_index(name) or name
        self._run("select-window", "-t", target)

    def rename_window(self, name: str, target: Optional[str] = None) -> None:
        args = ["rename-window"]
        if target:
            args += ["-t", target]
        self._run(*args, name)
        logger.info(f"Renamed window to {name}")

    def kill_window(self, target: Optional[str] = None) -> None:
        args = ["kill-window"]
        if target:
            args += ["-t", target]
        self._run(*args)
        logger.info(f"Closed window {target or '(current)'}")

    def kill_window_by_name(self, name: str) -> bool:
        """Close the window named exactly ``name``; False when there is none."""
        target = self.find_window_index(name)
        if target is None:
            return False
        self.kill_window(target)
        return True

    def change_directory(self, path: Union[str, Path], pane: Optional[str] = None) -> None:
        """Make the shell in ``pane`` cd into ``path`` once it gets the prompt back."""
        args = ["send-keys"]
        if pane:
            args += ["-t", pane]
        self._run(*args, f"cd {shlex.quote(str(path))}", "Enter")
