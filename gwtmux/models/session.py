"""Tmux session snapshot."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """State of the invoking tmux window, captured once before any mutation."""

    in_session: bool
    window_name: str = ""
    window_id: str = ""
    pane_id: str = ""
    pane_count: int = 0
    shell_name: str = "zsh"

    @property
    def can_reuse_window(self) -> bool:
        """Whether the invoking window is an idle shell that may be repurposed."""
        return self.in_session and self.window_name == self.shell_name and self.pane_count == 1

    @classmethod
    def outside(cls, shell_name: str = "zsh") -> "SessionContext":
        return cls(in_session=False, shell_name=shell_name)
