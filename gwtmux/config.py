"""Configuration handling for gwtmux"""

import os
from dataclasses import dataclass, field, fields
from typing import Mapping, Optional


DEFAULT_SHELL = "zsh"


@dataclass
class Config:
    """Configuration for gwtmux with validation."""

    # Repository layout
    remote_name: str = "origin"
    default_dir_name: str = "default"  # main checkout lives in <repo parent>/default

    # Shell whose name marks an idle tmux window
    shell: str = field(default_factory=lambda: os.environ.get("SHELL") or DEFAULT_SHELL)

    # Execution modes
    fetch: bool = True
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_default_dir_name()
        self._validate_shell()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_default_dir_name(self):
        """Validate default_dir_name is a single path component."""
        name = (self.default_dir_name or "").strip()
        if not name or "/" in name or name in (".", ".."):
            raise ValueError(f"default_dir_name must be a plain directory name, got '{self.default_dir_name}'")
        self.default_dir_name = name

    def _validate_shell(self):
        if not self.shell or not self.shell.strip():
            self.shell = DEFAULT_SHELL

    @property
    def shell_name(self) -> str:
        """Basename of the user's shell, used as the idle window name."""
        return os.path.basename(self.shell.rstrip("/")) or DEFAULT_SHELL

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Config":
        """Create Config from environment variables plus explicit overrides."""
        environ = os.environ if environ is None else environ
        values = {"shell": environ.get("SHELL") or DEFAULT_SHELL}
        if environ.get("GWTMUX_REMOTE"):
            values["remote_name"] = environ["GWTMUX_REMOTE"]
        values.update(overrides)
        return cls.from_dict(values)
