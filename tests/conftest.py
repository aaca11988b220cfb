"""Pytest fixtures for gwtmux tests"""
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import git
import pytest

from gwtmux.config import Config
from gwtmux.models.session import SessionContext

USER_EMAIL = "test@example.com"


@dataclass
class RepoLayout:
    """A repository laid out as <parent>/default with a bare origin."""

    parent: Path
    default: Path
    origin: Path

    @property
    def repo(self) -> git.Repo:
        return git.Repo(self.default)

    @property
    def name(self) -> str:
        return self.parent.name

    def origin_branches(self) -> set:
        output = git.Repo(self.origin).git.branch("--format=%(refname:short)")
        return set(output.splitlines())

    def local_branches(self) -> set:
        output = self.repo.git.branch("--format=%(refname:short)")
        return set(output.splitlines())

    def add_worktree(self, branch: str, base: str = "main") -> Path:
        path = self.parent / branch.replace("/", "_")
        self.repo.git.worktree("add", "--quiet", "-b", branch, str(path), base)
        return path.resolve()


def _commit(path: Path, message: str, filename: Optional[str] = None, author: Optional[str] = None) -> None:
    """Commit a change (or an empty commit) in the checkout at ``path``."""
    repo = git.Repo(path)
    kwargs = {"author": author} if author else {}
    if filename:
        (Path(path) / filename).write_text(f"{message}\n")
        repo.git.add(filename)
        repo.git.commit("-m", message, **kwargs)
    else:
        repo.git.commit("--allow-empty", "-m", message, **kwargs)


def _make_layout(root: Path, repo_name: str) -> RepoLayout:
    """Create <root>/<repo_name>/default cloned from a bare origin whose default branch is main."""
    src = root / f"{repo_name}-src"
    src_repo = git.Repo.init(src)
    with src_repo.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", USER_EMAIL)
        cw.set_value("commit", "gpgsign", "false")
    (src / "README.md").write_text("# Test Repository\n")
    src_repo.index.add(["README.md"])
    src_repo.index.commit("Initial commit")
    src_repo.git.branch("-M", "main")

    origin = root / f"{repo_name}-origin.git"
    git.Repo.clone_from(str(src), str(origin), bare=True)

    default = root / repo_name / "default"
    clone = git.Repo.clone_from(str(origin), str(default))
    with clone.config_writer() as cw:
        cw.set_value("user", "name", "Test User")
        cw.set_value("user", "email", USER_EMAIL)
        cw.set_value("commit", "gpgsign", "false")
    clone.close()
    src_repo.close()

    return RepoLayout(
        parent=(root / repo_name).resolve(),
        default=default.resolve(),
        origin=origin.resolve(),
    )


class FakeTmux:
    """In-memory stand-in for TmuxService bound to one session."""

    def __init__(self, windows=(("@1", "zsh"),), current: str = "@1", panes: int = 1, active: bool = True):
        self.windows = [{"id": wid, "name": name, "cwd": None} for wid, name in windows]
        self.current = current
        self.panes = panes
        self.active = active
        self.selected = []
        self.cd_calls = []
        self._next_id = 100

    # queries
    def is_active_session(self) -> bool:
        return self.active

    def list_window_names(self):
        return [w["name"] for w in self.windows]

    def has_window(self, name: str) -> bool:
        return name in self.list_window_names()

    def find_window_index(self, name: str):
        for w in self.windows:
            if w["name"] == name:
                return w["id"]
        return None

    def session_window_count(self) -> int:
        return len(self.windows)

    def _current_window(self):
        return next(w for w in self.windows if w["id"] == self.current)

    def capture_session(self, shell_name: str) -> SessionContext:
        if not self.active:
            return SessionContext.outside(shell_name)
        return SessionContext(
            in_session=True,
            window_name=self._current_window()["name"],
            window_id=self.current,
            pane_id="%1",
            pane_count=self.panes,
            shell_name=shell_name,
        )

    # mutations
    def new_window(self, name: str, cwd) -> None:
        self._next_id += 1
        self.windows.append({"id": f"@{self._next_id}", "name": name, "cwd": Path(cwd)})

    def select_window(self, name: str) -> None:
        self.selected.append(name)

    def _target(self, target):
        if not target:
            return self._current_window()
        return next(w for w in self.windows if w["id"] == target)

    def rename_window(self, name: str, target=None) -> None:
        self._target(target)["name"] = name

    def kill_window(self, target=None) -> None:
        self.windows.remove(self._target(target))

    def kill_window_by_name(self, name: str) -> bool:
        target = self.find_window_index(name)
        if target is None:
            return False
        self.kill_window(target)
        return True

    def change_directory(self, path, pane=None) -> None:
        self.cd_calls.append(Path(path))


class StubPrResolver:
    """PR resolver answering from a fixed mapping."""

    def __init__(self, mapping=None):
        self.mapping = mapping or {}
        self.calls = []

    def resolve(self, identifier, cwd=None):
        self.calls.append(identifier)
        return self.mapping.get(identifier)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_layout(temp_dir):
    """Factory building more repositories next to ``layout``."""
    return lambda repo_name: _make_layout(temp_dir, repo_name)


@pytest.fixture
def layout(temp_dir):
    """A repository ``myrepo`` with its main checkout in ``myrepo/default``."""
    return _make_layout(temp_dir, "myrepo")


@pytest.fixture
def config():
    return Config(shell="/bin/zsh", fetch=True)


@pytest.fixture
def make_tmux():
    """Factory for in-memory tmux sessions, see FakeTmux."""
    return FakeTmux


@pytest.fixture
def tmux(make_tmux):
    """Session with a single idle zsh window."""
    return make_tmux()


@pytest.fixture
def session(tmux):
    return tmux.capture_session("zsh")


@pytest.fixture
def make_pr_resolver():
    """Factory for PR resolvers answering from a mapping."""
    return StubPrResolver


@pytest.fixture
def pr_resolver(make_pr_resolver):
    return make_pr_resolver()


@pytest.fixture
def commit():
    """Commit helper: ``commit(path, message, filename=None, author=None)``."""
    return _commit
