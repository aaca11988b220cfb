"""Tests for the Delete engine"""
import git
import pytest

from gwtmux.core import WorktreeCleaner
from gwtmux.exceptions import (
    BranchDeletionError,
    InMainRepoError,
    ModifiedOrUntrackedFilesError,
    NotAGitRepoError,
    NotMergedError,
    WorktreeNotFoundError,
)
from gwtmux.models import DeleteOptions, LocalDeleteMode
from gwtmux.services.git import WorktreeService

WORKTREE_ONLY = DeleteOptions(worktree=True)
SAFE = DeleteOptions(worktree=True, local_mode=LocalDeleteMode.SAFE)
FORCE = DeleteOptions(worktree=True, local_mode=LocalDeleteMode.FORCE)


def registered(layout):
    return [p.resolve() for p in WorktreeService(layout.default).worktree_paths()]


@pytest.fixture
def unmerged_worktree(layout, commit):
    """Factory adding a worktree whose branch has a commit main lacks."""

    def add(branch):
        path = layout.add_worktree(branch)
        commit(path, f"work on {branch}", filename=f"{branch.replace('/', '_')}.txt")
        return path

    return add


@pytest.fixture
def make_cleaner(config, make_tmux):
    """Factory returning (cleaner, tmux, session) for the given windows."""

    def build(windows, current="@1"):
        tmux = make_tmux(windows=windows, current=current)
        return WorktreeCleaner(config, tmux), tmux, tmux.capture_session("zsh")

    return build


class TestNamedValidation:
    """Test that nothing is touched when any entry fails validation."""

    def test_safe_mode_with_one_unmerged_branch(self, layout, make_cleaner, unmerged_worktree):
        """Test that one unmerged branch stops the whole batch."""
        a = layout.add_worktree("a")
        b = unmerged_worktree("b")
        cleaner, tmux, session = make_cleaner(
            [("@1", "myrepo/main"), ("@2", "myrepo/a"), ("@3", "myrepo/b")]
        )

        with pytest.raises(NotMergedError) as exc_info:
            cleaner.delete(["a", "b"], SAFE, layout.default, session)

        assert exc_info.value.branch == "b"
        assert exc_info.value.worktree == "b"
        assert a.is_dir() and b.is_dir()
        assert {"a", "b"} <= layout.local_branches()
        assert tmux.list_window_names() == ["myrepo/main", "myrepo/a", "myrepo/b"]

    def test_missing_worktrees_are_all_reported(self, layout, make_cleaner):
        """Test that every missing worktree is named in the error."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/main"), ("@2", "myrepo/a")])

        with pytest.raises(WorktreeNotFoundError) as exc_info:
            cleaner.delete(["a", "nope", "feature/gone"], FORCE, layout.default, session)

        names = [name for name, _ in exc_info.value.entries]
        assert names == ["nope", "feature/gone"]
        assert str(layout.parent / "feature_gone") in str(exc_info.value)
        assert a.is_dir()
        assert len(tmux.windows) == 2

    def test_main_worktree_is_refused(self, layout, make_cleaner):
        """Test that the main checkout cannot be deleted by name."""
        a = layout.add_worktree("a")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])
        with pytest.raises(InMainRepoError, match="'default' is the main repo"):
            cleaner.delete(["a", "default"], WORKTREE_ONLY, layout.default, session)
        assert a.is_dir()

    def test_outside_repository(self, temp_dir, make_cleaner):
        """Test that names outside any repository are refused."""
        cleaner, _, session = make_cleaner([("@1", "zsh")])
        with pytest.raises(NotAGitRepoError):
            cleaner.delete(["a"], FORCE, temp_dir, session)


class TestNamedExecution:
    """Test deleting validated worktrees."""

    def test_force_deletes_unmerged_branches(self, layout, make_cleaner, unmerged_worktree):
        """Test that -dwB removes unmerged worktrees, branches and windows."""
        a = unmerged_worktree("a")
        b = unmerged_worktree("b")
        cleaner, tmux, session = make_cleaner(
            [("@1", "myrepo/main"), ("@2", "myrepo/a"), ("@3", "myrepo/b")]
        )

        result = cleaner.delete(["a", "b"], FORCE, layout.default, session)

        assert not a.exists() and not b.exists()
        assert registered(layout) == [layout.default]
        assert not {"a", "b"} & layout.local_branches()
        assert tmux.list_window_names() == ["myrepo/main"]
        assert result.closed_windows == ["myrepo/a", "myrepo/b"]
        assert result.warnings == []

    def test_slashed_branch_by_branch_name_or_directory_name(self, layout, make_cleaner):
        """Test naming a worktree by its branch or by its directory."""
        one = layout.add_worktree("feature/one")
        two = layout.add_worktree("feature/two")
        cleaner, tmux, session = make_cleaner(
            [("@1", "myrepo/main"), ("@2", "myrepo/feature/one"), ("@3", "myrepo/feature/two")]
        )
        cleaner.delete(["feature/one", "feature_two"], SAFE, layout.default, session)
        assert not one.exists() and not two.exists()
        assert tmux.list_window_names() == ["myrepo/main"]

    def test_merged_branch_in_safe_mode(self, layout, make_cleaner):
        """Test that a merged branch is deleted with -b."""
        a = layout.add_worktree("a")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])
        result = cleaner.delete(["a"], SAFE, layout.default, session)
        assert not a.exists()
        assert result.deleted_branches == ["a"]

    def test_window_only(self, layout, make_cleaner):
        """Test that plain -d only closes the window."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/main"), ("@2", "myrepo/a")])
        cleaner.delete(["a"], DeleteOptions(), layout.default, session)
        assert a.is_dir()
        assert "a" in layout.local_branches()
        assert tmux.list_window_names() == ["myrepo/main"]

    def test_dirty_worktree_is_a_warning(self, layout, make_cleaner, capsys):
        """Test that a dirty worktree is kept and the batch continues."""
        a = layout.add_worktree("a")
        b = layout.add_worktree("b")
        (a / "scratch.txt").write_text("not committed\n")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])

        result = cleaner.delete(["a", "b"], WORKTREE_ONLY, layout.default, session)

        assert (a / "scratch.txt").exists()
        assert not b.exists()
        assert result.removed_worktrees == [b]
        assert len(result.warnings) == 1
        assert "modified or untracked files" in result.warnings[0]
        assert "Warning:" in capsys.readouterr().err

    def test_remote_branch_is_deleted(self, layout, make_cleaner):
        """Test that -r deletes the branch on origin."""
        a = layout.add_worktree("a")
        git.Repo(a).git.push("origin", "a")
        assert "a" in layout.origin_branches()
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])

        result = cleaner.delete(
            ["a"], DeleteOptions(worktree=True, local_mode=LocalDeleteMode.SAFE, remote=True),
            layout.default, session,
        )

        assert result.deleted_remote_branches == ["a"]
        assert "a" not in layout.origin_branches()

    def test_missing_remote_branch_is_not_an_error(self, layout, make_cleaner):
        """Test that -r without a remote branch is silent."""
        layout.add_worktree("a")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])
        result = cleaner.delete(
            ["a"], DeleteOptions(worktree=True, local_mode=LocalDeleteMode.FORCE, remote=True),
            layout.default, session,
        )
        assert result.deleted_remote_branches == []
        assert result.warnings == []

    def test_branch_deletion_failure_is_a_warning(self, layout, make_cleaner):
        """Test that a refused branch deletion is reported and skipped."""
        # still checked out in its worktree, so git refuses even with -D
        a = layout.add_worktree("a")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])
        result = cleaner.delete(
            ["a"], DeleteOptions(local_mode=LocalDeleteMode.FORCE), layout.default, session
        )
        assert result.warnings == ["failed to force delete branch 'a'"]
        assert a.is_dir()
        assert "a" in layout.local_branches()


class TestInvokingWindow:
    """Test that the window running the command is handled after every entry."""

    def test_last_window_is_renamed_to_shell(self, layout, make_cleaner):
        """Test that the last window is kept and renamed to the shell."""
        a = layout.add_worktree("a")
        b = layout.add_worktree("b")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "myrepo/b")])

        result = cleaner.delete(["a", "b"], FORCE, a, session)

        assert result.deferred_window == "myrepo/a"
        assert result.renamed_to == "zsh"
        assert tmux.list_window_names() == ["zsh"]
        # the directory the shell was in is gone
        assert tmux.cd_calls == [layout.parent]
        assert not b.exists()

    def test_deferred_window_is_closed_when_others_remain(self, layout, make_cleaner):
        """Test that the invoking window closes when it is not the last."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])

        result = cleaner.delete(["a"], FORCE, a, session)

        assert result.renamed_to is None
        assert result.closed_windows == ["myrepo/a"]
        assert tmux.list_window_names() == ["notes"]
        assert tmux.cd_calls == []

    def test_no_cd_when_directory_survives(self, layout, make_cleaner):
        """Test that the shell stays put when its directory still exists."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a")])
        result = cleaner.delete(["a"], DeleteOptions(), a, session)
        assert result.renamed_to == "zsh"
        assert tmux.cd_calls == []


class TestCurrentWorktree:
    """Test deleting the worktree the command runs in."""

    def test_last_window_without_flags(self, layout, make_cleaner):
        """Test that plain -d in the last window renames it to the shell."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a")])

        result = cleaner.delete([], DeleteOptions(), a, session)

        assert result.renamed_to == "zsh"
        assert tmux.list_window_names() == ["zsh"]
        assert a.is_dir()
        assert "a" in layout.local_branches()

    def test_window_closed_when_not_last(self, layout, make_cleaner):
        """Test that plain -d closes the window when others remain."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])
        cleaner.delete([], DeleteOptions(), a, session)
        assert tmux.list_window_names() == ["notes"]

    def test_main_worktree_is_refused(self, layout, make_cleaner):
        """Test that -dw in the main checkout is refused."""
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/main"), ("@2", "notes")])
        with pytest.raises(InMainRepoError, match="in main repo"):
            cleaner.delete([], WORKTREE_ONLY, layout.default, session)
        assert len(tmux.windows) == 2

    def test_unmerged_branch_in_safe_mode(self, make_cleaner, unmerged_worktree):
        """Test that -db refuses an unmerged branch."""
        a = unmerged_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])
        with pytest.raises(NotMergedError):
            cleaner.delete([], SAFE, a, session)
        assert a.is_dir()
        assert len(tmux.windows) == 2

    def test_merged_branch_in_safe_mode(self, layout, make_cleaner):
        """Test that -dwb removes a merged worktree and its branch."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])

        result = cleaner.delete([], SAFE, a, session)

        assert not a.exists()
        assert "a" not in layout.local_branches()
        assert result.removed_worktrees == [a]
        assert tmux.list_window_names() == ["notes"]

    def test_from_subdirectory(self, layout, make_cleaner, commit):
        """Test running from a subdirectory of the worktree."""
        a = layout.add_worktree("a")
        (a / "src").mkdir()
        (a / "src" / "app.py").write_text("print()\n")
        git.Repo(a).git.add("src")
        commit(a, "add src")
        cleaner, _, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])
        result = cleaner.delete([], FORCE, a / "src", session)
        assert result.removed_worktrees == [a]
        assert not a.exists()

    def test_dirty_worktree_fails(self, layout, make_cleaner):
        """Test that local changes stop the removal with git's message."""
        a = layout.add_worktree("a")
        (a / "scratch.txt").write_text("not committed\n")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])

        with pytest.raises(ModifiedOrUntrackedFilesError) as exc_info:
            cleaner.delete([], WORKTREE_ONLY, a, session)

        assert "modified or untracked files" in str(exc_info.value)
        assert (a / "scratch.txt").exists()
        assert len(tmux.windows) == 2

    def test_outside_repository(self, temp_dir, make_cleaner):
        """Test that a directory outside any repository is refused."""
        cleaner, _, session = make_cleaner([("@1", "zsh")])
        with pytest.raises(NotAGitRepoError):
            cleaner.delete([], FORCE, temp_dir, session)


class TestBatchAndSingleFailureHandling:
    """Test that a branch deletion failure is a warning for named worktrees
    but stops the command for the current worktree."""

    def test_named_worktree_warns(self, layout, make_cleaner):
        """Test that the named path keeps going."""
        layout.add_worktree("a")
        cleaner, _, session = make_cleaner([("@1", "myrepo/main")])
        result = cleaner.delete(
            ["a"], DeleteOptions(local_mode=LocalDeleteMode.FORCE), layout.default, session
        )
        assert result.warnings

    def test_current_worktree_raises(self, layout, make_cleaner):
        """Test that the current-worktree path stops."""
        a = layout.add_worktree("a")
        cleaner, tmux, session = make_cleaner([("@1", "myrepo/a"), ("@2", "notes")])
        with pytest.raises(BranchDeletionError):
            cleaner.delete([], DeleteOptions(local_mode=LocalDeleteMode.FORCE), a, session)
        assert len(tmux.windows) == 2
