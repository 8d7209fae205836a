"""Tests for wk apply against real repositories"""
import os

import git
import pytest

from worktree_depot.core import WorktreeKeeper
from worktree_depot.exceptions import DirtyStateError, UsageError, WorktreeNotFoundError
from worktree_depot.models.apply_mode import ApplyMode
from tests.helpers import commit_file

DIRTY_REPO_MESSAGE = (
    "Main repo has uncommitted changes. Commit/stash them before apply (or use a clean state)."
)


def head_branch(repo):
    return repo.git.rev_parse("--abbrev-ref", "HEAD")


class TestApplySwitch:
    """Test apply --switch."""

    def test_warns_and_aborts_when_repo_is_dirty(self, git_repo, repo_root, config, add_worktree, capsys):
        add_worktree("feat-switch")
        with open(os.path.join(repo_root, "dirty.txt"), "w") as f:
            f.write("dirty")

        with pytest.raises(DirtyStateError) as excinfo:
            WorktreeKeeper(config).apply("feat-switch", switch=True)

        assert str(excinfo.value) == "Aborting apply --switch with dirty repo."
        assert (
            "Warning: repo has uncommitted changes. Clean your branch before using --switch."
            in capsys.readouterr().err
        )
        assert head_branch(git_repo) == "main"

    def test_switches_branch_when_repo_is_clean(self, git_repo, config, add_worktree, capsys):
        wk_dir = add_worktree("feat-switch-clean")

        mode = WorktreeKeeper(config).apply("feat-switch-clean", switch=True)

        assert mode is ApplyMode.SWITCH
        assert head_branch(git_repo) == "feat-switch-clean"
        assert git.Repo(wk_dir).head.is_detached
        assert "Applied (switch)" in capsys.readouterr().out

    def test_switch_wins_over_other_modes(self, git_repo, config, add_worktree):
        add_worktree("feat-x")

        mode = WorktreeKeeper(config).apply("feat-x", switch=True, patch=True, rebase=True)

        assert mode is ApplyMode.SWITCH
        assert head_branch(git_repo) == "feat-x"


class TestApplyDirtyRepo:
    """Merge and rebase need a clean main repository."""

    @pytest.mark.parametrize("flags", [{}, {"rebase": True}], ids=["merge", "rebase"])
    def test_rejects_dirty_repo(self, git_repo, repo_root, config, add_worktree, flags):
        wk_dir = add_worktree("feat-dirty")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")
        with open(os.path.join(repo_root, "dirty.txt"), "w") as f:
            f.write("dirty")
        main_sha = git_repo.heads["main"].commit.hexsha

        with pytest.raises(DirtyStateError) as excinfo:
            WorktreeKeeper(config).apply("feat-dirty", **flags)

        assert str(excinfo.value) == DIRTY_REPO_MESSAGE
        assert git_repo.heads["main"].commit.hexsha == main_sha
        assert head_branch(git_repo) == "main"

    def test_patch_tolerates_dirty_repo(self, git_repo, repo_root, config, add_worktree):
        wk_dir = add_worktree("feat-patch-dirty")
        with open(os.path.join(repo_root, "dirty.txt"), "w") as f:
            f.write("dirty")
        with open(os.path.join(wk_dir, "README.md"), "w") as f:
            f.write("base\npatch\n")

        mode = WorktreeKeeper(config).apply("feat-patch-dirty", patch=True)

        assert mode is ApplyMode.PATCH
        staged = git_repo.git.diff("--cached", "--name-only").splitlines()
        assert "README.md" in staged
        assert git_repo.git.show("HEAD:README.md") == "base"
        assert git_repo.git.show(":README.md") == "base\npatch"
        with open(os.path.join(repo_root, "README.md")) as f:
            assert f.read() == "base\npatch\n"


class TestApplyMerge:
    """Test the default merge mode."""

    def test_merges_branch_into_target(self, git_repo, repo_root, config, add_worktree, capsys):
        wk_dir = add_worktree("feat-merge")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")

        mode = WorktreeKeeper(config).apply("feat-merge")

        assert mode is ApplyMode.MERGE
        assert os.path.exists(os.path.join(repo_root, "feature.txt"))
        assert git_repo.heads["main"].commit.hexsha == git_repo.heads["feat-merge"].commit.hexsha
        assert "Applied (merge): feat-merge -> main" in capsys.readouterr().out

    def test_no_ff_creates_merge_commit(self, git_repo, config, add_worktree):
        wk_dir = add_worktree("feat-noff")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")

        WorktreeKeeper(config).apply("feat-noff", no_ff=True)

        assert len(git_repo.heads["main"].commit.parents) == 2

    def test_warns_about_uncommitted_worktree_changes(self, git_repo, config, add_worktree, capsys):
        wk_dir = add_worktree("feat-wip")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")
        with open(os.path.join(wk_dir, "feature.txt"), "a") as f:
            f.write("uncommitted\n")

        WorktreeKeeper(config).apply("feat-wip")

        err = capsys.readouterr().err
        assert "worktree has uncommitted changes; merge will NOT include them" in err
        assert "wk apply feat-wip --patch" in err
        assert "uncommitted" not in git_repo.git.show("main:feature.txt")

    def test_restores_prior_branch(self, git_repo, config, add_worktree):
        wk_dir = add_worktree("feat-restore")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")
        git_repo.git.checkout("-b", "side")

        WorktreeKeeper(config).apply("feat-restore")

        assert head_branch(git_repo) == "side"
        assert "feature.txt" in git_repo.git.ls_tree("--name-only", "main").splitlines()

    def test_custom_target(self, git_repo, config, add_worktree):
        git_repo.git.branch("release")
        wk_dir = add_worktree("feat-release")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")

        WorktreeKeeper(config).apply("feat-release", target="release")

        assert git_repo.heads["release"].commit.hexsha == git_repo.heads["feat-release"].commit.hexsha
        assert head_branch(git_repo) == "main"


class TestApplyRebase:
    """Test rebase + fast-forward."""

    def test_rebases_then_fast_forwards(self, git_repo, repo_root, config, add_worktree, capsys):
        wk_dir = add_worktree("feat-rebase")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")
        commit_file(repo_root, "main.txt", "main\n", "main moved on")
        main_before = git_repo.heads["main"].commit.hexsha

        mode = WorktreeKeeper(config).apply("feat-rebase", rebase=True)

        assert mode is ApplyMode.REBASE
        main_head = git_repo.heads["main"].commit
        assert main_head.hexsha == git_repo.heads["feat-rebase"].commit.hexsha
        assert main_head.parents[0].hexsha == main_before
        assert len(main_head.parents) == 1
        assert "Applied (rebase+ff): feat-rebase -> main" in capsys.readouterr().out


class TestApplyPatch:
    """Test patch mode."""

    def test_committed_staged_and_unstaged_changes(self, git_repo, repo_root, config, add_worktree):
        wk_dir = add_worktree("feat-all")
        commit_file(wk_dir, "committed.txt", "committed\n", "committed work")
        with open(os.path.join(wk_dir, "staged.txt"), "w") as f:
            f.write("staged\n")
        git.Git(wk_dir).add("staged.txt")
        with open(os.path.join(wk_dir, "README.md"), "a") as f:
            f.write("unstaged\n")

        WorktreeKeeper(config).apply("feat-all", patch=True)

        staged = set(git_repo.git.diff("--cached", "--name-only").splitlines())
        assert staged == {"committed.txt", "staged.txt", "README.md"}

    def test_commits_with_message(self, git_repo, config, add_worktree, capsys):
        wk_dir = add_worktree("feat-msg")
        commit_file(wk_dir, "feature.txt", "feature\n", "feature work")

        WorktreeKeeper(config).apply("feat-msg", patch=True, message="Port feature")

        assert git_repo.heads["main"].commit.message.strip() == "Port feature"
        assert git_repo.git.status("--porcelain") == ""
        assert "Applied (patch) and committed to main: Port feature" in capsys.readouterr().out

    def test_empty_patch(self, git_repo, config, add_worktree, capsys):
        add_worktree("feat-empty")
        main_sha = git_repo.heads["main"].commit.hexsha

        WorktreeKeeper(config).apply("feat-empty", patch=True, message="nothing")

        assert git_repo.heads["main"].commit.hexsha == main_sha
        assert "No changes to apply (patch is empty)." in capsys.readouterr().out

    def test_preserves_trailing_whitespace(self, git_repo, repo_root, config, add_worktree):
        wk_dir = add_worktree("feat-ws")
        with open(os.path.join(wk_dir, "README.md"), "w") as f:
            f.write("base\ntrailing   \n")

        WorktreeKeeper(config).apply("feat-ws", patch=True)

        with open(os.path.join(repo_root, "README.md")) as f:
            assert f.read() == "base\ntrailing   \n"


    def test_non_utf8_content_is_applied_byte_for_byte(self, git_repo, repo_root, config, add_worktree):
        wk_dir = add_worktree("feat-latin1")
        with open(os.path.join(wk_dir, "latin.txt"), "wb") as f:
            f.write(b"caf\xe9\n")
        git.Git(wk_dir).add("latin.txt")

        WorktreeKeeper(config).apply("feat-latin1", patch=True)

        with open(os.path.join(repo_root, "latin.txt"), "rb") as f:
            assert f.read() == b"caf\xe9\n"
        assert git_repo.git.diff("--cached", "--name-only").splitlines() == ["latin.txt"]


class TestApplyPreconditions:
    """Test argument and existence checks."""

    def test_missing_name(self, git_repo, config):
        with pytest.raises(UsageError, match="Usage: wk apply <name>"):
            WorktreeKeeper(config).apply(None)

    def test_missing_worktree(self, git_repo, config):
        with pytest.raises(WorktreeNotFoundError, match="Worktree not found"):
            WorktreeKeeper(config).apply("never-created")
