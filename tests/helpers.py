"""Shared helpers for wk tests."""
from pathlib import Path

import git


def init_repo(repo_path: Path) -> git.Repo:
    """Create a repository with one commit on main."""
    repo_path.mkdir(parents=True)
    repo = git.Repo.init(repo_path)

    # Configure git user for commits (shared with every worktree)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    (repo_path / "README.md").write_text("base\n")
    repo.git.add("README.md")
    repo.git.commit("-m", "init")

    # Rename master to main regardless of init.defaultBranch
    repo.git.branch("-M", "main")
    return repo


def commit_file(path, filename, content, message):
    """Write a file in a repo or worktree and commit it."""
    Path(path, filename).write_text(content)
    cmd = git.Git(path)
    cmd.add(filename)
    cmd.commit("-m", message)


def porcelain_worktree_paths(repo):
    """Paths listed by `git worktree list --porcelain`."""
    output = repo.git.worktree("list", "--porcelain")
    return [line[len("worktree "):] for line in output.splitlines() if line.startswith("worktree ")]
