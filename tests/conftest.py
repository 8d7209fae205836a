"""Pytest fixtures for wk tests"""
import os
import tempfile
from pathlib import Path

import pytest

from worktree_depot.config import Config
from worktree_depot.services.depot import worktree_path
from tests.fake_git_runner import FakeGitRunner
from tests.helpers import init_repo


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo = init_repo(temp_dir / "repo")
    yield repo
    repo.close()


@pytest.fixture
def repo_root(git_repo):
    """Top-level directory exactly as git reports it."""
    return git_repo.git.rev_parse("--show-toplevel")


@pytest.fixture
def depot(temp_dir):
    path = temp_dir / "depot"
    path.mkdir()
    return str(path)


@pytest.fixture
def make_config(temp_dir, depot):
    """Build a Config pointing at a repo and the test depot."""
    home = temp_dir / "home"
    home.mkdir(exist_ok=True)

    def _make(repo=None, **overrides):
        values = {
            "cwd": str(temp_dir),
            "home": str(home),
            "repo": repo,
            "depot": depot,
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def config(make_config, repo_root):
    return make_config(repo=repo_root)


@pytest.fixture
def add_worktree(git_repo, repo_root, depot):
    """Create a depot worktree on a new branch directly with git."""

    def _add(name, base="main"):
        wk_dir = worktree_path(depot, repo_root, name)
        os.makedirs(os.path.dirname(wk_dir), exist_ok=True)
        git_repo.git.worktree("add", "-b", name, wk_dir, base)
        return wk_dir

    return _add


@pytest.fixture
def fake_runner():
    return FakeGitRunner()
