"""Git-facing services for wk."""

from .git_runner import CommandResult, GitRunner
from .depot import (
    default_depot,
    repo_depot_dir,
    repo_id_from_root,
    resolve_repo_root,
    worktree_path,
)
from .worktrees import WorktreeService
from .operations import GitOperations
from .apply_service import ApplyService

__all__ = [
    "CommandResult",
    "GitRunner",
    "default_depot",
    "repo_depot_dir",
    "repo_id_from_root",
    "resolve_repo_root",
    "worktree_path",
    "WorktreeService",
    "GitOperations",
    "ApplyService",
]
