"""Data models for wk."""

from .apply_mode import ApplyMode, resolve_apply_mode
from .worktree import WorktreeInfo

__all__ = ["ApplyMode", "resolve_apply_mode", "WorktreeInfo"]
