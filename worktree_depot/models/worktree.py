"""Worktree data models."""

from dataclasses import dataclass


@dataclass
class WorktreeInfo:
    """One entry of `git worktree list --porcelain`."""

    path: str
    branch_name: str  # Empty when HEAD is detached
    is_main: bool  # Is this the main working tree?

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker}"
