"""Worktree operations service for wk."""

import os
import shutil
from typing import Any, Dict, List, Optional

from worktree_depot.logging_config import get_logger
from worktree_depot.models.worktree import WorktreeInfo
from worktree_depot.services.git_runner import GitRunner

logger = get_logger(__name__)


def canonical_path(path: str) -> str:
    """Symlink-resolved absolute form of ``path`` (works for missing paths too)."""
    return os.path.realpath(os.path.abspath(path))


def parse_worktree_porcelain(output: str) -> List[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        branch refs/heads/branch-name      (or "detached")
        (blank line between worktrees)
    """
    worktree_list: List[WorktreeInfo] = []
    current: Dict[str, Any] = {}

    def flush():
        path = current.get("path", "")
        if path:
            worktree_list.append(
                WorktreeInfo(
                    path=path,
                    branch_name=current.get("branch", ""),
                    # First worktree in list is always the main one
                    is_main=not worktree_list,
                )
            )
        current.clear()

    for raw_line in output.splitlines():
        line = raw_line.strip()

        if not line:
            flush()
            continue

        if line.startswith("worktree "):
            # A new entry may start without a separating blank line
            if current:
                flush()
            current["path"] = line.split(" ", 1)[1].strip()
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line == "detached":
            current["branch"] = ""

    flush()
    return worktree_list


class WorktreeService:
    """Service for managing the worktrees of one repository."""

    def __init__(self, repo_root: str, runner: GitRunner):
        """Initialize the worktree service.

        Args:
            repo_root: Top-level directory of the main repository
            runner: Git invoker
        """
        self.repo_root = repo_root
        self.runner = runner

    def list_output(self) -> str:
        """Human-readable `git worktree list` output."""
        return self.runner.run(self.repo_root, ["worktree", "list"]).stdout

    def get_worktree_info(self) -> List[WorktreeInfo]:
        """Get detailed information about all worktrees.

        Returns:
            List of WorktreeInfo objects for all worktrees
        """
        output = self.runner.run(self.repo_root, ["worktree", "list", "--porcelain"], quiet=True).stdout
        worktree_list = parse_worktree_porcelain(output)

        logger.debug(f"Found {len(worktree_list)} worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def find_depot_worktrees(self, repo_depot_dir: str) -> List[str]:
        """Names of the worktrees nested under this repository's depot directory.

        Paths are compared in canonical form so symlinked depots (for
        example /tmp vs /private/tmp) still match. The main working tree is
        never included. Names are unique and sorted.

        Args:
            repo_depot_dir: ``<depot>/<repo-id>`` for this repository
        """
        base_prefix = canonical_path(repo_depot_dir) + os.sep

        names = set()
        for wt in self.get_worktree_info():
            if wt.is_main:
                continue
            resolved = canonical_path(wt.path)
            if not resolved.startswith(base_prefix):
                continue
            name = os.path.basename(resolved)
            if name:
                names.add(name)

        return sorted(names)

    def add_worktree(self, path: str, ref: str, new_branch: Optional[str] = None) -> None:
        """Create a worktree at ``path``.

        Args:
            path: Directory for the new worktree
            ref: Branch to check out, or the start point when ``new_branch`` is given
            new_branch: Create this branch from ``ref`` (`git worktree add -b`)
        """
        args = ["worktree", "add"]
        if new_branch:
            args += ["-b", new_branch, path, ref]
        else:
            args += [path, ref]
        self.runner.run(self.repo_root, args)
        logger.info(f"Added worktree at {path} ({new_branch or ref})")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove the worktree at ``path``.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked
        """
        args = ["worktree", "remove", path]
        if force:
            args.append("--force")
        self.runner.run(self.repo_root, args)
        logger.info(f"Removed worktree at {path}")

    def remove_leftover_directory(self, path: str) -> tuple[bool, Optional[str]]:
        """Delete whatever `git worktree remove` left behind at ``path``.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        if not os.path.exists(path):
            return True, None
        try:
            shutil.rmtree(path)
            logger.debug(f"Removed leftover directory {path}")
            return True, None
        except OSError as e:
            error_msg = f"Could not remove leftover directory {path}: {e}"
            logger.debug(error_msg)
            return False, error_msg

    def prune_worktrees(self) -> None:
        """Prune orphaned worktree metadata."""
        self.runner.run(self.repo_root, ["worktree", "prune"])
        logger.info("Pruned orphaned worktree metadata")
