"""Core functionality for wk"""

import os
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from worktree_depot.config import Config
from worktree_depot.constants import (
    DEFAULT_BASE_REF,
    DEFAULT_TARGET_BRANCH,
    MSG_NOTHING_TO_REMOVE,
    MSG_PRUNED,
    USAGE_APPLY,
    USAGE_NEW,
    USAGE_PATH,
    USAGE_RM,
    USAGE_RM_CONFLICT,
)
from worktree_depot.exceptions import UsageError, WorktreeExistsError, WorktreeNotFoundError
from worktree_depot.formatters import format_created_summary, format_removed
from worktree_depot.logging_config import get_logger
from worktree_depot.models.apply_mode import ApplyMode
from worktree_depot.services.apply_service import ApplyService
from worktree_depot.services.depot import repo_depot_dir, resolve_repo_root, worktree_path
from worktree_depot.services.git_runner import GitRunner
from worktree_depot.services.operations import GitOperations
from worktree_depot.services.worktrees import WorktreeService

console = Console(highlight=False, soft_wrap=True, emoji=False)
logger = get_logger(__name__)


class WorktreeKeeper:
    """Implements the wk commands against one configuration.

    The repository root is resolved on first use, so `wk path` and friends
    fail with NotARepositoryError only when they actually need it.
    """

    def __init__(self, config: Config, runner: Optional[GitRunner] = None):
        """Initialize WorktreeKeeper.

        Args:
            config: Resolved configuration (cwd, home, --repo, --depot)
            runner: Git invoker; a fresh GitRunner when omitted
        """
        self.config = config
        self.runner = runner or GitRunner()
        self.operations = GitOperations(self.runner)
        self._repo_root: Optional[str] = None

    @property
    def repo_root(self) -> str:
        if self._repo_root is None:
            self._repo_root = resolve_repo_root(self.runner, self.config.repo_start)
        return self._repo_root

    @property
    def depot(self) -> str:
        return self.config.depot_path

    @property
    def worktrees(self) -> WorktreeService:
        return WorktreeService(self.repo_root, self.runner)

    def worktree_path(self, name: str) -> str:
        return worktree_path(self.depot, self.repo_root, name)

    def new(
        self,
        name: Optional[str],
        base: Optional[str] = None,
        branch: Optional[str] = None,
        no_branch: bool = False,
    ) -> str:
        """Create worktree ``name`` in the depot.

        Args:
            name: Worktree name
            base: Start point (default: main)
            branch: Branch to create or reuse (default: ``name``)
            no_branch: Check out ``base`` directly, creating no branch

        Returns:
            Path of the new worktree
        """
        if not name:
            raise UsageError(USAGE_NEW)
        base = base or DEFAULT_BASE_REF
        branch = branch or name

        wk_dir = self.worktree_path(name)
        os.makedirs(os.path.dirname(wk_dir), exist_ok=True)

        if os.path.exists(wk_dir):
            raise WorktreeExistsError(wk_dir, name)

        worktrees = self.worktrees
        if no_branch:
            worktrees.add_worktree(wk_dir, base)
        elif self.operations.branch_exists(self.repo_root, branch):
            logger.debug(f"Branch {branch} exists, checking it out")
            worktrees.add_worktree(wk_dir, branch)
        else:
            worktrees.add_worktree(wk_dir, base, new_branch=branch)

        console.print(
            format_created_summary(
                name, wk_dir, self.repo_root, None if no_branch else branch, base
            )
        )
        return wk_dir

    def list(self, all_repos: bool = False) -> str:
        """Print `git worktree list` for this repository.

        ``all_repos`` is accepted, but the listing stays scoped to the
        resolved repository; there is no cross-repository aggregation.
        """
        if all_repos:
            logger.debug("--all given; listing is still limited to the current repo")
        output = self.worktrees.list_output()
        console.print(output, markup=False)
        return output

    def path(self, name: Optional[str]) -> str:
        """Print the depot path of ``name`` without checking it exists."""
        if not name:
            raise UsageError(USAGE_PATH)
        wk_dir = self.worktree_path(name)
        console.print(wk_dir, markup=False)
        return wk_dir

    def rm(
        self,
        name: Optional[str] = None,
        all_worktrees: bool = False,
        force: bool = False,
        delete_branch: bool = False,
        keep_branch: bool = False,
    ) -> List[str]:
        """Remove one worktree, or with ``all_worktrees`` every one in this repo's depot.

        Returns:
            Names of the removed worktrees, in removal order
        """
        if not name and not all_worktrees:
            raise UsageError(USAGE_RM)
        if name and all_worktrees:
            raise UsageError(USAGE_RM_CONFLICT)

        if all_worktrees:
            names = self.worktrees.find_depot_worktrees(repo_depot_dir(self.depot, self.repo_root))
            if not names:
                console.print(MSG_NOTHING_TO_REMOVE)
                return []
        else:
            names = [name]

        for worktree_name in names:
            self._remove_one(worktree_name, force, delete_branch and not keep_branch)
        return names

    def _remove_one(self, name: str, force: bool, delete_branch: bool) -> None:
        wk_dir = self.worktree_path(name)
        if not os.path.exists(wk_dir):
            raise WorktreeNotFoundError(wk_dir, "No worktree directory found")

        worktrees = self.worktrees
        worktrees.remove_worktree(wk_dir, force=force)

        # Advisory cleanup; git has already unregistered the worktree
        cleaned, error = worktrees.remove_leftover_directory(wk_dir)
        if not cleaned:
            logger.debug(error)

        deleted: Optional[bool] = None
        if delete_branch:
            deleted, _ = self.operations.delete_branch(self.repo_root, name)
        console.print(format_removed(name, deleted))

    def apply(
        self,
        name: Optional[str],
        target: Optional[str] = None,
        merge: bool = False,
        rebase: bool = False,
        patch: bool = False,
        switch: bool = False,
        no_ff: bool = False,
        message: Optional[str] = None,
    ) -> ApplyMode:
        """Apply worktree ``name`` back onto ``target`` (default: main)."""
        if not name:
            raise UsageError(USAGE_APPLY)

        wk_dir = self.worktree_path(name)
        if not os.path.exists(wk_dir):
            raise WorktreeNotFoundError(wk_dir)

        service = ApplyService(self.repo_root, wk_dir, self.operations)
        return service.apply(
            name,
            target or DEFAULT_TARGET_BRANCH,
            merge=merge,
            rebase=rebase,
            patch=patch,
            switch=switch,
            no_ff=no_ff,
            message=message,
        )

    def prune(self) -> None:
        """Drop metadata of worktrees whose directories are gone."""
        self.worktrees.prune_worktrees()
        console.print(f"[green]{escape(MSG_PRUNED)}[/green]")
