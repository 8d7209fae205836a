"""Brings a worktree's changes back into the main repository."""

from typing import Optional

from rich.console import Console
from rich.markup import escape

from worktree_depot.constants import (
    MSG_APPLY_DIRTY_REPO,
    MSG_EMPTY_PATCH,
    MSG_SWITCH_DIRTY_ABORT,
    MSG_SWITCH_DIRTY_WARNING,
)
from worktree_depot.exceptions import DirtyStateError
from worktree_depot.formatters import format_applied, format_dirty_worktree_warning
from worktree_depot.logging_config import get_logger
from worktree_depot.models.apply_mode import ApplyMode, resolve_apply_mode
from worktree_depot.services.operations import GitOperations

console = Console(highlight=False, soft_wrap=True, emoji=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)
logger = get_logger(__name__)


class ApplyService:
    """Runs `wk apply` for one worktree."""

    def __init__(self, repo_root: str, worktree_dir: str, operations: GitOperations):
        """Initialize the apply service.

        Args:
            repo_root: Main repository the changes land in
            worktree_dir: Worktree the changes come from
            operations: Git operations bound to the runner in use
        """
        self.repo_root = repo_root
        self.worktree_dir = worktree_dir
        self.operations = operations

    def apply(
        self,
        name: str,
        target: str,
        merge: bool = False,
        rebase: bool = False,
        patch: bool = False,
        switch: bool = False,
        no_ff: bool = False,
        message: Optional[str] = None,
    ) -> ApplyMode:
        """Apply branch ``name`` onto ``target``.

        ``switch`` short-circuits everything else. Otherwise the mode is
        picked with patch > rebase > merge precedence.

        Returns:
            The mode that was used

        Raises:
            DirtyStateError: If the main repository must be clean and is not
        """
        if switch:
            self.switch(name)
            return ApplyMode.SWITCH

        mode = resolve_apply_mode(merge=merge, rebase=rebase, patch=patch)
        logger.info(f"Applying {name} onto {target} using {mode.value}")

        if mode is not ApplyMode.PATCH and self.operations.is_dirty(self.repo_root):
            raise DirtyStateError(MSG_APPLY_DIRTY_REPO)

        base_ref = self.operations.merge_base(self.repo_root, target, name)
        logger.debug(f"Base ref for {name}: {base_ref}")

        if mode is not ApplyMode.PATCH and self.operations.is_dirty(self.worktree_dir):
            err_console.print(format_dirty_worktree_warning(mode.value, name))

        prior_branch = self.operations.current_branch(self.repo_root)

        try:
            self.operations.checkout(self.repo_root, target)

            if mode is ApplyMode.MERGE:
                self.operations.merge(self.repo_root, name, no_ff=no_ff)
                console.print(format_applied("merge", name, target))
            elif mode is ApplyMode.REBASE:
                self._rebase(name, target)
                console.print(format_applied("rebase+ff", name, target))
            else:
                self._patch(name, target, base_ref, message)
        finally:
            if prior_branch and prior_branch != target:
                # Leaving the user on target is acceptable if this fails
                restored, error = self.operations.restore_branch(self.repo_root, prior_branch)
                if not restored:
                    logger.info(f"Staying on {target}: {error}")

        return mode

    def switch(self, name: str) -> None:
        """Check out branch ``name`` in the main repository.

        The worktree's HEAD is detached first when it holds the branch, since
        git refuses to check out one branch in two places.
        """
        if self.operations.is_dirty(self.repo_root):
            err_console.print(f"[yellow]{MSG_SWITCH_DIRTY_WARNING}[/yellow]")
            raise DirtyStateError(MSG_SWITCH_DIRTY_ABORT)

        if self.operations.current_branch(self.worktree_dir) == name:
            self.operations.detach_head(self.worktree_dir)

        self.operations.checkout(self.repo_root, name)
        console.print(f"[green]Applied (switch): checked out branch {escape(name)} in repo.[/green]")

    def _rebase(self, name: str, target: str) -> None:
        # Rewrites the worktree branch, then target may only fast-forward
        self.operations.checkout(self.worktree_dir, name)
        self.operations.rebase(self.worktree_dir, target)

        self.operations.checkout(self.repo_root, target)
        self.operations.merge(self.repo_root, name, ff_only=True)

    def _patch(self, name: str, target: str, base_ref: str, message: Optional[str]) -> None:
        patch_text = self.operations.build_patch(self.worktree_dir, base_ref)
        if not patch_text.strip():
            console.print(MSG_EMPTY_PATCH)
            return

        self.operations.apply_patch(self.repo_root, patch_text, name)

        if message:
            self.operations.commit(self.repo_root, message)
            console.print(
                f"[green]Applied (patch) and committed to {escape(target)}: {escape(message)}[/green]"
            )
        else:
            console.print(
                f"[green]Applied (patch) to {escape(target)}. "
                "Changes are staged (git apply --index).[/green]"
            )
            console.print('Tip: commit with: git commit -m "..."')
