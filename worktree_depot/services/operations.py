"""Git operations service"""

import os
import tempfile
from typing import List, Optional

from worktree_depot.constants import PATCH_FILE_PREFIX, PATCH_FILE_SUFFIX
from worktree_depot.exceptions import CommandFailedError, PatchApplyError
from worktree_depot.logging_config import get_logger
from worktree_depot.services.depot import sanitize_name
from worktree_depot.services.git_runner import GitRunner

logger = get_logger(__name__)


def join_patch_sections(sections: List[str]) -> str:
    """Concatenate diff sections, skipping empty ones.

    Each kept section is terminated by exactly one newline so the next one
    starts on its own line; a bare blank line between file diffs could be
    misread as hunk context.
    """
    kept = [section.rstrip("\n") + "\n" for section in sections if section.strip()]
    return "".join(kept)


class GitOperations:
    """Repository state queries and mutations used by the worktree commands.

    Every method takes the directory it works in, since the same calls are
    made against the main repository and against worktrees.
    """

    def __init__(self, runner: GitRunner):
        self.runner = runner

    def is_dirty(self, path: str) -> bool:
        """True if ``path`` has staged, unstaged or untracked changes."""
        status = self.runner.run(path, ["status", "--porcelain"], quiet=True).stdout
        return bool(status.strip())

    def current_branch(self, path: str) -> Optional[str]:
        """Name of the branch checked out in ``path``; None when detached or unknown."""
        try:
            branch = self.runner.run(path, ["rev-parse", "--abbrev-ref", "HEAD"], quiet=True).stdout.strip()
        except CommandFailedError as e:
            logger.debug(f"Could not read current branch in {path}: {e}")
            return None
        if not branch or branch == "HEAD":
            return None
        return branch

    def branch_exists(self, repo_root: str, branch_name: str) -> bool:
        """Check whether a local branch exists."""
        return self.runner.succeeds(
            repo_root, ["show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"]
        )

    def merge_base(self, repo_root: str, target: str, branch_name: str) -> str:
        """Merge-base of ``target`` and ``branch_name``, falling back to ``target``."""
        try:
            base = self.runner.run(repo_root, ["merge-base", target, branch_name], quiet=True).stdout.strip()
        except CommandFailedError as e:
            logger.debug(f"No merge-base for {target} and {branch_name}: {e}")
            return target
        return base or target

    def checkout(self, path: str, ref: str) -> None:
        self.runner.run(path, ["checkout", ref])

    def detach_head(self, path: str) -> None:
        """Detach HEAD so the branch can be checked out elsewhere."""
        self.runner.run(path, ["checkout", "--detach"])

    def merge(self, path: str, branch_name: str, no_ff: bool = False, ff_only: bool = False) -> None:
        args = ["merge"]
        if no_ff:
            args.append("--no-ff")
        if ff_only:
            args.append("--ff-only")
        args.append(branch_name)
        self.runner.run(path, args)

    def rebase(self, path: str, onto: str) -> None:
        self.runner.run(path, ["rebase", onto])

    def commit(self, path: str, message: str) -> None:
        self.runner.run(path, ["commit", "-m", message])

    def restore_branch(self, repo_root: str, branch_name: str) -> tuple[bool, Optional[str]]:
        """Check ``branch_name`` back out without raising.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self.runner.run(repo_root, ["checkout", branch_name], quiet=True)
            logger.debug(f"Restored branch {branch_name}")
            return True, None
        except CommandFailedError as e:
            error_msg = f"Could not restore branch {branch_name}: {e.stderr or e}"
            logger.info(error_msg)
            return False, error_msg

    def delete_branch(self, repo_root: str, branch_name: str) -> tuple[bool, Optional[str]]:
        """Force-delete a local branch.

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            self.runner.run(repo_root, ["branch", "-D", branch_name], quiet=True)
            logger.info(f"Deleted branch {branch_name}")
            return True, None
        except CommandFailedError as e:
            error_msg = e.stderr or str(e)
            logger.info(f"Could not delete branch {branch_name}: {error_msg}")
            return False, error_msg

    def build_patch(self, worktree_dir: str, base_ref: str) -> str:
        """Everything the worktree changed since ``base_ref``.

        Committed work (``base_ref..HEAD``), then the staged diff, then the
        unstaged diff. Untracked files are not part of any section.
        """
        sections = [
            self._diff(worktree_dir, [f"{base_ref}..HEAD"]),
            self._diff(worktree_dir, ["--cached"]),
            self._diff(worktree_dir, []),
        ]
        return join_patch_sections(sections)

    def _diff(self, path: str, args: List[str]) -> str:
        return self.runner.run(path, ["diff", *args], quiet=True, strip_output=False).stdout

    def apply_patch(self, repo_root: str, patch_text: str, name: str) -> None:
        """Apply ``patch_text`` to the index and working tree of ``repo_root``.

        The patch goes through a temporary file that is always deleted. Diff
        text arrives surrogate-escaped from GitPython, so non-UTF-8 bytes are
        written back out unchanged.

        Raises:
            PatchApplyError: If git rejects the patch; carries git's stderr
        """
        if not patch_text.endswith("\n"):
            patch_text += "\n"

        fd, patch_path = tempfile.mkstemp(
            prefix=f"{PATCH_FILE_PREFIX}{sanitize_name(name)}-", suffix=PATCH_FILE_SUFFIX
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as patch_file:
                patch_file.write(patch_text)
            logger.debug(f"Wrote patch to {patch_path}")
            try:
                self.runner.run(repo_root, ["apply", "--index", patch_path], quiet=True)
            except CommandFailedError as e:
                raise PatchApplyError(e) from e
        finally:
            try:
                os.remove(patch_path)
            except FileNotFoundError:
                pass
