"""Console message formatting for wk.

Values interpolated into rich markup are escaped so names or paths that
contain square brackets print literally.
"""

from typing import Optional

from rich.markup import escape

from worktree_depot.constants import PROGRAM_NAME


def format_created_summary(
    name: str, path: str, repo_root: str, branch: Optional[str], base: str
) -> str:
    """Summary printed after `wk new`."""
    branch_display = branch if branch else f"(ref: {base})"
    return (
        f"[green]Created worktree: {escape(name)}[/green]\n"
        f"Path: {escape(path)}\n"
        f"Repo: {escape(repo_root)}\n"
        f"Branch: {escape(branch_display)}\n"
        "\n"
        "Next:\n"
        f'  cd "{escape(path)}"\n'
        f"  {PROGRAM_NAME} apply {escape(name)}"
    )


def format_removed(name: str, deleted_branch: Optional[bool]) -> str:
    """Message for one removed worktree.

    Args:
        name: Worktree (and branch) name
        deleted_branch: None when branch deletion was not requested,
            otherwise whether `git branch -D` succeeded
    """
    if deleted_branch is None:
        return f"Removed worktree: {escape(name)}"
    if deleted_branch:
        return f"Removed worktree and deleted branch: {escape(name)}"
    return (
        f'Removed worktree. Could not delete branch "{escape(name)}" '
        "(it may not exist or is checked out elsewhere)."
    )


def format_applied(mode: str, source: str, target: str) -> str:
    """Success line for merge and rebase applies."""
    return f"[green]Applied ({mode}): {escape(source)} -> {escape(target)}[/green]"


def format_dirty_worktree_warning(mode: str, name: str) -> str:
    """Warning for merge/rebase applies from a worktree with uncommitted changes."""
    return (
        f"[yellow]Warning: worktree has uncommitted changes; {mode} will NOT include them.[/yellow]\n"
        f"Tip: commit them, or use: {PROGRAM_NAME} apply {escape(name)} --patch"
    )
