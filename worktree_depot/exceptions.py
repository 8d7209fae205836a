"""Custom exceptions for wk"""

from typing import List, Optional


class WorktreeDepotError(Exception):
    """Base exception for all wk errors."""
    pass


class UsageError(WorktreeDepotError):
    """Raised when a command is missing required arguments."""
    pass


class NotARepositoryError(WorktreeDepotError):
    """Raised when the repository root cannot be resolved."""
    pass


class WorktreeExistsError(WorktreeDepotError):
    """Raised when a worktree directory is already present."""

    def __init__(self, path: str, name: str):
        self.path = path
        self.name = name
        super().__init__(
            f"Worktree already exists at: {path}\nTip: remove it first: wk rm {name}"
        )


class WorktreeNotFoundError(WorktreeDepotError):
    """Raised when a worktree directory is missing."""

    def __init__(self, path: str, message: str = "Worktree not found"):
        self.path = path
        super().__init__(f"{message}: {path}")


class DirtyStateError(WorktreeDepotError):
    """Raised when a repository has uncommitted changes and the operation needs a clean state."""
    pass


class CommandFailedError(WorktreeDepotError):
    """Exception raised when a git invocation exits with a nonzero status."""

    def __init__(
        self,
        exit_code: int,
        command: List[str],
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ):
        self.exit_code = exit_code
        self.command = command
        self.stdout = stdout
        self.stderr = stderr

        error_msg = message or f"Command failed ({exit_code}): {' '.join(command)}"
        super().__init__(error_msg)


class PatchApplyError(CommandFailedError):
    """Exception raised when git refuses to apply a generated patch."""

    def __init__(self, failure: CommandFailedError):
        detail = failure.stderr or failure.stdout
        message = "Patch could not be applied"
        if detail:
            message += f":\n{detail}"
        super().__init__(
            failure.exit_code,
            failure.command,
            stdout=failure.stdout,
            stderr=failure.stderr,
            message=message,
        )
