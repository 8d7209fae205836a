"""Runs the git binary for wk."""

import os
from dataclasses import dataclass
from typing import List

import git
from rich.console import Console

from worktree_depot.constants import EXIT_COMMAND_NOT_FOUND
from worktree_depot.exceptions import CommandFailedError
from worktree_depot.logging_config import get_logger

err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)
logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of one git invocation."""

    args: List[str]
    exit_code: int
    stdout: str
    stderr: str


class GitRunner:
    """Executes git subcommands in a working directory.

    This is the only place wk touches the git binary. Tests swap it for a
    scripted fake with the same ``run`` signature.
    """

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def run(
        self,
        cwd: str,
        args: List[str],
        quiet: bool = False,
        strip_output: bool = True,
    ) -> CommandResult:
        """Run ``git <args>`` in ``cwd`` and capture its output.

        Args:
            cwd: Working directory for the command
            args: Arguments after the git executable
            quiet: Do not echo captured output when the command fails
                (for probes that are expected to fail)
            strip_output: Trim trailing whitespace from stdout/stderr. Diff
                text is read with this off since its whitespace matters.

        Returns:
            CommandResult with the captured output

        Raises:
            CommandFailedError: If git exits nonzero or cannot be started
        """
        command = [self.executable, *args]
        logger.debug(f"Running {' '.join(command)} (cwd={cwd})")

        # GitPython quietly falls back to the process cwd for a missing directory
        if not os.path.isdir(cwd):
            raise CommandFailedError(
                EXIT_COMMAND_NOT_FOUND, command, stderr=f"No such directory: {cwd}"
            )

        try:
            status, stdout, stderr = git.Git(cwd).execute(
                command,
                with_extended_output=True,
                with_exceptions=False,
                strip_newline_in_stdout=False,
            )
        except git.exc.GitCommandNotFound as e:
            logger.debug(f"Could not start {' '.join(command)}: {e}")
            raise CommandFailedError(
                EXIT_COMMAND_NOT_FOUND, command, stderr=str(e)
            ) from e

        if strip_output:
            stdout = stdout.rstrip()
            stderr = stderr.rstrip()

        if status != 0:
            logger.debug(f"{' '.join(command)} exited with {status}")
            if not quiet:
                if stdout.strip():
                    err_console.print(stdout.rstrip(), markup=False)
                if stderr.strip():
                    err_console.print(stderr.rstrip(), markup=False)
            raise CommandFailedError(status, command, stdout=stdout, stderr=stderr)

        return CommandResult(args=command, exit_code=status, stdout=stdout, stderr=stderr)

    def succeeds(self, cwd: str, args: List[str]) -> bool:
        """Run a quiet probe and report whether it exited zero."""
        try:
            self.run(cwd, args, quiet=True)
            return True
        except CommandFailedError:
            return False
