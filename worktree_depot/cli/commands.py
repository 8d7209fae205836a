"""Command dispatch and help text for wk."""

from typing import Callable, Dict, Optional

from rich.console import Console

from worktree_depot.cli.args import ParsedArgs, flag_bool, flag_str
from worktree_depot.config import Config
from worktree_depot.constants import HELP_TEXT
from worktree_depot.core import WorktreeKeeper
from worktree_depot.exceptions import UsageError
from worktree_depot.services.git_runner import GitRunner

console = Console(highlight=False, soft_wrap=True, emoji=False)


def print_help() -> None:
    """Print usage text."""
    console.print(HELP_TEXT, markup=False, end="")


def _cmd_new(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.new(
        args.positional(1),
        base=args.positional(2),
        branch=flag_str(args, "branch"),
        no_branch=flag_bool(args, "no-branch"),
    )


def _cmd_list(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.list(all_repos=flag_bool(args, "all"))


def _cmd_path(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.path(args.positional(1))


def _cmd_rm(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.rm(
        args.positional(1),
        all_worktrees=flag_bool(args, "all"),
        force=flag_bool(args, "force"),
        delete_branch=flag_bool(args, "delete-branch"),
        keep_branch=flag_bool(args, "keep-branch"),
    )


def _cmd_apply(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.apply(
        args.positional(1),
        target=flag_str(args, "target"),
        merge=flag_bool(args, "merge"),
        rebase=flag_bool(args, "rebase"),
        patch=flag_bool(args, "patch"),
        switch=flag_bool(args, "switch"),
        no_ff=flag_bool(args, "no-ff"),
        message=flag_str(args, "message"),
    )


def _cmd_prune(keeper: WorktreeKeeper, args: ParsedArgs) -> None:
    keeper.prune()


COMMANDS: Dict[str, Callable[[WorktreeKeeper, ParsedArgs], None]] = {
    "new": _cmd_new,
    "add": _cmd_new,
    "list": _cmd_list,
    "path": _cmd_path,
    "rm": _cmd_rm,
    "remove": _cmd_rm,
    "apply": _cmd_apply,
    "prune": _cmd_prune,
}


def run_command(
    command: str,
    args: ParsedArgs,
    config: Config,
    runner: Optional[GitRunner] = None,
) -> None:
    """Run one wk command.

    Raises:
        UsageError: For an unknown command (help is printed first)
    """
    handler = COMMANDS.get(command)
    if handler is None:
        print_help()
        raise UsageError(f"Unknown command: {command}")

    handler(WorktreeKeeper(config, runner), args)
