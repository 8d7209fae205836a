"""Command-line interface for wk"""

import sys
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from worktree_depot.__version__ import __version__
from worktree_depot.cli.args import flag_bool, parse_cli_args
from worktree_depot.cli.commands import print_help, run_command
from worktree_depot.config import Config
from worktree_depot.constants import EXIT_FAILURE, EXIT_OK, PROGRAM_NAME
from worktree_depot.exceptions import WorktreeDepotError
from worktree_depot.logging_config import setup_logging

console = Console(highlight=False, soft_wrap=True, emoji=False)
err_console = Console(stderr=True, highlight=False, soft_wrap=True, emoji=False)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    debug = flag_bool(parsed_args, "debug")
    command = parsed_args.command

    if flag_bool(parsed_args, "version"):
        console.print(f"{PROGRAM_NAME} {__version__}")
        return EXIT_OK

    if not command or command in ("help", "-h", "--help") or flag_bool(parsed_args, "help"):
        print_help()
        return EXIT_OK

    try:
        setup_logging(verbose=flag_bool(parsed_args, "verbose"), debug=debug)

        config = Config.from_args(parsed_args)

        if debug:
            err_console.print("[yellow]Debug mode enabled[/yellow]")
            err_console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                err_console.print(f"  {key}: {escape(str(value))}")

        run_command(command, parsed_args, config)
        return EXIT_OK
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return EXIT_FAILURE
    except WorktreeDepotError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        return EXIT_FAILURE
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if debug:
            err_console.print_exception()
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
