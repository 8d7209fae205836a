"""Command-line interface for wk.

This package provides the CLI entry point, argument parsing and command
dispatch.
"""

from .args import ParsedArgs, flag_bool, flag_str, parse_cli_args
from .commands import print_help, run_command
from .main import main

__all__ = [
    "ParsedArgs",
    "flag_bool",
    "flag_str",
    "parse_cli_args",
    "print_help",
    "run_command",
    "main",
]
