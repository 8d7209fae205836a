"""Command-line argument parsing for wk.

Tokenizes argv into positionals and a flag mapping. Flags are never
validated here; each command reads the ones it cares about through
``flag_str`` and ``flag_bool``.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

FlagValue = Union[str, bool]

SHORT_ALIASES = {
    "h": "help",
    "v": "verbose",
}

# Flags that are always boolean never swallow the following token
BOOLEAN_FLAGS = frozenset(
    {
        "all",
        "debug",
        "delete-branch",
        "force",
        "help",
        "keep-branch",
        "merge",
        "no-branch",
        "no-ff",
        "patch",
        "rebase",
        "switch",
        "verbose",
        "version",
    }
)


@dataclass
class ParsedArgs:
    """Positional arguments plus named flags of one invocation."""

    positionals: List[str] = field(default_factory=list)
    flags: Dict[str, FlagValue] = field(default_factory=dict)

    @property
    def command(self) -> Optional[str]:
        return self.positionals[0] if self.positionals else None

    def positional(self, index: int) -> Optional[str]:
        """Return the positional at ``index`` or None when absent."""
        if index < len(self.positionals):
            return self.positionals[index]
        return None


def parse_cli_args(argv: List[str]) -> ParsedArgs:
    """Parse command-line arguments (program name excluded)."""
    parsed = ParsedArgs()
    index = 0

    while index < len(argv):
        token = argv[index]
        index += 1

        if token == "--":
            parsed.positionals.extend(argv[index:])
            break

        if token.startswith("--"):
            body = token[2:]
            if "=" in body:
                name, value = body.split("=", 1)
                parsed.flags[name] = value
                continue

            if (
                body not in BOOLEAN_FLAGS
                and index < len(argv)
                and not argv[index].startswith("-")
            ):
                parsed.flags[body] = argv[index]
                index += 1
            else:
                parsed.flags[body] = True
            continue

        if token.startswith("-") and len(token) > 1:
            for letter in token[1:]:
                parsed.flags[SHORT_ALIASES.get(letter, letter)] = True
            continue

        parsed.positionals.append(token)

    return parsed


def flag_str(args: ParsedArgs, key: str, fallback: Optional[str] = None) -> Optional[str]:
    """Return a string flag value, or ``fallback`` if unset or boolean."""
    value = args.flags.get(key)
    if isinstance(value, str):
        return value
    return fallback


def flag_bool(args: ParsedArgs, key: str, fallback: bool = False) -> bool:
    """Return a boolean flag value.

    Strings "true" and "false" (from ``--flag=true``) are coerced; any other
    string, or an unset flag, yields ``fallback``.
    """
    value = args.flags.get(key)
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return fallback
