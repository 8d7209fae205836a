"""Apply mode enum and precedence rules"""
from enum import Enum


class ApplyMode(Enum):
    """How a worktree's changes are brought back into the main repository."""
    MERGE = "merge"
    REBASE = "rebase"
    PATCH = "patch"
    SWITCH = "switch"


def resolve_apply_mode(merge: bool = False, rebase: bool = False, patch: bool = False) -> ApplyMode:
    """Pick the apply mode from the mode flags.

    Precedence is patch > rebase > merge, defaulting to merge. ``--switch``
    is handled separately by the caller before this is consulted. The
    ``merge`` flag never changes the outcome since merge is also the default.
    """
    if patch:
        return ApplyMode.PATCH
    if rebase:
        return ApplyMode.REBASE
    return ApplyMode.MERGE
