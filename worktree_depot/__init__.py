"""
wk - manage git worktrees in a central depot outside the repository
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli.main import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
