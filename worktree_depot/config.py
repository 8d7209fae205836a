"""Configuration handling for wk"""

import os
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from worktree_depot.services.depot import default_depot as depot_under_home

if TYPE_CHECKING:
    from worktree_depot.cli.args import ParsedArgs


@dataclass
class Config:
    """Explicit configuration handed to every operation.

    The process working directory and home directory are captured once at
    startup so the operations never consult process-global state.
    """

    cwd: str
    home: str
    repo: Optional[str] = None  # --repo
    depot: Optional[str] = None  # --depot
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_cwd()
        self._validate_home()
        self._validate_optional_path("repo")
        self._validate_optional_path("depot")

    def _validate_cwd(self):
        """Validate cwd is an absolute path."""
        if not self.cwd or not os.path.isabs(self.cwd):
            raise ValueError(f"cwd must be an absolute path, got '{self.cwd}'")

    def _validate_home(self):
        """Validate home is not empty."""
        if not self.home or not self.home.strip():
            raise ValueError("home directory cannot be empty")

    def _validate_optional_path(self, key: str):
        """Reject empty strings for --repo / --depot."""
        value = getattr(self, key)
        if value is not None and not value.strip():
            raise ValueError(f"--{key} cannot be empty")

    @property
    def default_depot(self) -> str:
        """The depot used when --depot is not given."""
        return depot_under_home(self.home)

    @property
    def depot_path(self) -> str:
        """Absolute depot path; a relative --depot is taken from cwd."""
        path = self.depot or self.default_depot
        return os.path.normpath(os.path.join(self.cwd, os.path.expanduser(path)))

    @property
    def repo_start(self) -> str:
        """Directory the repository root is resolved from."""
        if self.repo:
            return os.path.normpath(os.path.join(self.cwd, os.path.expanduser(self.repo)))
        return self.cwd

    def to_dict(self) -> dict:
        """Convert config to dictionary (used by --debug output)."""
        return {
            "cwd": self.cwd,
            "home": self.home,
            "repo": self.repo,
            "depot": self.depot,
            "depot_path": self.depot_path,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    @classmethod
    def from_args(
        cls,
        args: "ParsedArgs",
        cwd: Optional[str] = None,
        home: Optional[str] = None,
    ) -> "Config":
        """Create Config from parsed command-line arguments."""
        from worktree_depot.cli.args import flag_bool, flag_str

        return cls(
            cwd=cwd or os.getcwd(),
            home=home or os.path.expanduser("~"),
            repo=flag_str(args, "repo"),
            depot=flag_str(args, "depot"),
            verbose=flag_bool(args, "verbose"),
            debug=flag_bool(args, "debug"),
        )
