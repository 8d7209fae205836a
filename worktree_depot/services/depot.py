"""Repository identity and depot path resolution."""

import hashlib
import os
import re

from worktree_depot.constants import (
    DEPOT_DIRNAME,
    MSG_NO_REPO_ROOT,
    MSG_NOT_A_REPO,
    REPO_ID_HASH_LENGTH,
)
from worktree_depot.exceptions import CommandFailedError, NotARepositoryError
from worktree_depot.logging_config import get_logger
from worktree_depot.services.git_runner import GitRunner

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def default_depot(home: str) -> str:
    """Default depot location under the given home directory."""
    return os.path.join(home, DEPOT_DIRNAME)


def sanitize_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9._-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", name)


def repo_id_from_root(repo_root: str) -> str:
    """Stable, filesystem-safe identifier for a repository root.

    The sanitized basename keeps the depot readable; the sha1 fingerprint of
    the full path keeps two checkouts with the same basename apart.
    """
    digest = hashlib.sha1(repo_root.encode("utf-8")).hexdigest()[:REPO_ID_HASH_LENGTH]
    base = sanitize_name(os.path.basename(repo_root))
    return f"{base}-{digest}"


def repo_depot_dir(depot: str, repo_root: str) -> str:
    """Directory holding every worktree of one repository."""
    return os.path.join(depot, repo_id_from_root(repo_root))


def worktree_path(depot: str, repo_root: str, name: str) -> str:
    """On-disk path of worktree ``name``; no filesystem access."""
    return os.path.join(repo_depot_dir(depot, repo_root), name)


def resolve_repo_root(runner: GitRunner, start_dir: str) -> str:
    """Resolve the top-level directory of the repository containing ``start_dir``.

    Raises:
        NotARepositoryError: If ``start_dir`` is not inside a git repository
    """
    try:
        root = runner.run(start_dir, ["rev-parse", "--show-toplevel"], quiet=True).stdout.strip()
    except CommandFailedError as e:
        logger.debug(f"rev-parse failed in {start_dir}: {e}")
        raise NotARepositoryError(MSG_NOT_A_REPO) from e

    if not root:
        raise NotARepositoryError(MSG_NO_REPO_ROOT)

    logger.debug(f"Resolved repo root {root} from {start_dir}")
    return root
