"""Shared constants for wk."""

PROGRAM_NAME = "wk"

# Depot layout: <home>/<DEPOT_DIRNAME>/<repo-id>/<name>
DEPOT_DIRNAME = ".worktrees"
REPO_ID_HASH_LENGTH = 10

DEFAULT_BASE_REF = "main"
DEFAULT_TARGET_BRANCH = "main"

PATCH_FILE_PREFIX = "wk-apply-"
PATCH_FILE_SUFFIX = ".patch"

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_COMMAND_NOT_FOUND = 127


# User-facing messages checked by callers and tests
MSG_SWITCH_DIRTY_WARNING = (
    "Warning: repo has uncommitted changes. Clean your branch before using --switch."
)
MSG_SWITCH_DIRTY_ABORT = "Aborting apply --switch with dirty repo."
MSG_APPLY_DIRTY_REPO = (
    "Main repo has uncommitted changes. Commit/stash them before apply "
    "(or use a clean state)."
)
MSG_NOT_A_REPO = "Not inside a git repository (or --repo is not a git repo)."
MSG_NO_REPO_ROOT = "Could not determine repo root."
MSG_EMPTY_PATCH = "No changes to apply (patch is empty)."
MSG_NOTHING_TO_REMOVE = "No worktrees to remove."
MSG_PRUNED = "Pruned stale worktree metadata."


# Usage lines reported by UsageError
USAGE_NEW = "Usage: wk new <name> [base]"
USAGE_PATH = "Usage: wk path <name>"
USAGE_RM = "Usage: wk rm [<name>] [--all] [--force] [--delete-branch|--keep-branch]"
USAGE_RM_CONFLICT = "Usage: wk rm accepts either <name> or --all, not both"
USAGE_APPLY = "Usage: wk apply <name> [--target <branch>] [--merge|--rebase|--patch|--switch]"


HELP_TEXT = """wk - manage git worktrees in a global depot

USAGE:
  wk <command> [options]

DESCRIPTION:
  Stores worktrees outside your repo so .gitignore isn't affected.
  Default depot:
    ~/.worktrees/<repo-id>/<name>

COMMANDS:
  new <name> [base]      Create worktree <name> from base ref (default: main)
  list                   List worktrees for this repo (--all is repo-scoped too)
  path <name>            Print the filesystem path to a worktree
  rm [<name>] [--all]    Remove worktrees (optionally delete their branch)
  apply <name>           Apply worktree changes back to main repo
  prune                  Clean up stale worktree metadata

GLOBAL OPTIONS:
  --repo <path>          Operate on a specific repo (default: cwd)
  --depot <path>         Override depot path (default: ~/.worktrees)
  -v, --verbose          Show verbose output
  --debug                Log every git call
  --version              Show version
  -h, --help             Show help

NEW OPTIONS:
  --branch <name>        Branch to create or check out (default: <name>)
  --no-branch            Check out <base> directly without creating a branch

RM OPTIONS:
  --force                Remove even if the worktree is dirty or locked
  --delete-branch        Also delete the worktree's branch
  --keep-branch          Never delete the branch (overrides --delete-branch)

APPLY (default):
  wk apply <name> merges branch <name> into --target (default: main).

APPLY MODES:
  --merge    (default)   Merge worktree branch into target
  --rebase               Rebase worktree branch onto target then fast-forward target
  --patch                Apply diff as patch (includes uncommitted changes), optionally commit
  --switch               Switch repo checkout to the ticket branch (requires clean repo)

APPLY OPTIONS:
  --target <branch>      Branch to apply onto (default: main)
  --no-ff                Always create a merge commit (merge mode)
  --message <text>       Commit the applied patch with this message (patch mode)

EXAMPLES:
  wk new feat-login main
  cd "$(wk path feat-login)"
  wk apply feat-login
  wk rm feat-login
"""
