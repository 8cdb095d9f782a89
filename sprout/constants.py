"""Shared constants for sprout."""

from typing import List, Tuple

# Worktrees live next to the main checkout: <repo_root>--<slug>
WORKTREE_SEPARATOR = "--"
SLUG_MAX_LENGTH = 40
SLUG_DELIMITER = "-"
PATH_SEPARATORS = ("/", "\\")

DEFAULT_MAIN_BRANCH = "main"
DEFAULT_REMOTE = "origin"
DEFAULT_SHELL = "/bin/bash"
DEFAULT_LIMIT = 50

# Environment variable naming the handoff file read by the shell wrapper
DIR_FILE_ENV = "SPROUT_DIR_FILE"

LINEAR_API_URL = "https://api.linear.app/graphql"
LINEAR_TIMEOUT_SECONDS = 30.0

# Lockfile -> install command. Order sets precedence when several coexist.
LOCKFILE_COMMANDS: List[Tuple[str, List[str]]] = [
    ("bun.lockb", ["bun", "install"]),
    ("bun.lock", ["bun", "install"]),
    ("package-lock.json", ["npm", "install"]),
    ("yarn.lock", ["yarn", "install"]),
    ("pnpm-lock.yaml", ["pnpm", "install"]),
    ("uv.lock", ["uv", "sync"]),
    ("poetry.lock", ["poetry", "install"]),
]

SUPPORTED_SHELLS = ["bash", "zsh", "fish"]

# Symbols used in clean listings
SYMBOL_DIRTY = "M"
SYMBOL_MERGED = "✓"
