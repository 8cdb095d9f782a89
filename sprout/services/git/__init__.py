"""Git-related services for sprout."""

from .errors import describe_git_error
from .repo_locator import resolve_root
from .worktrees import WorktreeService, parse_worktree_listing

__all__ = [
    "describe_git_error",
    "resolve_root",
    "WorktreeService",
    "parse_worktree_listing",
]
