"""Utility functions for sprout.

This package provides utility modules:
- naming: worktree path derivation from branch names
- threading: worker sizing for parallel git queries
"""

from .naming import slugify, worktree_path_for, is_sprout_worktree
from .threading import is_free_threading_enabled, get_optimal_worker_count

__all__ = [
    # Naming
    "slugify",
    "worktree_path_for",
    "is_sprout_worktree",
    # Threading
    "is_free_threading_enabled",
    "get_optimal_worker_count",
]
