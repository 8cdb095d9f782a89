"""
sprout - check out pull requests and issues as git worktrees
"""

from .__version__ import __version__
from .app import Sprout
from .core import WorktreeLifecycle
from .cli.main import main

__all__ = ["Sprout", "WorktreeLifecycle", "main", "__version__"]
