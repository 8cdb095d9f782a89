"""Locate the main checkout of the current repository."""

import os
from pathlib import Path
from typing import Optional

import git

from sprout.exceptions import NotARepositoryError
from sprout.services.git.errors import describe_git_error
from sprout.logging_config import get_logger

logger = get_logger(__name__)

# What `git rev-parse --git-common-dir` prints at the top of a normal checkout
MAIN_CHECKOUT_MARKER = ".git"


def resolve_root(cwd: Optional[str] = None) -> str:
    """Resolve the root directory of the main checkout.

    Works from the main checkout and from inside any linked worktree, so every
    worktree path sprout derives is a sibling of the same root.

    Args:
        cwd: Directory to start from (defaults to the current directory)

    Returns:
        Absolute path of the repository root

    Raises:
        NotARepositoryError: If ``cwd`` is not inside a git repository
    """
    cwd = cwd or os.getcwd()
    cmd = git.Git(cwd)

    try:
        common_dir = cmd.rev_parse("--git-common-dir").strip()
        if common_dir == MAIN_CHECKOUT_MARKER:
            root = cmd.rev_parse("--show-toplevel").strip()
            logger.debug(f"Main checkout root: {root}")
            return root
    except git.exc.CommandError as e:
        raise NotARepositoryError(describe_git_error(e)) from e

    # Linked worktrees and subdirectories get the shared metadata dir, which
    # may be relative to cwd
    common_path = Path(common_dir)
    if not common_path.is_absolute():
        common_path = (Path(cwd) / common_path).resolve()

    if common_path.name == MAIN_CHECKOUT_MARKER:
        root = str(common_path.parent)
    else:
        # Bare repository: the metadata dir is the repository itself
        root = str(common_path)

    logger.debug(f"Resolved repository root {root} from common dir {common_dir}")
    return root
