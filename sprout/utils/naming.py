"""Worktree path derivation."""

from sprout.constants import PATH_SEPARATORS, SLUG_DELIMITER, SLUG_MAX_LENGTH, WORKTREE_SEPARATOR


def slugify(branch: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Turn a branch name into a filesystem-safe directory suffix.

    Path separators become ``-`` and the result is cut to ``max_length``
    characters. The same branch always yields the same slug.
    """
    slug = branch
    for separator in PATH_SEPARATORS:
        slug = slug.replace(separator, SLUG_DELIMITER)
    return slug[:max_length]


def worktree_path_for(repo_root: str, branch: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Sibling path of the main checkout that holds the worktree for ``branch``."""
    return f"{repo_root}{WORKTREE_SEPARATOR}{slugify(branch, max_length)}"


def is_sprout_worktree(repo_root: str, path: str) -> bool:
    """True if ``path`` follows the <repo_root>--<slug> naming scheme."""
    return path.startswith(f"{repo_root}{WORKTREE_SEPARATOR}")
