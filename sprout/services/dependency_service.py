"""Dependency installation for freshly created worktrees."""

import os
import subprocess
from typing import List, Optional, Tuple

from sprout.constants import LOCKFILE_COMMANDS
from sprout.exceptions import DependencyInstallError
from sprout.logging_config import get_logger

logger = get_logger(__name__)


def detect_install_command(worktree_path: str) -> Optional[Tuple[str, List[str]]]:
    """Return (lockfile, command) for the first recognized lockfile, or None."""
    for lockfile, command in LOCKFILE_COMMANDS:
        if os.path.isfile(os.path.join(worktree_path, lockfile)):
            logger.debug(f"Found {lockfile} in {worktree_path}")
            return lockfile, command
    return None


def run_install(worktree_path: str, command: List[str]) -> None:
    """Run an install command inside the worktree.

    Raises:
        DependencyInstallError: If the tool is missing or exits non-zero
    """
    logger.info(f"Running {' '.join(command)} in {worktree_path}")
    try:
        subprocess.run(
            command,
            cwd=worktree_path,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise DependencyInstallError(command[0], f"{command[0]} is not installed") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit code {e.returncode}"
        raise DependencyInstallError(command[0], detail) from e
