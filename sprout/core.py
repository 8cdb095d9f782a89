"""Core worktree lifecycle for sprout"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from sprout.config import Config
from sprout.exceptions import DependencyInstallError, WorktreeCreationError, WorktreeRemovalError
from sprout.models.worktree import RemovalCandidate, Worktree
from sprout.services.dependency_service import detect_install_command, run_install
from sprout.services.git.errors import describe_git_error
from sprout.services.git.worktrees import WorktreeService
from sprout.utils.threading import get_optimal_worker_count
from sprout.logging_config import get_logger

console = Console()
logger = get_logger(__name__)


class WorktreeLifecycle:
    """Creates, classifies and removes sprout worktrees."""

    def __init__(self, worktree_service: WorktreeService, config: Config):
        self.worktree_service = worktree_service
        self.config = config

    def worktree_exists(self, path: str) -> bool:
        """Check the live registry for a worktree at ``path``."""
        return any(wt.path == path for wt in self.worktree_service.list_worktrees())

    def ensure(self, path: str, label: str, create_action: Callable[[], None]) -> bool:
        """Make sure exactly one worktree exists at ``path``.

        Args:
            path: Target worktree directory
            label: Human label for progress output, e.g. "PR #7"
            create_action: Creates the worktree; any exception means failure

        Returns:
            True if a worktree was created, False if one already existed

        Raises:
            WorktreeCreationError: If ``create_action`` fails
        """
        # Re-query right before creating: the listing may be stale
        if self.worktree_exists(path):
            logger.info(f"Worktree already exists at {path}")
            console.print(f"[blue]Worktree already exists at {path}[/blue]")
            return False

        with console.status(f"[bold blue]Creating worktree for {label}...", spinner="dots"):
            try:
                create_action()
            except Exception as e:
                detail = describe_git_error(e)
                logger.debug(f"Creation of {path} failed: {detail}")
                raise WorktreeCreationError(path, detail) from e

        console.print(f"[green]Worktree created at {path}[/green]")

        if self.config.install_dependencies:
            try:
                self.install_dependencies(path)
            except DependencyInstallError as e:
                logger.warning(str(e))
                console.print(f"[yellow]Warning: {e}[/yellow]")
                console.print("[dim]Continuing without installed dependencies[/dim]")

        return True

    def install_dependencies(self, path: str) -> Optional[str]:
        """Install dependencies using the first recognized lockfile.

        Returns:
            The lockfile that was used, or None if there was none

        Raises:
            DependencyInstallError: If the install command fails
        """
        detected = detect_install_command(path)
        if detected is None:
            logger.debug(f"No lockfile in {path}, skipping dependency install")
            return None

        lockfile, command = detected
        with console.status(f"[bold blue]Installing dependencies ({command[0]})...", spinner="dots"):
            run_install(path, command)
        console.print(f"[green]Dependencies installed ({command[0]})[/green]")
        return lockfile

    def _is_dirty(self, worktree: Worktree) -> bool:
        """Status check for one worktree.

        A missing directory has nothing to lose; an unreadable one counts as dirty.
        """
        if not os.path.exists(worktree.path):
            logger.debug(f"Worktree path {worktree.path} doesn't exist (orphaned)")
            return False
        try:
            return bool(self.worktree_service.get_status(worktree.path).strip())
        except Exception as e:
            logger.warning(f"Could not check worktree status for {worktree.path}: {describe_git_error(e)}")
            return True

    def classify(self, worktrees: Sequence[Worktree]) -> List[RemovalCandidate]:
        """Annotate worktrees with dirty and merged flags.

        The merged-branches query and every status query run concurrently;
        results keep the input order.
        """
        if not worktrees:
            return []

        max_workers = get_optimal_worker_count(task_count=len(worktrees) + 1)
        logger.debug(f"Classifying {len(worktrees)} worktrees using {max_workers} workers")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            merged_future = executor.submit(
                self.worktree_service.get_merged_branches, self.config.main_branch
            )
            dirty_futures = [executor.submit(self._is_dirty, wt) for wt in worktrees]

            merged_branches = merged_future.result()
            dirty_flags = [future.result() for future in dirty_futures]

        return [
            RemovalCandidate(worktree=wt, dirty=dirty, merged=wt.branch in merged_branches)
            for wt, dirty in zip(worktrees, dirty_flags)
        ]

    def remove(
        self,
        candidates: Sequence[RemovalCandidate],
        confirm_dirty: Callable[[List[RemovalCandidate]], object],
    ) -> int:
        """Remove the selected worktrees.

        If any candidate is dirty, ``confirm_dirty`` is shown those candidates
        and must return True; anything else aborts the whole batch.

        Returns:
            Number of worktrees removed
        """
        dirty = [c for c in candidates if c.dirty]
        if dirty and confirm_dirty(dirty) is not True:
            logger.info("Removal declined for dirty worktrees, nothing removed")
            return 0

        removed_count = 0
        with console.status(f"[bold blue]Removing {len(candidates)} worktree(s)...", spinner="dots"):
            for candidate in candidates:
                if self._remove_one(candidate.path):
                    removed_count += 1
        return removed_count

    def _remove_one(self, path: str) -> bool:
        """Safe removal, then forced removal. Failures stay local to this path."""
        success, error_message = self.worktree_service.remove_worktree(path)
        if success:
            return True

        logger.debug(f"Safe removal of {path} failed, retrying with --force: {error_message}")
        success, error_message = self.worktree_service.remove_worktree(path, force=True)
        if success:
            return True

        error = WorktreeRemovalError(path, error_message)
        logger.error(str(error))
        console.print(f"[red]{error}[/red]")
        return False
