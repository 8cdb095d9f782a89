"""Worktree operations service for sprout."""

import git
from typing import Dict, List, Optional

from sprout.constants import DEFAULT_REMOTE
from sprout.models.worktree import Worktree
from sprout.services.git.errors import describe_git_error
from sprout.logging_config import get_logger

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "refs/heads/"


def parse_worktree_listing(output: str) -> List[Worktree]:
    """Parse ``git worktree list --porcelain`` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    Entries without a branch (detached HEAD, bare) are dropped. Order is
    preserved.
    """
    worktrees: List[Worktree] = []
    current: Dict[str, str] = {}

    def flush():
        if current.get("path") and current.get("branch"):
            worktrees.append(Worktree(path=current["path"], branch=current["branch"]))
        current.clear()

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line:
            flush()
        elif line.startswith("worktree "):
            current["path"] = line[len("worktree "):]
        elif line.startswith("branch "):
            ref = line[len("branch "):]
            if ref.startswith(BRANCH_REF_PREFIX):
                ref = ref[len(BRANCH_REF_PREFIX):]
            current["branch"] = ref

    # GitPython strips the trailing newline, so the last block has no blank line
    flush()
    return worktrees


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, repo_path: str, remote_name: str = DEFAULT_REMOTE):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the main checkout
            remote_name: Remote that branches and PRs are fetched from
        """
        self.repo_path = repo_path
        self.remote_name = remote_name

    def _get_repo(self):
        """Get a thread-safe git.Repo instance.

        Creates a new repo instance for each call to ensure thread safety.

        Returns:
            git.Repo: A fresh repository instance
        """
        return git.Repo(self.repo_path)

    def list_worktrees(self) -> List[Worktree]:
        """List all worktrees that have a branch checked out.

        Never cached: callers re-query after every create or remove.
        """
        repo = self._get_repo()
        output = repo.git.worktree("list", "--porcelain")
        worktrees = parse_worktree_listing(output)

        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def branch_exists(self, branch: str) -> bool:
        """Check whether a local branch exists."""
        repo = self._get_repo()
        return branch in [head.name for head in repo.heads]

    def fetch_branch(self, branch: str) -> None:
        """Refresh the remote-tracking ref for ``branch``."""
        repo = self._get_repo()
        refspec = f"+{BRANCH_REF_PREFIX}{branch}:refs/remotes/{self.remote_name}/{branch}"
        repo.git.fetch(self.remote_name, refspec)
        logger.debug(f"Fetched {self.remote_name}/{branch}")

    def fetch_pull_request(self, number: int) -> None:
        """Fetch the head of pull request ``number`` into FETCH_HEAD.

        Works for PRs opened from forks, whose branch is not on the remote.
        """
        repo = self._get_repo()
        repo.git.fetch(self.remote_name, f"pull/{number}/head")
        logger.debug(f"Fetched pull/{number}/head from {self.remote_name}")

    def add_worktree(
        self,
        path: str,
        branch: str,
        new_branch: bool = False,
        start_point: Optional[str] = None,
    ) -> None:
        """Create a worktree at ``path``.

        Args:
            path: Directory for the new worktree (must not exist)
            branch: Branch to check out, or to create when ``new_branch`` is set
            new_branch: Create ``branch`` with ``-b``
            start_point: Commit the new branch starts from (defaults to HEAD)

        Raises:
            git.exc.GitCommandError: If git refuses to create the worktree
        """
        repo = self._get_repo()
        if new_branch:
            args = ["add", "-b", branch, path]
            if start_point:
                args.append(start_point)
        else:
            args = ["add", path, branch]

        repo.git.worktree(*args)
        logger.info(f"Created worktree for {branch} at {path}")

    def remove_worktree(self, path: str, force: bool = False) -> tuple[bool, Optional[str]]:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            Tuple of (success, error_message). error_message is None on success.
        """
        try:
            repo = self._get_repo()
            args = ["remove", path]
            if force:
                args.append("--force")

            repo.git.worktree(*args)
            logger.info(f"Removed worktree at {path}")
            return True, None
        except git.exc.GitCommandError as e:
            stderr = describe_git_error(e)
            error_msg = f"git worktree remove failed (exit {e.status}): {stderr}"
            logger.debug(f"Failed to remove worktree at {path}: {error_msg}")
            return False, error_msg

    def get_status(self, worktree_path: str) -> str:
        """Return ``git status --porcelain`` output for a worktree.

        Raises:
            git.exc.GitCommandError: If git cannot read the worktree
        """
        repo = self._get_repo()
        # Use git -C <path> to run command in that directory
        return repo.git.execute(["git", "-C", worktree_path, "status", "--porcelain"])

    def get_merged_branches(self, target: str) -> set[str]:
        """Get local branches already merged into ``target``.

        An unknown target yields an empty set.
        """
        try:
            repo = self._get_repo()
            output = repo.git.branch("--merged", target, "--format=%(refname:short)")
        except git.exc.GitCommandError as e:
            logger.warning(f"Could not list branches merged into {target}: {describe_git_error(e)}")
            return set()

        merged = {line.strip() for line in output.split("\n") if line.strip()}
        logger.debug(f"{len(merged)} branches merged into {target}")
        return merged
