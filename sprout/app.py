"""Command flows for sprout"""

from typing import Callable, List, Optional, Union

import git
from rich.console import Console

from sprout.config import Config, ConfigStore, UserConfig
from sprout.core import WorktreeLifecycle
from sprout.exceptions import ProviderAuthError
from sprout.formatters import format_dirty_warning, format_removal_hint
from sprout.models.candidate import Candidate, LinearIssue
from sprout.models.worktree import RemovalCandidate
from sprout.services.git.errors import describe_git_error
from sprout.services.git.repo_locator import resolve_root
from sprout.services.git.worktrees import WorktreeService
from sprout.services.github_service import GitHubService
from sprout.services.linear_service import LinearService
from sprout.services.session_service import SessionSwitcher
from sprout.ui.prompts import CANCELLED, Option, Prompter, is_cancelled
from sprout.utils.naming import is_sprout_worktree, worktree_path_for
from sprout.logging_config import get_logger

console = Console()
logger = get_logger(__name__)


def fork_branch_name(number: int, branch: str) -> str:
    """Local branch for a fork PR, kept apart from same-named branches on origin."""
    return f"pr-{number}-{branch}"


class Sprout:
    """Main class for sprout commands.

    Each command returns the process exit code; fatal problems are raised as
    SproutError subclasses and turned into exit codes by the CLI.
    """

    def __init__(
        self,
        config: Config,
        cwd: Optional[str] = None,
        prompter: Optional[Prompter] = None,
        config_store: Optional[ConfigStore] = None,
        session: Optional[SessionSwitcher] = None,
        github_service: Optional[GitHubService] = None,
        linear_service_factory: Optional[Callable[[str], LinearService]] = None,
    ):
        self.config = config
        # Raises NotARepositoryError before anything else happens
        self.repo_root = resolve_root(cwd)
        logger.debug(f"Repository root: {self.repo_root}")

        self.worktree_service = WorktreeService(self.repo_root, config.remote_name)
        self.lifecycle = WorktreeLifecycle(self.worktree_service, config)
        self.prompter = prompter or Prompter()
        self.config_store = config_store or ConfigStore()
        self.session = session or SessionSwitcher(config.dir_file, config.shell)
        self.github_service = github_service
        self.linear_service_factory = linear_service_factory or (
            lambda api_key: LinearService(api_key, config.linear_api_url)
        )

    def worktree_path(self, candidate: Candidate) -> str:
        return worktree_path_for(self.repo_root, candidate.target_branch, self.config.slug_max_length)

    def _cancelled(self) -> int:
        console.print("[dim]Cancelled[/dim]")
        return 0

    def _checkout(self, candidate: Candidate, create_action: Callable[[], None]) -> int:
        """Ensure the candidate's worktree exists, then enter it."""
        path = self.worktree_path(candidate)
        self.lifecycle.ensure(path, candidate.short_label, create_action)
        self.session.enter(path)
        return 0

    # Pull requests

    def checkout_pull_request(self) -> int:
        """Pick an open PR and check it out as a worktree."""
        if self.github_service is None:
            github_token = self.config.github_token or self.config_store.load().github_token
            self.github_service = GitHubService(self.repo_root, github_token, self.config.remote_name)

        try:
            with console.status("[bold blue]Fetching PRs...", spinner="dots"):
                pull_requests = self.github_service.list_open_pull_requests(self.config.limit)
        finally:
            self.github_service.close()

        console.print(f"Found {len(pull_requests)} open PRs")
        if not pull_requests:
            console.print("[green]No open PRs found[/green]")
            return 0

        candidates = [Candidate.from_pull_request(pr) for pr in pull_requests]
        selected = self.prompter.select(
            "Select a PR to checkout as a worktree",
            [Option(c, c.label, c.metadata_for_display) for c in candidates],
        )
        if is_cancelled(selected):
            return self._cancelled()

        path = self.worktree_path(selected)
        return self._checkout(
            selected,
            lambda: self._create_pull_request_worktree(
                path, int(selected.identifier), selected.target_branch, selected.is_cross_repository
            ),
        )

    def _create_pull_request_worktree(
        self, path: str, number: int, branch: str, cross_repository: bool = False
    ) -> None:
        """Fetch the PR head and add a worktree on its branch.

        Fork PRs are always taken from pull/<n>/head onto a local branch
        named by ``fork_branch_name``. The main checkout's HEAD is left alone.
        """
        service = self.worktree_service
        if cross_repository:
            service.fetch_pull_request(number)
            local_branch = fork_branch_name(number, branch)
            if service.branch_exists(local_branch):
                service.add_worktree(path, local_branch)
            else:
                service.add_worktree(path, local_branch, new_branch=True, start_point="FETCH_HEAD")
            return

        try:
            service.fetch_branch(branch)
            on_remote = True
        except git.exc.GitCommandError as e:
            # Head branch deleted from origin: pull/<n>/head still has the commits
            logger.debug(f"Branch {branch} not fetchable ({describe_git_error(e)}), fetching pull/{number}/head")
            service.fetch_pull_request(number)
            on_remote = False

        if on_remote or service.branch_exists(branch):
            # git creates a tracking branch from <remote>/<branch> when needed
            service.add_worktree(path, branch)
        else:
            service.add_worktree(path, branch, new_branch=True, start_point="FETCH_HEAD")

    # Linear tickets

    def checkout_linear_issue(self) -> int:
        """Pick an assigned Linear issue and start a worktree on its branch."""
        issues = self._fetch_linear_issues()
        if is_cancelled(issues):
            return self._cancelled()

        console.print(f"Found {len(issues)} open issues")
        if not issues:
            console.print("[green]No assigned open issues found[/green]")
            return 0

        candidates = [Candidate.from_linear_issue(issue) for issue in issues]
        selected = self.prompter.select(
            "Select an issue to work on",
            [Option(c, c.label, c.metadata_for_display) for c in candidates],
        )
        if is_cancelled(selected):
            return self._cancelled()

        path = self.worktree_path(selected)
        return self._checkout(selected, lambda: self._create_ticket_worktree(path, selected.target_branch))

    def _create_ticket_worktree(self, path: str, branch: str) -> None:
        # Reuse the branch if an earlier worktree for this ticket was removed
        if self.worktree_service.branch_exists(branch):
            self.worktree_service.add_worktree(path, branch)
        else:
            self.worktree_service.add_worktree(path, branch, new_branch=True)

    def _prompt_linear_api_key(self, user_config: UserConfig):
        """Ask for a Linear API key and persist it."""
        api_key = self.prompter.text(
            "Enter your Linear API key (lin_api_...)",
            password=True,
            validate=lambda value: None if value else "API key is required",
        )
        if is_cancelled(api_key):
            return CANCELLED

        user_config.linear_api_key = api_key
        self.config_store.save(user_config)
        console.print(f"[dim]Saved API key to {self.config_store.path}[/dim]")
        return api_key

    def _fetch_linear_issues(self) -> Union[List[LinearIssue], object]:
        """List issues, asking for an API key when none is stored or it is rejected."""
        user_config = self.config_store.load()
        api_key = user_config.linear_api_key
        if not api_key:
            api_key = self._prompt_linear_api_key(user_config)
            if is_cancelled(api_key):
                return CANCELLED

        try:
            return self._list_linear_issues(api_key)
        except ProviderAuthError as e:
            logger.info(str(e))
            console.print(f"[yellow]{e}[/yellow]")

        # One retry with a fresh key; a second rejection is fatal
        api_key = self._prompt_linear_api_key(user_config)
        if is_cancelled(api_key):
            return CANCELLED
        return self._list_linear_issues(api_key)

    def _list_linear_issues(self, api_key: str) -> List[LinearIssue]:
        service = self.linear_service_factory(api_key)
        with console.status("[bold blue]Fetching Linear issues...", spinner="dots"):
            return service.list_assigned_issues(self.config.limit)

    # Cleanup

    def clean(self) -> int:
        """Pick sprout worktrees and remove them."""
        worktrees = [
            wt for wt in self.worktree_service.list_worktrees()
            if is_sprout_worktree(self.repo_root, wt.path)
        ]
        if not worktrees:
            console.print("[green]No sprout worktrees found[/green]")
            return 0

        with console.status("[bold blue]Checking worktree status...", spinner="dots"):
            candidates = self.lifecycle.classify(worktrees)

        selected = self.prompter.multiselect(
            "Select worktrees to remove",
            [
                Option(c, c.branch, format_removal_hint(c), selected=c.merged and not c.dirty)
                for c in candidates
            ],
        )
        if is_cancelled(selected) or not selected:
            return self._cancelled()

        declined = False

        def confirm_dirty(dirty: List[RemovalCandidate]) -> bool:
            nonlocal declined
            console.print(format_dirty_warning(dirty))
            answer = self.prompter.confirm("Remove them anyway? Uncommitted changes will be lost")
            declined = answer is not True
            return answer is True

        removed = self.lifecycle.remove(selected, confirm_dirty)
        if declined:
            return self._cancelled()

        if removed == len(selected):
            console.print(f"[green]Removed {removed} worktree(s)[/green]")
        else:
            console.print(f"[yellow]Removed {removed} of {len(selected)} worktree(s)[/yellow]")
        return 0
