"""GitHub pull request source"""
import os
import subprocess
from itertools import islice
from typing import List, Optional, TYPE_CHECKING
from urllib.parse import urlparse

import git
from github import Auth, Github, GithubException

from sprout.constants import DEFAULT_LIMIT, DEFAULT_REMOTE
from sprout.exceptions import ProviderFetchError
from sprout.models.candidate import PullRequestInfo
from sprout.logging_config import get_logger

if TYPE_CHECKING:
    from github.Repository import Repository

logger = get_logger(__name__)

PROVIDER_NAME = "GitHub"


def parse_github_repo(remote_url: str) -> Optional[str]:
    """Extract "owner/repo" from a GitHub remote URL, or None for other hosts."""
    if "github.com" not in remote_url:
        return None

    if remote_url.startswith("git@"):
        # SSH URL format (git@github.com:org/repo.git)
        path = remote_url.split("github.com:", 1)[1]
    else:
        # HTTPS or ssh:// URL format (https://github.com/org/repo.git)
        path = urlparse(remote_url).path

    path = path.strip("/")
    if path.endswith(".git"):
        path = path[:-4]
    return path or None


def gh_cli_token() -> Optional[str]:
    """Ask an authenticated GitHub CLI for its token."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (FileNotFoundError, subprocess.CalledProcessError) as e:
        logger.debug(f"[GitHub] No token from gh CLI: {e}")
        return None
    return result.stdout.strip() or None


class GitHubService:
    """Lists open pull requests for the repository's origin remote."""

    def __init__(self, repo_path: str, github_token: Optional[str] = None, remote_name: str = DEFAULT_REMOTE):
        """Initialize the service.

        Args:
            repo_path: Path to the main checkout
            github_token: Explicit token; otherwise GITHUB_TOKEN, GH_TOKEN or gh CLI
            remote_name: Remote whose URL identifies the GitHub repository
        """
        self.repo_path = repo_path
        self.remote_name = remote_name
        self.github_token = github_token or os.environ.get("GITHUB_TOKEN") or os.environ.get("GH_TOKEN")
        self.github_repo: Optional[str] = None
        self.github: Optional[Github] = None
        self.gh_repo: Optional['Repository'] = None

    def _get_remote_url(self) -> str:
        try:
            repo = git.Repo(self.repo_path)
            return repo.remote(self.remote_name).url
        except (ValueError, git.exc.GitError) as e:
            raise ProviderFetchError(PROVIDER_NAME, f"No '{self.remote_name}' remote found") from e

    def setup_github_api(self) -> None:
        """Connect to the GitHub repository behind the remote.

        Raises:
            ProviderFetchError: If the remote is not on GitHub, no token is
                available, or the repository cannot be opened
        """
        remote_url = self._get_remote_url()
        self.github_repo = parse_github_repo(remote_url)
        if not self.github_repo:
            raise ProviderFetchError(PROVIDER_NAME, f"'{self.remote_name}' is not a GitHub remote: {remote_url}")

        if not self.github_token:
            self.github_token = gh_cli_token()
        if not self.github_token:
            raise ProviderFetchError(
                PROVIDER_NAME,
                "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login`",
            )

        try:
            self.github = Github(auth=Auth.Token(self.github_token))
            self.gh_repo = self.github.get_repo(self.github_repo)
        except GithubException as e:
            raise ProviderFetchError(PROVIDER_NAME, self._describe(e)) from e
        except Exception as e:
            # Network failures surface as requests errors, not GithubException
            raise ProviderFetchError(PROVIDER_NAME, str(e)) from e

        logger.debug(f"[GitHub] GitHub integration enabled for: {self.github_repo}")

    @staticmethod
    def _describe(error: GithubException) -> str:
        data = error.data if isinstance(error.data, dict) else {}
        message = data.get("message") or str(error)
        return f"{error.status} {message}"

    def _is_cross_repository(self, pr) -> bool:
        head_repo = pr.head.repo
        if head_repo is None:
            # Deleted forks leave no head repository
            return True
        return head_repo.full_name.lower() != (self.github_repo or "").lower()

    def list_open_pull_requests(self, limit: int = DEFAULT_LIMIT) -> List[PullRequestInfo]:
        """Open pull requests, newest first, at most ``limit`` of them.

        Raises:
            ProviderFetchError: On any API failure
        """
        if self.gh_repo is None:
            self.setup_github_api()
        assert self.gh_repo is not None

        try:
            pulls = self.gh_repo.get_pulls(state="open", sort="created", direction="desc")
            result = [
                PullRequestInfo(
                    number=pr.number,
                    title=pr.title,
                    head_ref_name=pr.head.ref,
                    author=pr.user.login if pr.user else "unknown",
                    is_cross_repository=self._is_cross_repository(pr),
                )
                for pr in islice(pulls, limit)
            ]
        except GithubException as e:
            raise ProviderFetchError(PROVIDER_NAME, self._describe(e)) from e
        except Exception as e:
            # Network failures surface as requests errors, not GithubException
            raise ProviderFetchError(PROVIDER_NAME, str(e)) from e

        logger.debug(f"[GitHub] Fetched {len(result)} open PRs for {self.github_repo}")
        return result

    def close(self) -> None:
        """Close the GitHub API connection."""
        if self.github is not None:
            self.github.close()
            self.github = None
