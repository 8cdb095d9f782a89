"""Custom exceptions for sprout"""

from typing import Optional


class SproutError(Exception):
    """Base exception for all sprout errors.

    ``detail`` carries the underlying diagnostic (usually git's or a tool's
    stderr) when one is available.
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail

        error_msg = message
        if detail:
            error_msg += f": {detail}"

        super().__init__(error_msg)


class NotARepositoryError(SproutError):
    """Raised when sprout is run outside of a git repository."""

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Not in a git repository", detail)


class ProviderFetchError(SproutError):
    """Raised when a PR or ticket source cannot be listed."""

    def __init__(self, provider: str, detail: Optional[str] = None):
        self.provider = provider
        super().__init__(f"Could not fetch from {provider}", detail)


class ProviderAuthError(ProviderFetchError):
    """Raised when a source rejects the supplied credentials."""


class WorktreeCreationError(SproutError):
    """Raised when a worktree could not be created."""

    def __init__(self, path: str, detail: Optional[str] = None):
        self.path = path
        super().__init__("Could not create worktree", detail)


class WorktreeRemovalError(SproutError):
    """Raised when a worktree could not be removed, even with --force."""

    def __init__(self, path: str, detail: Optional[str] = None):
        self.path = path
        super().__init__(f"Could not remove worktree at {path}", detail)


class DependencyInstallError(SproutError):
    """Raised when installing dependencies in a new worktree fails."""

    def __init__(self, tool: str, detail: Optional[str] = None):
        self.tool = tool
        super().__init__(f"Dependency install with {tool} failed", detail)
