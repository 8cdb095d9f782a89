"""Worktree data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Worktree:
    """A linked worktree with a checked-out branch."""

    path: str
    branch: str

    def __str__(self) -> str:
        return f"{self.branch} @ {self.path}"


@dataclass(frozen=True)
class RemovalCandidate:
    """A worktree annotated with its state at classification time."""

    worktree: Worktree
    dirty: bool  # Uncommitted or untracked content
    merged: bool  # Branch already merged into the main branch

    @property
    def path(self) -> str:
        return self.worktree.path

    @property
    def branch(self) -> str:
        return self.worktree.branch
