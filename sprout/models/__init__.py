"""Data models for sprout."""

from .worktree import Worktree, RemovalCandidate
from .candidate import Candidate, CandidateKind, PullRequestInfo, LinearIssue

__all__ = [
    "Worktree",
    "RemovalCandidate",
    "Candidate",
    "CandidateKind",
    "PullRequestInfo",
    "LinearIssue",
]
