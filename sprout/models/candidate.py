"""Candidate models produced by the PR and ticket sources."""

from dataclasses import dataclass
from enum import Enum


class CandidateKind(Enum):
    """Where a candidate came from."""
    PULL_REQUEST = "pull_request"
    TICKET = "ticket"


@dataclass
class PullRequestInfo:
    """An open pull request as listed by GitHub."""
    number: int
    title: str
    head_ref_name: str
    author: str
    # Head branch lives in a fork, so its name may clash with a branch on origin
    is_cross_repository: bool = False


@dataclass
class LinearIssue:
    """An assigned Linear issue."""
    identifier: str
    title: str
    branch_name: str
    state_name: str
    priority_label: str


@dataclass
class Candidate:
    """Something the user can pick to get a worktree for."""
    identifier: str
    title: str
    target_branch: str
    is_new_branch: bool
    metadata_for_display: str
    kind: CandidateKind
    is_cross_repository: bool = False

    @property
    def label(self) -> str:
        if self.kind == CandidateKind.PULL_REQUEST:
            return f"#{self.identifier}: {self.title}"
        return f"{self.identifier}: {self.title}"

    @property
    def short_label(self) -> str:
        """Label used in progress messages, e.g. 'PR #7' or 'ENG-123'."""
        if self.kind == CandidateKind.PULL_REQUEST:
            return f"PR #{self.identifier}"
        return self.identifier

    @classmethod
    def from_pull_request(cls, pr: PullRequestInfo) -> "Candidate":
        return cls(
            identifier=str(pr.number),
            title=pr.title,
            target_branch=pr.head_ref_name,
            is_new_branch=False,
            metadata_for_display=f"{pr.head_ref_name} by {pr.author}",
            kind=CandidateKind.PULL_REQUEST,
            is_cross_repository=pr.is_cross_repository,
        )

    @classmethod
    def from_linear_issue(cls, issue: LinearIssue) -> "Candidate":
        meta = issue.state_name
        if issue.priority_label:
            meta = f"{meta} · {issue.priority_label}"
        return cls(
            identifier=issue.identifier,
            title=issue.title,
            target_branch=issue.branch_name,
            is_new_branch=True,
            metadata_for_display=meta,
            kind=CandidateKind.TICKET,
        )
