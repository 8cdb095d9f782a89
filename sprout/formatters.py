"""Formatting helpers for sprout output."""

from typing import Sequence

from rich.markup import escape

from sprout.constants import SYMBOL_DIRTY, SYMBOL_MERGED
from sprout.models.worktree import RemovalCandidate


def format_removal_hint(candidate: RemovalCandidate) -> str:
    """Hint shown next to a worktree in the clean picker."""
    flags = []
    if candidate.dirty:
        flags.append(f"{SYMBOL_DIRTY} uncommitted changes")
    if candidate.merged:
        flags.append(f"{SYMBOL_MERGED} merged")
    hint = candidate.path
    if flags:
        hint += "  [" + ", ".join(flags) + "]"
    return hint


def format_dirty_warning(candidates: Sequence[RemovalCandidate]) -> str:
    """Rich markup listing worktrees that would lose uncommitted work."""
    lines = ["[yellow]These worktrees have uncommitted changes:[/yellow]"]
    for candidate in candidates:
        lines.append(f"  [bold]{escape(candidate.branch)}[/bold] [dim]{escape(candidate.path)}[/dim]")
    return "\n".join(lines)
