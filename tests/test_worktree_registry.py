"""Tests for worktree listing and WorktreeService"""
from pathlib import Path

import git
import pytest

from sprout.models.worktree import Worktree
from sprout.services.git.worktrees import WorktreeService, parse_worktree_listing


LISTING = """worktree /src/app
HEAD 1111111111111111111111111111111111111111
branch refs/heads/main

worktree /src/app--feature-x
HEAD 2222222222222222222222222222222222222222
branch refs/heads/feature/x

worktree /src/app--fix
HEAD 3333333333333333333333333333333333333333
branch refs/heads/fix

"""


class TestParseWorktreeListing:
    """Test parsing of git worktree list --porcelain."""

    def test_parses_all_blocks_in_order(self):
        assert parse_worktree_listing(LISTING) == [
            Worktree(path="/src/app", branch="main"),
            Worktree(path="/src/app--feature-x", branch="feature/x"),
            Worktree(path="/src/app--fix", branch="fix"),
        ]

    def test_last_block_without_trailing_blank_line(self):
        assert len(parse_worktree_listing(LISTING.rstrip("\n"))) == 3

    def test_detached_worktree_is_dropped(self):
        listing = (
            "worktree /src/app\nHEAD 111\nbranch refs/heads/main\n\n"
            "worktree /src/app--detached\nHEAD 222\ndetached\n\n"
            "worktree /src/app--b\nHEAD 333\nbranch refs/heads/b\n\n"
        )
        result = parse_worktree_listing(listing)
        assert [wt.path for wt in result] == ["/src/app", "/src/app--b"]

    def test_bare_entry_is_dropped(self):
        listing = "worktree /src/app.git\nbare\n\nworktree /src/main\nHEAD 1\nbranch refs/heads/main\n"
        assert parse_worktree_listing(listing) == [Worktree(path="/src/main", branch="main")]

    def test_branch_from_previous_block_does_not_leak(self):
        listing = "worktree /a\nbranch refs/heads/a\n\nworktree /b\ndetached\n\n"
        assert parse_worktree_listing(listing) == [Worktree(path="/a", branch="a")]

    def test_path_with_spaces(self):
        listing = "worktree /src/my app--x\nbranch refs/heads/x\n\n"
        assert parse_worktree_listing(listing)[0].path == "/src/my app--x"

    def test_locked_and_prunable_lines_ignored(self):
        listing = "worktree /a\nHEAD 1\nbranch refs/heads/a\nlocked reason\nprunable gitdir file points to non-existent location\n\n"
        assert parse_worktree_listing(listing) == [Worktree(path="/a", branch="a")]

    def test_empty_output(self):
        assert parse_worktree_listing("") == []


class TestWorktreeService:
    """Test WorktreeService against a real repository."""

    def test_list_main_checkout(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        assert service.list_worktrees() == [Worktree(path=git_repo.working_dir, branch="main")]

    def test_add_new_branch_worktree(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = f"{git_repo.working_dir}--feature-x"

        service.add_worktree(path, "feature/x", new_branch=True)

        assert Worktree(path=path, branch="feature/x") in service.list_worktrees()
        assert service.branch_exists("feature/x")

    def test_add_existing_branch_worktree(self, git_repo_with_branches):
        service = WorktreeService(git_repo_with_branches.working_dir)
        path = f"{git_repo_with_branches.working_dir}--feature-active"

        service.add_worktree(path, "feature/active")

        assert (Path(path) / "active.txt").exists()

    def test_add_unknown_branch_raises(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        with pytest.raises(git.exc.GitCommandError):
            service.add_worktree(f"{git_repo.working_dir}--nope", "does-not-exist")

    def test_remove_worktree(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = f"{git_repo.working_dir}--tmp"
        service.add_worktree(path, "tmp", new_branch=True)

        success, error = service.remove_worktree(path)

        assert success is True
        assert error is None
        assert not Path(path).exists()

    def test_remove_dirty_worktree_needs_force(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        path = f"{git_repo.working_dir}--dirty"
        service.add_worktree(path, "dirty", new_branch=True)
        (Path(path) / "scratch.txt").write_text("work in progress\n")

        success, error = service.remove_worktree(path)
        assert success is False
        assert "git worktree remove failed" in error

        success, error = service.remove_worktree(path, force=True)
        assert success is True

    def test_get_status(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        assert service.get_status(git_repo.working_dir) == ""

        (Path(git_repo.working_dir) / "new.txt").write_text("x\n")
        assert "new.txt" in service.get_status(git_repo.working_dir)

    def test_get_merged_branches(self, git_repo_with_branches):
        service = WorktreeService(git_repo_with_branches.working_dir)
        merged = service.get_merged_branches("main")

        assert "feature/to-merge" in merged
        assert "feature/active" not in merged

    def test_get_merged_branches_unknown_target(self, git_repo):
        service = WorktreeService(git_repo.working_dir)
        assert service.get_merged_branches("no-such-branch") == set()

    def test_fetch_branch_and_pull_request(self, git_repo_with_remote):
        service = WorktreeService(git_repo_with_remote.working_dir)

        service.fetch_branch("feature/pr-branch")
        assert "origin/feature/pr-branch" in [ref.name for ref in git_repo_with_remote.remote("origin").refs]

        service.fetch_pull_request(8)
        assert git_repo_with_remote.git.rev_parse("FETCH_HEAD")

    def test_fetch_missing_branch_raises(self, git_repo_with_remote):
        service = WorktreeService(git_repo_with_remote.working_dir)
        with pytest.raises(git.exc.GitCommandError):
            service.fetch_branch("fork/feature")
