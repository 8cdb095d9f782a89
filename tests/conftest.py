"""Pytest fixtures for sprout tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from sprout.config import Config, ConfigStore
from sprout.services.session_service import SessionSwitcher
from sprout.ui.prompts import CANCELLED


def _configure_identity(repo):
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def _commit_file(repo, name, content, message):
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        # git reports resolved paths, so compare against resolved ones
        yield Path(tmpdir).resolve()


@pytest.fixture
def config():
    """Runtime configuration without dependency installs or handoff file."""
    return Config(install_dependencies=False, dir_file=None, shell="/bin/sh")


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_identity(repo)
    _commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Repository with a branch merged into main and one that is not."""
    repo = git_repo

    repo.git.checkout("-b", "feature/to-merge")
    _commit_file(repo, "merge.txt", "Merge content\n", "Feature to merge")
    repo.git.checkout("main")
    repo.git.merge("feature/to-merge", "--no-ff", "-m", "Merge feature/to-merge")

    repo.git.checkout("-b", "feature/active")
    _commit_file(repo, "active.txt", "Active content\n", "Active work")
    repo.git.checkout("main")

    yield repo


@pytest.fixture
def git_repo_with_remote(git_repo, temp_dir):
    """Repository whose origin is a local bare repo.

    origin has branch feature/pr-branch and a fork-style ref refs/pull/8/head
    whose branch (fork/feature) does not exist on origin.
    """
    repo = git_repo
    remote_path = temp_dir / "remote.git"
    git.Repo.init(remote_path, bare=True)
    repo.create_remote("origin", str(remote_path))
    repo.git.push("origin", "main")

    repo.git.checkout("-b", "feature/pr-branch")
    _commit_file(repo, "pr.txt", "PR content\n", "PR work")
    repo.git.push("origin", "feature/pr-branch")
    repo.git.checkout("main")
    repo.git.branch("-D", "feature/pr-branch")

    repo.git.checkout("-b", "fork/feature")
    _commit_file(repo, "fork.txt", "Fork content\n", "Fork work")
    repo.git.push("origin", "fork/feature:refs/pull/8/head")
    repo.git.checkout("main")
    repo.git.branch("-D", "fork/feature")

    yield repo


@pytest.fixture
def git_repo_with_fork_prs(git_repo_with_remote):
    """origin also has a branch named fix; forks opened PRs from fix and main.

    refs/pull/9/head (fork branch fix) holds fork.txt and
    refs/pull/10/head (fork branch main) holds fork-main.txt.
    """
    repo = git_repo_with_remote

    repo.git.checkout("-b", "fix")
    _commit_file(repo, "origin.txt", "Origin fix\n", "Origin fix")
    repo.git.push("origin", "fix")
    repo.git.checkout("main")
    repo.git.branch("-D", "fix")

    for number, name in ((9, "fork.txt"), (10, "fork-main.txt")):
        repo.git.checkout("-b", "incoming")
        _commit_file(repo, name, "Fork content\n", f"Fork work for #{number}")
        repo.git.push("origin", f"incoming:refs/pull/{number}/head")
        repo.git.checkout("main")
        repo.git.branch("-D", "incoming")

    yield repo


@pytest.fixture
def repo_root(git_repo):
    return git_repo.working_dir


@pytest.fixture
def config_store(temp_dir):
    return ConfigStore(temp_dir / "home" / ".sprout" / "config")


@pytest.fixture
def mock_session():
    return Mock(spec=SessionSwitcher)


class FakePrompter:
    """Prompter that replays scripted answers and records the questions."""

    def __init__(self, select=None, multiselect=None, confirm=None, text=None):
        self.select_answers = list(select or [])
        self.multiselect_answers = list(multiselect or [])
        self.confirm_answers = list(confirm or [])
        self.text_answers = list(text or [])
        self.calls = []

    def select(self, message, options):
        self.calls.append(("select", message, options))
        answer = self.select_answers.pop(0)
        if callable(answer):
            return answer(options)
        return answer

    def multiselect(self, message, options):
        self.calls.append(("multiselect", message, options))
        answer = self.multiselect_answers.pop(0)
        if callable(answer):
            return answer(options)
        return answer

    def confirm(self, message, default=False):
        self.calls.append(("confirm", message))
        return self.confirm_answers.pop(0)

    def text(self, message, password=False, validate=None):
        self.calls.append(("text", message))
        return self.text_answers.pop(0)


def first_option(options):
    return options[0].value


def all_options(options):
    return [o.value for o in options]


@pytest.fixture
def fake_prompter_factory():
    return FakePrompter


@pytest.fixture
def cancelled():
    return CANCELLED
