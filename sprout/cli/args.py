"""Command-line argument parsing for sprout."""

import argparse

from sprout.__version__ import __version__
from sprout.constants import DEFAULT_LIMIT, DEFAULT_MAIN_BRANCH, DIR_FILE_ENV, SUPPORTED_SHELLS


def _add_common_options(parser: argparse.ArgumentParser, suppress: bool = False) -> None:
    """Options accepted both before and after the subcommand.

    Subcommand parsers use SUPPRESS so they don't overwrite values given
    before the subcommand.
    """
    def default(value):
        return argparse.SUPPRESS if suppress else value

    parser.add_argument("-v", "--verbose", action="store_true", default=default(False), help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", default=default(False),
        help="Show debug information and write ~/.sprout/sprout.log",
    )
    parser.add_argument(
        "--main-branch", default=default(DEFAULT_MAIN_BRANCH),
        help="Branch that merged worktrees are compared against (default: main)",
    )
    parser.add_argument(
        "--limit", type=int, metavar="N", default=default(DEFAULT_LIMIT),
        help="Maximum number of PRs or issues to list (default: 50)",
    )
    parser.add_argument(
        "--no-install", action="store_true", default=default(False),
        help="Skip installing dependencies in new worktrees",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sprout",
        description="Check out pull requests and Linear issues as git worktrees",
        epilog=f'Shell integration: add eval "$(sprout shell-init zsh)" to your rc file so '
        f"sprout can cd your shell into the worktree (uses ${DIR_FILE_ENV}).",
    )
    parser.add_argument("--version", action="version", version=f"sprout {__version__}")
    _add_common_options(parser)

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    pr_parser = subparsers.add_parser("pr", help="Check out an open pull request (default)")
    _add_common_options(pr_parser, suppress=True)

    linear_parser = subparsers.add_parser("linear", help="Start a worktree for an assigned Linear issue")
    _add_common_options(linear_parser, suppress=True)

    clean_parser = subparsers.add_parser("clean", help="Remove sprout worktrees")
    _add_common_options(clean_parser, suppress=True)

    init_parser = subparsers.add_parser("shell-init", help="Print the shell wrapper function")
    init_parser.add_argument("shell", nargs="?", choices=SUPPORTED_SHELLS, default="bash", help="Target shell")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "pr"
    return args
