"""Command-line interface for sprout"""

import sys

from rich.console import Console

from sprout.app import Sprout
from sprout.cli.args import parse_args
from sprout.config import Config
from sprout.exceptions import SproutError
from sprout.logging_config import get_logger, setup_logging
from sprout.services.session_service import shell_init_script

console = Console()
logger = get_logger(__name__)


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    if parsed_args.command == "shell-init":
        # Evaluated by the shell, so plain stdout only
        sys.stdout.write(shell_init_script(parsed_args.shell))
        return 0

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        config = Config.from_args(parsed_args)

        if config.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}")

        app = Sprout(config)

        if parsed_args.command == "clean":
            return app.clean()
        if parsed_args.command == "linear":
            return app.checkout_linear_issue()
        return app.checkout_pull_request()
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled[/dim]")
        return 0
    except SproutError as e:
        logger.debug(f"{type(e).__name__}: {e}")
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
