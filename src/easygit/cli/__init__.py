"""
easygit CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
import sys

import typer
from rich.console import Console

from easygit import __version__
from easygit.cli import sync
from easygit.core.config.env import load_layered_env

# Create the main Typer app
app = typer.Typer(
    name="easygit",
    help="Git made easy: one command to keep your branch in sync",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for all commands.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    easygit - friendlier git workflows.

    Quick Start:
        easygit sync                 # Bring your branch in line with its remote
        easygit sync --dry-run       # See what sync would do
        easygit sync queue           # Syncs saved while offline
    """
    # Load layered env files early so EASYGIT_* overrides apply to all commands.
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)

    # Store debug flag in context for subcommands
    ctx.obj = {"debug": debug}


app.add_typer(sync.app, name="sync")


@app.command()
def version() -> None:
    """Show easygit version and exit."""
    console.print(f"easygit version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
