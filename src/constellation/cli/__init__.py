"""
Constellation CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import logging
from pathlib import Path

import typer
from rich.console import Console

from constellation import __version__
from constellation.cli import report, serve
from constellation.core.config.env import load_layered_env

# Create the main Typer app
app = typer.Typer(
    name="constellation",
    help="Operations dashboard for autonomous agent departments",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    workspace: Path | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Agent workspace root (overrides config)",
    ),
) -> None:
    """
    Constellation - agent operations dashboard.

    Reads the feeds, inboxes, status documents and project state that agent
    departments write to the shared workspace and serves an aggregated,
    read-only view of them.

    Examples:
        constellation serve              # Start the dashboard server
        constellation overview           # Print the needs-attention list
        constellation agents             # Print agent status
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()

    if debug:
        logging.basicConfig(level=logging.DEBUG)

    # Store global options in context for subcommands
    ctx.obj = {"debug": debug, "workspace": workspace}


app.add_typer(serve.app, name="serve")
app.command(name="overview")(report.overview)
app.command(name="agents")(report.agents)


@app.command()
def version() -> None:
    """Show constellation version and exit."""
    console.print(f"constellation version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]
