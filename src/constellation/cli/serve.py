"""
Constellation CLI - Serve command.

Launch the dashboard web server.
"""

import logging
import threading
import time
import webbrowser

import typer
from rich.console import Console

from constellation.cli.context import get_config, is_debug

app = typer.Typer(
    name="serve",
    help="Launch the dashboard web server",
    no_args_is_help=False,
)

console = Console()
logger = logging.getLogger(__name__)


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(
        None,
        "--host",
        help="Interface to bind (default from config: 127.0.0.1)",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to run the server on (default from config: 3400)",
    ),
    no_browser: bool = typer.Option(
        False,
        "--no-browser",
        help="Don't open browser automatically",
    ),
) -> None:
    """
    Launch the dashboard.

    This command:
    1. Loads the layered configuration
    2. Starts the FastAPI server
    3. Opens the dashboard in your default browser

    Every request re-reads the workspace, so there is nothing to sync.

    Examples:
        constellation serve                  # Launch on the configured port
        constellation serve --port 8080      # Launch on port 8080
        constellation serve --no-browser     # Don't open browser
    """
    if ctx.invoked_subcommand is not None:
        return

    debug = is_debug(ctx)
    config = get_config(ctx)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    if debug:
        console.print(f"[dim]Workspace: {config.workspace}[/dim]")
        console.print(f"[dim]Registry: {config.registry_file}[/dim]")

    try:
        import uvicorn

        from constellation.api.app import app as fastapi_app
    except ImportError as e:
        console.print(
            "[red]Error:[/red] Dashboard dependencies not installed. "
            f"Missing module: {e.name}"
        )
        console.print("[dim]Install with: pip install fastapi uvicorn[/dim]")
        raise typer.Exit(1)

    # Routes read the config from app state
    fastapi_app.state.config = config

    url = f"http://{bind_host}:{bind_port}"
    console.print("\n[bold cyan]Starting dashboard server...[/bold cyan]")
    console.print(f"[dim]API: {url}/api/overview[/dim]")
    console.print(f"[dim]Docs: {url}/docs[/dim]")

    if not no_browser:
        def open_browser() -> None:
            time.sleep(1.5)  # Wait for server to start
            console.print(f"\n[green]Opening browser:[/green] {url}")
            webbrowser.open(url)

        threading.Thread(target=open_browser, daemon=True).start()

    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        uvicorn.run(
            fastapi_app,
            host=bind_host,
            port=bind_port,
            log_level="info" if debug else "warning",
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Dashboard stopped[/yellow]")
        raise typer.Exit(0)
