"""
Constellation CLI - Report commands.

Print the overview and agent views in the terminal, without a server.
"""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from constellation.cli.context import get_config
from constellation.core.aggregator import Aggregator

console = Console()

SEVERITY_STYLES = {
    "high": "red",
    "medium": "yellow",
    "low": "cyan",
    "info": "dim",
}


def overview(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the overview as JSON",
    ),
) -> None:
    """
    Show project counts, task totals and the needs-attention list.

    Examples:
        constellation overview
        constellation overview --json
    """
    aggregator = Aggregator(get_config(ctx))
    result = aggregator.overview()

    if json_output:
        console.print_json(json.dumps(result.model_dump(mode="json", by_alias=True)))
        return

    counts = result.counts
    summary_table = Table(title="Projects", show_header=False)
    summary_table.add_column("Label", style="cyan")
    summary_table.add_column("Count", style="green", justify="right")
    summary_table.add_row("Total", str(counts.total))
    summary_table.add_row("Active", f"[green]{counts.active}[/green]")
    summary_table.add_row("Paused", f"[yellow]{counts.paused}[/yellow]")
    summary_table.add_row("Complete", str(counts.complete))
    summary_table.add_row("Failed tasks", f"[red]{result.tasks.failed}[/red]")
    console.print(summary_table)
    console.print()

    if not result.attention:
        console.print("[green]Nothing needs attention[/green]")
        return

    attention_table = Table(title="Needs Attention", show_header=True)
    attention_table.add_column("Severity")
    attention_table.add_column("Project", style="cyan")
    attention_table.add_column("Reason")
    for flag in result.attention:
        style = SEVERITY_STYLES.get(flag.severity.value, "white")
        attention_table.add_row(
            f"[{style}]{flag.severity.value}[/{style}]", escape(flag.project), escape(flag.reason)
        )
    console.print(attention_table)


def agents(ctx: typer.Context) -> None:
    """
    Show each agent's status, pending inbox items and latest feed entry.

    Examples:
        constellation agents
    """
    aggregator = Aggregator(get_config(ctx))

    table = Table(title="Agents", show_header=True)
    table.add_column("Agent", style="cyan")
    table.add_column("Status")
    table.add_column("Pending", justify="right")
    table.add_column("Last activity")

    for summary in aggregator.agents():
        status_text = (
            "[green]active[/green]" if summary.status.value == "active" else "[dim]idle[/dim]"
        )
        last = summary.last_activity
        table.add_row(
            summary.display_name,
            status_text,
            str(summary.inbox.pending),
            escape(f"[{last.time}] {last.text}") if last else "[dim]-[/dim]",
        )

    console.print(table)
