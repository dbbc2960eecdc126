"""kindkit list: Show local Kind clusters."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.results import failed
from .context import build_context

console = Console()


def list_clusters(ctx: typer.Context) -> None:
    """List local Kind clusters."""
    command_ctx = build_context(ctx, console)
    clusters = command_ctx.client.get_clusters()

    if failed(clusters):
        console.print("[red]Error[/red]")
        console.print(f"[dim]{escape(clusters.error)}[/dim]")
        raise typer.Exit(1)

    if not clusters.value:
        console.print("[dim]No Kind clusters found.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Cluster", style="cyan")
    table.add_column("kubectl context")
    for cluster in clusters.value:
        table.add_row(cluster.name, f"kind-{cluster.name}")
    console.print(table)
