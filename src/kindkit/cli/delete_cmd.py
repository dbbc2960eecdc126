"""kindkit delete: Delete a Kind cluster."""

import typer
from rich.console import Console

from ..commands.delete_cluster import on_delete_cluster
from ..core.results import Cancelled, Ok
from .context import build_context

console = Console()


def delete(
    ctx: typer.Context,
    name: str = typer.Argument(
        None,
        help="Cluster to delete (pick from the cluster list if omitted)",
    ),
    yes: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Don't ask for confirmation",
    ),
) -> None:
    """Delete a local Kind cluster."""
    command_ctx = build_context(ctx, console, assume_yes=yes)
    result = on_delete_cluster(command_ctx, name)
    if not isinstance(result, (Ok, Cancelled)):
        raise typer.Exit(1)
