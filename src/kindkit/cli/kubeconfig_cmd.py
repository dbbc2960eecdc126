"""kindkit kubeconfig: Print a cluster's kubeconfig."""

import typer
from rich.console import Console

from ..core.results import failed
from .context import build_context

console = Console()


def kubeconfig(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Cluster name"),
) -> None:
    """Print the kubeconfig YAML for a Kind cluster."""
    command_ctx = build_context(ctx, console)
    result = command_ctx.client.get_kubeconfig(name)
    if failed(result):
        console.print(f"[red]Can't get kubeconfig for {name}:[/red] {result.error}")
        raise typer.Exit(1)
    # Plain output so it can be redirected into a file
    typer.echo(result.value, nl=not result.value.endswith("\n"))
