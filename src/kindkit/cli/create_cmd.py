"""kindkit create: Create a Kind cluster."""

from pathlib import Path

import typer
from rich.console import Console

from ..commands.create_cluster import (
    ClusterSettings,
    create_cluster_with_settings,
    on_create_cluster,
)
from ..core.results import Cancelled, Ok
from ..kind.spec import ClusterSpecDocument
from .context import build_context

console = Console()


def create(
    ctx: typer.Context,
    name: str = typer.Option(
        None,
        "--name", "-n",
        help="Cluster name (skips the interactive prompts)",
    ),
    image: str = typer.Option(
        None,
        "--image", "-i",
        help="Node image or version, e.g. 'v1.29.2' or 'kindest/node:v1.29.2'",
    ),
    config: str = typer.Option(
        None,
        "--config", "-c",
        help="Kind cluster config file ('-' reads it from stdin)",
    ),
) -> None:
    """Create a local Kind cluster."""
    if name and config:
        console.print("[red]--name can't be combined with --config[/red]")
        raise typer.Exit(1)

    command_ctx = build_context(ctx, console)

    if name:
        result = create_cluster_with_settings(command_ctx, ClusterSettings(name=name, image=image))
        _exit_for(result)
        return

    document = None
    if config == "-":
        document = ClusterSpecDocument.from_stream()
    elif config:
        path = Path(config)
        if not path.is_file():
            console.print(f"[red]Config file not found: {path}[/red]")
            raise typer.Exit(1)
        document = ClusterSpecDocument.from_path(path)

    try:
        result = on_create_cluster(command_ctx, document=document, image=image)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    _exit_for(result)


def _exit_for(result) -> None:
    """Exit non-zero unless the cluster was created or the user cancelled."""
    if isinstance(result, (Ok, Cancelled)):
        return
    raise typer.Exit(1)
