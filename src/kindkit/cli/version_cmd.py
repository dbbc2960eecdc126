"""kindkit version: Show kindkit and kind versions."""

import typer
from rich.console import Console

from .. import __version__
from ..core.config import find_kind
from .context import build_context

console = Console()


def version(ctx: typer.Context) -> None:
    """Show the kindkit version and check the kind binary."""
    console.print(f"kindkit {__version__}")
    command_ctx = build_context(ctx, console)
    ok, msg = command_ctx.client.validate_environment()
    if not ok:
        console.print(f"[red]kind not available:[/red] {msg}")
        raise typer.Exit(1)
    location = find_kind(command_ctx.config) or " ".join(command_ctx.client.command)
    console.print(f"{msg} [dim]({location})[/dim]")
