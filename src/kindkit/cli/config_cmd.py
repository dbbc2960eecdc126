"""kindkit config: Show or change settings."""

import tomli_w
import typer
from rich.console import Console
from rich.markup import escape

from ..core.config import load_config, load_user_config, save_config, set_config_value, user_config_path

console = Console()


def config(
    set_values: list[str] = typer.Option(
        None,
        "--set",
        help="Set a value, e.g. --set tools.kind=/usr/local/bin/kind (repeatable)",
    ),
) -> None:
    """Show the effective configuration, or persist changes with --set."""
    if not set_values:
        console.print(f"[dim]# {user_config_path()}[/dim]")
        console.print(escape(tomli_w.dumps(load_config())), highlight=False)
        return

    user_config = load_user_config()
    for item in set_values:
        key, sep, value = item.partition("=")
        if not sep:
            console.print(f"[red]Expected key=value, got {item!r}[/red]")
            raise typer.Exit(1)
        try:
            set_config_value(user_config, key.strip(), value.strip())
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    path = save_config(user_config)
    console.print(f"[green]Saved[/green] {path}")
