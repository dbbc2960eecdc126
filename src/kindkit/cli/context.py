"""Builds the command context shared by the CLI subcommands."""

import typer
from rich.console import Console

from ..commands.host import CommandContext
from ..core.config import load_config
from ..core.logs import ConsoleLog, NullLog
from ..kind.cache import RefreshSignal
from ..kind.client import KindClient
from .host import ConsoleHost


def build_context(ctx: typer.Context | None, console: Console, *, assume_yes: bool = False) -> CommandContext:
    """Load config and wire the client, console host and refresh signal.

    With --verbose the kind transcript is echoed to the console.
    """
    verbose = bool(ctx and ctx.obj and ctx.obj.get("verbose"))
    config = load_config()
    log = ConsoleLog(console) if verbose else NullLog()
    return CommandContext(
        client=KindClient.from_config(config, log),
        host=ConsoleHost(console, assume_yes=assume_yes),
        refresh=RefreshSignal(),
        config=config,
    )
