"""kindkit web: Serve the cluster dashboard."""

import typer
from rich.console import Console

from ..core.config import load_config

console = Console()


def web(
    ctx: typer.Context,
    port: int = typer.Option(
        None,
        "--port",
        help="HTTP port (default: web.port from the config)",
    ),
    host: str = typer.Option(
        None,
        "--host",
        help="Interface to bind (default: web.host from the config)",
    ),
) -> None:
    """Serve the wizard and cluster list over HTTP until interrupted."""
    import uvicorn

    web_cfg = load_config().get("web", {})
    host = host or web_cfg.get("host", "127.0.0.1")
    port = port or int(web_cfg.get("port", 8000))
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))

    if host not in ("127.0.0.1", "localhost", "::1"):
        console.print(f"[yellow]Binding to {host}: anyone who can reach it can create and delete clusters[/yellow]")
    console.print(f"[bold]kindkit dashboard[/bold] on http://{host}:{port}  [dim](Ctrl+C to stop)[/dim]")

    uvicorn.run(
        "kindkit.web.app:app",
        host=host,
        port=port,
        log_level="debug" if verbose else "info",
    )
