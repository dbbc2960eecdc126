"""kindkit CLI: Typer application with subcommands."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config_cmd import config
from .create_cmd import create
from .delete_cmd import delete
from .kubeconfig_cmd import kubeconfig
from .list_cmd import list_clusters
from .version_cmd import version
from .web_cmd import web

app = typer.Typer(
    name="kindkit",
    help="Create, delete and browse local Kind clusters.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show kind's full output and debug logging",
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    ctx.obj = {"verbose": verbose}


app.command()(create)
app.command()(delete)
app.command(name="list")(list_clusters)
app.command()(kubeconfig)
app.command()(version)
app.command()(config)
app.command()(web)


if __name__ == "__main__":
    app()
