"""Terminal implementation of the command Host: Rich output, Typer prompts."""

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.prompt import Prompt

from ..commands.host import Host
from ..core.progress import ProgressDisplay
from ..core.results import CANCELLED, Accepted, Cancellable
from ..core.wizard import InputField


class RichProgressDisplay(ProgressDisplay):
    """Transient spinner; each progress message is also kept as a line above it."""

    def __init__(self, console: Console):
        self.console = console
        self._progress: Progress | None = None
        self._task = None
        self._title = ""

    def begin(self, title: str) -> None:
        self._title = title
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._progress.start()
        self._task = self._progress.add_task(escape(title), total=None)

    def report(self, message: str) -> None:
        if self._progress is None:
            return
        self._progress.update(self._task, description=f"{escape(self._title)} {escape(message)}")
        self.console.print(f"  [cyan]•[/cyan] {escape(message)}", highlight=False)

    def end(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None


class ConsoleHost(Host):
    def __init__(self, console: Console, *, assume_yes: bool = False):
        self.console = console
        self.assume_yes = assume_yes
        self.display = RichProgressDisplay(console)

    def confirm(self, text: str, confirm_label: str) -> bool:
        if self.assume_yes:
            return True
        self.console.print(f"[yellow]{escape(text)}[/yellow]")
        try:
            return typer.confirm(f"{confirm_label}?", default=False)
        except typer.Abort:
            return False

    def show_info(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")

    def prompt_form(self, title: str, inputs: tuple[InputField, ...]) -> Cancellable[dict[str, str]]:
        self.console.print(f"[bold]{escape(title)}[/bold]")
        answers: dict[str, str] = {}
        try:
            for field in inputs:
                answers[field.name] = typer.prompt(field.label, default=field.value, show_default=bool(field.value))
        except typer.Abort:
            return CANCELLED
        return Accepted(answers)

    def pick_cluster(self, names: list[str]) -> Cancellable[str]:
        if not names:
            self.show_error("No Kind clusters found")
            return CANCELLED
        if len(names) == 1:
            return Accepted(names[0])
        try:
            choice = Prompt.ask("Cluster to delete", choices=names, console=self.console)
        except (KeyboardInterrupt, EOFError):
            return CANCELLED
        return Accepted(choice)

    def prompt_cluster_name(self, prompt: str) -> Cancellable[str]:
        try:
            name = typer.prompt(prompt, default="", show_default=False).strip()
        except typer.Abort:
            return CANCELLED
        return Accepted(name) if name else CANCELLED
