"""The UI surface commands talk to.

The CLI implements it with Rich and Typer prompts; tests use a scripted
fake. Commands never print or prompt directly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..core.progress import ProgressDisplay
from ..core.results import Cancellable
from ..core.wizard import InputField
from ..kind.cache import RefreshSignal
from ..kind.client import KindClient


class Host(ABC):
    display: ProgressDisplay

    @abstractmethod
    def confirm(self, text: str, confirm_label: str) -> bool:
        """Ask a yes/no question; True only if the user chose ``confirm_label``."""

    @abstractmethod
    def show_info(self, message: str) -> None:
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        ...

    @abstractmethod
    def prompt_form(self, title: str, inputs: tuple[InputField, ...]) -> Cancellable[dict[str, str]]:
        """Collect a value for each input (defaults pre-filled)."""

    @abstractmethod
    def pick_cluster(self, names: list[str]) -> Cancellable[str]:
        ...

    @abstractmethod
    def prompt_cluster_name(self, prompt: str) -> Cancellable[str]:
        ...


@dataclass
class CommandContext:
    """Everything a command needs: the client, the UI and the refresh signal."""
    client: KindClient
    host: Host
    refresh: RefreshSignal
    config: dict
