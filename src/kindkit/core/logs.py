"""Output logs: the transcript of commands run against the kind binary.

The transcript is injected into whatever runs commands instead of living in a
process-wide channel, so tests and web runs can each capture their own.
"""

import threading
from typing import Protocol

from rich.console import Console
from rich.markup import escape


class OutputLog(Protocol):
    def append_line(self, text: str) -> None:
        ...


class NullLog:
    """Discards everything."""

    def append_line(self, text: str) -> None:
        pass


class MemoryLog:
    """Keeps the transcript in memory (thread-safe)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._lines: list[str] = []

    def append_line(self, text: str) -> None:
        with self._lock:
            self._lines.append(text)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def text(self) -> str:
        return "\n".join(self.lines)


class ConsoleLog:
    """Writes the transcript to a Rich console, dimmed."""

    def __init__(self, console: Console, style: str = "dim"):
        self.console = console
        self.style = style

    def append_line(self, text: str) -> None:
        self.console.print(f"[{self.style}]{escape(text)}[/{self.style}]", highlight=False)
