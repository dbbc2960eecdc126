"""Event protocol shared by the process tracker and the progress host.

Process events describe a child process as it runs. Progress steps are what
the progress host consumes: any producer may emit them, whether it is backed
by a tracked process or by a test double.
"""

from dataclasses import dataclass
from typing import Generator, Generic, Iterator, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class LineEvent:
    """One line written to the child's standard output (no trailing newline)."""
    text: str


@dataclass(frozen=True)
class Succeeded:
    """Terminal event: the child exited with status 0."""


@dataclass(frozen=True)
class Failed:
    """Terminal event: the child exited non-zero or could not be started."""
    stderr: str


ProcessEvent = Union[LineEvent, Succeeded, Failed]


def is_terminal(event: ProcessEvent) -> bool:
    return isinstance(event, (Succeeded, Failed))


@dataclass(frozen=True)
class Update:
    """A progress message for display."""
    message: str


@dataclass(frozen=True)
class Complete(Generic[T]):
    """Final progress step carrying the operation's result."""
    value: T


ProgressStep = Union[Update, Complete[T]]

# Producers yield zero or more Updates followed by exactly one Complete
ProgressSteps = Iterator[ProgressStep[T]]
ProgressGenerator = Generator[ProgressStep[T], None, None]
