"""Long-running operations: reduce a progress step stream to its result.

The host is agnostic to where steps come from. The usual composition is

    run_with_progress(
        "Creating Kind cluster...",
        lambda: interesting_updates(process_progress(tracker.track(...), "kind create cluster")),
        display,
    )

but any conforming producer (a test double, a canned list) works the same.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Iterable, Iterator, TypeVar

from .events import Complete, Failed, LineEvent, ProcessEvent, ProgressGenerator, ProgressStep, Succeeded, Update
from .results import CANCELLED, Cancelled, Errorable, Ok, UnknownOutcome, err

logger = logging.getLogger(__name__)

T = TypeVar("T")

# kind marks its stage lines with a bullet, e.g. " • Ensuring node image (kindest/node:v1.29.2) 🖼"
INTERESTING_PREFIX = "•"


class ProgressDisplay(ABC):
    """A visible progress indicator (spinner, web panel, ...)."""

    @abstractmethod
    def begin(self, title: str) -> None:
        """Show the indicator labelled with ``title``."""

    @abstractmethod
    def report(self, message: str) -> None:
        """Update the displayed message. Must not block."""

    @abstractmethod
    def end(self) -> None:
        """Remove the indicator."""

    def cancelled(self) -> bool:
        """True once the user has stopped watching this operation."""
        return False


class NullDisplay(ProgressDisplay):
    def begin(self, title: str) -> None:
        pass

    def report(self, message: str) -> None:
        pass

    def end(self) -> None:
        pass


def run_with_progress(
    title: str,
    producer: Callable[[], Iterable[ProgressStep[T]]],
    display: ProgressDisplay,
) -> T | Cancelled | UnknownOutcome:
    """Drive ``display`` from the producer's steps and return the completed value.

    Consumption stops at the first Complete; later steps are never read.
    If the display is cancelled, consumption stops and CANCELLED is returned.
    The producer's underlying work (e.g. a child process) is left to finish.
    """
    display.begin(title)
    try:
        for step in producer():
            if isinstance(step, Complete):
                return step.value
            if display.cancelled():
                logger.info("%s: display cancelled, operation continues in background", title)
                return CANCELLED
            display.report(step.message)
    finally:
        display.end()

    logger.error("%s: progress producer ended without a Complete step", title)
    return UnknownOutcome(title)


def long_running(title: str, action: Callable[[], T], display: ProgressDisplay) -> T:
    """Run a non-streaming action while showing an indicator."""
    display.begin(title)
    try:
        return action()
    finally:
        display.end()


def filter_decorate(
    steps: Iterable[ProgressStep[T]],
    predicate: Callable[[str], bool],
    transform: Callable[[str], str],
) -> ProgressGenerator[T]:
    """Keep the Updates matching ``predicate``, rewritten by ``transform``.

    Complete steps always pass through unchanged.
    """
    for step in steps:
        if isinstance(step, Update):
            if predicate(step.message):
                yield Update(transform(step.message))
        else:
            yield step


def is_interesting(line: str, prefix: str = INTERESTING_PREFIX) -> bool:
    return line.lstrip().startswith(prefix)


def strip_marker(line: str, prefix: str = INTERESTING_PREFIX) -> str:
    text = line.lstrip()
    if text.startswith(prefix):
        text = text[len(prefix):]
    return text.strip()


def interesting_updates(
    steps: Iterable[ProgressStep[T]],
    prefix: str = INTERESTING_PREFIX,
) -> Iterator[ProgressStep[T]]:
    """Drop unmarked lines and strip the marker from the rest."""
    return filter_decorate(
        steps,
        lambda line: is_interesting(line, prefix),
        lambda line: strip_marker(line, prefix),
    )


def process_progress(
    events: Iterable[ProcessEvent],
    description: str,
) -> ProgressGenerator[Errorable[None]]:
    """Translate process events into progress steps.

    A failure becomes ``Err("<description> error: <stderr>")``.
    """
    for event in events:
        if isinstance(event, LineEvent):
            yield Update(event.text)
        elif isinstance(event, Succeeded):
            yield Complete(Ok(None))
            return
        elif isinstance(event, Failed):
            yield Complete(err(f"{description} error: {event.stderr.strip()}"))
            return
