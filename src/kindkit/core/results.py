"""Result types: Errorable for operations, Cancellable for user prompts.

Callers branch with isinstance checks or the helper predicates:

    result = client.get_clusters()
    if failed(result):
        show_error(result.error)
    else:
        render(result.value)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    errors: tuple[str, ...]

    def __post_init__(self):
        if isinstance(self.errors, str):
            raise TypeError("Err.errors must be a sequence of messages, not a str")
        object.__setattr__(self, "errors", tuple(self.errors))
        if not self.errors:
            raise ValueError("Err requires at least one error message")

    @property
    def error(self) -> str:
        """The primary (first) error message."""
        return self.errors[0]


Errorable = Union[Ok[T], Err]


def err(*messages: str) -> Err:
    return Err(messages)


def succeeded(result: Errorable) -> bool:
    return isinstance(result, Ok)


def failed(result: Errorable) -> bool:
    return isinstance(result, Err)


@dataclass(frozen=True)
class Accepted(Generic[T]):
    value: T


@dataclass(frozen=True)
class Cancelled:
    """The user abandoned a prompt, wizard or progress display."""


CANCELLED = Cancelled()

Cancellable = Union[Accepted[T], Cancelled]


@dataclass(frozen=True)
class UnknownOutcome:
    """A progress producer ended without a Complete step.

    This is a producer bug, never a success.
    """
    title: str
