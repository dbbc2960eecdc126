"""Paginated wizard primitives.

A wizard page is either a form (more input needed), an action (the terminal,
long-running step) or an error. Form state travels with the pages: every form
embeds the fields collected so far as hidden inputs, so the final step sees
everything without separate storage.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Mapping, Union

from .constants import SENDING_STEP_KEY
from .events import ProgressStep
from .logs import OutputLog
from .results import Errorable


@dataclass(frozen=True)
class InputField:
    name: str
    label: str
    value: str = ""
    choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class FormPage:
    """A page asking for more input; submitting it sends ``step``."""
    step: Enum
    title: str
    inputs: tuple[InputField, ...]
    carried: Mapping[str, str] = field(default_factory=dict)
    button: str | None = "Next"
    error: str | None = None

    def hidden_fields(self) -> dict[str, str]:
        """Carried fields not shadowed by one of this page's inputs."""
        visible = {f.name for f in self.inputs}
        return {k: v for k, v in self.carried.items() if k not in visible}

    def default_submission(self) -> dict[str, str]:
        """What submitting the page unchanged would send."""
        submission = self.hidden_fields()
        submission.update({f.name: f.value for f in self.inputs})
        submission[SENDING_STEP_KEY] = self.step.value
        return submission


@dataclass(frozen=True)
class ActionPage:
    """The terminal step: ``run(log)`` starts the work and streams its progress.

    The work writes its full transcript to ``log``.
    """
    title: str
    fields: Mapping[str, str]
    run: Callable[[OutputLog], Iterable[ProgressStep[Errorable[None]]]]
    success_message: str
    failure_message: str


@dataclass(frozen=True)
class ErrorPage:
    message: str


Page = Union[FormPage, ActionPage, ErrorPage]


def accumulate(previous: Mapping[str, str], submission: Mapping[str, str]) -> dict[str, str]:
    """Fold a page submission into the collected fields.

    Fields are only added or overwritten, never removed. The sending-step
    key identifies the page, so it is not state.
    """
    fields = dict(previous)
    for key, value in submission.items():
        if key != SENDING_STEP_KEY:
            fields[key] = str(value)
    return fields


def sending_step(submission: Mapping[str, str]) -> str:
    return str(submission.get(SENDING_STEP_KEY, ""))


def check_exhaustive(handlers: Mapping[Enum, object], steps: type[Enum]) -> None:
    """Raise if a wizard step has no handler."""
    missing = [s.name for s in steps if s not in handlers]
    if missing:
        raise RuntimeError(f"No wizard handler for: {', '.join(missing)}")
