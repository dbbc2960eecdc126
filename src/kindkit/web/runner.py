"""Background wizard runs: browser-independent execution.

A run executes the wizard's terminal action in a daemon thread. The SSE
endpoint polls RunSnapshot for state. Closing the browser tab does not stop
the kind process.
"""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field

from ..commands.host import Host
from ..core.logs import MemoryLog
from ..core.progress import NullDisplay, ProgressDisplay, run_with_progress
from ..core.results import CANCELLED, Cancellable, Ok, UnknownOutcome
from ..core.wizard import ActionPage, InputField
from ..kind.cache import RefreshSignal

logger = logging.getLogger(__name__)

STATUS_RUNNING = "running"
STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"
STATUS_UNKNOWN = "unknown"


@dataclass(frozen=True)
class RunSnapshot:
    """Immutable, thread-safe snapshot of a run."""
    run_id: str
    status: str        # "running" | "completed" | "failed" | "unknown"
    title: str
    message: str       # latest progress message, or the final result text
    error: str | None
    transcript: tuple[str, ...]
    fields: dict = field(default_factory=dict)
    updated_at: float = 0.0


class RunDisplay(ProgressDisplay):
    """Feeds progress messages into a run's snapshot."""

    def __init__(self, run: "WizardRun"):
        self.run = run

    def begin(self, title: str) -> None:
        self.run._update(title=title)

    def report(self, message: str) -> None:
        self.run._update(message=message)

    def end(self) -> None:
        pass


class WizardRun:
    """Executes one ActionPage in a background daemon thread."""

    def __init__(self, page: ActionPage, refresh: RefreshSignal | None = None):
        self.run_id = uuid.uuid4().hex[:12]
        self.page = page
        self.refresh = refresh
        self.log = MemoryLog()
        self._lock = threading.Lock()
        self._state = {
            "status": STATUS_RUNNING,
            "title": page.title,
            "message": "",
            "error": None,
            "updated_at": time.monotonic(),
        }
        self._thread: threading.Thread | None = None
        self.display = RunDisplay(self)

    @property
    def snapshot(self) -> RunSnapshot:
        with self._lock:
            state = dict(self._state)
        return RunSnapshot(
            run_id=self.run_id,
            transcript=tuple(self.log.lines),
            fields=dict(self.page.fields),
            **state,
        )

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, name=f"wizard-{self.run_id}", daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _update(self, **kwargs) -> None:
        with self._lock:
            self._state.update(kwargs)
            self._state["updated_at"] = time.monotonic()

    def _run(self) -> None:
        try:
            result = run_with_progress(self.page.title, lambda: self.page.run(self.log), self.display)
        except Exception as e:
            logger.exception("wizard run %s crashed", self.run_id)
            self._update(status=STATUS_FAILED, error=str(e), message=self.page.failure_message)
            return

        if isinstance(result, UnknownOutcome):
            self._update(
                status=STATUS_UNKNOWN,
                message="kind output ended unexpectedly; the cluster may or may not exist.",
            )
        elif isinstance(result, Ok):
            self._update(status=STATUS_COMPLETED, title="Cluster created", message=self.page.success_message)
            if self.refresh is not None:
                self.refresh.emit()
        else:
            self._update(
                status=STATUS_FAILED,
                title="Cluster creation failed",
                error=result.error,
                message=self.page.failure_message,
            )


class WebHost(Host):
    """Host for web-initiated commands.

    The browser has already confirmed (hx-confirm) and there is nobody to
    prompt, so confirmations pass and prompts cancel. Messages are collected
    for the response toast.
    """

    def __init__(self):
        self.display = NullDisplay()
        self.messages: list[tuple[str, str]] = []

    def confirm(self, text: str, confirm_label: str) -> bool:
        return True

    def show_info(self, message: str) -> None:
        self.messages.append(("success", message))

    def show_error(self, message: str) -> None:
        self.messages.append(("error", message))

    def prompt_form(self, title: str, inputs: tuple[InputField, ...]) -> Cancellable[dict[str, str]]:
        return CANCELLED

    def pick_cluster(self, names: list[str]) -> Cancellable[str]:
        return CANCELLED

    def prompt_cluster_name(self, prompt: str) -> Cancellable[str]:
        return CANCELLED


# ── Module-level API ──────────────────────────────────────────────

# Finished runs kept for status lookups; the oldest are dropped first
MAX_FINISHED_RUNS = 20

_runs: dict[str, WizardRun] = {}
_runs_lock = threading.Lock()


def start_run(page: ActionPage, refresh: RefreshSignal | None = None) -> WizardRun:
    """Start a wizard's terminal action in the background."""
    run = WizardRun(page, refresh)
    with _runs_lock:
        _prune_finished()
        _runs[run.run_id] = run
    run.start()
    return run


def _prune_finished() -> None:
    """Drop the oldest finished runs beyond MAX_FINISHED_RUNS. Caller holds _runs_lock."""
    finished = [run_id for run_id, run in _runs.items() if is_finished(run.snapshot)]
    for run_id in finished[:max(0, len(finished) - MAX_FINISHED_RUNS)]:
        del _runs[run_id]


def get_run(run_id: str) -> WizardRun | None:
    with _runs_lock:
        return _runs.get(run_id)


def is_finished(snapshot: RunSnapshot) -> bool:
    return snapshot.status != STATUS_RUNNING
