"""Process tracker: run an external command and stream its lifecycle as events.

Stdout is read in a background thread and pushed onto a queue as it arrives,
so the child never blocks on a full pipe, even when nobody is consuming the
events. Stderr is buffered by a second thread and reported once, on failure.

Every sequence ends with exactly one terminal event (Succeeded or Failed),
including when the executable cannot be started at all.
"""

import logging
import os
import queue
import shlex
import subprocess
import threading
from collections import deque
from typing import Iterable, Iterator, Mapping, Protocol, Sequence

from .events import Failed, LineEvent, ProcessEvent, Succeeded, is_terminal
from .logs import NullLog, OutputLog

logger = logging.getLogger(__name__)

# With merged output, a failure reports this many trailing lines
MERGED_TAIL_LINES = 20


class TrackedProcess:
    """The event sequence of one spawned command.

    Single-subscriber and not restartable: iterate it once. Dropping the
    iterator early leaves the child running to completion.
    """

    def __init__(
        self,
        command: list[str],
        events: "queue.Queue[ProcessEvent]",
        proc: subprocess.Popen | None = None,
    ):
        self.command = command
        self._events = events
        self._proc = proc
        self._consumed = False

    @property
    def pid(self) -> int | None:
        return self._proc.pid if self._proc is not None else None

    def __iter__(self) -> Iterator[ProcessEvent]:
        if self._consumed:
            raise RuntimeError(
                f"Events for {shlex.join(self.command)!r} were already consumed"
            )
        self._consumed = True
        return self._drain()

    def _drain(self) -> Iterator[ProcessEvent]:
        while True:
            event = self._events.get()
            yield event
            if is_terminal(event):
                return

    def wait(self) -> ProcessEvent:
        """Consume the remaining events and return the terminal one."""
        terminal = None
        for terminal in self:
            pass
        return terminal


class ProcessTracker:
    """Spawns commands and turns their output into ProcessEvents."""

    def __init__(
        self,
        log: OutputLog | None = None,
        *,
        cwd: str | None = None,
        env: Mapping[str, str] | None = None,
        merge_stderr: bool = False,
    ):
        self.log = log if log is not None else NullLog()
        self.cwd = cwd
        self.env = env
        self.merge_stderr = merge_stderr

    def track(self, executable: str, args: Sequence[str]) -> TrackedProcess:
        """Spawn ``executable args...`` now and return its event sequence."""
        command = [executable, *args]
        cmd_text = shlex.join(command)
        events: queue.Queue[ProcessEvent] = queue.Queue()
        self.log.append_line(f"$ {cmd_text}")

        env = {**os.environ, **self.env} if self.env is not None else None
        try:
            proc = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if self.merge_stderr else subprocess.PIPE,
                text=True, encoding="utf-8", errors="replace", bufsize=1,
                cwd=self.cwd, env=env,
            )
        except (OSError, ValueError) as e:
            # ValueError: arguments Popen rejects outright, e.g. an embedded NUL
            diagnostic = f"Error invoking '{cmd_text}': {e}"
            logger.debug("spawn failed: %s", diagnostic)
            self.log.append_line(diagnostic)
            events.put(Failed(diagnostic))
            return TrackedProcess(command, events)

        logger.debug("spawned pid %s: %s", proc.pid, cmd_text)
        pump = threading.Thread(
            target=self._pump, args=(proc, command, events),
            name=f"track-{proc.pid}", daemon=True,
        )
        pump.start()
        return TrackedProcess(command, events, proc)

    def _pump(
        self,
        proc: subprocess.Popen,
        command: list[str],
        events: "queue.Queue[ProcessEvent]",
    ) -> None:
        try:
            terminal = self._read_until_exit(proc, command, events)
        except Exception as e:
            # Consumers wait for a terminal event; never leave them hanging
            logger.exception("tracking %s failed", command[0])
            terminal = Failed(f"Error tracking '{shlex.join(command)}': {e}")
        events.put(terminal)

    def _read_until_exit(
        self,
        proc: subprocess.Popen,
        command: list[str],
        events: "queue.Queue[ProcessEvent]",
    ) -> ProcessEvent:
        stderr_chunks: list[str] = []
        stderr_reader = None
        if proc.stderr is not None:
            stderr_reader = threading.Thread(
                target=lambda: stderr_chunks.append(proc.stderr.read()),
                daemon=True,
            )
            stderr_reader.start()

        tail: deque[str] = deque(maxlen=MERGED_TAIL_LINES)
        assert proc.stdout is not None
        for raw in iter(proc.stdout.readline, ""):
            line = raw.rstrip("\r\n")
            tail.append(line)
            self.log.append_line(line)
            events.put(LineEvent(line))
        proc.stdout.close()

        if stderr_reader is not None:
            stderr_reader.join()
            proc.stderr.close()

        code = proc.wait()
        logger.debug("pid %s exited with code %s", proc.pid, code)
        if code == 0:
            return Succeeded()

        if self.merge_stderr:
            diagnostic = "\n".join(tail)
        else:
            diagnostic = "".join(stderr_chunks)
        if not diagnostic.strip():
            diagnostic = f"{command[0]} exited with code {code}"
        self.log.append_line(diagnostic.rstrip())
        return Failed(diagnostic)


class ProcessObserver(Protocol):
    def on_line(self, text: str) -> None:
        ...

    def on_success(self) -> None:
        ...

    def on_failure(self, stderr: str) -> None:
        ...


def dispatch(events: Iterable[ProcessEvent], observer: ProcessObserver) -> None:
    """Push a process event sequence into an observer's callbacks."""
    for event in events:
        if isinstance(event, LineEvent):
            observer.on_line(event.text)
        elif isinstance(event, Succeeded):
            observer.on_success()
            return
        elif isinstance(event, Failed):
            observer.on_failure(event.stderr)
            return
