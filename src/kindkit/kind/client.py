"""kind CLI client.

Short commands (get clusters, get kubeconfig, version) run to completion via
Shell and are parsed into Errorable values. Cluster create/delete take
minutes, so they are tracked and streamed as progress steps instead.
"""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from ..core.config import kind_command
from ..core.constants import DEFAULT_NODE_IMAGE
from ..core.events import ProgressSteps
from ..core.logs import NullLog, OutputLog
from ..core.progress import process_progress
from ..core.results import Errorable, Ok, err, failed
from ..core.tracker import ProcessTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ShellResult:
    code: int
    stdout: str
    stderr: str


class Shell:
    """Runs short-lived commands to completion."""

    def __init__(self, log: OutputLog | None = None, *, cwd: str | None = None):
        self.log = log if log is not None else NullLog()
        self.cwd = cwd

    def exec(self, args: Sequence[str], stdin: str | None = None) -> Errorable[ShellResult]:
        cmd_text = shlex.join(args)
        try:
            proc = subprocess.run(
                list(args), input=stdin, capture_output=True,
                text=True, encoding="utf-8", errors="replace", cwd=self.cwd,
            )
        except (OSError, ValueError) as e:
            return err(f"Error invoking '{cmd_text}': {e}")
        return Ok(ShellResult(proc.returncode, proc.stdout, proc.stderr))

    def exec_obj(
        self,
        args: Sequence[str],
        description: str,
        fn: Callable[[str], T],
    ) -> Errorable[T]:
        """Run a command and parse its stdout with ``fn`` if it succeeds."""
        self.log.append_line(f"$ {shlex.join(args)}")
        result = self.exec(args)
        if failed(result):
            return result
        sr = result.value
        if sr.code != 0:
            return err(f"{description} error: {sr.stderr.strip()}")
        if sr.stdout:
            self.log.append_line(sr.stdout.rstrip("\n"))
        return Ok(fn(sr.stdout))


@dataclass(frozen=True)
class KindClusterInfo:
    name: str


def parse_clusters(stdout: str) -> list[KindClusterInfo]:
    """Parse `kind get clusters` output: one name per line, blanks ignored."""
    return [
        KindClusterInfo(name=line)
        for line in (raw.strip() for raw in stdout.split("\n"))
        if line
    ]


class KindClient:
    """Wraps the kind binary (or whatever argument prefix runs it)."""

    def __init__(
        self,
        command: Sequence[str] = ("kind",),
        *,
        log: OutputLog | None = None,
        shell: Shell | None = None,
        tracker: ProcessTracker | None = None,
        node_image: str = DEFAULT_NODE_IMAGE,
    ):
        self.command = list(command)
        self.log = log if log is not None else NullLog()
        self.shell = shell or Shell(self.log)
        self.tracker = tracker or ProcessTracker(self.log)
        self.node_image_repo = node_image

    @classmethod
    def from_config(cls, config: dict, log: OutputLog | None = None) -> "KindClient":
        progress_cfg = config.get("progress", {})
        log = log if log is not None else NullLog()
        return cls(
            kind_command(config),
            log=log,
            tracker=ProcessTracker(log, merge_stderr=bool(progress_cfg.get("merge_stderr", False))),
            node_image=config.get("cluster", {}).get("node_image", DEFAULT_NODE_IMAGE),
        )

    # ── Short commands ────────────────────────────────────────────

    def _invoke_obj(self, subcommand: list[str], args: list[str], fn: Callable[[str], T]) -> Errorable[T]:
        description = "kind " + " ".join(subcommand)
        return self.shell.exec_obj([*self.command, *subcommand, *args], description, fn)

    def get_clusters(self) -> Errorable[list[KindClusterInfo]]:
        return self._invoke_obj(["get", "clusters"], [], parse_clusters)

    def get_kubeconfig(self, cluster_name: str) -> Errorable[str]:
        return self._invoke_obj(["get", "kubeconfig"], ["--name", cluster_name], lambda s: s)

    def version(self) -> Errorable[str]:
        return self._invoke_obj(["version"], [], lambda s: s.strip())

    def validate_environment(self) -> tuple[bool, str]:
        """Check that kind can be run.

        Returns:
            (ok, message): the version string, or why kind is unusable
        """
        result = self.version()
        if failed(result):
            return False, result.error
        return True, result.value

    # ── Long-running commands ─────────────────────────────────────

    def node_image(self, image: str | None) -> str | None:
        """Expand a bare version like "v1.29.2" to "kindest/node:v1.29.2"."""
        if not image or not image.strip():
            return None
        image = image.strip()
        if "/" in image or ":" in image:
            return image
        return f"{self.node_image_repo}:{image}"

    def create_cluster(
        self, cluster_name: str, image: str | None = None,
    ) -> ProgressSteps[Errorable[None]]:
        args = ["create", "cluster", "--name", cluster_name]
        node_image = self.node_image(image)
        if node_image:
            args.extend(["--image", node_image])
        return self._stream("kind create cluster", args)

    def create_cluster_from_config_file(
        self, config_path: str, image: str | None = None,
    ) -> ProgressSteps[Errorable[None]]:
        args = ["create", "cluster", "--config", config_path]
        node_image = self.node_image(image)
        if node_image:
            args.extend(["--image", node_image])
        return self._stream("kind create cluster", args)

    def delete_cluster(self, cluster_name: str) -> ProgressSteps[Errorable[None]]:
        return self._stream("kind delete cluster", ["delete", "cluster", "--name", cluster_name])

    def _stream(self, description: str, args: list[str]) -> ProgressSteps[Errorable[None]]:
        # The child is spawned here, before the first step is requested
        tracked = self.tracker.track(self.command[0], [*self.command[1:], *args])
        logger.debug("%s started (pid %s)", description, tracked.pid)
        return process_progress(tracked, description)
