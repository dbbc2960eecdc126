"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest
import tomli_w

from kindkit.commands.host import CommandContext, Host
from kindkit.core.config import load_config
from kindkit.core.logs import MemoryLog
from kindkit.core.progress import ProgressDisplay
from kindkit.core.results import CANCELLED, Accepted
from kindkit.kind.cache import RefreshSignal
from kindkit.kind.client import KindClient

TEST_DATA = Path(__file__).parent / "test_data"
FAKE_KIND = TEST_DATA / "fake_kind.py"

KIND_SPEC_YAML = """kind: Cluster
apiVersion: kind.sigs.k8s.io/v1alpha3
nodes:
- role: control-plane
"""


class RecordingDisplay(ProgressDisplay):
    """Records what a progress display was asked to show."""

    def __init__(self, cancel_after: int | None = None):
        self.titles: list[str] = []
        self.messages: list[str] = []
        self.ended = 0
        self.cancel_after = cancel_after

    def begin(self, title: str) -> None:
        self.titles.append(title)

    def report(self, message: str) -> None:
        self.messages.append(message)

    def end(self) -> None:
        self.ended += 1

    def cancelled(self) -> bool:
        return self.cancel_after is not None and len(self.messages) >= self.cancel_after


class FakeHost(Host):
    """Scripted host: answers are set up front, output is recorded."""

    def __init__(self, confirm: bool = True, form_answers: dict | None = None, pick: str | None = None):
        self.display = RecordingDisplay()
        self.confirm_answer = confirm
        self.form_answers = form_answers
        self.pick = pick
        self.infos: list[str] = []
        self.errors: list[str] = []
        self.confirmations: list[str] = []
        self.picked_from: list[list[str]] = []

    def confirm(self, text, confirm_label):
        self.confirmations.append(text)
        return self.confirm_answer

    def show_info(self, message):
        self.infos.append(message)

    def show_error(self, message):
        self.errors.append(message)

    def prompt_form(self, title, inputs):
        if self.form_answers is None:
            return CANCELLED
        answers = {f.name: f.value for f in inputs}
        answers.update(self.form_answers)
        return Accepted(answers)

    def pick_cluster(self, names):
        self.picked_from.append(names)
        if self.pick is None:
            return CANCELLED
        return Accepted(self.pick)

    def prompt_cluster_name(self, prompt):
        if self.pick is None:
            return CANCELLED
        return Accepted(self.pick)


@pytest.fixture
def fake_kind_command():
    return [sys.executable, str(FAKE_KIND)]


@pytest.fixture
def kind_log():
    return MemoryLog()


@pytest.fixture
def kind_client(fake_kind_command, kind_log):
    return KindClient(fake_kind_command, log=kind_log)


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def config_env(tmp_path, monkeypatch, fake_kind_command):
    """Point $KINDKIT_CONFIG at a temp file that runs the fake kind."""
    path = tmp_path / "config.toml"
    with open(path, "wb") as f:
        tomli_w.dump({"tools": {"kind": fake_kind_command}, "web": {"poll_interval": 0.05}}, f)
    monkeypatch.setenv("KINDKIT_CONFIG", str(path))
    monkeypatch.setenv("FAKE_KIND_CLUSTERS", "kind,dev")
    return path


@pytest.fixture
def command_ctx(kind_client, fake_host, config_env):
    return CommandContext(
        client=kind_client,
        host=fake_host,
        refresh=RefreshSignal(),
        config=load_config(),
    )
