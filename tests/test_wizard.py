"""Tests for the wizard primitives and the Kind cluster provider."""

from enum import Enum

import pytest

from kindkit.core.constants import SENDING_STEP_KEY
from kindkit.core.events import Complete, Update
from kindkit.core.logs import MemoryLog
from kindkit.core.progress import run_with_progress
from kindkit.core.results import Ok, failed
from kindkit.core.wizard import (
    ActionPage,
    ErrorPage,
    FormPage,
    InputField,
    accumulate,
    check_exhaustive,
)
from kindkit.kind.client import KindClient
from kindkit.kind.provider import KindClusterProvider, WizardStep

from conftest import RecordingDisplay


class TestAccumulate:
    def test_adds_and_overwrites(self):
        fields = accumulate({"a": "1", "b": "2"}, {"b": "3", "c": "4"})
        assert fields == {"a": "1", "b": "3", "c": "4"}

    def test_never_removes(self):
        fields = accumulate({"clustertype": "kind"}, {"clustername": "dev"})
        assert fields["clustertype"] == "kind"

    def test_sending_step_is_not_state(self):
        fields = accumulate({}, {SENDING_STEP_KEY: "settings", "clustername": "dev"})
        assert SENDING_STEP_KEY not in fields

    def test_previous_untouched(self):
        previous = {"a": "1"}
        accumulate(previous, {"a": "2"})
        assert previous == {"a": "1"}


class TestFormPage:
    class Step(Enum):
        ONE = "one"

    def test_hidden_fields_exclude_visible_inputs(self):
        page = FormPage(
            step=self.Step.ONE, title="t",
            inputs=(InputField("clustername", "Name", "kind"),),
            carried={"clustertype": "kind", "clustername": "old"},
        )
        assert page.hidden_fields() == {"clustertype": "kind"}

    def test_default_submission(self):
        page = FormPage(
            step=self.Step.ONE, title="t",
            inputs=(InputField("clustername", "Name", "kind"),),
            carried={"clustertype": "kind"},
        )
        assert page.default_submission() == {
            "clustertype": "kind",
            "clustername": "kind",
            SENDING_STEP_KEY: "one",
        }


class TestCheckExhaustive:
    class Step(Enum):
        A = "a"
        B = "b"

    def test_complete_table(self):
        check_exhaustive({self.Step.A: 1, self.Step.B: 2}, self.Step)

    def test_missing_handler_raises(self):
        with pytest.raises(RuntimeError, match="B"):
            check_exhaustive({self.Step.A: 1}, self.Step)


@pytest.fixture
def provider(fake_kind_command):
    return KindClusterProvider(
        lambda log: KindClient(fake_kind_command, log=log),
        {"cluster": {"default_name": "kind"}, "progress": {"interesting_prefix": "•"}},
    )


class TestKindClusterProvider:
    def test_every_step_has_a_handler(self, provider):
        assert set(provider._handlers) == set(WizardStep)

    def test_initial_page(self, provider):
        page = provider.initial_page()
        assert isinstance(page, FormPage)
        assert page.step == WizardStep.SELECT_CLUSTER_TYPE
        assert page.inputs[0].choices == ("kind",)

    def test_select_type_leads_to_settings(self, provider):
        page = provider.next_page(provider.initial_page().default_submission())
        assert isinstance(page, FormPage)
        assert page.step == WizardStep.SETTINGS
        assert page.button == "Create"
        assert page.hidden_fields() == {"clustertype": "kind"}
        assert {f.name for f in page.inputs} == {"clustername", "imageversion"}

    def test_settings_leads_to_action(self, provider):
        settings = provider.next_page(provider.initial_page().default_submission())
        page = provider.next_page(settings.default_submission())
        assert isinstance(page, ActionPage)
        assert page.fields == {"clustertype": "kind", "clustername": "kind", "imageversion": ""}
        assert "kind-kind" in page.success_message

    def test_fields_accumulate_across_pages(self, provider):
        settings = provider.next_page(provider.initial_page().default_submission())
        submission = settings.default_submission()
        submission["clustername"] = "dev"
        page = provider.next_page(submission)
        assert page.fields["clustertype"] == "kind"
        assert page.fields["clustername"] == "dev"

    def test_previous_fields_merged(self, provider):
        page = provider.next_page(
            {SENDING_STEP_KEY: "settings", "clustername": "dev"},
            previous={"clustertype": "kind"},
        )
        assert page.fields == {"clustertype": "kind", "clustername": "dev"}

    def test_unknown_step(self, provider):
        page = provider.next_page({SENDING_STEP_KEY: "bogus"})
        assert page == ErrorPage("Internal error")

    def test_missing_step(self, provider):
        assert isinstance(provider.next_page({}), ErrorPage)

    def test_empty_name_returns_to_settings(self, provider):
        """The settings form comes back with the collected fields and a note."""
        page = provider.next_page({
            SENDING_STEP_KEY: "settings",
            "clustertype": "kind",
            "clustername": "  ",
            "imageversion": "v1.30.0",
        })
        assert isinstance(page, FormPage)
        assert page.step == WizardStep.SETTINGS
        assert page.error == "Cluster name is required"
        assert page.hidden_fields() == {"clustertype": "kind"}
        assert {f.name: f.value for f in page.inputs}["imageversion"] == "v1.30.0"

    def test_action_creates_cluster(self, provider):
        """The action runs kind and reports only the marked stage lines."""
        page = provider.next_page({SENDING_STEP_KEY: "settings", "clustername": "kind", "imageversion": "v1.29.2"})
        log = MemoryLog()
        display = RecordingDisplay()
        result = run_with_progress(page.title, lambda: page.run(log), display)
        assert result == Ok(None)
        assert display.messages == [
            "Ensuring node image (kindest/node:v1.29.2)",
            "Preparing nodes",
        ]
        assert any("--image kindest/node:v1.29.2" in line for line in log.lines)

    def test_action_failure(self, provider, monkeypatch):
        monkeypatch.setenv("FAKE_KIND_FAIL_CREATE", "1")
        page = provider.next_page({SENDING_STEP_KEY: "settings", "clustername": "kind"})
        steps = list(page.run(MemoryLog()))
        assert all(isinstance(s, Update) for s in steps[:-1])
        final = steps[-1]
        assert isinstance(final, Complete)
        assert failed(final.value)
        assert "already exist" in final.value.error
