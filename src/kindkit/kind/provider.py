"""Kind cluster provider: the cluster-creation wizard.

Pages, in order:

    select-cluster-type  ->  settings  ->  (create cluster)

Each submission names the page it came from; ``next_page`` looks up the
handler for that step. There is no way back once creation starts.
"""

import logging
from enum import Enum
from typing import Callable, Mapping

from ..core.config import load_config
from ..core.constants import (
    DEFAULT_CLUSTER_NAME,
    KIND_CLUSTER_PROVIDER_ID,
    KIND_DISPLAY_NAME,
    SETTING_CLUSTER_NAME,
    SETTING_CLUSTER_TYPE,
    SETTING_IMAGE_VERSION,
)
from ..core.logs import OutputLog
from ..core.progress import INTERESTING_PREFIX, interesting_updates
from ..core.wizard import (
    ActionPage,
    ErrorPage,
    FormPage,
    InputField,
    Page,
    accumulate,
    check_exhaustive,
    sending_step,
)
from .client import KindClient

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    """Identifies the page a submission was sent from."""
    SELECT_CLUSTER_TYPE = "select-cluster-type"
    SETTINGS = "settings"


def settings_inputs(default_name: str = DEFAULT_CLUSTER_NAME, default_image: str = "") -> tuple[InputField, ...]:
    """The cluster settings form, shared by the web wizard and CLI prompts."""
    return (
        InputField(SETTING_CLUSTER_NAME, "Cluster name", default_name),
        InputField(SETTING_IMAGE_VERSION, "Image version (blank for default)", default_image),
    )


class KindClusterProvider:
    id = KIND_CLUSTER_PROVIDER_ID
    display_name = KIND_DISPLAY_NAME

    def __init__(self, client_factory: Callable[[OutputLog], KindClient], config: dict | None = None):
        self.client_factory = client_factory
        self.config = config if config is not None else load_config()
        self._handlers: dict[WizardStep, Callable[[dict[str, str]], Page]] = {
            WizardStep.SELECT_CLUSTER_TYPE: self._collect_settings,
            WizardStep.SETTINGS: self._create_cluster,
        }
        check_exhaustive(self._handlers, WizardStep)

    def initial_page(self) -> FormPage:
        return FormPage(
            step=WizardStep.SELECT_CLUSTER_TYPE,
            title="Create Kubernetes Cluster",
            inputs=(
                InputField(SETTING_CLUSTER_TYPE, "Cluster type", self.id, choices=(self.id,)),
            ),
            button="Next",
        )

    def next_page(self, submission: Mapping[str, str], previous: Mapping[str, str] | None = None) -> Page:
        """Dispatch on the submission's sending step."""
        fields = accumulate(previous or {}, submission)
        raw_step = sending_step(submission)
        try:
            step = WizardStep(raw_step)
        except ValueError:
            logger.warning("wizard submission from unknown step %r", raw_step)
            return ErrorPage("Internal error")
        return self._handlers[step](fields)

    def _collect_settings(self, fields: dict[str, str], error: str | None = None) -> FormPage:
        default_name = self.config.get("cluster", {}).get("default_name", DEFAULT_CLUSTER_NAME)
        return FormPage(
            step=WizardStep.SETTINGS,
            title="Cluster Settings",
            inputs=settings_inputs(default_name, fields.get(SETTING_IMAGE_VERSION, "")),
            carried=fields,
            button="Create",
            error=error,
        )

    def _create_cluster(self, fields: dict[str, str]) -> Page:
        cluster_name = fields.get(SETTING_CLUSTER_NAME, "").strip()
        if not cluster_name:
            return self._collect_settings(fields, error="Cluster name is required")
        image_version = fields.get(SETTING_IMAGE_VERSION, "").strip() or None
        prefix = self.config.get("progress", {}).get("interesting_prefix", INTERESTING_PREFIX)

        def run(log: OutputLog):
            client = self.client_factory(log)
            return interesting_updates(client.create_cluster(cluster_name, image_version), prefix)

        return ActionPage(
            title="Creating local Kind cluster - please wait",
            fields=fields,
            run=run,
            success_message=(
                f"Cluster {cluster_name} created. "
                f"kind has set kubectl's current context to kind-{cluster_name}."
            ),
            failure_message="Your local cluster was not created. See tool output above for why.",
        )
