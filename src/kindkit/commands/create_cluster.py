"""Create a Kind cluster, interactively or from a cluster spec document."""

import logging
from dataclasses import dataclass

from ..core.config import spec_policy
from ..core.constants import (
    CREATE_FAILED,
    CREATE_TITLE,
    DEFAULT_CLUSTER_NAME,
    SETTING_CLUSTER_NAME,
    SETTING_IMAGE_VERSION,
)
from ..core.progress import INTERESTING_PREFIX, interesting_updates, run_with_progress
from ..core.results import CANCELLED, Cancellable, Cancelled, Accepted, Errorable, Ok, UnknownOutcome
from ..kind.provider import settings_inputs
from ..kind.spec import ClusterSpecDocument, cluster_spec_file, resolve_spec_document
from .host import CommandContext

logger = logging.getLogger(__name__)

CreateOutcome = Errorable[None] | Cancelled | UnknownOutcome


@dataclass(frozen=True)
class ClusterSettings:
    name: str
    image: str | None = None


def on_create_cluster(
    ctx: CommandContext,
    target: object | None = None,
    document: ClusterSpecDocument | None = None,
    image: str | None = None,
) -> CreateOutcome:
    """Entry point: a target means interactive; otherwise a usable spec document wins.

    ``image`` overrides the node image, or pre-fills the prompt when interactive.
    """
    spec = resolve_spec_document(
        document, spec_policy(ctx.config), launched_from_target=target is not None,
    )
    if spec is not None:
        return create_cluster_from_spec(ctx, spec, image)
    if document is not None:
        logger.info("ignoring %s: not used as a cluster spec", document.path or "<stdin>")
    return create_cluster_interactive(ctx, image)


def create_cluster_interactive(ctx: CommandContext, image: str | None = None) -> CreateOutcome:
    settings = prompt_cluster_settings(ctx, image)
    if isinstance(settings, Cancelled):
        return CANCELLED
    return create_cluster_with_settings(ctx, settings.value)


def create_cluster_with_settings(ctx: CommandContext, settings: ClusterSettings) -> CreateOutcome:
    result = run_with_progress(
        CREATE_TITLE,
        lambda: _interesting(ctx, ctx.client.create_cluster(settings.name, settings.image)),
        ctx.host.display,
    )
    display_cluster_creation_result(ctx, result)
    return result


def create_cluster_from_spec(
    ctx: CommandContext, document: ClusterSpecDocument, image: str | None = None,
) -> CreateOutcome:
    with cluster_spec_file(document) as filename:
        result = run_with_progress(
            CREATE_TITLE,
            lambda: _interesting(ctx, ctx.client.create_cluster_from_config_file(filename, image)),
            ctx.host.display,
        )
    display_cluster_creation_result(ctx, result)
    return result


def display_cluster_creation_result(ctx: CommandContext, result: CreateOutcome) -> None:
    if isinstance(result, Cancelled):
        return
    if isinstance(result, UnknownOutcome):
        ctx.host.show_error(f"{CREATE_FAILED}: outcome unknown (kind output ended unexpectedly)")
        return
    if isinstance(result, Ok):
        ctx.host.show_info("Created Kind cluster")
        ctx.refresh.emit()
    else:
        ctx.host.show_error(f"{CREATE_FAILED}: {result.error}")


def prompt_cluster_settings(ctx: CommandContext, image: str | None = None) -> Cancellable[ClusterSettings]:
    default_name = ctx.config.get("cluster", {}).get("default_name", DEFAULT_CLUSTER_NAME)
    answers = ctx.host.prompt_form("Cluster Settings", settings_inputs(default_name, image or ""))
    if isinstance(answers, Cancelled):
        return CANCELLED
    name = answers.value.get(SETTING_CLUSTER_NAME, "").strip()
    if not name:
        return CANCELLED
    image = answers.value.get(SETTING_IMAGE_VERSION, "").strip() or None
    return Accepted(ClusterSettings(name=name, image=image))


def _interesting(ctx: CommandContext, steps):
    prefix = ctx.config.get("progress", {}).get("interesting_prefix", INTERESTING_PREFIX)
    return interesting_updates(steps, prefix)
