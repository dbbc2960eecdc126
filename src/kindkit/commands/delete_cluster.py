"""Delete a Kind cluster, by name or picked from the current cluster list."""

from ..core.constants import DELETE_FAILED
from ..core.progress import long_running, run_with_progress
from ..core.results import CANCELLED, Cancellable, Cancelled, Errorable, Ok, UnknownOutcome, failed
from ..kind.client import KindClusterInfo
from .host import CommandContext

DeleteOutcome = Errorable[None] | Cancelled | UnknownOutcome


def on_delete_cluster(ctx: CommandContext, target: object | None = None) -> DeleteOutcome:
    if target is not None:
        cluster_name = resolve_cluster_target(target)
        if cluster_name is None:
            ctx.host.show_error(f"Not a Kind cluster: {target!r}")
            return CANCELLED
        return delete_cluster_by_name(ctx, cluster_name)
    return delete_cluster_interactive(ctx)


def delete_cluster_interactive(ctx: CommandContext) -> DeleteOutcome:
    cluster_name = prompt_cluster(ctx, "Getting existing clusters...")
    if isinstance(cluster_name, Cancelled):
        return CANCELLED
    return delete_cluster_by_name(ctx, cluster_name.value)


def delete_cluster_by_name(ctx: CommandContext, cluster_name: str) -> DeleteOutcome:
    confirmed = ctx.host.confirm(
        f"This will delete {cluster_name}. You will not be able to undo this.",
        "Delete Cluster",
    )
    if not confirmed:
        return CANCELLED
    result = run_with_progress(
        f"Deleting cluster {cluster_name}...",
        lambda: ctx.client.delete_cluster(cluster_name),
        ctx.host.display,
    )
    display_cluster_deletion_result(ctx, result, cluster_name)
    return result


def display_cluster_deletion_result(ctx: CommandContext, result: DeleteOutcome, cluster_name: str) -> None:
    if isinstance(result, Cancelled):
        return
    if isinstance(result, UnknownOutcome):
        ctx.host.show_error(f"{DELETE_FAILED}: outcome unknown (kind output ended unexpectedly)")
        return
    if isinstance(result, Ok):
        ctx.host.show_info(f"Deleted cluster {cluster_name}")
        ctx.refresh.emit()
    else:
        ctx.host.show_error(f"{DELETE_FAILED}: {result.error}")


def prompt_cluster(ctx: CommandContext, progress_message: str) -> Cancellable[str]:
    """Pick from the existing clusters, or type a name if they can't be listed."""
    clusters = long_running(progress_message, ctx.client.get_clusters, ctx.host.display)
    if failed(clusters):
        return ctx.host.prompt_cluster_name("Cluster to delete")
    return ctx.host.pick_cluster([c.name for c in clusters.value])


def resolve_cluster_target(target: object) -> str | None:
    if isinstance(target, KindClusterInfo):
        return target.name
    if isinstance(target, str) and target.strip():
        return target.strip()
    return None
