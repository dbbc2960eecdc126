"""Cluster list actions: delete, kubeconfig."""

import asyncio
import json

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, PlainTextResponse

from ...commands.delete_cluster import delete_cluster_by_name
from ...commands.host import CommandContext
from ...core.config import load_config
from ...core.results import failed
from .. import state
from ..runner import WebHost

router = APIRouter(prefix="/clusters", tags=["clusters"])


def _toast(message: str, level: str = "success", refresh: bool = False) -> HTMLResponse:
    """Return empty HTML with a showToast HX-Trigger."""
    trigger = {"showToast": {"message": message, "level": level}}
    headers = {"HX-Trigger": json.dumps(trigger)}
    if refresh:
        headers["HX-Refresh"] = "true"
    return HTMLResponse("", headers=headers)


@router.post("/{cluster_name}/delete")
async def delete_cluster(cluster_name: str):
    """Delete a cluster (confirmation happens in the browser)."""
    host = WebHost()
    ctx = CommandContext(
        client=state.make_client(),
        host=host,
        refresh=state.refresh_signal,
        config=load_config(),
    )
    await asyncio.to_thread(delete_cluster_by_name, ctx, cluster_name)
    level, message = host.messages[-1] if host.messages else ("error", "No result from kind")
    return _toast(message, level, refresh=level == "success")


@router.get("/{cluster_name}/kubeconfig", response_class=PlainTextResponse)
async def kubeconfig(cluster_name: str):
    result = await asyncio.to_thread(state.make_client().get_kubeconfig, cluster_name)
    if failed(result):
        return PlainTextResponse(
            f"Can't get kubeconfig for {cluster_name}: {result.error}", status_code=502,
        )
    return PlainTextResponse(result.value)
