"""Cluster-creation wizard routes with SSE progress streaming.

Form pages are rendered from wizard.html. Submitting the settings page
starts a background run and returns an SSE-connected panel; the stream
polls the run snapshot until it finishes.
"""

import asyncio
import html
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from sse_starlette.sse import EventSourceResponse

from ...core.config import load_config
from ...core.constants import SENDING_STEP_KEY
from ...core.wizard import ActionPage, ErrorPage, FormPage
from ...kind.provider import KindClusterProvider
from .. import state
from ..runner import RunSnapshot, STATUS_COMPLETED, STATUS_FAILED, get_run, is_finished, start_run

router = APIRouter(prefix="/wizard", tags=["wizard"])
templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))


def _provider() -> KindClusterProvider:
    return KindClusterProvider(state.make_client, load_config())


def _render_form(request: Request, page: FormPage | None = None, error: str | None = None):
    return templates.TemplateResponse(request, "wizard.html", {
        "page": page,
        "error": error,
        "sending_step_key": SENDING_STEP_KEY,
    })


@router.get("/", response_class=HTMLResponse)
async def wizard_start(request: Request):
    """First page: choose the cluster type."""
    return _render_form(request, _provider().initial_page())


@router.post("/next", response_class=HTMLResponse)
async def wizard_next(request: Request):
    """Advance the wizard from the submitted page."""
    form = await request.form()
    submission = {key: str(value) for key, value in form.items()}
    page = _provider().next_page(submission)

    if isinstance(page, FormPage):
        return _render_form(request, page)
    if isinstance(page, ErrorPage):
        return _render_form(request, error=page.message)

    assert isinstance(page, ActionPage)
    run = start_run(page, state.refresh_signal)
    return HTMLResponse(_run_panel(run.run_id, page.title))


@router.get("/runs/{run_id}/status")
async def run_status(run_id: str):
    """JSON snapshot of a run."""
    run = get_run(run_id)
    if run is None:
        return JSONResponse({"error": f"Unknown run: {run_id}"}, status_code=404)
    snap = run.snapshot
    return {
        "run_id": snap.run_id,
        "status": snap.status,
        "title": snap.title,
        "message": snap.message,
        "error": snap.error,
        "transcript": list(snap.transcript),
        "fields": snap.fields,
    }


@router.get("/runs/{run_id}/stream")
async def run_stream(request: Request, run_id: str):
    """SSE endpoint: transcript updates, then a final 'complete' event."""
    run = get_run(run_id)
    if run is None:
        return HTMLResponse(_alert("error", f"Unknown run: {run_id}"), status_code=404)
    poll_interval = float(load_config().get("web", {}).get("poll_interval", 0.5))

    async def event_generator():
        last_key = None
        while True:
            # Disconnecting stops the stream, never the run
            if await request.is_disconnected():
                return
            snap = run.snapshot
            key = (len(snap.transcript), snap.message, snap.status)
            if key != last_key:
                last_key = key
                yield {"event": "message", "data": _render_progress(snap)}
            if is_finished(snap):
                yield {"event": "complete", "data": _render_result(snap)}
                return
            await asyncio.sleep(poll_interval)

    return EventSourceResponse(event_generator())


def _run_panel(run_id: str, title: str) -> str:
    return f'''
    <div id="wizard" class="card bg-base-100 shadow max-w-3xl">
    <div class="card-body" hx-ext="sse" sse-connect="/wizard/runs/{run_id}/stream" sse-close="complete">
        <div class="flex items-center gap-2 mb-2">
            <span class="loading loading-spinner loading-sm"></span>
            <h1 class="card-title">{html.escape(title)}</h1>
        </div>
        <div class="text-sm font-mono opacity-80" sse-swap="message" hx-swap="innerHTML"></div>
        <div sse-swap="complete" hx-swap="outerHTML"></div>
    </div>
    </div>
    '''


def _paragraphise(text: str, colour: str | None = None) -> str:
    style = f" style='color:{colour}'" if colour else ""
    return "\n".join(f"<p{style}>{html.escape(line.strip())}</p>" for line in text.split("\n"))


def _render_progress(snap: RunSnapshot) -> str:
    current = f"<p class='font-bold'>{html.escape(snap.message)}</p>" if snap.message else ""
    return current + _paragraphise("\n".join(snap.transcript))


def _render_result(snap: RunSnapshot) -> str:
    if snap.status == STATUS_COMPLETED:
        return _alert("success", snap.message)
    if snap.status == STATUS_FAILED:
        detail = _paragraphise(snap.error or "", "red")
        return _alert("error", snap.message) + detail
    return _alert("warning", snap.message)


def _alert(level: str, message: str) -> str:
    return f'<div class="alert alert-{level} shadow-lg"><span>{html.escape(message)}</span></div>'
