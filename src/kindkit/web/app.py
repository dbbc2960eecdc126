"""FastAPI web dashboard for kindkit."""

import asyncio
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..core.results import failed
from . import state
from .routes import clusters, settings, wizard

TEMPLATES_DIR = Path(__file__).parent / "templates"

app = FastAPI(title="kindkit", docs_url=None, redoc_url=None)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

app.include_router(clusters.router)
app.include_router(settings.router)
app.include_router(wizard.router)


@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Cluster list (served from the cache until a create/delete refreshes it)."""
    result = await asyncio.to_thread(state.cluster_cache().clusters)
    return templates.TemplateResponse(request, "index.html", {
        "clusters": [] if failed(result) else result.value,
        "error": result.error if failed(result) else None,
    })
