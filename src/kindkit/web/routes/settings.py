"""Settings route: editable config form."""

import shlex
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ...core.config import load_config, load_user_config, save_config, user_config_path
from .. import state

router = APIRouter(prefix="/settings", tags=["settings"])
templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))

# Config sections and their fields with types for form rendering
CONFIG_SCHEMA: dict[str, dict[str, str]] = {
    "tools": {
        "kind": "command",
    },
    "cluster": {
        "default_name": "str",
        "node_image": "str",
    },
    "progress": {
        "interesting_prefix": "str",
        "merge_stderr": "bool",
    },
    "create": {
        "spec_policy": "str",
    },
    "web": {
        "host": "str",
        "port": "int",
        "poll_interval": "float",
    },
}


def _parse_value(value: str, type_hint: str):
    """Coerce a form string value to the appropriate Python type."""
    if type_hint == "bool":
        return value.lower() in ("true", "on", "1", "yes")
    if type_hint == "int":
        return int(value) if value else 0
    if type_hint == "float":
        return float(value) if value else 0.0
    if type_hint == "command":
        # Keep a plain string unless the command needs several words
        parts = shlex.split(value)
        return parts if len(parts) > 1 else (parts[0] if parts else "kind")
    return value


def _display_config(config: dict) -> dict:
    """Config with list-valued commands shown as one shell-quoted string."""
    shown = {section: dict(values) for section, values in config.items() if isinstance(values, dict)}
    kind = shown.get("tools", {}).get("kind")
    if isinstance(kind, list):
        shown["tools"]["kind"] = shlex.join(kind)
    return shown


@router.get("/", response_class=HTMLResponse)
async def settings_page(request: Request):
    """Show settings page."""
    return templates.TemplateResponse(request, "settings.html", {
        "schema": CONFIG_SCHEMA,
        "config": _display_config(load_config()),
        "config_path": str(user_config_path()),
    })


@router.post("/")
async def save_settings(request: Request):
    """Persist submitted settings to the user config file."""
    form = await request.form()
    user_config = load_user_config()
    for section, fields in CONFIG_SCHEMA.items():
        for key, type_hint in fields.items():
            raw = form.get(f"{section}.{key}")
            # Unchecked checkboxes are absent from the form
            if raw is None and type_hint != "bool":
                continue
            value = _parse_value(str(raw or ""), type_hint)
            user_config.setdefault(section, {})[key] = value
    save_config(user_config)
    state.reset()
    return RedirectResponse("/settings/", status_code=303)
