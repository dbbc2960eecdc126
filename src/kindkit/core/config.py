"""TOML config loader: packaged defaults + per-user overrides."""

import os
import shlex
import shutil
import tomllib
from pathlib import Path

import tomli_w

from .constants import SPEC_POLICIES

DEFAULTS_PATH = Path(__file__).parent.parent / "defaults.toml"
CONFIG_PATH = Path.home() / ".config" / "kindkit" / "config.toml"
CONFIG_ENV_VAR = "KINDKIT_CONFIG"


def user_config_path() -> Path:
    """The user config file: $KINDKIT_CONFIG if set, else CONFIG_PATH."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else CONFIG_PATH


def load_defaults() -> dict:
    """Load the packaged defaults.toml."""
    with open(DEFAULTS_PATH, "rb") as f:
        return tomllib.load(f)


def load_config(path: Path | None = None) -> dict:
    """Load the user config, merged over defaults."""
    config = load_defaults()
    _deep_merge(config, load_user_config(path))
    return config


def load_user_config(path: Path | None = None) -> dict:
    """Load only the user overrides (empty if there is no user file)."""
    path = path or user_config_path()
    if not path.exists():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict, path: Path | None = None) -> Path:
    """Write the user config file, creating its folder if needed."""
    path = path or user_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        tomli_w.dump(config, f)
    return path


def set_config_value(config: dict, dotted_key: str, raw_value: str) -> None:
    """Set ``section.key`` from a string, coerced to the type of the default."""
    section, _, key = dotted_key.partition(".")
    if not key:
        raise ValueError(f"Expected section.key, got {dotted_key!r}")
    current = load_defaults().get(section, {}).get(key)
    if current is None:
        raise ValueError(f"Unknown config key: {dotted_key}")
    config.setdefault(section, {})[key] = _coerce(raw_value, current)


def kind_command(config: dict) -> list[str]:
    """The argument prefix that invokes kind, e.g. ["kind"]."""
    value = config.get("tools", {}).get("kind") or "kind"
    if isinstance(value, list):
        return [str(v) for v in value]
    return shlex.split(str(value))


def find_kind(config: dict) -> str | None:
    """Resolve the configured kind executable to a path, if it exists."""
    exe = kind_command(config)[0]
    if Path(exe).is_file():
        return exe
    return shutil.which(exe)


def spec_policy(config: dict) -> str:
    policy = str(config.get("create", {}).get("spec_policy", "auto")).lower()
    if policy not in SPEC_POLICIES:
        allowed = ", ".join(SPEC_POLICIES)
        raise ValueError(f"Unknown create.spec_policy {policy!r}. Allowed: {allowed}")
    return policy


def _coerce(value: str, like):
    """Coerce a CLI/form string to the type of an existing value."""
    if isinstance(like, bool):
        return value.lower() in ("true", "on", "1", "yes")
    if isinstance(like, int):
        return int(value) if value else 0
    if isinstance(like, float):
        return float(value) if value else 0.0
    return value


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place, recursing into dicts."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
