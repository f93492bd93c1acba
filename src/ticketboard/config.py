"""Configuration from defaults, a YAML file and the environment."""

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULTS: dict[str, Any] = {
    "api-url": "http://localhost:3001",
    "timeout": 10.0,
    "user-id": None,
    "email": None,
    "password": None,
}

ENV_PREFIX = "TICKETBOARD_"
DEFAULT_CONFIG_PATH = Path("~/.config/ticketboard/config.yaml")


def _python_key(key: str) -> str:
    """Convert file-style key (hyphenated) to Python-style (underscored)."""
    return key.strip().lower().replace("-", "_")


def _coerce(key: str, raw: Any) -> Any:
    """Type-coerce a string value to the type of its default."""
    if not isinstance(raw, str):
        return raw
    if key == "user_id":
        return int(raw) if raw.strip() else None
    default = DEFAULTS.get(key.replace("_", "-"))
    if isinstance(default, bool):
        return raw.lower() in ("true", "yes", "1")
    if isinstance(default, (int, float)):
        return type(default)(raw)
    return raw


def config_path() -> Path:
    return Path(os.environ.get(f"{ENV_PREFIX}CONFIG", DEFAULT_CONFIG_PATH)).expanduser()


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping. A missing file is an empty config."""
    path = Path(path).expanduser()
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")
    return {_python_key(k): _coerce(_python_key(k), v) for k, v in data.items()}


def read_config(path: str | Path | None = None, environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Merge defaults, the config file and TICKETBOARD_* variables.

    Later sources win. Keys come back underscored, e.g. ``api_url``.
    """
    environ = os.environ if environ is None else environ
    result = {_python_key(k): v for k, v in DEFAULTS.items()}
    result.update(read_config_file(path if path is not None else config_path()))
    for name, raw in environ.items():
        if not name.startswith(ENV_PREFIX) or name == f"{ENV_PREFIX}CONFIG":
            continue
        key = _python_key(name[len(ENV_PREFIX) :])
        if key in result:
            result[key] = _coerce(key, raw)
    return result
