"""YAML + environment variable configuration loading.

Config file: config/keygate.yaml
Env var override prefix: KEYGATE_
Nesting convention: double underscore (e.g. KEYGATE_SERVER__PORT)
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml

_DEFAULT_CONFIG_PATH = Path("config/keygate.yaml")

_DEFAULTS: dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8081,
    },
    "auth": {
        "forward_header": "X-API-Key",
        "protected_prefixes": [],
    },
    "logging": {
        "level": "INFO",
    },
}

ENV_PREFIX = "KEYGATE_"


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base, recursively for nested dicts."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _coerce_value(value: str) -> int | float | bool | str:
    """Attempt to coerce a string env var value to a typed value."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _apply_env_overrides(config: dict) -> dict:
    """Apply KEYGATE_ prefixed environment variables as overrides.

    Double underscore separates nesting levels:
        KEYGATE_AUTH__FORWARD_HEADER=X-Upstream-Key -> config["auth"]["forward_header"]
        KEYGATE_AUTH__PROTECTED_PREFIXES=/api,/admin -> ["/api", "/admin"]
    """
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        parts = key[len(ENV_PREFIX) :].lower().split("__")
        target = config
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        target[parts[-1]] = _coerce_value(value)
    return config


def split_prefixes(value: str | list[str] | None) -> list[str]:
    """Normalize protected path prefixes given as a list or a comma-separated string."""
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [p.strip() for p in value if p and p.strip()]


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file with env var overrides.

    Precedence (highest wins): env vars > YAML file > defaults.
    """
    config = copy.deepcopy(_DEFAULTS)

    path = config_path or _DEFAULT_CONFIG_PATH
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config = _deep_merge(config, file_config)

    config = _apply_env_overrides(config)
    auth = config["auth"]
    auth["protected_prefixes"] = split_prefixes(auth.get("protected_prefixes"))
    return config
