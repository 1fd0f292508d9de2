"""Unified configuration layer for the streaming pipe.

Merge order (later wins)
------------------------
1. Built-in defaults (``config.defaults``)
2. Optional external config file (JSON or YAML) named by ACADEMIO_PIPE_CONFIG_FILE
3. Environment variables (ACADEMIO_BASE_URL, ACADEMIO_TOKEN, ACADEMIO_DATA_PREFIX)
4. In-code overrides passed to the helper

A ``.env`` file (``DOTENV_FILE``, default ``.env``) is read once before the
environment is consulted; it only fills variables that are unset or hold a
placeholder value.

External config file example::

    base_url: https://academio.example.org
    data_prefix: "data: "
    auth_token: ${ACADEMIO_TOKEN}

Public API
----------
* get_pipe_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from .env import CONFIG_FILE_ENV, ENV_MAP, is_placeholder, resolve_env_value
from .defaults import DEFAULT_BASE_URL, DEFAULT_DATA_PREFIX


DEFAULTS: Dict[str, Any] = {
    "base_url": DEFAULT_BASE_URL,
    "data_prefix": DEFAULT_DATA_PREFIX,
    "auth_token": None,
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Parse KEY=VALUE lines from the dotenv file into ``os.environ`` once."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    data: Any = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError:
                data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_MAP:
        value, _ = resolve_env_value(field)
        if value is not None:
            out[field] = value
    return out


def get_pipe_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged pipe configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)
    cfg |= {k: v for k, v in _load_external_config().items() if k in DEFAULTS}
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def reset_config_cache() -> None:
    """Forget the cached external file and dotenv state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


__all__ = [
    "get_pipe_config",
    "reset_config_cache",
    "DEFAULTS",
]
