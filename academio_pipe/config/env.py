"""academio_pipe.config.env
========================

Environment variable names read by the pipe and small helpers around them.

Design Notes
------------
- ``ENV_MAP`` maps configuration fields to their canonical variable name.
  ``ENV_ALIASES`` lists accepted alternatives, canonical name first.
- Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "base_url": "ACADEMIO_BASE_URL",
    "auth_token": "ACADEMIO_TOKEN",
    "data_prefix": "ACADEMIO_DATA_PREFIX",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    # The web client stored its JWT under ``academio_token``; accept the same
    # name exported verbatim.
    "auth_token": ("ACADEMIO_TOKEN", "academio_token"),
}

CONFIG_FILE_ENV = "ACADEMIO_PIPE_CONFIG_FILE"


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. Case-insensitive and tolerant of surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def resolve_env_value(field: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable_name)`` for the first non-empty variable of ``field``.

    Placeholder values are skipped. ``(None, None)`` when nothing usable is set.
    """
    names = ENV_ALIASES.get(field) or ((ENV_MAP[field],) if field in ENV_MAP else ())
    for name in names:
        val = os.getenv(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "CONFIG_FILE_ENV",
    "is_placeholder",
    "resolve_env_value",
]
