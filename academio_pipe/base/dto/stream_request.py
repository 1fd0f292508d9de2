"""
Pydantic DTO validating the inputs of one ``send``.

The request is a GET whose query string carries the message text and contextual
identifiers. Callers pass a plain mapping; ``None`` values are dropped, booleans
become ``"true"``/``"false"`` and other scalars are stringified so the query is
stable regardless of caller types.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StreamRequestDTO(BaseModel):
    """Target path/URL plus query parameters of a streaming request."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(min_length=1)
    params: Dict[str, str] = Field(default_factory=dict)

    @field_validator("target")
    @classmethod
    def _strip_target(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("target must not be blank")
        return value

    @field_validator("params", mode="before")
    @classmethod
    def _normalize_params(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ValueError("params must be a mapping of query parameters")
        out: Dict[str, str] = {}
        for key, raw in value.items():
            if raw is None:
                continue
            if isinstance(raw, bool):
                out[str(key)] = "true" if raw else "false"
            elif isinstance(raw, (str, int, float)):
                out[str(key)] = str(raw)
            else:
                raise ValueError(f"unsupported query value for {key!r}: {type(raw).__name__}")
        return out


__all__ = ["StreamRequestDTO"]
