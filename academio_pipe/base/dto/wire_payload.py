"""
Pydantic DTO validating one decoded text-event payload.

The chat server writes ``data: {json}`` lines whose object carries a ``type``
tag and optional camelCase fields. The DTO accepts unknown keys (they are
ignored), coerces numeric ids to strings, and maps the legacy ``messageId``
field of ``done`` payloads onto ``assistant_message_id``.

Validation failures raise ``pydantic.ValidationError``; the event parser turns
those into non-fatal malformed-event records.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class WirePayloadDTO(BaseModel):
    """Validated shape of a single wire payload."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    type: str
    content: Optional[str] = None
    error: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    user_message_id: Optional[str] = Field(default=None, alias="userMessageId")
    assistant_message_id: Optional[str] = Field(default=None, alias="assistantMessageId")
    message_id: Optional[str] = Field(default=None, alias="messageId")

    @field_validator(
        "session_id",
        "user_message_id",
        "assistant_message_id",
        "message_id",
        mode="before",
    )
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("identifier must be a string or number")
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @model_validator(mode="after")
    def _apply_message_id_alias(self) -> "WirePayloadDTO":
        if self.assistant_message_id is None and self.message_id is not None:
            self.assistant_message_id = self.message_id
        return self


__all__ = ["WirePayloadDTO"]
