"""Pydantic DTOs validating data crossing the pipe's boundaries."""

from .stream_request import StreamRequestDTO
from .wire_payload import WirePayloadDTO

__all__ = ["StreamRequestDTO", "WirePayloadDTO"]
