"""Unified pipe error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``academio_pipe.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.pipe_error import PipeError
from .errors_parts.classification import classify_exception, connection_failed

__all__ = ["ErrorCode", "PipeError", "classify_exception", "connection_failed"]
