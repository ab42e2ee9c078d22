"""Typed failures raised by the patch engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


class ErrorKind(str, Enum):
    """Failure categories reported across the tool boundary."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    FORMAT = "format"
    APPLY = "apply"
    IO = "io"


class PatchError(RuntimeError):
    """Raised when a patch fails validation, parsing or application."""

    kind: ErrorKind = ErrorKind.APPLY

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = dict(details or {})


class PatchValidationError(PatchError):
    """Raised for empty or out-of-bounds inputs before any I/O happens."""

    kind = ErrorKind.VALIDATION


class PatchNotFoundError(PatchError):
    """Raised when the patch target does not exist."""

    kind = ErrorKind.NOT_FOUND


class PatchFormatError(PatchError):
    """Raised when diff text does not follow the expected grammar."""

    kind = ErrorKind.FORMAT


class PatchApplyError(PatchError):
    """Raised when a well-formed patch does not match the target content."""

    kind = ErrorKind.APPLY


__all__ = [
    "ErrorKind",
    "PatchApplyError",
    "PatchError",
    "PatchFormatError",
    "PatchNotFoundError",
    "PatchValidationError",
]
