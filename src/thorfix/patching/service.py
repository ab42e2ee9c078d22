"""File-level facade that runs a patch pipeline against one file on disk."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from .blocks import apply_blocks, parse_blocks
from .errors import ErrorKind, PatchError, PatchNotFoundError, PatchValidationError
from .hunks import apply_hunks, parse_hunks
from .lines import has_trailing_newline, join_lines, split_lines

LOGGER = logging.getLogger(__name__)
TELEMETRY_LOGGER = logging.getLogger("thorfix.telemetry")

DEFAULT_MAX_PATCH_BYTES = 200_000


class PatchFormat(str, Enum):
    """Diff grammars accepted by :func:`apply_patch`."""

    BLOCK = "block"
    UNIFIED = "unified"


@dataclass(slots=True)
class PatchOutcome:
    """Result of a patch attempt; never raised, always returned."""

    ok: bool
    path: str
    message: str
    bytes_written: int = 0
    kind: ErrorKind | None = None
    details: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "path": self.path,
            "message": self.message,
            "bytes_written": self.bytes_written,
            "kind": self.kind.value if self.kind else None,
            "details": dict(self.details or {}),
        }


def _serialise_event_value(value: Any) -> Any:
    """Convert telemetry payload values into JSON-friendly representations."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (list, tuple, set)):
        return [_serialise_event_value(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _serialise_event_value(child) for key, child in value.items()}
    return str(value)


def _emit_patch_event(event: str, **fields: Any) -> None:
    """Log one compact JSON telemetry line per patch event."""
    payload = {"event": event, "timestamp": datetime.now(timezone.utc).isoformat()}
    for key, value in fields.items():
        payload[key] = _serialise_event_value(value)
    TELEMETRY_LOGGER.info(json.dumps(payload, separators=(",", ":"), ensure_ascii=True))


def coerce_format(value: PatchFormat | str) -> PatchFormat:
    """Resolve ``value`` into a :class:`PatchFormat` member."""
    if isinstance(value, PatchFormat):
        return value
    try:
        return PatchFormat(str(value).strip().lower())
    except ValueError as error:
        valid = ", ".join(item.value for item in PatchFormat)
        raise PatchValidationError(f"Unknown patch format '{value}'. Expected one of: {valid}") from error


def resolve_target(path: str | Path, root: Path | str) -> Path:
    """Resolve ``path`` against ``root`` and reject anything outside it."""
    root_path = Path(root).resolve()
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = root_path / candidate
    try:
        resolved = candidate.resolve()
    except (OSError, ValueError) as error:
        raise PatchValidationError(f"Invalid path {str(path)!r}: {error}", details={"path": str(path)}) from error
    if not resolved.is_relative_to(root_path):
        raise PatchValidationError(
            f"Path was outside the allowed root directory ({root_path})",
            details={"path": str(path), "root": root_path.as_posix()},
        )
    return resolved


def transform(content: str, diff_text: str, fmt: PatchFormat | str) -> str:
    """Run the pipeline selected by ``fmt`` over in-memory ``content``."""
    selected = coerce_format(fmt)
    if selected is PatchFormat.BLOCK:
        return apply_blocks(content, parse_blocks(diff_text))
    if selected is PatchFormat.UNIFIED:
        lines = apply_hunks(split_lines(content), parse_hunks(diff_text))
        return join_lines(lines, trailing_newline=has_trailing_newline(content) or not content)
    raise PatchValidationError(f"Unsupported patch format: {selected!r}")


def _write_bytes(target: Path, data: bytes) -> int:
    """Replace ``target`` with ``data`` through a sibling temp file."""
    handle, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(data)
        shutil.copymode(target, temp_name)
        os.replace(temp_name, target)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    return len(data)


def patch_file(
    path: str | Path,
    diff_text: str,
    fmt: PatchFormat | str = PatchFormat.BLOCK,
    *,
    root: Path | str,
    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES,
) -> int:
    """Apply ``diff_text`` to the file at ``path`` and return the bytes written.

    Raises a :class:`PatchError` subclass on any failure. Inputs are validated
    before the file is touched, the file is read once, and it is written at
    most once after the whole transform succeeds.
    """
    if not str(path or "").strip():
        raise PatchValidationError("Path cannot be empty")
    if not diff_text:
        raise PatchValidationError("Diff content cannot be empty")
    selected = coerce_format(fmt)
    diff_bytes = len(diff_text.encode("utf-8", errors="replace"))
    if max_patch_bytes > 0 and diff_bytes > max_patch_bytes:
        raise PatchValidationError(
            f"Patch exceeds maximum size of {max_patch_bytes} bytes.",
            details={"patch_bytes": diff_bytes},
        )

    target = resolve_target(path, root)
    if not target.is_file():
        raise PatchNotFoundError(f"File not found: {path}", details={"path": str(path)})

    try:
        original = target.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise PatchValidationError(f"File is not valid UTF-8 text: {path}") from error

    updated = transform(original, diff_text, selected)
    try:
        data = updated.encode("utf-8")
    except UnicodeError as error:
        raise PatchValidationError(f"Patched content is not encodable as UTF-8: {error}") from error
    written = _write_bytes(target, data)
    LOGGER.debug("Patched %s (%s, %d bytes)", target, selected.value, written)
    return written


def apply_patch(
    path: str | Path,
    diff_text: str,
    fmt: PatchFormat | str = PatchFormat.BLOCK,
    *,
    root: Path | str,
    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES,
) -> PatchOutcome:
    """Apply a patch and report the outcome instead of raising."""
    label = str(path or "")
    try:
        written = patch_file(path, diff_text, fmt, root=root, max_patch_bytes=max_patch_bytes)
    except PatchError as error:
        _emit_patch_event("patch.failed", path=label, format=fmt, kind=error.kind, message=str(error))
        return PatchOutcome(
            ok=False,
            path=label,
            message=str(error),
            kind=error.kind,
            details=error.details,
        )
    except OSError as error:
        LOGGER.warning("I/O failure while patching %s: %s", label, error)
        _emit_patch_event("patch.failed", path=label, format=fmt, kind=ErrorKind.IO, message=str(error))
        return PatchOutcome(ok=False, path=label, message=str(error), kind=ErrorKind.IO)

    _emit_patch_event("patch.applied", path=label, format=fmt, bytes_written=written)
    return PatchOutcome(ok=True, path=label, message=f"{label} modified successfully.", bytes_written=written)


__all__ = [
    "DEFAULT_MAX_PATCH_BYTES",
    "PatchFormat",
    "PatchOutcome",
    "apply_patch",
    "coerce_format",
    "patch_file",
    "resolve_target",
    "transform",
]
