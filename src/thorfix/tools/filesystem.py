"""Repository file tools exposed to the calling agent.

Every tool takes paths relative to a configured root directory (absolute paths
are accepted only when they resolve inside it) and returns a
:class:`ToolResult` rather than raising.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..patching.errors import PatchValidationError
from ..patching.service import DEFAULT_MAX_PATCH_BYTES, PatchFormat, apply_patch, resolve_target
from .result import ToolResult

LOGGER = logging.getLogger(__name__)

_SKIPPED_DIRECTORIES = {".git"}


def read_file(root: Path | str, path: str) -> ToolResult:
    """Return the UTF-8 text of ``path``."""
    LOGGER.info("Read the contents of %s", path)
    try:
        target = resolve_target(path, root)
    except PatchValidationError as error:
        return ToolResult.error(str(error))
    try:
        return ToolResult(target.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as error:
        return ToolResult.error(f"Failed to read file {path}: {error}")


def list_files(root: Path | str) -> ToolResult:
    """List every file under ``root`` as newline-separated relative paths."""
    root_path = Path(root).resolve()
    entries: list[str] = []
    for candidate in sorted(root_path.rglob("*")):
        relative = candidate.relative_to(root_path)
        if _SKIPPED_DIRECTORIES.intersection(relative.parts):
            continue
        if candidate.is_file():
            entries.append(relative.as_posix())
    return ToolResult("\n".join(entries))


def write_file(root: Path | str, path: str, content: str) -> ToolResult:
    """Create or overwrite ``path`` with ``content``."""
    LOGGER.info("Write the contents of %s", path)
    try:
        target = resolve_target(path, root)
    except PatchValidationError as error:
        return ToolResult.error(str(error))
    try:
        data = content.encode("utf-8")
    except UnicodeError as error:
        return ToolResult.error(f"Failed to write file {path}: {error}")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as error:
        return ToolResult.error(f"Failed to write file {path}: {error}")
    return ToolResult(f"{path} written successfully.")


def _run_patch(
    root: Path | str,
    path: str,
    diff_text: str,
    fmt: PatchFormat,
    max_patch_bytes: int,
) -> ToolResult:
    LOGGER.info("Modify the contents of %s", path)
    outcome = apply_patch(path, diff_text, fmt, root=root, max_patch_bytes=max_patch_bytes)
    if outcome.ok:
        return ToolResult(outcome.message)
    kind = outcome.kind.value if outcome.kind else "error"
    return ToolResult.error(f"Error while modifying {path}: {kind}: {outcome.message}")


def modify_file(
    root: Path | str,
    path: str,
    diff: str,
    *,
    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES,
) -> ToolResult:
    """Apply SEARCH/REPLACE blocks to ``path``."""
    return _run_patch(root, path, diff, PatchFormat.BLOCK, max_patch_bytes)


def patch_file_tool(
    root: Path | str,
    path: str,
    patch: str,
    *,
    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES,
) -> ToolResult:
    """Apply unified-diff hunks to ``path``."""
    return _run_patch(root, path, patch, PatchFormat.UNIFIED, max_patch_bytes)


__all__ = ["list_files", "modify_file", "patch_file_tool", "read_file", "write_file"]
