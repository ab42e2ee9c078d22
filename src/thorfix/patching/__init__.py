"""Text patch engine: SEARCH/REPLACE blocks and unified hunks."""

from .blocks import SearchReplaceBlock, apply_blocks, parse_blocks
from .differ import ChangeKind, ChangeOp, compute_changes
from .errors import (
    ErrorKind,
    PatchApplyError,
    PatchError,
    PatchFormatError,
    PatchNotFoundError,
    PatchValidationError,
)
from .hunks import ChangeLine, Hunk, HunkRole, apply_hunks, build_hunks, create_patch, format_hunks, parse_hunks
from .service import PatchFormat, PatchOutcome, apply_patch, patch_file

__all__ = [
    "ChangeKind",
    "ChangeLine",
    "ChangeOp",
    "ErrorKind",
    "Hunk",
    "HunkRole",
    "PatchApplyError",
    "PatchError",
    "PatchFormat",
    "PatchFormatError",
    "PatchNotFoundError",
    "PatchOutcome",
    "PatchValidationError",
    "SearchReplaceBlock",
    "apply_blocks",
    "apply_hunks",
    "apply_patch",
    "build_hunks",
    "compute_changes",
    "create_patch",
    "format_hunks",
    "parse_blocks",
    "parse_hunks",
    "patch_file",
]
