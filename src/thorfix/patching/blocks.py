"""SEARCH/REPLACE block parsing and literal substitution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import PatchApplyError, PatchFormatError
from .lines import NEWLINE, normalise_line_endings, split_lines

SEARCH_MARKER = "<<<<<<< SEARCH"
DIVIDER_MARKER = "======="
REPLACE_MARKER = ">>>>>>> REPLACE"

_PREVIEW_LIMIT = 200


@dataclass(frozen=True, slots=True)
class SearchReplaceBlock:
    """Exact snippet to find and the text that replaces its first occurrence."""

    search: str
    replace: str


def _preview(text: str) -> str:
    if len(text) <= _PREVIEW_LIMIT:
        return text
    return f"{text[: _PREVIEW_LIMIT - 3]}..."


def _collect_until(lines: Sequence[str], index: int, marker: str) -> tuple[list[str], int]:
    """Collect lines from ``index`` up to ``marker``; return them and the marker's index."""
    collected: list[str] = []
    while index < len(lines) and lines[index].strip() != marker:
        collected.append(lines[index])
        index += 1
    return collected, index


def parse_blocks(text: str) -> list[SearchReplaceBlock]:
    """Extract every SEARCH/REPLACE block from free-form text, in order.

    Marker lines are recognised after trimming surrounding whitespace; text
    outside blocks is ignored.
    """
    lines = split_lines(text)
    blocks: list[SearchReplaceBlock] = []
    index = 0
    while index < len(lines):
        if lines[index].strip() != SEARCH_MARKER:
            index += 1
            continue

        search_lines, index = _collect_until(lines, index + 1, DIVIDER_MARKER)
        if index >= len(lines):
            raise PatchFormatError(
                "Invalid diff format: missing divider marker",
                details={"block": len(blocks) + 1, "marker": DIVIDER_MARKER},
            )
        replace_lines, index = _collect_until(lines, index + 1, REPLACE_MARKER)
        if index >= len(lines):
            raise PatchFormatError(
                "Invalid diff format: missing replace marker",
                details={"block": len(blocks) + 1, "marker": REPLACE_MARKER},
            )

        search = NEWLINE.join(search_lines)
        if not search:
            raise PatchApplyError(
                f"Search content of block {len(blocks) + 1} is empty",
                details={"block": len(blocks) + 1},
            )
        blocks.append(SearchReplaceBlock(search=search, replace=NEWLINE.join(replace_lines)))
        index += 1

    if not blocks:
        raise PatchFormatError(f"Diff does not contain any '{SEARCH_MARKER}' blocks.")
    return blocks


def apply_blocks(content: str, blocks: Sequence[SearchReplaceBlock]) -> str:
    """Apply each block to ``content`` in order and return the result.

    Each block sees the output of the blocks before it. Only the first literal
    occurrence of a search snippet is replaced; the first block that does not
    match aborts the whole call.
    """
    current = normalise_line_endings(content)
    for number, block in enumerate(blocks, start=1):
        search = normalise_line_endings(block.search)
        if not search:
            raise PatchApplyError(f"Search content of block {number} is empty", details={"block": number})
        position = current.find(search)
        if position < 0:
            raise PatchApplyError(
                f"Search content not found in file: {_preview(search)}",
                details={"block": number, "search": search},
            )
        replace = normalise_line_endings(block.replace)
        current = current[:position] + replace + current[position + len(search) :]
    return current


__all__ = [
    "DIVIDER_MARKER",
    "REPLACE_MARKER",
    "SEARCH_MARKER",
    "SearchReplaceBlock",
    "apply_blocks",
    "parse_blocks",
]
