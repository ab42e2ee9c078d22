"""Unified-hunk building, serialisation, parsing and application.

The hunk grammar is the body of a classic unified diff::

    @@ -<orig_start>,<orig_len> +<new_start>,<new_len> @@
     <context line>
    -<removed line>
    +<added line>

Header start numbers are 1-based; :class:`Hunk` stores them 0-based.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .differ import ChangeKind, ChangeOp, compute_changes
from .errors import PatchApplyError, PatchFormatError
from .lines import NEWLINE, split_lines

CONTEXT_LINES = 3

_HUNK_HEADER = re.compile(r"^@@ -(\d+),(\d+) \+(\d+),(\d+) @@")


class HunkRole(str, Enum):
    """Role a line plays inside a hunk."""

    CONTEXT = "context"
    ADD = "add"
    REMOVE = "remove"


_PREFIX_FOR_ROLE = {
    HunkRole.CONTEXT: " ",
    HunkRole.ADD: "+",
    HunkRole.REMOVE: "-",
}
_ROLE_FOR_PREFIX = {prefix: role for role, prefix in _PREFIX_FOR_ROLE.items()}
_ROLE_FOR_KIND = {
    ChangeKind.EQUAL: HunkRole.CONTEXT,
    ChangeKind.INSERTED: HunkRole.ADD,
    ChangeKind.DELETED: HunkRole.REMOVE,
}


@dataclass(frozen=True, slots=True)
class ChangeLine:
    """Single line of hunk content."""

    content: str
    role: HunkRole


@dataclass(frozen=True, slots=True)
class Hunk:
    """Contiguous, context-bounded region of change."""

    original_start: int
    original_length: int
    new_start: int
    new_length: int
    lines: tuple[ChangeLine, ...] = ()

    def header(self) -> str:
        return (
            f"@@ -{self.original_start + 1},{self.original_length} "
            f"+{self.new_start + 1},{self.new_length} @@"
        )


def _close_hunk(
    lines: list[ChangeLine],
    start: int,
    original_at: Sequence[int],
    new_at: Sequence[int],
) -> Hunk:
    return Hunk(
        original_start=original_at[start],
        original_length=sum(1 for line in lines if line.role is not HunkRole.ADD),
        new_start=new_at[start],
        new_length=sum(1 for line in lines if line.role is not HunkRole.REMOVE),
        lines=tuple(lines),
    )


def build_hunks(changes: Sequence[ChangeOp], *, context: int = CONTEXT_LINES) -> list[Hunk]:
    """Group change operations into hunks with ``context`` lines on each side.

    A hunk closes once more than ``context`` unchanged lines follow its last
    change. Leading context of the next hunk never reaches back into lines
    already claimed by the previous one, so hunks stay ordered and
    non-overlapping.
    """
    original_at: list[int] = []
    new_at: list[int] = []
    original_pos = 0
    new_pos = 0
    for change in changes:
        original_at.append(original_pos)
        new_at.append(new_pos)
        if change.kind is not ChangeKind.INSERTED:
            original_pos += 1
        if change.kind is not ChangeKind.DELETED:
            new_pos += 1

    hunks: list[Hunk] = []
    current: list[ChangeLine] | None = None
    start = 0
    floor = 0
    last_change = -1

    for index, change in enumerate(changes):
        if change.kind is not ChangeKind.EQUAL:
            if current is None:
                start = max(index - context, floor)
                current = [ChangeLine(changes[k].line, HunkRole.CONTEXT) for k in range(start, index)]
            current.append(ChangeLine(change.line, _ROLE_FOR_KIND[change.kind]))
            last_change = index
        elif current is not None:
            if index - last_change <= context:
                current.append(ChangeLine(change.line, HunkRole.CONTEXT))
            else:
                hunks.append(_close_hunk(current, start, original_at, new_at))
                current = None
                floor = index

    if current is not None:
        hunks.append(_close_hunk(current, start, original_at, new_at))
    return hunks


def format_hunks(hunks: Sequence[Hunk]) -> str:
    """Serialise hunks to unified-hunk text."""
    rendered: list[str] = []
    for hunk in hunks:
        rendered.append(hunk.header())
        for line in hunk.lines:
            rendered.append(f"{_PREFIX_FOR_ROLE[line.role]}{line.content}")
    if not rendered:
        return ""
    return NEWLINE.join(rendered) + NEWLINE


def create_patch(original_text: str, modified_text: str) -> str:
    """Return the unified-hunk text that turns ``original_text`` into ``modified_text``."""
    changes = compute_changes(split_lines(original_text), split_lines(modified_text))
    return format_hunks(build_hunks(changes))


def parse_hunks(text: str) -> list[Hunk]:
    """Parse unified-hunk text back into :class:`Hunk` records.

    Lines before the first header (``---``/``+++`` file headers, prose) are
    ignored. Empty lines are skipped.
    """
    hunks: list[Hunk] = []
    header: tuple[int, int, int, int] | None = None
    body: list[ChangeLine] = []

    def flush() -> None:
        if header is not None:
            hunks.append(Hunk(*header, lines=tuple(body)))

    for number, line in enumerate(split_lines(text), start=1):
        if line.startswith("@@"):
            match = _HUNK_HEADER.match(line)
            if not match:
                raise PatchFormatError(
                    f"Malformed hunk header at patch line {number}: {line!r}",
                    details={"line": number},
                )
            flush()
            original_start, original_length, new_start, new_length = (int(group) for group in match.groups())
            header = (max(original_start - 1, 0), original_length, max(new_start - 1, 0), new_length)
            body = []
            continue
        if header is None or not line:
            continue
        role = _ROLE_FOR_PREFIX.get(line[0])
        if role is None:
            raise PatchFormatError(
                f"Invalid patch line {number}: {line!r} (expected ' ', '+' or '-' prefix)",
                details={"line": number},
            )
        body.append(ChangeLine(line[1:], role))

    flush()
    if not hunks:
        raise PatchFormatError("Patch does not contain any '@@ -a,b +c,d @@' hunk headers.")
    return hunks


def apply_hunks(lines: Sequence[str], hunks: Sequence[Hunk]) -> list[str]:
    """Apply ``hunks`` to ``lines`` and return the new line list.

    Every context and removal line must match the target exactly. Hunks must
    be sorted by ``original_start`` and must not overlap.
    """
    result: list[str] = []
    cursor = 0
    total = len(lines)

    for number, hunk in enumerate(hunks, start=1):
        if hunk.original_start < cursor:
            raise PatchApplyError(
                f"Hunk {number} starts at line {hunk.original_start + 1}, "
                f"which overlaps the previous hunk ending at line {cursor}",
                details={"hunk": number, "line": hunk.original_start + 1},
            )
        if hunk.original_start > total:
            raise PatchApplyError(
                f"Hunk {number} starts at line {hunk.original_start + 1}, past the end of the file ({total} lines)",
                details={"hunk": number, "line": hunk.original_start + 1},
            )
        result.extend(lines[cursor : hunk.original_start])
        cursor = hunk.original_start

        for change in hunk.lines:
            if change.role is HunkRole.ADD:
                result.append(change.content)
                continue
            if change.role is HunkRole.CONTEXT:
                label = "Context"
            elif change.role is HunkRole.REMOVE:
                label = "Remove"
            else:
                raise PatchFormatError(f"Unsupported hunk line role: {change.role!r}")
            actual = lines[cursor] if cursor < total else None
            if actual != change.content:
                raise PatchApplyError(
                    f"{label} mismatch at line {cursor + 1}: expected {change.content!r}, "
                    f"found {'end of file' if actual is None else repr(actual)}",
                    details={"hunk": number, "line": cursor + 1, "expected": change.content, "actual": actual},
                )
            if change.role is HunkRole.CONTEXT:
                result.append(actual)
            cursor += 1

    result.extend(lines[cursor:])
    return result


__all__ = [
    "CONTEXT_LINES",
    "ChangeLine",
    "Hunk",
    "HunkRole",
    "apply_hunks",
    "build_hunks",
    "create_patch",
    "format_hunks",
    "parse_hunks",
]
