"""Line splitting helpers shared by both patch pipelines."""

from __future__ import annotations

NEWLINE = "\n"


def normalise_line_endings(text: str) -> str:
    """Convert CRLF/CR sequences to LF for deterministic matching."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(text: str | None) -> list[str]:
    """Split text into lines without their terminators.

    A single trailing terminator does not produce an empty final line, so
    ``"a\\nb\\n"`` and ``"a\\nb"`` both yield ``["a", "b"]``. Use
    :func:`has_trailing_newline` to remember which one was seen.
    """
    if not text:
        return []
    normalised = normalise_line_endings(text)
    lines = normalised.split(NEWLINE)
    if normalised.endswith(NEWLINE):
        lines.pop()
    return lines


def has_trailing_newline(text: str | None) -> bool:
    return bool(text) and text.endswith(("\n", "\r"))


def join_lines(lines: list[str], *, trailing_newline: bool = True) -> str:
    """Join lines with the normalised terminator."""
    if not lines:
        return ""
    joined = NEWLINE.join(lines)
    if trailing_newline:
        joined += NEWLINE
    return joined


__all__ = ["NEWLINE", "has_trailing_newline", "join_lines", "normalise_line_endings", "split_lines"]
