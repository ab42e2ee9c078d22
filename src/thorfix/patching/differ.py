"""Longest-common-subsequence line differ."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class ChangeKind(str, Enum):
    """Classification of a single line in an aligned diff."""

    EQUAL = "equal"
    INSERTED = "inserted"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class ChangeOp:
    """One line of the alignment between an original and a modified sequence."""

    kind: ChangeKind
    line: str


def _lcs_matrix(original: Sequence[str], modified: Sequence[str]) -> list[list[int]]:
    """Return ``M`` where ``M[i][j]`` is the LCS length of ``original[:i]`` and ``modified[:j]``."""
    matrix = [[0] * (len(modified) + 1) for _ in range(len(original) + 1)]
    for i in range(1, len(original) + 1):
        row = matrix[i]
        previous = matrix[i - 1]
        left = original[i - 1]
        for j in range(1, len(modified) + 1):
            if left == modified[j - 1]:
                row[j] = previous[j - 1] + 1
            else:
                row[j] = max(previous[j], row[j - 1])
    return matrix


def compute_changes(original: Sequence[str], modified: Sequence[str]) -> list[ChangeOp]:
    """Align two line sequences and return the ordered change operations.

    Lines are compared with exact string equality. When the walk back through
    the LCS matrix has a choice, insertions win ties over deletions. Time and
    memory are both ``O(len(original) * len(modified))``, which is fine for
    source files but not for very large inputs.
    """
    matrix = _lcs_matrix(original, modified)
    changes: list[ChangeOp] = []
    i = len(original)
    j = len(modified)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and original[i - 1] == modified[j - 1]:
            changes.append(ChangeOp(ChangeKind.EQUAL, original[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or matrix[i][j - 1] >= matrix[i - 1][j]):
            changes.append(ChangeOp(ChangeKind.INSERTED, modified[j - 1]))
            j -= 1
        else:
            changes.append(ChangeOp(ChangeKind.DELETED, original[i - 1]))
            i -= 1
    # The walk runs from the end of both sequences.
    changes.reverse()
    return changes


def original_lines(changes: Sequence[ChangeOp]) -> list[str]:
    """Reconstruct the original sequence from an alignment."""
    return [change.line for change in changes if change.kind is not ChangeKind.INSERTED]


def modified_lines(changes: Sequence[ChangeOp]) -> list[str]:
    """Reconstruct the modified sequence from an alignment."""
    return [change.line for change in changes if change.kind is not ChangeKind.DELETED]


__all__ = ["ChangeKind", "ChangeOp", "compute_changes", "modified_lines", "original_lines"]
