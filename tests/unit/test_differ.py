from __future__ import annotations

import pytest

from thorfix.patching.differ import ChangeKind, ChangeOp, compute_changes, modified_lines, original_lines
from thorfix.patching.lines import join_lines, split_lines


def test_compute_changes_prefers_insert_before_delete_on_ties() -> None:
    changes = compute_changes(["a", "b", "c"], ["a", "x", "c"])

    assert changes == [
        ChangeOp(ChangeKind.EQUAL, "a"),
        ChangeOp(ChangeKind.DELETED, "b"),
        ChangeOp(ChangeKind.INSERTED, "x"),
        ChangeOp(ChangeKind.EQUAL, "c"),
    ]


def test_compute_changes_identical_sequences_are_all_equal() -> None:
    lines = ["def add(a, b):", "    return a + b", ""]

    changes = compute_changes(lines, lines)

    assert all(change.kind is ChangeKind.EQUAL for change in changes)
    assert [change.line for change in changes] == lines


def test_compute_changes_handles_empty_inputs() -> None:
    assert compute_changes([], []) == []
    assert [change.kind for change in compute_changes([], ["x", "y"])] == [ChangeKind.INSERTED] * 2
    assert [change.kind for change in compute_changes(["x"], [])] == [ChangeKind.DELETED]


def test_compute_changes_does_not_ignore_whitespace() -> None:
    changes = compute_changes(["value = 1"], ["value = 1 "])

    assert {change.kind for change in changes} == {ChangeKind.INSERTED, ChangeKind.DELETED}


@pytest.mark.parametrize(
    ("original", "modified"),
    [
        (["a", "b", "c", "d"], ["b", "c", "e"]),
        (["x"] * 5, ["x", "y", "x", "x"]),
        (["import os", "", "def main():", "    pass"], ["import os", "import sys", "", "def main():", "    return 0"]),
    ],
)
def test_filtering_changes_reconstructs_both_sides(original: list[str], modified: list[str]) -> None:
    changes = compute_changes(original, modified)

    assert original_lines(changes) == original
    assert modified_lines(changes) == modified


def test_split_and_join_normalise_terminators() -> None:
    assert split_lines("a\r\nb\nc\r\n") == ["a", "b", "c"]
    assert split_lines("a\n\n") == ["a", ""]
    assert split_lines("") == []
    assert join_lines(split_lines("one\r\ntwo\r\n")) == "one\ntwo\n"
    assert join_lines(["one", "two"], trailing_newline=False) == "one\ntwo"
