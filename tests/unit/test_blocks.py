from __future__ import annotations

import textwrap

import pytest

from thorfix.patching.blocks import SearchReplaceBlock, apply_blocks, parse_blocks
from thorfix.patching.errors import PatchApplyError, PatchFormatError


def _block(search: str, replace: str) -> str:
    return f"<<<<<<< SEARCH\n{search}\n=======\n{replace}\n>>>>>>> REPLACE\n"


def test_single_block_replaces_line() -> None:
    blocks = parse_blocks(_block("Line 2", "Modified Line 2"))

    result = apply_blocks("Line 1\nLine 2\nLine 3\n", blocks)

    assert result == "Line 1\nModified Line 2\nLine 3\n"


def test_multiple_blocks_apply_in_order() -> None:
    diff = _block("Line 2", "Modified Line 2") + _block("Line 4", "Modified Line 4")

    result = apply_blocks("Line 1\nLine 2\nLine 3\nLine 4\n", parse_blocks(diff))

    assert result == "Line 1\nModified Line 2\nLine 3\nModified Line 4\n"


def test_later_block_sees_earlier_replacement() -> None:
    blocks = [
        SearchReplaceBlock(search="alpha", replace="beta"),
        SearchReplaceBlock(search="beta = 1", replace="beta = 2"),
    ]

    assert apply_blocks("alpha = 1\n", blocks) == "beta = 2\n"


def test_only_first_occurrence_is_replaced() -> None:
    result = apply_blocks("x\nx\nx\n", [SearchReplaceBlock(search="x", replace="y")])

    assert result == "y\nx\nx\n"


def test_multi_line_search_and_whitespace_are_preserved() -> None:
    diff = textwrap.dedent(
        """\
        Here is the change:
          <<<<<<< SEARCH
            Line 1
        \tLine 2
        =======
            Modified Line 1
        \tLine 2
        >>>>>>> REPLACE
        """
    )

    blocks = parse_blocks(diff)
    result = apply_blocks("    Line 1\n\tLine 2\n  Line 3  \n", blocks)

    assert blocks == [SearchReplaceBlock(search="    Line 1\n\tLine 2", replace="    Modified Line 1\n\tLine 2")]
    assert result == "    Modified Line 1\n\tLine 2\n  Line 3  \n"


def test_search_text_is_literal_not_a_pattern() -> None:
    content = "total = price * (1 + rate)\n"
    blocks = parse_blocks(_block("price * (1 + rate)", "price * (1 + rate) + fee"))

    assert apply_blocks(content, blocks) == "total = price * (1 + rate) + fee\n"


def test_crlf_diff_text_matches_lf_content() -> None:
    diff = "<<<<<<< SEARCH\r\nLine 1\r\nLine 2\r\n=======\r\nMerged\r\n>>>>>>> REPLACE\r\n"

    assert apply_blocks("Line 1\r\nLine 2\r\nLine 3\r\n", parse_blocks(diff)) == "Merged\nLine 3\n"


def test_empty_replacement_deletes_text() -> None:
    blocks = parse_blocks("<<<<<<< SEARCH\nremove me\n=======\n>>>>>>> REPLACE\n")

    assert apply_blocks("keep\nremove me\nkeep\n", blocks) == "keep\n\nkeep\n"


def test_missing_divider_is_a_format_error() -> None:
    with pytest.raises(PatchFormatError, match="missing divider marker"):
        parse_blocks("<<<<<<< SEARCH\nsome content")


def test_missing_replace_marker_is_a_format_error() -> None:
    with pytest.raises(PatchFormatError, match="missing replace marker"):
        parse_blocks("<<<<<<< SEARCH\nold\n=======\nnew\n")


def test_text_without_blocks_is_a_format_error() -> None:
    with pytest.raises(PatchFormatError):
        parse_blocks("I would change line 2 to something else.")


def test_empty_search_is_an_apply_error() -> None:
    with pytest.raises(PatchApplyError, match="empty"):
        parse_blocks("<<<<<<< SEARCH\n=======\nanything\n>>>>>>> REPLACE\n")

    with pytest.raises(PatchApplyError, match="empty"):
        apply_blocks("content", [SearchReplaceBlock(search="", replace="x")])


def test_missing_search_text_reports_snippet() -> None:
    blocks = parse_blocks(_block("Nonexistent Line", "Modified Line"))

    with pytest.raises(PatchApplyError, match="Nonexistent Line") as excinfo:
        apply_blocks("Line 1\nLine 2\n", blocks)

    assert excinfo.value.details["block"] == 1


def test_failure_in_second_block_aborts_call() -> None:
    blocks = [
        SearchReplaceBlock(search="Line 1", replace="First"),
        SearchReplaceBlock(search="Line 9", replace="Ninth"),
    ]

    with pytest.raises(PatchApplyError) as excinfo:
        apply_blocks("Line 1\nLine 2\n", blocks)

    assert excinfo.value.details["block"] == 2
