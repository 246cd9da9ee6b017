"""
Tests for the doc tag differ.

Covers pairing of tags across snapshots, the classification of differences,
category gating and the TagDiffer tool wrapper.
"""

from __future__ import annotations

from doctags.base import ToolStatus
from doctags.comparison import (
    TagDiffer,
    TagDiffInput,
    find_doc_tag_diffs,
    match_doc_tags,
    summarize_diffs,
)
from doctags.models import ChangeType, DiffOptions, DiffType, DocTag


def tag(
    name: str = "X",
    path: str = "a.js",
    start: int = 1,
    end: int = 3,
    content: str = "foo",
) -> DocTag:
    return DocTag(
        file_path=path, tag_name=name, start_line=start, end_line=end, content=content
    )


def kinds(diffs: list) -> list[tuple[str, str]]:
    return [(d.type.value, d.change_type.value) for d in diffs]


class TestClassification:
    """One pair of snapshots, one kind of change."""

    def test_identical_snapshots_have_no_diffs(self) -> None:
        tags = [
            tag("X", "a.js"),
            tag("X", "a.js", 10, 12),
            tag("X", "a.kt"),
            tag("Y", "dir/b.py", 4, 9, "bar"),
        ]

        assert find_doc_tag_diffs(tags, tags) == []
        assert find_doc_tag_diffs(tags, list(tags)) == []

    def test_empty_old_snapshot_reports_every_tag_added(self) -> None:
        new_tags = [tag("X", "a.js"), tag("Y", "b.js"), tag("X", "a.kt")]

        diffs = find_doc_tag_diffs([], new_tags)

        assert kinds(diffs) == [("added", "code_contents")] * 3
        assert [d.tag_name for d in diffs] == ["X", "Y", "X"]
        assert diffs[0].start_line == 1
        assert diffs[0].end_line == 3

    def test_content_change(self) -> None:
        diffs = find_doc_tag_diffs([tag(content="foo")], [tag(content="bar")])

        assert kinds(diffs) == [("changed", "code_contents")]
        patch = diffs[0].content_diff
        assert patch is not None
        assert "-foo" in patch
        assert "+bar" in patch
        assert "--- a.js" in patch
        assert "+++ a.js" in patch

    def test_patch_lines_split_only_on_newlines(self) -> None:
        diffs = find_doc_tag_diffs(
            [tag(content="a\x0cb\nc")], [tag(content="a\x0cB\nc")]
        )

        patch = diffs[0].content_diff
        assert patch is not None
        assert "-a\x0cb\n+a\x0cB\n" in patch
        assert " c\n" in patch

    def test_patch_from_empty_content_only_adds(self) -> None:
        diffs = find_doc_tag_diffs([tag(content="")], [tag(content="x")])

        patch = diffs[0].content_diff
        assert patch is not None
        assert patch.endswith("@@ -0,0 +1 @@\n+x\n")

    def test_rename_is_a_single_file_path_change(self) -> None:
        diffs = find_doc_tag_diffs([tag(path="a.js")], [tag(path="b.js")])

        assert kinds(diffs) == [("changed", "file_path")]
        assert diffs[0].file_path == "b.js"
        assert diffs[0].previous_file_path == "a.js"
        assert diffs[0].content_diff is None

    def test_moved_lines(self) -> None:
        diffs = find_doc_tag_diffs([tag(start=1, end=3)], [tag(start=5, end=7)])

        assert kinds(diffs) == [("changed", "line_number")]
        assert (diffs[0].start_line, diffs[0].end_line) == (5, 7)

    def test_only_end_line_moved(self) -> None:
        diffs = find_doc_tag_diffs(
            [tag(end=3, content="a")], [tag(end=4, content="a\n\nb")]
        )

        assert kinds(diffs) == [("changed", "line_number"), ("changed", "code_contents")]

    def test_one_pair_can_yield_three_diffs(self) -> None:
        old = tag(path="a.js", start=1, end=3, content="foo")
        new = tag(path="lib/a2.js", start=8, end=11, content="bar")

        diffs = find_doc_tag_diffs([old], [new])

        assert kinds(diffs) == [
            ("changed", "file_path"),
            ("changed", "line_number"),
            ("changed", "code_contents"),
        ]

    def test_removed_tag_reports_old_location(self) -> None:
        diffs = find_doc_tag_diffs([tag("gone", "old.js", 4, 6)], [])

        assert kinds(diffs) == [("removed", "code_contents")]
        assert diffs[0].file_path == "old.js"
        assert (diffs[0].start_line, diffs[0].end_line) == (4, 6)


class TestMatching:
    """Identity resolution between snapshots."""

    def test_extension_keeps_language_variants_apart(self) -> None:
        old = [tag("X", "src/A.java", content="java"), tag("X", "src/A.kt", content="kt")]
        new = [tag("X", "lib/A.java", content="java"), tag("X", "src/A.kt", content="kt")]

        diffs = find_doc_tag_diffs(old, new)

        assert kinds(diffs) == [("changed", "file_path")]
        assert diffs[0].file_path == "lib/A.java"
        assert diffs[0].previous_file_path == "src/A.java"

    def test_different_extension_is_added_plus_removed(self) -> None:
        diffs = find_doc_tag_diffs([tag("X", "a.kt")], [tag("X", "a.java")])

        assert kinds(diffs) == [("added", "code_contents"), ("removed", "code_contents")]
        assert diffs[0].file_path == "a.java"
        assert diffs[1].file_path == "a.kt"

    def test_exact_path_wins_over_first_extension_match(self) -> None:
        old = [tag("X", "a.js", 1, 3, "one"), tag("X", "b.js", 10, 12, "two")]
        new = [tag("X", "b.js", 10, 12, "two")]

        diffs = find_doc_tag_diffs(old, new)

        assert kinds(diffs) == [("removed", "code_contents")]
        assert diffs[0].file_path == "a.js"

    def test_exact_pairs_settle_before_extension_fallback(self) -> None:
        old = [tag("X", "a.js", 1, 3, "A"), tag("X", "b.js", 10, 12, "B")]
        moved = tag("X", "c.js", 10, 12, "B")
        untouched = tag("X", "a.js", 1, 3, "A")

        for new in ([moved, untouched], [untouched, moved]):
            diffs = find_doc_tag_diffs(old, new)

            assert kinds(diffs) == [("changed", "file_path")]
            assert diffs[0].file_path == "c.js"
            assert diffs[0].previous_file_path == "b.js"

    def test_each_old_tag_pairs_once(self) -> None:
        old = [tag("X", "a.js")]
        new = [tag("X", "a.js"), tag("X", "b.js")]

        pairs, unmatched = match_doc_tags(old, new)

        assert pairs[0][1] is old[0]
        assert pairs[1][1] is None
        assert unmatched == []

    def test_removed_reported_once_per_tag(self) -> None:
        old = [tag("X", "a.js"), tag("X", "b.js"), tag("Y", "c.py")]
        new = [tag("X", "a.js")]

        diffs = find_doc_tag_diffs(old, new)

        assert kinds(diffs) == [("removed", "code_contents")] * 2
        assert [d.file_path for d in diffs] == ["b.js", "c.py"]

    def test_output_grouped_added_removed_changed(self) -> None:
        old = [tag("changed", "a.js", content="1"), tag("removed", "b.js")]
        new = [tag("changed", "a.js", content="2"), tag("added", "c.js")]

        diffs = find_doc_tag_diffs(old, new)

        assert [d.type for d in diffs] == [
            DiffType.ADDED,
            DiffType.REMOVED,
            DiffType.CHANGED,
        ]


class TestGating:
    """DiffOptions suppress output without changing the pairing."""

    def test_disabled_diff_type_is_suppressed(self) -> None:
        old = [tag("gone", "a.js"), tag("X", "b.js", content="1")]
        new = [tag("new", "c.js"), tag("X", "b.js", content="2")]
        options = DiffOptions(diff_types=frozenset({DiffType.ADDED}))

        diffs = find_doc_tag_diffs(old, new, options)

        assert kinds(diffs) == [("added", "code_contents")]

    def test_disabled_change_type_is_suppressed(self) -> None:
        options = DiffOptions(change_types=frozenset({ChangeType.CODE_CONTENTS}))

        diffs = find_doc_tag_diffs(
            [tag(path="a.js", content="foo")], [tag(path="b.js", content="bar")], options
        )

        assert kinds(diffs) == [("changed", "code_contents")]

    def test_renamed_tag_is_not_reported_added_when_changes_are_hidden(self) -> None:
        options = DiffOptions(diff_types=frozenset({DiffType.ADDED, DiffType.REMOVED}))

        diffs = find_doc_tag_diffs([tag(path="a.js")], [tag(path="b.js")], options)

        assert diffs == []

    def test_added_and_removed_ignore_change_types(self) -> None:
        options = DiffOptions(change_types=frozenset({ChangeType.FILE_PATH}))

        diffs = find_doc_tag_diffs([tag("old")], [tag("new")], options)

        assert kinds(diffs) == [("added", "code_contents"), ("removed", "code_contents")]


def test_summarize_diffs_counts_categories() -> None:
    old = [tag("a", "a.js", content="1"), tag("r", "r.js")]
    new = [tag("a", "moved/a.js", content="2"), tag("n", "n.js")]

    summary = summarize_diffs(find_doc_tag_diffs(old, new))

    assert summary == {
        "added": 1,
        "removed": 1,
        "changed/file_path": 1,
        "changed/code_contents": 1,
    }


def test_tag_differ_tool_wraps_results() -> None:
    result = TagDiffer().run(
        TagDiffInput(old_tags=[tag(content="foo")], new_tags=[tag(content="bar")])
    )

    assert result.status == ToolStatus.SUCCESS
    assert result.output is not None
    assert kinds(result.output.diffs) == [("changed", "code_contents")]
    assert result.output.summary == {"changed/code_contents": 1}
    assert result.metrics is not None
    assert result.metrics.additional_metrics == {"old_tags": 1, "new_tags": 1}
