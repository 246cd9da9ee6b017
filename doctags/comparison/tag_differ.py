"""
Doc Tag Differ Tool

This tool compares the doc tags of two snapshots of the same tree and reports
which tags were added, removed, or changed. Tags carry no stable id across
revisions, so they are paired by name and file before comparison:

1. Same name and identical path, settled for every tag first.
2. Otherwise the first unclaimed same-named tag in a file with the same
   extension. This tolerates renamed files while keeping e.g. the Java and
   Kotlin copies of one snippet apart.

Each old tag pairs with at most one new tag. Old tags that no new tag claimed
are reported as removed, exactly once.
"""

from __future__ import annotations

import difflib
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from doctags.base import BaseTool, ToolResult
from doctags.models import ChangeType, DiffOptions, DiffType, DocTag, DocTagDiff


def _content_lines(content: str) -> list[str]:
    # same line boundaries as the scanner; empty content has no lines
    return content.split("\n") if content else []


def create_content_patch(old_tag: DocTag, new_tag: DocTag) -> str:
    """Unified diff between the contents of two tags, headed by their paths."""
    patch_lines = difflib.unified_diff(
        _content_lines(old_tag.content),
        _content_lines(new_tag.content),
        fromfile=old_tag.file_path,
        tofile=new_tag.file_path,
        lineterm="",
    )
    return "\n".join(patch_lines) + "\n"


def create_doc_tag_diffs(old_tag: DocTag, new_tag: DocTag) -> list[DocTagDiff]:
    """
    Compare a matched pair of tags.

    The path, line and content checks are independent, so one pair yields
    between zero and three diffs.
    """
    diffs: list[DocTagDiff] = []

    def changed(change_type: ChangeType, **kwargs: Any) -> DocTagDiff:
        return DocTagDiff(
            file_path=new_tag.file_path,
            tag_name=new_tag.tag_name,
            type=DiffType.CHANGED,
            change_type=change_type,
            start_line=new_tag.start_line,
            end_line=new_tag.end_line,
            previous_file_path=old_tag.file_path,
            **kwargs,
        )

    if old_tag.file_path != new_tag.file_path:
        diffs.append(changed(ChangeType.FILE_PATH))

    if old_tag.start_line != new_tag.start_line or old_tag.end_line != new_tag.end_line:
        diffs.append(changed(ChangeType.LINE_NUMBER))

    if old_tag.content != new_tag.content:
        diffs.append(
            changed(
                ChangeType.CODE_CONTENTS,
                content_diff=create_content_patch(old_tag, new_tag),
            )
        )

    return diffs


def match_doc_tags(
    old_tags: list[DocTag], new_tags: list[DocTag]
) -> tuple[list[tuple[DocTag, DocTag | None]], list[DocTag]]:
    """
    Pair every new tag with at most one old tag.

    Exact name+path pairs are settled for all new tags before any new tag
    falls back to a name+extension match, so the result does not depend on
    the order of `new_tags`.

    Returns:
        (pairs, unmatched_old): `pairs` holds (new_tag, old_tag or None) in
        the order of `new_tags`; `unmatched_old` keeps the order of `old_tags`
    """
    claimed: set[int] = set()
    partners: list[int | None] = [None] * len(new_tags)

    passes: list[Callable[[DocTag, DocTag], bool]] = [
        lambda old, new: old.file_path == new.file_path,
        lambda old, new: old.extension == new.extension,
    ]
    for same_place in passes:
        for position, new_tag in enumerate(new_tags):
            if partners[position] is not None:
                continue
            match_index = _find_unclaimed(
                old_tags,
                claimed,
                lambda tag: tag.tag_name == new_tag.tag_name and same_place(tag, new_tag),
            )
            if match_index is not None:
                claimed.add(match_index)
                partners[position] = match_index

    pairs: list[tuple[DocTag, DocTag | None]] = [
        (new_tag, None if index is None else old_tags[index])
        for new_tag, index in zip(new_tags, partners)
    ]
    unmatched_old = [tag for index, tag in enumerate(old_tags) if index not in claimed]
    return pairs, unmatched_old


def _find_unclaimed(
    tags: list[DocTag], claimed: set[int], predicate: Callable[[DocTag], bool]
) -> int | None:
    for index, tag in enumerate(tags):
        if index not in claimed and predicate(tag):
            return index
    return None


def find_doc_tag_diffs(
    old_tags: list[DocTag],
    new_tags: list[DocTag],
    options: DiffOptions | None = None,
) -> list[DocTagDiff]:
    """
    Diff the tags of an old (base) snapshot against a new (head) snapshot.

    Args:
        old_tags: Tags extracted at the base revision
        new_tags: Tags extracted at the head revision
        options: Categories to report; matching runs in full either way

    Returns:
        Added diffs, then removed, then changed, each in input order
    """
    options = options or DiffOptions()
    pairs, unmatched_old = match_doc_tags(old_tags, new_tags)

    added: list[DocTagDiff] = []
    changed: list[DocTagDiff] = []
    for new_tag, old_tag in pairs:
        if old_tag is None:
            added.append(
                DocTagDiff(
                    file_path=new_tag.file_path,
                    tag_name=new_tag.tag_name,
                    type=DiffType.ADDED,
                    start_line=new_tag.start_line,
                    end_line=new_tag.end_line,
                )
            )
        else:
            changed.extend(create_doc_tag_diffs(old_tag, new_tag))

    removed = [
        DocTagDiff(
            file_path=old_tag.file_path,
            tag_name=old_tag.tag_name,
            type=DiffType.REMOVED,
            start_line=old_tag.start_line,
            end_line=old_tag.end_line,
        )
        for old_tag in unmatched_old
    ]

    diffs = [
        diff
        for diff in [*added, *removed, *changed]
        if options.reports(diff.type, diff.change_type)
    ]
    logger.debug(
        f"Compared {len(old_tags)} old and {len(new_tags)} new doc tags: "
        f"{len(diffs)} reported diffs"
    )
    return diffs


def summarize_diffs(diffs: list[DocTagDiff]) -> dict[str, int]:
    """Count diffs per category, e.g. {"added": 1, "changed/file_path": 2}."""
    counts: Counter[str] = Counter()
    for diff in diffs:
        if diff.type is DiffType.CHANGED:
            counts[f"{diff.type.value}/{diff.change_type.value}"] += 1
        else:
            counts[diff.type.value] += 1
    return dict(counts)


@dataclass
class TagDiffInput:
    """Input data for doc tag comparison."""

    old_tags: list[DocTag]
    new_tags: list[DocTag]
    options: DiffOptions = field(default_factory=DiffOptions)


@dataclass
class TagDiffOutput:
    """Doc tag comparison results."""

    diffs: list[DocTagDiff]
    summary: dict[str, int]


class TagDiffer(BaseTool[TagDiffInput, TagDiffOutput]):
    """Tool wrapper around `find_doc_tag_diffs` for use by the pipeline."""

    def __init__(self) -> None:
        super().__init__("TagDiffer")

    def execute(self, input_data: TagDiffInput) -> ToolResult[TagDiffOutput]:
        diffs = find_doc_tag_diffs(
            input_data.old_tags, input_data.new_tags, input_data.options
        )
        return ToolResult.success(
            output=TagDiffOutput(diffs=diffs, summary=summarize_diffs(diffs)),
            metrics=self._create_metrics(
                additional_metrics={
                    "old_tags": len(input_data.old_tags),
                    "new_tags": len(input_data.new_tags),
                }
            ),
        )
