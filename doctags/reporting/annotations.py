"""
Inline annotations for doc tag diffs.

Each diff becomes one GitHub Actions `::warning` workflow command, which the
runner turns into an annotation on the pull request's changed files.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from loguru import logger

from doctags.models import ChangeType, DiffType, DocTagDiff


def get_warning_message(diff: DocTagDiff, file_path: str | None = None) -> str:
    """
    Human-readable message for one diff.

    Args:
        diff: The diff to describe
        file_path: Path to show instead of `diff.file_path`

    Raises:
        ValueError: Unknown (type, change_type) combination
    """
    path = file_path or diff.file_path

    # change_type is always code_contents for added and removed tags
    if diff.type is DiffType.ADDED and diff.change_type is ChangeType.CODE_CONTENTS:
        return f"Added doc tag {diff.tag_name}"

    if diff.type is DiffType.REMOVED and diff.change_type is ChangeType.CODE_CONTENTS:
        return f"Removed doc tag {diff.tag_name}"

    if diff.type is DiffType.CHANGED:
        match diff.change_type:
            case ChangeType.CODE_CONTENTS:
                return f"Changed code contents of doc tag {diff.tag_name}"
            case ChangeType.FILE_PATH:
                return f"File renamed containing doc tag {diff.tag_name} to {path}"
            case ChangeType.LINE_NUMBER:
                return f"Line number changed for doc tag {diff.tag_name} in file {path}"

    raise ValueError(f"Unknown type {diff.type} and changeType {diff.change_type}")


def relative_path(file_path: str, workspace: str | Path | None) -> str:
    """Path relative to the workspace when it lies inside it, else unchanged."""
    if workspace is None:
        return file_path
    try:
        return Path(file_path).resolve().relative_to(Path(workspace).resolve()).as_posix()
    except ValueError:
        return file_path


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_annotation(diff: DocTagDiff, workspace: str | Path | None = None) -> str:
    """Render a diff as a `::warning` workflow command."""
    file_path = relative_path(diff.file_path, workspace)

    properties = [("file", file_path)]
    if diff.start_line is not None:
        properties.append(("line", str(diff.start_line)))
        if diff.end_line is not None:
            properties.append(("endLine", str(diff.end_line)))
    properties.append(("title", diff.tag_name))

    rendered = ",".join(f"{key}={_escape_property(value)}" for key, value in properties)
    message = get_warning_message(diff, file_path)
    return f"::warning {rendered}::{_escape_data(message)}"


def annotate_pr(
    diffs: list[DocTagDiff],
    workspace: str | Path | None = None,
    stream: TextIO | None = None,
) -> int:
    """Write one annotation per diff to `stream` (stdout by default)."""
    stream = stream or sys.stdout
    for diff in diffs:
        print(format_annotation(diff, workspace), file=stream)
    logger.info(f"Emitted {len(diffs)} doc tag annotations")
    return len(diffs)
