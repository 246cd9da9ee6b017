"""Pull request summary comment for doc tag diffs."""

from __future__ import annotations

from pathlib import Path

from doctags.models import ChangeType, DiffType, DocTagDiff
from doctags.reporting.annotations import get_warning_message, relative_path

COMMENT_MARKER = "<!-- doc-tag-diff -->"

_SECTION_TITLES = {
    DiffType.ADDED: "Added doc tags",
    DiffType.REMOVED: "Removed doc tags",
    DiffType.CHANGED: "Changed doc tags",
}


def _location(diff: DocTagDiff, file_path: str) -> str:
    if diff.start_line is None:
        return f"`{file_path}`"
    return f"`{file_path}` (lines {diff.start_line}-{diff.end_line})"


def _bullet(diff: DocTagDiff, workspace: str | Path | None) -> str:
    file_path = relative_path(diff.file_path, workspace)
    if diff.type is not DiffType.CHANGED:
        return f"- `{diff.tag_name}` in {_location(diff, file_path)}"

    lines = [f"- {get_warning_message(diff, file_path)}: {_location(diff, file_path)}"]
    if diff.change_type is ChangeType.CODE_CONTENTS and diff.content_diff:
        lines.extend(
            [
                "  <details><summary>Diff</summary>",
                "",
                "  ```diff",
                *(f"  {line}" for line in diff.content_diff.rstrip("\n").split("\n")),
                "  ```",
                "",
                "  </details>",
            ]
        )
    return "\n".join(lines)


def build_comment_body(
    diffs: list[DocTagDiff],
    workspace: str | Path | None = None,
    marker: str = COMMENT_MARKER,
) -> str:
    """
    Build the markdown body of the summary comment.

    The body starts with `marker` so a later run can find and update the
    same comment instead of posting a new one.
    """
    grouped: dict[DiffType, list[DocTagDiff]] = {diff_type: [] for diff_type in DiffType}
    for diff in diffs:
        grouped[diff.type].append(diff)

    lines = [marker, "## Doc tag changes", ""]
    if not diffs:
        lines.append("No doc tag changes detected.")
        return "\n".join(lines) + "\n"

    lines.append(
        "This pull request touches code regions referenced by documentation. "
        "Please check that the docs are still accurate."
    )
    lines.append("")
    lines.append(
        " | ".join(
            f"**{diff_type.value.capitalize()}:** {len(grouped[diff_type])}"
            for diff_type in DiffType
        )
    )

    for diff_type in DiffType:
        if not grouped[diff_type]:
            continue
        lines.extend(["", f"### {_SECTION_TITLES[diff_type]}", ""])
        lines.extend(_bullet(diff, workspace) for diff in grouped[diff_type])

    return "\n".join(lines) + "\n"
