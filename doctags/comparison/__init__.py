"""
Comparison tools package.

This package pairs doc tags across two snapshots and classifies the
differences between them.
"""

from .tag_differ import (
    TagDiffer,
    TagDiffInput,
    TagDiffOutput,
    find_doc_tag_diffs,
    match_doc_tags,
    summarize_diffs,
)

__all__ = [
    "TagDiffer",
    "TagDiffInput",
    "TagDiffOutput",
    "find_doc_tag_diffs",
    "match_doc_tags",
    "summarize_diffs",
]
