"""
Reporting package.

Turns doc tag diffs into inline annotations and a grouped pull request
summary comment.
"""

from .annotations import annotate_pr, format_annotation, get_warning_message
from .comment import COMMENT_MARKER, build_comment_body

__all__ = [
    "COMMENT_MARKER",
    "annotate_pr",
    "build_comment_body",
    "format_annotation",
    "get_warning_message",
]
