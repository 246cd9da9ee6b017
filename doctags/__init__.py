"""
Doc tag tools.

Extracts named code regions (doc tags) marked with `[START name]` and
`[END name]` comments from two revisions of a repository and reports how they
changed, so documentation that quotes those regions can be kept in sync.
"""

from .base import BaseTool, ToolErrorCode, ToolMetrics, ToolResult, ToolStatus
from .comparison import TagDiffer, find_doc_tag_diffs
from .errors import (
    ConfigurationError,
    DocTagError,
    GitHubAPIError,
    MalformedTagError,
    RevisionSwitchError,
)
from .extraction import TagExtractor, extract_doc_tags
from .models import ChangeType, DiffOptions, DiffType, DocTag, DocTagDiff

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Base classes and types
    "BaseTool",
    "ToolResult",
    "ToolMetrics",
    "ToolStatus",
    "ToolErrorCode",
    # Data model
    "DocTag",
    "DocTagDiff",
    "DiffType",
    "ChangeType",
    "DiffOptions",
    # Errors
    "DocTagError",
    "MalformedTagError",
    "ConfigurationError",
    "RevisionSwitchError",
    "GitHubAPIError",
    # Core
    "extract_doc_tags",
    "find_doc_tag_diffs",
    "TagExtractor",
    "TagDiffer",
]
