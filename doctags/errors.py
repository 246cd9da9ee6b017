"""
Error types raised by the doc tag tools.

Every error aborts the run it occurs in. Partial tag data is never returned,
since a comparison against an incomplete snapshot reports wrong drift.
"""

from __future__ import annotations


class DocTagError(Exception):
    """Base class for all doc tag errors."""


class MalformedTagError(DocTagError):
    """A START marker was never closed before the end of its file."""

    def __init__(self, file_path: str, start_line: int, tag_name: str) -> None:
        self.file_path = file_path
        self.start_line = start_line
        self.tag_name = tag_name
        super().__init__(
            f"Missing end tag for start tag '{tag_name}' in file {file_path} "
            f"at line {start_line}"
        )


class ConfigurationError(DocTagError):
    """The run cannot start: no base ref, no extensions, or an unknown option."""


class RevisionSwitchError(DocTagError):
    """Switching the working tree to another revision failed."""

    def __init__(self, ref: str, reason: str) -> None:
        self.ref = ref
        self.reason = reason
        super().__init__(f"Failed to switch to revision '{ref}': {reason}")


class GitHubAPIError(DocTagError):
    """The GitHub API rejected a request or kept failing after retries."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
