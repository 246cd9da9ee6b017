"""
Git tools package.

This package provides tools for:
- Switching a working tree between revisions
- Posting the doc tag summary comment to a GitHub pull request
"""

from .checkout import GitRevisionSwitcher
from .provider_github import GitHubPoster, parse_repository

__all__ = [
    "GitHubPoster",
    "GitRevisionSwitcher",
    "parse_repository",
]
