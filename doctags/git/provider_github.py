"""
GitHub provider utility for posting PR comments.

This module provides a small wrapper around the GitHub issues/comments API to
post, find and update the doc tag summary comment on a pull request. It
implements exponential backoff retry for transient failures and a parser for
the "owner/repo" repository identifier.

The poster is an explicit object: callers build it with a token and pass it
to whatever needs to talk to GitHub.
"""

from __future__ import annotations

import time
from typing import Any

import requests
from loguru import logger

from doctags.errors import GitHubAPIError


def parse_repository(repository: str) -> tuple[str, str]:
    """Split an "owner/repo" string such as GITHUB_REPOSITORY."""
    owner, sep, repo = repository.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        raise ValueError(f"Expected 'owner/repo', got: {repository!r}")
    return owner, repo


class GitHubPoster:
    """Poster for GitHub PR comments.

    Usage:
        poster = GitHubPoster(token=os.getenv("GITHUB_TOKEN"))
        poster.upsert_comment("owner", "repo", 123, body, marker)
    """

    max_attempts = 3
    per_page = 100

    def __init__(self, token: str, api_url: str = "https://api.github.com") -> None:
        if not token:
            raise ValueError("GitHub token is required")
        self.token = token
        self.api_url = api_url.rstrip("/")

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "doc-tag-diff",
        }

    def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        timeout: int = 10,
    ) -> Any:
        """Send a request and return the parsed JSON body.

        Retries transient errors with exponential backoff. Auth errors
        (401/403) are raised at once.

        Raises:
            GitHubAPIError: Auth failure or persistent failure
        """
        last_status: int | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.debug(f"{method} {url} (attempt {attempt})")
                resp = requests.request(
                    method,
                    url,
                    headers=self.headers,
                    json=payload,
                    params=params,
                    timeout=timeout,
                )
                if resp.ok:
                    try:
                        return resp.json()
                    except ValueError:
                        return {"raw_text": resp.text}

                last_status = resp.status_code
                if resp.status_code in (401, 403):
                    logger.error(f"Auth error on {method} {url}: {resp.status_code}")
                    raise GitHubAPIError(
                        f"Auth error on {method} {url}: {resp.status_code}",
                        status_code=resp.status_code,
                    )
                if resp.status_code < 500 and resp.status_code != 429:
                    raise GitHubAPIError(
                        f"GitHub rejected {method} {url}: {resp.status_code} {resp.text}",
                        status_code=resp.status_code,
                    )

                logger.warning(
                    f"Non-ok response on {method} {url} (attempt {attempt}): "
                    f"{resp.status_code} {resp.text}"
                )
            except requests.RequestException as exc:
                logger.warning(
                    f"RequestException on {method} {url} (attempt {attempt}): {exc}"
                )

            if attempt < self.max_attempts:
                time.sleep(2 ** (attempt - 1))

        raise GitHubAPIError(
            f"Failed {method} {url} after {self.max_attempts} attempts",
            status_code=last_status,
        )

    def _comments_url(self, owner: str, repo: str, pr_number: int) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/issues/{pr_number}/comments"

    def post_comment(self, owner: str, repo: str, pr_number: int, body: str) -> dict[str, Any]:
        """Post a new comment to the given PR and return the created comment."""
        data = self._request(
            "POST", self._comments_url(owner, repo, pr_number), payload={"body": body}
        )
        logger.info(f"Posted comment on {owner}/{repo}#{pr_number}")
        return data

    def update_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> dict[str, Any]:
        """Replace the body of an existing comment."""
        url = f"{self.api_url}/repos/{owner}/{repo}/issues/comments/{comment_id}"
        data = self._request("PATCH", url, payload={"body": body})
        logger.info(f"Updated comment {comment_id} on {owner}/{repo}")
        return data

    def list_comments(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        """Return every comment on the PR, following pagination."""
        url = self._comments_url(owner, repo, pr_number)
        comments: list[dict[str, Any]] = []
        page = 1

        while True:
            items = self._request(
                "GET", url, params={"page": page, "per_page": self.per_page}
            )
            if not items:
                break
            comments.extend(items)
            if len(items) < self.per_page:
                break
            page += 1

        return comments

    def find_comment(
        self, owner: str, repo: str, pr_number: int, marker: str
    ) -> dict[str, Any] | None:
        """Return the first comment whose body contains `marker`."""
        for comment in self.list_comments(owner, repo, pr_number):
            if marker in (comment.get("body") or ""):
                return comment
        return None

    def upsert_comment(
        self, owner: str, repo: str, pr_number: int, body: str, marker: str
    ) -> dict[str, Any]:
        """Update the comment carrying `marker`, or post a new one."""
        existing = self.find_comment(owner, repo, pr_number, marker)
        if existing:
            return self.update_comment(owner, repo, existing["id"], body)
        return self.post_comment(owner, repo, pr_number, body)
