"""
Doc tag diff pipeline.

Runs the whole check for one pull request:

1. Extract doc tags from the working tree as checked out (the PR head)
2. Switch the working tree to the base ref
3. Extract doc tags again (the base)
4. Diff base against head
5. Report: annotations and an upserted PR comment
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from doctags.base import BaseTool, ToolErrorCode, ToolResult
from doctags.comparison import TagDiffer, TagDiffInput
from doctags.config import ActionConfig
from doctags.extraction import ExtractionInput, TagExtractor
from doctags.git import GitHubPoster, GitRevisionSwitcher, parse_repository
from doctags.models import DocTag, DocTagDiff
from doctags.reporting import COMMENT_MARKER, annotate_pr, build_comment_body


@dataclass
class DocTagReport:
    """Outcome of one pipeline run."""

    head_ref: str
    base_ref: str
    head_tag_count: int
    base_tag_count: int
    diffs: list[DocTagDiff] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)
    comment_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "head_ref": self.head_ref,
            "base_ref": self.base_ref,
            "head_tag_count": self.head_tag_count,
            "base_tag_count": self.base_tag_count,
            "summary": self.summary,
            "diffs": [diff.to_dict() for diff in self.diffs],
            "comment_url": self.comment_url,
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


class DocTagDiffPipeline(BaseTool[ActionConfig, DocTagReport]):
    """
    End-to-end doc tag drift check.

    Collaborators are passed in rather than built from globals: the GitHub
    poster is optional and only used when the run is in a PR context.
    """

    def __init__(
        self,
        poster: GitHubPoster | None = None,
        switcher_factory: Callable[[Path], GitRevisionSwitcher] = GitRevisionSwitcher,
        restore_ref: bool = True,
    ) -> None:
        super().__init__("DocTagDiffPipeline")
        self.poster = poster
        self.switcher_factory = switcher_factory
        self.restore_ref = restore_ref
        self.extractor = TagExtractor()
        self.differ = TagDiffer()

    def _extract(self, config: ActionConfig) -> ToolResult[list[DocTag]]:
        result = self.extractor.run(
            ExtractionInput(directory=str(config.workspace), extensions=config.extensions)
        )
        if not result.ok or result.output is None:
            return ToolResult.error(
                error_code=result.error_code or ToolErrorCode.PROCESSING_ERROR,
                error_message=result.error_message or "Doc tag extraction failed",
            )
        return ToolResult.success(output=result.output.doc_tags)

    def execute(self, input_data: ActionConfig) -> ToolResult[DocTagReport]:
        config = input_data
        switcher = self.switcher_factory(config.workspace)
        head_ref = switcher.current_ref()

        head_result = self._extract(config)
        if not head_result.ok or head_result.output is None:
            return ToolResult.error(
                error_code=head_result.error_code or ToolErrorCode.PROCESSING_ERROR,
                error_message=f"Extraction at {head_ref} failed: {head_result.error_message}",
            )

        try:
            switcher.checkout(config.base_ref)
            base_result = self._extract(config)
        finally:
            if self.restore_ref:
                switcher.restore(head_ref)

        if not base_result.ok or base_result.output is None:
            return ToolResult.error(
                error_code=base_result.error_code or ToolErrorCode.PROCESSING_ERROR,
                error_message=(
                    f"Extraction at {config.base_ref} failed: {base_result.error_message}"
                ),
            )

        diff_result = self.differ.run(
            TagDiffInput(
                old_tags=base_result.output,
                new_tags=head_result.output,
                options=config.options,
            )
        )
        if not diff_result.ok or diff_result.output is None:
            return ToolResult.error(
                error_code=diff_result.error_code or ToolErrorCode.PROCESSING_ERROR,
                error_message=diff_result.error_message or "Doc tag diff failed",
            )

        report = DocTagReport(
            head_ref=head_ref,
            base_ref=config.base_ref,
            head_tag_count=len(head_result.output),
            base_tag_count=len(base_result.output),
            diffs=diff_result.output.diffs,
            summary=diff_result.output.summary,
        )
        logger.info(f"Doc tag diffs between {config.base_ref} and {head_ref}: {report.summary}")

        self._report(config, report)

        return ToolResult.success(
            output=report,
            metrics=self._create_metrics(
                additional_metrics={"diffs": len(report.diffs)}
            ),
        )

    def _report(self, config: ActionConfig, report: DocTagReport) -> None:
        if not config.in_pull_request:
            logger.info("Not running in a pull request, skipping annotations and comment")
            return

        if config.annotate:
            annotate_pr(report.diffs, config.workspace)

        if not config.comment:
            return
        if self.poster is None or not config.repository or config.pr_number is None:
            logger.warning("No GitHub token or repository available, skipping PR comment")
            return

        owner, repo = parse_repository(config.repository)
        body = build_comment_body(report.diffs, config.workspace, COMMENT_MARKER)
        comment = self.poster.upsert_comment(
            owner, repo, config.pr_number, body, COMMENT_MARKER
        )
        report.comment_url = comment.get("html_url")
