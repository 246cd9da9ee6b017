import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from doctags.config import resolve_config
from doctags.git import GitHubPoster
from doctags.pipeline import DocTagDiffPipeline


def _load_env() -> None:
    """Load environment variables from .env if present."""
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(dotenv_path=env_path)


def _configure_logging(level: str) -> None:
    """Send logs to stderr so stdout only carries annotations and the report."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report doc tag changes between a base ref and the current tree"
    )
    parser.add_argument(
        "--base-ref",
        help="Ref to compare against (default: the pull request's base ref)",
    )
    parser.add_argument(
        "--extensions",
        help="Comma separated file extensions to scan, e.g. 'js,ts,py'",
    )
    parser.add_argument(
        "--diff-types",
        help="Comma separated diff types to report: added, removed, changed",
    )
    parser.add_argument(
        "--change-types",
        help="Comma separated change types to report: file_path, line_number, code_contents",
    )
    parser.add_argument(
        "--workspace", help="Path to the git working tree (default: GITHUB_WORKSPACE or cwd)"
    )
    parser.add_argument(
        "--no-comment", action="store_true", help="Do not post or update the PR comment"
    )
    parser.add_argument(
        "--no-annotate", action="store_true", help="Do not emit inline annotations"
    )
    parser.add_argument(
        "--no-restore",
        action="store_true",
        help="Stay on the base ref instead of returning to the starting revision",
    )
    parser.add_argument("--output", help="Also write the JSON report to this path")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the doc tag diff check.

    Args:
        argv: Optional list of CLI arguments (for testing). If None, sys.argv is used.

    Returns:
        Process exit code: 0 on success, 1 on any failure.
    """
    _load_env()

    args = _build_parser().parse_args(argv)
    _configure_logging(args.log_level)

    config_result = resolve_config(
        {
            "base-ref": args.base_ref,
            "extensions": args.extensions,
            "diff-types": args.diff_types,
            "change-types": args.change_types,
            "workspace": args.workspace,
            "comment": "false" if args.no_comment else None,
            "annotate": "false" if args.no_annotate else None,
        }
    )
    if not config_result.ok or config_result.output is None:
        logger.error(f"Configuration error: {config_result.error_message}")
        return 1
    config = config_result.output

    logger.info(
        f"Doc tag diff starting (workspace={config.workspace}, base={config.base_ref})"
    )

    poster = None
    if config.in_pull_request and config.comment and config.github_token:
        poster = GitHubPoster(token=config.github_token)

    pipeline = DocTagDiffPipeline(poster=poster, restore_ref=not args.no_restore)
    result = pipeline.run(config)
    if not result.ok or result.output is None:
        error_code = result.error_code.value if result.error_code else "UNKNOWN"
        logger.error(f"Doc tag diff failed [{error_code}]: {result.error_message}")
        return 1

    report = result.output
    if not config.in_pull_request:
        print(report.to_json())

    if args.output:
        Path(args.output).write_text(report.to_json(), encoding="utf-8")
        logger.info(f"Report written to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
