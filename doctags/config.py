"""
Run configuration.

Settings come from, in order of precedence:
1. Explicit overrides (CLI flags)
2. GitHub Actions inputs, exposed as INPUT_<NAME> environment variables
3. The pull request in the GitHub event payload (base ref, PR number)
4. Defaults

Problems are returned as an error ToolResult instead of being raised, so the
entry point decides how a bad configuration fails the run.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from doctags.base import ToolErrorCode, ToolResult
from doctags.errors import ConfigurationError
from doctags.models import DiffOptions

DEFAULT_EXTENSIONS: tuple[str, ...] = (
    "js",
    "jsx",
    "ts",
    "tsx",
    "py",
    "java",
    "kt",
    "kts",
    "go",
    "rb",
    "swift",
    "c",
    "cc",
    "cpp",
    "h",
    "hpp",
    "cs",
    "php",
    "rs",
    "dart",
    "scala",
    "sh",
)

_TRUE_VALUES = {"true", "True", "TRUE", "1", "yes"}
_FALSE_VALUES = {"false", "False", "FALSE", "0", "no"}


@dataclass
class ActionConfig:
    """Resolved settings for one doc tag diff run."""

    workspace: Path
    base_ref: str
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    options: DiffOptions = field(default_factory=DiffOptions)
    github_token: str | None = field(default=None, repr=False)
    repository: str | None = None  # "owner/repo"
    pr_number: int | None = None
    comment: bool = True
    annotate: bool = True

    @property
    def in_pull_request(self) -> bool:
        return self.pr_number is not None


def get_input(name: str, environ: Mapping[str, str]) -> str:
    """Read an action input the way the Actions runner exposes it."""
    return environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()


def parse_bool(value: str, name: str) -> bool:
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Input '{name}' must be true or false, got {value!r}")


def split_extensions(raw: str) -> list[str]:
    """Split "js, .ts,py" into ["js", "ts", "py"]."""
    return [ext.strip().lstrip(".") for ext in raw.split(",") if ext.strip().lstrip(".")]


def load_pull_request(environ: Mapping[str, str]) -> dict[str, Any] | None:
    """Return the pull_request object of the current GitHub event, if any."""
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_path or not Path(event_path).is_file():
        return None

    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as err:
        raise ConfigurationError(f"Unreadable event payload {event_path}: {err}") from err

    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    return pull_request if isinstance(pull_request, dict) else None


def _build_config(
    overrides: Mapping[str, str | None], environ: Mapping[str, str]
) -> ActionConfig:
    def value(name: str) -> str:
        override = overrides.get(name)
        if override is not None:
            return override.strip()
        return get_input(name, environ)

    pull_request = load_pull_request(environ)

    base_ref = value("base-ref")
    if not base_ref and pull_request:
        base_ref = (pull_request.get("base") or {}).get("ref") or ""
    if not base_ref:
        raise ConfigurationError(
            "Action should be run in pull request context or base-ref should be provided"
        )

    raw_extensions = value("extensions")
    extensions = split_extensions(raw_extensions) if raw_extensions else list(DEFAULT_EXTENSIONS)
    if not extensions:
        raise ConfigurationError("At least one file extension is required")

    options = DiffOptions.from_strings(value("diff-types"), value("change-types"))

    workspace = Path(
        value("workspace") or environ.get("GITHUB_WORKSPACE") or os.getcwd()
    )

    pr_number = pull_request.get("number") if pull_request else None

    return ActionConfig(
        workspace=workspace,
        base_ref=base_ref,
        extensions=extensions,
        options=options,
        github_token=value("github-token") or environ.get("GITHUB_TOKEN") or None,
        repository=environ.get("GITHUB_REPOSITORY") or None,
        pr_number=int(pr_number) if pr_number is not None else None,
        comment=parse_bool(value("comment") or "true", "comment"),
        annotate=parse_bool(value("annotate") or "true", "annotate"),
    )


def resolve_config(
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> ToolResult[ActionConfig]:
    """
    Resolve the run configuration.

    Args:
        overrides: Values keyed by input name ("base-ref", "extensions", ...);
            None entries fall through to the environment
        environ: Environment to read; defaults to os.environ

    Returns:
        Success with the ActionConfig, or an INVALID_INPUT error result
    """
    environ = os.environ if environ is None else environ
    try:
        config = _build_config(overrides or {}, environ)
    except ConfigurationError as err:
        logger.error(f"Invalid configuration: {err}")
        return ToolResult.error(
            error_code=ToolErrorCode.INVALID_INPUT, error_message=str(err)
        )

    logger.debug(f"Resolved configuration: {config}")
    return ToolResult.success(output=config)
