"""Tests for run configuration resolution."""

from __future__ import annotations

import json
from pathlib import Path

from doctags.base import ToolErrorCode, ToolStatus
from doctags.config import DEFAULT_EXTENSIONS, resolve_config, split_extensions
from doctags.models import ChangeType, DiffType


def event_file(tmp_path: Path, payload: dict) -> str:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def test_base_ref_from_override(tmp_path: Path) -> None:
    result = resolve_config({"base-ref": "main", "workspace": str(tmp_path)}, environ={})

    assert result.status == ToolStatus.SUCCESS
    config = result.output
    assert config is not None
    assert config.base_ref == "main"
    assert config.workspace == tmp_path
    assert config.extensions == list(DEFAULT_EXTENSIONS)
    assert config.comment is True
    assert config.annotate is True
    assert config.in_pull_request is False


def test_action_inputs_from_environment() -> None:
    environ = {
        "INPUT_BASE-REF": "develop",
        "INPUT_EXTENSIONS": "js, .ts",
        "INPUT_DIFF-TYPES": "added,removed",
        "INPUT_CHANGE-TYPES": "code_contents",
        "INPUT_COMMENT": "false",
        "INPUT_GITHUB-TOKEN": "secret-token",
        "GITHUB_WORKSPACE": "/work",
        "GITHUB_REPOSITORY": "octo/docs",
    }

    config = resolve_config(environ=environ).output

    assert config is not None
    assert config.base_ref == "develop"
    assert config.extensions == ["js", "ts"]
    assert config.options.diff_types == frozenset({DiffType.ADDED, DiffType.REMOVED})
    assert config.options.change_types == frozenset({ChangeType.CODE_CONTENTS})
    assert config.comment is False
    assert config.github_token == "secret-token"
    assert config.workspace == Path("/work")
    assert config.repository == "octo/docs"
    assert "secret-token" not in repr(config)


def test_overrides_beat_environment() -> None:
    config = resolve_config(
        {"base-ref": "release", "extensions": None},
        environ={"INPUT_BASE-REF": "develop", "INPUT_EXTENSIONS": "py"},
    ).output

    assert config is not None
    assert config.base_ref == "release"
    assert config.extensions == ["py"]


def test_pull_request_context(tmp_path: Path) -> None:
    environ = {
        "GITHUB_EVENT_PATH": event_file(
            tmp_path, {"pull_request": {"number": 17, "base": {"ref": "main"}}}
        ),
        "GITHUB_TOKEN": "env-token",
    }

    config = resolve_config(environ=environ).output

    assert config is not None
    assert config.base_ref == "main"
    assert config.pr_number == 17
    assert config.in_pull_request is True
    assert config.github_token == "env-token"


def test_missing_base_ref_is_an_error_result(tmp_path: Path) -> None:
    environ = {"GITHUB_EVENT_PATH": event_file(tmp_path, {"push": {}})}

    result = resolve_config(environ=environ)

    assert result.status == ToolStatus.ERROR
    assert result.error_code == ToolErrorCode.INVALID_INPUT
    assert "base-ref should be provided" in (result.error_message or "")


def test_empty_extensions_are_an_error_result() -> None:
    result = resolve_config({"base-ref": "main", "extensions": " , . "}, environ={})

    assert result.error_code == ToolErrorCode.INVALID_INPUT


def test_unknown_diff_type_is_an_error_result() -> None:
    result = resolve_config({"base-ref": "main", "diff-types": "moved"}, environ={})

    assert result.error_code == ToolErrorCode.INVALID_INPUT
    assert "moved" in (result.error_message or "")


def test_invalid_boolean_is_an_error_result() -> None:
    result = resolve_config(
        {"base-ref": "main"}, environ={"INPUT_ANNOTATE": "sometimes"}
    )

    assert result.error_code == ToolErrorCode.INVALID_INPUT


def test_corrupt_event_payload_is_an_error_result(tmp_path: Path) -> None:
    path = tmp_path / "event.json"
    path.write_text("{not json", encoding="utf-8")

    result = resolve_config(environ={"GITHUB_EVENT_PATH": str(path)})

    assert result.error_code == ToolErrorCode.INVALID_INPUT


def test_split_extensions() -> None:
    assert split_extensions(" js,.ts ,, py ") == ["js", "ts", "py"]
