"""Shared fixtures: throwaway git repositories with a base and a feature branch."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from git import Repo


def commit_files(repo: Repo, files: dict[str, str | None], message: str) -> None:
    """Write `files` relative to the work tree and commit them; None deletes."""
    work_tree = Path(repo.working_tree_dir or "")
    for name, text in files.items():
        path = work_tree / name
        if text is None:
            path.unlink()
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    repo.git.add("--all")
    repo.git.commit("-m", message)


def init_repo(path: Path) -> Repo:
    repo = Repo.init(path)
    with repo.config_writer() as cw:
        cw.set_value("user", "name", "Doc Tag Tester")
        cw.set_value("user", "email", "tester@example.com")
    return repo


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., tuple[Repo, str]]:
    """
    Build a repository with a base branch and a checked out `feature` branch.

    Returns a factory taking the base files and the feature files; it returns
    the repo and the name of the base branch.
    """

    def _make(
        base_files: dict[str, str],
        feature_files: dict[str, str | None],
        name: str = "repo",
    ) -> tuple[Repo, str]:
        repo = init_repo(tmp_path / name)
        commit_files(repo, base_files, "base")
        base_branch = repo.active_branch.name
        repo.git.checkout("-b", "feature")
        if feature_files:
            commit_files(repo, feature_files, "feature")
        return repo, base_branch

    return _make
