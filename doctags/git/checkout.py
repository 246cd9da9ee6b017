"""
Git Revision Switcher

This tool switches a working tree to another revision so the same directory
can be scanned twice: once at the pull request head and once at its base.
It mirrors what a CI job would run by hand:

    git fetch origin <ref>
    git checkout <ref>
    git pull
"""

from __future__ import annotations

from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from loguru import logger

from doctags.errors import RevisionSwitchError


class GitRevisionSwitcher:
    """
    Switches a Git working tree between revisions.

    Every Git failure is raised as RevisionSwitchError: scanning a tree that is
    only half switched would silently produce wrong diffs.
    """

    def __init__(self, repo_path: str | Path, remote_name: str = "origin") -> None:
        """
        Initialize the switcher.

        Args:
            repo_path: Path to the Git working tree
            remote_name: Remote to fetch the target ref from, when present

        Raises:
            RevisionSwitchError: The path is not a Git repository
        """
        self.repo_path = Path(repo_path).resolve()
        self.remote_name = remote_name

        try:
            self.repo = Repo(self.repo_path)
            logger.info(f"Git repository initialized: {self.repo_path}")
        except (InvalidGitRepositoryError, NoSuchPathError) as err:
            raise RevisionSwitchError(
                str(repo_path), f"Invalid Git repository: {self.repo_path}"
            ) from err

    def current_ref(self) -> str:
        """Return the active branch name, or the HEAD SHA when detached."""
        if self.repo.head.is_detached:
            return self.repo.head.commit.hexsha
        return self.repo.active_branch.name

    def _has_remote(self) -> bool:
        return any(remote.name == self.remote_name for remote in self.repo.remotes)

    def _tracks_remote(self) -> bool:
        if self.repo.head.is_detached:
            return False
        return self.repo.active_branch.tracking_branch() is not None

    def checkout(self, ref: str) -> None:
        """
        Fetch, check out and fast-forward `ref`.

        Fetching is skipped when the remote is missing and pulling is skipped
        when the checked-out ref does not track a remote branch.

        Raises:
            RevisionSwitchError: Any Git command failed
        """
        if not ref:
            raise RevisionSwitchError(ref, "No revision given")

        logger.info(f"Switching {self.repo_path} from {self.current_ref()} to {ref}")

        try:
            if self._has_remote():
                self.repo.git.fetch(self.remote_name, ref)
            else:
                logger.debug(f"No '{self.remote_name}' remote, skipping fetch")

            self.repo.git.checkout(ref)

            if self._tracks_remote():
                self.repo.git.pull()
        except GitCommandError as err:
            logger.error(f"Git command failed while switching to {ref}: {err}")
            raise RevisionSwitchError(ref, str(err).strip()) from err

        logger.info(f"Working tree now at {self.current_ref()}")

    def restore(self, ref: str) -> None:
        """
        Check out `ref` again without fetching or pulling.

        Used to return to the revision the run started on.

        Raises:
            RevisionSwitchError: The checkout failed
        """
        try:
            self.repo.git.checkout(ref)
        except GitCommandError as err:
            logger.error(f"Failed to restore {ref}: {err}")
            raise RevisionSwitchError(ref, str(err).strip()) from err
        logger.info(f"Restored working tree to {ref}")
