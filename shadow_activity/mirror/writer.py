"""
Mirror Writer — Persist the buffer and commit it to the target repository.

Author and committer are both the configured public identity, and both
dates are the source commit's author date, so the contribution graph
follows the original timeline.
"""

from __future__ import annotations

import logging

from ..errors import CommitFailed, GitCommandError
from .buffer import ShadowBuffer
from .git import Repository

logger = logging.getLogger(__name__)

DRY_RUN_PREFIX = "[dry-run]"


class MirrorWriter:
    """Writes shadow commits into the target repository."""

    def __init__(
        self,
        repo: Repository,
        artifact_name: str,
        author_name: str,
        author_email: str,
    ):
        self.repo = repo
        self.artifact_name = artifact_name
        self.author_name = author_name
        self.author_email = author_email

    def preview(self, message: str) -> str:
        """Describe a shadow commit without touching the repository."""
        description = f"{DRY_RUN_PREFIX} {message}"
        logger.info(f"[mirror] {description}")
        return description

    def commit(self, buffer: ShadowBuffer, message: str, timestamp: str) -> str:
        """
        Overwrite the artifact with *buffer*, stage it, and commit.

        Returns:
            Short id of the new target commit

        Raises:
            CommitFailed: Writing, staging or committing failed
        """
        try:
            self.repo.write_file(self.artifact_name, buffer.serialize())
            self.repo.stage(self.artifact_name)
            commit_id = self.repo.commit(
                message,
                self.artifact_name,
                name=self.author_name,
                email=self.author_email,
                date=timestamp,
            )
        except GitCommandError as e:
            raise CommitFailed(
                f"Failed to create shadow commit '{message}': {e.message}",
                details=e.details,
            ) from e
        except OSError as e:
            raise CommitFailed(
                f"Failed to write {self.artifact_name}: {e}",
                details={"artifact": self.artifact_name},
            ) from e

        logger.info(f"[mirror] Created shadow commit {commit_id}: {message}")
        return commit_id
