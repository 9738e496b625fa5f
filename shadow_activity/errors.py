"""
Errors — Exception taxonomy for the shadow activity mirror.

Fatal errors abort the whole run immediately. Nothing is retried: a re-run
reads the ledger back from the target repository and resumes where the
failed run stopped.

## Usage

    from shadow_activity.errors import ShadowActivityError, EmptyHistory

    try:
        report = orchestrator.run()
    except ShadowActivityError as e:
        print(f"Mirror failed: {e}")
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class ShadowActivityError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigInvalid(ShadowActivityError):
    """Raised when configuration is missing or malformed."""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.fields = fields or []
        super().__init__(message, details={"fields": self.fields})


class GitCommandError(ShadowActivityError):
    """Raised when a git subprocess fails or times out."""

    def __init__(self, args: Sequence[str], returncode: Optional[int], stderr: str, cwd: str = ""):
        self.argv = list(args)
        self.returncode = returncode
        self.stderr = stderr.strip()
        self.cwd = cwd
        message = f"Git command failed: git {' '.join(self.argv)}"
        if cwd:
            message += f" on path {cwd}"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(
            message,
            details={"args": self.argv, "returncode": returncode, "stderr": self.stderr},
        )


class HistoryUnavailable(ShadowActivityError):
    """Source history could not be read (bad repository or branch)."""


class DiffUnavailable(ShadowActivityError):
    """A source commit's statistics could not be retrieved."""


class CommitFailed(ShadowActivityError):
    """Writing the artifact or committing to the target failed."""


class EmptyHistory(ShadowActivityError):
    """
    No work to do. Not an error in the run itself, but the caller
    should stop and exit non-zero. Subclasses name the report status.
    """

    status: str


class NoCommits(EmptyHistory):
    """The source branch has no (non-merge) commits."""

    status = "no_commits"


class NoMatchingAuthors(EmptyHistory):
    """No source commit was authored by an allow-listed identity."""

    status = "no_matching_authors"
