"""
History Reader — Qualifying commits of the source branch.

Traverses the linear, non-merge ancestry of the branch oldest-first, then
keeps only commits whose author email is on the allow-list. Matching is
exact: no case folding, no trimming, no wildcards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from ..errors import GitCommandError, HistoryUnavailable, NoCommits, NoMatchingAuthors
from .git import Repository
from .models import SourceCommit

logger = logging.getLogger(__name__)


@dataclass
class HistorySelection:
    """Full source history and the allow-listed subset of it."""

    all_commits: List[SourceCommit] = field(default_factory=list)
    commits: List[SourceCommit] = field(default_factory=list)


def filter_by_author(
    commits: Iterable[SourceCommit],
    allowed_authors: Iterable[str],
) -> List[SourceCommit]:
    """Keep commits whose author identity is on the allow-list, in order."""
    allowed = set(allowed_authors)
    return [c for c in commits if c.author_identity in allowed]


def read_history(
    repo: Repository,
    branch: str,
    allowed_authors: Iterable[str],
) -> HistorySelection:
    """
    Read and filter the source history.

    Raises:
        HistoryUnavailable: The repository or branch cannot be read
        NoCommits: The branch has no non-merge commits
        NoMatchingAuthors: No commit matches the allow-list
    """
    allowed = list(allowed_authors)

    try:
        all_commits = repo.list_history(branch)
    except GitCommandError as e:
        raise HistoryUnavailable(
            f"Cannot read history of branch '{branch}': {e.message}",
            details=e.details,
        ) from e

    logger.debug(f"[history] Commits on {branch}: {len(all_commits)}")

    if not all_commits:
        raise NoCommits(f"No commits found on branch '{branch}' of the source repository")

    commits = filter_by_author(all_commits, allowed)
    logger.debug(f"[history] Commits after author filter: {len(commits)}")

    if not commits:
        raise NoMatchingAuthors(
            f"No commit authors matched the allow-list: {', '.join(allowed)}",
            details={"source_commits": len(all_commits)},
        )

    return HistorySelection(all_commits=all_commits, commits=commits)
