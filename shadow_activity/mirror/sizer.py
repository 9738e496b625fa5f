"""
Diff Sizer — Insertion/deletion counts of a single source commit.

Counts come from the summary line of `git show --shortstat`:

     3 files changed, 15 insertions(+), 3 deletions(-)

A commit that only touches binary files, or nothing at all, has no
insertion/deletion figures and sizes to {0, 0}.
"""

from __future__ import annotations

import logging
import re

from ..errors import DiffUnavailable, GitCommandError
from .git import Repository
from .models import DiffMagnitude

logger = logging.getLogger(__name__)

INSERTIONS_PATTERN = re.compile(r"(\d+) insertions?\(\+\)")
DELETIONS_PATTERN = re.compile(r"(\d+) deletions?\(-\)")


def parse_shortstat(text: str) -> DiffMagnitude:
    """Extract insertion/deletion counts from shortstat summary text."""
    insertions = INSERTIONS_PATTERN.search(text)
    deletions = DELETIONS_PATTERN.search(text)
    return DiffMagnitude(
        insertions=int(insertions.group(1)) if insertions else 0,
        deletions=int(deletions.group(1)) if deletions else 0,
    )


def size_commit(repo: Repository, short_id: str) -> DiffMagnitude:
    """
    Compute the diff magnitude of a source commit.

    Raises:
        DiffUnavailable: The commit cannot be inspected. Never treated as
            zero-diff, since that would silently skip real work.
    """
    try:
        stat = repo.show_stat(short_id)
    except GitCommandError as e:
        raise DiffUnavailable(
            f"Cannot read diff statistics for commit {short_id}: {e.message}",
            details=e.details,
        ) from e

    magnitude = parse_shortstat(stat)
    logger.debug(f"[sizer] {short_id}: +{magnitude.insertions} -{magnitude.deletions}")
    return magnitude
