"""
Mirror Models — Source commits, diff magnitudes, and the mirrored
commit message wire format.

The message written to the target repository is:

    <shortId> <authorTimestamp> +<insertions> -<deletions> <authorIdentity>

Example:

    89532a8 2024-09-30T19:40:22-07:00 +15 -3 alice@example.net

Only the leading token is ever read back (by the ledger).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SourceCommit:
    """One qualifying commit of the source branch."""

    short_id: str
    author_identity: str
    author_timestamp: str  # ISO-8601 with offset, exactly as git prints %aI


@dataclass(frozen=True)
class DiffMagnitude:
    """Line counts of a commit, independent of content."""

    insertions: int = 0
    deletions: int = 0

    def __post_init__(self):
        if self.insertions < 0 or self.deletions < 0:
            raise ValueError(
                f"Diff magnitude cannot be negative: +{self.insertions} -{self.deletions}"
            )

    @property
    def is_zero(self) -> bool:
        return self.insertions == 0 and self.deletions == 0


def format_message(commit: SourceCommit, magnitude: DiffMagnitude) -> str:
    """Build the mirrored commit message for a source commit."""
    return (
        f"{commit.short_id} {commit.author_timestamp} "
        f"+{magnitude.insertions} -{magnitude.deletions} {commit.author_identity}"
    )


def parse_short_id(message: str) -> Optional[str]:
    """
    Return the leading token of a commit message, or None if it is blank.

    Foreign commits are not rejected: their first word simply never
    matches a source id.
    """
    parts = message.split(None, 1)
    return parts[0] if parts else None
