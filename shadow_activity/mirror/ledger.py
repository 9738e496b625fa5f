"""
Mirror Ledger — Which source commits already have a shadow commit.

There is no separate index file: the target repository's own log is the
ledger. Each commit subject's leading token is taken as a mirrored id.
"""

from __future__ import annotations

import logging
from typing import Iterable, Set

from ..errors import GitCommandError, HistoryUnavailable
from .git import Repository
from .models import parse_short_id

logger = logging.getLogger(__name__)


class MirrorLedger:
    """Set of source short ids already represented in the target."""

    def __init__(self, short_ids: Iterable[str] = ()):
        self._ids: Set[str] = set(short_ids)

    @classmethod
    def from_messages(cls, messages: Iterable[str]) -> "MirrorLedger":
        ids = (parse_short_id(message) for message in messages)
        return cls(short_id for short_id in ids if short_id)

    @classmethod
    def load(cls, repo: Repository) -> "MirrorLedger":
        """Read the ledger from the target repository's commit history."""
        try:
            messages = repo.commit_messages()
        except GitCommandError as e:
            raise HistoryUnavailable(
                f"Cannot read target repository history: {e.message}",
                details=e.details,
            ) from e

        ledger = cls.from_messages(messages)
        logger.debug(f"[ledger] Shadowed ids in target: {len(ledger)}")
        return ledger

    def record(self, short_id: str) -> None:
        """Remember an id emitted during this run."""
        self._ids.add(short_id)

    def __contains__(self, short_id: object) -> bool:
        return short_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
