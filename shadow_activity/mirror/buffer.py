"""
Shadow Buffer — In-memory lines of the tracked artifact.

Each mirrored commit first removes lines from the end, then appends new
ones, so the artifact's line diff has the same size as the source commit.
Lines carry the short id of the commit that added them; only their count
matters.

Deletions larger than the buffer are clamped to its length. The excess
is dropped, never reported as an error: a resumed run must be able to
replay the same commit stream over whatever is on disk.

An artifact written by hand without a final newline gains one on the
first write, so git reports one extra +1/-1 on that commit. The line
count itself is unaffected.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..errors import HistoryUnavailable
from .git import Repository

logger = logging.getLogger(__name__)


class ShadowBuffer:
    """Ordered line tokens of the artifact."""

    def __init__(self, lines: Optional[Iterable[str]] = None):
        self.lines: List[str] = list(lines or [])

    @classmethod
    def load(cls, content: Optional[str]) -> "ShadowBuffer":
        """Build a buffer from artifact content (None when the file is absent)."""
        if not content:
            return cls()
        return cls(content.splitlines())

    @classmethod
    def read(cls, repo: Repository, name: str) -> "ShadowBuffer":
        """
        Load the artifact *name* from the target working tree.

        Raises:
            HistoryUnavailable: The artifact exists but cannot be read as text
        """
        try:
            content = repo.read_file(name)
        except (OSError, UnicodeDecodeError) as e:
            raise HistoryUnavailable(
                f"Cannot read artifact {name} in target repository: {e}",
                details={"artifact": name},
            ) from e
        return cls.load(content)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"ShadowBuffer(len={len(self.lines)})"

    def apply(self, insertions: int, deletions: int, token: str) -> int:
        """
        Delete from the end, then append *insertions* copies of *token*.

        Returns:
            Number of lines actually deleted (deletions clamped to length)
        """
        if insertions < 0 or deletions < 0:
            raise ValueError(f"Counts must be non-negative: +{insertions} -{deletions}")

        removed = min(deletions, len(self.lines))
        if removed:
            del self.lines[-removed:]
        if removed < deletions:
            logger.debug(
                f"[buffer] {token}: clamped deletions {deletions} → {removed}"
            )

        self.lines.extend([token] * insertions)
        return removed

    def serialize(self) -> str:
        """Newline-joined content with one trailing newline (empty if no lines)."""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"
