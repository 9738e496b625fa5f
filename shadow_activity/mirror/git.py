"""
Git — Narrow, typed wrapper around the git command line.

The engine only talks to repositories through the Repository protocol,
so tests can substitute a scripted fake. GitRepository is the real
implementation: one subprocess per call, argv lists (no shell), stdout
decoded as UTF-8.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union, runtime_checkable

from ..errors import GitCommandError
from .models import SourceCommit

logger = logging.getLogger(__name__)

# ASCII unit separator: cannot appear in emails or dates
FIELD_SEPARATOR = "\x1f"
HISTORY_FORMAT = "%h%x1f%ae%x1f%aI"  # short sha, author email, strict ISO date

# Fixed width; git only lengthens an id that would otherwise be ambiguous
SHORT_ID_ABBREV = 7

DEFAULT_TIMEOUT = 60


@runtime_checkable
class Repository(Protocol):
    """Everything the mirror engine needs from a repository."""

    def list_history(self, branch: str) -> List[SourceCommit]:
        """Linear, non-merge history of *branch*, oldest first."""
        ...

    def show_stat(self, short_id: str) -> str:
        """Summary statistics text for one commit."""
        ...

    def commit_messages(self) -> List[str]:
        """Subjects of every commit on HEAD, oldest first."""
        ...

    def read_file(self, name: str) -> Optional[str]:
        """Working-tree content of *name*, or None if it does not exist."""
        ...

    def write_file(self, name: str, content: str) -> None:
        """Overwrite *name* in the working tree."""
        ...

    def stage(self, name: str) -> None:
        """Add *name* to the index."""
        ...

    def commit(self, message: str, path: str, name: str, email: str, date: str) -> str:
        """Commit only *path* as name/email at date. Returns the new short id."""
        ...


class GitRepository:
    """A git work tree on disk."""

    def __init__(self, path: Union[str, Path], timeout: int = DEFAULT_TIMEOUT):
        self.path = Path(path).resolve()
        self.timeout = timeout
        self._run("rev-parse", "--git-dir")

    def __repr__(self) -> str:
        return f"GitRepository({str(self.path)!r})"

    def _run(
        self,
        *args: str,
        env: Optional[Dict[str, str]] = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a git command in the repo directory."""
        cmd = ["git"] + list(args)
        run_env = None
        if env:
            run_env = dict(os.environ)
            run_env.update(env)

        logger.debug(f"[git] {' '.join(cmd)} (cwd={self.path})")
        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.path),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=run_env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                list(args), None, f"timed out after {self.timeout}s", cwd=str(self.path)
            ) from e
        except OSError as e:
            raise GitCommandError(list(args), None, str(e), cwd=str(self.path)) from e

        if check and result.returncode != 0:
            raise GitCommandError(
                list(args), result.returncode, result.stderr, cwd=str(self.path)
            )
        return result

    def _has_commits(self) -> bool:
        result = self._run("rev-parse", "--verify", "--quiet", "HEAD", check=False)
        return result.returncode == 0

    def list_history(self, branch: str) -> List[SourceCommit]:
        result = self._run(
            "log",
            "--no-merges",
            "--reverse",
            f"--abbrev={SHORT_ID_ABBREV}",
            f"--pretty=format:{HISTORY_FORMAT}",
            branch,
            "--",
        )

        commits: List[SourceCommit] = []
        for line in result.stdout.splitlines():
            if not line:
                continue

            parts = line.split(FIELD_SEPARATOR)
            if len(parts) != 3:
                logger.warning(f"[git] Skipping unparseable log line: {line!r}")
                continue

            short_id, email, date = parts
            commits.append(
                SourceCommit(short_id=short_id, author_identity=email, author_timestamp=date)
            )

        return commits

    def show_stat(self, short_id: str) -> str:
        result = self._run("show", "--shortstat", "--format=", short_id, "--")
        return result.stdout.strip()

    def commit_messages(self) -> List[str]:
        # A freshly initialised target has no HEAD yet
        if not self._has_commits():
            return []
        result = self._run("log", "--reverse", "--pretty=format:%s")
        return result.stdout.splitlines()

    def read_file(self, name: str) -> Optional[str]:
        file_path = self.path / name
        if not file_path.is_file():
            return None
        return file_path.read_text(encoding="utf-8")

    def write_file(self, name: str, content: str) -> None:
        with open(self.path / name, "w", encoding="utf-8", newline="\n") as f:
            f.write(content)

    def stage(self, name: str) -> None:
        self._run("add", "--", name)

    def commit(self, message: str, path: str, name: str, email: str, date: str) -> str:
        env = {
            "GIT_AUTHOR_NAME": name,
            "GIT_AUTHOR_EMAIL": email,
            "GIT_AUTHOR_DATE": date,
            "GIT_COMMITTER_NAME": name,
            "GIT_COMMITTER_EMAIL": email,
            "GIT_COMMITTER_DATE": date,
        }
        # Only *path* is committed; other staged entries stay in the index
        self._run("commit", "--allow-empty", "--quiet", "-m", message, "--", path, env=env)
        result = self._run("rev-parse", "--short", "HEAD")
        return result.stdout.strip()
