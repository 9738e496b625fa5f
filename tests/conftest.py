"""
Shared fixtures for mirror tests.

Provides a scripted in-memory repository (FakeRepository) for engine
tests, helpers to build real git repositories for integration tests, and
a settings factory pointing at temporary directories.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from shadow_activity.config.models import MirrorSettings
from shadow_activity.errors import GitCommandError
from shadow_activity.mirror.models import SourceCommit


PUBLIC_NAME = "Public Person"
PUBLIC_EMAIL = "public@example.com"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class FakeRepository:
    """In-memory Repository with scripted history, stats and log."""

    def __init__(
        self,
        history: Optional[List[SourceCommit]] = None,
        stats: Optional[Dict[str, str]] = None,
        messages: Optional[List[str]] = None,
        files: Optional[Dict[str, str]] = None,
    ):
        self.history = list(history or [])
        self.stats = dict(stats or {})
        self.messages = list(messages or [])
        self.files = dict(files or {})
        self.staged: List[str] = []
        self.commits: List[Dict[str, str]] = []
        self.fail_history = False
        self.fail_commit = False
        self.stat_calls: List[str] = []

    def list_history(self, branch: str) -> List[SourceCommit]:
        if self.fail_history:
            raise GitCommandError(["log", branch], 128, f"fatal: bad revision '{branch}'")
        return list(self.history)

    def show_stat(self, short_id: str) -> str:
        self.stat_calls.append(short_id)
        if short_id not in self.stats:
            raise GitCommandError(["show", short_id], 128, f"fatal: bad object {short_id}")
        return self.stats[short_id]

    def commit_messages(self) -> List[str]:
        return list(self.messages)

    def read_file(self, name: str) -> Optional[str]:
        return self.files.get(name)

    def write_file(self, name: str, content: str) -> None:
        self.files[name] = content

    def stage(self, name: str) -> None:
        self.staged.append(name)

    def commit(self, message: str, path: str, name: str, email: str, date: str) -> str:
        if self.fail_commit:
            raise GitCommandError(["commit", "-m", message, "--", path], 1, "error: permission denied")
        commit_id = f"t{len(self.commits) + 1:06d}"
        self.commits.append({
            "id": commit_id,
            "message": message,
            "name": name,
            "email": email,
            "date": date,
            "path": path,
            "content": self.files.get(path, ""),
        })
        self.messages.append(message)
        return commit_id


def shortstat(insertions: int = 0, deletions: int = 0, files: int = 1) -> str:
    """Build a `git show --shortstat` summary line."""
    parts = [f" {files} file{'s' if files != 1 else ''} changed"]
    if insertions:
        parts.append(f"{insertions} insertion{'s' if insertions != 1 else ''}(+)")
    if deletions:
        parts.append(f"{deletions} deletion{'s' if deletions != 1 else ''}(-)")
    return ", ".join(parts)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """The CLI reconfigures the root logger; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def make_settings(tmp_path: Path):
    """Factory for MirrorSettings backed by real temp directories."""

    def _make(**overrides) -> MirrorSettings:
        source = tmp_path / "source"
        target = tmp_path / "target"
        source.mkdir(exist_ok=True)
        target.mkdir(exist_ok=True)
        data = {
            "repoPathSource": str(source),
            "repoPathTarget": str(target),
            "branchName": "main",
            "commitAuthorEmailsSource": ["alice@x"],
            "commitAuthorNameTarget": PUBLIC_NAME,
            "commitAuthorEmailTarget": PUBLIC_EMAIL,
        }
        data.update(overrides)
        return MirrorSettings.model_validate(data)

    return _make


# -- Real git helpers ----------------------------------------------------------

def git(repo: Path, *args: str, env: Optional[Dict[str, str]] = None) -> str:
    """Run git in *repo* and return stripped stdout."""
    run_env = dict(os.environ)
    if env:
        run_env.update(env)
    result = subprocess.run(
        ["git"] + list(args),
        cwd=str(repo),
        check=True,
        capture_output=True,
        text=True,
        env=run_env,
    )
    return result.stdout.strip()


def init_repo(path: Path) -> Path:
    """Initialise a git repo on branch main with a local identity."""
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "--quiet")
    git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    git(path, "config", "user.email", "test@example.com")
    git(path, "config", "user.name", "Test User")
    git(path, "config", "commit.gpgsign", "false")
    return path


def commit_file(
    repo: Path,
    filename: str,
    content: str,
    email: str,
    date: str,
    message: str = "work",
) -> str:
    """Write *filename*, commit it as *email* at *date*, return the short id."""
    (repo / filename).write_text(content, encoding="utf-8")
    git(repo, "add", "--", filename)
    git(
        repo,
        "commit",
        "--quiet",
        "--allow-empty",
        "-m",
        message,
        env={
            "GIT_AUTHOR_NAME": "Someone",
            "GIT_AUTHOR_EMAIL": email,
            "GIT_AUTHOR_DATE": date,
            "GIT_COMMITTER_NAME": "Someone",
            "GIT_COMMITTER_EMAIL": email,
            "GIT_COMMITTER_DATE": date,
        },
    )
    return git(repo, "rev-parse", "--short", "HEAD")
