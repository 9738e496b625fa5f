"""
Mirror Orchestrator — The per-commit mirror loop.

A run:
1. Reads and filters the source history
2. Loads the ledger from the target log and the buffer from the artifact
3. For every qualifying commit, oldest first:
   - skip if already mirrored (ledger hit)
   - size it; skip if it has no insertions and no deletions
   - apply the magnitude to the buffer
   - commit it (or preview it in dry-run mode)
4. Returns a MirrorReport with the totals

## Design Principles

- **Idempotency**: A second run over the same history creates nothing
- **Resumability**: The target repository is the only checkpoint; a failed
  run is fixed by running again, never by retrying inside the run
- **Ordering**: Shadow commits are created in source order

## Usage

    from shadow_activity.mirror.engine import run_mirror

    report = run_mirror(settings, dry_run=True)
    print(f"{report.mirrored} commits would be mirrored")
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..config.models import MirrorSettings
from ..errors import EmptyHistory, GitCommandError, HistoryUnavailable
from .buffer import ShadowBuffer
from .git import GitRepository, Repository
from .history import read_history
from .ledger import MirrorLedger
from .models import format_message
from .sizer import size_commit
from .writer import MirrorWriter

logger = logging.getLogger(__name__)

STATUS_OK = "ok"


class MirrorPhase(str, Enum):
    """Where a run currently is."""

    IDLE = "idle"
    LOADED_SOURCE = "loaded_source"
    LOADED_LEDGER = "loaded_ledger"
    PROCESSING = "processing"
    DONE = "done"


@dataclass
class MirrorReport:
    """Result of a mirror run."""

    status: str = STATUS_OK
    dry_run: bool = False
    message: Optional[str] = None

    # Source
    source_commits: int = 0
    filtered_commits: int = 0

    # Per-commit outcomes
    examined: int = 0
    mirrored: int = 0
    skipped_ledger: int = 0
    skipped_zero_diff: int = 0

    buffer_lines: int = 0
    emitted: List[str] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class MirrorOrchestrator:
    """Drives one mirror run. Owns the shadow buffer for its lifetime."""

    def __init__(
        self,
        source: Repository,
        target: Repository,
        settings: MirrorSettings,
        dry_run: bool = False,
    ):
        self.source = source
        self.target = target
        self.settings = settings
        self.dry_run = dry_run
        self.writer = MirrorWriter(
            target,
            artifact_name=settings.artifact_name,
            author_name=settings.commit_author_name_target,
            author_email=settings.commit_author_email_target,
        )
        self.phase = MirrorPhase.IDLE
        self.buffer = ShadowBuffer()
        self.ledger = MirrorLedger()

    def _enter(self, phase: MirrorPhase) -> None:
        logger.debug(f"[mirror] Phase → {phase.value}", extra={"phase": phase.value})
        self.phase = phase

    def run(self) -> MirrorReport:
        """
        Execute the mirror loop.

        Empty histories are reported through the returned status. Fatal
        errors (HistoryUnavailable, DiffUnavailable, CommitFailed) propagate
        and leave the target as it was at the point of failure.
        """
        start_time = time.time()
        report = MirrorReport(dry_run=self.dry_run)

        try:
            selection = read_history(
                self.source,
                self.settings.branch_name,
                self.settings.commit_author_emails_source,
            )
        except EmptyHistory as e:
            logger.warning(f"[mirror] {e.message}")
            report.status = e.status
            report.message = e.message
            report.source_commits = e.details.get("source_commits", 0)
            report.duration_ms = int((time.time() - start_time) * 1000)
            self._enter(MirrorPhase.DONE)
            return report

        report.source_commits = len(selection.all_commits)
        report.filtered_commits = len(selection.commits)
        self._enter(MirrorPhase.LOADED_SOURCE)

        self.ledger = MirrorLedger.load(self.target)
        self.buffer = ShadowBuffer.read(self.target, self.settings.artifact_name)
        self._enter(MirrorPhase.LOADED_LEDGER)

        logger.info(
            f"[mirror] {report.filtered_commits}/{report.source_commits} source commits "
            f"qualify, {len(self.ledger)} already in target, "
            f"artifact has {len(self.buffer)} lines"
        )

        self._enter(MirrorPhase.PROCESSING)
        for commit in selection.commits:
            report.examined += 1
            extra = {"short_id": commit.short_id}

            if commit.short_id in self.ledger:
                logger.warning(
                    f"[mirror] Skipping already shadowed commit: {commit.short_id}",
                    extra=extra,
                )
                report.skipped_ledger += 1
                continue

            magnitude = size_commit(self.source, commit.short_id)
            if magnitude.is_zero:
                logger.warning(
                    f"[mirror] Skipping zero-diff commit: {commit.short_id}",
                    extra=extra,
                )
                report.skipped_zero_diff += 1
                continue

            self.buffer.apply(magnitude.insertions, magnitude.deletions, commit.short_id)
            message = format_message(commit, magnitude)

            if self.dry_run:
                self.writer.preview(message)
            else:
                self.writer.commit(self.buffer, message, commit.author_timestamp)

            self.ledger.record(commit.short_id)
            report.mirrored += 1
            report.emitted.append(message)

        self._enter(MirrorPhase.DONE)
        report.buffer_lines = len(self.buffer)
        report.duration_ms = int((time.time() - start_time) * 1000)

        logger.info(
            f"[mirror] Done: {report.examined} examined, {report.mirrored} "
            f"{'previewed' if self.dry_run else 'mirrored'}, "
            f"{report.skipped_ledger} already shadowed, "
            f"{report.skipped_zero_diff} zero-diff"
        )
        return report


def open_repository(path, role: str) -> GitRepository:
    """Open a git work tree, reporting failures as HistoryUnavailable."""
    try:
        return GitRepository(path)
    except GitCommandError as e:
        raise HistoryUnavailable(
            f"Not a git repository ({role}): {path}",
            details=e.details,
        ) from e


def run_mirror(settings: MirrorSettings, dry_run: bool = False) -> MirrorReport:
    """Mirror the configured source repository into the configured target."""
    source = open_repository(settings.repo_path_source, "source")
    target = open_repository(settings.repo_path_target, "target")
    return MirrorOrchestrator(source, target, settings, dry_run=dry_run).run()


def inspect_mirror(source: Repository, target: Repository, settings: MirrorSettings) -> Dict[str, Any]:
    """
    Read-only snapshot of a source/target pair.

    Pending commits are qualifying source commits not yet in the ledger;
    some of them may still turn out to be zero-diff.
    """
    status: Dict[str, Any] = {
        "source": str(settings.repo_path_source),
        "target": str(settings.repo_path_target),
        "branch": settings.branch_name,
        "artifact": settings.artifact_name,
        "source_commits": 0,
        "filtered_commits": 0,
        "pending_commits": 0,
        "status": STATUS_OK,
    }

    try:
        selection = read_history(
            source, settings.branch_name, settings.commit_author_emails_source
        )
    except EmptyHistory as e:
        status["status"] = e.status
        status["source_commits"] = e.details.get("source_commits", 0)
        selection = None

    ledger = MirrorLedger.load(target)
    buffer = ShadowBuffer.read(target, settings.artifact_name)
    status["ledger_size"] = len(ledger)
    status["artifact_lines"] = len(buffer)

    if selection is not None:
        status["source_commits"] = len(selection.all_commits)
        status["filtered_commits"] = len(selection.commits)
        status["pending_commits"] = sum(
            1 for c in selection.commits if c.short_id not in ledger
        )

    return status
