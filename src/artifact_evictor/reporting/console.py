"""
Console report of an eviction run.

Everything is written through ``logging`` so the same lines show up in
the Actions log, a terminal (via RichHandler) or a test's caplog.
Failures and an over-limit result are logged at WARNING.
"""

import logging
from datetime import datetime
from typing import Iterable, Sequence

from artifact_evictor.artifacts.models import (
    Artifact,
    ArtifactStats,
    CleanupSummary,
    DeletionOutcome,
)
from artifact_evictor.artifacts.selection import calculate_age, sort_newest_first
from artifact_evictor.artifacts.stats import bytes_to_gb, format_gb, format_mb
from artifact_evictor.config import EvictionConfig

logger = logging.getLogger(__name__)

RULE = "----------------------------------------"
BANNER = "========================================"


class ConsoleReporter:
    """Renders progress and results of a run as log lines."""

    def __init__(self, log: logging.Logger | None = None, now: datetime | None = None):
        """
        Args:
            log: Logger to write to, defaults to this module's logger
            now: Fixed reference time for artifact ages (tests)
        """
        self._log = log or logger
        self._now = now

    def _age(self, artifact: Artifact) -> int:
        return calculate_age(artifact.created_at, self._now)

    def header(self, config: EvictionConfig) -> None:
        self._log.info("=== Artifact Cleanup ===")
        if config.dry_run:
            self._log.info("MODE: DRY RUN (no artifacts will be deleted)")
        self._log.info(f"Repository: {config.repository}")
        self._log.info(f"Maximum size: {format_gb(config.max_size_gb)}GB")

    def inventory(self, artifacts: Sequence[Artifact]) -> None:
        self._log.info(f"Found {len(artifacts)} total artifacts")

    def stats(self, label: str, stats: ArtifactStats) -> None:
        self._log.info(f"{label}:")
        self._log.info(f"  Artifacts: {stats.total_count}")
        self._log.info(
            f"  Total size: {format_gb(stats.total_size_gb)}GB ({stats.total_size_bytes} bytes)"
        )

    def limit(self, max_size_bytes: int) -> None:
        self._log.info(
            f"Maximum allowed: {format_gb(bytes_to_gb(max_size_bytes))}GB ({max_size_bytes} bytes)"
        )

    def under_limit(self) -> None:
        self._log.info("✓ Total size is under the limit. No cleanup needed.")

    def over_limit(self) -> None:
        self._log.info("⚠ Total size exceeds limit. Starting cleanup...")

    def artifact_details(self, artifact: Artifact) -> None:
        created = artifact.created_at.isoformat() if artifact.created_at else "unknown"
        self._log.info(f"  Name: {artifact.name}")
        self._log.info(f"  ID: {artifact.id}")
        self._log.info(f"  Size: {format_mb(artifact.size_in_bytes)}MB")
        self._log.info(f"  Age: {self._age(artifact)} days")
        self._log.info(f"  Created: {created}")

    def deletion_outcome(self, outcome: DeletionOutcome) -> None:
        self._log.info(f"Deleting: {outcome.artifact.name}")
        self.artifact_details(outcome.artifact)
        if outcome.success:
            self._log.info("  ✓ Deleted successfully")
        else:
            self._log.warning(f"  ✗ Failed: {outcome.error}")

    def deletion_outcomes(self, outcomes: Iterable[DeletionOutcome]) -> None:
        self._log.info("Deleting oldest artifacts:")
        self._log.info(RULE)
        for outcome in outcomes:
            self.deletion_outcome(outcome)

    def retained(self, artifacts: Iterable[Artifact]) -> None:
        ordered = sort_newest_first(artifacts)
        if not ordered:
            self._log.info("No artifacts retained.")
            return

        self._log.info("Retained artifacts:")
        self._log.info(RULE)
        for index, artifact in enumerate(ordered, start=1):
            self._log.info(f"  {index}. {artifact.name}")
            self._log.info(
                f"     Size: {format_mb(artifact.size_in_bytes)}MB | Age: {self._age(artifact)} days"
            )

    def summary(self, summary: CleanupSummary, max_size_bytes: int) -> None:
        self._log.info(BANNER)
        self._log.info("Cleanup Summary:")
        self._log.info(BANNER)
        self._log.info(f"Artifacts deleted: {summary.deleted_count}")
        self._log.info(f"Artifacts retained: {summary.retained_count}")
        self._log.info(f"Space freed: {format_gb(summary.freed_gb)}GB")
        self._log.info(f"Final total size: {format_gb(summary.final_size_gb)}GB")
        if summary.has_failures:
            self._log.warning(f"Failed deletions: {len(summary.failures)}")
        self._log.info(BANNER)

        if summary.final_size_bytes <= max_size_bytes:
            self._log.info("✓ Storage is now under the limit.")
        else:
            self._log.warning("⚠ Warning: Storage is still over the limit.")
            self._log.warning("  Consider lowering the threshold or investigating artifacts.")

        self.retained(summary.retained)
