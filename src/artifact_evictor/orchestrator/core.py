"""
Orchestrator Core - one eviction run from inventory to report.

fetch -> stats -> select -> delete (fan-out) -> summarize -> publish
"""

import logging
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

from artifact_evictor.artifacts.accounting import (
    create_cleanup_summary,
    no_cleanup_summary,
    partition_retained,
    verify_partition,
)
from artifact_evictor.artifacts.models import Artifact, CleanupSummary, DeletionOutcome
from artifact_evictor.artifacts.selection import select_artifacts_to_delete
from artifact_evictor.artifacts.stats import calculate_stats, is_over_limit
from artifact_evictor.config import EvictionConfig
from artifact_evictor.core.exceptions import (
    ConsistencyError,
    DeletionError,
    EvictorError,
    FetchError,
    format_exception,
)
from artifact_evictor.core.result import Err, Ok, Result
from artifact_evictor.github.client import GitHubClient
from artifact_evictor.reporting.console import ConsoleReporter
from artifact_evictor.reporting.job_summary import render_job_summary, write_job_summary
from artifact_evictor.reporting.outputs import build_outputs, write_outputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvictionRun:
    """Everything a finished run produced."""

    summary: CleanupSummary
    was_over_limit: bool
    selected: tuple[Artifact, ...] = ()
    outcomes: tuple[DeletionOutcome, ...] = field(default=())


class ArtifactDeleter:
    """
    Delete primitive with dry-run support.

    Never raises for API failures: every call yields a DeletionOutcome.
    """

    def __init__(self, client: GitHubClient, config: EvictionConfig):
        self._client = client
        self._config = config

    def delete(self, artifact: Artifact) -> DeletionOutcome:
        """Delete one artifact, or pretend to in dry-run mode."""
        if self._config.dry_run:
            return DeletionOutcome.succeeded(artifact)

        try:
            self._client.delete_artifact(self._config.owner, self._config.repo, artifact.id)
        except DeletionError as e:
            return DeletionOutcome.failed(artifact, e.message)
        return DeletionOutcome.succeeded(artifact)


class EvictionOrchestrator:
    """
    Runs one eviction pass over a repository's artifacts.

    The engine functions stay pure; this class owns the client, the
    delete fan-out and the reporting side effects.
    """

    def __init__(
        self,
        config: EvictionConfig,
        client: GitHubClient | None = None,
        reporter: ConsoleReporter | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Validated run configuration
            client: API client, created from config when omitted
            reporter: Console reporter, defaults to logging-based output
        """
        self._config = config
        self._owns_client = client is None
        self._client = client or GitHubClient(
            token=config.token.get_secret_value(),
            base_url=config.api_url,
        )
        self._deleter = ArtifactDeleter(self._client, config)
        self._reporter = reporter or ConsoleReporter()

    @property
    def config(self) -> EvictionConfig:
        return self._config

    def fetch_artifacts(self) -> Result[list[Artifact], FetchError]:
        """List all artifacts of the configured repository."""
        logger.info("Fetching all artifacts...")
        try:
            artifacts = self._client.list_artifacts(self._config.owner, self._config.repo)
        except FetchError as e:
            return Err(e)
        self._reporter.inventory(artifacts)
        return Ok(artifacts)

    def plan(self, artifacts: Sequence[Artifact]) -> Result[tuple[Artifact, ...], ConsistencyError]:
        """
        Choose what to delete without deleting anything.

        Returns:
            Ok(selection), empty when within the limit, or
            Err(ConsistencyError) when over the limit with nothing selectable
        """
        current_size = calculate_stats(artifacts).total_size_bytes
        max_size = self._config.max_size_bytes
        selected = select_artifacts_to_delete(artifacts, current_size, max_size)

        if not selected and is_over_limit(current_size, max_size):
            return Err(
                ConsistencyError(
                    "No artifacts to delete, but still over limit. This should not happen.",
                    current_size_bytes=current_size,
                    max_size_bytes=max_size,
                )
            )
        return Ok(selected)

    def delete_artifacts(self, artifacts: Sequence[Artifact]) -> tuple[DeletionOutcome, ...]:
        """
        Delete artifacts concurrently.

        Outcomes come back in the same order as ``artifacts``. A task that
        raised or was cancelled is reported as a failed outcome.
        """
        if not artifacts:
            return ()

        workers = min(self._config.max_workers, len(artifacts))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="evictor") as executor:
            futures: list[Future] = [
                executor.submit(self._deleter.delete, artifact) for artifact in artifacts
            ]
            return tuple(
                self._collect(artifact, future) for artifact, future in zip(artifacts, futures)
            )

    @staticmethod
    def _collect(artifact: Artifact, future: Future) -> DeletionOutcome:
        """Turn a finished future into an outcome."""
        try:
            return future.result()
        except CancelledError:
            return DeletionOutcome.failed(artifact, "Deletion was cancelled")
        except Exception as e:
            logger.exception(f"Unexpected error deleting artifact {artifact.id}")
            return DeletionOutcome.failed(artifact, format_exception(e))

    def perform_cleanup(
        self, artifacts: Sequence[Artifact]
    ) -> Result[EvictionRun, ConsistencyError]:
        """
        Evict oldest artifacts until the inventory fits the limit.

        Args:
            artifacts: Freshly fetched inventory

        Returns:
            Ok(EvictionRun) even when some deletions failed, or
            Err(ConsistencyError) if the accounting cannot be trusted
        """
        initial = calculate_stats(artifacts)
        max_size = self._config.max_size_bytes

        self._reporter.stats("Current storage", initial)
        self._reporter.limit(max_size)

        if not is_over_limit(initial.total_size_bytes, max_size):
            self._reporter.under_limit()
            return Ok(
                EvictionRun(
                    summary=no_cleanup_summary(initial, artifacts),
                    was_over_limit=False,
                )
            )

        self._reporter.over_limit()

        planned = self.plan(artifacts)
        if isinstance(planned, Err):
            return planned
        selected = planned.value

        outcomes = self.delete_artifacts(selected)
        self._reporter.deletion_outcomes(outcomes)

        retained = partition_retained(artifacts, outcomes)
        summary = create_cleanup_summary(initial, outcomes, retained)

        try:
            verify_partition(artifacts, summary, outcomes)
        except ConsistencyError as e:
            return Err(e)

        if summary.has_failures:
            logger.warning(
                f"{len(summary.failures)} of {len(selected)} deletions failed; "
                "see the summary for details"
            )

        return Ok(
            EvictionRun(
                summary=summary,
                was_over_limit=True,
                selected=selected,
                outcomes=outcomes,
            )
        )

    def publish(self, run: EvictionRun) -> None:
        """Write the console summary, step outputs and job summary."""
        self._reporter.summary(run.summary, self._config.max_size_bytes)

        try:
            write_outputs(build_outputs(run.summary, run.was_over_limit))
        except OSError as e:
            logger.warning(f"Failed to write step outputs: {e}")

        try:
            write_job_summary(render_job_summary(run.summary, self._config, run.was_over_limit))
        except OSError as e:
            logger.warning(f"Failed to write job summary: {e}")

    def run(self) -> Result[EvictionRun, EvictorError]:
        """
        Execute a complete eviction run.

        Returns:
            Ok(EvictionRun), or Err with a FetchError or ConsistencyError.
            No summary is published for a failed run.
        """
        self._reporter.header(self._config)

        fetched = self.fetch_artifacts()
        if isinstance(fetched, Err):
            return fetched
        artifacts = fetched.value

        result = self.perform_cleanup(artifacts)
        if isinstance(result, Ok):
            self.publish(result.value)
        return result

    def close(self) -> None:
        """Close the API client if this orchestrator created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()
