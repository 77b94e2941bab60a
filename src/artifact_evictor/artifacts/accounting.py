"""
Cleanup accounting.

Folds per-artifact deletion outcomes into an immutable CleanupSummary and
checks that retained and deleted artifacts partition the original
inventory.
"""

from typing import Iterable, Sequence

from artifact_evictor.core.exceptions import ConsistencyError

from .models import Artifact, ArtifactStats, CleanupSummary, DeletionOutcome
from .stats import bytes_to_gb


def create_cleanup_summary(
    initial: ArtifactStats,
    outcomes: Sequence[DeletionOutcome],
    retained: Iterable[Artifact],
) -> CleanupSummary:
    """
    Build the summary of a cleanup run.

    Args:
        initial: Stats computed before any deletion
        outcomes: One outcome per attempted deletion, in attempt order
        retained: Artifacts that remain after the run

    Returns:
        CleanupSummary with failures kept in attempt order
    """
    successful = [outcome for outcome in outcomes if outcome.success]
    failures = tuple(outcome for outcome in outcomes if not outcome.success)

    freed_bytes = sum(outcome.artifact.size_in_bytes for outcome in successful)
    final_size_bytes = initial.total_size_bytes - freed_bytes

    return CleanupSummary(
        initial=initial,
        deleted_count=len(successful),
        freed_bytes=freed_bytes,
        freed_gb=bytes_to_gb(freed_bytes),
        final_size_bytes=final_size_bytes,
        final_size_gb=bytes_to_gb(final_size_bytes),
        failures=failures,
        retained=tuple(retained),
    )


def no_cleanup_summary(
    initial: ArtifactStats, artifacts: Iterable[Artifact]
) -> CleanupSummary:
    """Summary for a run that was already within the limit."""
    return create_cleanup_summary(initial, (), artifacts)


def partition_retained(
    artifacts: Sequence[Artifact],
    outcomes: Iterable[DeletionOutcome],
) -> tuple[Artifact, ...]:
    """
    Return the artifacts that survive the run, in inventory order.

    Only successful deletions remove an artifact; a failed attempt leaves
    it retained.
    """
    deleted_ids = {outcome.artifact.id for outcome in outcomes if outcome.success}
    return tuple(artifact for artifact in artifacts if artifact.id not in deleted_ids)


def verify_partition(
    original: Sequence[Artifact],
    summary: CleanupSummary,
    outcomes: Iterable[DeletionOutcome],
) -> None:
    """
    Check that retained and deleted artifacts cover the inventory exactly once.

    Raises:
        ConsistencyError: If an artifact is both retained and deleted, or
            belongs to neither partition
    """
    original_ids = {artifact.id for artifact in original}
    retained_ids = {artifact.id for artifact in summary.retained}
    deleted_ids = {outcome.artifact.id for outcome in outcomes if outcome.success}

    overlap = retained_ids & deleted_ids
    if overlap:
        raise ConsistencyError(
            "Artifacts reported as both retained and deleted",
            details={"artifact_ids": sorted(overlap)},
        )

    covered = retained_ids | deleted_ids
    if covered != original_ids:
        raise ConsistencyError(
            "Retained and deleted artifacts do not match the inventory",
            details={
                "missing": sorted(original_ids - covered),
                "unexpected": sorted(covered - original_ids),
            },
        )
