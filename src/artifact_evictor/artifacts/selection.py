"""
Eviction selection.

Decides which artifacts to delete so that remaining usage fits under the
limit. Oldest artifacts go first; an artifact without a creation
timestamp is treated as created at the Unix epoch and is evicted before
anything dated.
"""

from datetime import datetime, timezone
from typing import Iterable, Sequence

from .models import Artifact

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
SECONDS_PER_DAY = 60 * 60 * 24


def _as_utc(created_at: datetime | None) -> datetime:
    """Return an aware UTC datetime, substituting the epoch for None."""
    if created_at is None:
        return EPOCH
    if created_at.tzinfo is None:
        # GitHub timestamps are UTC; naive values come from tests or fixtures
        return created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(timezone.utc)


def created_sort_key(artifact: Artifact) -> datetime:
    """Sort key placing undated artifacts at the epoch."""
    return _as_utc(artifact.created_at)


def sort_by_created_date(artifacts: Iterable[Artifact]) -> tuple[Artifact, ...]:
    """
    Order artifacts oldest first.

    The sort is stable, so artifacts with equal timestamps keep their
    input order. The input is never modified.
    """
    return tuple(sorted(artifacts, key=created_sort_key))


def sort_newest_first(artifacts: Iterable[Artifact]) -> tuple[Artifact, ...]:
    """Order artifacts newest first (used when listing what was kept)."""
    return tuple(sorted(artifacts, key=created_sort_key, reverse=True))


def calculate_age(created_at: datetime | None, now: datetime | None = None) -> int:
    """
    Whole days elapsed since creation.

    Args:
        created_at: Creation timestamp; None counts as the epoch
        now: Reference time, defaults to the current UTC time

    Returns:
        Floor of the elapsed time in days
    """
    reference = _as_utc(now or datetime.now(timezone.utc))
    elapsed = reference - _as_utc(created_at)
    return int(elapsed.total_seconds() // SECONDS_PER_DAY)


def select_artifacts_to_delete(
    artifacts: Sequence[Artifact],
    current_size: int,
    max_size: int,
) -> tuple[Artifact, ...]:
    """
    Pick the shortest oldest-first prefix that brings usage under the limit.

    Selection is greedy by age, not by size: it never skips an old small
    artifact in favour of a newer large one.

    Args:
        artifacts: Current inventory
        current_size: Total size of the inventory in bytes
        max_size: Allowed total size in bytes (inclusive)

    Returns:
        Artifacts to delete, oldest first. Empty when already within the limit.
    """
    if current_size <= max_size:
        return ()

    to_delete: list[Artifact] = []
    remaining_size = current_size

    for artifact in sort_by_created_date(artifacts):
        if remaining_size <= max_size:
            break
        to_delete.append(artifact)
        remaining_size -= artifact.size_in_bytes

    return tuple(to_delete)
