"""
Size and count aggregation over artifact sets.
"""

from typing import Iterable, Sequence

from .models import Artifact, ArtifactStats

BYTES_PER_GB = 1024**3
BYTES_PER_MB = 1024**2


def bytes_to_gb(size_bytes: int | float) -> float:
    """Convert bytes to GiB."""
    return size_bytes / BYTES_PER_GB


def gb_to_bytes(size_gb: float) -> int:
    """Convert GiB to whole bytes (truncated)."""
    return int(size_gb * BYTES_PER_GB)


def format_gb(size_gb: float) -> str:
    """Render a GiB value with exactly two decimals, e.g. 1.999 -> '2.00'."""
    return f"{size_gb:.2f}"


def format_mb(size_bytes: int) -> str:
    """Render a byte count as MiB with two decimals."""
    return f"{size_bytes / BYTES_PER_MB:.2f}"


def calculate_total_size(artifacts: Iterable[Artifact]) -> int:
    """Sum of artifact sizes; 0 for an empty set."""
    return sum(artifact.size_in_bytes for artifact in artifacts)


def calculate_stats(artifacts: Sequence[Artifact]) -> ArtifactStats:
    """
    Compute count and total size of an artifact set.

    Args:
        artifacts: Artifacts to aggregate

    Returns:
        ArtifactStats snapshot
    """
    total_size_bytes = calculate_total_size(artifacts)
    return ArtifactStats(
        total_count=len(artifacts),
        total_size_bytes=total_size_bytes,
        total_size_gb=bytes_to_gb(total_size_bytes),
    )


def is_over_limit(size_bytes: int, max_size_bytes: int) -> bool:
    """Return True only when size strictly exceeds the limit."""
    return size_bytes > max_size_bytes
