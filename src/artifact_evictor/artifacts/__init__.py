"""
Artifact Evictor Artifacts Module.

Provides the eviction engine: size statistics, oldest-first selection
and cleanup accounting.
"""

from .models import (
    Artifact,
    ArtifactStats,
    CleanupSummary,
    DeletionOutcome,
)
from .stats import (
    BYTES_PER_GB,
    bytes_to_gb,
    calculate_stats,
    calculate_total_size,
    format_gb,
    format_mb,
    gb_to_bytes,
    is_over_limit,
)
from .selection import (
    calculate_age,
    select_artifacts_to_delete,
    sort_by_created_date,
    sort_newest_first,
)
from .accounting import (
    create_cleanup_summary,
    no_cleanup_summary,
    partition_retained,
    verify_partition,
)

__all__ = [
    # Models
    "Artifact",
    "ArtifactStats",
    "CleanupSummary",
    "DeletionOutcome",
    # Stats
    "BYTES_PER_GB",
    "bytes_to_gb",
    "gb_to_bytes",
    "format_gb",
    "format_mb",
    "calculate_total_size",
    "calculate_stats",
    "is_over_limit",
    # Selection
    "sort_by_created_date",
    "sort_newest_first",
    "calculate_age",
    "select_artifacts_to_delete",
    # Accounting
    "create_cleanup_summary",
    "no_cleanup_summary",
    "partition_retained",
    "verify_partition",
]
