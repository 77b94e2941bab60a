"""
Pydantic models for the eviction engine.

Defines the artifact snapshot, derived statistics, per-deletion outcomes
and the cleanup summary. All models are immutable.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Artifact(BaseModel):
    """A workflow artifact as listed by the inventory source."""

    id: int = Field(description="Artifact ID, unique within a repository")
    name: str = Field(description="Display name (not unique)")
    size_in_bytes: int = Field(ge=0, description="Size in bytes")
    created_at: datetime | None = Field(
        default=None, description="Creation timestamp, if the API reported one"
    )

    # The API returns node_id, url, expired, workflow_run, ... which we ignore
    model_config = {"frozen": True, "extra": "ignore"}


class ArtifactStats(BaseModel):
    """Point-in-time size and count of an artifact set."""

    total_count: int = Field(description="Number of artifacts")
    total_size_bytes: int = Field(description="Sum of artifact sizes in bytes")
    total_size_gb: float = Field(description="Sum of artifact sizes in GiB")

    model_config = {"frozen": True}


class DeletionOutcome(BaseModel):
    """Result of one deletion attempt."""

    artifact: Artifact = Field(description="Artifact that was targeted")
    success: bool = Field(description="Whether the artifact is gone")
    error: str | None = Field(default=None, description="Failure reason")

    model_config = {"frozen": True}

    @classmethod
    def succeeded(cls, artifact: Artifact) -> "DeletionOutcome":
        return cls(artifact=artifact, success=True)

    @classmethod
    def failed(cls, artifact: Artifact, error: str) -> "DeletionOutcome":
        return cls(artifact=artifact, success=False, error=error)


class CleanupSummary(BaseModel):
    """
    Accounting of a finished cleanup run.

    ``final_size_bytes`` is always ``initial.total_size_bytes - freed_bytes``
    and ``freed_bytes`` only counts successful deletions.
    """

    initial: ArtifactStats = Field(description="Stats before any deletion")
    deleted_count: int = Field(description="Number of successful deletions")
    freed_bytes: int = Field(description="Bytes reclaimed by successful deletions")
    freed_gb: float = Field(description="freed_bytes in GiB")
    final_size_bytes: int = Field(description="Remaining total size in bytes")
    final_size_gb: float = Field(description="final_size_bytes in GiB")
    failures: tuple[DeletionOutcome, ...] = Field(
        default=(), description="Failed deletions, in attempt order"
    )
    retained: tuple[Artifact, ...] = Field(
        default=(), description="Artifacts still present after the run"
    )

    model_config = {"frozen": True}

    @property
    def has_failures(self) -> bool:
        """Return True if any deletion failed."""
        return len(self.failures) > 0

    @property
    def retained_count(self) -> int:
        return len(self.retained)
