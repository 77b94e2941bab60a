"""
Artifact Evictor Orchestrator Module.

Runs the fetch, select, delete and report pipeline for one repository.
"""

__all__ = ["ArtifactDeleter", "EvictionOrchestrator", "EvictionRun"]

from artifact_evictor.orchestrator.core import (
    ArtifactDeleter,
    EvictionOrchestrator,
    EvictionRun,
)
