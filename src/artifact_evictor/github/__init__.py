"""
Artifact Evictor GitHub Module.

Provides the REST client used to list and delete workflow artifacts.
"""

__all__ = ["GitHubClient"]

from artifact_evictor.github.client import GitHubClient
