"""
Artifact Evictor - storage budget enforcement for CI artifacts.

Keeps a repository's workflow artifacts under a size limit by evicting
the oldest artifacts first.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
