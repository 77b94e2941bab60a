"""
Artifact Evictor Core Module.

Provides the exception hierarchy and the Ok/Err result type shared by
every other module.
"""

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    # Exceptions
    "EvictorError",
    "ConfigurationError",
    "FetchError",
    "DeletionError",
    "ConsistencyError",
    "format_exception",
]

from artifact_evictor.core.exceptions import (
    ConfigurationError,
    ConsistencyError,
    DeletionError,
    EvictorError,
    FetchError,
    format_exception,
)
from artifact_evictor.core.result import Err, Ok, Result
