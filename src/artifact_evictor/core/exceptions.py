"""
Artifact Evictor Exception Hierarchy.

Configuration, fetch and consistency errors end a run; a DeletionError
only fails the one artifact it names.
"""

from typing import Any


class EvictorError(Exception):
    """Base for every evictor error; ``details`` is appended to the message."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"


class ConfigurationError(EvictorError):
    """
    Errors in configuration loading or validation.

    Raised when:
    - No API token is available
    - The repository identifier is missing or malformed
    - The size limit is missing, non-numeric or not positive
    - A configuration file is unreadable or malformed
    """

    def __init__(
        self,
        message: str,
        *,
        config_file: str | None = None,
        env_var: str | None = None,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            config_file: Path to configuration file if applicable
            env_var: Environment variable name if applicable
            config_key: Configuration key if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if env_var:
            details["env_var"] = env_var
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, details=details)
        self.config_file = config_file
        self.env_var = env_var
        self.config_key = config_key


class FetchError(EvictorError):
    """
    Errors while listing artifacts from the inventory source.

    Carries the HTTP status code when the API answered at all.
    """

    def __init__(
        self,
        message: str,
        *,
        repository: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if repository:
            details["repository"] = repository
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message, details=details)
        self.repository = repository
        self.status_code = status_code


class DeletionError(EvictorError):
    """Raised by the API client when a single artifact cannot be deleted."""

    def __init__(
        self,
        message: str,
        *,
        artifact_id: int | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if artifact_id is not None:
            details["artifact_id"] = artifact_id
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message, details=details)
        self.artifact_id = artifact_id
        self.status_code = status_code


class ConsistencyError(EvictorError):
    """
    Internal accounting violation.

    Raised when storage is over the limit but nothing could be selected
    for eviction, or when the retained and deleted partitions do not
    cover the original inventory exactly once. Always fatal.
    """

    def __init__(
        self,
        message: str,
        *,
        current_size_bytes: int | None = None,
        max_size_bytes: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if current_size_bytes is not None:
            details["current_size_bytes"] = current_size_bytes
        if max_size_bytes is not None:
            details["max_size_bytes"] = max_size_bytes

        super().__init__(message, details=details)
        self.current_size_bytes = current_size_bytes
        self.max_size_bytes = max_size_bytes


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, EvictorError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def is_retriable_status(status_code: int | None) -> bool:
    """Return True for HTTP statuses worth retrying (rate limit, gateway errors)."""
    return status_code in (429, 502, 503, 504)
