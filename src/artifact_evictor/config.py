"""
Eviction configuration.

Settings are merged from, in rising priority:
- an optional YAML file
- the environment (GitHub Actions inputs and runner variables)
- explicit overrides (CLI options)

Environment variables:
- INPUT_TOKEN / GITHUB_TOKEN: API token
- GITHUB_REPOSITORY: "owner/repo"
- INPUT_MAX_SIZE_GB: storage limit in GiB
- INPUT_DRY_RUN: "true" to simulate deletions
- EVICTOR_MAX_WORKERS: concurrent delete requests
- GITHUB_API_URL: API base URL (GitHub Enterprise)
"""

import logging
import math
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from artifact_evictor.artifacts.stats import gb_to_bytes
from artifact_evictor.core.exceptions import ConfigurationError
from artifact_evictor.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_MAX_WORKERS = 8

CONFIG_KEYS = ("repository", "max_size_gb", "token", "dry_run", "max_workers", "api_url")


class EvictionConfig(BaseModel):
    """Validated settings for one eviction run."""

    owner: str = Field(description="Repository owner (user or organization)")
    repo: str = Field(description="Repository name")
    max_size_gb: float = Field(gt=0, description="Storage limit in GiB")
    token: SecretStr = Field(description="API token")
    dry_run: bool = Field(default=False, description="Simulate deletions")
    max_workers: int = Field(
        default=DEFAULT_MAX_WORKERS, ge=1, le=64, description="Concurrent delete requests"
    )
    api_url: str = Field(default=DEFAULT_API_URL, description="API base URL")

    model_config = {"frozen": True}

    @field_validator("owner", "repo")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty owner/repo segments."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def repository(self) -> str:
        """Return "owner/repo"."""
        return f"{self.owner}/{self.repo}"

    @property
    def max_size_bytes(self) -> int:
        """Storage limit in bytes."""
        return gb_to_bytes(self.max_size_gb)


def _env_settings(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect settings present in the environment."""
    settings: dict[str, Any] = {}

    token = environ.get("INPUT_TOKEN") or environ.get("GITHUB_TOKEN")
    if token:
        settings["token"] = token
    if environ.get("GITHUB_REPOSITORY"):
        settings["repository"] = environ["GITHUB_REPOSITORY"]
    if environ.get("INPUT_MAX_SIZE_GB"):
        settings["max_size_gb"] = environ["INPUT_MAX_SIZE_GB"]
    if environ.get("INPUT_DRY_RUN"):
        settings["dry_run"] = environ["INPUT_DRY_RUN"]
    if environ.get("EVICTOR_MAX_WORKERS"):
        settings["max_workers"] = environ["EVICTOR_MAX_WORKERS"]
    if environ.get("GITHUB_API_URL"):
        settings["api_url"] = environ["GITHUB_API_URL"]

    return settings


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load settings from a YAML file.

    Args:
        path: YAML file with any of the keys in CONFIG_KEYS

    Returns:
        Mapping of recognised settings

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration file: {e}", config_file=str(path)
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {e}", config_file=str(path)
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping", config_file=str(path)
        )

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        logger.warning(f"Ignoring unknown configuration keys in {path}: {', '.join(unknown)}")

    return {key: data[key] for key in CONFIG_KEYS if data.get(key) is not None}


def parse_repository(repository: str) -> tuple[str, str]:
    """
    Split "owner/repo".

    Raises:
        ConfigurationError: If the value is not exactly two non-empty segments
    """
    parts = repository.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ConfigurationError(
            f"Invalid repository format: {repository!r} (expected owner/repo)",
            env_var="GITHUB_REPOSITORY",
        )
    return parts[0], parts[1]


def parse_max_size_gb(value: Any) -> float:
    """
    Parse the storage limit.

    Raises:
        ConfigurationError: If the value is not a positive finite number
    """
    try:
        max_size_gb = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(
            f"Invalid max_size_gb value: {value!r}", config_key="max_size_gb"
        ) from None

    if math.isnan(max_size_gb) or math.isinf(max_size_gb) or max_size_gb <= 0:
        raise ConfigurationError(
            f"Invalid max_size_gb value: {value!r} (must be a positive number)",
            config_key="max_size_gb",
        )
    return max_size_gb


def parse_bool(value: Any) -> bool:
    """Interpret Action-style booleans; only "true" (any case) is truthy."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def load_config(
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> Result[EvictionConfig, ConfigurationError]:
    """
    Build an EvictionConfig from file, environment and overrides.

    Args:
        overrides: Highest-priority settings; None values are ignored
        environ: Environment mapping, defaults to os.environ
        config_file: Optional YAML file

    Returns:
        Ok(EvictionConfig) or Err(ConfigurationError)
    """
    environ = os.environ if environ is None else environ
    settings: dict[str, Any] = {}

    try:
        if config_file is not None:
            settings.update(load_config_file(config_file))
        settings.update(_env_settings(environ))
        settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

        token = settings.get("token")
        if not token:
            return Err(
                ConfigurationError(
                    "No token provided. Set the 'token' input or ensure GITHUB_TOKEN is available.",
                    env_var="GITHUB_TOKEN",
                )
            )

        repository = settings.get("repository")
        if not repository:
            return Err(
                ConfigurationError("GITHUB_REPOSITORY is not set", env_var="GITHUB_REPOSITORY")
            )
        owner, repo = parse_repository(str(repository))

        if "max_size_gb" not in settings:
            return Err(
                ConfigurationError("max_size_gb is not set", env_var="INPUT_MAX_SIZE_GB")
            )
        max_size_gb = parse_max_size_gb(settings["max_size_gb"])

        config = EvictionConfig(
            owner=owner,
            repo=repo,
            max_size_gb=max_size_gb,
            token=SecretStr(str(token)),
            dry_run=parse_bool(settings.get("dry_run", False)),
            max_workers=settings.get("max_workers", DEFAULT_MAX_WORKERS),
            api_url=settings.get("api_url", DEFAULT_API_URL),
        )
    except ConfigurationError as e:
        return Err(e)
    except ValidationError as e:
        return Err(
            ConfigurationError(
                "Invalid configuration",
                details={"errors": [err["msg"] for err in e.errors()]},
            )
        )

    return Ok(config)
