"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from typing import Callable

import pytest

from artifact_evictor.artifacts.models import Artifact
from artifact_evictor.config import EvictionConfig
from artifact_evictor.artifacts.stats import BYTES_PER_GB

# Variables a GitHub Actions runner would leak into the test process
RUNNER_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
    "GITHUB_API_URL",
    "INPUT_TOKEN",
    "INPUT_MAX_SIZE_GB",
    "INPUT_DRY_RUN",
    "EVICTOR_MAX_WORKERS",
    "GITHUB_ACTIONS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test without runner-provided configuration."""
    for name in RUNNER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_artifact() -> Callable[..., Artifact]:
    """Factory for artifacts with sensible defaults."""

    def _make(
        id: int,
        size_in_bytes: int = 100,
        created_at: datetime | str | None = "2024-01-01T00:00:00Z",
        name: str | None = None,
    ) -> Artifact:
        return Artifact(
            id=id,
            name=name or f"artifact-{id}",
            size_in_bytes=size_in_bytes,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def quarterly_artifacts(make_artifact) -> list[Artifact]:
    """Three 100-byte artifacts created in January, February and March."""
    return [
        make_artifact(1, 100, "2024-01-01T00:00:00Z", name="jan"),
        make_artifact(2, 100, "2024-02-01T00:00:00Z", name="feb"),
        make_artifact(3, 100, "2024-03-01T00:00:00Z", name="mar"),
    ]


@pytest.fixture
def make_config() -> Callable[..., EvictionConfig]:
    """Factory for configs with the limit given in bytes."""

    def _make(max_size_bytes: int = 250, dry_run: bool = False, max_workers: int = 4) -> EvictionConfig:
        return EvictionConfig(
            owner="octo",
            repo="widgets",
            max_size_gb=max_size_bytes / BYTES_PER_GB,
            token="test-token",
            dry_run=dry_run,
            max_workers=max_workers,
        )

    return _make


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used for artifact ages."""
    return datetime(2024, 4, 1, tzinfo=timezone.utc)
