"""
Machine-readable step outputs.

Writes ``key=value`` lines to the file named by $GITHUB_OUTPUT so later
workflow steps can read the run's results.
"""

import logging
import os
from pathlib import Path

from artifact_evictor.artifacts.models import CleanupSummary
from artifact_evictor.artifacts.stats import format_gb

logger = logging.getLogger(__name__)


def build_outputs(summary: CleanupSummary, was_over_limit: bool) -> dict[str, str]:
    """Return the step outputs for a finished run."""
    return {
        "deleted_count": str(summary.deleted_count),
        "freed_gb": format_gb(summary.freed_gb),
        "final_size_gb": format_gb(summary.final_size_gb),
        "was_over_limit": "true" if was_over_limit else "false",
    }


def write_outputs(outputs: dict[str, str], path: Path | None = None) -> bool:
    """
    Append outputs to the step output file.

    Args:
        outputs: Output names and values
        path: Output file, defaults to $GITHUB_OUTPUT

    Returns:
        True if written, False when no output file is configured
    """
    if path is None:
        env_path = os.getenv("GITHUB_OUTPUT")
        if not env_path:
            logger.debug("GITHUB_OUTPUT not set, skipping step outputs")
            return False
        path = Path(env_path)

    with open(path, "a", encoding="utf-8") as f:
        for key, value in outputs.items():
            f.write(f"{key}={value}\n")
    return True
