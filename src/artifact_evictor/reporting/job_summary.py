"""
Markdown job summary for the Actions run page ($GITHUB_STEP_SUMMARY).
"""

import logging
import os
from pathlib import Path

from artifact_evictor.artifacts.models import CleanupSummary
from artifact_evictor.artifacts.stats import format_gb
from artifact_evictor.config import EvictionConfig

logger = logging.getLogger(__name__)


def _closing_line(summary: CleanupSummary, was_over_limit: bool) -> str:
    if not was_over_limit:
        return "Storage was already under the limit. No cleanup needed."
    if summary.deleted_count > 0:
        return (
            f"Deleted {summary.deleted_count} artifact(s) to free "
            f"{format_gb(summary.freed_gb)} GB."
        )
    return "Storage was over limit but no artifacts could be deleted."


def render_job_summary(
    summary: CleanupSummary,
    config: EvictionConfig,
    was_over_limit: bool,
) -> str:
    """
    Render the run as a markdown heading, metrics table and closing sentence.

    Args:
        summary: Finished run accounting
        config: Run configuration (limit and dry-run label)
        was_over_limit: Whether the initial size exceeded the limit

    Returns:
        Markdown text
    """
    under_limit = summary.final_size_bytes <= config.max_size_bytes
    status_icon = "✅" if under_limit else "⚠️"
    mode_label = " (Dry Run)" if config.dry_run else ""

    rows = [
        ("Storage Limit", f"{format_gb(config.max_size_gb)} GB"),
        ("Initial Size", f"{format_gb(summary.initial.total_size_gb)} GB"),
        ("Artifacts Deleted", str(summary.deleted_count)),
        ("Space Freed", f"{format_gb(summary.freed_gb)} GB"),
        ("Final Size", f"{status_icon} {format_gb(summary.final_size_gb)} GB"),
    ]
    if summary.has_failures:
        rows.append(("Failed Deletions", str(len(summary.failures))))

    lines = [
        f"## Artifact Eviction{mode_label}",
        "",
        "| Metric | Value |",
        "| --- | --- |",
    ]
    lines.extend(f"| {metric} | {value} |" for metric, value in rows)
    lines.append("")
    lines.append(_closing_line(summary, was_over_limit))
    return "\n".join(lines) + "\n"


def write_job_summary(markdown: str, path: Path | None = None) -> bool:
    """
    Append markdown to the job summary file.

    Returns:
        True if written, False when $GITHUB_STEP_SUMMARY is not set
    """
    if path is None:
        env_path = os.getenv("GITHUB_STEP_SUMMARY")
        if not env_path:
            logger.debug("GITHUB_STEP_SUMMARY not set, skipping job summary")
            return False
        path = Path(env_path)

    with open(path, "a", encoding="utf-8") as f:
        f.write(markdown)
    return True
