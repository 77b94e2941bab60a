"""
Artifact Evictor CLI - Command-line interface.

Enforce an artifact storage budget from a workflow step or a terminal.
"""

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from artifact_evictor.artifacts.selection import calculate_age
from artifact_evictor.artifacts.stats import calculate_stats, format_gb, format_mb, is_over_limit
from artifact_evictor.config import EvictionConfig, load_config
from artifact_evictor.core.result import Err
from artifact_evictor.orchestrator.core import EvictionOrchestrator
from artifact_evictor.reporting.annotations import WorkflowCommandHandler, annotations_enabled

app = typer.Typer(
    name="artifact-evictor",
    help="Artifact Evictor - keep workflow artifact storage under a size limit",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose."""
    handlers: list[logging.Handler] = [
        RichHandler(console=console, show_path=False, markup=False)
    ]
    if annotations_enabled():
        handlers.append(WorkflowCommandHandler())

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def _load_or_exit(overrides: dict[str, Any], config_file: Optional[Path]) -> EvictionConfig:
    """Load configuration or exit with status 1."""
    result = load_config(overrides=overrides, config_file=config_file)
    if isinstance(result, Err):
        logger.error(f"Configuration error: {result.error}")
        raise typer.Exit(1)
    return result.value


@app.command()
def evict(
    repository: Optional[str] = typer.Option(
        None, "--repo", "-r", help="Repository as owner/repo (default: $GITHUB_REPOSITORY)"
    ),
    max_size_gb: Optional[float] = typer.Option(
        None, "--max-size-gb", "-m", help="Storage limit in GB (default: $INPUT_MAX_SIZE_GB)"
    ),
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (default: $INPUT_TOKEN or $GITHUB_TOKEN)"
    ),
    dry_run: Optional[bool] = typer.Option(
        None, "--dry-run/--no-dry-run", help="Report what would be deleted (default: $INPUT_DRY_RUN)"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Concurrent delete requests"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Delete the oldest artifacts until storage fits the limit."""
    _configure_logging(verbose)

    config = _load_or_exit(
        {
            "repository": repository,
            "max_size_gb": max_size_gb,
            "token": token,
            "dry_run": dry_run,
            "max_workers": workers,
        },
        config_file,
    )

    with EvictionOrchestrator(config) as orchestrator:
        result = orchestrator.run()

    if isinstance(result, Err):
        logger.error(f"Eviction failed: {result.error}")
        raise typer.Exit(1)

    summary = result.value.summary
    if summary.has_failures:
        console.print(
            f"[yellow]Completed with {len(summary.failures)} failed deletion(s)[/yellow]"
        )


@app.command()
def stats(
    repository: Optional[str] = typer.Option(
        None, "--repo", "-r", help="Repository as owner/repo (default: $GITHUB_REPOSITORY)"
    ),
    max_size_gb: Optional[float] = typer.Option(
        None, "--max-size-gb", "-m", help="Storage limit in GB (default: $INPUT_MAX_SIZE_GB)"
    ),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="API token"),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration file"
    ),
):
    """Show storage usage and what an eviction would remove. Never deletes."""
    _configure_logging(False)

    config = _load_or_exit(
        {"repository": repository, "max_size_gb": max_size_gb, "token": token},
        config_file,
    )

    with EvictionOrchestrator(config) as orchestrator:
        fetched = orchestrator.fetch_artifacts()
        if isinstance(fetched, Err):
            logger.error(f"Fetch failed: {fetched.error}")
            raise typer.Exit(1)
        artifacts = fetched.value
        planned = orchestrator.plan(artifacts)

    if isinstance(planned, Err):
        logger.error(str(planned.error))
        raise typer.Exit(1)

    current = calculate_stats(artifacts)
    over = is_over_limit(current.total_size_bytes, config.max_size_bytes)
    status = "[red]over limit[/red]" if over else "[green]within limit[/green]"

    console.print(
        Panel.fit(
            f"[bold blue]Artifact Storage[/bold blue]\n"
            f"Repository: {config.repository}\n"
            f"Artifacts: {current.total_count}\n"
            f"Total size: {format_gb(current.total_size_gb)} GB\n"
            f"Limit: {format_gb(config.max_size_gb)} GB ({status})",
        )
    )

    selected = planned.value
    if not selected:
        console.print("Nothing would be deleted.")
        return

    table = Table(title=f"Would Delete ({len(selected)})")
    table.add_column("Name", style="cyan")
    table.add_column("ID", style="dim")
    table.add_column("Size (MB)", justify="right")
    table.add_column("Age (days)", justify="right")

    for artifact in selected:
        table.add_row(
            artifact.name,
            str(artifact.id),
            format_mb(artifact.size_in_bytes),
            str(calculate_age(artifact.created_at)),
        )

    console.print(table)


@app.command()
def version():
    """Show Artifact Evictor version."""
    from artifact_evictor import __version__

    console.print(f"Artifact Evictor v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
