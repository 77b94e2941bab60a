"""
Artifact Evictor Reporting Module.

Renders a CleanupSummary as log lines, step outputs and a markdown job
summary, and echoes warnings as workflow annotations on a runner.
"""

from .annotations import WorkflowCommandHandler, annotations_enabled
from .console import ConsoleReporter
from .job_summary import render_job_summary, write_job_summary
from .outputs import build_outputs, write_outputs

__all__ = [
    "WorkflowCommandHandler",
    "annotations_enabled",
    "ConsoleReporter",
    "build_outputs",
    "write_outputs",
    "render_job_summary",
    "write_job_summary",
]
