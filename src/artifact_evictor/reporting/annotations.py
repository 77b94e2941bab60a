"""
Workflow annotations.

On a GitHub Actions runner, WARNING and ERROR log records are echoed as
``::warning::`` and ``::error::`` workflow commands so they show up as
annotations on the run.
"""

import logging
import os
import sys
from typing import Mapping, TextIO


def annotations_enabled(environ: Mapping[str, str] | None = None) -> bool:
    """Return True when running inside a GitHub Actions job."""
    env = os.environ if environ is None else environ
    return env.get("GITHUB_ACTIONS") == "true"


def escape_data(message: str) -> str:
    """Escape a message for use as workflow command data."""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandHandler(logging.Handler):
    """Writes WARNING and ERROR records as workflow commands."""

    def __init__(self, stream: TextIO | None = None):
        """
        Args:
            stream: Destination, defaults to whatever sys.stdout is at emit time
        """
        super().__init__(level=logging.WARNING)
        self._stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            command = "error" if record.levelno >= logging.ERROR else "warning"
            stream = self._stream or sys.stdout
            stream.write(f"::{command}::{escape_data(self.format(record))}\n")
            stream.flush()
        except Exception:
            self.handleError(record)
