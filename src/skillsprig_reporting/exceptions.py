"""
Exceptions raised by the reporting package.
"""

from pathlib import Path
from typing import Optional


class ReportError(Exception):
    """Base class for reporting errors."""


class ReportWriteError(ReportError):
    """A report artifact could not be written to disk."""

    def __init__(self, path: Path, cause: Optional[OSError] = None):
        self.path = Path(path)
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to write report to {self.path}{detail}")
