"""
skillsprig_reporting
====================

Extent-style HTML reporting for the SkillSprig end-to-end test suite.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("skillsprig-reporting")
except PackageNotFoundError:
    __version__ = "0.0.0"

from .aggregator import ReportAggregator
from .config import ReportConfig
from .exceptions import ReportError, ReportWriteError
from .reporter import HtmlReporter
from .result import (
    Attachment,
    ReportSummary,
    RunnerStatus,
    SuiteRecord,
    TestOutcome,
    TestRecord,
    TestStatus,
)


def main():
    """Main entry point for the package."""
    from .cli import main as cli_main
    cli_main()


# Specify what’s available at package level
__all__ = [
    "main",
    "Attachment",
    "HtmlReporter",
    "ReportAggregator",
    "ReportConfig",
    "ReportError",
    "ReportSummary",
    "ReportWriteError",
    "RunnerStatus",
    "SuiteRecord",
    "TestOutcome",
    "TestRecord",
    "TestStatus",
]
