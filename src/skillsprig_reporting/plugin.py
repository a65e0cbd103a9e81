"""
pytest plugin that writes the extent HTML report for a test session.

Enable it with ``--extent-report DIR`` or the ``extent_report_dir`` ini option.
Each module (and test class) becomes a suite, each test item a test record.
"""

import logging
import os
from datetime import datetime
from typing import Optional

import pytest

from .aggregator import ReportAggregator
from .config import ReportConfig
from .result import Attachment, RunnerStatus, TestOutcome

logger = logging.getLogger(__name__)

PLUGIN_NAME = "skillsprig-extent-report"


def pytest_addoption(parser: pytest.Parser):
    group = parser.getgroup("extent-report", "extent HTML report")
    group.addoption(
        "--extent-report",
        action="store",
        dest="extent_report_dir",
        metavar="DIR",
        default=None,
        help="Write an extent HTML report into DIR.",
    )
    parser.addini("extent_report_dir", help="Directory for the extent HTML report.")
    parser.addini("extent_report_title", help="Title shown in the extent HTML report.")


def pytest_configure(config: pytest.Config):
    output_dir = config.getoption("extent_report_dir") or config.getini("extent_report_dir")
    # xdist workers report to the controller; only it aggregates.
    if not output_dir or hasattr(config, "workerinput"):
        return

    report_config = ReportConfig(output_directory=str(output_dir))
    title = config.getini("extent_report_title")
    if title:
        report_config.report_title = title

    logger.debug(f"Extent report enabled: {report_config.get_report_path()}")
    config.pluginmanager.register(ExtentReportPlugin(report_config), PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config):
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin)


def split_nodeid(nodeid: str):
    """Split a node id into ``(suite name, test name, file)``."""
    parts = nodeid.split("::")
    if len(parts) == 1:
        return parts[0], parts[0], parts[0]
    return "::".join(parts[:-1]), parts[-1], parts[0]


def crash_message(report) -> Optional[str]:
    """Short failure message for a failed report phase."""
    reprcrash = getattr(report.longrepr, "reprcrash", None)
    if reprcrash is not None and reprcrash.message:
        return reprcrash.message
    text = report.longreprtext.strip()
    if not text:
        return None
    return text.splitlines()[-1]


class _PendingTest:
    """Outcome of a test item collected across its setup/call/teardown phases."""

    def __init__(self, started_at: Optional[datetime] = None):
        self.started_at = started_at or datetime.now()
        self.status = RunnerStatus.PASSED
        self.duration = 0.0
        self.error_message = None
        self.attachments = []

    def update(self, report: pytest.TestReport):
        self.duration += report.duration
        if report.failed:
            if self.status is not RunnerStatus.FAILED:
                self.status = RunnerStatus.FAILED
                self.error_message = crash_message(report)
        elif report.skipped and report.when in ("setup", "call"):
            if self.status is RunnerStatus.PASSED:
                self.status = RunnerStatus.SKIPPED

        self.attachments = [
            Attachment(name=os.path.basename(str(value)), path=str(value))
            for name, value in report.user_properties
            if name == "attachment"
        ]

    def to_outcome(self) -> TestOutcome:
        return TestOutcome(
            status=self.status.value,
            duration_ms=self.duration * 1000,
            error_message=self.error_message,
            attachments=list(self.attachments),
        )


class ExtentReportPlugin:
    """Feeds pytest's reporting hooks into a ``ReportAggregator``.

    Phase reports are buffered per node id from the moment the test starts,
    and each test is handed to the aggregator as one begin/end pair, carrying
    its real start time, when its last phase finishes. Reports arriving
    interleaved from several xdist workers thus stay serialized.
    """

    def __init__(self, config: ReportConfig):
        self.aggregator = ReportAggregator(config)
        self.report_path = None
        self._pending = {}
        self._suite_name = None

    def pytest_sessionstart(self, session):
        self.aggregator.on_run_begin()

    def pytest_runtest_logstart(self, nodeid, location):
        self._pending[nodeid] = _PendingTest(started_at=datetime.now())

    def pytest_runtest_logreport(self, report: pytest.TestReport):
        self._pending.setdefault(report.nodeid, _PendingTest()).update(report)

    def pytest_runtest_logfinish(self, nodeid, location):
        pending = self._pending.pop(nodeid, None)
        if pending is None:
            return

        suite_name, test_name, file = split_nodeid(nodeid)
        if suite_name != self._suite_name:
            self.aggregator.on_suite_begin(suite_name)
            self._suite_name = suite_name
        self.aggregator.on_test_begin(test_name, file=file, started_at=pending.started_at)
        self.aggregator.on_test_end(pending.to_outcome())

    def pytest_sessionfinish(self, session, exitstatus):
        self.report_path = self.aggregator.on_run_end()

    def pytest_terminal_summary(self, terminalreporter):
        if self.report_path is not None:
            terminalreporter.write_sep("-", f"extent report: {self.report_path}")

