"""
Aggregation of test-lifecycle notifications into a report model.
"""

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Tuple

from .config import ReportConfig
from .events import dispatch
from .reporter import HtmlReporter
from .result import (
    DEFAULT_SUITE_NAME,
    ReportSummary,
    SuiteRecord,
    TestOutcome,
    TestRecord,
)

logger = logging.getLogger(__name__)


class ReportAggregator:
    """Accumulates suites and tests from runner callbacks and writes the report.

    Callbacks must be delivered from a single execution context, in lifecycle
    order: run begin, then any number of suite/test notifications, then run end.
    Protocol anomalies (a test-end without a test-begin, a test-begin while
    another test is still open) are absorbed rather than raised. The only error
    surfaced to callers is ``ReportWriteError`` from ``on_run_end``.
    """

    def __init__(
        self,
        config: Optional[ReportConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or ReportConfig()
        self.reporter = HtmlReporter(self.config)
        self._clock = clock
        self._start = clock()
        self._suites = []
        self._current_suite: Optional[SuiteRecord] = None
        self._current_test: Optional[TestRecord] = None
        self.discarded_tests = 0

    @property
    def suites(self) -> Tuple[SuiteRecord, ...]:
        return tuple(self._suites)

    @property
    def current_suite(self) -> Optional[SuiteRecord]:
        return self._current_suite

    @property
    def current_test(self) -> Optional[TestRecord]:
        return self._current_test

    def on_run_begin(self):
        """Start the run timer with an empty store."""
        self._start = self._clock()
        self._suites = []
        self._current_suite = None
        self._current_test = None
        self.discarded_tests = 0
        logger.info("Extent Reporter: Starting test execution")

    def on_suite_begin(self, suite_name: Optional[str] = None):
        """Open a new suite; later tests are attached to it."""
        self._current_suite = self._open_suite(suite_name or DEFAULT_SUITE_NAME)

    def on_test_begin(
        self,
        test_name: str,
        file: Optional[str] = None,
        started_at: Optional[datetime] = None,
    ):
        """Start tracking a test in the current suite.

        ``started_at`` defaults to now; runners that buffer results pass the
        time the test actually began.
        """
        if self._current_suite is None:
            self._current_suite = self._open_suite(file or DEFAULT_SUITE_NAME)

        if self._current_test is not None:
            self._discard_current_test(f"'{test_name}' began before it ended")

        self._current_test = TestRecord(
            name=test_name,
            started_at=started_at or datetime.now(),
            file=file,
        )
        logger.debug(f"Test started: {test_name} [{self._current_suite.name}]")

    def on_test_end(self, outcome: TestOutcome):
        """Finalize the current test and append it to the current suite."""
        if self._current_test is None:
            logger.debug(f"Ignoring test end without a started test (status={outcome.status})")
            return

        test = self._current_test
        test.finish(outcome)
        self._current_suite.tests.append(test)
        self._current_test = None
        logger.debug(f"Test finished: {test.name} {test.status.value} ({test.duration_ms}ms)")

    def summarize(self) -> ReportSummary:
        """Compute summary statistics for the tests finalized so far."""
        elapsed_ms = int((self._clock() - self._start) * 1000)
        return ReportSummary.from_suites(self._suites, total_duration_ms=max(0, elapsed_ms))

    def on_run_end(self) -> Path:
        """Write the report artifacts and return the HTML report path.

        Raises:
            ReportWriteError: if an artifact cannot be written.
        """
        if self._current_test is not None:
            self._discard_current_test("run ended before it finished")

        summary = self.summarize()
        suites = self.suites

        report_path = self.reporter.write_html_report(suites, summary)
        if self.config.generate_json_report:
            self.reporter.write_json_summary(suites, summary)

        logger.info("\n" + self.reporter.format_console_summary(suites, summary))
        return report_path

    def handle(self, event):
        """Dispatch a single lifecycle event object onto this aggregator."""
        return dispatch(self, event)

    def _open_suite(self, name: str) -> SuiteRecord:
        suite = SuiteRecord(name=name, started_at=datetime.now())
        self._suites.append(suite)
        logger.debug(f"Suite started: {name}")
        return suite

    def _discard_current_test(self, reason: str):
        logger.warning(f"Discarding unfinished test '{self._current_test.name}': {reason}")
        self._current_test = None
        self.discarded_tests += 1
