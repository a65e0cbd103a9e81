"""
Report data structures for the test-run aggregator.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_SUITE_NAME = "Default Suite"


class TestStatus(Enum):
    """Status label of a finalized test record."""
    PASS = "PASS"
    FAIL = "FAIL"
    SKIP = "SKIP"
    ERROR = "ERROR"

    @property
    def css_class(self) -> str:
        return {
            TestStatus.PASS: "pass",
            TestStatus.FAIL: "fail",
        }.get(self, "skip")

    @property
    def icon(self) -> str:
        return {
            TestStatus.PASS: "✓",
            TestStatus.FAIL: "✗",
        }.get(self, "⊘")


class RunnerStatus(Enum):
    """Outcome vocabulary reported by the test runner."""
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMED_OUT = "timedOut"
    INTERRUPTED = "interrupted"


def status_from_runner(status) -> TestStatus:
    """Map a runner outcome onto a report status.

    Accepts a ``RunnerStatus`` or its string value. ``passed``, ``failed`` and
    ``skipped`` map to PASS, FAIL and SKIP. Every other outcome, including
    ``timedOut``, ``interrupted`` and unrecognised strings, is reported as PASS.
    """
    if not isinstance(status, RunnerStatus):
        try:
            status = RunnerStatus(status)
        except ValueError:
            return TestStatus.PASS

    if status is RunnerStatus.PASSED:
        return TestStatus.PASS
    elif status is RunnerStatus.FAILED:
        return TestStatus.FAIL
    elif status is RunnerStatus.SKIPPED:
        return TestStatus.SKIP
    else:
        # TIMED_OUT, INTERRUPTED
        return TestStatus.PASS


def duration_to_ms(value) -> int:
    """Whole non-negative milliseconds; missing, non-numeric or non-finite values become 0."""
    try:
        value = float(value or 0)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric test duration: {value!r}")
        return 0
    if not math.isfinite(value):
        logger.warning(f"Ignoring non-finite test duration: {value!r}")
        return 0
    return max(0, int(value))


@dataclass(frozen=True)
class Attachment:
    """Artifact (screenshot, trace, video) associated with a test."""
    name: str
    path: str = ""


@dataclass
class TestOutcome:
    """Payload of a test-end notification."""
    status: str
    duration_ms: float = 0
    error_message: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)


@dataclass
class TestRecord:
    """One executed test case."""
    name: str
    started_at: datetime
    status: TestStatus = TestStatus.PASS
    duration_ms: int = 0
    error_message: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)
    file: Optional[str] = None

    def finish(self, outcome: TestOutcome):
        """Apply the terminal outcome to this record."""
        self.status = status_from_runner(outcome.status)
        self.duration_ms = duration_to_ms(outcome.duration_ms)
        if self.status is TestStatus.FAIL and outcome.error_message:
            self.error_message = outcome.error_message
        self.attachments.extend(outcome.attachments)


@dataclass
class SuiteRecord:
    """Named grouping of test records in execution order."""
    name: str
    started_at: datetime
    tests: List[TestRecord] = field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        """Sum of the durations of the suite's tests."""
        return sum(test.duration_ms for test in self.tests)

    @property
    def failed_tests(self) -> int:
        return sum(1 for test in self.tests if test.status is TestStatus.FAIL)


@dataclass(frozen=True)
class ReportSummary:
    """Aggregate statistics over a finished run."""
    total_tests: int = 0
    passed_tests: int = 0
    failed_tests: int = 0
    skipped_tests: int = 0
    error_tests: int = 0
    total_duration_ms: int = 0

    @property
    def pass_rate_percent(self) -> float:
        """Pass rate as percentage, rounded to two decimals."""
        if self.total_tests == 0:
            return 0.0
        return round(self.passed_tests / self.total_tests * 100, 2)

    @property
    def duration_seconds(self) -> float:
        return self.total_duration_ms / 1000

    @classmethod
    def from_suites(cls, suites: List[SuiteRecord], total_duration_ms: int = 0) -> 'ReportSummary':
        """Tally status counts in a single pass over every suite and test."""
        counts = {status: 0 for status in TestStatus}
        total = 0
        for suite in suites:
            for test in suite.tests:
                total += 1
                counts[test.status] += 1

        return cls(
            total_tests=total,
            passed_tests=counts[TestStatus.PASS],
            failed_tests=counts[TestStatus.FAIL],
            skipped_tests=counts[TestStatus.SKIP],
            error_tests=counts[TestStatus.ERROR],
            total_duration_ms=total_duration_ms,
        )

    def to_dict(self) -> dict:
        return {
            'total_tests': self.total_tests,
            'passed_tests': self.passed_tests,
            'failed_tests': self.failed_tests,
            'skipped_tests': self.skipped_tests,
            'error_tests': self.error_tests,
            'pass_rate_percent': self.pass_rate_percent,
            'total_duration_ms': self.total_duration_ms,
        }
