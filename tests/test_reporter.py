import json
from datetime import datetime

import pytest

from skillsprig_reporting.config import ReportConfig
from skillsprig_reporting.reporter import HtmlReporter
from skillsprig_reporting.result import (
    Attachment,
    ReportSummary,
    SuiteRecord,
    TestOutcome,
    TestRecord,
)

DANGEROUS = "<script>&\"'</script>"


def _record(name, status="passed", duration=100, **kwargs):
    record = TestRecord(name=name, started_at=datetime(2026, 10, 17, 9, 30))
    record.finish(TestOutcome(status=status, duration_ms=duration, **kwargs))
    return record


@pytest.fixture
def reporter(report_config):
    return HtmlReporter(report_config)


def _render(reporter, suites):
    summary = ReportSummary.from_suites(suites, total_duration_ms=1234)
    return reporter.render_html(suites, summary, generated_at=datetime(2026, 10, 17, 10, 0))


def test_test_derived_text_is_escaped(reporter):
    suite = SuiteRecord(name=DANGEROUS, started_at=datetime.now())
    suite.tests.append(_record(DANGEROUS, "failed", error_message=DANGEROUS))

    html = _render(reporter, [suite])

    assert "<script>" not in html
    assert "</script>" not in html
    assert html.count("&lt;script&gt;&amp;&#34;&#39;&lt;/script&gt;") == 3


def test_error_row_follows_failed_test(reporter):
    suite = SuiteRecord(name="Login Tests", started_at=datetime.now())
    suite.tests.append(_record("invalid login", "failed", 800, error_message="Timeout"))
    suite.tests.append(_record("valid login", "passed", 1200))

    html = _render(reporter, [suite])

    failed_row = html.index("invalid login")
    error_row = html.index('class="error-row"')
    passed_row = html.index("valid login", failed_row + len("invalid login"))
    assert failed_row < error_row < passed_row
    assert '<td colspan="4"><pre>Timeout</pre></td>' in html


def test_failure_without_message_has_no_error_row(reporter):
    suite = SuiteRecord(name="Login Tests", started_at=datetime.now())
    suite.tests.append(_record("invalid login", "failed"))

    assert 'class="error-row"' not in _render(reporter, [suite])


def test_rows_show_suite_status_and_duration(reporter):
    suite = SuiteRecord(name="Mentor Discovery", started_at=datetime.now())
    suite.tests.append(_record("search mentors", "skipped", 42))

    html = _render(reporter, [suite])

    assert "<td>Mentor Discovery</td>" in html
    assert '<span class="status skip">SKIP</span>' in html
    assert "<td>42ms</td>" in html


def test_summary_statistics_are_rendered(reporter):
    suite = SuiteRecord(name="Booking", started_at=datetime.now())
    suite.tests.extend([
        _record("book", "passed"),
        _record("pay", "passed"),
        _record("refund", "failed"),
    ])

    html = _render(reporter, [suite])

    assert '<div class="value">3</div>' in html
    assert '<div class="value">2</div>' in html
    assert "66.67%" in html
    assert "1.23s" in html
    assert "Generated on 2026-10-17 10:00:00" in html


def test_title_comes_from_config(tmp_path):
    config = ReportConfig(output_directory=str(tmp_path), report_title="SkillSprig E2E")
    html = _render(HtmlReporter(config), [])
    assert "<title>SkillSprig E2E</title>" in html
    assert "<h1>SkillSprig E2E</h1>" in html


def test_attachments_are_linked(reporter):
    suite = SuiteRecord(name="Visual", started_at=datetime.now())
    suite.tests.append(_record(
        "homepage",
        attachments=[Attachment("screenshot", "shots/home.png"), Attachment("video")],
    ))

    html = _render(reporter, [suite])

    assert '<a href="shots/home.png">screenshot</a>' in html
    assert "<span>video</span>" in html


def test_json_summary(reporter, report_config):
    suite = SuiteRecord(name="Login Tests", started_at=datetime.now())
    suite.tests.append(_record("invalid login", "failed", 800, error_message="Timeout"))
    summary = ReportSummary.from_suites([suite], total_duration_ms=900)

    path = reporter.write_json_summary([suite], summary)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["summary"]["failed_tests"] == 1
    assert data["summary"]["pass_rate_percent"] == 0
    assert data["suites"][0]["name"] == "Login Tests"
    assert data["suites"][0]["tests"][0]["error_message"] == "Timeout"
    assert data["suites"][0]["tests"][0]["status"] == "FAIL"


def test_console_summary_lists_failures(reporter):
    suite = SuiteRecord(name="Login Tests", started_at=datetime.now())
    suite.tests.append(_record("valid login"))
    suite.tests.append(_record("invalid login", "failed", error_message="Timeout\nstack"))
    summary = ReportSummary.from_suites([suite])

    text = reporter.format_console_summary([suite], summary)

    assert "Total Tests: 2" in text
    assert "Pass Rate: 50.00%" in text
    assert "✗ invalid login [Login Tests]" in text
    assert "Timeout" in text
    assert "stack" not in text
