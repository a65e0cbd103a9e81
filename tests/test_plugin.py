from datetime import datetime
from types import SimpleNamespace

import pytest

from skillsprig_reporting.plugin import ExtentReportPlugin, split_nodeid

PLUGIN = ("-p", "skillsprig_reporting.plugin")

LOGIN_TESTS = """
    import pytest

    def test_valid_login():
        assert True

    def test_invalid_login():
        assert 1 == 2, "Timeout"

    @pytest.mark.skip(reason="sso not configured")
    def test_sso_login():
        pass

    class TestLogout:
        def test_logout(self, record_property):
            record_property("attachment", "shots/logout.png")
"""


@pytest.mark.parametrize(
    "nodeid, expected",
    [
        ("tests/test_login.py::test_valid", ("tests/test_login.py", "test_valid", "tests/test_login.py")),
        (
            "tests/test_login.py::TestLogout::test_logout[chromium]",
            ("tests/test_login.py::TestLogout", "test_logout[chromium]", "tests/test_login.py"),
        ),
        ("tests/test_login.py", ("tests/test_login.py", "tests/test_login.py", "tests/test_login.py")),
    ],
)
def test_split_nodeid(nodeid, expected):
    assert split_nodeid(nodeid) == expected


def test_plugin_writes_report(pytester):
    pytester.makepyfile(test_login=LOGIN_TESTS)
    out = pytester.path / "extent-report"

    result = pytester.runpytest(*PLUGIN, "--extent-report", str(out))

    result.assert_outcomes(passed=2, failed=1, skipped=1)
    result.stdout.fnmatch_lines(["*extent report:*index.html*"])

    html = (out / "index.html").read_text(encoding="utf-8")
    assert html.count('class="test-row') == 4
    assert html.count('class="error-row"') == 1
    assert "AssertionError: Timeout" in html
    assert "<td>test_login.py</td>" in html
    assert "<td>test_login.py::TestLogout</td>" in html
    assert '<a href="shots/logout.png">logout.png</a>' in html
    assert '<span class="status skip">SKIP</span>' in html
    assert "50.00%" in html

    positions = [html.index(name) for name in ["test_valid_login", "test_invalid_login", "test_sso_login", "test_logout"]]
    assert positions == sorted(positions)


def test_plugin_reads_ini_options(pytester):
    pytester.makeini("""
        [pytest]
        extent_report_dir = reports
        extent_report_title = SkillSprig E2E
    """)
    pytester.makepyfile(test_home="""
        def test_homepage():
            pass
    """)

    result = pytester.runpytest(*PLUGIN)

    result.assert_outcomes(passed=1)
    html = (pytester.path / "reports" / "index.html").read_text(encoding="utf-8")
    assert "<h1>SkillSprig E2E</h1>" in html


def test_plugin_inactive_without_option(pytester):
    pytester.makepyfile(test_home="""
        def test_homepage():
            pass
    """)

    result = pytester.runpytest(*PLUGIN)

    result.assert_outcomes(passed=1)
    assert not (pytester.path / "extent-report").exists()
    assert "extent report:" not in result.stdout.str()


def test_plugin_reports_setup_errors_as_failures(pytester):
    pytester.makepyfile(test_booking="""
        import pytest

        @pytest.fixture
        def browser():
            raise RuntimeError("browser did not launch")

        def test_book_session(browser):
            pass
    """)
    out = pytester.path / "extent-report"

    result = pytester.runpytest(*PLUGIN, "--extent-report", str(out))

    result.assert_outcomes(errors=1)
    html = (out / "index.html").read_text(encoding="utf-8")
    assert '<span class="status fail">FAIL</span>' in html
    assert "browser did not launch" in html


def _call_report(nodeid, duration):
    return SimpleNamespace(
        nodeid=nodeid,
        when="call",
        duration=duration,
        failed=False,
        skipped=False,
        user_properties=[],
    )


def test_plugin_keeps_start_time_of_buffered_test(report_config):
    plugin = ExtentReportPlugin(report_config)
    plugin.pytest_sessionstart(None)
    nodeid = "tests/test_login.py::test_valid_login"

    before_start = datetime.now()
    plugin.pytest_runtest_logstart(nodeid, ("tests/test_login.py", 1, "test_valid_login"))
    after_start = datetime.now()
    plugin.pytest_runtest_logreport(_call_report(nodeid, 1.0))
    before_finish = datetime.now()
    plugin.pytest_runtest_logfinish(nodeid, ("tests/test_login.py", 1, "test_valid_login"))

    record = plugin.aggregator.suites[0].tests[0]
    assert before_start <= record.started_at <= after_start
    assert record.started_at <= before_finish
    assert record.duration_ms == 1000
    assert plugin.aggregator.suites[0].name == "tests/test_login.py"
