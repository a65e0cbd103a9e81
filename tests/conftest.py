"""Shared fixtures for the reporting tests."""

import pytest

from skillsprig_reporting.config import ReportConfig

pytest_plugins = ["pytester"]


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def report_config(tmp_path):
    return ReportConfig(output_directory=str(tmp_path / "extent-report"))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv("SKILLSPRIG_REPORT_DIR", raising=False)
