"""
Report rendering and output generation.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from jinja2 import Template

from .config import ReportConfig
from .exceptions import ReportWriteError
from .result import ReportSummary, SuiteRecord, TestStatus

logger = logging.getLogger(__name__)

JSON_SUMMARY_FILENAME = "summary.json"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }
    body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); min-height: 100vh; padding: 20px; }
    .container { max-width: 1200px; margin: 0 auto; background: white; border-radius: 10px; box-shadow: 0 20px 60px rgba(0, 0, 0, 0.3); overflow: hidden; }
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 40px; text-align: center; }
    .header h1 { font-size: 2.5em; margin-bottom: 10px; font-weight: 600; }
    .header p { font-size: 1.1em; opacity: 0.9; }
    .stats-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 20px; padding: 40px; background: #f8f9fa; }
    .stat-card { background: white; padding: 20px; border-radius: 8px; border-left: 4px solid #667eea; box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1); }
    .stat-card h3 { color: #666; font-size: 0.9em; margin-bottom: 8px; text-transform: uppercase; }
    .stat-card .value { font-size: 2.5em; font-weight: bold; color: #333; }
    .stat-card.pass { border-left-color: #10b981; }
    .stat-card.pass .value { color: #10b981; }
    .stat-card.fail { border-left-color: #ef4444; }
    .stat-card.fail .value { color: #ef4444; }
    .stat-card.skip { border-left-color: #f59e0b; }
    .stat-card.skip .value { color: #f59e0b; }
    .progress-bar { width: 100%; height: 8px; background: #e5e7eb; border-radius: 4px; overflow: hidden; margin-top: 10px; }
    .progress-fill { height: 100%; background: linear-gradient(90deg, #10b981 0%, #6366f1 100%); border-radius: 4px; }
    .content { padding: 40px; }
    .content h2 { color: #333; margin-bottom: 20px; font-size: 1.5em; }
    table { width: 100%; border-collapse: collapse; margin-top: 20px; }
    thead { background: #f3f4f6; border-bottom: 2px solid #e5e7eb; }
    th { padding: 15px; text-align: left; color: #374151; font-weight: 600; font-size: 0.9em; text-transform: uppercase; }
    td { padding: 15px; border-bottom: 1px solid #e5e7eb; }
    tr:hover { background: #f9fafb; }
    tr.error-row { background: #fef2f2; }
    tr.error-row pre { background: #fee; padding: 10px; border-radius: 4px; overflow-x: auto; color: #c41e3a; font-size: 0.85em; }
    .status-badge { display: inline-flex; align-items: center; justify-content: center; width: 24px; height: 24px; border-radius: 50%; color: white; font-weight: bold; margin-right: 8px; }
    .status-badge.pass { background: #10b981; }
    .status-badge.fail { background: #ef4444; }
    .status-badge.skip { background: #f59e0b; }
    .status { display: inline-block; padding: 4px 12px; border-radius: 20px; font-size: 0.85em; font-weight: 600; }
    .status.pass { background: #d1fae5; color: #065f46; }
    .status.fail { background: #fee2e2; color: #991b1b; }
    .status.skip { background: #fef3c7; color: #92400e; }
    .attachments { margin-top: 6px; font-size: 0.8em; }
    .attachments a, .attachments span { margin-right: 10px; color: #6366f1; }
    .footer { background: #f8f9fa; padding: 20px; text-align: center; color: #666; border-top: 1px solid #e5e7eb; font-size: 0.9em; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>{{ title }}</h1>
      <p>{{ subtitle }}</p>
    </div>

    <div class="stats-grid">
      <div class="stat-card">
        <h3>Total Tests</h3>
        <div class="value">{{ summary.total_tests }}</div>
      </div>
      <div class="stat-card pass">
        <h3>Passed</h3>
        <div class="value">{{ summary.passed_tests }}</div>
      </div>
      <div class="stat-card fail">
        <h3>Failed</h3>
        <div class="value">{{ summary.failed_tests }}</div>
      </div>
      <div class="stat-card skip">
        <h3>Skipped</h3>
        <div class="value">{{ summary.skipped_tests }}</div>
      </div>
      <div class="stat-card">
        <h3>Pass Rate</h3>
        <div class="value">{{ "%.2f"|format(summary.pass_rate_percent) }}%</div>
        <div class="progress-bar">
          <div class="progress-fill" style="width: {{ "%.2f"|format(summary.pass_rate_percent) }}%"></div>
        </div>
      </div>
      <div class="stat-card">
        <h3>Duration</h3>
        <div class="value">{{ "%.2f"|format(summary.duration_seconds) }}s</div>
      </div>
    </div>

    <div class="content">
      <h2>Test Execution Details</h2>
      <table>
        <thead>
          <tr>
            <th>Test Name</th>
            <th>Suite</th>
            <th>Status</th>
            <th>Duration</th>
          </tr>
        </thead>
        <tbody>
{%- for suite in suites %}
{%- for test in suite.tests %}
          <tr class="test-row {{ test.status.css_class }}">
            <td><span class="status-badge {{ test.status.css_class }}">{{ test.status.icon }}</span> {{ test.name }}
            {%- if test.attachments %}
              <div class="attachments">
              {%- for attachment in test.attachments %}
                {%- if attachment.path %}<a href="{{ attachment.path }}">{{ attachment.name }}</a>{% else %}<span>{{ attachment.name }}</span>{% endif %}
              {%- endfor %}
              </div>
            {%- endif %}</td>
            <td>{{ suite.name }}</td>
            <td><span class="status {{ test.status.css_class }}">{{ test.status.value }}</span></td>
            <td>{{ test.duration_ms }}ms</td>
          </tr>
{%- if test.status.value == 'FAIL' and test.error_message %}
          <tr class="error-row"><td colspan="4"><pre>{{ test.error_message }}</pre></td></tr>
{%- endif %}
{%- endfor %}
{%- endfor %}
        </tbody>
      </table>
    </div>

    <div class="footer">
      <p>Generated on {{ generated_at }}</p>
      <p>{{ title }} for SkillSprig</p>
    </div>
  </div>
</body>
</html>
"""


class HtmlReporter:
    """Renders aggregated suites into report artifacts."""

    def __init__(self, config: ReportConfig):
        self.config = config
        self.template = Template(HTML_TEMPLATE, autoescape=True)

    def render_html(
        self,
        suites: List[SuiteRecord],
        summary: ReportSummary,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """Render the report document. Test-derived text is HTML-escaped."""
        generated_at = generated_at or datetime.now()
        return self.template.render(
            title=self.config.report_title,
            subtitle=self.config.report_subtitle,
            summary=summary,
            suites=suites,
            generated_at=generated_at.strftime('%Y-%m-%d %H:%M:%S'),
        )

    def write_html_report(self, suites: List[SuiteRecord], summary: ReportSummary) -> Path:
        """Render and persist the HTML report, returning its path."""
        report_path = self.config.get_report_path()
        _write_text(report_path, self.render_html(suites, summary))
        logger.info(f"Extent Report generated: {report_path}")
        return report_path

    def write_json_summary(self, suites: List[SuiteRecord], summary: ReportSummary) -> Path:
        """Persist a machine-readable summary next to the HTML report."""
        output_file = self.config.get_output_dir() / JSON_SUMMARY_FILENAME

        report_data = {
            'timestamp': datetime.now().isoformat(),
            'summary': summary.to_dict(),
            'suites': [],
        }
        for suite in suites:
            report_data['suites'].append({
                'name': suite.name,
                'duration_ms': suite.duration_ms,
                'tests': [
                    {
                        'name': test.name,
                        'status': test.status.value,
                        'duration_ms': test.duration_ms,
                        'started_at': test.started_at.isoformat(),
                        'error_message': test.error_message,
                        'file': test.file,
                        'attachments': [
                            {'name': a.name, 'path': a.path} for a in test.attachments
                        ],
                    }
                    for test in suite.tests
                ],
            })

        _write_text(output_file, json.dumps(report_data, indent=2))
        logger.info(f"JSON summary generated: {output_file}")
        return output_file

    def format_console_summary(self, suites: List[SuiteRecord], summary: ReportSummary) -> str:
        """Plain-text summary of the run."""
        lines = [
            "=" * 60,
            self.config.report_title.upper(),
            "=" * 60,
            f"Total Tests: {summary.total_tests}",
            f"  ✓ Passed:  {summary.passed_tests}",
            f"  ✗ Failed:  {summary.failed_tests}",
            f"  ⊘ Skipped: {summary.skipped_tests}",
            f"  Pass Rate: {summary.pass_rate_percent:.2f}%",
            f"  Duration:  {summary.duration_seconds:.2f}s",
        ]

        failures = [
            (suite, test)
            for suite in suites
            for test in suite.tests
            if test.status is TestStatus.FAIL
        ]
        if failures:
            lines.append("")
            lines.append("FAILURES:")
            for suite, test in failures:
                lines.append(f"  ✗ {test.name} [{suite.name}]")
                if test.error_message:
                    lines.append(f"      {test.error_message.splitlines()[0]}")

        return "\n".join(lines)


def _write_text(path: Path, content: str):
    """Write ``content`` to ``path``, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        logger.error(f"Failed to write report file {path}: {e}")
        raise ReportWriteError(path, e) from e
