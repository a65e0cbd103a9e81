#!/usr/bin/env python3
"""
Run the report CLI with ``python -m skillsprig_reporting``.

    python -m skillsprig_reporting render events.jsonl -o extent-report --json
    python -m skillsprig_reporting config create
    python -m skillsprig_reporting config show -c report_config.yml

``render`` replays a JSON-lines event log into ``index.html``;
``config`` writes or prints a ``ReportConfig`` YAML file.
"""

from .cli import main

if __name__ == "__main__":
    main()
