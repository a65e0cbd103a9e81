"""
Configuration management for the report aggregator.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULT_OUTPUT_DIRECTORY = "extent-report"
DEFAULT_CONFIG_FILE = "report_config.yml"
OUTPUT_DIR_ENV = "SKILLSPRIG_REPORT_DIR"


@dataclass
class ReportConfig:
    """Configuration for report generation."""

    # Output settings
    output_directory: str = DEFAULT_OUTPUT_DIRECTORY
    report_filename: str = "index.html"
    generate_json_report: bool = False

    # Presentation
    report_title: str = "Extent HTML Report"
    report_subtitle: str = "Playwright Automation Test Results"

    verbose_logging: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'ReportConfig':
        """Load configuration from YAML file."""
        if not os.path.exists(config_path):
            return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{config_path}: expected a mapping of configuration keys")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown report configuration keys in {config_path}: {', '.join(unknown)}")

        return cls(**data)

    @classmethod
    def from_env(cls, base: Optional['ReportConfig'] = None) -> 'ReportConfig':
        """Apply environment overrides (and a local .env file) on top of ``base``."""
        load_dotenv(find_dotenv(usecwd=True))
        config = base if base is not None else cls()
        output_dir = os.getenv(OUTPUT_DIR_ENV, "").strip()
        if output_dir:
            config.output_directory = output_dir
        return config

    def save_to_file(self, config_path: str):
        """Save configuration to YAML file."""
        parent = os.path.dirname(config_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(asdict(self), f, default_flow_style=False, sort_keys=False)

    def get_output_dir(self) -> Path:
        """Get output directory as Path object."""
        return Path(self.output_directory)

    def get_report_path(self) -> Path:
        return self.get_output_dir() / self.report_filename

    def ensure_output_dir(self):
        """Ensure output directory exists."""
        self.get_output_dir().mkdir(parents=True, exist_ok=True)
