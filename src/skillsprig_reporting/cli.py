"""
Command-line interface for rendering reports from event logs.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .aggregator import ReportAggregator
from .config import DEFAULT_CONFIG_FILE, ReportConfig
from .events import read_event_log, replay
from .reporter import JSON_SUMMARY_FILENAME

logger = logging.getLogger(__name__)


class ReportCLI:
    """Command-line interface for the report aggregator."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="skillsprig-report",
            description="SkillSprig extent HTML report generator",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s render events.jsonl                # Write extent-report/index.html
  %(prog)s render events.jsonl -o out --json  # Custom directory plus summary.json
  %(prog)s config create                      # Write a default config file
  %(prog)s config show -c custom.yml          # Show effective configuration
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Render command
        render_parser = subparsers.add_parser('render', help='Render a report from an event log')
        render_parser.add_argument(
            'event_log',
            help='JSON-lines file of test-lifecycle events'
        )
        render_parser.add_argument(
            '--output-dir', '-o',
            help='Output directory for the report'
        )
        render_parser.add_argument(
            '--config', '-c', default=DEFAULT_CONFIG_FILE,
            help='Configuration file path'
        )
        render_parser.add_argument(
            '--title',
            help='Report title'
        )
        render_parser.add_argument(
            '--json', action='store_true',
            help='Also write a JSON summary'
        )
        render_parser.add_argument(
            '--verbose', '-v', action='store_true',
            help='Verbose output'
        )

        # Config command
        config_parser = subparsers.add_parser('config', help='Manage configuration')
        config_subparsers = config_parser.add_subparsers(dest='config_action')

        create_parser = config_subparsers.add_parser('create', help='Create default config file')
        create_parser.add_argument('path', nargs='?', default=DEFAULT_CONFIG_FILE)
        show_parser = config_subparsers.add_parser('show', help='Show current config')
        show_parser.add_argument('--config', '-c', default=DEFAULT_CONFIG_FILE)

        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        """Run the CLI with given arguments."""
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 0

        # Set up logging
        log_level = logging.DEBUG if getattr(parsed_args, 'verbose', False) else logging.INFO
        logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')

        try:
            if parsed_args.command == 'render':
                return self._render(parsed_args)
            elif parsed_args.command == 'config':
                return self._manage_config(parsed_args)
            else:
                self.parser.print_help()
                return 0
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            return 130
        except Exception as e:
            logger.error(f"Command failed: {e}")
            if getattr(parsed_args, 'verbose', False):
                logger.exception("Full traceback:")
            return 1

    def _render(self, args) -> int:
        """Replay an event log into a report."""
        config = self._load_config(args)

        # Override config with command line arguments
        if args.output_dir:
            config.output_directory = args.output_dir
        if args.title:
            config.report_title = args.title
        if args.json:
            config.generate_json_report = True
        if args.verbose:
            config.verbose_logging = True

        aggregator = ReportAggregator(config)
        report_path = replay(read_event_log(args.event_log), aggregator)
        if report_path is None:
            logger.warning(f"No run_end event in {args.event_log}; writing report anyway")
            report_path = aggregator.on_run_end()

        print(f"HTML report: {report_path}")
        if config.generate_json_report:
            print(f"JSON summary: {config.get_output_dir() / JSON_SUMMARY_FILENAME}")

        summary = aggregator.summarize()
        return 1 if summary.failed_tests > 0 else 0

    def _manage_config(self, args) -> int:
        """Manage configuration."""
        if args.config_action == 'create':
            config = ReportConfig()
            config.save_to_file(args.path)
            print(f"Default configuration created: {args.path}")
        elif args.config_action == 'show':
            config = self._load_config(args)
            print(f"Configuration from {args.config}:")
            for key, value in config.__dict__.items():
                print(f"  {key}: {value}")
        else:
            print("Usage: skillsprig-report config {create,show}")
            return 2

        return 0

    def _load_config(self, args) -> ReportConfig:
        """Load configuration from file, then apply environment overrides."""
        return ReportConfig.from_env(ReportConfig.from_file(args.config))


def main():
    """Main entry point for the CLI."""
    cli = ReportCLI()
    exit_code = cli.run()
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
