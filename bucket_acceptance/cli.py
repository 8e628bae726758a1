"""Command-line interface for the bucket module acceptance tester.

Provides argument parsing and main entry point for running scenarios
from the command line.
"""

import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from bucket_acceptance.config import ConfigError, load_settings, validate_module_root
from bucket_acceptance.runner import ScenarioRunner
from bucket_acceptance.reporters import ConsoleReporter, JsonReporter, Reporter
from bucket_acceptance.scenarios import SCENARIOS, ScenarioDefinition


class CompositeReporter(Reporter):
    """Reporter that delegates to multiple reporters.

    Allows using both ConsoleReporter and JsonReporter simultaneously.
    """

    def __init__(self, reporters: list[Reporter]):
        self._reporters = reporters

    def on_check_start(self, scenario_name: str, check_id: str) -> None:
        for reporter in self._reporters:
            reporter.on_check_start(scenario_name, check_id)

    def on_check_complete(self, scenario_name: str, result) -> None:
        for reporter in self._reporters:
            reporter.on_check_complete(scenario_name, result)

    def on_scenario_start(self, scenario_name: str) -> None:
        for reporter in self._reporters:
            reporter.on_scenario_start(scenario_name)

    def on_scenario_complete(self, result) -> None:
        for reporter in self._reporters:
            reporter.on_scenario_complete(result)

    def on_run_complete(self, results: dict) -> None:
        for reporter in self._reporters:
            reporter.on_run_complete(results)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="bucket-acceptance",
        description="Apply the S3 bucket module and verify its security defaults",
    )

    parser.add_argument(
        "-c", "--config",
        default="config.json",
        help="Path to configuration file (default: config.json)",
    )

    parser.add_argument(
        "-s", "--scenarios",
        metavar="LIST",
        help="Comma-separated list of scenario keys to run",
    )

    parser.add_argument(
        "--module-root",
        metavar="DIR",
        help="Directory holding the module's example configurations",
    )

    parser.add_argument(
        "--region",
        metavar="REGION",
        help="AWS region to provision into",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress per-check output, show only summary",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log Terraform commands",
    )

    parser.add_argument(
        "-j", "--json-output",
        metavar="PATH",
        help="Write JSON results to file",
    )

    parser.add_argument(
        "--github-actions",
        action="store_true",
        help="Enable GitHub Actions output mode",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List available scenarios and exit",
    )

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr.

    Verbose mode only lowers this package's level; boto stays at WARNING.
    """
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    logging.getLogger("bucket_acceptance").setLevel(logging.DEBUG if verbose else logging.WARNING)


def create_reporters(args: argparse.Namespace) -> list[Reporter]:
    """Create reporters based on command-line arguments.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of configured reporters
    """
    reporters: list[Reporter] = [ConsoleReporter(quiet=args.quiet)]

    if args.json_output or args.github_actions:
        reporters.append(JsonReporter(
            output_path=args.json_output,
            github_output=args.github_actions,
        ))

    return reporters


def filter_scenarios(
    scenarios: dict[str, ScenarioDefinition],
    filter_str: str,
) -> dict[str, ScenarioDefinition]:
    """Filter scenarios by comma-separated key list.

    Args:
        scenarios: All available scenarios
        filter_str: Comma-separated list of keys to include

    Returns:
        Filtered dictionary of scenarios
    """
    keys = [k.strip() for k in filter_str.split(",")]
    return {k: v for k, v in scenarios.items() if k in keys}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: 0 for success, 1 for scenario failures, 2 for errors
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.list:
        for key, scenario in SCENARIOS.items():
            print(f"{key}: {scenario.name}")
        return 0

    try:
        settings = load_settings(args.config)
        if args.module_root:
            settings.module_root = args.module_root
        if args.region:
            settings.aws_region = args.region
        validate_module_root(settings)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    scenarios = SCENARIOS
    if args.scenarios:
        scenarios = filter_scenarios(SCENARIOS, args.scenarios)
        if not scenarios:
            print("No matching scenarios found", file=sys.stderr)
            return 2

    reporters = create_reporters(args)
    if len(reporters) == 1:
        reporter = reporters[0]
    else:
        reporter = CompositeReporter(reporters)

    runner = ScenarioRunner(scenarios, settings, reporter=reporter)
    result = runner.run()

    return 0 if result.all_passed else 1


if __name__ == "__main__":
    sys.exit(main())
