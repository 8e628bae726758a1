"""Tests for ConsoleReporter.

Tests the Rich-based console output reporter.
"""

from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from bucket_acceptance.reporters.console import CHECK_SHORT_NAMES, ConsoleReporter
from bucket_acceptance.reporters.base import Reporter
from bucket_acceptance.checks import CHECK_DEFINITIONS
from bucket_acceptance.models import CheckResult, ResultStatus, ScenarioResult


def make_reporter(quiet: bool = False) -> tuple[ConsoleReporter, StringIO]:
    buffer = StringIO()
    console = Console(file=buffer, width=200, color_system=None)
    return ConsoleReporter(quiet=quiet, console=console), buffer


@pytest.fixture
def failing_check() -> CheckResult:
    return CheckResult(
        check_id="versioning",
        check_name="Versioning Enabled",
        status=ResultStatus.FAIL,
        expected="Enabled",
        actual="Suspended",
        error_message="Expected 'Enabled', got 'Suspended'",
    )


class TestConsoleReporterInterface:
    """Tests that ConsoleReporter implements Reporter interface."""

    def test_inherits_from_reporter(self):
        assert isinstance(ConsoleReporter(), Reporter)

    def test_short_names_cover_all_checks(self):
        assert set(CHECK_SHORT_NAMES) == set(CHECK_DEFINITIONS)


class TestConsoleReporterScenarioStart:
    """Tests for on_scenario_start method."""

    def test_prints_scenario_name(self):
        reporter, buffer = make_reporter()

        reporter.on_scenario_start("Basic Bucket")

        assert "Scenario: Basic Bucket" in buffer.getvalue()


class TestConsoleReporterCheckComplete:
    """Tests for on_check_complete method."""

    def test_pass(self):
        reporter, buffer = make_reporter()
        result = CheckResult("encryption", "Default Encryption", ResultStatus.PASS, "at least 1 rule", "1 rules")

        reporter.on_check_complete("Basic Bucket", result)

        assert "[PASS]: Default Encryption" in buffer.getvalue()

    def test_fail_shows_error(self, failing_check):
        reporter, buffer = make_reporter()

        reporter.on_check_complete("Basic Bucket", failing_check)

        output = buffer.getvalue()
        assert "[FAIL]: Versioning Enabled" in output
        assert "got 'Suspended'" in output

    def test_error_status(self):
        reporter, buffer = make_reporter()
        result = CheckResult("lifecycle", "Lifecycle Rules", ResultStatus.ERROR, "at least 1 rule", "unknown")

        reporter.on_check_complete("Production", result)

        assert "[ERROR]: Lifecycle Rules" in buffer.getvalue()

    def test_quiet_mode_suppresses_output(self, failing_check):
        reporter = ConsoleReporter(quiet=True)

        with patch.object(reporter.console, "print") as mock_print:
            reporter.on_check_complete("Basic Bucket", failing_check)

        mock_print.assert_not_called()


class TestConsoleReporterScenarioComplete:
    """Tests for on_scenario_complete method."""

    def test_passed_with_duration(self):
        reporter, buffer = make_reporter()
        result = ScenarioResult(
            "basic", "Basic Bucket", ResultStatus.PASS,
            duration_seconds=93.4, bucket_name="test-bucket-abc123",
        )

        reporter.on_scenario_complete(result)

        output = buffer.getvalue()
        assert "Basic Bucket: PASSED in 93.4s" in output
        assert "bucket_name=test-bucket-abc123" in output

    def test_error_shows_message(self):
        reporter, buffer = make_reporter()
        result = ScenarioResult(
            "basic", "Basic Bucket", ResultStatus.ERROR,
            error_message="terraform apply failed",
        )

        reporter.on_scenario_complete(result)

        output = buffer.getvalue()
        assert "ERROR" in output
        assert "terraform apply failed" in output


class TestConsoleReporterRunComplete:
    """Tests for the summary table."""

    def test_no_results(self):
        reporter, buffer = make_reporter()

        reporter.on_run_complete({})

        assert "No results to display." in buffer.getvalue()

    def test_summary_table(self, failing_check):
        reporter, buffer = make_reporter()
        results = {
            "basic": ScenarioResult(
                "basic", "Basic Bucket", ResultStatus.FAIL,
                checks={"versioning": failing_check},
            ),
            "invalid_environment": ScenarioResult(
                "invalid_environment", "Invalid Environment Rejected", ResultStatus.PASS,
                checks={
                    "environment_validation": CheckResult(
                        "environment_validation", "Environment Validation",
                        ResultStatus.PASS, "plan rejected", "plan rejected",
                    )
                },
            ),
        }

        reporter.on_run_complete(results)

        output = buffer.getvalue()
        assert "Bucket Module Acceptance Summary" in output
        assert "Ver" in output
        assert "EnvVal" in output
        assert "Basic Bucket" in output
        assert "FAIL" in output
        assert "PASS" in output

    def test_unused_checks_have_no_column(self, failing_check):
        reporter, buffer = make_reporter()
        results = {
            "basic": ScenarioResult(
                "basic", "Basic Bucket", ResultStatus.FAIL,
                checks={"versioning": failing_check},
            ),
        }

        reporter.on_run_complete(results)

        assert "LC" not in buffer.getvalue()
