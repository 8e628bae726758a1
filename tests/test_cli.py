"""Tests for CLI entry point.

Tests the command-line interface and argument parsing.
"""

import json
import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from bucket_acceptance.cli import (
    CompositeReporter,
    create_reporters,
    filter_scenarios,
    main,
    parse_args,
)
from bucket_acceptance.reporters import ConsoleReporter, JsonReporter
from bucket_acceptance.scenarios import SCENARIOS


class TestParseArgs:
    """Tests for argument parsing."""

    def test_default_args(self):
        args = parse_args([])

        assert args.config == "config.json"
        assert args.quiet is False
        assert args.verbose is False
        assert args.json_output is None
        assert args.scenarios is None
        assert args.module_root is None
        assert args.region is None

    def test_short_flags(self):
        args = parse_args(["-c", "custom.json", "-q", "-v", "-j", "out.json", "-s", "basic"])

        assert args.config == "custom.json"
        assert args.quiet is True
        assert args.verbose is True
        assert args.json_output == "out.json"
        assert args.scenarios == "basic"

    def test_module_root_and_region(self):
        args = parse_args(["--module-root", "../examples", "--region", "eu-west-1"])

        assert args.module_root == "../examples"
        assert args.region == "eu-west-1"

    def test_github_actions_mode(self):
        assert parse_args(["--github-actions"]).github_actions is True


class TestCreateReporters:
    """Tests for reporter creation based on args."""

    def test_console_only_by_default(self):
        reporters = create_reporters(parse_args([]))

        assert len(reporters) == 1
        assert isinstance(reporters[0], ConsoleReporter)

    def test_quiet_passed_to_console(self):
        reporters = create_reporters(parse_args(["-q"]))

        assert reporters[0].quiet is True

    def test_json_reporter_when_requested(self):
        reporters = create_reporters(parse_args(["-j", "results.json"]))

        json_reporter = next(r for r in reporters if isinstance(r, JsonReporter))
        assert json_reporter.output_path == "results.json"

    def test_json_reporter_for_github_actions(self):
        reporters = create_reporters(parse_args(["--github-actions"]))

        json_reporter = next(r for r in reporters if isinstance(r, JsonReporter))
        assert json_reporter.github_output is True


class TestCompositeReporter:
    """Tests for CompositeReporter delegation."""

    def test_delegates_to_all(self):
        first, second = Mock(), Mock()
        composite = CompositeReporter([first, second])

        composite.on_scenario_start("Basic Bucket")
        composite.on_check_start("Basic Bucket", "versioning")
        composite.on_check_complete("Basic Bucket", "result")
        composite.on_scenario_complete("scenario-result")
        composite.on_run_complete({})

        for reporter in (first, second):
            reporter.on_scenario_start.assert_called_once_with("Basic Bucket")
            reporter.on_check_start.assert_called_once_with("Basic Bucket", "versioning")
            reporter.on_check_complete.assert_called_once_with("Basic Bucket", "result")
            reporter.on_scenario_complete.assert_called_once_with("scenario-result")
            reporter.on_run_complete.assert_called_once_with({})


class TestFilterScenarios:
    """Tests for scenario filtering."""

    def test_filter_single(self):
        assert list(filter_scenarios(SCENARIOS, "basic")) == ["basic"]

    def test_filter_multiple_with_spaces(self):
        filtered = filter_scenarios(SCENARIOS, "basic, production")

        assert set(filtered) == {"basic", "production"}

    def test_filter_unknown(self):
        assert filter_scenarios(SCENARIOS, "nonexistent") == {}


class TestMain:
    """Tests for main entry point."""

    @pytest.fixture(autouse=True)
    def clean_env(self):
        with patch.dict(os.environ, {}, clear=True):
            yield

    def test_list_scenarios(self, capsys):
        assert main(["--list"]) == 0

        out = capsys.readouterr().out
        for key in SCENARIOS:
            assert key in out

    def test_missing_module_root_exits_2(self, tmp_path: Path, capsys):
        exit_code = main([
            "-c", str(tmp_path / "missing.json"),
            "--module-root", str(tmp_path / "nope"),
        ])

        assert exit_code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_invalid_config_exits_2(self, tmp_path: Path, capsys):
        config_file = tmp_path / "config.json"
        config_file.write_text("{ invalid")

        assert main(["-c", str(config_file)]) == 2
        assert "Invalid JSON" in capsys.readouterr().err

    def test_no_matching_scenarios_exits_2(self, tmp_path: Path, capsys):
        exit_code = main([
            "-c", str(tmp_path / "missing.json"),
            "--module-root", str(tmp_path),
            "-s", "nonexistent",
        ])

        assert exit_code == 2
        assert "No matching scenarios" in capsys.readouterr().err

    @patch("bucket_acceptance.cli.ScenarioRunner")
    def test_all_passed_exits_0(self, mock_runner_class, tmp_path: Path):
        mock_runner_class.return_value.run.return_value = Mock(all_passed=True)

        exit_code = main(["-c", str(tmp_path / "missing.json"), "--module-root", str(tmp_path)])

        assert exit_code == 0

    @patch("bucket_acceptance.cli.ScenarioRunner")
    def test_failure_exits_1(self, mock_runner_class, tmp_path: Path):
        mock_runner_class.return_value.run.return_value = Mock(all_passed=False)

        exit_code = main(["-c", str(tmp_path / "missing.json"), "--module-root", str(tmp_path)])

        assert exit_code == 1

    @patch("bucket_acceptance.cli.ScenarioRunner")
    def test_overrides_applied(self, mock_runner_class, tmp_path: Path):
        mock_runner_class.return_value.run.return_value = Mock(all_passed=True)

        main([
            "-c", str(tmp_path / "missing.json"),
            "--module-root", str(tmp_path),
            "--region", "eu-west-1",
            "-s", "basic,production",
        ])

        scenarios, settings = mock_runner_class.call_args.args
        assert set(scenarios) == {"basic", "production"}
        assert settings.module_root == str(tmp_path)
        assert settings.aws_region == "eu-west-1"

    @patch("bucket_acceptance.cli.ScenarioRunner")
    def test_composite_reporter_with_json(self, mock_runner_class, tmp_path: Path):
        mock_runner_class.return_value.run.return_value = Mock(all_passed=True)

        main([
            "-c", str(tmp_path / "missing.json"),
            "--module-root", str(tmp_path),
            "-j", str(tmp_path / "results.json"),
        ])

        reporter = mock_runner_class.call_args.kwargs["reporter"]
        assert isinstance(reporter, CompositeReporter)

    @patch("bucket_acceptance.cli.ScenarioRunner")
    def test_config_file_settings(self, mock_runner_class, tmp_path: Path):
        mock_runner_class.return_value.run.return_value = Mock(all_passed=True)
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "module_root": str(tmp_path),
            "name_prefix": "acme",
        }))

        assert main(["-c", str(config_file)]) == 0

        settings = mock_runner_class.call_args.args[1]
        assert settings.name_prefix == "acme"
