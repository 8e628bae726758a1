"""JSON reporter for structured output and GitHub Actions integration.

Generates JSON output suitable for:
- CI artifacts
- GitHub Actions workflow outputs
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from bucket_acceptance.reporters.base import Reporter
from bucket_acceptance.models import CheckResult, ScenarioResult, ResultStatus


class JsonReporter(Reporter):
    """JSON reporter for structured output.

    Args:
        output_path: Optional file path to write JSON output
        github_output: If True, write to GITHUB_OUTPUT for Actions
    """

    def __init__(
        self,
        output_path: Optional[str] = None,
        github_output: bool = False,
    ):
        self.output_path = output_path
        self.github_output = github_output

    def on_check_start(self, scenario_name: str, check_id: str) -> None:
        """Called when a check starts. No-op for JSON reporter."""
        pass

    def on_check_complete(self, scenario_name: str, result: CheckResult) -> None:
        """Called when a check completes. No-op - data comes from the scenario."""
        pass

    def on_scenario_start(self, scenario_name: str) -> None:
        """Called when a scenario begins. No-op for JSON reporter."""
        pass

    def on_scenario_complete(self, result: ScenarioResult) -> None:
        """Called when a scenario finishes. No-op - data comes from the run."""
        pass

    def on_run_complete(self, results: dict[str, ScenarioResult]) -> dict:
        """Generates and outputs JSON data.

        Args:
            results: Dictionary of scenario results

        Returns:
            The generated JSON data as a dictionary
        """
        output = self._generate_output(results)

        if self.output_path:
            self._write_to_file(output)

        if self.github_output:
            self._write_github_output(output)

        return output

    def _generate_output(self, results: dict[str, ScenarioResult]) -> dict:
        """Generate the JSON output structure.

        Args:
            results: Dictionary of scenario results

        Returns:
            Structured dictionary for JSON output
        """
        timestamp = datetime.now(timezone.utc).isoformat()

        scenarios = {}
        passed_count = 0
        failed_count = 0
        error_count = 0

        for scenario_key, scenario_result in results.items():
            if scenario_result.status == ResultStatus.PASS:
                passed_count += 1
            elif scenario_result.status == ResultStatus.FAIL:
                failed_count += 1
            else:
                error_count += 1

            checks = {}
            for check_id, check_result in scenario_result.checks.items():
                check_data = {
                    "status": check_result.status.value,
                    "expected": check_result.expected,
                    "actual": check_result.actual,
                }
                if check_result.error_message:
                    check_data["error"] = check_result.error_message
                checks[check_id] = check_data

            scenarios[scenario_key] = {
                "name": scenario_result.scenario_name,
                "status": scenario_result.status.value,
                "bucket_name": scenario_result.bucket_name,
                "checks": checks,
                "duration_seconds": scenario_result.duration_seconds,
            }

            if scenario_result.error_message:
                scenarios[scenario_key]["error"] = scenario_result.error_message

        total = len(results)
        all_passed = passed_count == total and total > 0

        return {
            "timestamp": timestamp,
            "scenarios": scenarios,
            "summary": {
                "total_scenarios": total,
                "passed": passed_count,
                "failed": failed_count,
                "errors": error_count,
                "all_passed": all_passed,
            },
        }

    def _write_to_file(self, output: dict) -> None:
        path = Path(self.output_path)

        # Create parent directories if needed
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.output_path, "w") as f:
            json.dump(output, f, indent=2)

    def _write_github_output(self, output: dict) -> None:
        """Write to GitHub Actions output file.

        Args:
            output: The data to write
        """
        github_output_file = os.environ.get("GITHUB_OUTPUT")
        if not github_output_file:
            return

        with open(github_output_file, "a") as f:
            f.write(f"all_passed={str(output['summary']['all_passed']).lower()}\n")
            f.write(f"total_scenarios={output['summary']['total_scenarios']}\n")
            f.write(f"passed_scenarios={output['summary']['passed']}\n")
            f.write(f"failed_scenarios={output['summary']['failed']}\n")

            # Write full JSON as multiline output
            f.write("results<<EOF\n")
            f.write(json.dumps(output))
            f.write("\nEOF\n")
