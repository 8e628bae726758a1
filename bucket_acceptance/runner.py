"""Main scenario runner and orchestrator.

Coordinates scenario execution, managing:
- Scenario iteration
- Terraform apply/destroy (or plan) around each scenario
- Output reading and S3 client lifecycle
- Reporter callbacks
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from bucket_acceptance.checks import (
    CHECK_DEFINITIONS,
    BucketStateVerifier,
    CheckExecutionResult,
    ScenarioContext,
    check_plan_rejected,
)
from bucket_acceptance.models import CheckResult, ResultStatus, ScenarioResult, Settings
from bucket_acceptance.s3_client import build_s3_client
from bucket_acceptance.scenarios import (
    ScenarioDefinition,
    build_terraform_options,
    generate_bucket_name,
)
from bucket_acceptance.terraform import Terraform, TerraformError, TerraformOptions, provisioned

# Errors from a required setup call; any of these aborts the scenario
SETUP_ERRORS = (TerraformError, ClientError, BotoCoreError)


@dataclass
class RunResult:
    """Result of running all selected scenarios."""

    scenarios: dict[str, ScenarioResult]

    @property
    def all_passed(self) -> bool:
        """Check if all scenarios passed."""
        return all(s.status == ResultStatus.PASS for s in self.scenarios.values())


def to_check_result(exec_result: CheckExecutionResult) -> CheckResult:
    """Convert an execution result into a reportable CheckResult."""
    check_def = CHECK_DEFINITIONS.get(exec_result.check_id, {})
    return CheckResult(
        check_id=exec_result.check_id,
        check_name=check_def.get("name", exec_result.check_id),
        status=ResultStatus.PASS if exec_result.passed else ResultStatus.FAIL,
        expected=exec_result.expected,
        actual=exec_result.actual,
        error_message=exec_result.error_message,
    )


class ScenarioRunner:
    """Main runner that orchestrates scenario execution.

    Coordinates:
    - Iterating through selected scenarios
    - Provisioning and tearing down each scenario's module
    - Running checks against the provisioned bucket
    - Calling reporter callbacks for progress
    """

    def __init__(
        self,
        scenarios: dict[str, ScenarioDefinition],
        settings: Settings,
        reporter: Optional[Any] = None,
        terraform_factory: Callable[[TerraformOptions], Terraform] = Terraform,
        s3_client_factory: Callable[[str], Any] = build_s3_client,
    ):
        """Initialize the runner.

        Args:
            scenarios: Scenarios to run, keyed by scenario key
            settings: Run-wide settings
            reporter: Optional reporter for progress callbacks
            terraform_factory: Builds a Terraform driver from options
            s3_client_factory: Builds an S3 client for a region
        """
        self.scenarios = scenarios
        self.settings = settings
        self.reporter = reporter
        self.terraform_factory = terraform_factory
        self.s3_client_factory = s3_client_factory

    def run(self) -> RunResult:
        """Run all selected scenarios.

        Returns:
            RunResult containing results for all scenarios
        """
        results: dict[str, ScenarioResult] = {}

        for scenario_key, scenario in self.scenarios.items():
            if self.reporter:
                self.reporter.on_scenario_start(scenario.name)

            try:
                result = self._run_scenario(scenario)
            except Exception as e:
                result = ScenarioResult(
                    scenario_key=scenario_key,
                    scenario_name=scenario.name,
                    status=ResultStatus.ERROR,
                    error_message=f"Unexpected error: {e}",
                )

            results[scenario_key] = result

            if self.reporter:
                self.reporter.on_scenario_complete(result)

        run_result = RunResult(scenarios=results)

        if self.reporter:
            self.reporter.on_run_complete(results)

        return run_result

    def _run_scenario(self, scenario: ScenarioDefinition) -> ScenarioResult:
        """Run a single scenario.

        Args:
            scenario: The scenario to run

        Returns:
            ScenarioResult with aggregated check results
        """
        start_time = time.time()
        checks: dict[str, CheckResult] = {}
        bucket_name = generate_bucket_name(scenario.name_fragment)

        options = build_terraform_options(scenario, self.settings, bucket_name)
        terraform = self.terraform_factory(options)

        try:
            if scenario.expect_plan_failure:
                self._run_plan_checks(scenario, terraform, checks)
            else:
                self._run_apply_checks(scenario, terraform, bucket_name, checks)
        except SETUP_ERRORS as e:
            return ScenarioResult(
                scenario_key=scenario.key,
                scenario_name=scenario.name,
                status=ResultStatus.ERROR,
                checks=checks,
                duration_seconds=time.time() - start_time,
                error_message=str(e),
                bucket_name=bucket_name,
            )

        if all(c.status == ResultStatus.PASS for c in checks.values()):
            overall_status = ResultStatus.PASS
        else:
            overall_status = ResultStatus.FAIL

        return ScenarioResult(
            scenario_key=scenario.key,
            scenario_name=scenario.name,
            status=overall_status,
            checks=checks,
            duration_seconds=time.time() - start_time,
            bucket_name=bucket_name,
        )

    def _run_plan_checks(
        self,
        scenario: ScenarioDefinition,
        terraform: Terraform,
        checks: dict[str, CheckResult],
    ) -> None:
        """Plan the module and evaluate plan-time checks.

        Nothing is applied, so there is nothing to destroy.
        """
        if self.reporter:
            self.reporter.on_check_start(scenario.name, "environment_validation")

        error: Optional[TerraformError] = None
        try:
            terraform.init_and_plan()
        except TerraformError as e:
            error = e

        self._record(scenario, to_check_result(check_plan_rejected(error)), checks)

    def _run_apply_checks(
        self,
        scenario: ScenarioDefinition,
        terraform: Terraform,
        bucket_name: str,
        checks: dict[str, CheckResult],
    ) -> None:
        """Apply the module, run every check, then destroy."""
        with provisioned(terraform):
            outputs = {name: terraform.output(name) for name in scenario.outputs}

            context = ScenarioContext(
                bucket_name=bucket_name,
                environment=scenario.environment,
                name_prefix=self.settings.name_prefix,
                outputs=outputs,
            )
            s3_client = self.s3_client_factory(self.settings.aws_region)
            verifier = BucketStateVerifier(s3_client, outputs["bucket_name"])

            for check_id in scenario.checks:
                if self.reporter:
                    self.reporter.on_check_start(scenario.name, check_id)
                exec_result = verifier.run_check(check_id, context)
                self._record(scenario, to_check_result(exec_result), checks)

    def _record(
        self,
        scenario: ScenarioDefinition,
        check_result: CheckResult,
        checks: dict[str, CheckResult],
    ) -> None:
        checks[check_result.check_id] = check_result
        if self.reporter:
            self.reporter.on_check_complete(scenario.name, check_result)
