"""Scenario definitions for the bucket module acceptance run.

Each scenario is one independent apply-assert-destroy sequence (or a
plan-only sequence for validation), with its own generated bucket name.
"""

import random
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bucket_acceptance.models import Settings
from bucket_acceptance.terraform import TerraformOptions

# Characters used for generated unique ids
UNIQUE_ID_CHARS = string.ascii_letters + string.digits
UNIQUE_ID_LENGTH = 6


@dataclass
class ScenarioDefinition:
    """Inputs and checks for one scenario."""

    key: str
    name: str
    module: str
    name_fragment: str
    environment: str
    checks: list[str]
    tags: Optional[dict[str, str]] = None
    outputs: list[str] = field(default_factory=lambda: ["bucket_name", "bucket_arn"])
    expect_plan_failure: bool = False


SCENARIOS = {
    "basic": ScenarioDefinition(
        key="basic",
        name="Basic Bucket",
        module="basic",
        name_fragment="test-bucket",
        environment="development",
        tags={"Test": "terratest"},
        checks=[
            "bucket_name",
            "bucket_arn",
            "bucket_exists",
            "encryption",
            "versioning",
            "public_access_block",
            "bucket_policy",
        ],
    ),
    "production": ScenarioDefinition(
        key="production",
        name="Production Bucket (KMS)",
        module="production",
        name_fragment="test-prod",
        environment="production",
        tags={"Test": "terratest", "Environment": "production"},
        outputs=["bucket_name", "bucket_arn", "kms_key_id"],
        checks=[
            "bucket_name",
            "bucket_arn",
            "kms_key_output",
            "kms_encryption",
            "lifecycle",
        ],
    ),
    "invalid_environment": ScenarioDefinition(
        key="invalid_environment",
        name="Invalid Environment Rejected",
        module="basic",
        name_fragment="test-invalid",
        environment="invalid-env",
        checks=["environment_validation"],
        outputs=[],
        expect_plan_failure=True,
    ),
    "https_enforcement": ScenarioDefinition(
        key="https_enforcement",
        name="HTTPS Enforcement",
        module="basic",
        name_fragment="test-https",
        environment="development",
        checks=["https_enforced"],
        outputs=["bucket_name"],
    ),
}


def unique_id(length: int = UNIQUE_ID_LENGTH) -> str:
    """Generate a short random id for resource names."""
    return "".join(random.choice(UNIQUE_ID_CHARS) for _ in range(length))


def generate_bucket_name(fragment: str) -> str:
    """Generate a unique, lowercase bucket name fragment.

    Args:
        fragment: Scenario prefix, e.g. ``test-bucket``

    Returns:
        ``<fragment>-<unique id>``, lowercased.
    """
    return f"{fragment}-{unique_id()}".lower()


def build_terraform_options(
    scenario: ScenarioDefinition,
    settings: Settings,
    bucket_name: str,
) -> TerraformOptions:
    """Build Terraform options for a scenario.

    Args:
        scenario: The scenario to provision
        settings: Run-wide settings (module root, region, binary)
        bucket_name: Generated bucket name fragment

    Returns:
        TerraformOptions pointing at the scenario's example module.
    """
    vars: dict = {
        "aws_region": settings.aws_region,
        "bucket_name": bucket_name,
        "environment": scenario.environment,
    }
    if scenario.tags is not None:
        vars["tags"] = dict(scenario.tags)

    return TerraformOptions(
        terraform_dir=str(Path(settings.module_root) / scenario.module),
        vars=vars,
        env_vars={"AWS_DEFAULT_REGION": settings.aws_region},
        terraform_binary=settings.terraform_binary,
    )
