"""Data models for the S3 bucket module acceptance tester."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ResultStatus(Enum):
    """Status of a check or scenario."""

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


@dataclass
class Settings:
    """Run-wide settings shared by every scenario."""

    module_root: str = "examples"
    aws_region: str = "us-west-2"
    terraform_binary: str = "terraform"
    name_prefix: str = "wizardai"


@dataclass
class CheckResult:
    """Result of a single check against a provisioned bucket."""

    check_id: str
    check_name: str
    status: ResultStatus
    expected: str
    actual: str
    error_message: Optional[str] = None


@dataclass
class ScenarioResult:
    """Aggregated results for a single scenario."""

    scenario_key: str
    scenario_name: str
    status: ResultStatus
    checks: dict[str, CheckResult] = field(default_factory=dict)
    duration_seconds: float = 0.0
    error_message: Optional[str] = None
    bucket_name: Optional[str] = None
