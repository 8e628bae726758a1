"""Check definitions and verification logic for provisioned buckets.

This module contains:
- CHECK_DEFINITIONS: Every check a scenario can run
  - Output checks (bucket name, ARN, KMS key id)
  - Bucket state checks (encryption, versioning, public access, policy, lifecycle)
  - The plan-time environment validation check
- Naming helpers for the expected bucket name and ARN
- BucketStateVerifier: Reads bucket state through S3 and evaluates checks
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Expected plan error for an environment outside the allowed set
ENVIRONMENT_VALIDATION_MESSAGE = (
    "Environment must be one of: development, staging, production"
)

# Substrings the HTTPS-only bucket policy must contain
HTTPS_POLICY_MARKERS = ("DenyInsecureConnections", "aws:SecureTransport", "false")

KMS_ALGORITHM = "aws:kms"
VERSIONING_ENABLED = "Enabled"

PUBLIC_ACCESS_BLOCK_FLAGS = (
    "BlockPublicAcls",
    "BlockPublicPolicy",
    "IgnorePublicAcls",
    "RestrictPublicBuckets",
)

CHECK_DEFINITIONS = {
    # === OUTPUT CHECKS ===
    "bucket_name": {
        "id": "bucket_name",
        "name": "Bucket Name Convention",
        "description": "bucket_name output is <prefix>-<name>-<environment>.",
        "category": "output",
    },
    "bucket_arn": {
        "id": "bucket_arn",
        "name": "Bucket ARN Format",
        "description": "bucket_arn output is arn:aws:s3::: followed by the bucket name.",
        "category": "output",
    },
    "kms_key_output": {
        "id": "kms_key_output",
        "name": "KMS Key Output",
        "description": "kms_key_id output is non-empty.",
        "category": "output",
    },
    # === BUCKET STATE CHECKS ===
    "bucket_exists": {
        "id": "bucket_exists",
        "name": "Bucket Reachable",
        "description": "HeadBucket succeeds for the provisioned bucket.",
        "category": "state",
    },
    "encryption": {
        "id": "encryption",
        "name": "Default Encryption",
        "description": "At least one server-side encryption rule, any algorithm.",
        "category": "state",
    },
    "kms_encryption": {
        "id": "kms_encryption",
        "name": "KMS Encryption",
        "description": "First encryption rule uses aws:kms with a key id set.",
        "category": "state",
    },
    "versioning": {
        "id": "versioning",
        "name": "Versioning Enabled",
        "description": "Bucket versioning status is Enabled.",
        "category": "state",
    },
    "public_access_block": {
        "id": "public_access_block",
        "name": "Public Access Blocked",
        "description": "All four public access block flags are true.",
        "category": "state",
    },
    "bucket_policy": {
        "id": "bucket_policy",
        "name": "Bucket Policy Present",
        "description": "A bucket policy is attached.",
        "category": "state",
    },
    "https_enforced": {
        "id": "https_enforced",
        "name": "HTTPS Enforcement",
        "description": "Policy denies requests where aws:SecureTransport is false.",
        "category": "state",
    },
    "lifecycle": {
        "id": "lifecycle",
        "name": "Lifecycle Rules",
        "description": "At least one lifecycle rule is configured.",
        "category": "state",
    },
    # === PLAN CHECKS ===
    "environment_validation": {
        "id": "environment_validation",
        "name": "Environment Validation",
        "description": "Plan rejects an environment outside development, staging, production.",
        "category": "plan",
    },
}

OUTPUT_CHECKS = ["bucket_name", "bucket_arn", "kms_key_output"]
STATE_CHECKS = [
    "bucket_exists",
    "encryption",
    "kms_encryption",
    "versioning",
    "public_access_block",
    "bucket_policy",
    "https_enforced",
    "lifecycle",
]
PLAN_CHECKS = ["environment_validation"]


def expected_bucket_name(bucket_name: str, environment: str, prefix: str = "wizardai") -> str:
    """Return the bucket name the module must produce."""
    return f"{prefix}-{bucket_name}-{environment}"


def expected_bucket_arn(bucket_name: str, environment: str, prefix: str = "wizardai") -> str:
    """Return the bucket ARN the module must produce."""
    return f"arn:aws:s3:::{expected_bucket_name(bucket_name, environment, prefix)}"


@dataclass
class ScenarioContext:
    """Everything a check needs to know about one provisioned scenario."""

    bucket_name: str
    environment: str
    name_prefix: str = "wizardai"
    outputs: dict[str, str] = field(default_factory=dict)


@dataclass
class CheckExecutionResult:
    """Result of executing a single check."""

    check_id: str
    passed: bool
    expected: str
    actual: str
    error_message: Optional[str] = None


class BucketStateVerifier:
    """Evaluates checks against a provisioned bucket.

    This class handles:
    - Read-only S3 getters for the bucket's security state
    - Evaluating output checks against the naming convention
    - Evaluating state checks against the fetched state

    Each getter result is cached, so every S3 call is made at most once
    per verifier. Getter errors (botocore ClientError) propagate to the
    caller, which aborts the scenario.
    """

    def __init__(self, s3_client: Any, bucket_name: str):
        """Initialize the verifier.

        Args:
            s3_client: boto3 S3 client
            bucket_name: Name of the provisioned bucket
        """
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self._cache: dict[str, Any] = {}

    def _fetch(self, operation: str) -> dict:
        if operation not in self._cache:
            method = getattr(self.s3_client, operation)
            self._cache[operation] = method(Bucket=self.bucket_name)
        return self._cache[operation]

    # === S3 GETTERS ===

    def head_bucket(self) -> dict:
        return self._fetch("head_bucket")

    def get_encryption_rules(self) -> list[dict]:
        """Return the bucket's server-side encryption rules."""
        response = self._fetch("get_bucket_encryption")
        configuration = response.get("ServerSideEncryptionConfiguration") or {}
        return configuration.get("Rules", [])

    def get_versioning_status(self) -> Optional[str]:
        """Return the versioning status, or None if never configured."""
        return self._fetch("get_bucket_versioning").get("Status")

    def get_public_access_block(self) -> dict[str, bool]:
        """Return the public access block flags."""
        response = self._fetch("get_public_access_block")
        return response.get("PublicAccessBlockConfiguration", {})

    def get_policy(self) -> str:
        """Return the bucket policy document text."""
        return self._fetch("get_bucket_policy").get("Policy", "")

    def get_lifecycle_rules(self) -> list[dict]:
        """Return the bucket's lifecycle rules."""
        return self._fetch("get_bucket_lifecycle_configuration").get("Rules", [])

    # === CHECKS ===

    def run_check(self, check_id: str, context: ScenarioContext) -> CheckExecutionResult:
        """Evaluate a single check.

        Args:
            check_id: The check to run (see CHECK_DEFINITIONS)
            context: Inputs and outputs of the scenario

        Returns:
            CheckExecutionResult with pass/fail status and details

        Raises:
            ValueError: If the check is unknown or runs at plan time.
            botocore.exceptions.ClientError: If an S3 getter fails.
        """
        # === OUTPUT CHECKS ===
        if check_id == "bucket_name":
            expected = expected_bucket_name(
                context.bucket_name, context.environment, context.name_prefix
            )
            return self._compare(check_id, expected, context.outputs.get("bucket_name", ""))

        elif check_id == "bucket_arn":
            expected = expected_bucket_arn(
                context.bucket_name, context.environment, context.name_prefix
            )
            return self._compare(check_id, expected, context.outputs.get("bucket_arn", ""))

        elif check_id == "kms_key_output":
            key_id = context.outputs.get("kms_key_id", "")
            return CheckExecutionResult(
                check_id=check_id,
                passed=bool(key_id),
                expected="non-empty key id",
                actual=key_id or "empty",
                error_message=None if key_id else "kms_key_id output is empty",
            )

        # === BUCKET STATE CHECKS ===
        elif check_id == "bucket_exists":
            self.head_bucket()
            return CheckExecutionResult(check_id, True, "reachable", "reachable")

        elif check_id == "encryption":
            rules = self.get_encryption_rules()
            return CheckExecutionResult(
                check_id=check_id,
                passed=len(rules) > 0,
                expected="at least 1 rule",
                actual=f"{len(rules)} rules",
                error_message=None if rules else "No server-side encryption rules",
            )

        elif check_id == "kms_encryption":
            return self._check_kms_encryption()

        elif check_id == "versioning":
            status = self.get_versioning_status()
            return self._compare(check_id, VERSIONING_ENABLED, status or "unset")

        elif check_id == "public_access_block":
            flags = self.get_public_access_block()
            disabled = [name for name in PUBLIC_ACCESS_BLOCK_FLAGS if flags.get(name) is not True]
            return CheckExecutionResult(
                check_id=check_id,
                passed=not disabled,
                expected="all flags true",
                actual="all flags true" if not disabled else f"false: {', '.join(disabled)}",
                error_message=f"Public access not blocked: {', '.join(disabled)}" if disabled else None,
            )

        elif check_id == "bucket_policy":
            policy = self.get_policy()
            return CheckExecutionResult(
                check_id=check_id,
                passed=bool(policy),
                expected="policy attached",
                actual="policy attached" if policy else "no policy",
                error_message=None if policy else "Bucket policy is empty",
            )

        elif check_id == "https_enforced":
            policy = self.get_policy()
            missing = [marker for marker in HTTPS_POLICY_MARKERS if marker not in policy]
            return CheckExecutionResult(
                check_id=check_id,
                passed=not missing,
                expected="deny on insecure transport",
                actual="deny on insecure transport" if not missing else f"missing: {', '.join(missing)}",
                error_message=f"Policy missing {', '.join(missing)}" if missing else None,
            )

        elif check_id == "lifecycle":
            rules = self.get_lifecycle_rules()
            return CheckExecutionResult(
                check_id=check_id,
                passed=len(rules) > 0,
                expected="at least 1 rule",
                actual=f"{len(rules)} rules",
                error_message=None if rules else "No lifecycle rules",
            )

        elif check_id in PLAN_CHECKS:
            raise ValueError(f"{check_id} runs at plan time, not against a bucket")

        else:
            raise ValueError(f"Unknown check_id: {check_id}")

    def _check_kms_encryption(self) -> CheckExecutionResult:
        rules = self.get_encryption_rules()
        default = rules[0].get("ApplyServerSideEncryptionByDefault") if rules else None

        if default is None:
            return CheckExecutionResult(
                check_id="kms_encryption",
                passed=False,
                expected=KMS_ALGORITHM,
                actual="not configured",
                error_message="Encryption rule or default encryption not configured properly",
            )

        algorithm = default.get("SSEAlgorithm", "")
        key_id = default.get("KMSMasterKeyID")

        if algorithm != KMS_ALGORITHM:
            return CheckExecutionResult(
                check_id="kms_encryption",
                passed=False,
                expected=KMS_ALGORITHM,
                actual=algorithm,
                error_message="Should use KMS encryption",
            )

        if not key_id:
            return CheckExecutionResult(
                check_id="kms_encryption",
                passed=False,
                expected=KMS_ALGORITHM,
                actual=f"{algorithm} without key id",
                error_message="KMS key ID should be set",
            )

        return CheckExecutionResult("kms_encryption", True, KMS_ALGORITHM, algorithm)

    @staticmethod
    def _compare(check_id: str, expected: str, actual: str) -> CheckExecutionResult:
        passed = expected == actual
        return CheckExecutionResult(
            check_id=check_id,
            passed=passed,
            expected=expected,
            actual=actual,
            error_message=None if passed else f"Expected {expected!r}, got {actual!r}",
        )


def check_plan_rejected(error: Optional[Exception]) -> CheckExecutionResult:
    """Evaluate the environment validation check from a plan outcome.

    Args:
        error: The exception the plan raised, or None if it succeeded

    Returns:
        Passing result only if the plan failed with the validation message.
    """
    if error is None:
        return CheckExecutionResult(
            check_id="environment_validation",
            passed=False,
            expected="plan rejected",
            actual="plan succeeded",
            error_message="Plan accepted an invalid environment",
        )

    if ENVIRONMENT_VALIDATION_MESSAGE not in str(error):
        return CheckExecutionResult(
            check_id="environment_validation",
            passed=False,
            expected="plan rejected",
            actual="plan failed for another reason",
            error_message=str(error),
        )

    return CheckExecutionResult(
        check_id="environment_validation",
        passed=True,
        expected="plan rejected",
        actual="plan rejected",
    )
