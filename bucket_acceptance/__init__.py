"""S3 Bucket Module Acceptance Tester.

Applies the S3 bucket Terraform module's example configurations and
verifies the provisioned bucket's security defaults through the S3 API.
"""

__version__ = "1.0.0"

from bucket_acceptance.cli import main

__all__ = ["main", "__version__"]
