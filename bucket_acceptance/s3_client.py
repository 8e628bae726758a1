"""S3 client factory for the acceptance tester.

Creates boto3 S3 clients for the region a scenario provisions into.
Credentials come from the standard AWS provider chain.
"""

from typing import Optional

import boto3
from botocore.client import Config


def build_s3_client(region: str, session: Optional[boto3.session.Session] = None):
    """Build a boto3 S3 client for the given region.

    Args:
        region: AWS region the bucket lives in.
        session: Optional boto3 session to build the client from. When
                omitted the default session is used.

    Returns:
        A boto3 S3 client.
    """
    boto_config = Config(signature_version="s3v4")

    if session is not None:
        return session.client("s3", region_name=region, config=boto_config)

    return boto3.client("s3", region_name=region, config=boto_config)
