"""
S3 client helpers for the hourly export.

Builds a boto3 S3 client from settings (endpoint override for localstack,
explicit or default-chain credentials) and wraps the two calls the export
needs: putting an object and listing the keys of a bucket.

CHANGELOG:
- 2026-10-16: Initial creation

TODO:
- None
"""

import logging

import boto3
from botocore.exceptions import ClientError

from powerlog.src.config import Settings

logger = logging.getLogger(__name__)


def get_s3_client(settings: Settings):
    """Create a boto3 S3 client.

    Explicit credentials are passed only when both are configured; otherwise
    boto3 resolves them through its default credential chain.

    Args:
        settings: Application settings.

    Returns:
        A boto3 S3 client.
    """
    kwargs: dict = {"region_name": settings.AWS_REGION}
    if settings.S3_ENDPOINT_URL:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT_URL
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
    else:
        logger.info("AWS credentials not configured, using boto3 default chain")
    return boto3.client("s3", **kwargs)


def upload_bytes(client, bucket: str, key: str, body: bytes) -> None:
    """Upload *body* to ``s3://bucket/key``.

    Raises:
        ClientError: The upload was rejected.
    """
    try:
        client.put_object(Bucket=bucket, Key=key, Body=body)
    except ClientError:
        logger.exception("Upload of %s to bucket %s failed", key, bucket)
        raise
    logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(body), bucket)


def list_keys(client, bucket: str) -> list[str]:
    """Return every object key in *bucket*, across all listing pages.

    Raises:
        ClientError: The listing was rejected.
    """
    paginator = client.get_paginator("list_objects_v2")
    keys: list[str] = []
    try:
        for page in paginator.paginate(Bucket=bucket):
            keys.extend(obj["Key"] for obj in page.get("Contents", []))
    except ClientError:
        logger.exception("Listing bucket %s failed", bucket)
        raise
    return keys
