"""
AWS Client Factory
==================

Creates the SQS, SNS and S3 clients used by producers and consumers.

Retry and timeout behaviour for individual AWS calls lives entirely in the
botocore Config below. Nothing in this package retries on top of it.

For On-Call Engineers:
    - Credential errors while polling surface as connection_error events.
    - For LocalStack or other emulators pass the *_endpoint_url options
      (or set BIG_PAYLOAD_*_ENDPOINT_URL).

For Developers:
    - Every producer/consumer accepts injected clients; use MagicMock or
      moto in tests instead of patching these functions.
"""

import logging
import os
from typing import Any

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)

# Retry configuration for transient failures of single calls
RETRY_CONFIG = Config(
    retries={
        "max_attempts": 3,
        "mode": "standard",
    },
    connect_timeout=5,
    # Long polling holds a receive call open for up to 20 seconds
    read_timeout=30,
)


def resolve_region(region_name: str | None = None) -> str:
    """
    Resolve the AWS region from the argument or environment.

    Raises:
        ValueError: If no region can be determined
    """
    region = (
        region_name
        or os.environ.get("AWS_DEFAULT_REGION")
        or os.environ.get("AWS_REGION")
    )
    if not region:
        raise ValueError(
            "AWS_DEFAULT_REGION or AWS_REGION environment variable must be set"
        )
    return region


def _client(
    service: str, region_name: str | None, endpoint_url: str | None, **kwargs: Any
) -> Any:
    region = resolve_region(region_name)
    logger.debug(
        "Creating AWS client",
        extra={"service": service, "region": region, "endpoint_url": endpoint_url},
    )
    return boto3.client(
        service,
        region_name=region,
        endpoint_url=endpoint_url,
        config=kwargs.pop("config", RETRY_CONFIG),
        **kwargs,
    )


def get_sqs_client(
    region_name: str | None = None, endpoint_url: str | None = None
) -> Any:
    """Get an SQS client with retry configuration."""
    return _client("sqs", region_name, endpoint_url)


def get_sns_client(
    region_name: str | None = None, endpoint_url: str | None = None
) -> Any:
    """Get an SNS client with retry configuration."""
    return _client("sns", region_name, endpoint_url)


def get_s3_client(
    region_name: str | None = None, endpoint_url: str | None = None
) -> Any:
    """
    Get an S3 client with retry configuration.

    Custom endpoints (LocalStack, MinIO) use path-style addressing.
    """
    config = RETRY_CONFIG
    if endpoint_url:
        config = RETRY_CONFIG.merge(Config(s3={"addressing_style": "path"}))
    return _client("s3", region_name, endpoint_url, config=config)
