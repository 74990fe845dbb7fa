"""
Producer Configuration
======================

Parses and validates producer configuration from environment variables.

For On-Call Engineers:
    Environment variables:
    - BIG_PAYLOAD_QUEUE_URL: Target SQS queue URL (SQS producer)
    - BIG_PAYLOAD_TOPIC_ARN: Target SNS topic ARN (SNS producer)
    - BIG_PAYLOAD_OFFLOAD_MODE: off | large_only | all (default: off)
    - BIG_PAYLOAD_S3_BUCKET: Bucket for offloaded payloads
    - BIG_PAYLOAD_S3_KEY_PREFIX: Object key prefix
    - BIG_PAYLOAD_MESSAGE_SIZE_THRESHOLD: Bytes sent inline (default: 262144)
    - BIG_PAYLOAD_EXTENDED_COMPATIBILITY: true to write Extended Client format
    - BIG_PAYLOAD_SQS_ENDPOINT_URL / _SNS_ / _S3_: Custom endpoints

    If sends fail with "Message is too big":
    1. Check BIG_PAYLOAD_OFFLOAD_MODE is large_only or all
    2. Verify BIG_PAYLOAD_S3_BUCKET is set and writable
"""

import logging
import os
from dataclasses import dataclass

from src.big_payload.shared.constants import DEFAULT_MAX_MESSAGE_SIZE
from src.big_payload.shared.env import parse_bool_env, parse_int_env
from src.big_payload.shared.errors import ConfigurationError
from src.big_payload.shared.size_policy import OffloadMode, SizePolicy

logger = logging.getLogger(__name__)


@dataclass
class ProducerConfig:
    """
    Configuration for an SQS or SNS producer.

    All fields are validated on instantiation.

    Attributes:
        queue_url: SQS queue URL (SqsProducer)
        topic_arn: SNS topic ARN (SnsProducer)
        offload_mode: When payloads go through S3
        s3_bucket: Bucket for offloaded payloads (required unless mode is off)
        s3_key_prefix: Prepended to every object key; None selects the
            producer's default
        message_size_threshold: Largest body sent inline, in bytes
        extended_library_compatibility: Write Extended Client envelopes
    """

    queue_url: str | None = None
    topic_arn: str | None = None
    offload_mode: OffloadMode = OffloadMode.OFF
    s3_bucket: str | None = None
    s3_key_prefix: str | None = None
    message_size_threshold: int = DEFAULT_MAX_MESSAGE_SIZE
    extended_library_compatibility: bool = False
    region: str | None = None
    sqs_endpoint_url: str | None = None
    sns_endpoint_url: str | None = None
    s3_endpoint_url: str | None = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.offload_mode = OffloadMode(self.offload_mode)
        self._validate()

    def _validate(self):
        """
        Raises:
            ConfigurationError: If any validation fails
        """
        if self.offload_mode != OffloadMode.OFF and not self.s3_bucket:
            raise ConfigurationError(
                "s3_bucket is required when offload_mode is "
                f"'{self.offload_mode.value}'"
            )

        if self.message_size_threshold <= 0:
            raise ConfigurationError(
                "message_size_threshold must be positive, "
                f"got {self.message_size_threshold}"
            )

        if self.topic_arn and not self.topic_arn.startswith("arn:"):
            raise ConfigurationError(f"Invalid topic ARN format: {self.topic_arn}")

    @property
    def size_policy(self) -> SizePolicy:
        return SizePolicy.from_mode(self.offload_mode, self.message_size_threshold)


def get_producer_config() -> ProducerConfig:
    """
    Load and validate producer configuration from environment variables.

    Raises:
        ConfigurationError: If values are missing or invalid

    Example:
        >>> os.environ["BIG_PAYLOAD_OFFLOAD_MODE"] = "large_only"
        >>> os.environ["BIG_PAYLOAD_S3_BUCKET"] = "message-payload"
        >>> get_producer_config().size_policy.offload_large_only
        True
    """
    mode = os.environ.get("BIG_PAYLOAD_OFFLOAD_MODE", OffloadMode.OFF.value).lower()
    try:
        offload_mode = OffloadMode(mode)
    except ValueError as e:
        raise ConfigurationError(
            f"BIG_PAYLOAD_OFFLOAD_MODE must be one of off, large_only, all: {mode}"
        ) from e

    config = ProducerConfig(
        queue_url=os.environ.get("BIG_PAYLOAD_QUEUE_URL") or None,
        topic_arn=os.environ.get("BIG_PAYLOAD_TOPIC_ARN") or None,
        offload_mode=offload_mode,
        s3_bucket=os.environ.get("BIG_PAYLOAD_S3_BUCKET") or None,
        s3_key_prefix=os.environ.get("BIG_PAYLOAD_S3_KEY_PREFIX"),
        message_size_threshold=parse_int_env(
            "BIG_PAYLOAD_MESSAGE_SIZE_THRESHOLD", DEFAULT_MAX_MESSAGE_SIZE
        ),
        extended_library_compatibility=parse_bool_env(
            "BIG_PAYLOAD_EXTENDED_COMPATIBILITY"
        ),
        region=os.environ.get("AWS_DEFAULT_REGION") or os.environ.get("AWS_REGION"),
        sqs_endpoint_url=os.environ.get("BIG_PAYLOAD_SQS_ENDPOINT_URL") or None,
        sns_endpoint_url=os.environ.get("BIG_PAYLOAD_SNS_ENDPOINT_URL") or None,
        s3_endpoint_url=os.environ.get("BIG_PAYLOAD_S3_ENDPOINT_URL") or None,
    )

    logger.info(
        "Producer configuration loaded",
        extra={
            "offload_mode": config.offload_mode.value,
            "s3_bucket": config.s3_bucket,
            "message_size_threshold": config.message_size_threshold,
            "extended_library_compatibility": config.extended_library_compatibility,
        },
    )
    return config
