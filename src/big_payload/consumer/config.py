"""
Consumer Configuration
======================

Parses and validates consumer configuration from environment variables.

For On-Call Engineers:
    Environment variables:
    - BIG_PAYLOAD_QUEUE_URL: Queue to poll (required)
    - BIG_PAYLOAD_BATCH_SIZE: Messages per receive call, 1-10 (default: 10)
    - BIG_PAYLOAD_WAIT_TIME_SECONDS: Long-poll wait, 0-20 (default: 20)
    - BIG_PAYLOAD_VISIBILITY_TIMEOUT: Override the queue's visibility timeout
    - BIG_PAYLOAD_GET_PAYLOAD_FROM_S3: true to download offloaded payloads
    - BIG_PAYLOAD_EXTENDED_COMPATIBILITY: true to read Extended Client pointers
    - BIG_PAYLOAD_CONNECTION_ERROR_TIMEOUT: Pause after connection errors (s)
    - BIG_PAYLOAD_POLL_ERROR_TIMEOUT: Pause after other polling errors (s)

    Messages that fail are NOT deleted. They reappear after the visibility
    timeout and move to the queue's dead-letter queue once its redrive
    policy maxReceiveCount is reached.
"""

import logging
import os
from dataclasses import dataclass

from src.big_payload.shared.constants import MAX_RECEIVE_BATCH_SIZE, MAX_WAIT_TIME_SECONDS
from src.big_payload.shared.env import parse_bool_env, parse_float_env, parse_int_env
from src.big_payload.shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_ERROR_TIMEOUT_SECONDS = 10.0
DEFAULT_POLL_ERROR_TIMEOUT_SECONDS = 1.0


@dataclass
class ConsumerConfig:
    """
    Configuration for an SQS consumer.

    All fields are validated on instantiation.
    """

    queue_url: str
    batch_size: int = MAX_RECEIVE_BATCH_SIZE
    wait_time_seconds: int = MAX_WAIT_TIME_SECONDS
    visibility_timeout: int | None = None
    get_payload_from_s3: bool = False
    extended_library_compatibility: bool = False
    connection_error_timeout_seconds: float = DEFAULT_CONNECTION_ERROR_TIMEOUT_SECONDS
    poll_error_timeout_seconds: float = DEFAULT_POLL_ERROR_TIMEOUT_SECONDS
    region: str | None = None
    sqs_endpoint_url: str | None = None
    s3_endpoint_url: str | None = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Raises:
            ConfigurationError: If any validation fails
        """
        if not self.queue_url:
            raise ConfigurationError("queue_url is required")

        if not 1 <= self.batch_size <= MAX_RECEIVE_BATCH_SIZE:
            raise ConfigurationError(
                f"batch_size must be between 1 and {MAX_RECEIVE_BATCH_SIZE}, "
                f"got {self.batch_size}"
            )

        if not 0 <= self.wait_time_seconds <= MAX_WAIT_TIME_SECONDS:
            raise ConfigurationError(
                f"wait_time_seconds must be between 0 and {MAX_WAIT_TIME_SECONDS}, "
                f"got {self.wait_time_seconds}"
            )

        if self.visibility_timeout is not None and self.visibility_timeout < 0:
            raise ConfigurationError(
                f"visibility_timeout cannot be negative, got {self.visibility_timeout}"
            )

        if self.connection_error_timeout_seconds < 0:
            raise ConfigurationError("connection_error_timeout_seconds cannot be negative")

        if self.poll_error_timeout_seconds < 0:
            raise ConfigurationError("poll_error_timeout_seconds cannot be negative")


def get_consumer_config() -> ConsumerConfig:
    """
    Load and validate consumer configuration from environment variables.

    Raises:
        ConfigurationError: If required vars missing or invalid
    """
    visibility = os.environ.get("BIG_PAYLOAD_VISIBILITY_TIMEOUT", "")
    config = ConsumerConfig(
        queue_url=os.environ.get("BIG_PAYLOAD_QUEUE_URL", ""),
        batch_size=parse_int_env("BIG_PAYLOAD_BATCH_SIZE", MAX_RECEIVE_BATCH_SIZE),
        wait_time_seconds=parse_int_env(
            "BIG_PAYLOAD_WAIT_TIME_SECONDS", MAX_WAIT_TIME_SECONDS
        ),
        visibility_timeout=(
            parse_int_env("BIG_PAYLOAD_VISIBILITY_TIMEOUT", 0) if visibility else None
        ),
        get_payload_from_s3=parse_bool_env("BIG_PAYLOAD_GET_PAYLOAD_FROM_S3"),
        extended_library_compatibility=parse_bool_env(
            "BIG_PAYLOAD_EXTENDED_COMPATIBILITY"
        ),
        connection_error_timeout_seconds=parse_float_env(
            "BIG_PAYLOAD_CONNECTION_ERROR_TIMEOUT",
            DEFAULT_CONNECTION_ERROR_TIMEOUT_SECONDS,
        ),
        poll_error_timeout_seconds=parse_float_env(
            "BIG_PAYLOAD_POLL_ERROR_TIMEOUT", DEFAULT_POLL_ERROR_TIMEOUT_SECONDS
        ),
        region=os.environ.get("AWS_DEFAULT_REGION") or os.environ.get("AWS_REGION"),
        sqs_endpoint_url=os.environ.get("BIG_PAYLOAD_SQS_ENDPOINT_URL") or None,
        s3_endpoint_url=os.environ.get("BIG_PAYLOAD_S3_ENDPOINT_URL") or None,
    )

    logger.info(
        "Consumer configuration loaded",
        extra={
            "queue_url": config.queue_url,
            "batch_size": config.batch_size,
            "get_payload_from_s3": config.get_payload_from_s3,
            "extended_library_compatibility": config.extended_library_compatibility,
        },
    )
    return config
