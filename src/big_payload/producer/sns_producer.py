"""SNS producer for large payloads.

Publishes JSON messages to an SNS topic, offloading bodies above the size
threshold (or all bodies) to S3. Subscribed queues receive the pointer
wrapped in the SNS notification unless raw message delivery is enabled;
consumers unwrap it with unwrap_sns_notification().
"""

import logging
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from src.big_payload.producer.base import PayloadProducer
from src.big_payload.producer.config import ProducerConfig, get_producer_config
from src.big_payload.shared.aws_clients import get_sns_client
from src.big_payload.shared.constants import DEFAULT_SNS_KEY_PREFIX
from src.big_payload.shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnsPublishOptions:
    """Per-message options for FIFO topics."""

    message_deduplication_id: str | None = None
    message_group_id: str | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.message_deduplication_id is not None:
            params["MessageDeduplicationId"] = self.message_deduplication_id
        if self.message_group_id is not None:
            params["MessageGroupId"] = self.message_group_id
        return params


class SnsProducer(PayloadProducer):
    """Publishes messages to an SNS topic.

    Usage:
        producer = SnsProducer(
            ProducerConfig(
                topic_arn="arn:aws:sns:us-east-1:123456789012:events",
                offload_mode=OffloadMode.ALL,
                s3_bucket="message-payload",
            )
        )
        producer.publish_json({"event": "created"})
    """

    default_key_prefix = DEFAULT_SNS_KEY_PREFIX

    def __init__(
        self,
        config: ProducerConfig,
        sns_client: Any = None,
        s3_client: Any = None,
    ) -> None:
        """Initialize SnsProducer.

        Args:
            config: Producer configuration; topic_arn is required
            sns_client: Optional boto3 SNS client for testing
            s3_client: Optional boto3 S3 client for testing

        Raises:
            ConfigurationError: If topic_arn is missing or offload has no bucket
        """
        if not config.topic_arn:
            raise ConfigurationError("topic_arn is required for SnsProducer")
        super().__init__(config, s3_client=s3_client)
        self._topic_arn = config.topic_arn
        self._sns = (
            sns_client
            if sns_client is not None
            else get_sns_client(config.region, config.sns_endpoint_url)
        )

    @classmethod
    def create(
        cls, config: ProducerConfig, sns_client: Any = None, s3_client: Any = None
    ) -> "SnsProducer":
        return cls(config, sns_client=sns_client, s3_client=s3_client)

    @property
    def topic_arn(self) -> str:
        return self._topic_arn

    def publish_json(self, message: Any, options: SnsPublishOptions | None = None):
        """Publish a JSON message. See PayloadProducer.send()."""
        return self.send(message, options)

    def publish_s3_payload(
        self,
        s3_payload_meta,
        msg_size: int | None = None,
        options: SnsPublishOptions | None = None,
    ):
        """Publish a payload that is already in S3. See PayloadProducer.send_reference()."""
        return self.send_reference(s3_payload_meta, msg_size, options)

    def _transport_send(
        self,
        body: str,
        attributes: dict[str, dict[str, str]],
        options: SnsPublishOptions | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"TopicArn": self._topic_arn, "Message": body}
        if attributes:
            params["MessageAttributes"] = attributes
        if options is not None:
            params.update(options.to_params())

        try:
            response = self._sns.publish(**params)
        except ClientError as e:
            logger.error(
                "Failed to publish SNS message",
                extra={
                    "error": str(e),
                    "topic_arn": self._topic_arn,
                },
            )
            raise

        logger.debug(
            "SNS message published",
            extra={"message_id": response.get("MessageId"), "topic_arn": self._topic_arn},
        )
        return response


def create_sns_producer(
    config: ProducerConfig | None = None,
    sns_client: Any = None,
    s3_client: Any = None,
) -> SnsProducer:
    """Factory function to create an SnsProducer.

    Args:
        config: Producer configuration (defaults to environment variables)
        sns_client: Optional boto3 SNS client for testing
        s3_client: Optional boto3 S3 client for testing
    """
    return SnsProducer(
        config or get_producer_config(), sns_client=sns_client, s3_client=s3_client
    )
