"""SQS producer for large payloads.

Sends JSON messages to an SQS queue, offloading bodies above the size
threshold (or all bodies) to S3.
"""

import logging
from dataclasses import dataclass
from typing import Any

from botocore.exceptions import ClientError

from src.big_payload.producer.base import PayloadProducer
from src.big_payload.producer.config import ProducerConfig, get_producer_config
from src.big_payload.shared.aws_clients import get_sqs_client
from src.big_payload.shared.constants import DEFAULT_SQS_KEY_PREFIX
from src.big_payload.shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SqsMessageOptions:
    """Per-message SQS send options.

    Attributes:
        delay_seconds: Delivery delay (standard queues)
        message_deduplication_id: FIFO deduplication ID
        message_group_id: FIFO message group
    """

    delay_seconds: int | None = None
    message_deduplication_id: str | None = None
    message_group_id: str | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.delay_seconds is not None:
            params["DelaySeconds"] = self.delay_seconds
        if self.message_deduplication_id is not None:
            params["MessageDeduplicationId"] = self.message_deduplication_id
        if self.message_group_id is not None:
            params["MessageGroupId"] = self.message_group_id
        return params


class SqsProducer(PayloadProducer):
    """Sends messages to an SQS queue.

    Usage:
        producer = SqsProducer(
            ProducerConfig(
                queue_url="https://sqs.us-east-1.amazonaws.com/123456789012/jobs",
                offload_mode=OffloadMode.LARGE_ONLY,
                s3_bucket="message-payload",
            )
        )
        producer.send_json({"job": "resize", "pixels": [...]})
    """

    default_key_prefix = DEFAULT_SQS_KEY_PREFIX

    def __init__(
        self,
        config: ProducerConfig,
        sqs_client: Any = None,
        s3_client: Any = None,
    ) -> None:
        """Initialize SqsProducer.

        Args:
            config: Producer configuration; queue_url is required
            sqs_client: Optional boto3 SQS client for testing
            s3_client: Optional boto3 S3 client for testing

        Raises:
            ConfigurationError: If queue_url is missing or offload has no bucket
        """
        if not config.queue_url:
            raise ConfigurationError("queue_url is required for SqsProducer")
        super().__init__(config, s3_client=s3_client)
        self._queue_url = config.queue_url
        self._sqs = (
            sqs_client
            if sqs_client is not None
            else get_sqs_client(config.region, config.sqs_endpoint_url)
        )

    @classmethod
    def create(
        cls, config: ProducerConfig, sqs_client: Any = None, s3_client: Any = None
    ) -> "SqsProducer":
        return cls(config, sqs_client=sqs_client, s3_client=s3_client)

    @property
    def queue_url(self) -> str:
        return self._queue_url

    def send_json(self, message: Any, options: SqsMessageOptions | None = None):
        """Send a JSON message. See PayloadProducer.send()."""
        return self.send(message, options)

    def send_s3_payload(
        self,
        s3_payload_meta,
        msg_size: int | None = None,
        options: SqsMessageOptions | None = None,
    ):
        """Send a payload that is already in S3. See PayloadProducer.send_reference()."""
        return self.send_reference(s3_payload_meta, msg_size, options)

    def _transport_send(
        self,
        body: str,
        attributes: dict[str, dict[str, str]],
        options: SqsMessageOptions | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"QueueUrl": self._queue_url, "MessageBody": body}
        if attributes:
            params["MessageAttributes"] = attributes
        if options is not None:
            params.update(options.to_params())

        try:
            response = self._sqs.send_message(**params)
        except ClientError as e:
            logger.error(
                "Failed to send SQS message",
                extra={
                    "error": str(e),
                    "queue_url": self._queue_url,
                },
            )
            raise

        logger.debug(
            "SQS message sent",
            extra={"message_id": response.get("MessageId"), "queue_url": self._queue_url},
        )
        return response


def create_sqs_producer(
    config: ProducerConfig | None = None,
    sqs_client: Any = None,
    s3_client: Any = None,
) -> SqsProducer:
    """Factory function to create an SqsProducer.

    Args:
        config: Producer configuration (defaults to environment variables)
        sqs_client: Optional boto3 SQS client for testing
        s3_client: Optional boto3 S3 client for testing
    """
    return SqsProducer(
        config or get_producer_config(), sqs_client=sqs_client, s3_client=s3_client
    )
