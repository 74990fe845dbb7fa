"""
Payload Producer
================

Shared send logic for the SQS and SNS producers.

Flow of send():
    serialize --> size policy --> [S3 upload] --> envelope encode --> transport send

For On-Call Engineers:
    - PayloadTooLargeError: body above threshold with offload_mode=off; nothing
      was sent.
    - UploadError: S3 rejected the payload; nothing was sent.
    - Objects are never deleted by the producer. Configure an S3 lifecycle
      rule on the payload bucket to expire them.

For Developers:
    - Subclasses implement _transport_send() only.
    - Serialization uses json.dumps and the size is measured on that exact
      string, so the decision and the transported bytes always agree.
"""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any

from src.big_payload.producer.config import ProducerConfig
from src.big_payload.shared.aws_clients import get_s3_client
from src.big_payload.shared.constants import (
    LARGE_PAYLOAD_SIZE_ATTRIBUTE,
    LARGE_PAYLOAD_SIZE_DATA_TYPE,
    NATIVE_KEY_SUFFIX,
    PAYLOAD_CONTENT_TYPE,
)
from src.big_payload.shared.envelope import EnvelopeVariant, encode
from src.big_payload.shared.errors import PayloadTooLargeError
from src.big_payload.shared.models import PayloadReference, SendResult
from src.big_payload.shared.payload_store import S3PayloadStore
from src.big_payload.shared.size_policy import SizeDecision, message_size

logger = logging.getLogger(__name__)


def create_size_attribute_map(msg_size: int) -> dict[str, dict[str, str]]:
    """Build the Extended Client size attribute for a payload of msg_size bytes."""
    return {
        LARGE_PAYLOAD_SIZE_ATTRIBUTE: {
            "DataType": LARGE_PAYLOAD_SIZE_DATA_TYPE,
            "StringValue": str(msg_size),
        }
    }


def serialize_message(message: Any) -> str:
    """Serialize an application message the way it will be transported."""
    return json.dumps(message, ensure_ascii=False)


class PayloadProducer(ABC):
    """Base producer: offloads large bodies to S3 and sends a pointer instead.

    Usage:
        producer = SqsProducer(config, sqs_client=sqs, s3_client=s3)
        result = producer.send({"it": "works"})
        if result.offloaded:
            print(result.s3_response.key)
    """

    default_key_prefix = ""

    def __init__(self, config: ProducerConfig, s3_client: Any = None) -> None:
        self._config = config
        self._policy = config.size_policy
        self._variant = (
            EnvelopeVariant.COMPATIBLE
            if config.extended_library_compatibility
            else EnvelopeVariant.NATIVE
        )
        self._key_prefix = (
            config.s3_key_prefix
            if config.s3_key_prefix is not None
            else self.default_key_prefix
        )

        self._store: S3PayloadStore | None = None
        if self._policy.offload_enabled or s3_client is not None:
            if s3_client is None:
                s3_client = get_s3_client(config.region, config.s3_endpoint_url)
            self._store = S3PayloadStore(s3_client)

    @property
    def config(self) -> ProducerConfig:
        return self._config

    @property
    def envelope_variant(self) -> EnvelopeVariant:
        return self._variant

    def send(self, message: Any, options: Any = None) -> SendResult:
        """Send a JSON-serializable message, offloading it to S3 if required.

        Args:
            message: Application message (anything json.dumps accepts)
            options: Transport-specific options (see subclasses)

        Returns:
            SendResult with the transport response and, when offloaded, the
            S3 upload result

        Raises:
            PayloadTooLargeError: Body exceeds the threshold and offload is off
            UploadError: S3 upload failed; the message was not sent
        """
        body = serialize_message(message)
        size = message_size(body)
        decision = self._policy.decide(size)

        if decision == SizeDecision.REJECT_TOO_LARGE:
            logger.warning(
                "Message rejected as too large",
                extra={"size_bytes": size, "threshold": self._policy.threshold_bytes},
            )
            raise PayloadTooLargeError(size, self._policy.threshold_bytes)

        if decision == SizeDecision.SEND_INLINE:
            response = self._transport_send(body, {}, options)
            logger.debug("Message sent inline", extra={"size_bytes": size})
            return SendResult(transport_response=response)

        payload_id = str(uuid.uuid4())
        key = self._object_key(payload_id)
        upload = self._require_store().put(
            self._config.s3_bucket, key, body, PAYLOAD_CONTENT_TYPE
        )
        reference = PayloadReference(
            id=payload_id,
            bucket=upload.bucket,
            key=upload.key,
            location=upload.location,
        )
        response = self._send_envelope(reference, size, options)

        logger.info(
            "Message sent through S3",
            extra={
                "size_bytes": size,
                "bucket": upload.bucket,
                "key": upload.key,
                "variant": self._variant.value,
            },
        )
        return SendResult(transport_response=response, s3_response=upload)

    def send_reference(
        self,
        reference: PayloadReference,
        msg_size: int | None = None,
        options: Any = None,
    ) -> SendResult:
        """Send a pointer to a payload that is already in S3.

        Used to relay a received message to another queue or topic without
        duplicating the stored object.

        Args:
            reference: Existing payload reference (e.g. s3_payload_meta of a
                received message)
            msg_size: Payload size for the compatible size attribute. Looked
                up from S3 when omitted in compatible mode.
            options: Transport-specific options
        """
        if self._variant == EnvelopeVariant.COMPATIBLE and msg_size is None:
            msg_size = self._require_store().size(reference.bucket, reference.key)

        response = self._send_envelope(reference, msg_size, options)
        logger.info(
            "Payload reference relayed",
            extra={"bucket": reference.bucket, "key": reference.key},
        )
        return SendResult(transport_response=response)

    def _send_envelope(
        self, reference: PayloadReference, msg_size: int | None, options: Any
    ) -> dict[str, Any]:
        attributes: dict[str, dict[str, str]] = {}
        if self._variant == EnvelopeVariant.COMPATIBLE and msg_size is not None:
            attributes = create_size_attribute_map(msg_size)
        return self._transport_send(encode(reference, self._variant), attributes, options)

    def _object_key(self, payload_id: str) -> str:
        # Extended Client readers expect the bare identifier
        if self._variant == EnvelopeVariant.COMPATIBLE:
            return f"{self._key_prefix}{payload_id}"
        return f"{self._key_prefix}{payload_id}{NATIVE_KEY_SUFFIX}"

    def _require_store(self) -> S3PayloadStore:
        if self._store is None:
            self._store = S3PayloadStore(
                get_s3_client(self._config.region, self._config.s3_endpoint_url)
            )
        return self._store

    @abstractmethod
    def _transport_send(
        self, body: str, attributes: dict[str, dict[str, str]], options: Any
    ) -> dict[str, Any]:
        """Send a body through the queue or topic and return the raw response."""
