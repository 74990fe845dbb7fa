"""Producers that offload large payloads to S3 before sending."""

from src.big_payload.producer.base import PayloadProducer, create_size_attribute_map
from src.big_payload.producer.config import ProducerConfig, get_producer_config
from src.big_payload.producer.sns_producer import (
    SnsProducer,
    SnsPublishOptions,
    create_sns_producer,
)
from src.big_payload.producer.sqs_producer import (
    SqsMessageOptions,
    SqsProducer,
    create_sqs_producer,
)

__all__ = [
    "PayloadProducer",
    "ProducerConfig",
    "SnsProducer",
    "SnsPublishOptions",
    "SqsMessageOptions",
    "SqsProducer",
    "create_size_attribute_map",
    "create_sns_producer",
    "create_sqs_producer",
    "get_producer_config",
]
