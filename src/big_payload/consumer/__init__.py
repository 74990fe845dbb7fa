"""SQS consumer that resolves S3-offloaded payloads.

- SqsConsumer: poll loop and per-message pipeline
- ConsumerEvents / MessageErrorEvent: observer notifications
- unwrap_sns_notification / raw_message_from_lambda_record: input adapters
"""

from src.big_payload.consumer.config import ConsumerConfig, get_consumer_config
from src.big_payload.consumer.events import (
    ConsumerEvents,
    EventEmitter,
    MessageErrorEvent,
)
from src.big_payload.consumer.sqs_consumer import (
    ConsumerState,
    SqsConsumer,
    create_sqs_consumer,
    is_connection_error,
    is_fatal_error,
)
from src.big_payload.consumer.transforms import (
    raw_message_from_lambda_record,
    unwrap_sns_notification,
)

__all__ = [
    "ConsumerConfig",
    "ConsumerEvents",
    "ConsumerState",
    "EventEmitter",
    "MessageErrorEvent",
    "SqsConsumer",
    "create_sqs_consumer",
    "get_consumer_config",
    "is_connection_error",
    "is_fatal_error",
    "raw_message_from_lambda_record",
    "unwrap_sns_notification",
]
