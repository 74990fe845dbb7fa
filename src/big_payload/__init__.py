"""Send and receive SQS/SNS messages larger than the transport limit.

Bodies above the size threshold are stored in S3 and replaced with a
pointer envelope. Consumers resolve the pointer back to the payload.
The compatible envelope interoperates with the Amazon SQS Extended Client
library.
"""

from src.big_payload.consumer import (
    ConsumerConfig,
    ConsumerEvents,
    MessageErrorEvent,
    SqsConsumer,
    unwrap_sns_notification,
)
from src.big_payload.producer import (
    ProducerConfig,
    SnsProducer,
    SqsProducer,
)
from src.big_payload.shared.models import (
    PayloadReference,
    ProcessedMessage,
    SendResult,
    UploadResult,
)
from src.big_payload.shared.size_policy import OffloadMode

__all__ = [
    "ConsumerConfig",
    "ConsumerEvents",
    "MessageErrorEvent",
    "OffloadMode",
    "PayloadReference",
    "ProcessedMessage",
    "ProducerConfig",
    "SendResult",
    "SnsProducer",
    "SqsConsumer",
    "SqsProducer",
    "UploadResult",
    "unwrap_sns_notification",
]
