"""Error types for the big payload producer and consumer.

Producer errors are raised to the caller. Consumer errors are delivered
through consumer events and never crash the poll loop.
"""

from src.big_payload.shared.errors.base import BigPayloadError, ConfigurationError
from src.big_payload.shared.errors.consumer_errors import (
    MalformedArrayShapeError,
    MalformedEnvelopeError,
    MalformedNativeEnvelopeError,
    MissingRequiredFieldsError,
    PayloadFetchError,
    PayloadParseError,
    ProcessingError,
    TransportConnectionError,
)
from src.big_payload.shared.errors.producer_errors import (
    PayloadTooLargeError,
    UploadError,
)

__all__ = [
    "BigPayloadError",
    "ConfigurationError",
    # Producer
    "PayloadTooLargeError",
    "UploadError",
    # Consumer
    "MalformedArrayShapeError",
    "MalformedEnvelopeError",
    "MalformedNativeEnvelopeError",
    "MissingRequiredFieldsError",
    "PayloadFetchError",
    "PayloadParseError",
    "ProcessingError",
    "TransportConnectionError",
]
