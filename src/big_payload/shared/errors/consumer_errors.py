"""Consumer-side errors.

These never escape the poll loop. Each is reported through a consumer
event and the affected message is left unacknowledged so SQS redelivers
it after the visibility timeout.
"""

from typing import Any

from src.big_payload.shared.errors.base import BigPayloadError


class MalformedEnvelopeError(BigPayloadError):
    """A body looks like an offload envelope but cannot be decoded.

    Attributes:
        parsed: The decoded JSON structure (or the raw body when it was not
            JSON), unmodified, for diagnostics.
    """

    def __init__(self, message: str, parsed: Any = None):
        self.parsed = parsed
        super().__init__(message)


class MalformedNativeEnvelopeError(MalformedEnvelopeError):
    """Native envelope without an S3Payload holding Bucket and Key."""

    def __init__(self, parsed: Any = None):
        super().__init__(
            "Invalid message format, S3Payload with Bucket and Key fields is required",
            parsed,
        )


class MalformedArrayShapeError(MalformedEnvelopeError):
    """Compatible envelope is not a 2-element array."""

    def __init__(self, parsed: Any = None):
        super().__init__(
            "Invalid message format, expected an array with 2 elements", parsed
        )


class MissingRequiredFieldsError(MalformedEnvelopeError):
    """Compatible envelope pointer lacks a truthy s3BucketName or s3Key."""

    def __init__(self, parsed: Any = None):
        super().__init__(
            "Invalid message format, s3Key and s3BucketName fields are required",
            parsed,
        )


class PayloadFetchError(BigPayloadError):
    """Downloading an offloaded payload from S3 failed."""

    def __init__(self, bucket: str, key: str, reason: str | None = None):
        self.bucket = bucket
        self.key = key
        self.reason = reason
        message = f"Failed to fetch payload from s3://{bucket}/{key}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PayloadParseError(BigPayloadError):
    """The configured payload parser rejected the effective body."""

    pass


class ProcessingError(BigPayloadError):
    """The user handler, or the acknowledgement after it, failed."""

    pass


class TransportConnectionError(BigPayloadError):
    """SQS could not be reached or refused the credentials while polling."""

    pass
