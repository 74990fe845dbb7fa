"""Producer-side errors.

Raised synchronously to the caller of send(); a message that fails with
any of these has not been sent.
"""

from src.big_payload.shared.errors.base import BigPayloadError


class PayloadTooLargeError(BigPayloadError):
    """Serialized message exceeds the threshold and offloading is disabled.

    Raised before any network call is made.
    """

    def __init__(self, size: int, threshold: int):
        self.size = size
        self.threshold = threshold
        super().__init__(
            f"Message is too big ({size} > {threshold}). Use offload mode "
            "'large_only' to send large payloads through S3."
        )


class UploadError(BigPayloadError):
    """Uploading the payload to S3 failed; the message was not sent."""

    def __init__(self, bucket: str, key: str, reason: str | None = None):
        self.bucket = bucket
        self.key = key
        self.reason = reason
        message = f"Failed to upload payload to s3://{bucket}/{key}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
