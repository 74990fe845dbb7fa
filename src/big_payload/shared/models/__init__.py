"""Shared models for big payload producers and consumers.

- PayloadReference: pointer to an offloaded payload in S3
- ProcessedMessage: received message with its resolved payload
- UploadResult / SendResult: producer outcomes
"""

from src.big_payload.shared.models.payload_reference import PayloadReference
from src.big_payload.shared.models.processed_message import ProcessedMessage
from src.big_payload.shared.models.send_result import SendResult, UploadResult

__all__ = [
    "PayloadReference",
    "ProcessedMessage",
    "SendResult",
    "UploadResult",
]
