"""Offload decision for serialized messages.

The decision is made on the UTF-8 length of the already-serialized body so
that what is measured is exactly what would be transported.
"""

from dataclasses import dataclass
from enum import Enum

from src.big_payload.shared.constants import DEFAULT_MAX_MESSAGE_SIZE


class SizeDecision(str, Enum):
    """Outcome of the size policy for one message."""

    SEND_INLINE = "send_inline"
    OFFLOAD_TO_STORE = "offload_to_store"
    REJECT_TOO_LARGE = "reject_too_large"


class OffloadMode(str, Enum):
    """When payloads go through S3.

    Values match the BIG_PAYLOAD_OFFLOAD_MODE environment variable.
    """

    OFF = "off"
    LARGE_ONLY = "large_only"
    ALL = "all"


def message_size(body: str) -> int:
    """Return the UTF-8 byte length of a serialized message body."""
    return len(body.encode("utf-8"))


@dataclass(frozen=True)
class SizePolicy:
    """Decides whether a serialized message is sent inline, offloaded or rejected.

    Attributes:
        threshold_bytes: Largest body sent inline
        offload_large_only: Offload bodies above the threshold
        offload_all: Offload every body regardless of size
    """

    threshold_bytes: int = DEFAULT_MAX_MESSAGE_SIZE
    offload_large_only: bool = False
    offload_all: bool = False

    @classmethod
    def from_mode(
        cls, mode: OffloadMode, threshold_bytes: int = DEFAULT_MAX_MESSAGE_SIZE
    ) -> "SizePolicy":
        return cls(
            threshold_bytes=threshold_bytes,
            offload_large_only=mode == OffloadMode.LARGE_ONLY,
            offload_all=mode == OffloadMode.ALL,
        )

    @property
    def offload_enabled(self) -> bool:
        return self.offload_all or self.offload_large_only

    def decide(self, size: int) -> SizeDecision:
        """Classify a body of ``size`` bytes.

        Example:
            >>> SizePolicy(threshold_bytes=1024, offload_large_only=True).decide(1025)
            <SizeDecision.OFFLOAD_TO_STORE: 'offload_to_store'>
        """
        if self.offload_all:
            return SizeDecision.OFFLOAD_TO_STORE
        if size > self.threshold_bytes:
            if self.offload_large_only:
                return SizeDecision.OFFLOAD_TO_STORE
            return SizeDecision.REJECT_TOO_LARGE
        return SizeDecision.SEND_INLINE
